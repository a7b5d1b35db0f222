'''
Unit-aware RPN calculator.

Numbers may carry a length unit suffix (5km, 3ft, 2in, ...). Operators track a
numerator label, a denominator label, and a factor to the base unit, the
metre, alongside the value:

    $ unitrpn 2 3 + 4 .
    $ unitrpn 1km 3ft /

Labels are merely concatenated; there's no unit algebra, so don't expect km
and 1/km to cancel out.
'''

from .cli import CLI
from .lexer import Lexer
from .calculator import Calculator
from .conversions import CONVERSIONS
from .unit import Unit
from .util import UnitRPNError, UnknownToken, StackUnderflow


__all__ = ('Calculator', 'Lexer', 'CLI', 'Unit', 'CONVERSIONS',
           'UnitRPNError', 'UnknownToken', 'StackUnderflow')
