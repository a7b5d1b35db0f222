import sys
from types import MappingProxyType
from functools import wraps
from operator import attrgetter
from collections import deque
import math

from .unit import Unit
from .util import UnknownToken, StackUnderflow, wrap_user_errors, fdiv


class Calculator:
    '''
    Unit-aware stack machine (RPN calculator).

    Takes lexeme groups and runs them: literals are pushed, operators pop
    their operands and push one result.
    '''

    DEFAULT_PRECISION = 4

    def _operands(n):
        '''
        Pop n operands, topmost first, and pass them after self.

        Leaves the stack as is when there aren't enough.
        '''
        def decorator(f):
            @wraps(f)
            def wrapped(self):
                return f(self, *self._popstack(n))
            wrapped.arity = n
            return wrapped
        return decorator

    def __init__(self, conversions, precision=None, verbose=None):
        '''
        Create empty stack machine.

        :param conversions: Unit suffix to base unit factor. Copied, and
                            read-only from then on.
        :param precision: Decimal places on output.
        :param verbose: Trace fed lexemes and stack depth on stderr.
        '''
        self.stack = deque()
        self.conversions = MappingProxyType(dict(conversions))
        if precision is None:
            precision = type(self).DEFAULT_PRECISION
        self.precision = precision
        self.verbose = verbose

    def feed(self, groups, file=None):
        '''
        Stack or run lexeme on machine.

        :param groups: Matched lexeme groups, as from Lexer.matchedgroups.
        '''
        parsed = self.parse(groups)
        if isinstance(parsed, Unit):
            self._pshstack(parsed)
        else:
            parsed(self)
        if self.verbose:
            print('{!r}\t{}'.format(groups['lexeme'], len(self.stack)),
                  file=file or sys.stderr)

    def parse(self, groups):
        '''
        Parse lexeme groups into a Unit literal or an operator.
        '''
        if 'number' in groups:
            return Unit(self._iconvert(groups['number']), '', '', 1.0)
        elif 'operator' in groups:
            return type(self).OPERATORS[groups['operator']]
        elif 'unit' in groups:
            factor = self.conversions.get(groups['suffix'])
            if factor is not None:
                return Unit(1.0, groups['quantity'], groups['suffix'], factor)
        raise UnknownToken('Unknown operator {}'.format(groups['lexeme']))

    def _arity(self, parsed):
        '''
        Return number of operands popped, if an operator.
        '''
        return getattr(parsed, 'arity', None)

    @wrap_user_errors('Cannot convert {1}')
    def _iconvert(self, number):
        '''
        Convert number lexeme to a float.
        '''
        return float(number)

    def push(self, value, numerator, denominator, factor):
        self._pshstack(Unit(value, numerator, denominator, factor))

    def pop(self):
        '''
        Pop element at top of stack, or None if empty.
        '''
        if self.stack:
            return self.stack.pop()
        return None

    def _pshstack(self, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        self.stack.extend(new)

    def _popstack(self, n=1):
        '''
        Pop specified number of args from stack, topmost first.

        Pops nothing if not enough args.
        '''
        if len(self.stack) < n:
            raise StackUnderflow('Less than {} element(s) on stack'.format(n))
        return [self.stack.pop() for _ in range(n)]

    @_operands(2)
    def add(self, a, b):
        value, numerator, denominator = b.convert(a)
        self.push(value, numerator, denominator, a.factor)

    # Shares add's rescale; the scaled value isn't negated.
    @_operands(2)
    def sub(self, a, b):
        value, numerator, denominator = b.convert(a)
        self.push(value, numerator, denominator, a.factor)

    @_operands(2)
    def mul(self, a, b):
        self.push(a.value * b.value,
                  a.numerator + b.numerator,
                  a.denominator + b.denominator,
                  a.factor * b.factor)

    @_operands(2)
    def div(self, a, b):
        '''
        Divide second from top by top. Zero divisors give inf or nan.
        '''
        self.push(fdiv(b.value, a.value),
                  a.denominator + b.numerator,
                  a.numerator + b.denominator,
                  fdiv(b.factor, a.factor))

    @_operands(1)
    def chs(self, a):
        '''
        Change sign of element at top of stack, keeping its unit.
        '''
        self.push(-a.value, a.numerator, a.denominator, a.factor)

    @_operands(1)
    def reciprocal(self, a):
        '''
        Replace top of stack with 1/top: same as 1 top /, labels swapped.
        '''
        self.push(fdiv(1.0, a.value),
                  a.denominator,
                  a.numerator,
                  fdiv(1.0, a.factor))

    @_operands(2)
    def revstack(self, a, b):
        '''
        Swap two elements at top of stack.
        '''
        self._pshstack(a, b)

    @_operands(1)
    def dupstack(self, a):
        '''
        Duplicate element at top of stack.
        '''
        self._pshstack(a, a)

    @_operands(1)
    def popstack(self, a):
        '''
        Drop element at top of stack.
        '''

    def clrstack(self):
        '''
        Clear everything from the stack.
        '''
        self.stack.clear()

    clrstack.arity = '*'

    def _stackop(f, replace=False, least=1):
        '''
        Run f over the whole stack, bottom first.

        The result goes on top of the stack, or in its place if replace.
        Underflows with less than least elements.
        '''
        def wrapped(self):
            units = self._popstack(max(len(self.stack), least))[::-1]
            if not replace:
                self._pshstack(*units)
            self._pshstack(f(self, units))
        wrapped.__name__ = f.__name__.lstrip('_')
        wrapped.__doc__ = f.__doc__
        wrapped.arity = '*'
        return wrapped

    def _mean(self, units):
        '''
        Mean of all values, unitless.
        '''
        return Unit(math.fsum(unit.value for unit in units) / len(units),
                    '', '', 1.0)

    def _minimum(self, units):
        '''
        Element with the least value, unit and all. Bottommost wins ties.
        '''
        return min(units, key=attrgetter('value'))

    def _maximum(self, units):
        '''
        Element with the greatest value, unit and all. Bottommost wins ties.
        '''
        return max(units, key=attrgetter('value'))

    def _size(self, units):
        '''
        Number of elements, unitless.
        '''
        return Unit(float(len(units)), '', '', 1.0)

    # An empty stack underflows rather than averaging to nan.
    mean = _stackop(_mean, replace=True)
    minimum = _stackop(_minimum)
    maximum = _stackop(_maximum)
    size = _stackop(_size, least=0)

    def _reduction(operator):
        '''
        Fold binary operator over the whole stack, bottom first.

        1 2 3 @/ is 1 2 / 3 /.
        '''
        def reduced(self):
            units = self._popstack(max(len(self.stack), 1))[::-1]
            self._pshstack(units[0])
            for unit in units[1:]:
                self._pshstack(unit)
                operator(self)
        reduced.__name__ = 'reduce_' + operator.__name__
        reduced.arity = '*'
        return reduced

    def printstack(self, file=None):
        '''
        Print all elements on the stack, bottom of the stack first.
        '''
        for unit in self.stack:
            print(unit.format(self.precision), file=file)

    # Language mapping to stack operations.
    OPERATORS = {
        '+': add,
        '-': sub,
        '*': mul,
        '.': mul,
        '/': div,
        'chs': chs,
        'r': reciprocal,
        'x': revstack,
        'd': dupstack,
        'dup': dupstack,
        'p': popstack,
        'pop': popstack,
        'clear': clrstack,
        'mean': mean,
        'min': minimum,
        'max': maximum,
        'size': size,
    }
    # ! replaces the stack rather than pushing on it. mean always does.
    OPERATORS.update({
        'mean!': mean,
        'min!': _stackop(_minimum, replace=True),
        'max!': _stackop(_maximum, replace=True),
        'size!': _stackop(_size, replace=True, least=0),
    })
    # @ reduces the whole stack with a binary operator.
    for _token, _operator in list(OPERATORS.items()):
        if _operator.arity == 2 and _operator is not revstack:
            OPERATORS['@' + _token] = _reduction(_operator)

    del _operands, _stackop, _reduction, _token, _operator


__all__ = 'Calculator',
