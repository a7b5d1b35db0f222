from pytest import Item, fixture

from unitrpn.calculator import Calculator
from unitrpn.conversions import CONVERSIONS
from unitrpn.lexer import Lexer


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Use with pytest -rP -o enable_assertion_pass_hook=true.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def calculator():
    return Calculator(CONVERSIONS)


@fixture
def run(calculator):
    '''
    Lex and feed whitespace separated tokens, returning the calculator.
    '''
    lexer = Lexer()

    def run(line):
        for match in lexer.lex(line.split()):
            calculator.feed(lexer.matchedgroups(match))
        return calculator
    return run
