from functools import reduce
import operator

import regex

from .util import UnknownToken
from .calculator import Calculator


class Lexer:
    '''
    Lexer for whole command line tokens.

    Each token is exactly one lexeme: a number, an operator, or a quantity
    with a two character unit suffix. Whether the suffix is a known unit is
    up to the calculator, not the grammar.

    For consistency, needs to be instantiated, despite holding no internal
    state.
    '''
    # Digits, with optional underscore thousands (or whatever) separators
    DIGITS = r'\d+(?:_\d+)*'
    # Number, of any kind float() takes.
    # String formatting and regex is a tricky business, because of the braces.
    # Be careful!
    NUMBER = r'''
              [+-]?
              (?:
                  (?:
                      # 1, 1_200, 1. (notice trailing dot), 1.3
                      {DIGITS}
                      (?:
                          \.
                          (?:{DIGITS})?
                      )?
                      |
                      # .2
                      \.
                      {DIGITS}
                  )
                  (?:
                      [eE]
                      [+-]?
                      {DIGITS}
                  )?
                  |
                  (?i:inf(?:inity)?|nan)
              )
              '''.format(DIGITS=DIGITS)
    # Longest first, so mean isn't cut short should anything prefix it.
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      sorted(Calculator.OPERATORS,
                                             key=len,
                                             reverse=True))) + r')'
    # 5km: quantity 5, suffix km. Always the last two characters.
    UNIT = r'''
            (?<quantity>
                .*
            )
            (?<suffix>
                .{2}
            )
            '''

    # All possible lexemes, tried in order.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<unit>' + UNIT + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, tokens):
        '''
        Take tokens and yield one lexeme match per token.

        Stops on first bad token.
        '''
        for token in tokens:
            match = regex.fullmatch(type(self).LEXEME, token,
                                    flags=type(self).FLAGS)
            if match is None:
                raise UnknownToken('Unknown operator {}'.format(token))
            yield match

    def matchedgroups(self, match):
        '''
        Return matched groups, plus the whole lexeme.
        '''
        groups = {key: value
                  for key, value
                  in match.groupdict().items()
                  if value is not None}
        groups['lexeme'] = match.group(0)
        return groups
