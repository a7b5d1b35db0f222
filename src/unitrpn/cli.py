import sys
from argparse import ArgumentParser, ArgumentTypeError, REMAINDER, OPTIONAL

from prompt_toolkit import PromptSession

from .util import UnitRPNError, StackUnderflow
from .calculator import Calculator
from .conversions import CONVERSIONS
from .lexer import Lexer


def precision(text):
    '''
    Parse a decimal places count: a non-negative integer.
    '''
    try:
        places = int(text)
    except ValueError:
        raise ArgumentTypeError('invalid precision {!r}'.format(text))
    if places < 0:
        raise ArgumentTypeError('precision must not be negative')
    return places


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the unit-aware RPN calculator.

    Collects every token first, then evaluates them all as one batch.
    '''

    DEFAULT_PROMPT = '> '

    def dumper(self):
        '''
        Dump all lexeme groups, lexeme, and arity.
        '''
        calculator = Calculator(self.conversions)
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<arity>')
        for match in lexer.lex(self._tokens()):
            groups = lexer.matchedgroups(match)
            parsed = calculator.parse(groups)
            print(*[key for key in groups if key != 'lexeme'],
                  repr(groups['lexeme']),
                  calculator._arity(parsed),
                  sep='\t')
        return 0

    def executor(self):
        '''
        Run calculator, then print what's left on the stack.
        '''
        calculator = Calculator(self.conversions,
                                precision=self.args.precision,
                                verbose=self.args.verbose)
        lexer = Lexer()
        for match in lexer.lex(self._tokens()):
            try:
                calculator.feed(lexer.matchedgroups(match))
            except StackUnderflow as e:
                if not self.args.keep_going:
                    raise
                self._report(e)
        calculator.printstack()
        return 0

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print(Lexer.LEXEME)
        return 0

    def units(self):
        '''
        Print known unit suffixes and their factors.
        '''
        for suffix, factor in self.conversions.items():
            print(suffix, factor, sep='\t')
        return 0

    def _tokens(self):
        '''
        Yield tokens from the command line, else from (prompting) stdin.

        With --stdin, stdin first and then the command line.
        '''
        if self.args.stdin or not self.args.tokens:
            for line in self._prompting_input():
                yield from line.split()
        yield from self.args.tokens

    def _prompting_input(self):
        '''
        Return prompting input if either:

        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           self.stdin.isatty() and sys.stdout.isatty():
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return self.stdin

    def _report(self, e):
        print(e.args[0], file=sys.stderr)
        if self.args.verbose and len(e.args) > 1:
            print('Caused by: {!r}'.format(e.args[1]), file=sys.stderr)

    def __init__(self, conversions=CONVERSIONS, stdin=None):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.conversions = conversions
        self.stdin = stdin or sys.stdin
        self.argument_parser = ArgumentParser(
            description='Unit-aware RPN calculator',
            epilog='Put -- before the first token if it looks like an '
                   'option, e.g. -- -1e3 2 +. -p takes an optional '
                   'prompt, so give no tokens with it; they are read '
                   'at the prompt.')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='trace tokens on stderr')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=precision,
                                          default=Calculator.DEFAULT_PRECISION,
                                          help='decimal places on output')
        self.argument_parser.add_argument('--keep-going',
                                          action='store_true',
                                          help='skip operators lacking '
                                               'operands instead of stopping')
        self.argument_parser.add_argument('-p', '--prompt',
                                          nargs=OPTIONAL,
                                          const=self.DEFAULT_PROMPT,
                                          help='read tokens interactively')
        self.argument_parser.add_argument('-s', '--stdin',
                                          action='store_true',
                                          help='read stdin before the '
                                               'command line tokens')
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper),
                                      ('-U', '--units', self.units)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.add_argument('tokens', nargs=REMAINDER)
        self.argument_parser.set_defaults(action=self.executor)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Returns exit status.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.tokens[:1] == ['--']:
            self.args.tokens = self.args.tokens[1:]
        if self.args.prompt is not None and self.args.tokens:
            self.argument_parser.error('argument -p/--prompt: not allowed '
                                       'with tokens')
        try:
            return self.args.action()
        except UnitRPNError as e:
            self._report(e)
            return 1
        except KeyboardInterrupt:
            return 130


def main():
    sys.exit(CLI().run())
