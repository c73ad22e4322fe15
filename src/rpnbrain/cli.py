from os import isatty, path
from sys import stdin, stdout, stderr, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL

import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .util import RPNError
from .tokens import ALIASES, format_number, parse_number
from .machine import Machine
from .graph import Grapher
from .lexer import Lexer


class InteractiveInput:
    def __init__(self, prompt, history_file=None, toolbar=None):
        self.prompt = prompt
        self.history_file = history_file
        self.toolbar = toolbar

    def __iter__(self):
        history = None
        if self.history_file:
            history = FileHistory(path.expanduser(self.history_file))
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=history,
                                    # Variable bindings
                                    bottom_toolbar=self.toolbar,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.

    Plays the part of the keypad and display: feeds lexemes to a Machine and
    shows its description and value after every line.
    '''

    DEFAULT_PROMPT = '> '
    HISTORY_FILE = '~/.rpnbrain_history'
    DEFAULT_DOMAIN = (-10.0, 10.0)
    DEFAULT_SAMPLES = 21

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.machine = Machine()
        self.lexer = Lexer()
        # What the display shows: the value after the last line.
        self.value = None
        self.commands = {
            'clear': self.clear,
            'program': self.print_program,
            'graph': self.graph,
            'help': self.print_help,
        }
        self.argument_parser = ArgumentParser(description='RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log every stack change')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        self.argument_parser.add_argument('--domain',
                                          nargs=2,
                                          type=float,
                                          metavar=('START', 'STOP'),
                                          default=self.DEFAULT_DOMAIN,
                                          help='x range for :graph')
        self.argument_parser.add_argument('--samples',
                                          type=int,
                                          default=self.DEFAULT_SAMPLES,
                                          help='number of points for :graph')
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def feed(self, groups):
        '''
        Run one lexeme on the machine.

        :param groups: Matched groups of the lexeme, by name.
        '''
        if 'number' in groups:
            value = parse_number(groups['number'].replace('_', ''))
            if value is None:
                raise RPNError('Cannot convert {}'.format(groups['number']))
            self.value = self.machine.push_operand(value)
        elif 'operator' in groups:
            symbol = groups['operator']
            self.value = self.machine.perform_operation(ALIASES.get(symbol,
                                                                    symbol))
        elif 'name' in groups:
            self.value = self.machine.push_variable(groups['name'])
        elif 'store' in groups:
            self.store(groups['target'])
        elif 'forget' in groups:
            self.machine.clear_variable(groups['target'])
            self.value = self.machine.evaluate()
        elif 'command' in groups:
            self.command(groups['verb'])

    def store(self, name):
        '''
        Bind variable to the value on display, and re-evaluate.
        '''
        if self.value is None:
            raise RPNError('Nothing to store in {}'.format(name))
        self.machine.set_variable(name, self.value)
        self.value = self.machine.evaluate()

    def command(self, verb):
        '''
        Run a :verb command.
        '''
        action = self.commands.get(verb)
        if action is None:
            raise RPNError('No such command {}'.format(verb))
        action()

    def clear(self):
        '''
        Forget the program and all variables.
        '''
        self.machine.clear()
        self.value = None

    def print_program(self):
        '''
        Print the program, one symbol per token.
        '''
        print(*self.machine.program)

    def graph(self):
        '''
        Tabulate the program as a function of M over the domain.
        '''
        self.machine.describe()
        grapher = Grapher(program=self.machine.program,
                          title=self.machine.current_function)
        start, stop = self.args.domain
        print(grapher.title or '')
        for x, y in grapher.sample(start, stop, self.args.samples):
            print(format_number(x),
                  '?' if y is None else format_number(y),
                  sep='\t')

    def print_help(self):
        '''
        Print all possible operators and commands.
        '''
        print('operators:', *sorted(self.machine.known_ops), file=stderr)
        print('aliases:', *sorted('{}={}'.format(alias, symbol)
                                  for alias, symbol in ALIASES.items()),
              file=stderr)
        print('commands:', *sorted(':' + verb for verb in self.commands),
              '>NAME', '!NAME', file=stderr)

    def display(self):
        '''
        Print the description, and the value if there is one.
        '''
        description = self.machine.describe()
        if self.value is None:
            print(description)
        else:
            print(description, '=', format_number(self.value))

    def toolbar(self):
        return ' '.join('{}={}'.format(name, format_number(value))
                        for name, value
                        in sorted(self.machine.variables.items()))

    def dumper(self):
        '''
        Dump all lexemes matches.
        '''
        print('[groups]\t<repr(lexeme)>')
        for line in self.args.expressions:
            try:
                for match in self.lexer.lex(line):
                    matched = match.group(0)  # the lexeme text itself
                    groups = self.lexer.matchedgroups(match)
                    print(*groups.keys(), repr(matched), sep='\t')
            except RPNError as e:
                print(e.args[0], file=stderr)

    def executor(self):
        '''
        Run machine (RPN calculator).
        '''
        for line in self.args.expressions:
            if not line.strip():
                continue
            try:
                for match in self.lexer.lex(line):
                    if self.lexer.isfeedable(match):
                        self.feed(self.lexer.matchedgroups(match))
            # Abort entire rest of line, makes sense anyway
            except RPNError as e:
                print(e.args[0], file=stderr)
            self.display()

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print(self.lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history_file=self.HISTORY_FILE,
                                    toolbar=self.toolbar)
        else:
            return stdin

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            stream=stderr,
                            format='%(name)s: %(levelname)s: %(message)s')
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)


def main():
    CLI().run()
