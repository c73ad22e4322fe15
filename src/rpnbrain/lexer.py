from functools import reduce
import operator

import regex

from .util import RPNError
from .tokens import VOCABULARY, ALIASES, NON_FINITE, symbol_of


class Lexer:
    '''
    Lexer for the calculator's *regular* input grammar.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Digits, optionally grouped with underscores: 1, 1200, 1_200.
    DIGITS = r'''
              \d+
              (?:
                  _\d+
              )*
              '''
    # Number, of any kind supported by grammar. No sign: that's − on a
    # stack machine.
    # String formatting and regex is a tricky business, because of the braces.
    # It works here. Be careful in general!
    NUMBER = r'''
              (?:
                  # 1, 1_200, 1_200. (notice trailing dot), 1.3
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
              # 1e3, 2.5E-4
              (?:
                  [eE]
                  [-+]?
                  \d+
              )?
              '''.format(DIGITS=DIGITS)
    # Identifiers, except the ones a program would read back as numbers.
    NAME = r'(?!(?:' + r'|'.join(sorted(name for name in NON_FINITE
                                         if name.isalpha())) + r')(?!\w))' \
           r'[^\W\d]\w*'

    # Canonical symbols, then the ASCII spellings. Longest first, and word
    # symbols must end on a word boundary, so sinh would be a name, not sin.
    SYMBOLS = sorted([symbol_of(op) for op in VOCABULARY] + list(ALIASES),
                     key=len, reverse=True)
    OPERATOR = r'(?:' + r'|'.join(regex.escape(symbol) +
                                  (r'(?!\w)' if symbol[-1].isalnum() else '')
                                  for symbol in SYMBOLS) + r')'
    # :clear, :graph, etc.
    COMMAND = r':(?<verb>\w+)'
    # >M or →M binds M to the current value; !M unbinds it.
    STORE = r'[>→](?<target>' + NAME + r')'
    FORGET = r'!(?<target>' + NAME + r')'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<command>' + COMMAND + r')|' \
             r'(?<store>' + STORE + r')|' \
             r'(?<forget>' + FORGET + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<name>' + NAME + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Raises RPNError on the first bad lexeme, after yielding the good ones
        before it.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise RPNError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme means anything to the machine.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the groups the lexeme matched, by name.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}
