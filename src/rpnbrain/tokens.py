'''
Stack elements of the RPN machine, and the operations it knows about.

Tokens are immutable. Operators carry the function they apply; the machine
never builds an operator itself, it only copies the ones in `VOCABULARY`.
'''

from collections import namedtuple
from enum import Enum
from functools import wraps

import locale
import math
import operator

import regex


# Higher than any binary precedence; atomic tokens never need parentheses.
ATOMIC = 10


class Kind(Enum):
    OPERAND = 'operand'
    UNARY = 'unary'
    BINARY = 'binary'
    CONSTANT = 'constant'
    VARIABLE = 'variable'


ARITIES = {
    Kind.OPERAND: 0,
    Kind.CONSTANT: 0,
    Kind.VARIABLE: 0,
    Kind.UNARY: 1,
    Kind.BINARY: 2,
}


class Token(namedtuple('Token', 'kind symbol value function precedence')):
    '''
    One element of the stack.

    Build them with the module level constructors (`operand`, `unary`,
    `binary`, `constant`, `variable`), not directly.
    '''
    __slots__ = ()

    @property
    def arity(self):
        '''
        Number of arguments the token consumes from below it on the stack.
        '''
        return ARITIES[self.kind]

    def __str__(self):
        return self.symbol


def format_number(value):
    '''
    Render a float as the shortest text that reads back as the same float.

    Integral values lose their trailing ``.0``.
    '''
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text


# What format_number writes for values without digits. Reserved: never
# variable names.
NON_FINITE = {
    'inf': math.inf,
    '-inf': -math.inf,
    'nan': math.nan,
}

DECIMAL = regex.compile(r'''
                        [-+]?
                        (?:
                            \d+\.?\d*
                        |
                            \.\d+
                        )
                        (?:
                            [eE][-+]?\d+
                        )?
                        ''', flags=regex.VERBOSE)


def parse_number(text):
    '''
    Parse a decimal according to the current numeric locale.

    Only plain decimals, and the exact texts in `NON_FINITE`, are numbers.
    No surrounding spaces, underscores, or other spellings of infinity.

    :return: The float, or None if *text* isn't a number.
    '''
    if text in NON_FINITE:
        return NON_FINITE[text]
    text = locale.delocalize(text)
    if DECIMAL.fullmatch(text) is None:
        return None
    return float(text)


def operand(value):
    '''
    Number token; its symbol is the value as `format_number` writes it.
    '''
    value = float(value)
    return Token(Kind.OPERAND, format_number(value), value, None, ATOMIC)


def unary(symbol, function):
    '''
    Function of one argument, written symbol(argument).
    '''
    return Token(Kind.UNARY, symbol, None, function, ATOMIC)


def binary(symbol, precedence, function):
    '''
    Infix operator. *function* takes its operands in push order.
    '''
    return Token(Kind.BINARY, symbol, None, function, precedence)


def constant(symbol, value):
    '''
    Named number, like π.
    '''
    return Token(Kind.CONSTANT, symbol, float(value), None, ATOMIC)


def variable(name):
    '''
    Reference to a variable, looked up on every evaluation.
    '''
    return Token(Kind.VARIABLE, name, None, None, ATOMIC)


def symbol_of(token):
    '''
    Text of the token, both for descriptions and in programs.
    '''
    return token.symbol


def precedence_of(token):
    '''
    Binding strength: the operator's own for binary tokens, else `ATOMIC`.
    '''
    return token.precedence


def _domain(f):
    '''
    NaN instead of ValueError outside of *f*'s domain, as IEEE 754 would.
    '''
    @wraps(f)
    def wrapped(*args):
        try:
            return f(*args)
        except ValueError:
            return math.nan
    return wrapped


def _divide(left, right):
    '''
    True division, with IEEE 754 signed infinities when dividing by zero.
    '''
    try:
        return operator.truediv(left, right)
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


# Functions take their arguments in push order: 6 2 ÷ is _divide(6, 2).
VOCABULARY = (
    binary('×', 2, operator.mul),
    binary('÷', 2, _divide),
    binary('+', 1, operator.add),
    binary('−', 1, operator.sub),
    unary('√', _domain(math.sqrt)),
    unary('sin', _domain(math.sin)),
    unary('cos', _domain(math.cos)),
    constant('π', math.pi),
)

# Easier to type on a plain keyboard. Only the front end uses these; the
# program format always carries the canonical symbols.
ALIASES = {
    '*': '×',
    '/': '÷',
    '-': '−',
    'sqrt': '√',
    'pi': 'π',
}
