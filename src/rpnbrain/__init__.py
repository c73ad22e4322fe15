'''
RPN calculator brain.

Keeps a program of numbers, variables and operators in postfix order,
evaluates it, describes it in ordinary infix notation with only the
parentheses it needs, and hands it over as a list of symbols, so that another
machine can replay it, e.g. to plot it as a function of M.

Knows × ÷ + − between two operands, √ sin cos of one, and the constant π.
Anything that can't be computed is None rather than an error.
'''

from .cli import CLI
from .graph import Grapher
from .lexer import Lexer
from .machine import Machine


__all__ = 'Machine', 'Grapher', 'Lexer', 'CLI'
