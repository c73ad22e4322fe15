import logging

from .tokens import (Kind, VOCABULARY, operand, variable, parse_number,
                     symbol_of, precedence_of)


logger = logging.getLogger(__name__)


class Machine:
    '''
    Arithmetic stack machine (RPN calculator brain).

    Holds a program of tokens in postfix order and a table of variable
    bindings. The program is evaluated and described from its end: the last
    token pushed is the root of the expression on top of the stack.

    Nothing here raises on bad input. Anything that can't be computed comes
    back as None, and anything that can't be described shows up as ``?``.
    '''

    # Text for a missing operand in a description.
    PLACEHOLDER = '?'

    def __init__(self):
        '''
        Create an empty machine that knows the standard vocabulary.
        '''
        self.stack = []
        self.variables = dict()
        self.known_ops = dict()
        for op in VOCABULARY:
            self.known_ops[symbol_of(op)] = op
        # Top expression of the last description, for whoever shows it.
        self.current_function = None

    def __len__(self):
        return len(self.stack)

    def __str__(self):
        return self.describe()

    def _push(self, token):
        self.stack.append(token)
        logger.debug('stack: %s', self.serialize())
        return self.evaluate()

    def push_operand(self, value):
        '''
        Push a number and evaluate.

        :return: The value of the program, or None if undefined.
        '''
        return self._push(operand(value))

    def push_variable(self, name):
        '''
        Push a reference to a variable and evaluate.

        The variable is looked up whenever the program is evaluated, not now.
        '''
        return self._push(variable(name))

    def perform_operation(self, symbol):
        '''
        Push a known operator or constant and evaluate.

        Unknown symbols return None and leave the stack alone.
        '''
        op = self.known_ops.get(symbol)
        if op is None:
            logger.debug('unknown operation %r', symbol)
            return None
        return self._push(op)

    def set_variable(self, name, value):
        '''
        Bind a variable, for this and every later evaluation.
        '''
        self.variables[name] = float(value)

    def clear_variable(self, name):
        '''
        Unbind a variable. Unbound ones are left alone.
        '''
        self.variables.pop(name, None)

    def clear(self):
        '''
        Forget the whole program and every variable binding.
        '''
        self.stack.clear()
        self.variables.clear()

    def _fold(self, end, leaf, apply, missing):
        '''
        Reduce the expression whose root sits just below index *end*.

        Walks down the stack with an explicit list of pending operators
        rather than recursing, so long programs don't exhaust Python's stack.

        :param leaf: Value of a token without arguments.
        :param apply: Value of an operator, given its token and argument
                      values in push order.
        :param missing: Value for an argument below the bottom of the stack.
        :return: The value (None if any part of it was None) and the index
                 where the expression starts.
        '''
        pending = []
        while True:
            if end:
                end -= 1
                token = self.stack[end]
                if token.arity:
                    pending.append((token, []))
                    continue
                value = leaf(token)
            else:
                value = missing
            if value is None:
                return None, end
            # The argument nearest the operator is found first.
            while pending:
                token, args = pending[-1]
                args.append(value)
                if len(args) < token.arity:
                    break
                pending.pop()
                value = apply(token, args[::-1])
            else:
                return value, end

    def _lookup(self, token):
        if token.kind is Kind.VARIABLE:
            return self.variables.get(token.symbol)
        return token.value

    def evaluate(self):
        '''
        Compute the expression on top of the stack.

        :return: A float, or None when the stack is empty, an operator is
                 short of arguments, or a variable is unbound.
        '''
        result, _ = self._fold(len(self.stack),
                               self._lookup,
                               lambda token, args: token.function(*args),
                               None)
        return result

    def _render(self, end):
        '''
        Describe the expression just below *end* in infix notation.

        :return: (text, precedence), and the index where it starts.
        '''
        return self._fold(end,
                          lambda token: (symbol_of(token),
                                         precedence_of(token)),
                          self._infix,
                          (self.PLACEHOLDER, 0))

    def _infix(self, token, args):
        precedence = precedence_of(token)
        if token.kind is Kind.UNARY:
            (text, _), = args
            return '{}({})'.format(token.symbol, text), precedence
        texts = ['({})'.format(text) if precedence > inner else text
                 for text, inner in args]
        return token.symbol.join(texts), precedence

    def describe(self):
        '''
        Describe every expression on the stack, separated by commas.

        Also remembers the expression on top of the stack (the one
        `evaluate` computes) as `current_function`.
        That is None after describing an empty stack.
        '''
        description = ''
        self.current_function = None
        end = len(self.stack)
        while end:
            (text, _), end = self._render(end)
            if self.current_function is None:
                self.current_function = text
            description = '{}, {}'.format(text, description) \
                if description else text
        return description

    def serialize(self):
        '''
        Return the program as a list of symbols, bottom of the stack first.
        '''
        return [symbol_of(token) for token in self.stack]

    def deserialize(self, symbols):
        '''
        Replace the program with one read from a list of symbols.

        Known operators first, then numbers; anything else is a variable.
        Variable bindings are left as they are.
        A program with anything but strings in it is ignored.
        '''
        symbols = list(symbols)
        if not all(isinstance(symbol, str) for symbol in symbols):
            logger.warning('ignoring program %r: not all strings', symbols)
            return
        stack = []
        for symbol in symbols:
            op = self.known_ops.get(symbol)
            if op is None:
                value = parse_number(symbol)
                op = variable(symbol) if value is None else operand(value)
            stack.append(op)
        self.stack = stack

    program = property(serialize, deserialize)
