import logging
import math

from .machine import Machine


logger = logging.getLogger(__name__)


class Grapher:
    '''
    Sample a program as a function of one variable.

    Owns its own machine. The program comes in serialized, e.g. from another
    machine's `program`, so the two never share state.
    '''

    # The variable standing for x.
    VARIABLE = 'M'

    def __init__(self, program=(), title=None, variable=None):
        '''
        :param program: Serialized program to plot.
        :param title: Usually the source machine's `current_function`.
        :param variable: Name bound to each x; defaults to `VARIABLE`.
        '''
        self.machine = Machine()
        self.machine.program = program
        self.title = title
        self.variable = variable or type(self).VARIABLE

    @property
    def program(self):
        return self.machine.program

    @program.setter
    def program(self, symbols):
        self.machine.program = symbols

    def y_for_x(self, x):
        '''
        Evaluate the program with the variable bound to *x*.

        :return: y, or None where the function is undefined or not finite.
        '''
        self.machine.set_variable(self.variable, x)
        y = self.machine.evaluate()
        if y is None or not math.isfinite(y):
            return None
        return y

    def sample(self, start, stop, count):
        '''
        Evaluate at *count* evenly spaced points from *start* to *stop*.

        :return: List of (x, y) pairs; y is None where undefined.
        '''
        if count < 1:
            return []
        if count == 1:
            xs = [float(start)]
        else:
            step = (stop - start) / (count - 1)
            xs = [start + i * step for i in range(count - 1)] + [float(stop)]
        points = [(x, self.y_for_x(x)) for x in xs]
        logger.debug('sampled %d points of %s', len(points), self.title)
        return points
