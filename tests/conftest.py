from pytest import fixture

from rpnbrain.machine import Machine


@fixture
def machine():
    return Machine()


@fixture
def run(machine):
    '''
    Feed numbers, operators and variable names to the machine, in order.

    Returns the value after the last one, as the display would show it.
    '''
    def feed(*items):
        value = None
        for item in items:
            if isinstance(item, (int, float)):
                value = machine.push_operand(item)
            elif item in machine.known_ops:
                value = machine.perform_operation(item)
            else:
                value = machine.push_variable(item)
        return value
    return feed
