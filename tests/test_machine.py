'''
Stack machine tests: evaluation and description
'''

import math

from pytest import approx


def test_empty(machine):
    assert machine.evaluate() is None
    assert machine.describe() == ''
    assert machine.current_function is None
    assert len(machine) == 0


def test_operand_order(run, machine):
    assert run(5, 3, '−') == 2
    machine.clear()
    assert run(6, 2, '÷') == 3


def test_unary(run):
    assert run(9, '√') == 3


def test_constant(run):
    assert run('π') == math.pi
    assert run(2, '×') == approx(2 * math.pi)


def test_every_push_evaluates(machine):
    assert machine.push_operand(4) == 4
    assert machine.push_operand(5) == 5
    assert machine.perform_operation('+') == 9
    assert machine.perform_operation('cos') == approx(math.cos(9))


def test_missing_operand(run, machine):
    assert run(3, '+') is None
    assert machine.describe() == '(?)+3'


def test_missing_argument(run, machine):
    assert run('√') is None
    assert machine.describe() == '√(?)'


def test_unknown_operation(run, machine):
    run(2, 3)
    assert machine.perform_operation('^') is None
    assert len(machine) == 2
    assert machine.serialize() == ['2', '3']


def test_late_binding(run, machine):
    assert run('M') is None
    machine.set_variable('M', 5.0)
    assert machine.evaluate() == 5.0
    machine.set_variable('M', 7)
    assert machine.evaluate() == 7.0


def test_unbound_variable_anywhere(run, machine):
    assert run(2, 'x', '×', 1, '+') is None
    machine.set_variable('x', 4)
    assert machine.evaluate() == 9


def test_clear_variable(run, machine):
    machine.set_variable('M', 3)
    assert run('M') == 3
    machine.clear_variable('M')
    assert machine.evaluate() is None
    # Idempotent
    machine.clear_variable('M')
    machine.clear_variable('nonesuch')
    assert machine.evaluate() is None


def test_clear(run, machine):
    machine.set_variable('M', 3)
    run('M', 2, '+')
    machine.clear()
    assert machine.evaluate() is None
    assert len(machine) == 0
    assert machine.push_variable('M') is None


def test_evaluate_leaves_stack_alone(run, machine):
    run(1, 2, '+', 3)
    before = machine.serialize()
    machine.evaluate()
    machine.describe()
    assert machine.serialize() == before


def test_parentheses(run, machine):
    run(2, 3, '+', 4, '×')
    assert machine.describe() == '(2+3)×4'
    assert machine.evaluate() == 20


def test_no_needless_parentheses(run, machine):
    run(2, 3, '×', 4, '+')
    assert machine.describe() == '2×3+4'
    assert machine.evaluate() == 10


def test_right_operand_parentheses(run, machine):
    run(4, 2, 3, '+', '×')
    assert machine.describe() == '4×(2+3)'


def test_function_call(run, machine):
    run(2, 3, '+', '√')
    assert machine.describe() == '√(2+3)'
    machine.clear()
    run('π', 'M', '×', 'sin')
    assert machine.describe() == 'sin(π×M)'


def test_fractions(run, machine):
    run(1.5, 0.25, '÷')
    assert machine.describe() == '1.5÷0.25'
    assert machine.evaluate() == 6


def test_several_expressions(run, machine):
    run(3, 4, '+', 5)
    assert machine.describe() == '3+4, 5'
    assert machine.current_function == '5'
    assert machine.evaluate() == 5


def test_current_function(run, machine):
    run(1, 'M', 'M', '×', 'cos')
    assert machine.describe() == '1, cos(M×M)'
    assert machine.current_function == 'cos(M×M)'
    assert str(machine) == '1, cos(M×M)'


def test_long_program(machine):
    machine.push_operand(1)
    for _ in range(5000):
        machine.push_operand(1)
        machine.perform_operation('+')
    assert machine.evaluate() == 5001
    assert machine.describe() == '+'.join(['1'] * 5001)


def test_deep_right_nesting(machine):
    for _ in range(3000):
        machine.push_operand(2)
    for _ in range(2999):
        machine.perform_operation('×')
    assert machine.evaluate() == math.inf
    assert machine.describe().startswith('2×2×')


def test_infinite_results(run, machine):
    assert run(1, 0, '÷') == math.inf
    machine.clear()
    assert math.isnan(run(0, 1, '−', '√'))


def test_current_function_after_clear(run, machine):
    run(2, 'M', '×')
    machine.describe()
    assert machine.current_function == '2×M'
    machine.clear()
    assert machine.describe() == ''
    assert machine.current_function is None
