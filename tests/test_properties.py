"""
Propiedades del motor comprobadas con hypothesis.
"""

import math

from hypothesis import given, settings, strategies as st

from calculadora.core.actions import Action, ActionKind, dispatch, digit, operator
from calculadora.core.calculator import CalculatorEngine
from calculadora.core.formatting import format_number, parse_display
from helpers import press_keys


integers = st.integers(min_value=-10**6, max_value=10**6)
# Decimales con dos cifras, como texto tecleable ("-12.05")
cents = st.integers(min_value=-10**8, max_value=10**8).map(
    lambda n: f"{'-' if n < 0 else ''}{abs(n) // 100}.{abs(n) % 100:02d}"
)
operands = st.one_of(integers.map(str), cents)

ALL_ACTIONS = (
    [digit(n) for n in range(10)]
    + [operator(op) for op in "+-*/^"]
    + [Action(kind) for kind in ActionKind if kind not in (ActionKind.DIGIT, ActionKind.OPERATOR)]
)


def run(*tokens):
    return press_keys(CalculatorEngine(), *tokens)


class TestArithmeticProperties:

    @given(operands, operands)
    def test_addition_commutes(self, a, b):
        assert run(a, "+", b, "=") == run(b, "+", a, "=")

    @given(operands, operands)
    def test_multiplication_commutes(self, a, b):
        assert run(a, "*", b, "=") == run(b, "*", a, "=")

    @given(integers, integers)
    def test_repeat_equals_adds_right_operand_again(self, a, b):
        assert run(str(a), "+", str(b), "=", "=") == format_number(float(a + 2 * b))

    @given(st.integers(min_value=0, max_value=10**6), st.integers(min_value=0, max_value=10**6))
    def test_percent_with_pending_addition(self, left, right):
        expected = format_number(float(left) * float(right) / 100.0)
        assert run(str(left), "+", str(right), "%") == expected

    @given(integers)
    def test_division_by_zero_always_errors(self, a):
        calc = CalculatorEngine()
        assert press_keys(calc, str(a), "/", "0", "=") == "Error"
        assert not calc.has_pending_operation


class TestMemoryProperties:

    @given(st.lists(st.tuples(st.booleans(), st.integers(min_value=-10**9, max_value=10**9)),
                    min_size=1, max_size=20))
    def test_memory_round_trip(self, entries):
        calc = CalculatorEngine()
        for is_addition, value in entries:
            press_keys(calc, str(value), "M+" if is_addition else "M-")
        total = sum(value if is_addition else -value for is_addition, value in entries)
        assert press_keys(calc, "MR") == format_number(float(total))
        assert len(calc.memory_history) == len(entries)


class TestStateInvariants:

    @settings(max_examples=200)
    @given(st.lists(st.sampled_from(ALL_ACTIONS), max_size=80))
    def test_display_bounded_and_pending_paired(self, actions):
        calc = CalculatorEngine()
        for action in actions:
            dispatch(calc, action)
            display = calc.get_display()
            assert display
            assert len(display) <= 64
            assert (calc.pending_operator is None) == (calc.pending_left_operand is None)
            assert math.isfinite(calc.memory_value)

    @given(st.lists(st.sampled_from(ALL_ACTIONS), max_size=40))
    def test_clear_is_idempotent_and_keeps_memory(self, actions):
        calc = CalculatorEngine()
        for action in actions:
            dispatch(calc, action)
        memory = calc.memory_value
        for _ in range(2):
            calc.clear_all()
            assert calc.get_display() == "0"
            assert not calc.has_pending_operation
            assert calc.memory_value == memory


class TestFormatProperties:

    @given(st.floats(min_value=-1e12, max_value=1e12, allow_nan=False, allow_infinity=False)
           .filter(lambda x: x == 0 or abs(x) > 1e-6))
    def test_parse_format_round_trip(self, x):
        text = format_number(x)
        assert len(text) <= 64
        assert math.isclose(parse_display(text), x, rel_tol=1e-9, abs_tol=1e-300)

    @given(st.floats(allow_nan=False, allow_infinity=False))
    def test_any_finite_value_formats_within_limit(self, x):
        text = format_number(x)
        assert text != "Error"
        assert len(text) <= 64
