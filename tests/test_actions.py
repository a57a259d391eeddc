import threading

import pytest

from calculadora.core.actions import Action, ActionKind, ActionQueue, digit, dispatch, operator


class TestAction:

    def test_equality_and_hash(self):
        assert digit(5) == Action(ActionKind.DIGIT, "5")
        assert len({operator("+"), operator("+"), operator("-")}) == 2
        assert Action(ActionKind.EQUALS) != Action(ActionKind.CLEAR)

    def test_repr(self):
        assert repr(digit(3)) == "Action(DIGIT, '3')"
        assert repr(Action(ActionKind.EQUALS)) == "Action(EQUALS)"


class TestDispatch:

    def test_every_kind_has_a_handler(self, calc):
        for kind in ActionKind:
            argument = "1" if kind == ActionKind.DIGIT else "+" if kind == ActionKind.OPERATOR else None
            dispatch(calc, Action(kind, argument))

    def test_sequence(self, calc):
        for action in (digit(7), operator("*"), digit(6), Action(ActionKind.EQUALS)):
            dispatch(calc, action)
        assert calc.get_display() == "42"

    def test_returns_engine_result(self, calc):
        assert dispatch(calc, digit(1)) is True
        assert dispatch(calc, Action(ActionKind.EQUALS)) == (False, "1")

    @pytest.mark.parametrize("kind, value, expected", [
        (ActionKind.SIN, "90", "1"),
        (ActionKind.COS, "0", "1"),
        (ActionKind.TAN, "0", "0"),
        (ActionKind.SQRT, "81", "9"),
        (ActionKind.FACTORIAL, "4", "24"),
        (ActionKind.PERCENT, "25", "0.25"),
    ])
    def test_function_kinds(self, calc, kind, value, expected):
        for d in value:
            dispatch(calc, digit(d))
        dispatch(calc, Action(kind))
        assert calc.get_display() == expected

    def test_memory_kinds(self, calc):
        dispatch(calc, digit(8))
        dispatch(calc, Action(ActionKind.MEMORY_ADD))
        dispatch(calc, digit(3))
        dispatch(calc, Action(ActionKind.MEMORY_SUBTRACT))
        dispatch(calc, Action(ActionKind.MEMORY_RECALL))
        assert calc.get_display() == "5"
        dispatch(calc, Action(ActionKind.MEMORY_CLEAR))
        assert calc.memory_value == 0.0


class TestActionQueue:

    def test_drain_applies_in_order(self, calc):
        queue = ActionQueue()
        for action in (digit(9), operator("-"), digit(4), Action(ActionKind.EQUALS)):
            queue.put(action)
        applied = []
        assert queue.drain(calc, lambda action, result: applied.append(action)) == 4
        assert calc.get_display() == "5"
        assert applied[0] == digit(9)
        assert len(queue) == 0

    def test_drain_empty(self, calc):
        assert ActionQueue().drain(calc) == 0

    def test_long_burst_keeps_every_action(self, calc):
        queue = ActionQueue()
        for n in range(70):
            queue.put(digit(n % 10))
        assert queue.drain(calc) == 70
        assert calc.get_display().startswith("1234567890")
        assert len(calc.get_display()) == 64

    def test_full_queue_rejects_new_actions(self, calc):
        queue = ActionQueue(maxlen=2)
        assert queue.put(digit(1))
        assert queue.put(digit(2))
        assert not queue.put(digit(3))
        assert len(queue) == 2
        queue.drain(calc)
        assert calc.get_display() == "12"

    def test_clear_entry_kind(self, calc):
        for action in (digit(5), operator("+"), digit(3), Action(ActionKind.CLEAR_ENTRY)):
            dispatch(calc, action)
        assert calc.get_display() == "0"
        assert calc.has_pending_operation

    def test_concurrent_producers(self, calc):
        queue = ActionQueue(maxlen=1000)

        def produce():
            for _ in range(100):
                queue.put(Action(ActionKind.MEMORY_ADD))

        calc.add_digit("1")
        threads = [threading.Thread(target=produce) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert queue.drain(calc) == 400
        assert calc.memory_value == 400.0
