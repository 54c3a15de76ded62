"""
Tests for keyboard and button dispatch.
"""
import pytest
from calculator.keyboard import handle_action, handle_key, key_action
from calculator.operators import Operator


class TestHandleKey:
    """Tests for handle_key."""

    def test_digits_and_decimal(self, engine):
        for key in "3.5":
            assert handle_key(engine, key) is True

        assert engine.current_operand == "3.5"

    @pytest.mark.parametrize("key, operator", [
        ("+", Operator.ADD),
        ("-", Operator.SUBTRACT),
        ("*", Operator.MULTIPLY),
        ("/", Operator.DIVIDE),
    ])
    def test_operator_keys(self, engine, key, operator):
        handle_key(engine, "6")
        handle_key(engine, key)

        assert engine.pending_operator is operator

    @pytest.mark.parametrize("equals_key", ["Enter", "="])
    def test_equals_keys(self, engine, equals_key):
        for key in ["6", "*", "7", equals_key]:
            handle_key(engine, key)

        assert engine.current_operand == "42"

    def test_backspace(self, engine):
        for key in ["4", "2", "Backspace"]:
            handle_key(engine, key)

        assert engine.current_operand == "4"

    def test_escape_clears(self, engine):
        for key in ["4", "+", "2", "Escape"]:
            handle_key(engine, key)

        assert engine.current_operand == "0"
        assert engine.pending_operator is None

    def test_percent(self, engine):
        for key in ["5", "%"]:
            handle_key(engine, key)

        assert engine.current_operand == "0.05"

    def test_unbound_key_ignored(self, engine):
        assert handle_key(engine, "a") is False
        assert handle_key(engine, "Shift") is False
        assert engine.current_operand == "0"


class TestHandleAction:
    """Tests for handle_action."""

    def test_actions(self, engine):
        handle_action(engine, "decimal")
        handle_key(engine, "5")
        handle_action(engine, "percentage")

        assert engine.current_operand == "0.005"

        handle_action(engine, "clear")
        assert engine.current_operand == "0"

    def test_unknown_action(self, engine):
        with pytest.raises(ValueError):
            handle_action(engine, "sqrt")

    def test_key_action_lookup(self):
        assert key_action("Escape") == "clear"
        assert key_action("Enter") == "equals"
        assert key_action("q") == ""
