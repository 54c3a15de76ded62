"""
Translate keyboard keys and button actions into engine commands.
"""
import logging
from typing import Callable, Dict

from .engine import CalculatorEngine
from .operators import Operator

logger = logging.getLogger(__name__)

OPERATOR_KEYS = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "*": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
}

BUTTON_ACTIONS: Dict[str, Callable[[CalculatorEngine], None]] = {
    "clear": CalculatorEngine.reset,
    "delete": CalculatorEngine.delete_last_char,
    "decimal": lambda engine: engine.append_digit("."),
    "percentage": CalculatorEngine.percentage,
    "equals": CalculatorEngine.compute,
}

_KEY_ACTIONS = {
    "Enter": "equals",
    "=": "equals",
    "Backspace": "delete",
    "Escape": "clear",
    "%": "percentage",
    ".": "decimal",
}


def handle_action(engine: CalculatorEngine, action: str) -> None:
    """
    Run a calculator button action.

    Args:
        engine: Engine to drive
        action: One of clear, delete, decimal, percentage, equals

    Raises:
        ValueError: If the action is unknown
    """
    command = BUTTON_ACTIONS.get(action)
    if command is None:
        raise ValueError(f"Unknown action: {action!r}")
    command(engine)


def key_action(key: str) -> str:
    """Name of the button action bound to a key, or an empty string."""
    return _KEY_ACTIONS.get(key, "")


def handle_key(engine: CalculatorEngine, key: str) -> bool:
    """
    Run the command bound to a keyboard key.

    Args:
        engine: Engine to drive
        key: Key name as reported by the browser, e.g. "7", "*", "Enter"

    Returns:
        True if the key was handled, False if it is not bound
    """
    if len(key) == 1 and key.isdigit():
        engine.append_digit(key)
        return True

    if key in OPERATOR_KEYS:
        engine.choose_operator(OPERATOR_KEYS[key])
        return True

    action = key_action(key)
    if action:
        handle_action(engine, action)
        return True

    logger.debug(f"Ignoring unbound key: {key!r}")
    return False
