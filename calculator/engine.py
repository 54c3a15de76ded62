"""
Calculator state machine.

Operators apply immediately against the pending operand, left to right and
without precedence: 2 + 3 × 4 evaluates as (2 + 3) × 4.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from .config import DIVIDE_BY_ZERO_MESSAGE
from .formatting import format_number, number_to_string, parse_operand
from .history import CalculationHistory
from .operators import Operator

logger = logging.getLogger(__name__)

DIGIT_TOKENS = frozenset("0123456789.")


class CalculatorError(Exception):
    """Base class for errors the engine reports to its listeners."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DivisionByZeroError(CalculatorError):
    """Reported when the pending operation divides by zero."""

    def __init__(self, message: str = DIVIDE_BY_ZERO_MESSAGE):
        super().__init__(message)


ErrorListener = Callable[[CalculatorError], None]


class CalculatorEngine:
    """Holds operand and operator state and executes calculations."""

    def __init__(self, history: Optional[CalculationHistory] = None):
        """
        Initialize the engine.

        Args:
            history: History that successful computations are recorded in
        """
        self.history = history if history is not None else CalculationHistory()
        self._error_listeners: List[ErrorListener] = []
        self.current_operand = "0"
        self.previous_operand = ""
        self.pending_operator: Optional[Operator] = None
        self.should_reset_on_next_input = False

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Register a callback for errors such as division by zero."""
        self._error_listeners.append(listener)

    def remove_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.remove(listener)

    def reset(self) -> None:
        """Clear all values."""
        self.current_operand = "0"
        self.previous_operand = ""
        self.pending_operator = None
        self.should_reset_on_next_input = False

    def append_digit(self, token: str) -> None:
        """
        Append a digit or decimal point to the current operand.

        Args:
            token: One of "0"-"9" or "."

        Raises:
            ValueError: If the token is not a digit or decimal point
        """
        if len(token) != 1 or token not in DIGIT_TOKENS:
            raise ValueError(f"Invalid digit token: {token!r}")

        # A computed result is replaced, not extended
        if self.should_reset_on_next_input:
            self.current_operand = ""
            self.should_reset_on_next_input = False

        if token == "." and "." in self.current_operand:
            return

        if self.current_operand == "0" and token != ".":
            self.current_operand = token
        else:
            self.current_operand += token

    def delete_last_char(self) -> None:
        """Remove the last character of the current operand."""
        if self.current_operand == "0":
            return
        if len(self.current_operand) == 1:
            self.current_operand = "0"
        else:
            self.current_operand = self.current_operand[:-1]

    def choose_operator(self, operator: Union[Operator, str]) -> None:
        """
        Choose the operator to apply to the current operand.

        A pending operation is computed first so operators chain left to right.

        Args:
            operator: Operator or its symbol

        Raises:
            ValueError: If the symbol names no operator
        """
        operator = Operator.parse(operator)
        if self.current_operand == "":
            return

        if self.previous_operand != "":
            self.compute()

        self.pending_operator = operator
        self.previous_operand = self.current_operand
        self.current_operand = ""

    def compute(self) -> None:
        """
        Apply the pending operator to the previous and current operands.

        Unparseable operands or a missing operator leave the state unchanged.
        Division by zero notifies the error listeners and resets the engine.
        """
        previous = parse_operand(self.previous_operand)
        current = parse_operand(self.current_operand)
        if previous is None or current is None:
            return

        operator = self.pending_operator
        if operator is None:
            return

        if operator is Operator.DIVIDE and current == 0:
            logger.warning(f"Division by zero: {self.previous_operand} ÷ {self.current_operand}")
            self._emit(DivisionByZeroError())
            self.reset()
            return

        result = operator.apply(previous, current)
        expression = f"{format_number(previous)} {operator.symbol} {format_number(current)}"
        self.history.record(expression, result)
        logger.debug(f"Computed {expression} = {result}")

        self.current_operand = number_to_string(result)
        self.pending_operator = None
        self.previous_operand = ""
        self.should_reset_on_next_input = True

    def percentage(self) -> None:
        """Divide the current operand by 100. A pending operator is kept."""
        current = parse_operand(self.current_operand)
        if current is None:
            return

        self.current_operand = number_to_string(current / 100)
        self.should_reset_on_next_input = True

    def load_value(self, value: float) -> None:
        """Replace the current operand with a value, e.g. a history result."""
        self.current_operand = number_to_string(value)
        self.should_reset_on_next_input = True

    def current_display(self) -> str:
        """Formatted current operand, or the raw buffer when it has no number."""
        return format_number(parse_operand(self.current_operand)) or self.current_operand

    def previous_display(self) -> str:
        """Formatted previous operand followed by the pending operator symbol."""
        if self.pending_operator is None:
            return ""
        return f"{format_number(parse_operand(self.previous_operand))} {self.pending_operator.symbol}"

    def snapshot(self) -> Dict[str, Any]:
        """Plain copy of the calculator state."""
        return {
            "current_operand": self.current_operand,
            "previous_operand": self.previous_operand,
            "pending_operator": self.pending_operator.symbol if self.pending_operator else None,
            "should_reset_on_next_input": self.should_reset_on_next_input,
        }

    def _emit(self, error: CalculatorError) -> None:
        for listener in list(self._error_listeners):
            listener(error)
