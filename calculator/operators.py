"""
Binary operators supported by the calculator.
"""
from enum import Enum
from typing import Union


class Operator(Enum):
    """The four operators, valued by their display symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: Union["Operator", str]) -> "Operator":
        """
        Resolve an operator from a symbol or keyboard alias.

        Args:
            token: An Operator, its symbol, the aliases '*' and '/', or the minus sign '−'

        Returns:
            The matching Operator

        Raises:
            ValueError: If the token names no operator
        """
        if isinstance(token, cls):
            return token
        if token in _ALIASES:
            return _ALIASES[token]
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Unknown operator: {token!r}")

    def apply(self, left: float, right: float) -> float:
        """Apply the operator. Division by zero is the caller's check."""
        if self is Operator.ADD:
            return left + right
        if self is Operator.SUBTRACT:
            return left - right
        if self is Operator.MULTIPLY:
            return left * right
        return left / right


_ALIASES = {
    "*": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
    "−": Operator.SUBTRACT,
}
