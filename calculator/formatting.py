"""
Number parsing and display formatting.

Display strings group the integer part in thousands and truncate (never
round) the fraction to MAX_FRACTION_DIGITS digits.
"""
import math
from decimal import Decimal
from typing import Optional

from .config import MAX_FRACTION_DIGITS, THOUSANDS_SEPARATOR

# Integral floats at or above this magnitude render in exponent notation
_EXPONENT_THRESHOLD = 1e21
# Below this magnitude fractions render in exponent notation
_SMALL_THRESHOLD = 1e-6


def parse_operand(text: str) -> Optional[float]:
    """
    Parse an operand buffer as a decimal number.

    Args:
        text: Operand buffer such as "12.5", "0." or ""

    Returns:
        The parsed value, or None when the text is empty or not a number
    """
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return value


def number_to_string(value: float) -> str:
    """
    Shortest round-trippable decimal string for a value.

    Integral values print without a trailing ".0" and negative zero prints
    as "0". Exponents are written as e+21 / e-7.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if float(value).is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return str(int(value))

    text = repr(float(value))
    if "e" not in text:
        return text
    if _SMALL_THRESHOLD <= abs(value) < _EXPONENT_THRESHOLD:
        return format(Decimal(text), "f")

    mantissa, exponent = text.split("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def add_thousand_separators(number: str) -> str:
    """
    Insert separators every three digits of an integer string.

    The sign stays on the leftmost group: "-1234567" -> "-1,234,567".
    """
    sign = "-" if number.startswith("-") else ""
    digits = number[len(sign):]
    if not digits.isdigit():
        return number

    grouped = format(int(digits), ",")
    if THOUSANDS_SEPARATOR != ",":
        grouped = grouped.replace(",", THOUSANDS_SEPARATOR)
    return sign + grouped


def format_number(value: Optional[float]) -> str:
    """
    Format a number for display.

    Args:
        value: Number to format; None or NaN yields an empty string

    Returns:
        Grouped integer part, followed by the fraction truncated to
        MAX_FRACTION_DIGITS digits when the number has one
    """
    if value is None or math.isnan(value):
        return ""
    if math.isinf(value):
        return number_to_string(value)

    text = number_to_string(value)
    mantissa, _, exponent = text.partition("e")
    integer_part, has_fraction, fraction_part = mantissa.partition(".")

    formatted = add_thousand_separators(integer_part)
    if has_fraction:
        formatted += "." + fraction_part[:MAX_FRACTION_DIGITS]
    if exponent:
        formatted += "e" + exponent
    return formatted
