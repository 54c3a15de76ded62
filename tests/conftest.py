"""
Pytest configuration and fixtures.
"""
import os
import sys
import tempfile

import pytest

# Add the parent directory to path so we can import the calculator package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Test configuration must be in place before calculator.config is imported
os.environ.setdefault("SESSION_RATE_LIMIT", "10000/minute")
os.environ.setdefault("KEY_RATE_LIMIT", "10000/minute")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "calculator-tests.log"))

from calculator.engine import CalculatorEngine  # noqa: E402
from calculator.history import CalculationHistory  # noqa: E402


@pytest.fixture
def history():
    """Empty history with the default limit."""
    return CalculationHistory()


@pytest.fixture
def engine(history):
    """Fresh engine recording into the history fixture."""
    return CalculatorEngine(history=history)


@pytest.fixture
def enter():
    """Feed a sequence of digits, operators and "=" to an engine."""
    def _enter(engine, keys):
        for key in keys:
            if key == "=":
                engine.compute()
            elif key in ("+", "-", "×", "÷"):
                engine.choose_operator(key)
            else:
                for token in key:
                    engine.append_digit(token)
    return _enter
