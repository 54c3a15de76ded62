"""
Configuration constants for the Web Calculator.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Engine configuration
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "10"))
MAX_FRACTION_DIGITS = int(os.getenv("MAX_FRACTION_DIGITS", "8"))
THOUSANDS_SEPARATOR = ","

# Sessions
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))
DEFAULT_THEME_DARK = os.getenv("DEFAULT_THEME_DARK", "false").lower() in ("1", "true", "yes")
THEME_STORAGE_KEY = "calculatorTheme"

# Guardrails
SESSION_RATE_LIMIT = os.getenv("SESSION_RATE_LIMIT", "30/minute")
KEY_RATE_LIMIT = os.getenv("KEY_RATE_LIMIT", "600/minute")

# Logging
LOG_FILE = os.getenv("LOG_FILE", "calculator.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))
SLOW_REQUEST_THRESHOLD_MS = float(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "500"))

# User-facing messages
DIVIDE_BY_ZERO_MESSAGE = "Cannot divide by zero"
CLEARED_MESSAGE = "Calculator cleared"
HISTORY_CLEARED_MESSAGE = "History cleared"
HISTORY_LOADED_MESSAGE = "Result loaded from history"
COPIED_MESSAGE = "Copied to clipboard!"
