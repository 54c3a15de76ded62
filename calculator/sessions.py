"""
Per-client calculator sessions.

Each session owns its engine, history and theme. The store keeps a bounded
number of sessions and evicts the least recently used one when full.
"""
import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .config import (
    CLEARED_MESSAGE, COPIED_MESSAGE, DEFAULT_THEME_DARK, HISTORY_CLEARED_MESSAGE,
    HISTORY_LIMIT, HISTORY_LOADED_MESSAGE, MAX_SESSIONS,
)
from .engine import CalculatorEngine, CalculatorError
from .formatting import format_number
from .history import CalculationHistory, HistoryEntry
from .keyboard import handle_action, handle_key, key_action
from .theme import ThemeManager

logger = logging.getLogger(__name__)


@dataclass
class DisplayState:
    """What the front end renders after a command."""
    current: str
    previous: str
    operator: Optional[str]


class CalculatorSession:
    """One client's calculator, history and preferences."""

    def __init__(
        self,
        session_id: str,
        history_limit: int = HISTORY_LIMIT,
        prefers_dark: bool = DEFAULT_THEME_DARK
    ):
        self.session_id = session_id
        self.history = CalculationHistory(limit=history_limit)
        self.engine = CalculatorEngine(history=self.history)
        self.preferences: Dict[str, str] = {}
        self.theme = ThemeManager(self.preferences, prefers_dark=prefers_dark)
        self._errors: List[str] = []
        self._notice: Optional[str] = None
        self.engine.add_error_listener(self._on_error)

    def _on_error(self, error: CalculatorError) -> None:
        logger.info(f"[{self.session_id}] {error.message}")
        self._errors.append(error.message)

    def press_digit(self, token: str) -> None:
        self.engine.append_digit(token)

    def choose_operator(self, operator: str) -> None:
        self.engine.choose_operator(operator)

    def run_action(self, action: str) -> None:
        handle_action(self.engine, action)
        if action == "clear":
            self._notice = CLEARED_MESSAGE

    def press_key(self, key: str) -> bool:
        handled = handle_key(self.engine, key)
        if handled and key_action(key) == "clear":
            self._notice = CLEARED_MESSAGE
        return handled

    def clear_history(self) -> None:
        self.history.clear()
        self._notice = HISTORY_CLEARED_MESSAGE

    def reuse_history(self, index: int) -> HistoryEntry:
        """
        Load a history result into the current operand.

        Args:
            index: Position in the history, 0 being the newest entry

        Returns:
            The entry that was loaded

        Raises:
            IndexError: If there is no entry at that position
        """
        entries = self.history.entries()
        if not 0 <= index < len(entries):
            raise IndexError(f"No history entry at index {index}")
        entry = entries[index]
        self.engine.load_value(entry.result)
        self._notice = HISTORY_LOADED_MESSAGE
        return entry

    def copy_text(self) -> str:
        """Raw current operand, as placed on the clipboard."""
        self._notice = COPIED_MESSAGE
        return self.engine.current_operand

    def toggle_theme(self) -> str:
        return self.theme.toggle()

    def display(self) -> DisplayState:
        operator = self.engine.pending_operator
        return DisplayState(
            current=self.engine.current_display(),
            previous=self.engine.previous_display(),
            operator=operator.symbol if operator else None,
        )

    def history_view(self) -> List[Dict[str, str]]:
        """History entries with display-ready results, newest first."""
        return [
            {
                "expression": entry.expression,
                "result": format_number(entry.result),
                "timestamp": entry.timestamp.isoformat(),
            }
            for entry in self.history.entries()
        ]

    def drain_messages(self) -> Tuple[Optional[str], Optional[str]]:
        """Return and forget the latest error and notice."""
        error = self._errors[-1] if self._errors else None
        notice = self._notice
        self._errors.clear()
        self._notice = None
        return error, notice


class SessionStore:
    """Bounded collection of sessions keyed by id."""

    def __init__(self, max_sessions: int = MAX_SESSIONS, history_limit: int = HISTORY_LIMIT):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be positive, got {max_sessions}")
        self.max_sessions = max_sessions
        self.history_limit = history_limit
        self._sessions: "OrderedDict[str, CalculatorSession]" = OrderedDict()

    def create(self) -> CalculatorSession:
        """Create a session, evicting the least recently used one if full."""
        while len(self._sessions) >= self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted idle session {evicted_id}")

        session = CalculatorSession(uuid.uuid4().hex, history_limit=self.history_limit)
        self._sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id} ({len(self._sessions)} active)")
        return session

    def get(self, session_id: str) -> CalculatorSession:
        """
        Look up a session and mark it as recently used.

        Raises:
            KeyError: If the session does not exist
        """
        session = self._sessions[session_id]
        self._sessions.move_to_end(session_id)
        return session

    def delete(self, session_id: str) -> bool:
        """Drop a session. Returns False if it did not exist."""
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"Deleted session {session_id}")
        return removed is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
