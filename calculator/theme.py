"""
Light/dark theme preference.
"""
from typing import MutableMapping

from .config import THEME_STORAGE_KEY

DARK = "dark"
LIGHT = "light"


class ThemeManager:
    """Tracks the theme and persists it in a key-value store."""

    def __init__(self, preferences: MutableMapping[str, str], prefers_dark: bool = False):
        """
        Load the saved theme.

        Args:
            preferences: Key-value store the choice is saved in
            prefers_dark: Fallback when nothing has been saved yet
        """
        self.preferences = preferences
        self.prefers_dark = prefers_dark
        self.dark_theme = False
        self.load()

    @property
    def theme(self) -> str:
        return DARK if self.dark_theme else LIGHT

    def toggle(self) -> str:
        """Switch between light and dark, save, and return the new theme."""
        self.dark_theme = not self.dark_theme
        self.save()
        return self.theme

    def save(self) -> None:
        self.preferences[THEME_STORAGE_KEY] = self.theme

    def load(self) -> None:
        saved = self.preferences.get(THEME_STORAGE_KEY)
        if saved == DARK:
            self.dark_theme = True
        elif saved == LIGHT:
            self.dark_theme = False
        else:
            self.dark_theme = self.prefers_dark
