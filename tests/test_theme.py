"""
Tests for the theme preference.
"""
from calculator.theme import ThemeManager


class TestThemeManager:
    """Tests for ThemeManager."""

    def test_defaults_to_system_preference(self):
        assert ThemeManager({}).theme == "light"
        assert ThemeManager({}, prefers_dark=True).theme == "dark"

    def test_saved_theme_wins(self):
        manager = ThemeManager({"calculatorTheme": "light"}, prefers_dark=True)

        assert manager.theme == "light"

    def test_toggle_persists(self):
        preferences = {}
        manager = ThemeManager(preferences)

        assert manager.toggle() == "dark"
        assert preferences["calculatorTheme"] == "dark"

        assert ThemeManager(preferences).theme == "dark"

    def test_unknown_saved_value_ignored(self):
        manager = ThemeManager({"calculatorTheme": "sepia"}, prefers_dark=True)

        assert manager.theme == "dark"
