"""
portal/preferences.py

Display preferences (font size, dark mode, high contrast), kept in the
caller's session mapping (Streamlit's ``session_state`` in the app).
"""

from __future__ import annotations

from typing import Any, MutableMapping

FONT_SIZE_KEY = "mh_font_size"
DARK_KEY = "mh_dark"
CONTRAST_KEY = "mh_contrast"

DEFAULT_FONT_SIZE = 18
MIN_FONT_SIZE = 14
MAX_FONT_SIZE = 24


class DisplayPreferences:
    def __init__(self, state: MutableMapping[str, Any]):
        self.state = state

    @property
    def font_size(self) -> int:
        try:
            return int(float(self.state.get(FONT_SIZE_KEY, DEFAULT_FONT_SIZE)))
        except (TypeError, ValueError):
            return DEFAULT_FONT_SIZE

    def step_font(self, up: bool) -> int:
        size = self.font_size
        size = min(size + 1, MAX_FONT_SIZE) if up else max(size - 1, MIN_FONT_SIZE)
        self.state[FONT_SIZE_KEY] = size
        return size

    @property
    def dark(self) -> bool:
        return bool(self.state.get(DARK_KEY, False))

    @property
    def high_contrast(self) -> bool:
        return bool(self.state.get(CONTRAST_KEY, False))

    def toggle_dark(self) -> bool:
        self.state[DARK_KEY] = not self.dark
        return self.dark

    def toggle_contrast(self) -> bool:
        self.state[CONTRAST_KEY] = not self.high_contrast
        return self.high_contrast
