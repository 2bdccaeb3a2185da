#!/usr/bin/env python3
"""Terminal colors for aliasnav CLI output.

Honours NO_COLOR (https://no-color.org/), FORCE_COLOR and TERM=dumb, and
stays off when stdout is not a terminal.

Example:
    >>> c = get_colors()
    >>> print(c.cyan("@") + " -> " + c.green("src"))
"""

import os
import sys
import threading


class Colors:
    """ANSI color helper.

    Attributes:
        enabled: Whether escape codes are emitted.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"

    def __init__(self, enabled: bool = None):
        """Initialize Colors with optional override.

        Args:
            enabled: Force colors on/off. If None, auto-detect.
        """
        if enabled is not None:
            self.enabled = enabled
        else:
            self.enabled = self._should_enable_colors()

    def _should_enable_colors(self) -> bool:
        if os.environ.get("NO_COLOR"):
            return False

        if os.environ.get("FORCE_COLOR"):
            return True

        if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
            return False

        if os.environ.get("TERM", "") == "dumb":
            return False

        if sys.platform == "win32":
            term = os.environ.get("TERM", "")
            return bool(
                os.environ.get("WT_SESSION")
                or os.environ.get("ANSICON")
                or "256color" in term
                or os.environ.get("TERM_PROGRAM") == "vscode"
            )

        return True

    def _colorize(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{self.RESET}"

    def green(self, text: str) -> str:
        """Green text (resolved locations)."""
        return self._colorize(text, self.GREEN)

    def yellow(self, text: str) -> str:
        """Yellow text (warnings)."""
        return self._colorize(text, self.YELLOW)

    def magenta(self, text: str) -> str:
        """Magenta text (match kinds)."""
        return self._colorize(text, self.MAGENTA)

    def cyan(self, text: str) -> str:
        """Cyan text (alias keys, file paths)."""
        return self._colorize(text, self.CYAN)

    def error(self, text: str) -> str:
        """Error message (bold red)."""
        if not self.enabled:
            return text
        return f"{self.BOLD}{self.RED}{text}{self.RESET}"


_colors = None
_colors_lock = threading.Lock()


def get_colors(no_color: bool = False) -> Colors:
    """Get a Colors instance, optionally disabling colors.

    Args:
        no_color: If True, return a fresh disabled instance (not cached).

    Returns:
        Colors instance configured appropriately.
    """
    global _colors

    if no_color:
        return Colors(enabled=False)

    if _colors is None:
        with _colors_lock:
            if _colors is None:
                _colors = Colors()
    return _colors
