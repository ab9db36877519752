"""Terminal interface using Blessed for display and Curtsies for input."""

import sys
from collections import deque
from typing import Optional

import blessed
from curtsies import Input
from curtsies.events import PasteEvent

from .constants import EditorConstants


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Output primitives only queue escape sequences and text; nothing reaches
    the terminal until ``flush()``. Use the interface as a context manager so
    the alternate screen, raw input and cursor shape are undone on every exit
    path.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None, stream=None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.stream = stream or sys.stdout
        self.is_fullscreen = False
        self._input: Optional[Input] = None
        self._pending: list[str] = []
        self._pending_keys: deque = deque()
        self._row = 0

    def __enter__(self):
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False

    def setup(self):
        """Enter raw input mode and the alternate screen."""
        # Ctrl-S / Ctrl-Q must reach the editor instead of pausing output
        self._input = Input(keynames='curtsies', disable_terminal_start_stop=True)
        self._input.__enter__()
        self.is_fullscreen = True
        self.write(self.term.enter_fullscreen + self.term.home + self.term.clear)
        self.flush()

    def cleanup(self):
        """Leave the alternate screen and restore the terminal."""
        self._pending.clear()
        if self.is_fullscreen:
            self.reset_cursor_shape()
            self.write(self.term.normal + self.term.exit_fullscreen + self.term.normal_cursor)
            self.flush()
            self.is_fullscreen = False
        if self._input is not None:
            try:
                self._input.__exit__(None, None, None)
            finally:
                self._input = None

    # --- Output primitives ---

    def write(self, text: str):
        self._pending.append(text)

    def flush(self):
        if self._pending:
            self.stream.write(''.join(self._pending))
            self._pending.clear()
        self.stream.flush()

    def clear(self):
        self.write(self.term.home + self.term.clear)
        self._row = 0

    def move_to(self, column: int, row: int):
        self.write(self.term.move_xy(column, row))
        self._row = row

    def move_left(self, n: int = 1):
        if n > 0:
            self.write(self.term.move_left(n))

    def move_right(self, n: int = 1):
        if n > 0:
            self.write(self.term.move_right(n))

    def move_to_next_line(self):
        self.move_to(0, self._row + 1)

    def set_cursor_shape(self, shape: str = EditorConstants.DEFAULT_CURSOR_SHAPE):
        self.write(EditorConstants.CURSOR_SHAPES[shape])

    def reset_cursor_shape(self):
        self.write(EditorConstants.CURSOR_SHAPE_RESET)

    def draw_status(self, text: str):
        """Draw the status line below the text area."""
        width = self.term.width
        self.write(self.term.move_xy(0, self.term.height - 1)
                   + self.term.reverse + text[:width].ljust(width) + self.term.normal)

    # --- Input ---

    def get_key(self, timeout: Optional[float] = None):
        """Get a single key token from curtsies.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None if nothing arrived in time
        """
        if self._pending_keys:
            return self._pending_keys.popleft()
        if self._input is None:
            return None
        event = self._input.send(timeout)
        if event is None:
            return None
        if isinstance(event, PasteEvent):
            # Pasted text arrives as one event; feed it key by key
            self._pending_keys.extend(event.events)
            return self._pending_keys.popleft() if self._pending_keys else None
        return str(event)

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - EditorConstants.STATUS_ROWS
