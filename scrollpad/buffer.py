"""Document, viewport and cursor model for the line editor.

The buffer owns the document lines together with the scroll offset and the
cursor. The cursor is stored as a column plus a *visible row*; the logical
line it addresses is always ``scroll_offset + visible_row``. Every operation
that can change which line is addressed re-clamps the column, so a caller
may read ``cursor_screen_position()`` at any time and get a valid spot.

Rendering goes through a surface object (see ``TerminalInterface``) with
``clear``, ``move_to``, ``write`` and ``move_to_next_line``. The buffer only
queues writes; the caller flushes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)


class InvariantViolation(RuntimeError):
    """The cursor addresses a line outside the document."""


@dataclass
class CursorPosition:
    column: int = 0
    visible_row: int = 0


@dataclass
class Viewport:
    scroll_offset: int = 0
    height: int = 1
    width: int = 80


class TextBuffer:
    lines: list[str]
    cursor: CursorPosition
    viewport: Viewport

    def __init__(self, lines: list[str], surface, width: int = 80, height: int = 24):
        if not lines:
            raise ValueError("A document needs at least one line")
        self.lines = list(lines)
        self.surface = surface
        self.cursor = CursorPosition()
        self.viewport = Viewport(scroll_offset=0, height=max(1, height), width=width)

    # --- Geometry ---

    @property
    def scroll_offset(self) -> int:
        return self.viewport.scroll_offset

    @property
    def height(self) -> int:
        return self.viewport.height

    @property
    def logical_index(self) -> int:
        return self.viewport.scroll_offset + self.cursor.visible_row

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    def resize(self, width: int, height: int) -> None:
        """Record a new terminal size.

        Does not repaint or move the cursor; the caller decides that when it
        handles the resize event (see ``keep_cursor_in_view``).
        """
        self.viewport.width = width
        self.viewport.height = max(1, height)

    def keep_cursor_in_view(self) -> None:
        """Re-fit the cursor row and scroll offset to a resized viewport."""
        overflow = self.cursor.visible_row - (self.viewport.height - 1)
        if overflow > 0:
            self.viewport.scroll_offset += overflow
            self.cursor.visible_row = self.viewport.height - 1
        self._clamp_scroll()

    def cursor_screen_position(self) -> tuple[int, int]:
        """Return (column, row) with the column clamped to the current line."""
        line = self.line_at_cursor()
        return (min(self.cursor.column, len(line)), self.cursor.visible_row)

    def line_at_cursor(self) -> str:
        i = self.logical_index
        if not 0 <= i < len(self.lines):
            raise InvariantViolation(
                f"cursor addresses line {i} of a {len(self.lines)}-line document")
        return self.lines[i]

    def replace_line_at_cursor(self, text: str) -> None:
        """Store the line composed by a typing session."""
        self.line_at_cursor()
        self.lines[self.logical_index] = text

    def set_column(self, column: int) -> None:
        self.cursor.column = max(0, min(column, len(self.line_at_cursor())))

    def _clamp_column(self) -> None:
        self.cursor.column = min(self.cursor.column, len(self.line_at_cursor()))

    def _clamp_scroll(self) -> bool:
        """Pull the viewport up after the document got shorter.

        The cursor stays on the same logical line; only its row changes.
        """
        scroll_max = max(0, len(self.lines) - self.viewport.height)
        excess = self.viewport.scroll_offset - scroll_max
        if excess <= 0:
            return False
        self.viewport.scroll_offset -= excess
        self.cursor.visible_row += excess
        return True

    def visible_lines(self) -> list[str]:
        """The slice of lines that fits in the viewport, top row first."""
        top = self.viewport.scroll_offset
        bottom = min(top + self.viewport.height, len(self.lines))
        return self.lines[top:bottom]

    # --- Rendering ---

    def queue_reprint(self) -> None:
        """Clear the screen and queue every visible line, one per row."""
        self.surface.clear()
        self.surface.move_to(0, 0)
        width = self.viewport.width
        for line in self.visible_lines():
            self.surface.write(line[:width])
            self.surface.move_to_next_line()

    def place_cursor(self) -> None:
        """Queue a move of the physical cursor to the buffer cursor."""
        column, row = self.cursor_screen_position()
        self.surface.move_to(column, row)

    # --- Scrolling and vertical movement ---

    def scroll(self, delta: int) -> bool:
        """Shift the viewport by ``delta`` lines.

        Negative deltas stop at the first line. Positive deltas stop once the
        last line sits on the bottom row. Repaints only if the offset changed.

        Returns:
            True if the viewport moved (and was repainted)
        """
        old = self.viewport.scroll_offset
        if delta < 0:
            new = max(0, old + delta)
        elif delta > 0:
            scroll_max = max(0, len(self.lines) - self.viewport.height)
            new = min(old + delta, scroll_max)
        else:
            return False
        if new == old:
            return False
        self.viewport.scroll_offset = new
        self._clamp_column()
        logger.debug("scrolled %d -> %d", old, new)
        self.queue_reprint()
        return True

    def jump_to_start(self) -> bool:
        return self.scroll(EditorConstants.SCROLL_TO_START)

    def jump_to_end(self) -> bool:
        return self.scroll(EditorConstants.SCROLL_TO_END)

    def move_cursor_vertical(self, delta_rows: int) -> bool:
        """Move the cursor up or down, scrolling when it leaves the viewport.

        A move past the first or last line is ignored. The column is clamped
        to the target line and is not restored on a later move.

        Returns:
            True if the move scrolled (the scroll already repainted); False if
            only the physical cursor needs to move, or nothing changed
        """
        if delta_rows == 0:
            return False
        target = self.logical_index + delta_rows
        if not 0 <= target < len(self.lines):
            return False
        self.cursor.column = min(self.cursor.column, len(self.lines[target]))

        row = self.cursor.visible_row + delta_rows
        height = self.viewport.height
        if row < 0:
            self.cursor.visible_row = 0
            return self.scroll(row)
        if row >= height:
            self.cursor.visible_row = height - 1
            return self.scroll(row - (height - 1))
        self.cursor.visible_row = row
        return False

    # --- Structural edits ---

    def newline_after(self, new_line: str) -> None:
        """Insert ``new_line`` below the cursor line and move onto it."""
        self.lines.insert(self.logical_index + 1, new_line)
        self.cursor.column = 0
        scrolled = self.move_cursor_vertical(1)
        if not scrolled:
            # Everything below the insertion point moved down a row
            self.queue_reprint()

    def newline(self) -> None:
        """Enter: append an empty line, or split the line at the cursor."""
        line = self.line_at_cursor()
        column = self.cursor.column
        if column >= len(line):
            self.newline_after("")
        else:
            self.lines[self.logical_index] = line[:column]
            self.newline_after(line[column:])

    def delete_newline_before(self) -> None:
        """Join the cursor line onto the end of the previous line."""
        i = self.logical_index
        if i == 0:
            return
        previous = self.lines[i - 1]
        joined = previous + self.lines.pop(i)
        self.lines[i - 1] = joined
        self.cursor.column = len(previous)
        scrolled = self.move_cursor_vertical(-1)
        if self._clamp_scroll() or not scrolled:
            self.queue_reprint()

    def delete_newline_after(self) -> None:
        """Join the next line onto the end of the cursor line."""
        i = self.logical_index
        if i >= len(self.lines) - 1:
            return
        self.lines[i] += self.lines.pop(i + 1)
        self._clamp_scroll()
        self.queue_reprint()


def render_viewport(buffer: TextBuffer, height: Optional[int] = None) -> list[str]:
    """Return the visible lines padded with blanks up to ``height`` rows."""
    rows = buffer.visible_lines()
    if height is None:
        height = buffer.height
    return rows[:height] + [""] * max(0, height - len(rows))
