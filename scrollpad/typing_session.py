"""Per-line typing state machine.

A session edits one line without repainting the whole line on every key.
It starts in cursor mode, where its line matches the buffer. The first
insertion or erase splits the line at the cursor and switches to insert
mode: the session line then holds only the text before the cursor, and the
text after it is kept in ``InsertMode.trailing`` so it can be reprinted
cheaply after each keystroke.

Leaving insert mode must append ``trailing`` back onto the line; every path
that hands control back to the caller goes through ``cursor_mode()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .keyboard import KeyEvent, KeyType


@dataclass(frozen=True)
class CursorMode:
    pass


@dataclass(frozen=True)
class InsertMode:
    trailing: str


SessionState = Union[CursorMode, InsertMode]

# Keys the session consumes itself; everything else is structural
_LINE_KEYS = {'left', 'right', 'home', 'end', 'backspace', 'delete'}


class TypingSession:
    """Edits a single line in place and reports back what it composed."""

    def __init__(self, line: str, column: int, surface):
        self.line = line
        self.column = max(0, min(column, len(line)))
        self.surface = surface
        self.state: SessionState = CursorMode()

    @property
    def text(self) -> str:
        """The full line as it currently reads on screen."""
        if isinstance(self.state, InsertMode):
            return self.line + self.state.trailing
        return self.line

    def _split(self) -> str:
        """Return the text after the cursor, cutting it off the line if needed."""
        if isinstance(self.state, InsertMode):
            return self.state.trailing
        trailing = self.line[self.column:]
        self.line = self.line[:self.column]
        return trailing

    def cursor_mode(self) -> None:
        """Fold any held trailing text back into the line."""
        if isinstance(self.state, InsertMode):
            self.line += self.state.trailing
        self.state = CursorMode()

    def print(self, char: str) -> None:
        trailing = self._split()
        self.line += char
        self.column += len(char)
        self.surface.write(char + trailing)
        if trailing:
            self.surface.move_left(len(trailing))
        self.state = InsertMode(trailing)

    def erase_left(self) -> bool:
        """Backspace within the line.

        Returns:
            False at column 0, where the caller must join with the line above
        """
        if self.column == 0:
            self.cursor_mode()
            return False
        trailing = self._split()
        self.line = self.line[:-1]
        self.column -= 1
        # The remainder is one cell shorter; blank out its old last cell
        self.surface.move_left(1)
        self.surface.write(trailing + ' ')
        self.surface.move_left(len(trailing) + 1)
        self.state = InsertMode(trailing)
        return True

    def erase_right(self) -> bool:
        """Delete the character under the cursor.

        Returns:
            False at the end of the line, where the caller must join the
            next line onto this one
        """
        trailing = self._split()
        self.state = InsertMode(trailing)
        if not trailing:
            self.cursor_mode()
            return False
        trailing = trailing[1:]
        self.surface.write(trailing + ' ')
        self.surface.move_left(len(trailing) + 1)
        self.state = InsertMode(trailing)
        return True

    def move_left(self) -> None:
        self.cursor_mode()
        if self.column > 0:
            self.column -= 1
            self.surface.move_left(1)

    def move_right(self) -> None:
        self.cursor_mode()
        if self.column < len(self.line):
            self.column += 1
            self.surface.move_right(1)

    def move_home(self) -> None:
        self.cursor_mode()
        if self.column > 0:
            self.surface.move_left(self.column)
            self.column = 0

    def move_end(self) -> None:
        self.cursor_mode()
        distance = len(self.line) - self.column
        if distance > 0:
            self.surface.move_right(distance)
            self.column = len(self.line)

    def handle(self, key_event: KeyEvent) -> Optional[KeyEvent]:
        """Apply a key to the line.

        Returns:
            None if the key was handled here, otherwise the key event itself
            (with the line already folded) for the caller to dispatch
        """
        if key_event.is_printable:
            for char in key_event.value:
                self.print(char)
            return None

        if key_event.key_type == KeyType.SPECIAL and key_event.value in _LINE_KEYS:
            value = key_event.value
            if value == 'backspace':
                return None if self.erase_left() else key_event
            if value == 'delete':
                return None if self.erase_right() else key_event
            if value == 'left':
                self.move_left()
            elif value == 'right':
                self.move_right()
            elif value == 'home':
                self.move_home()
            else:
                self.move_end()
            return None

        if key_event.key_type == KeyType.CTRL and key_event.value in ('a', 'e'):
            if key_event.value == 'a':
                self.move_home()
            else:
                self.move_end()
            return None

        self.cursor_mode()
        return key_event

    def finish(self) -> tuple[str, int]:
        """Fold and return the composed (line, column)."""
        self.cursor_mode()
        return (self.line, self.column)
