"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"
    CTRL_SPECIAL = "ctrl_special"  # Ctrl + arrow/home/end


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw key string from curtsies
    is_ctrl: bool = False
    is_sequence: bool = False

    @property
    def is_printable(self) -> bool:
        return self.key_type == KeyType.REGULAR and ord(self.value[0]) >= 32


SPECIAL_KEYS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert', 'escape',
}

# xterm CSI sequences for Ctrl-modified navigation keys, in case the input
# layer hands them through undecoded
_RAW_CTRL_SEQUENCES = {
    '\x1b[1;5A': 'up',
    '\x1b[1;5B': 'down',
    '\x1b[1;5C': 'right',
    '\x1b[1;5D': 'left',
    '\x1b[1;5H': 'home',
    '\x1b[1;5F': 'end',
}


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event and map curtsies-style names to KeyEvent."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token into a KeyEvent.

        Args:
            key: curtsies key name such as '<UP>' or '<Ctrl-HOME>', or a
                plain character

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        if key_str in _RAW_CTRL_SEQUENCES:
            return KeyEvent(key_type=KeyType.CTRL_SPECIAL, value=_RAW_CTRL_SEQUENCES[key_str],
                            raw=key_str, is_ctrl=True, is_sequence=True)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Ctrl-UP>'
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            lower = key_str[1:-1].lower().replace('+', '-')
            parts = lower.split('-')
            base = parts[-1]
            mods = set(parts[:-1])
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'
            elif base in ('esc', 'escape'):
                base = 'escape'
            elif base == 'return':
                base = 'enter'

            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if 'ctrl' in mods and len(base) == 1:
                # Ctrl-J / Ctrl-M are what the terminal sends for Enter
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if 'ctrl' in mods and base in SPECIAL_KEYS:
                return KeyEvent(key_type=KeyType.CTRL_SPECIAL, value=base, raw=key_str,
                                is_ctrl=True, is_sequence=True)
            # Unknown tokens are reported as specials so nothing types them
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)

        if len(key_str) == 1:
            o = ord(key_str)
            if o in (8, 127):
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if o == 9:
                # A tab would jump to the next tab stop and desync the column
                return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)
            if o == 27:
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)
