"""Constants and configuration defaults for the scrollpad editor."""

import sys


class EditorConstants:
    """Central configuration constants for the editor."""

    # Scroll sentinels for jump-to-start/end; scroll() saturates on these
    SCROLL_TO_START = -sys.maxsize - 1
    SCROLL_TO_END = sys.maxsize

    # Paging
    DEFAULT_PAGE_SCROLL_DIVISOR = 2  # PageUp/PageDown scroll half a screen

    # Cursor shapes (DECSCUSR)
    CURSOR_SHAPES = {
        'block': '\x1b[1 q',
        'underline': '\x1b[3 q',
        'bar': '\x1b[5 q',  # blinking bar
    }
    CURSOR_SHAPE_RESET = '\x1b[0 q'  # terminal default shape
    DEFAULT_CURSOR_SHAPE = 'bar'

    # Status line
    STATUS_ROWS = 1  # Rows reserved below the text area
    SAVE_PROMPT = " File to save in: {}"
    OVERWRITE_PROMPT = " {} exists. Overwrite? (y, n) "

    # File operations
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Logging
    LOG_FILENAME = "scrollpad.log"
    LOG_MAX_BYTES = 1024 * 1024
    LOG_BACKUP_COUNT = 3
