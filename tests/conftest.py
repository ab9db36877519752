import pytest

from scrollpad.buffer import TextBuffer
from scrollpad.document import OverwritePolicy
from scrollpad.editor import Editor
from scrollpad.settings import Settings


class FakeTerminal:
    """Surface double that keeps a character grid like a real terminal.

    Tests can check both the sequence of calls and what the screen would
    actually show after incremental redraws.
    """

    def __init__(self, width=80, height=24):
        self._width = width
        self._height = height
        self.calls = []
        self.status = ""
        self.flushes = 0
        self.clears = 0
        self._keys = []
        self.column = 0
        self.row = 0
        self.grid = {}

    # Geometry
    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def set_size(self, width, height):
        self._width = width
        self._height = height

    # Output
    def clear(self):
        self.calls.append(('clear',))
        self.clears += 1
        self.grid = {}
        self.column = self.row = 0

    def move_to(self, column, row):
        self.calls.append(('move_to', column, row))
        self.column, self.row = column, row

    def move_left(self, n=1):
        self.calls.append(('move_left', n))
        self.column = max(0, self.column - n)

    def move_right(self, n=1):
        self.calls.append(('move_right', n))
        self.column += n

    def move_to_next_line(self):
        self.calls.append(('next_line',))
        self.column = 0
        self.row += 1

    def write(self, text):
        self.calls.append(('write', text))
        line = self.grid.setdefault(self.row, [])
        for ch in text:
            while len(line) <= self.column:
                line.append(' ')
            line[self.column] = ch
            self.column += 1

    def draw_status(self, text):
        self.status = text

    def flush(self):
        self.flushes += 1

    def set_cursor_shape(self, shape='bar'):
        self.calls.append(('cursor_shape', shape))

    def reset_cursor_shape(self):
        self.calls.append(('cursor_shape', None))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    # Input
    def get_key(self, timeout=None):
        if self._keys:
            return self._keys.pop(0)
        return None

    def add_keys(self, *keys):
        self._keys.extend(keys)

    # Inspection
    def screen_line(self, row):
        """Text shown on a row, with trailing blanks stripped."""
        return ''.join(self.grid.get(row, [])).rstrip()

    def screen_lines(self):
        return [self.screen_line(row) for row in range(self._height)]

    def reset_calls(self):
        self.calls = []
        self.clears = 0


@pytest.fixture
def surface():
    return FakeTerminal()


@pytest.fixture
def settings():
    return Settings(overwrite_policy=OverwritePolicy.CONFIRM)


@pytest.fixture
def make_editor(settings):
    """Build an editor on a FakeTerminal, drawn once as the main loop would."""

    def factory(lines=None, width=80, height=10, filename=None):
        terminal = FakeTerminal(width, height)
        editor = Editor(terminal=terminal, settings=settings)
        if lines is not None:
            editor.buffer = TextBuffer(lines, terminal, width=width, height=height)
        editor.filename = filename
        editor.running = True
        editor.handle_resize()
        editor.finish_frame()
        return editor

    return factory


def press(editor, *keys):
    """Feed raw key tokens through the editor, finishing a frame after each."""
    for key in keys:
        editor.handle_key_event(editor.keyboard.parse_key(key))
        editor.finish_frame()
