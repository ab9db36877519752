"""Command pattern implementation for structural editor actions.

Keys a typing session cannot handle inside the current line are looked up
here. The lookup itself is a pure mapping from a key event to a command
object; only ``execute`` touches the editor.
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance

        Returns:
            True if the command modified the document
        """
        pass


class MoveCursorCommand(EditorCommand):
    def __init__(self, delta_rows: int):
        self.delta_rows = delta_rows

    def execute(self, editor):
        editor.buffer.move_cursor_vertical(self.delta_rows)
        return False


class ScrollCommand(EditorCommand):
    def __init__(self, delta: int):
        self.delta = delta

    def execute(self, editor):
        editor.buffer.scroll(self.delta)
        return False


class PageScrollCommand(EditorCommand):
    """Scroll by a fraction of the viewport, measured when executed."""

    def __init__(self, direction: int):
        self.direction = direction

    def execute(self, editor):
        step = max(1, editor.buffer.height // editor.settings.page_scroll_divisor)
        editor.buffer.scroll(self.direction * step)
        return False


class JumpToStartCommand(EditorCommand):
    def execute(self, editor):
        editor.buffer.jump_to_start()
        return False


class JumpToEndCommand(EditorCommand):
    def execute(self, editor):
        editor.buffer.jump_to_end()
        return False


class NewlineCommand(EditorCommand):
    def execute(self, editor):
        editor.buffer.newline()
        return True


class DeleteNewlineBeforeCommand(EditorCommand):
    def execute(self, editor):
        if editor.buffer.logical_index == 0:
            return False
        editor.buffer.delete_newline_before()
        return True


class DeleteNewlineAfterCommand(EditorCommand):
    def execute(self, editor):
        if editor.buffer.logical_index >= len(editor.buffer.lines) - 1:
            return False
        editor.buffer.delete_newline_after()
        return True


class ResizeCommand(EditorCommand):
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def execute(self, editor):
        editor.buffer.resize(self.width, self.height)
        editor.buffer.keep_cursor_in_view()
        editor.buffer.queue_reprint()
        return False


class SaveCommand(EditorCommand):
    def execute(self, editor):
        editor.handle_save()
        return False


class ExitCommand(EditorCommand):
    def execute(self, editor):
        editor.handle_exit()
        return False


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Vertical movement and scrolling
        self.register((KeyType.SPECIAL, 'up'), MoveCursorCommand(-1))
        self.register((KeyType.SPECIAL, 'down'), MoveCursorCommand(1))
        self.register((KeyType.CTRL_SPECIAL, 'up'), ScrollCommand(-1))
        self.register((KeyType.CTRL_SPECIAL, 'down'), ScrollCommand(1))
        self.register((KeyType.SPECIAL, 'page_up'), PageScrollCommand(-1))
        self.register((KeyType.SPECIAL, 'page_down'), PageScrollCommand(1))
        self.register((KeyType.CTRL_SPECIAL, 'home'), JumpToStartCommand())
        self.register((KeyType.CTRL_SPECIAL, 'end'), JumpToEndCommand())

        # Line structure; backspace/delete only get here at line boundaries
        self.register((KeyType.SPECIAL, 'enter'), NewlineCommand())
        self.register((KeyType.SPECIAL, 'backspace'), DeleteNewlineBeforeCommand())
        self.register((KeyType.SPECIAL, 'delete'), DeleteNewlineAfterCommand())

        # System commands
        self.register((KeyType.CTRL, 's'), SaveCommand())
        self.register((KeyType.CTRL, 'q'), ExitCommand())
        self.register((KeyType.SPECIAL, 'escape'), ExitCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def lookup(self, key_event: 'KeyEvent') -> Optional[EditorCommand]:
        """Get the command for a key event, or None if the key is unbound."""
        return self._commands.get((key_event.key_type, key_event.value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        command = self.lookup(key_event)
        if command:
            return command.execute(editor)
        return False

