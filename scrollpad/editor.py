"""Main editor controller for the line editor."""

import errno
import logging
import os
import select
import signal
from typing import Optional

from .buffer import TextBuffer
from .commands import CommandRegistry, ResizeCommand
from .constants import EditorConstants
from .document import OverwritePolicy, load_lines, save_lines
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .settings import Settings, get_settings
from .terminal import TerminalInterface
from .typing_session import TypingSession

logger = logging.getLogger(__name__)


class Editor:
    """Line editor application controller.

    Keys first go to a typing session bound to the cursor line. Whatever the
    session hands back is a structural key; the session is then folded into
    the buffer and the key is dispatched through the command registry.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[Settings] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.settings = settings or get_settings()
        self.buffer = TextBuffer([""], self.terminal,
                                 width=self.terminal.width, height=self.terminal.height)
        self.command_registry = CommandRegistry()
        self.session: Optional[TypingSession] = None
        self.running = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None
        # File handling
        self.filename: Optional[str] = None
        self.modified = False
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[str] = None  # None, 'save_filename', 'overwrite_confirm', 'quit_confirm'
        self.prompt_input = ""
        self._pending_save_path: Optional[str] = None
        self._quit_after_save = False

    # --- Lifecycle ---

    def load_file(self, filename: str):
        """Load a file into the editor.

        Raises:
            FileNotFoundError: if the file does not exist
            EmptyFileError: if the file is empty
            DocumentError: if the file is not UTF-8 text
        """
        lines = load_lines(filename)
        self.session = None
        self.buffer = TextBuffer(lines, self.terminal,
                                 width=self.terminal.width, height=self.terminal.height)
        self.filename = filename
        self.modified = False

    def _handle_resize_signal(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_sigterm(self, signum, frame):
        del frame  # Unused
        # Unwind through run()'s cleanup instead of dying with raw mode on
        raise SystemExit(128 + signum)

    def run(self):
        """Run the main editor loop until the user exits."""
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize_signal)
        original_term_handler = signal.signal(signal.SIGTERM, self._handle_sigterm)
        try:
            with self.terminal:
                self.running = True
                self.terminal.set_cursor_shape(self.settings.cursor_shape)
                self.handle_resize()
                self.finish_frame()

                while self.running:
                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])
                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        self.handle_resize()
                    if 0 in ready:
                        self._process_pending_input()
                    self.finish_frame()
        except KeyboardInterrupt:
            logger.info("Interrupted, leaving without saving")
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGTERM, original_term_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)

    def _process_pending_input(self):
        """Handle every key the input layer has ready, without blocking."""
        key_event = self.keyboard.get_key_event(timeout=0)
        while key_event is not None and self.running:
            self.handle_key_event(key_event)
            key_event = self.keyboard.get_key_event(timeout=0)

    def handle_resize(self):
        self._end_session()
        ResizeCommand(self.terminal.width, self.terminal.height).execute(self)

    # --- Drawing ---

    def status_text(self) -> str:
        if self.prompt_mode == 'save_filename':
            return EditorConstants.SAVE_PROMPT.format(self.prompt_input)
        if self.prompt_mode == 'overwrite_confirm':
            return EditorConstants.OVERWRITE_PROMPT.format(self._pending_save_path)
        if self.prompt_mode == 'quit_confirm':
            return " Save file? (y, n) "
        if self.status_message:
            return f" {self.status_message}"
        name = self.filename or "[No Name]"
        flag = " [+]" if self.modified else ""
        return f" {name}{flag}"

    def finish_frame(self):
        """Draw the status line, park the cursor and flush the terminal."""
        status = self.status_text()
        self.terminal.draw_status(status)
        if self.prompt_mode is not None:
            self.terminal.move_to(len(status), self.terminal.height)
        elif self.session is not None:
            self.terminal.move_to(self.session.column, self.buffer.cursor.visible_row)
        else:
            self.buffer.place_cursor()
        self.terminal.flush()

    # --- Key handling ---

    def _begin_session(self):
        column, _ = self.buffer.cursor_screen_position()
        self.session = TypingSession(self.buffer.line_at_cursor(), column, self.terminal)

    def _end_session(self):
        """Fold the typing session back into the buffer."""
        if self.session is None:
            return
        line, column = self.session.finish()
        self.session = None
        self.buffer.replace_line_at_cursor(line)
        self.buffer.set_column(column)

    def handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # Clear status message on any keypress (except in prompt mode)
        if self.status_message and not self.prompt_mode:
            self.status_message = None

        if self._handle_prompt_mode(key_event):
            return

        if self.session is None:
            self._begin_session()
        before = self.session.text
        structural = self.session.handle(key_event)
        if self.session.text != before:
            self.modified = True
        if structural is None:
            return

        self._end_session()
        if self.command_registry.execute(self, structural):
            self.modified = True

    def _handle_prompt_mode(self, key_event: KeyEvent) -> bool:
        """Handle input in prompt mode.

        Returns:
            True if in prompt mode and event was handled
        """
        if self.prompt_mode == 'save_filename':
            self._handle_filename_prompt(key_event)
            return True
        if self.prompt_mode == 'overwrite_confirm':
            self._handle_overwrite_confirm(key_event)
            return True
        if self.prompt_mode == 'quit_confirm':
            self._handle_quit_confirm(key_event)
            return True
        return False

    def _cancel_prompt(self):
        self.prompt_mode = None
        self.prompt_input = ""
        self._pending_save_path = None
        self._quit_after_save = False

    def _handle_filename_prompt(self, key_event):
        """Handle keypress during filename prompt."""
        if (key_event.key_type == KeyType.SPECIAL and key_event.value == 'escape') or \
           (key_event.key_type == KeyType.CTRL and key_event.value == 'g'):  # ESC or Ctrl-G
            self._cancel_prompt()
            self.status_message = "Save cancelled"
        elif key_event.key_type == KeyType.SPECIAL and key_event.value == 'enter':
            if self.prompt_input:
                path = self.prompt_input
                self.prompt_mode = None
                self.prompt_input = ""
                if self._save_as(path) and self._quit_after_save:
                    self.running = False
        elif key_event.key_type == KeyType.SPECIAL and key_event.value == 'backspace':
            self.prompt_input = self.prompt_input[:-1]
        elif key_event.is_printable:
            self.prompt_input += key_event.value

    def _handle_overwrite_confirm(self, key_event):
        """Handle keypress while asking whether to replace an existing file."""
        path = self._pending_save_path
        quit_after = self._quit_after_save
        self._cancel_prompt()
        if key_event.key_type == KeyType.REGULAR and key_event.value.lower() == 'y':
            if self.write_file(path, overwrite=True) and quit_after:
                self.running = False
        else:
            self.status_message = f"{path} not overwritten"

    def _handle_quit_confirm(self, key_event):
        """Handle keypress during quit confirmation."""
        self.prompt_mode = None
        if key_event.key_type != KeyType.REGULAR:
            return
        char = key_event.value.lower()
        if char == 'y':
            if self.filename:
                if self.write_file(self.filename, overwrite=True):
                    self.running = False
            else:
                self.prompt_mode = 'save_filename'
                self.prompt_input = ""
                self._quit_after_save = True
        elif char == 'n':
            self.running = False

    # --- Commands called back from the registry ---

    def handle_save(self):
        """Save to the current file, or ask for a name."""
        self._end_session()
        if self.filename:
            self.write_file(self.filename, overwrite=True)
        else:
            self.prompt_mode = 'save_filename'
            self.prompt_input = ""

    def handle_exit(self):
        if self.modified:
            self.prompt_mode = 'quit_confirm'
        else:
            self.running = False

    # --- Saving ---

    def _save_as(self, path: str) -> bool:
        """Save under a new name, honouring the overwrite policy.

        Returns:
            True if the file was written now; False if it failed, was refused,
            or is waiting on an overwrite confirmation
        """
        policy = self.settings.overwrite_policy
        if path != self.filename and os.path.exists(path) and policy == OverwritePolicy.CONFIRM:
            self.prompt_mode = 'overwrite_confirm'
            self._pending_save_path = path
            return False
        overwrite = path == self.filename or policy == OverwritePolicy.ALWAYS
        return self.write_file(path, overwrite=overwrite)

    def write_file(self, filename: str, overwrite: bool = False) -> bool:
        """Save the document, reporting the outcome on the status line.

        Returns:
            True if save succeeded, False otherwise
        """
        self._end_session()
        try:
            save_lines(filename, self.buffer.lines, overwrite=overwrite)
        except FileExistsError:
            self.status_message = f"{filename} exists, not overwritten"
            return False
        except PermissionError:
            logger.warning("Permission denied saving %s", filename)
            self.status_message = f"Error: Permission denied saving {filename}"
            return False
        except OSError as e:
            logger.warning("Could not save %s: %s", filename, e)
            if e.errno == errno.ENOSPC:
                self.status_message = "Error: No space left on device"
            else:
                self.status_message = f"Error: Cannot save to {filename}"
            return False
        self.filename = filename
        self.modified = False
        self.status_message = f"Saved to {filename}"
        return True

    @property
    def text(self) -> str:
        """Current document text, including an active typing session."""
        if self.session is None:
            return self.buffer.text
        lines = list(self.buffer.lines)
        lines[self.buffer.logical_index] = self.session.text
        return '\n'.join(lines)
