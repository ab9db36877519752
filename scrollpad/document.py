"""Loading and saving documents as lists of lines."""

import logging
import os
import tempfile
from enum import Enum

from .constants import EditorConstants

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    """A file exists but cannot be edited as a text document."""


class EmptyFileError(DocumentError):
    """Raised when a file to be edited has no lines at all."""


class OverwritePolicy(Enum):
    """What a save does when the target file already exists."""
    CONFIRM = "confirm"  # ask the user first
    NEVER = "never"
    ALWAYS = "always"


def load_lines(filename: str) -> list[str]:
    """Read a file into a list of lines without their newlines.

    Args:
        filename: Path to the file

    Returns:
        The lines of the file; never empty

    Raises:
        FileNotFoundError: if the file does not exist
        EmptyFileError: if the file is empty
        DocumentError: if the file is not UTF-8 text
    """
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise DocumentError(f"{filename} is not valid UTF-8 text") from e
    if not content:
        raise EmptyFileError(f"File {filename} is empty")
    if content.endswith('\n'):
        content = content[:-1]
    lines = content.split('\n')
    logger.info("Loaded %d lines from %s", len(lines), filename)
    return lines


def save_lines(filename: str, lines: list[str], overwrite: bool = False) -> None:
    """Save lines joined by newlines to a file atomically.

    The content is written to a temporary file in the same directory, synced,
    then renamed over the target.

    Args:
        filename: Path to save to
        lines: Document lines
        overwrite: Whether an existing file may be replaced

    Raises:
        FileExistsError: if the file exists and ``overwrite`` is False
        OSError: if the file cannot be written
    """
    if not overwrite and os.path.exists(filename):
        raise FileExistsError(f"{filename} already exists")

    content = '\n'.join(lines)
    dir_name = os.path.dirname(filename) or '.'
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                         dir=dir_name,
                                         suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, filename)
    except OSError:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_filename)
        raise
    logger.info("Saved %d lines to %s", len(lines), filename)
