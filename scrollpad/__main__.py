"""Scrollpad CLI entry point.

Allows running via `python -m scrollpad` and provides the console script
defined in `pyproject.toml`.

Usage:
    scrollpad [filename]
    scrollpad --textual [filename]
    scrollpad --version
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .document import DocumentError
from .version import get_version_string

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing: an optional filename plus two flags
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    use_textual = False
    if args and args[0] == '--textual':
        use_textual = True
        args = args[1:]
    filename = args[0] if args else None

    from .logging_config import setup_logging
    from .settings import get_settings
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        if use_textual:
            # Lazy import to avoid loading Textual for the plain terminal editor
            from .textual_app import main as textual_main
            textual_main(filename, settings=settings)
        else:
            from .editor import Editor
            editor = Editor(settings=settings)
            if filename:
                editor.load_file(filename)
            editor.run()
    except (OSError, DocumentError) as e:
        logger.error("Exiting: %s", e)
        print(f"scrollpad: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
