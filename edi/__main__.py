"""Edi CLI entry point.

Allows running via `python -m edi` and provides the console script
defined in `pyproject.toml`.

Usage:
    edi [filename]
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import platformdirs

from .constants import EditorConstants
from .errors import EdiError

logger = logging.getLogger("edi")


def setup_logging() -> None:
    """Send log records to a file; the terminal itself is the editor's screen."""
    level_name = os.environ.get(EditorConstants.LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    log_dir = Path(platformdirs.user_log_dir("edi"))
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_dir / EditorConstants.LOG_FILENAME,
                                                       encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        print("usage: edi [filename]", file=sys.stderr)
        return 2

    setup_logging()

    # Lazy import keeps the usage error path free of terminal setup
    from .editor import Editor
    try:
        editor = Editor()
        if args:
            editor.load_file(args[0])
        editor.set_status_message(EditorConstants.HELP_MESSAGE)
        editor.run()
    except (EdiError, OSError) as e:
        logger.error("fatal: %s", e)
        print(f"edi: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
