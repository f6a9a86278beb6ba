#!/usr/bin/env python3
"""Edi - a small terminal text editor.

Usage:
    python main.py [filename]

Controls:
    Arrow keys, Home, End, PageUp, PageDown: Move the cursor
    Ctrl-S: Save file (prompts for a name if the buffer has none)
    Ctrl-Q: Quit (press again to discard unsaved changes)
    Type to insert text
    Backspace / Delete: Delete character
    Enter: Split line
"""

import sys
from edi.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
