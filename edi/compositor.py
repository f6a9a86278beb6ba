"""Frame composition: one byte string per screen refresh."""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .constants import EditorConstants
from .model import Document
from .view import Viewport

# VT100 control sequences
CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
INVERT = b"\x1b[7m"
NORMAL = b"\x1b[m"
CRLF = b"\r\n"


def move_cursor(row: int, col: int) -> bytes:
    """Sequence placing the cursor at 1-based (row, col)."""
    return b"\x1b[%d;%dH" % (row, col)


@dataclass
class StatusMessage:
    """Transient message shown on the bottom line."""
    text: str = ""
    timestamp: float = field(default_factory=time.time)

    def is_visible(self, now: float, timeout: float = EditorConstants.STATUS_MESSAGE_TIMEOUT) -> bool:
        return bool(self.text) and now - self.timestamp < timeout


class FrameCompositor:
    """Builds the complete redraw for a document and viewport.

    The result is a single ``bytes`` value: hide cursor, home, text rows,
    status bar, message bar, cursor placement, show cursor. Writing it in
    one call keeps the terminal from showing a half-drawn frame.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock

    def compose(self, document: Document, view: Viewport,
                message: Optional[StatusMessage] = None) -> bytes:
        out = bytearray()
        out += HIDE_CURSOR
        out += CURSOR_HOME
        self._draw_rows(out, document, view)
        self._draw_status_bar(out, document, view)
        self._draw_message_bar(out, view, message)
        out += move_cursor(*view.screen_cursor)
        out += SHOW_CURSOR
        return bytes(out)

    def _draw_rows(self, out: bytearray, document: Document, view: Viewport) -> None:
        for screen_y in range(view.screen_rows):
            file_row = screen_y + view.row_offset
            if file_row >= document.row_count:
                if document.row_count == 0 and screen_y == view.screen_rows // 3:
                    out += self._welcome_line(view.screen_cols)
                else:
                    out += EditorConstants.EMPTY_LINE_MARKER
            else:
                render = document[file_row].render
                out += render[view.col_offset:view.col_offset + view.screen_cols]
            out += ERASE_LINE
            out += CRLF

    def _welcome_line(self, screen_cols: int) -> bytes:
        welcome = EditorConstants.WELCOME_MESSAGE.format(EditorConstants.VERSION).encode()
        welcome = welcome[:screen_cols]
        padding = (screen_cols - len(welcome)) // 2
        line = bytearray()
        if padding:
            line += EditorConstants.EMPTY_LINE_MARKER
            padding -= 1
        line += b" " * padding
        line += welcome
        return bytes(line)

    def _draw_status_bar(self, out: bytearray, document: Document, view: Viewport) -> None:
        name = document.filename or EditorConstants.NO_NAME
        name = name[:EditorConstants.STATUS_FILENAME_WIDTH]
        modified = "(modified)" if document.modified else ""
        left = f"{name} - {document.row_count} lines {modified}".encode(errors="replace")
        right = f"{view.cursor.y + 1}/{document.row_count}".encode()

        cols = view.screen_cols
        left = left[:cols]
        gap = cols - len(left) - len(right)
        if gap >= 0:
            bar = left + b" " * gap + right
        else:
            bar = left + b" " * (cols - len(left))

        out += INVERT
        out += bar
        out += NORMAL
        out += CRLF

    def _draw_message_bar(self, out: bytearray, view: Viewport,
                          message: Optional[StatusMessage]) -> None:
        out += ERASE_LINE
        if message is not None and message.is_visible(self.clock()):
            out += message.text.encode(errors="replace")[:view.screen_cols]
