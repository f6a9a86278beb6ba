"""Line buffer model: rows of raw bytes with a derived, tab-expanded render."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)

TAB = 0x09
SPACE = 0x20


@dataclass
class CursorPosition:
    x: int = 0
    y: int = 0


def render_row(chars: bytes, tab_stop: int = EditorConstants.TAB_STOP) -> bytes:
    """Expand tabs in ``chars`` so every tab ends on a multiple of ``tab_stop``.

    Each tab emits at least one and at most ``tab_stop`` spaces; every other
    byte is copied unchanged.
    """
    if tab_stop <= 0:
        raise ValueError(f"tab_stop must be positive, got {tab_stop}")
    out = bytearray()
    for byte in chars:
        if byte == TAB:
            out.append(SPACE)
            while len(out) % tab_stop:
                out.append(SPACE)
        else:
            out.append(byte)
    return bytes(out)


def buffer_to_render_column(chars: bytes, x: int, tab_stop: int = EditorConstants.TAB_STOP) -> int:
    """Return the render column of buffer column ``x``.

    Replays the expansion of :func:`render_row` over ``chars[:x]``.
    """
    if tab_stop <= 0:
        raise ValueError(f"tab_stop must be positive, got {tab_stop}")
    render_x = 0
    for byte in chars[:x]:
        if byte == TAB:
            render_x += (tab_stop - 1) - (render_x % tab_stop)
        render_x += 1
    return render_x


class Row:
    """One line of the document.

    ``chars`` holds the raw bytes; ``render`` is regenerated from it by
    :meth:`update` and is never edited directly.
    """

    def __init__(self, chars: bytes = b"", tab_stop: int = EditorConstants.TAB_STOP):
        self.tab_stop = tab_stop
        self.chars = bytearray(chars)
        self.render = b""
        self.update()

    def __len__(self) -> int:
        return len(self.chars)

    def __repr__(self) -> str:
        return f"Row({bytes(self.chars)!r})"

    def update(self) -> None:
        self.render = render_row(self.chars, self.tab_stop)

    def render_x(self, x: int) -> int:
        return buffer_to_render_column(self.chars, x, self.tab_stop)


class Document:
    """Ordered rows plus the modified flag and the file name.

    Row indices are always dense: inserting or deleting a row shifts the
    rows after it. Every mutation goes through the methods here so that each
    touched row's render is rebuilt and ``modified`` is raised.
    """

    def __init__(self, filename: Optional[str] = None, tab_stop: int = EditorConstants.TAB_STOP):
        self.rows: list[Row] = []
        self.filename = filename
        self.modified = False
        self.tab_stop = tab_stop

    @classmethod
    def from_lines(cls, lines: Iterable[bytes], filename: Optional[str] = None,
                   tab_stop: int = EditorConstants.TAB_STOP) -> "Document":
        doc = cls(filename=filename, tab_stop=tab_stop)
        for line in lines:
            doc.insert_row_at(doc.row_count, line)
        doc.modified = False
        return doc

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def lines(self) -> list[bytes]:
        """Raw content of every row, in order."""
        return [bytes(row.chars) for row in self.rows]

    def mark_saved(self, filename: Optional[str] = None) -> None:
        if filename is not None:
            self.filename = filename
        self.modified = False

    # --- Row operations ---

    def insert_row_at(self, index: int, text: bytes = b"") -> None:
        if index < 0 or index > self.row_count:
            return
        self.rows.insert(index, Row(text, self.tab_stop))
        self.modified = True

    def delete_row(self, index: int) -> None:
        if index < 0 or index >= self.row_count:
            return
        del self.rows[index]
        self.modified = True

    def insert_char(self, row: Row, at: int, byte: int) -> None:
        if at < 0 or at > len(row):
            at = len(row)
        row.chars.insert(at, byte)
        row.update()
        self.modified = True

    def delete_char(self, row: Row, at: int) -> None:
        if at < 0 or at >= len(row):
            return
        del row.chars[at]
        row.update()
        self.modified = True

    def append_bytes(self, row: Row, data: bytes) -> None:
        row.chars.extend(data)
        row.update()
        self.modified = True

    def split_row_at(self, y: int, x: int) -> None:
        """Move ``rows[y].chars[x:]`` into a new row at ``y + 1``."""
        if y < 0 or y >= self.row_count:
            return
        row = self.rows[y]
        x = max(0, min(x, len(row)))
        self.insert_row_at(y + 1, bytes(row.chars[x:]))
        del row.chars[x:]
        row.update()
        self.modified = True

    def join_with_previous(self, y: int) -> Optional[int]:
        """Append row ``y`` to row ``y - 1`` and remove row ``y``.

        Returns the join point (the old length of the previous row), or
        None when there is nothing to join.
        """
        if y <= 0 or y >= self.row_count:
            return None
        previous = self.rows[y - 1]
        join_x = len(previous)
        self.append_bytes(previous, bytes(self.rows[y].chars))
        self.delete_row(y)
        logger.debug("joined row %d into row %d at column %d", y, y - 1, join_x)
        return join_x
