"""Cursor movement and the visible window over the document."""

from typing import Optional

from .keyboard import KeyType
from .model import CursorPosition, Document, Row


class Viewport:
    """Cursor position, its render column, and the scroll offsets.

    ``screen_rows`` counts text rows only; the status and message bars are
    excluded by the caller. Call :meth:`reflow` after anything that moves the
    cursor or changes the current row.
    """

    def __init__(self, document: Document, screen_rows: int, screen_cols: int):
        self.document = document
        self.cursor = CursorPosition()
        self.render_x = 0
        self.row_offset = 0
        self.col_offset = 0
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols

    def resize(self, screen_rows: int, screen_cols: int) -> None:
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols
        self.reflow()

    @property
    def current_row(self) -> Optional[Row]:
        """The row under the cursor, or None on the virtual row."""
        if self.cursor.y < self.document.row_count:
            return self.document[self.cursor.y]
        return None

    def move_cursor(self, direction: KeyType) -> None:
        """Move one step in ``direction`` and clamp x to the new row."""
        cursor = self.cursor
        row = self.current_row
        if direction == KeyType.ARROW_LEFT:
            if cursor.x > 0:
                cursor.x -= 1
            elif cursor.y > 0:
                cursor.y -= 1
                cursor.x = len(self.document[cursor.y])
        elif direction == KeyType.ARROW_RIGHT:
            if row is not None and cursor.x < len(row):
                cursor.x += 1
            elif cursor.y < self.document.row_count:
                cursor.y += 1
                cursor.x = 0
        elif direction == KeyType.ARROW_UP:
            if cursor.y > 0:
                cursor.y -= 1
        elif direction == KeyType.ARROW_DOWN:
            if cursor.y < self.document.row_count:
                cursor.y += 1
        else:
            raise ValueError(f"not a cursor direction: {direction}")

        self._clamp_x()

    def _clamp_x(self) -> None:
        # No column memory: snap to the end of a shorter row
        row = self.current_row
        row_length = len(row) if row is not None else 0
        if self.cursor.x > row_length:
            self.cursor.x = row_length

    def page_up(self) -> None:
        self.cursor.y = self.row_offset
        for _ in range(self.screen_rows):
            self.move_cursor(KeyType.ARROW_UP)
        self._clamp_x()

    def page_down(self) -> None:
        self.cursor.y = max(0, min(self.row_offset + self.screen_rows - 1, self.document.row_count))
        for _ in range(self.screen_rows):
            self.move_cursor(KeyType.ARROW_DOWN)
        self._clamp_x()

    def home(self) -> None:
        self.cursor.x = 0

    def end(self) -> None:
        row = self.current_row
        self.cursor.x = len(row) if row is not None else 0

    def reflow(self) -> None:
        """Recompute render_x and scroll so the cursor is on screen."""
        row = self.current_row
        self.render_x = row.render_x(self.cursor.x) if row is not None else 0

        y = self.cursor.y
        if y < self.row_offset:
            self.row_offset = y
        if y >= self.row_offset + self.screen_rows:
            self.row_offset = y - self.screen_rows + 1

        if self.render_x < self.col_offset:
            self.col_offset = self.render_x
        if self.render_x >= self.col_offset + self.screen_cols:
            self.col_offset = self.render_x - self.screen_cols + 1

    @property
    def screen_cursor(self) -> tuple[int, int]:
        """1-based (row, col) of the cursor on the terminal."""
        return (self.cursor.y - self.row_offset + 1, self.render_x - self.col_offset + 1)
