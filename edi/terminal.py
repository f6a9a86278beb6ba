"""Terminal interface using Blessed for modes and size, raw file descriptors for bytes."""

import contextlib
import logging
import os
import select
import sys
import termios
from typing import BinaryIO, Iterator, Optional

import blessed

from .compositor import CLEAR_SCREEN, CURSOR_HOME
from .errors import TerminalError

logger = logging.getLogger(__name__)

# Push the cursor to the bottom-right corner before asking where it is
CURSOR_TO_CORNER = b"\x1b[999C\x1b[999B"


class TerminalInterface:
    """Handles terminal I/O: raw mode scope, byte reads, frame writes."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 input_fd: Optional[int] = None, output: Optional[BinaryIO] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self._input_fd = input_fd
        self._output = output
        self.is_raw = False

    @property
    def input_fd(self) -> int:
        if self._input_fd is None:
            self._input_fd = sys.stdin.fileno()
        return self._input_fd

    @property
    def output(self) -> BinaryIO:
        if self._output is None:
            self._output = sys.stdout.buffer
        return self._output

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator["TerminalInterface"]:
        """Enter raw mode on the alternate screen for the duration of the block.

        The original mode is restored on every way out of the block,
        exceptions included.
        """
        stack = contextlib.ExitStack()
        try:
            stack.enter_context(self.term.fullscreen())
            stack.enter_context(self.term.raw())
        except (termios.error, OSError) as e:
            stack.close()
            raise TerminalError(f"cannot enter raw mode: {e}") from e
        self.is_raw = True
        logger.debug("entered raw mode")
        try:
            yield self
        finally:
            self.is_raw = False
            try:
                self.clear_screen()
            finally:
                try:
                    stack.close()
                except (termios.error, OSError) as e:
                    raise TerminalError(f"cannot restore terminal mode: {e}") from e
                logger.debug("restored terminal mode")

    def read_byte(self, timeout: Optional[float] = None) -> Optional[int]:
        """Read one byte, or return None if nothing arrives within ``timeout``.

        Raises:
            TerminalError: the read failed for a reason other than "no data yet".
        """
        try:
            ready, _, _ = select.select([self.input_fd], [], [], timeout)
        except InterruptedError:
            return None
        if not ready:
            return None
        try:
            data = os.read(self.input_fd, 1)
        except (BlockingIOError, InterruptedError):
            return None
        except OSError as e:
            raise TerminalError(f"read: {e}") from e
        if not data:
            raise TerminalError("read: end of input")
        return data[0]

    def window_size(self) -> tuple[int, int]:
        """Terminal size as (rows, cols).

        Falls back to asking the terminal for the cursor position after
        pushing it to the bottom-right corner when the size is unknown.
        """
        # A tty whose size was never set (serial console, fresh pty) reports 0x0
        rows, cols = self.term.height, self.term.width
        if rows and cols:
            return rows, cols
        logger.info("window size unavailable, querying cursor position")
        self.write_frame(CURSOR_TO_CORNER)
        y, x = self.term.get_location(timeout=1)
        if y < 0 or x < 0:
            raise TerminalError("cannot determine window size")
        return y + 1, x + 1

    def write_frame(self, frame: bytes) -> None:
        """Write ``frame`` with a single write and flush."""
        self.output.write(frame)
        self.output.flush()

    def clear_screen(self) -> None:
        self.write_frame(CLEAR_SCREEN + CURSOR_HOME)
