"""Main editor controller: owns the document and runs the key loop."""

import logging
import time
from typing import Callable, Optional

from .commands import CommandRegistry
from .compositor import FrameCompositor, StatusMessage
from .constants import EditorConstants
from .fileio import load_lines, save_lines
from .keyboard import KeyEvent, KeyType, create_key_decoder, ctrl_key
from .model import Document
from .terminal import TerminalInterface
from .view import Viewport

logger = logging.getLogger(__name__)

QUIT_KEY = (KeyType.CONTROL, ctrl_key('q'))


class Editor:
    """Main text editor application controller."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 screen_size: Optional[tuple[int, int]] = None,
                 clock: Callable[[], float] = time.time):
        """Initialize the editor components.

        Args:
            terminal: Terminal to draw on and read from
            screen_size: (rows, cols) of the whole terminal; queried from
                the terminal when omitted
            clock: Time source for status message expiry
        """
        self.terminal = terminal or TerminalInterface()
        self.keyboard = create_key_decoder(self.terminal)
        self.clock = clock
        rows, cols = screen_size or self.terminal.window_size()
        self.document = Document()
        self.view = Viewport(self.document, rows - EditorConstants.RESERVED_LINES, cols)
        self.compositor = FrameCompositor(clock)
        self.command_registry = CommandRegistry()
        self.status_message = StatusMessage("", 0.0)
        self.quit_times = EditorConstants.QUIT_TIMES
        self.prompt_mode = None  # None or 'save_filename'
        self.prompt_input = ""
        self.running = False

    @property
    def modified(self) -> bool:
        return self.document.modified

    @property
    def filename(self) -> Optional[str]:
        return self.document.filename

    def set_status_message(self, text: str) -> None:
        self.status_message = StatusMessage(text, self.clock())

    # --- Main loop ---

    def run(self):
        """Run the main editor loop.

        Raw mode is held for the whole loop and restored however the loop
        ends; fatal terminal errors propagate to the caller afterwards.
        """
        self.running = True
        with self.terminal.raw_mode():
            self.refresh_screen()
            for key_event in self.keyboard.events():
                self.handle_key(key_event)
                if not self.running:
                    break
                self.refresh_screen()
        logger.info("editor loop finished")

    def refresh_screen(self) -> None:
        rows, cols = self.terminal.window_size()
        screen_rows = rows - EditorConstants.RESERVED_LINES
        if (screen_rows, cols) != (self.view.screen_rows, self.view.screen_cols):
            logger.debug("resized to %dx%d", rows, cols)
            self.view.resize(screen_rows, cols)
        self.terminal.write_frame(self.current_frame())

    def current_frame(self) -> bytes:
        """Compose the full redraw for the current state."""
        self.view.reflow()
        message = self.status_message
        if self.prompt_mode == 'save_filename':
            message = StatusMessage(EditorConstants.SAVE_PROMPT.format(self.prompt_input), self.clock())
        return self.compositor.compose(self.document, self.view, message)

    # --- Key handling ---

    def handle_key(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: Decoded key event
        """
        if (key_event.key_type, key_event.code) != QUIT_KEY:
            self.quit_times = EditorConstants.QUIT_TIMES

        if self.prompt_mode == 'save_filename':
            self._handle_filename_prompt(key_event)
            return

        self.command_registry.execute(self, key_event)

    def request_quit(self):
        """Stop the loop, unless there are unsaved changes and more Ctrl-Q presses are due."""
        self.quit_times -= 1
        if self.document.modified and self.quit_times > 0:
            self.set_status_message(EditorConstants.QUIT_WARNING_MESSAGE.format(self.quit_times))
            return
        self.running = False

    def _handle_filename_prompt(self, key_event: KeyEvent):
        """Handle keypress during the save-as prompt.

        There is no cancel key; Escape is ignored like any other non-text key.
        """
        if key_event.key_type == KeyType.ENTER:
            if self.prompt_input:
                filename = self.prompt_input
                self.prompt_mode = None
                self.prompt_input = ""
                self.set_status_message("")
                self.save_file(filename)
        elif key_event.key_type == KeyType.BACKSPACE:
            self.prompt_input = self.prompt_input[:-1]
        elif key_event.key_type == KeyType.PRINTABLE and 0x20 <= key_event.code < 0x7f:
            self.prompt_input += chr(key_event.code)

    # --- Editing ---

    def insert_char(self, byte: int) -> None:
        """Insert ``byte`` at the cursor, creating a row on the virtual line."""
        cursor = self.view.cursor
        if cursor.y == self.document.row_count:
            self.document.insert_row_at(self.document.row_count, b"")
        self.document.insert_char(self.document[cursor.y], cursor.x, byte)
        cursor.x += 1

    def insert_newline(self) -> None:
        cursor = self.view.cursor
        if cursor.x == 0:
            self.document.insert_row_at(cursor.y, b"")
        else:
            self.document.split_row_at(cursor.y, cursor.x)
        cursor.y += 1
        cursor.x = 0

    def delete_char(self) -> None:
        """Delete the byte before the cursor, joining rows at column 0."""
        cursor = self.view.cursor
        if cursor.y == self.document.row_count:
            return
        if cursor.x == 0 and cursor.y == 0:
            return
        if cursor.x > 0:
            self.document.delete_char(self.document[cursor.y], cursor.x - 1)
            cursor.x -= 1
        else:
            cursor.x = self.document.join_with_previous(cursor.y)
            cursor.y -= 1

    # --- Files ---

    def load_file(self, filename: str):
        """Load a file into the editor.

        Read errors, a missing file included, propagate to the caller.

        Args:
            filename: Path to file to load
        """
        lines = load_lines(filename)
        self.document = Document.from_lines(lines, filename=filename)
        self.view.document = self.document
        self.view.cursor.x = self.view.cursor.y = 0
        self.view.row_offset = self.view.col_offset = 0
        self.view.reflow()

    def save_file(self, filename: str) -> bool:
        """Save the document to ``filename``.

        Failures are reported on the message bar; the document is kept and
        stays modified.

        Returns:
            True if save succeeded, False otherwise
        """
        try:
            written = save_lines(filename, self.document.lines())
        except OSError as e:
            logger.warning("saving %s failed: %s", filename, e)
            self.set_status_message(EditorConstants.SAVE_ERROR_MESSAGE.format(e.strerror or e))
            return False
        self.document.mark_saved(filename)
        self.set_status_message(EditorConstants.SAVED_MESSAGE.format(written))
        return True

    def _handle_save(self):
        """Handle Ctrl-S save command."""
        if self.document.filename:
            self.save_file(self.document.filename)
        else:
            self.prompt_mode = 'save_filename'
            self.prompt_input = ""
