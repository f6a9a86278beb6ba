"""Keyboard input decoding from raw terminal bytes."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)

ESC = 0x1b
BACKSPACE_BYTE = 0x7f
CTRL_H = 0x08
TAB = 0x09


def ctrl_key(letter: str) -> int:
    """Control code produced by Ctrl+``letter``."""
    return ord(letter) & 0x1f


class KeyType(Enum):
    """Types of key events."""
    PRINTABLE = "printable"
    CONTROL = "control"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ESCAPE = "escape"


@dataclass(frozen=True)
class KeyEvent:
    """Represents a decoded keyboard event.

    ``code`` carries the byte for PRINTABLE and the control code for
    CONTROL; it is None for every other key type.
    """
    key_type: KeyType
    code: Optional[int] = None
    raw: bytes = b""

    @classmethod
    def printable(cls, byte: int) -> "KeyEvent":
        return cls(KeyType.PRINTABLE, byte, bytes([byte]))

    @classmethod
    def control(cls, code: int) -> "KeyEvent":
        return cls(KeyType.CONTROL, code, bytes([code]))

    @classmethod
    def ctrl(cls, letter: str) -> "KeyEvent":
        return cls.control(ctrl_key(letter))


class DecoderState(Enum):
    START = "start"
    SAW_ESCAPE = "saw_escape"
    SAW_BRACKET = "saw_bracket"


# ESC [ <digit> ~
TILDE_KEYS = {
    ord('1'): KeyType.HOME,
    ord('3'): KeyType.DELETE,
    ord('4'): KeyType.END,
    ord('5'): KeyType.PAGE_UP,
    ord('6'): KeyType.PAGE_DOWN,
    ord('7'): KeyType.HOME,
    ord('8'): KeyType.END,
}

# ESC [ <letter>
BRACKET_KEYS = {
    ord('A'): KeyType.ARROW_UP,
    ord('B'): KeyType.ARROW_DOWN,
    ord('C'): KeyType.ARROW_RIGHT,
    ord('D'): KeyType.ARROW_LEFT,
    ord('H'): KeyType.HOME,
    ord('F'): KeyType.END,
}

# ESC O <letter>
LEGACY_KEYS = {
    ord('H'): KeyType.HOME,
    ord('F'): KeyType.END,
}


def classify_byte(byte: int) -> KeyEvent:
    """Classify a single byte that does not start an escape sequence."""
    if byte in (ord('\r'), ord('\n')):
        return KeyEvent(KeyType.ENTER, raw=bytes([byte]))
    if byte in (BACKSPACE_BYTE, CTRL_H):
        return KeyEvent(KeyType.BACKSPACE, raw=bytes([byte]))
    if byte == TAB:
        return KeyEvent.printable(byte)
    if byte < 0x20:
        return KeyEvent.control(byte)
    return KeyEvent.printable(byte)


class KeyDecoder:
    """Turns the terminal's byte stream into :class:`KeyEvent` objects.

    The source must provide ``read_byte(timeout)`` returning an int, or None
    when no byte arrived within ``timeout`` seconds. Genuine read errors are
    raised by the source and pass through unchanged.
    """

    def __init__(self, source, escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT,
                 poll_timeout: float = EditorConstants.INPUT_POLL_TIMEOUT):
        self.source = source
        self.escape_timeout = escape_timeout
        self.poll_timeout = poll_timeout

    def _wait_byte(self) -> int:
        while True:
            byte = self.source.read_byte(self.poll_timeout)
            if byte is not None:
                return byte

    def read_event(self) -> KeyEvent:
        """Block until one complete key event has been decoded."""
        state = DecoderState.START
        raw = bytearray()
        while True:
            if state is DecoderState.START:
                byte = self._wait_byte()
                raw.append(byte)
                if byte != ESC:
                    return classify_byte(byte)
                state = DecoderState.SAW_ESCAPE

            elif state is DecoderState.SAW_ESCAPE:
                byte = self.source.read_byte(self.escape_timeout)
                if byte is None:
                    return KeyEvent(KeyType.ESCAPE, raw=bytes(raw))
                raw.append(byte)
                if byte == ord('['):
                    state = DecoderState.SAW_BRACKET
                    continue
                if byte == ord('O'):
                    final = self.source.read_byte(self.escape_timeout)
                    if final is not None:
                        raw.append(final)
                        if final in LEGACY_KEYS:
                            return KeyEvent(LEGACY_KEYS[final], raw=bytes(raw))
                return self._unmatched(raw)

            elif state is DecoderState.SAW_BRACKET:
                byte = self.source.read_byte(self.escape_timeout)
                if byte is None:
                    return self._unmatched(raw)
                raw.append(byte)
                if ord('0') <= byte <= ord('9'):
                    final = self.source.read_byte(self.escape_timeout)
                    if final is None:
                        return self._unmatched(raw)
                    raw.append(final)
                    if final == ord('~') and byte in TILDE_KEYS:
                        return KeyEvent(TILDE_KEYS[byte], raw=bytes(raw))
                    return self._unmatched(raw)
                if byte in BRACKET_KEYS:
                    return KeyEvent(BRACKET_KEYS[byte], raw=bytes(raw))
                return self._unmatched(raw)

    def _unmatched(self, raw: bytearray) -> KeyEvent:
        logger.debug("unrecognized escape sequence %r", bytes(raw))
        return KeyEvent(KeyType.ESCAPE, raw=bytes(raw))

    def events(self) -> Iterator[KeyEvent]:
        """Infinite stream of decoded key events."""
        while True:
            yield self.read_event()


def create_key_decoder(source) -> KeyDecoder:
    """Factory function to create a key decoder.

    Args:
        source: Object with a ``read_byte(timeout)`` method

    Returns:
        KeyDecoder instance
    """
    return KeyDecoder(source)
