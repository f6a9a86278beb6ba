"""Constants and configuration for the edi editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    VERSION = "0.0.1"

    # Document layout
    TAB_STOP = 8  # Columns between tab stops in the rendered row

    # Screen layout
    RESERVED_LINES = 2  # Status bar + message bar
    EMPTY_LINE_MARKER = b"~"  # Drawn on screen rows past the end of the document
    STATUS_FILENAME_WIDTH = 20  # Filename characters shown in the status bar
    NO_NAME = "[No Name]"
    WELCOME_MESSAGE = "Edi - a small text editor -- Version: {}"

    # Keyboard timing
    ESCAPE_SEQUENCE_TIMEOUT = 0.1  # Wait for the rest of an escape sequence (seconds)
    INPUT_POLL_TIMEOUT = 0.1  # Wait for a keypress before polling again (seconds)

    # Quit guard
    QUIT_TIMES = 2  # Extra Ctrl-Q presses needed to quit with unsaved changes

    # Status messages
    STATUS_MESSAGE_TIMEOUT = 5  # Seconds a status message stays visible
    HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"
    QUIT_WARNING_MESSAGE = (
        "WARNING: File has unsaved changes. Press Ctrl-Q {} more times to quit."
    )
    SAVE_PROMPT = "Save as: {}"
    SAVED_MESSAGE = "{} bytes written to disk"
    SAVE_ERROR_MESSAGE = "Error while saving: {}"

    # Logging
    LOG_LEVEL_ENV = "EDI_LOG_LEVEL"
    LOG_FILENAME = "edi.log"
