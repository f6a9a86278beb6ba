"""Exceptions raised by the edi editor."""


class EdiError(Exception):
    """Base class for editor errors."""


class TerminalError(EdiError):
    """The terminal could not be configured or read.

    These are fatal: the terminal is in an unknown state, so the session
    unwinds, restores the original mode and the process exits non-zero.
    """
