"""Edi - a small terminal text editor."""

from .model import Document, Row, CursorPosition, render_row, buffer_to_render_column
from .keyboard import KeyDecoder, KeyEvent, KeyType
from .view import Viewport
from .compositor import FrameCompositor, StatusMessage
from .editor import Editor

__all__ = [
    'Document',
    'Row',
    'CursorPosition',
    'render_row',
    'buffer_to_render_column',
    'KeyDecoder',
    'KeyEvent',
    'KeyType',
    'Viewport',
    'FrameCompositor',
    'StatusMessage',
    'Editor',
]
