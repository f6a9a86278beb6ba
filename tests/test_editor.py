"""End-to-end tests of key handling in the editor."""

import os
import tempfile
import unittest
from unittest.mock import MagicMock

from edi.constants import EditorConstants
from edi.editor import Editor
from edi.keyboard import KeyEvent, KeyType


def key(key_type):
    return KeyEvent(key_type)


def type_text(editor, text):
    for byte in text.encode():
        editor.handle_key(KeyEvent.printable(byte))


def make_editor(lines=None, rows=12, cols=40):
    terminal = MagicMock()
    terminal.window_size.return_value = (rows, cols)
    editor = Editor(terminal=terminal, clock=lambda: 1000.0)
    if lines is not None:
        with tempfile.NamedTemporaryFile('wb', suffix='.txt', delete=False) as f:
            f.write(b"".join(line.encode() + b"\n" for line in lines))
        editor.load_file(f.name)
        editor._test_file = f.name
    return editor


class EditorTestCase(unittest.TestCase):

    def tearDown(self):
        name = getattr(getattr(self, 'editor', None), '_test_file', None)
        if name and os.path.exists(name):
            os.remove(name)


class TestEditing(EditorTestCase):

    def test_open_file_renders_tabs(self):
        self.editor = make_editor(["ab\tc", "d", ""])
        doc = self.editor.document
        self.assertEqual(doc.row_count, 3)
        self.assertEqual(doc[0].render, b"ab      c")
        self.assertEqual(doc[1].render, b"d")
        self.assertEqual(doc[2].render, b"")
        self.assertFalse(self.editor.modified)
        self.assertIn(b"ab      c\x1b[K\r\n", self.editor.current_frame())

    def test_backspace_at_line_start_joins(self):
        self.editor = make_editor(["foo", "bar"])
        self.editor.view.cursor.y = 1
        self.editor.handle_key(key(KeyType.BACKSPACE))
        self.assertEqual(self.editor.document.lines(), [b"foobar"])
        self.assertEqual((self.editor.view.cursor.x, self.editor.view.cursor.y), (3, 0))

    def test_backspace_at_document_start_is_noop(self):
        self.editor = make_editor(["foo"])
        self.editor.handle_key(key(KeyType.BACKSPACE))
        self.assertEqual(self.editor.document.lines(), [b"foo"])
        self.assertFalse(self.editor.modified)

    def test_backspace_deletes_previous_char(self):
        self.editor = make_editor(["foo"])
        self.editor.view.cursor.x = 2
        self.editor.handle_key(key(KeyType.BACKSPACE))
        self.assertEqual(self.editor.document.lines(), [b"fo"])
        self.assertEqual(self.editor.view.cursor.x, 1)

    def test_typing_into_empty_document_creates_row(self):
        self.editor = make_editor()
        type_text(self.editor, "hi\tthere")
        self.assertEqual(self.editor.document.lines(), [b"hi\tthere"])
        self.assertEqual(self.editor.view.cursor.x, 8)
        self.assertEqual(self.editor.view.render_x, 13)
        self.assertTrue(self.editor.modified)

    def test_typing_on_virtual_row_appends_line(self):
        self.editor = make_editor(["first"])
        self.editor.handle_key(key(KeyType.ARROW_DOWN))
        type_text(self.editor, "second")
        self.assertEqual(self.editor.document.lines(), [b"first", b"second"])

    def test_enter_splits_line(self):
        self.editor = make_editor(["hello world"])
        self.editor.view.cursor.x = 5
        self.editor.handle_key(key(KeyType.ENTER))
        self.assertEqual(self.editor.document.lines(), [b"hello", b" world"])
        self.assertEqual((self.editor.view.cursor.x, self.editor.view.cursor.y), (0, 1))

    def test_enter_at_column_zero_inserts_line_above(self):
        self.editor = make_editor(["hello"])
        self.editor.handle_key(key(KeyType.ENTER))
        self.assertEqual(self.editor.document.lines(), [b"", b"hello"])
        self.assertEqual((self.editor.view.cursor.x, self.editor.view.cursor.y), (0, 1))

    def test_delete_key_removes_char_under_cursor(self):
        self.editor = make_editor(["abc"])
        self.editor.view.cursor.x = 1
        self.editor.handle_key(key(KeyType.DELETE))
        self.assertEqual(self.editor.document.lines(), [b"ac"])
        self.assertEqual(self.editor.view.cursor.x, 1)

    def test_delete_key_at_line_end_joins_next_line(self):
        self.editor = make_editor(["ab", "cd"])
        self.editor.view.cursor.x = 2
        self.editor.handle_key(key(KeyType.DELETE))
        self.assertEqual(self.editor.document.lines(), [b"abcd"])
        self.assertEqual((self.editor.view.cursor.x, self.editor.view.cursor.y), (2, 0))

    def test_escape_and_unbound_controls_are_ignored(self):
        self.editor = make_editor(["abc"])
        self.editor.handle_key(key(KeyType.ESCAPE))
        self.editor.handle_key(KeyEvent.ctrl('l'))
        self.editor.handle_key(KeyEvent.ctrl('g'))
        self.assertEqual(self.editor.document.lines(), [b"abc"])
        self.assertFalse(self.editor.modified)

    def test_movement_keys(self):
        self.editor = make_editor(["abc", "de"])
        self.editor.handle_key(key(KeyType.END))
        self.assertEqual(self.editor.view.cursor.x, 3)
        self.editor.handle_key(key(KeyType.ARROW_DOWN))
        self.assertEqual((self.editor.view.cursor.x, self.editor.view.cursor.y), (2, 1))
        self.editor.handle_key(key(KeyType.HOME))
        self.assertEqual(self.editor.view.cursor.x, 0)
        self.editor.handle_key(key(KeyType.PAGE_UP))
        self.assertEqual(self.editor.view.cursor.y, 0)
        self.editor.handle_key(key(KeyType.PAGE_DOWN))
        self.assertEqual(self.editor.view.cursor.y, 2)

    def test_modified_flag_tracks_edits_not_movement(self):
        self.editor = make_editor(["abc"])
        registry = self.editor.command_registry
        self.assertIsNone(registry.execute(self.editor, key(KeyType.ARROW_RIGHT)))
        self.assertFalse(self.editor.modified)
        self.assertIsNone(registry.execute(self.editor, KeyEvent.printable(ord("x"))))
        self.assertTrue(self.editor.modified)
        self.assertEqual(self.editor.document.lines(), [b"axbc"])


class TestQuitConfirmation(EditorTestCase):

    def setUp(self):
        self.editor = make_editor(["abc"])
        self.editor.running = True

    def test_quit_without_changes(self):
        self.editor.handle_key(KeyEvent.ctrl('q'))
        self.assertFalse(self.editor.running)

    def test_quit_with_changes_needs_second_press(self):
        type_text(self.editor, "x")
        self.editor.handle_key(KeyEvent.ctrl('q'))
        self.assertTrue(self.editor.running)
        self.assertEqual(self.editor.quit_times, EditorConstants.QUIT_TIMES - 1)
        self.assertIn("unsaved changes", self.editor.status_message.text)
        self.editor.handle_key(KeyEvent.ctrl('q'))
        self.assertFalse(self.editor.running)

    def test_other_key_resets_counter(self):
        type_text(self.editor, "x")
        self.editor.handle_key(KeyEvent.ctrl('q'))
        self.editor.handle_key(key(KeyType.ARROW_LEFT))
        self.assertEqual(self.editor.quit_times, EditorConstants.QUIT_TIMES)
        self.editor.handle_key(KeyEvent.ctrl('q'))
        self.assertTrue(self.editor.running)
        self.editor.handle_key(KeyEvent.ctrl('q'))
        self.assertFalse(self.editor.running)


class TestRun(unittest.TestCase):

    def test_run_draws_and_stops_on_quit(self):
        terminal = MagicMock()
        terminal.window_size.return_value = (10, 30)
        keys = iter(b"hi\x11\x11")
        terminal.read_byte.side_effect = lambda timeout=None: next(keys)
        editor = Editor(terminal=terminal)
        editor.run()
        terminal.raw_mode.assert_called_once()
        terminal.raw_mode.return_value.__exit__.assert_called_once()
        # Initial frame plus one per key that did not end the loop
        self.assertEqual(terminal.write_frame.call_count, 4)
        self.assertEqual(editor.document.lines(), [b"hi"])
        self.assertFalse(editor.running)

    def test_run_restores_terminal_on_error(self):
        terminal = MagicMock()
        terminal.window_size.return_value = (10, 30)
        terminal.read_byte.side_effect = OSError("boom")
        editor = Editor(terminal=terminal)
        with self.assertRaises(OSError):
            editor.run()
        terminal.raw_mode.return_value.__exit__.assert_called_once()

    def test_refresh_follows_window_size(self):
        terminal = MagicMock()
        terminal.window_size.return_value = (10, 30)
        editor = Editor(terminal=terminal)
        terminal.window_size.return_value = (6, 20)
        editor.refresh_screen()
        self.assertEqual((editor.view.screen_rows, editor.view.screen_cols), (4, 20))
        frame = terminal.write_frame.call_args[0][0]
        self.assertEqual(frame.count(b"\r\n"), 5)


if __name__ == '__main__':
    unittest.main()
