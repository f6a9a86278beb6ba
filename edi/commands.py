"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .keyboard import KeyType, ctrl_key

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> None:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> None:
        self._move(editor, key_event)
        editor.view.reflow()

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class ArrowCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.move_cursor(key_event.key_type)


class PageUpCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.page_up()


class PageDownCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.page_down()


class HomeCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.home()


class EndCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.end()


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> None:
        self._edit(editor, key_event)
        editor.view.reflow()

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the edit."""
        pass


class InsertCharCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.insert_char(key_event.code)


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.insert_newline()


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.delete_char()


class DeleteForwardCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.view.move_cursor(KeyType.ARROW_RIGHT)
        editor.delete_char()


class SystemCommand(EditorCommand):
    """Base class for system commands like save and quit."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> None:
        self._execute_system(editor, key_event)

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.request_quit()


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor._handle_save()


class NoOpCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        pass


class CommandRegistry:
    """Registry for mapping key events to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, Optional[int]], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        arrow = ArrowCommand()
        for key_type in (KeyType.ARROW_UP, KeyType.ARROW_DOWN,
                         KeyType.ARROW_LEFT, KeyType.ARROW_RIGHT):
            self.register((key_type, None), arrow)
        self.register((KeyType.PAGE_UP, None), PageUpCommand())
        self.register((KeyType.PAGE_DOWN, None), PageDownCommand())
        self.register((KeyType.HOME, None), HomeCommand())
        self.register((KeyType.END, None), EndCommand())

        # Editing commands
        self.register((KeyType.ENTER, None), InsertNewlineCommand())
        self.register((KeyType.BACKSPACE, None), BackspaceCommand())
        self.register((KeyType.DELETE, None), DeleteForwardCommand())

        # System commands
        self.register((KeyType.CONTROL, ctrl_key('q')), QuitCommand())
        self.register((KeyType.CONTROL, ctrl_key('s')), SaveCommand())
        self.register((KeyType.CONTROL, ctrl_key('l')), NoOpCommand())
        self.register((KeyType.ESCAPE, None), NoOpCommand())

    def register(self, key: Tuple[KeyType, Optional[int]], command: EditorCommand):
        """Register a command for a key."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, code: Optional[int] = None) -> Optional[EditorCommand]:
        """Get the command for a key."""
        return self._commands.get((key_type, code))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> None:
        """Execute the command for the given key event.

        Unbound non-printable keys are ignored.
        """
        command = self.get_command(key_event.key_type, key_event.code)
        if command:
            command.execute(editor, key_event)
        elif key_event.key_type == KeyType.PRINTABLE:
            # Any other printable byte is inserted at the cursor
            InsertCharCommand().execute(editor, key_event)
