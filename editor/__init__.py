"""Interactive command engine"""
from .command_line import CommandLine, LoggingCommandLine, MessageType
from .engine import CommandCancelledError, CommandContext, CommandRunner, Editor
from .events import CancelInput, PointerClick, PointerMove, TextInput
from .prompts import Keyword, PromptResult, PromptStatus
from .registry import CommandRegistry, CommandSpec

__all__ = ['CommandLine', 'LoggingCommandLine', 'MessageType', 'CommandCancelledError',
           'CommandContext', 'CommandRunner', 'Editor', 'CancelInput', 'PointerClick',
           'PointerMove', 'TextInput', 'Keyword', 'PromptResult', 'PromptStatus',
           'CommandRegistry', 'CommandSpec']
