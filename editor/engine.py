"""Prompt protocol and command runner

A command is a generator function ``run(ctx)``. Every prompt is a
suspension point::

    result = yield from ctx.editor.get_point(PointOptions("Specify first point"))

The runner resumes the generator with each input event sent by the host
until the command returns, fails or is cancelled.
"""
import inspect
import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, Optional

from cad_engine.document import DocumentBusyError
from cad_engine.settings import DEFAULT_OFFSET_DISTANCE
from .command_line import CommandLine, LoggingCommandLine, MessageType
from .events import CancelInput, InputEvent
from .interpreter import Interpretation, InputInterpreter
from .jigs import clear_jig
from .prompts import (DistanceOptions, EntityOptions, KeywordOptions, PointOptions,
                      PromptOptions, PromptResult, SelectionOptions, format_prompt)

logger = logging.getLogger(__name__)

Prompt = Generator[None, InputEvent, PromptResult]

IDLE_PROMPT = "Command:"


class CommandCancelledError(Exception):
    """Raised inside a command once cancellation has been requested"""


class Editor:
    """Prompt services available to a running command"""

    def __init__(self, document, command_line: CommandLine):
        self.document = document
        self.command_line = command_line
        self.interpreter = InputInterpreter(document)
        self.cancel_requested = False

    def print(self, message: str, severity: MessageType = MessageType.RESPONSE):
        self.command_line.print(message, severity)

    def check_cancelled(self):
        """Poll point for cancellation, called at the top of command loops"""
        if self.cancel_requested:
            raise CommandCancelledError()

    def get_point(self, options: PointOptions) -> Prompt:
        return (yield from self._prompt(options, self.interpreter.interpret_point))

    def get_distance(self, options: DistanceOptions) -> Prompt:
        return (yield from self._prompt(options, self.interpreter.interpret_distance))

    def get_selection(self, options: SelectionOptions) -> Prompt:
        return (yield from self._prompt(options, self.interpreter.interpret_selection))

    def get_entity(self, options: EntityOptions) -> Prompt:
        return (yield from self._prompt(options, self.interpreter.interpret_entity))

    def get_keywords(self, options: KeywordOptions) -> Prompt:
        return (yield from self._prompt(options, self.interpreter.interpret_keywords))

    def _prompt(self, options: PromptOptions,
                interpret: Callable[[InputEvent, Any], Interpretation]) -> Prompt:
        self.check_cancelled()
        jig = getattr(options, "jig", None)
        self.command_line.set_prompt(format_prompt(options.message, options.keywords))
        try:
            while True:
                event = yield
                outcome = interpret(event, options)
                if outcome.message:
                    self.print(outcome.message, outcome.severity)
                if outcome.preview is not None and jig is not None:
                    jig.update(outcome.preview)
                if outcome.terminal:
                    return outcome.result
        finally:
            clear_jig(jig)
            self.command_line.set_prompt("")


@dataclass
class CommandContext:
    """Everything a command may touch while it runs"""
    editor: Editor
    document: Any
    runner: 'CommandRunner'
    variables: Dict[str, Any] = field(default_factory=dict)


class CommandRunner:
    """Runs one command at a time and feeds it host input events"""

    def __init__(self, document, command_line: Optional[CommandLine] = None, registry=None):
        self.document = document
        self.command_line = command_line or LoggingCommandLine()
        self.registry = registry
        self.editor = Editor(document, self.command_line)
        # Values remembered between runs (e.g. the last offset distance)
        self.variables: Dict[str, Any] = {"OFFSETDIST": DEFAULT_OFFSET_DISTANCE}

        self.current = None
        self._generator: Optional[Generator] = None
        self._exit_stack: Optional[ExitStack] = None
        self.command_line.set_prompt(IDLE_PROMPT)

    @property
    def running(self) -> bool:
        return self.current is not None

    def start(self, command) -> bool:
        """Start a command given its CommandSpec or a registered name"""
        spec = command
        if isinstance(command, str):
            spec = self.registry.find(command) if self.registry else None
            if spec is None:
                self.command_line.print(f"Unknown command \"{command.upper()}\"",
                                        MessageType.ERROR)
                return False

        if self.running:
            self.command_line.print(f"{self.current.global_name} is already running",
                                    MessageType.ERROR)
            return False

        exit_stack = ExitStack()
        try:
            exit_stack.enter_context(self.document.exclusive_access(self))
        except DocumentBusyError as exc:
            self.command_line.print(str(exc), MessageType.ERROR)
            return False

        self._exit_stack = exit_stack
        self.current = spec
        self.editor.cancel_requested = False
        self.command_line.print(spec.global_name, MessageType.COMMAND)
        logger.info(f"Command {spec.global_name} started")

        context = CommandContext(self.editor, self.document, self, self.variables)
        self._guarded(lambda: self._begin(spec, context))
        return True

    def _begin(self, spec, context: CommandContext):
        routine = spec.run(context)
        if not inspect.isgenerator(routine):
            self._finish()
            return
        self._generator = routine
        routine.send(None)

    def send(self, event: InputEvent) -> bool:
        """Forward one host event to the running command"""
        if not self.running or self._generator is None:
            return False
        if isinstance(event, CancelInput):
            self.cancel()
            return True
        self._guarded(lambda: self._generator.send(event))
        return True

    def cancel(self):
        """Request cancellation of the running command"""
        if not self.running:
            return
        self.editor.cancel_requested = True
        self.command_line.print("*Cancel*", MessageType.RESPONSE)
        if self._generator is not None:
            self._guarded(lambda: self._generator.send(CancelInput()))
        if self.running:
            # The command kept going without prompting again
            self._guarded(lambda: self._generator.throw(CommandCancelledError()))

    def _guarded(self, step: Callable[[], None]):
        name = self.current.global_name if self.current else "?"
        try:
            step()
        except StopIteration:
            self._finish()
        except CommandCancelledError:
            logger.info(f"Command {name} cancelled")
            self._finish()
        except Exception as exc:
            logger.exception(f"Command {name} failed")
            self.command_line.print(f"Error: {exc}", MessageType.ERROR)
            self._finish()

    def _finish(self):
        """Cleanup run on every exit path"""
        name = self.current.global_name if self.current else "?"
        generator, self._generator = self._generator, None
        try:
            if generator is not None:
                generator.close()
            self.document.cancel_drawing()
            self.document.clear_highlight()
            self.document.clear_selection()
        finally:
            self.current = None
            self.editor.cancel_requested = False
            if self._exit_stack is not None:
                self._exit_stack.close()
                self._exit_stack = None
            self.command_line.set_prompt(IDLE_PROMPT)
            logger.info(f"Command {name} finished")
