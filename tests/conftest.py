"""Shared fixtures: a document, a recording command line and a scripted session"""
import pytest

from cad_engine import CADDocument, Point2D
from editor import CommandRunner, MessageType, PointerClick, PointerMove, TextInput
from tools import build_registry


class RecordingCommandLine:
    """CommandLine that keeps everything it is given"""

    def __init__(self):
        self.lines = []
        self.prompt = ""
        self.prompts = []

    def print(self, message, severity=MessageType.RESPONSE):
        self.lines.append((severity, message))

    def set_prompt(self, text):
        self.prompt = text
        if text:
            self.prompts.append(text)

    def messages(self, severity=None):
        return [message for kind, message in self.lines if severity is None or kind == severity]


class Session:
    """Runs commands with a script of inputs.

    Strings are typed lines, tuples are clicks, anything else is sent as is.
    """

    def __init__(self):
        self.document = CADDocument()
        self.command_line = RecordingCommandLine()
        self.registry = build_registry()
        self.runner = CommandRunner(self.document, self.command_line, self.registry)

    def run(self, name, *inputs):
        self.runner.start(name)
        for item in inputs:
            self.feed(item)
        return self

    def feed(self, item):
        if isinstance(item, str):
            self.runner.send(TextInput(item))
        elif isinstance(item, tuple):
            self.runner.send(PointerClick(Point2D(*item)))
        else:
            self.runner.send(item)

    def move(self, x, y):
        self.runner.send(PointerMove(Point2D(x, y)))

    def errors(self):
        return self.command_line.messages(MessageType.ERROR)

    def output(self):
        return self.command_line.messages()


@pytest.fixture
def document():
    return CADDocument()


@pytest.fixture
def session():
    return Session()
