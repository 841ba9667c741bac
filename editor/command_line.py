"""Command line interface the engine writes to"""
import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class MessageType(Enum):
    COMMAND = "command"
    RESPONSE = "response"
    SUCCESS = "success"
    ERROR = "error"


class CommandLine(Protocol):
    """Anything that can show engine output and the active prompt"""

    def print(self, message: str, severity: MessageType = MessageType.RESPONSE) -> None:
        ...

    def set_prompt(self, text: str) -> None:
        ...


class LoggingCommandLine:
    """Headless command line that sends everything to the log"""

    def __init__(self):
        self.prompt = ""

    def print(self, message: str, severity: MessageType = MessageType.RESPONSE):
        if severity == MessageType.ERROR:
            logger.warning(message)
        else:
            logger.info(message)

    def set_prompt(self, text: str):
        self.prompt = text
