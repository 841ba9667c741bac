"""Prompt options, results and keyword matching"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from cad_engine.geometry import Point2D


class PromptStatus(Enum):
    OK = "ok"
    KEYWORD = "keyword"
    NONE = "none"
    CANCEL = "cancel"
    ERROR = "error"


@dataclass(frozen=True)
class Keyword:
    """Named alternative answer to a prompt"""
    display_name: str
    global_name: str
    local_name: Optional[str] = None


@dataclass
class PromptResult:
    """Terminal answer of one prompt"""
    status: PromptStatus
    value: Any = None
    keyword: Optional[str] = None

    def __post_init__(self):
        if self.status == PromptStatus.OK and self.value is None:
            raise ValueError("OK result requires a value")
        if self.status == PromptStatus.KEYWORD and not self.keyword:
            raise ValueError("KEYWORD result requires a keyword")
        if self.status != PromptStatus.OK and self.value is not None:
            raise ValueError(f"{self.status.name} result cannot carry a value")
        if self.status != PromptStatus.KEYWORD and self.keyword is not None:
            raise ValueError(f"{self.status.name} result cannot carry a keyword")

    @classmethod
    def ok(cls, value: Any) -> 'PromptResult':
        return cls(PromptStatus.OK, value=value)

    @classmethod
    def from_keyword(cls, keyword: str) -> 'PromptResult':
        return cls(PromptStatus.KEYWORD, keyword=keyword)

    @classmethod
    def none(cls) -> 'PromptResult':
        return cls(PromptStatus.NONE)

    @classmethod
    def cancel(cls) -> 'PromptResult':
        return cls(PromptStatus.CANCEL)

    @classmethod
    def error(cls) -> 'PromptResult':
        return cls(PromptStatus.ERROR)

    @property
    def is_ok(self) -> bool:
        return self.status == PromptStatus.OK

    @property
    def is_keyword(self) -> bool:
        return self.status == PromptStatus.KEYWORD


@dataclass
class PromptOptions:
    """Common options of every prompt"""
    message: str
    keywords: List[Keyword] = field(default_factory=list)
    allow_none: bool = False


@dataclass
class PointOptions(PromptOptions):
    base_point: Optional[Point2D] = None
    jig: Any = None


@dataclass
class DistanceOptions(PromptOptions):
    base_point: Optional[Point2D] = None
    default_value: Optional[float] = None
    only_positive: bool = True
    jig: Any = None


@dataclass
class SelectionOptions(PromptOptions):
    allow_none: bool = True


@dataclass
class EntityOptions(PromptOptions):
    allowed_types: Sequence[str] = ()
    reject_message: str = ""


@dataclass
class KeywordOptions(PromptOptions):
    default_keyword: Optional[str] = None


def format_prompt(message: str, keywords: Sequence[Keyword]) -> str:
    """Render 'message [Kw1/Kw2]:' as shown on the command line"""
    message = message.rstrip().rstrip(":")
    if keywords:
        names = "/".join(k.display_name for k in keywords)
        return f"{message} [{names}]:"
    return f"{message}:"


def match_keyword(text: str, keywords: Sequence[Keyword]) -> Optional[Keyword]:
    """Find the keyword a typed answer refers to.

    Three passes, each walking the list in order: exact global name,
    exact local name, then prefix of the display name. Case is ignored.
    """
    typed = (text or "").strip().upper()
    if not typed:
        return None

    for keyword in keywords:
        if keyword.global_name.upper() == typed:
            return keyword

    for keyword in keywords:
        if keyword.local_name and keyword.local_name.upper() == typed:
            return keyword

    for keyword in keywords:
        if keyword.display_name.upper().startswith(typed):
            return keyword

    return None
