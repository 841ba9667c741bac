"""Raw input events forwarded by the host"""
from dataclasses import dataclass
from typing import Optional, Union

from cad_engine.geometry import Point2D


@dataclass(frozen=True)
class PointerClick:
    """Left click resolved to world coordinates (and the entity under it, if any)"""
    point: Point2D
    entity_handle: Optional[str] = None


@dataclass(frozen=True)
class PointerMove:
    point: Point2D


@dataclass(frozen=True)
class TextInput:
    """One line typed on the command line (Enter pressed)"""
    text: str


@dataclass(frozen=True)
class CancelInput:
    """Escape key or a cancel request from the host"""


InputEvent = Union[PointerClick, PointerMove, TextInput, CancelInput]
