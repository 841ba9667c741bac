"""Coordinate input parsing for the command line

Accepted forms (whitespace is ignored):
    x,y        absolute point
    @dx,dy     relative to the base point
    @d<angle   polar, relative to the base point, angle in degrees
"""
import math
import re
from dataclasses import dataclass
from typing import Optional

from cad_engine.geometry import Point2D
from cad_engine.settings import DISPLAY_DECIMALS

_NUMBER = r"(-?\d+\.?\d*)"

POLAR_PATTERN = re.compile(rf"^@{_NUMBER}<{_NUMBER}$")
RELATIVE_PATTERN = re.compile(rf"^@{_NUMBER},{_NUMBER}$")
ABSOLUTE_PATTERN = re.compile(rf"^{_NUMBER},{_NUMBER}$")
NUMBER_PATTERN = re.compile(rf"^{_NUMBER}$")

_WHITESPACE = re.compile(r"\s+")


@dataclass
class ParseResult:
    """Outcome of parsing one line of coordinate input"""
    success: bool
    point: Optional[Point2D] = None
    error: str = ""


def _clean(text: str) -> str:
    return _WHITESPACE.sub("", text or "")


def parse_coordinate(text: str, base_point: Optional[Point2D] = None) -> ParseResult:
    """Parse typed text into an absolute point"""
    cleaned = _clean(text)
    base = base_point if base_point is not None else Point2D(0.0, 0.0)

    match = POLAR_PATTERN.match(cleaned)
    if match:
        dist = float(match.group(1))
        angle_rad = math.radians(float(match.group(2)))
        return ParseResult(True, Point2D(base.x + dist * math.cos(angle_rad),
                                         base.y + dist * math.sin(angle_rad)))

    match = RELATIVE_PATTERN.match(cleaned)
    if match:
        return ParseResult(True, Point2D(base.x + float(match.group(1)),
                                         base.y + float(match.group(2))))

    match = ABSOLUTE_PATTERN.match(cleaned)
    if match:
        return ParseResult(True, Point2D(float(match.group(1)), float(match.group(2))))

    return ParseResult(False, error=f"Invalid coordinate format: '{text}'")


def is_coordinate_input(text: str) -> bool:
    cleaned = _clean(text)
    return bool(POLAR_PATTERN.match(cleaned) or RELATIVE_PATTERN.match(cleaned)
                or ABSOLUTE_PATTERN.match(cleaned))


def is_number_input(text: str) -> bool:
    return bool(NUMBER_PATTERN.match(_clean(text)))


def parse_number(text: str) -> Optional[float]:
    """Parse a plain number, None if text is not one"""
    cleaned = _clean(text)
    if not NUMBER_PATTERN.match(cleaned):
        return None
    return float(cleaned)


def format_point(point: Point2D, decimals: int = DISPLAY_DECIMALS) -> str:
    return f"{point.x:.{decimals}f}, {point.y:.{decimals}f}"


def distance(p1: Point2D, p2: Point2D) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def angle(p1: Point2D, p2: Point2D) -> float:
    """Direction from p1 to p2 in degrees, counter-clockwise from +X"""
    return math.degrees(math.atan2(p2.y - p1.y, p2.x - p1.x))
