"""CAD Geometry classes"""
from typing import Tuple, List, Optional
from dataclasses import dataclass, field, replace
import math

from .settings import COLOR_BYLAYER, DEFAULT_LAYER, LENGTH_EPSILON


class UnsupportedEntityError(TypeError):
    """Raised when an operation is not defined for an entity variant"""


@dataclass(frozen=True)
class Point2D:
    """Immutable 2-D point / vector"""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> 'Point2D':
        return Point2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __iter__(self):
        yield self.x
        yield self.y

    def dot(self, other: 'Point2D') -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Point2D') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def normalized(self) -> Optional['Point2D']:
        """Unit vector, or None for a (near) zero vector"""
        length = self.length()
        if length < LENGTH_EPSILON:
            return None
        return Point2D(self.x / length, self.y / length)

    def perpendicular(self) -> 'Point2D':
        """Vector rotated 90 degrees counter-clockwise"""
        return Point2D(-self.y, self.x)

    def translated(self, dx: float, dy: float) -> 'Point2D':
        return Point2D(self.x + dx, self.y + dy)


def point_segment_distance(p: Point2D, a: Point2D, b: Point2D) -> float:
    """Distance from p to the segment a-b"""
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy

    if length_sq < LENGTH_EPSILON * LENGTH_EPSILON:
        # Segment is actually a point
        return p.distance_to(a)

    # Parameter t of closest point on segment
    t = max(0.0, min(1.0, ((p.x - a.x) * dx + (p.y - a.y) * dy) / length_sq))
    closest = Point2D(a.x + t * dx, a.y + t * dy)
    return p.distance_to(closest)


def _bounds_of(points: List[Point2D]) -> Tuple[float, float, float, float]:
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def _angle_in_sweep(angle: float, start: float, end: float) -> bool:
    """Check if angle (degrees) lies on the CCW sweep from start to end"""
    sweep = (end - start) % 360.0
    offset = (angle - start) % 360.0
    if sweep == 0.0:
        return True
    return offset <= sweep


@dataclass
class Entity:
    """Base class for all drawing entities"""
    handle: str = ""
    layer: str = DEFAULT_LAYER
    color: int = COLOR_BYLAYER
    line_type: str = "BYLAYER"
    selected: bool = False
    visible: bool = True

    def dxftype(self) -> str:
        raise UnsupportedEntityError(f"No type name for {type(self).__name__}")

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        """Return bounding box (min_x, min_y, max_x, max_y)"""
        raise UnsupportedEntityError(f"No bounding box for {type(self).__name__}")

    def translate(self, dx: float, dy: float):
        """Move all position-bearing fields in place"""
        raise UnsupportedEntityError(f"Cannot displace {type(self).__name__}")

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        """Check if point is close to this entity"""
        return False

    def copy(self) -> 'Entity':
        """Create an unattached copy (no handle, not selected)"""
        return replace(self, handle="", selected=False)


@dataclass
class Line(Entity):
    """Line segment"""
    start: Point2D = field(default_factory=Point2D)
    end: Point2D = field(default_factory=Point2D)

    def dxftype(self) -> str:
        return "LINE"

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        return _bounds_of([self.start, self.end])

    def translate(self, dx: float, dy: float):
        self.start = self.start.translated(dx, dy)
        self.end = self.end.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        return point_segment_distance(Point2D(x, y), self.start, self.end) <= tolerance

    def midpoint(self) -> Point2D:
        return Point2D((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)

    def length(self) -> float:
        """Calculate line length"""
        return self.start.distance_to(self.end)


@dataclass
class Circle(Entity):
    """Circle"""
    center: Point2D = field(default_factory=Point2D)
    radius: float = 0.0

    def dxftype(self) -> str:
        return "CIRCLE"

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        return (self.center.x - self.radius, self.center.y - self.radius,
                self.center.x + self.radius, self.center.y + self.radius)

    def translate(self, dx: float, dy: float):
        self.center = self.center.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        return abs(self.center.distance_to(Point2D(x, y)) - self.radius) <= tolerance


@dataclass
class Arc(Entity):
    """Circular arc, angles in degrees counter-clockwise from start to end"""
    center: Point2D = field(default_factory=Point2D)
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 360.0

    def dxftype(self) -> str:
        return "ARC"

    def point_at(self, angle_deg: float) -> Point2D:
        rad = math.radians(angle_deg)
        return Point2D(self.center.x + self.radius * math.cos(rad),
                       self.center.y + self.radius * math.sin(rad))

    @property
    def start_point(self) -> Point2D:
        return self.point_at(self.start_angle)

    @property
    def end_point(self) -> Point2D:
        return self.point_at(self.end_angle)

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        points = [self.start_point, self.end_point]
        for cardinal in (0.0, 90.0, 180.0, 270.0):
            if _angle_in_sweep(cardinal, self.start_angle, self.end_angle):
                points.append(self.point_at(cardinal))
        return _bounds_of(points)

    def translate(self, dx: float, dy: float):
        self.center = self.center.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        p = Point2D(x, y)
        if abs(self.center.distance_to(p) - self.radius) > tolerance:
            return False
        angle = math.degrees(math.atan2(p.y - self.center.y, p.x - self.center.x))
        return _angle_in_sweep(angle, self.start_angle, self.end_angle)


@dataclass
class Ellipse(Entity):
    """Ellipse given by center, major axis vector and minor/major ratio"""
    center: Point2D = field(default_factory=Point2D)
    major_axis: Point2D = field(default_factory=lambda: Point2D(1.0, 0.0))
    ratio: float = 1.0

    def dxftype(self) -> str:
        return "ELLIPSE"

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        a = self.major_axis.length()
        b = a * self.ratio
        theta = math.atan2(self.major_axis.y, self.major_axis.x)
        half_w = math.hypot(a * math.cos(theta), b * math.sin(theta))
        half_h = math.hypot(a * math.sin(theta), b * math.cos(theta))
        return (self.center.x - half_w, self.center.y - half_h,
                self.center.x + half_w, self.center.y + half_h)

    def translate(self, dx: float, dy: float):
        self.center = self.center.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        a = self.major_axis.length()
        b = a * self.ratio
        if a < LENGTH_EPSILON or b < LENGTH_EPSILON:
            return False
        theta = math.atan2(self.major_axis.y, self.major_axis.x)
        # Express the point in the ellipse frame
        px, py = x - self.center.x, y - self.center.y
        u = px * math.cos(theta) + py * math.sin(theta)
        v = -px * math.sin(theta) + py * math.cos(theta)
        scaled = math.hypot(u / a, v / b)
        return abs(scaled - 1.0) * min(a, b) <= tolerance


@dataclass
class Polyline(Entity):
    """Polyline made of straight segments"""
    vertices: List[Point2D] = field(default_factory=list)
    closed: bool = False
    kind: str = "LWPOLYLINE"

    def dxftype(self) -> str:
        return self.kind

    def segments(self) -> List[Tuple[Point2D, Point2D]]:
        """Segments in drawing order, including the closing one"""
        pairs = list(zip(self.vertices, self.vertices[1:]))
        if self.closed and len(self.vertices) > 2:
            pairs.append((self.vertices[-1], self.vertices[0]))
        return pairs

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        if not self.vertices:
            return (0.0, 0.0, 0.0, 0.0)
        return _bounds_of(self.vertices)

    def translate(self, dx: float, dy: float):
        self.vertices = [v.translated(dx, dy) for v in self.vertices]

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        p = Point2D(x, y)
        if len(self.vertices) == 1:
            return self.vertices[0].distance_to(p) <= tolerance
        return any(point_segment_distance(p, a, b) <= tolerance for a, b in self.segments())

    def copy(self) -> 'Polyline':
        return replace(self, handle="", selected=False, vertices=list(self.vertices))


@dataclass
class Spline(Entity):
    """Spline; only its defining points are edited, curve fitting is not evaluated"""
    control_points: List[Point2D] = field(default_factory=list)
    fit_points: List[Point2D] = field(default_factory=list)
    degree: int = 3

    def dxftype(self) -> str:
        return "SPLINE"

    def _hull(self) -> List[Point2D]:
        return self.control_points or self.fit_points

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        hull = self._hull()
        if not hull:
            return (0.0, 0.0, 0.0, 0.0)
        return _bounds_of(hull)

    def translate(self, dx: float, dy: float):
        self.control_points = [p.translated(dx, dy) for p in self.control_points]
        self.fit_points = [p.translated(dx, dy) for p in self.fit_points]

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        hull = self._hull()
        p = Point2D(x, y)
        return any(point_segment_distance(p, a, b) <= tolerance for a, b in zip(hull, hull[1:]))

    def copy(self) -> 'Spline':
        return replace(self, handle="", selected=False,
                       control_points=list(self.control_points),
                       fit_points=list(self.fit_points))


@dataclass
class Text(Entity):
    """Single or multi line text"""
    position: Point2D = field(default_factory=Point2D)
    text: str = ""
    height: float = 2.5
    rotation: float = 0.0
    kind: str = "TEXT"

    def dxftype(self) -> str:
        return self.kind

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        # Rough extent: 0.6 x height per character
        width = 0.6 * self.height * max(len(self.text), 1)
        return (self.position.x, self.position.y,
                self.position.x + width, self.position.y + self.height)

    def translate(self, dx: float, dy: float):
        self.position = self.position.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        min_x, min_y, max_x, max_y = self.get_bounding_box()
        return (min_x - tolerance <= x <= max_x + tolerance and
                min_y - tolerance <= y <= max_y + tolerance)


@dataclass
class Point(Entity):
    """Point entity"""
    position: Point2D = field(default_factory=Point2D)

    def dxftype(self) -> str:
        return "POINT"

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        return (self.position.x, self.position.y, self.position.x, self.position.y)

    def translate(self, dx: float, dy: float):
        self.position = self.position.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        return self.position.distance_to(Point2D(x, y)) <= tolerance


@dataclass
class Insert(Entity):
    """Block reference"""
    block_name: str = ""
    position: Point2D = field(default_factory=Point2D)
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0

    def dxftype(self) -> str:
        return "INSERT"

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        return (self.position.x, self.position.y, self.position.x, self.position.y)

    def translate(self, dx: float, dy: float):
        self.position = self.position.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        return self.position.distance_to(Point2D(x, y)) <= tolerance


@dataclass
class Dimension(Entity):
    """Linear dimension: two extension line origins measured along a direction.

    definition_point lies on the dimension line, rotation (degrees) is the
    direction of that line.
    """
    first_point: Point2D = field(default_factory=Point2D)
    second_point: Point2D = field(default_factory=Point2D)
    definition_point: Point2D = field(default_factory=Point2D)
    text_midpoint: Point2D = field(default_factory=Point2D)
    measurement: float = 0.0
    rotation: float = 0.0
    dim_type: str = "linear"

    def dxftype(self) -> str:
        return "DIMENSION"

    def dimension_line(self) -> Tuple[Point2D, Point2D]:
        """Extension line origins projected onto the dimension line"""
        rad = math.radians(self.rotation)
        direction = Point2D(math.cos(rad), math.sin(rad))
        base = self.definition_point
        return tuple(base + direction * (p - base).dot(direction)
                     for p in (self.first_point, self.second_point))

    def get_bounding_box(self) -> Tuple[float, float, float, float]:
        return _bounds_of([self.first_point, self.second_point, *self.dimension_line(),
                           self.text_midpoint])

    def translate(self, dx: float, dy: float):
        self.first_point = self.first_point.translated(dx, dy)
        self.second_point = self.second_point.translated(dx, dy)
        self.definition_point = self.definition_point.translated(dx, dy)
        self.text_midpoint = self.text_midpoint.translated(dx, dy)

    def contains_point(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        p = Point2D(x, y)
        start, end = self.dimension_line()
        segments = [(start, end), (self.first_point, start), (self.second_point, end)]
        return any(point_segment_distance(p, a, b) <= tolerance for a, b in segments)
