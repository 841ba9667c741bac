"""Geometry operations used by the editing commands

Everything here works on entity data only: no document, no undo log.
Functions that build new geometry return fresh entities without a handle;
the caller adds them to the document.
"""
import logging
import math
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .geometry import (Arc, Circle, Dimension, Entity, Line, Point2D, Polyline,
                       point_segment_distance)
from .settings import (COLLINEAR_TOLERANCE, DIMENSION_MIN_LENGTH, JOIN_TOLERANCE,
                       LENGTH_EPSILON)

logger = logging.getLogger(__name__)

OFFSETTABLE_TYPES = ("LINE", "CIRCLE", "ARC", "POLYLINE", "LWPOLYLINE")

# Longest corner extension allowed, as a multiple of the offset distance
MITER_LIMIT = 4.0


# ---------------------------------------------------------------------------
# Displacement
# ---------------------------------------------------------------------------

def apply_displacement(entity: Entity, dx: float, dy: float):
    """Translate every position-bearing field of entity in place.

    Raises UnsupportedEntityError for variants without a translation rule.
    """
    entity.translate(dx, dy)


def displace_entities(entities: Iterable[Entity], dx: float, dy: float) -> int:
    count = 0
    for entity in entities:
        apply_displacement(entity, dx, dy)
        count += 1
    return count


# ---------------------------------------------------------------------------
# Circles and arcs through points
# ---------------------------------------------------------------------------

def circumcircle(p1: Point2D, p2: Point2D, p3: Point2D) -> Optional[Tuple[Point2D, float]]:
    """Center and radius of the circle through three points, None if collinear"""
    ax, ay = p1.x, p1.y
    bx, by = p2.x, p2.y
    cx, cy = p3.x, p3.y

    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < COLLINEAR_TOLERANCE:
        return None

    a_sq = ax * ax + ay * ay
    b_sq = bx * bx + by * by
    c_sq = cx * cx + cy * cy

    ux = (a_sq * (by - cy) + b_sq * (cy - ay) + c_sq * (ay - by)) / d
    uy = (a_sq * (cx - bx) + b_sq * (ax - cx) + c_sq * (bx - ax)) / d

    center = Point2D(ux, uy)
    return center, center.distance_to(p1)


def angle_of(center: Point2D, point: Point2D) -> float:
    """Polar angle of point around center, degrees in [0, 360)"""
    return math.degrees(math.atan2(point.y - center.y, point.x - center.x)) % 360.0


def arc_through_points(start: Point2D, middle: Point2D, end: Point2D) -> Optional[Arc]:
    """Arc from start through middle to end, None if the points are collinear"""
    circle = circumcircle(start, middle, end)
    if circle is None:
        return None
    center, radius = circle

    # Arcs run counter-clockwise; swap the ends for a clockwise pick order
    cross = (middle.x - start.x) * (end.y - start.y) - (middle.y - start.y) * (end.x - start.x)
    if cross > 0:
        first, last = start, end
    else:
        first, last = end, start
    return Arc(center=center, radius=radius,
               start_angle=angle_of(center, first), end_angle=angle_of(center, last))


def circle_from_diameter(p1: Point2D, p2: Point2D) -> Tuple[Point2D, float]:
    center = Point2D((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
    return center, p1.distance_to(p2) / 2


def rectangle_vertices(p1: Point2D, p2: Point2D) -> List[Point2D]:
    """Four corners of the axis aligned rectangle spanned by p1 and p2"""
    return [
        Point2D(p1.x, p1.y),
        Point2D(p2.x, p1.y),
        Point2D(p2.x, p2.y),
        Point2D(p1.x, p2.y),
    ]


# ---------------------------------------------------------------------------
# Offset
# ---------------------------------------------------------------------------

def distance_to_entity(entity: Entity, point: Point2D) -> Optional[float]:
    """Shortest distance from point to an offsettable entity"""
    if isinstance(entity, Line):
        return point_segment_distance(point, entity.start, entity.end)
    if isinstance(entity, (Circle, Arc)):
        return abs(entity.center.distance_to(point) - entity.radius)
    if isinstance(entity, Polyline) and entity.vertices:
        if len(entity.vertices) == 1:
            return entity.vertices[0].distance_to(point)
        return min(point_segment_distance(point, a, b) for a, b in entity.segments())
    return None


def offset_line(line: Line, distance: float, side_point: Point2D) -> Optional[Line]:
    direction = (line.end - line.start).normalized()
    if direction is None:
        return None

    normal = direction.perpendicular()
    side = 1.0 if (side_point - line.midpoint()).dot(normal) > 0 else -1.0
    shift = normal * (side * distance)

    result = line.copy()
    result.start = line.start + shift
    result.end = line.end + shift
    return result


def _offset_radius(center: Point2D, radius: float, distance: float,
                   side_point: Point2D) -> Optional[float]:
    is_outside = center.distance_to(side_point) > radius
    new_radius = radius + distance if is_outside else radius - distance
    if new_radius <= 0:
        return None
    return new_radius


def offset_circle(circle: Circle, distance: float, side_point: Point2D) -> Optional[Circle]:
    new_radius = _offset_radius(circle.center, circle.radius, distance, side_point)
    if new_radius is None:
        return None
    result = circle.copy()
    result.radius = new_radius
    return result


def offset_arc(arc: Arc, distance: float, side_point: Point2D) -> Optional[Arc]:
    new_radius = _offset_radius(arc.center, arc.radius, distance, side_point)
    if new_radius is None:
        return None
    result = arc.copy()
    result.radius = new_radius
    return result


def _edge_normals(points: np.ndarray, closed: bool) -> np.ndarray:
    """Unit left normals of every edge (zero rows for degenerate edges)"""
    if closed:
        edges = np.roll(points, -1, axis=0) - points
    else:
        edges = points[1:] - points[:-1]
    lengths = np.linalg.norm(edges, axis=1)
    normals = np.column_stack((-edges[:, 1], edges[:, 0]))
    valid = lengths > LENGTH_EPSILON
    normals[valid] /= lengths[valid][:, None]
    normals[~valid] = 0.0
    return normals


def _miter_vectors(points: np.ndarray, closed: bool) -> np.ndarray:
    """Per-vertex offset vector for a unit distance to the left of the path"""
    count = len(points)
    normals = _edge_normals(points, closed)
    edge_count = len(normals)
    miters = np.zeros_like(points)

    for i in range(count):
        incoming = normals[(i - 1) % edge_count] if (closed or i > 0) else None
        outgoing = normals[i] if (closed or i < edge_count) else None

        adjacent = [n for n in (incoming, outgoing) if n is not None and n.any()]
        if not adjacent:
            continue
        if len(adjacent) == 1:
            miters[i] = adjacent[0]
            continue

        average = adjacent[0] + adjacent[1]
        length = np.linalg.norm(average)
        if length < LENGTH_EPSILON:
            # Edges fold back onto each other
            miters[i] = adjacent[0]
            continue
        direction = average / length
        # Stretch along the bisector so both edges stay at the offset distance
        cos_half = float(np.dot(direction, adjacent[0]))
        scale = min(1.0 / cos_half, MITER_LIMIT) if cos_half > LENGTH_EPSILON else MITER_LIMIT
        miters[i] = direction * scale

    return miters


def _polyline_side(polyline: Polyline, side_point: Point2D) -> float:
    """+1 when side_point is left of the nearest segment, -1 when right"""
    best_distance = math.inf
    best_sign = 1.0
    for a, b in polyline.segments():
        direction = (b - a).normalized()
        if direction is None:
            continue
        d = point_segment_distance(side_point, a, b)
        if d < best_distance:
            best_distance = d
            cross = direction.x * (side_point.y - a.y) - direction.y * (side_point.x - a.x)
            best_sign = -1.0 if cross < 0 else 1.0
    return best_sign


def offset_polyline(polyline: Polyline, distance: float,
                    side_point: Point2D) -> Optional[Polyline]:
    """Mitred offset of every vertex; self intersections are not resolved"""
    if len(polyline.vertices) < 2:
        return None

    points = np.array([[v.x, v.y] for v in polyline.vertices], dtype=float)
    closed = polyline.closed and len(points) > 2
    miters = _miter_vectors(points, closed)
    side = _polyline_side(polyline, side_point)

    shifted = points + miters * (side * distance)

    result = polyline.copy()
    result.vertices = [Point2D(float(x), float(y)) for x, y in shifted]
    return result


def offset_entity(entity: Entity, distance: float, side_point: Point2D) -> Optional[Entity]:
    """Parallel copy of entity at distance on the side of side_point.

    Returns None when the entity cannot be offset (unsupported type,
    degenerate line, non-positive resulting radius).
    """
    if isinstance(entity, Line):
        return offset_line(entity, distance, side_point)
    if isinstance(entity, Circle):
        return offset_circle(entity, distance, side_point)
    if isinstance(entity, Arc):
        return offset_arc(entity, distance, side_point)
    if isinstance(entity, Polyline):
        return offset_polyline(entity, distance, side_point)
    logger.debug(f"Offset not supported for {type(entity).__name__}")
    return None


# ---------------------------------------------------------------------------
# Polyline editing
# ---------------------------------------------------------------------------

def _points_close(p1: Point2D, p2: Point2D, tolerance: float) -> bool:
    return p1.distance_to(p2) < tolerance


def _join_vertices(entity: Entity) -> Optional[List[Point2D]]:
    if isinstance(entity, Line):
        return [entity.start, entity.end]
    if isinstance(entity, Polyline) and entity.vertices:
        return list(entity.vertices)
    return None


def join_by_proximity(base: Polyline, other: Entity, tolerance: float = JOIN_TOLERANCE) -> bool:
    """Append or prepend other (line or polyline) to base if their ends meet.

    Pairings are tried in order: base end / other start, base end / other
    end, base start / other end, base start / other start. The first one
    within tolerance wins. Returns False and leaves base untouched otherwise.
    """
    other_vertices = _join_vertices(other)
    if not base.vertices or not other_vertices:
        return False

    first = base.vertices[0]
    last = base.vertices[-1]
    other_first = other_vertices[0]
    other_last = other_vertices[-1]

    if _points_close(last, other_first, tolerance):
        base.vertices.extend(other_vertices[1:])
        return True

    if _points_close(last, other_last, tolerance):
        reversed_other = other_vertices[::-1]
        base.vertices.extend(reversed_other[1:])
        return True

    if _points_close(first, other_last, tolerance):
        base.vertices[0:0] = other_vertices[:-1]
        return True

    if _points_close(first, other_first, tolerance):
        reversed_other = other_vertices[::-1]
        base.vertices[0:0] = reversed_other[:-1]
        return True

    return False


def insert_vertex(polyline: Polyline, index: int, point: Point2D):
    polyline.vertices.insert(index, Point2D(point.x, point.y))


def move_vertex(polyline: Polyline, index: int, point: Point2D):
    polyline.vertices[index] = Point2D(point.x, point.y)


def delete_vertex(polyline: Polyline, index: int) -> bool:
    """Remove a vertex; a polyline keeps at least two"""
    if len(polyline.vertices) <= 2:
        return False
    del polyline.vertices[index]
    return True


def reverse_polyline(polyline: Polyline):
    polyline.vertices.reverse()


def line_to_polyline(line: Line) -> Polyline:
    return Polyline(
        vertices=[line.start, line.end],
        closed=False,
        layer=line.layer,
        color=line.color,
        line_type=line.line_type,
    )


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

DIMENSION_TYPES = ("auto", "horizontal", "vertical", "aligned")


def dimension_orientation(p1: Point2D, p2: Point2D, location: Point2D) -> str:
    """Horizontal when the location is further above/below the midpoint than beside it"""
    mid_x = (p1.x + p2.x) / 2
    mid_y = (p1.y + p2.y) / 2
    if abs(location.y - mid_y) > abs(location.x - mid_x):
        return "horizontal"
    return "vertical"


def linear_dimension(p1: Point2D, p2: Point2D, location: Point2D,
                     dim_type: str = "auto") -> Optional[Dimension]:
    """Dimension measuring p1-p2 with its dimension line through location.

    Returns None when the measured length is below DIMENSION_MIN_LENGTH.
    """
    if dim_type not in DIMENSION_TYPES:
        raise ValueError(f"Unknown dimension type '{dim_type}'")
    if dim_type == "auto":
        dim_type = dimension_orientation(p1, p2, location)

    mid = Point2D((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)

    if dim_type == "horizontal":
        measurement = abs(p2.x - p1.x)
        rotation = 0.0
        definition = Point2D(p2.x, location.y)
        text = Point2D(mid.x, location.y)
    elif dim_type == "vertical":
        measurement = abs(p2.y - p1.y)
        rotation = 90.0
        definition = Point2D(location.x, p2.y)
        text = Point2D(location.x, mid.y)
    else:
        measurement = p1.distance_to(p2)
        direction = (p2 - p1).normalized()
        if direction is None:
            return None
        normal = direction.perpendicular()
        shift = normal * (location - p1).dot(normal)
        rotation = angle_of(p1, p2)
        definition = p2 + shift
        text = mid + shift

    if measurement < DIMENSION_MIN_LENGTH:
        return None
    return Dimension(first_point=p1, second_point=p2, definition_point=definition,
                     text_midpoint=text, measurement=measurement, rotation=rotation,
                     dim_type=dim_type)
