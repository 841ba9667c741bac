"""Drawing commands: LINE, PLINE, CIRCLE, ARC, RECTANGLE"""
import logging
from typing import List, Optional

from cad_engine.geometry import Arc, Circle, Line, Point2D, Polyline
from cad_engine.operations import (angle_of, arc_through_points, circle_from_diameter,
                                   circumcircle, rectangle_vertices)
from cad_engine.settings import LENGTH_EPSILON
from editor.command_line import MessageType
from editor.jigs import Arc3PointJig, CircleJig, LineJig, PolylineJig, RectangleJig
from editor.prompts import DistanceOptions, Keyword, PointOptions, PromptStatus
from .common import CLOSE, UNDO, add_entities, current_layer, plural

logger = logging.getLogger(__name__)

THREE_POINT = Keyword("3P", "3P")
TWO_POINT = Keyword("2P", "2P")
TTR = Keyword("Ttr", "TTR", "T")
DIAMETER = Keyword("Diameter", "DIAMETER", "D")
CENTER = Keyword("Center", "CENTER", "C")


def _next_point_keywords(points: List[Point2D], close_from: int = 2) -> List[Keyword]:
    return [CLOSE, UNDO] if len(points) >= close_from else [UNDO]


def line_command(ctx):
    """Chain of independent line segments"""
    editor, document = ctx.editor, ctx.document

    first = yield from editor.get_point(PointOptions("Specify first point"))
    if not first.is_ok:
        return

    points = [first.value]
    segments: List[Line] = []
    document.add_drawing_point(first.value.x, first.value.y)

    try:
        while points:
            editor.check_cancelled()
            result = yield from editor.get_point(PointOptions(
                "Specify next point",
                keywords=_next_point_keywords(points),
                allow_none=True,
                base_point=points[-1],
                jig=LineJig(document, points[-1]),
            ))

            if result.is_ok:
                segment = Line(start=points[-1], end=result.value, layer=current_layer(document))
                document.add_entity(segment)
                segments.append(segment)
                points.append(result.value)
                document.add_drawing_point(result.value.x, result.value.y)
            elif result.keyword == "CLOSE":
                segment = Line(start=points[-1], end=points[0], layer=current_layer(document))
                document.add_entity(segment)
                segments.append(segment)
                break
            elif result.keyword == "UNDO":
                if segments:
                    document.delete_entity(segments.pop())
                points.pop()
            else:
                break
    finally:
        if segments:
            document.record_add_action(segments, "Line")

    if segments:
        editor.print(f"{plural(len(segments), 'line')} created", MessageType.SUCCESS)


def polyline_command(ctx):
    """Single polyline entity grown vertex by vertex"""
    editor, document = ctx.editor, ctx.document

    first = yield from editor.get_point(PointOptions("Specify start point"))
    if not first.is_ok:
        return

    points = [first.value]
    polyline: Optional[Polyline] = None
    document.add_drawing_point(first.value.x, first.value.y)

    try:
        while points:
            editor.check_cancelled()
            result = yield from editor.get_point(PointOptions(
                "Specify next point",
                keywords=_next_point_keywords(points, close_from=3),
                allow_none=True,
                base_point=points[-1],
                jig=PolylineJig(document, points),
            ))

            if result.is_ok:
                points.append(result.value)
                if polyline is None:
                    polyline = Polyline(vertices=list(points), layer=current_layer(document))
                    document.add_entity(polyline)
                else:
                    polyline.vertices.append(result.value)
                    document.notify()
            elif result.keyword == "CLOSE":
                polyline.closed = True
                document.notify()
                break
            elif result.keyword == "UNDO":
                points.pop()
                if polyline is not None:
                    if len(points) >= 2:
                        polyline.vertices.pop()
                        document.notify()
                    else:
                        document.delete_entity(polyline)
                        polyline = None
            else:
                break
    finally:
        if polyline is not None and document.contains(polyline):
            document.record_add_action([polyline], "Polyline")

    if polyline is not None:
        editor.print(f"Polyline created with {plural(len(polyline.vertices), 'vertex', 'vertices')}",
                     MessageType.SUCCESS)


def _circle_by_radius(ctx, center: Point2D):
    """Ask for the radius (or diameter) around center. Returns a radius or None."""
    editor, document = ctx.editor, ctx.document

    result = yield from editor.get_distance(DistanceOptions(
        "Specify radius of circle",
        keywords=[DIAMETER],
        base_point=center,
        jig=CircleJig(document, center),
    ))
    if result.is_ok:
        return result.value
    if result.keyword != "DIAMETER":
        return None

    result = yield from editor.get_distance(DistanceOptions(
        "Specify diameter of circle",
        base_point=center,
        jig=CircleJig(document, center, diameter=True),
    ))
    if result.is_ok:
        return result.value / 2
    return None


def _pick_points(ctx, messages: List[str]):
    """Prompt for consecutive points, each anchored on the previous one"""
    points: List[Point2D] = []
    for message in messages:
        base = points[-1] if points else None
        jig = LineJig(ctx.document, base) if base is not None else None
        result = yield from ctx.editor.get_point(PointOptions(message, base_point=base, jig=jig))
        if not result.is_ok:
            return None
        points.append(result.value)
    return points


def circle_command(ctx):
    editor, document = ctx.editor, ctx.document

    while True:
        editor.check_cancelled()
        result = yield from editor.get_point(PointOptions(
            "Specify center point for circle",
            keywords=[THREE_POINT, TWO_POINT, TTR],
            allow_none=True,
        ))

        if result.status in (PromptStatus.NONE, PromptStatus.CANCEL):
            return

        center = radius = None
        if result.is_ok:
            center = result.value
            radius = yield from _circle_by_radius(ctx, center)
            if radius is None:
                return

        elif result.keyword == "3P":
            points = yield from _pick_points(ctx, [
                "Specify first point on circle",
                "Specify second point on circle",
                "Specify third point on circle",
            ])
            if points is None:
                return
            circle = circumcircle(*points)
            if circle is None:
                editor.print("Points are collinear - cannot create circle", MessageType.ERROR)
                continue
            center, radius = circle

        elif result.keyword == "2P":
            points = yield from _pick_points(ctx, [
                "Specify first end point of circle's diameter",
                "Specify second end point of circle's diameter",
            ])
            if points is None:
                return
            center, radius = circle_from_diameter(*points)

        elif result.keyword == "TTR":
            editor.print("Ttr (tangent tangent radius) is not implemented", MessageType.ERROR)
            continue

        if radius is None or radius <= LENGTH_EPSILON:
            editor.print("Circle radius must be positive", MessageType.ERROR)
            continue

        add_entities(document, [Circle(center=center, radius=radius,
                                       layer=current_layer(document))], "Circle")
        editor.print(f"Circle created (radius {radius:.4f})", MessageType.SUCCESS)


def arc_command(ctx):
    editor, document = ctx.editor, ctx.document

    while True:
        editor.check_cancelled()
        result = yield from editor.get_point(PointOptions(
            "Specify start point of arc",
            keywords=[CENTER],
            allow_none=True,
        ))

        if result.status in (PromptStatus.NONE, PromptStatus.CANCEL):
            return

        if result.is_ok:
            start = result.value
            second = yield from editor.get_point(PointOptions(
                "Specify second point of arc", base_point=start, jig=LineJig(document, start)))
            if not second.is_ok:
                return
            end = yield from editor.get_point(PointOptions(
                "Specify end point of arc", base_point=second.value,
                jig=Arc3PointJig(document, start, second.value)))
            if not end.is_ok:
                return

            arc = arc_through_points(start, second.value, end.value)
            if arc is None:
                editor.print("Points are collinear - cannot create arc", MessageType.ERROR)
                continue
            arc.layer = current_layer(document)

        else:
            points = yield from _pick_points(ctx, [
                "Specify center point of arc",
                "Specify start point of arc",
            ])
            if points is None:
                return
            center, start = points
            end = yield from editor.get_point(PointOptions(
                "Specify end point of arc", base_point=center, jig=LineJig(document, center)))
            if not end.is_ok:
                return

            radius = center.distance_to(start)
            if radius <= LENGTH_EPSILON:
                editor.print("Arc radius must be positive", MessageType.ERROR)
                continue
            arc = Arc(center=center, radius=radius,
                      start_angle=angle_of(center, start),
                      end_angle=angle_of(center, end.value),
                      layer=current_layer(document))

        add_entities(document, [arc], "Arc")
        editor.print("Arc created", MessageType.SUCCESS)


def rectangle_command(ctx):
    """Closed four vertex polyline from two opposite corners"""
    editor, document = ctx.editor, ctx.document

    while True:
        editor.check_cancelled()
        first = yield from editor.get_point(PointOptions(
            "Specify first corner point", allow_none=True))
        if not first.is_ok:
            return

        corner = first.value
        other = yield from editor.get_point(PointOptions(
            "Specify other corner point",
            base_point=corner,
            jig=RectangleJig(document, corner),
        ))
        if not other.is_ok:
            return

        width = abs(other.value.x - corner.x)
        height = abs(other.value.y - corner.y)
        if width <= LENGTH_EPSILON or height <= LENGTH_EPSILON:
            editor.print("Rectangle has zero width or height", MessageType.ERROR)
            continue

        rectangle = Polyline(vertices=rectangle_vertices(corner, other.value), closed=True,
                             layer=current_layer(document))
        add_entities(document, [rectangle], "Rectangle")
        editor.print(f"Rectangle created ({width:.4f} x {height:.4f})", MessageType.SUCCESS)
