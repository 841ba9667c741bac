"""PEDIT command: polyline editing"""
import logging
from typing import Callable

from cad_engine.geometry import Line, Polyline
from cad_engine.operations import (delete_vertex, insert_vertex, join_by_proximity,
                                   line_to_polyline, move_vertex, reverse_polyline)
from editor.command_line import MessageType
from editor.jigs import LineJig
from editor.prompts import EntityOptions, Keyword, KeywordOptions, PointOptions, SelectionOptions
from .common import CLOSE, EXIT, plural

logger = logging.getLogger(__name__)

YES = Keyword("Yes", "YES", "Y")
NO = Keyword("No", "NO", "N")
OPEN = Keyword("Open", "OPEN", "O")
JOIN = Keyword("Join", "JOIN", "J")
EDIT_VERTEX = Keyword("Edit vertex", "EDIT", "E")
REVERSE = Keyword("Reverse", "REVERSE", "R")

NEXT = Keyword("Next", "NEXT", "N")
PREVIOUS = Keyword("Previous", "PREVIOUS", "P")
BREAK = Keyword("Break", "BREAK", "B")
INSERT = Keyword("Insert", "INSERT", "I")
MOVE = Keyword("Move", "MOVE", "M")

POLYLINE_TYPES = ("LWPOLYLINE", "POLYLINE")


def modify_polyline(document, polyline: Polyline, change: Callable[[], None], label: str):
    """Apply change to polyline and record the vertex/closed state around it"""
    old_vertices = list(polyline.vertices)
    old_closed = polyline.closed
    change()
    document.record_polyline_modify_action(polyline, old_vertices, old_closed,
                                           list(polyline.vertices), polyline.closed, label)
    document.notify()


def convert_line(document, line: Line) -> Polyline:
    """Replace line by an equivalent two vertex polyline at the same index"""
    index = document.get_entity_index(line)
    polyline = line_to_polyline(line)
    document.delete_entity(line)
    document.add_entity(polyline, index)
    document.record_replace_action([line], [index], [polyline], "PEDIT Convert")
    return polyline


def pedit_command(ctx):
    editor, document = ctx.editor, ctx.document

    picked = yield from editor.get_entity(EntityOptions(
        "Select polyline",
        allowed_types=POLYLINE_TYPES + ("LINE",),
        reject_message="Object selected is not a polyline or line",
    ))
    if not picked.is_ok:
        return

    entity = picked.value
    if document.is_entity_locked(entity):
        editor.print(f"Object is on locked layer \"{entity.layer}\"", MessageType.ERROR)
        return

    if isinstance(entity, Line):
        editor.print("Object selected is not a polyline.")
        answer = yield from editor.get_keywords(KeywordOptions(
            "Do you want to turn it into one?", keywords=[YES, NO], default_keyword="YES"))
        if answer.keyword != "YES":
            return
        polyline = convert_line(document, entity)
        editor.print("Line converted to polyline")
    else:
        polyline = entity

    while True:
        editor.check_cancelled()
        document.highlight_entities([polyline])
        option = yield from editor.get_keywords(KeywordOptions(
            "Enter an option",
            keywords=[OPEN if polyline.closed else CLOSE, JOIN, EDIT_VERTEX, REVERSE, EXIT],
            allow_none=True,
        ))
        if not option.is_keyword or option.keyword == "EXIT":
            break

        if option.keyword == "CLOSE":
            modify_polyline(document, polyline, lambda: setattr(polyline, "closed", True),
                            "PEDIT Close")
            editor.print("Polyline closed", MessageType.SUCCESS)
        elif option.keyword == "OPEN":
            modify_polyline(document, polyline, lambda: setattr(polyline, "closed", False),
                            "PEDIT Open")
            editor.print("Polyline opened", MessageType.SUCCESS)
        elif option.keyword == "REVERSE":
            modify_polyline(document, polyline, lambda: reverse_polyline(polyline),
                            "PEDIT Reverse")
            editor.print("Polyline reversed", MessageType.SUCCESS)
        elif option.keyword == "JOIN":
            yield from join_objects(ctx, polyline)
        elif option.keyword == "EDIT":
            yield from edit_vertices(ctx, polyline)


def join_objects(ctx, polyline: Polyline):
    """Join selected lines/polylines whose ends touch polyline"""
    editor, document = ctx.editor, ctx.document

    if polyline.closed:
        editor.print("Cannot join to a closed polyline", MessageType.ERROR)
        return

    document.clear_selection()
    result = yield from editor.get_selection(SelectionOptions("Select objects to join"))
    document.clear_selection()
    if not result.is_ok:
        return

    candidates = [
        entity for entity in result.value
        if entity is not polyline
        and isinstance(entity, (Line, Polyline))
        and not (isinstance(entity, Polyline) and entity.closed)
        and not document.is_entity_locked(entity)
    ]

    old_vertices = list(polyline.vertices)
    joined = []
    # Repeat passes so chains of segments picked in any order still connect
    progress = True
    while progress:
        progress = False
        for other in candidates:
            if other not in joined and join_by_proximity(polyline, other):
                joined.append(other)
                progress = True

    if not joined:
        editor.print("No objects could be joined")
        return

    with document.undo_group("PEDIT Join"):
        document.record_polyline_modify_action(polyline, old_vertices, polyline.closed,
                                               list(polyline.vertices), polyline.closed,
                                               "PEDIT Join")
        document.delete_entities(joined)
    document.notify()
    editor.print(f"{plural(len(joined), 'object')} joined", MessageType.SUCCESS)


def _show_vertex(ctx, polyline: Polyline, index: int):
    vertex = polyline.vertices[index]
    ctx.document.cancel_drawing()
    ctx.document.add_drawing_point(vertex.x, vertex.y)
    ctx.editor.print(f"Vertex {index + 1} of {len(polyline.vertices)}: "
                     f"({vertex.x:.4f}, {vertex.y:.4f})")


def edit_vertices(ctx, polyline: Polyline):
    editor, document = ctx.editor, ctx.document
    index = 0

    try:
        while polyline.vertices:
            editor.check_cancelled()
            _show_vertex(ctx, polyline, index)
            option = yield from editor.get_keywords(KeywordOptions(
                "Enter a vertex editing option",
                keywords=[NEXT, PREVIOUS, BREAK, INSERT, MOVE, EXIT],
                default_keyword="NEXT",
            ))
            if not option.is_keyword or option.keyword == "EXIT":
                break

            count = len(polyline.vertices)
            vertex = polyline.vertices[index]

            if option.keyword == "NEXT":
                index = (index + 1) % count
            elif option.keyword == "PREVIOUS":
                index = (index - 1) % count
            elif option.keyword == "BREAK":
                position = index
                if count <= 2:
                    editor.print("Cannot delete - polyline needs at least 2 vertices",
                                 MessageType.ERROR)
                    continue
                modify_polyline(document, polyline, lambda: delete_vertex(polyline, position),
                                "PEDIT Vertex")
                index = min(index, len(polyline.vertices) - 1)
                editor.print("Vertex deleted", MessageType.SUCCESS)
            elif option.keyword == "INSERT":
                point = yield from editor.get_point(PointOptions(
                    "Specify location for new vertex", base_point=vertex,
                    jig=LineJig(document, vertex)))
                if point.is_ok:
                    position = index + 1
                    modify_polyline(document, polyline,
                                    lambda: insert_vertex(polyline, position, point.value),
                                    "PEDIT Vertex")
                    index = position
                    editor.print("Vertex inserted", MessageType.SUCCESS)
            elif option.keyword == "MOVE":
                point = yield from editor.get_point(PointOptions(
                    "Specify new location for vertex", base_point=vertex,
                    jig=LineJig(document, vertex)))
                if point.is_ok:
                    position = index
                    modify_polyline(document, polyline,
                                    lambda: move_vertex(polyline, position, point.value),
                                    "PEDIT Vertex")
                    editor.print("Vertex moved", MessageType.SUCCESS)
    finally:
        document.cancel_drawing()
