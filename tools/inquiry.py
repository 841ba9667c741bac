"""DIST, UNDO and REDO commands"""
import logging

from editor.command_line import MessageType
from editor.coordinates import angle, distance, format_point
from editor.jigs import LineJig
from editor.prompts import PointOptions

logger = logging.getLogger(__name__)


def dist_command(ctx):
    """Measure the distance and angle between two points"""
    editor, document = ctx.editor, ctx.document

    first = yield from editor.get_point(PointOptions("Specify first point"))
    if not first.is_ok:
        return
    document.add_drawing_point(first.value.x, first.value.y)

    second = yield from editor.get_point(PointOptions(
        "Specify second point", base_point=first.value, jig=LineJig(document, first.value)))
    if not second.is_ok:
        return

    p1, p2 = first.value, second.value
    editor.print(f"Distance = {distance(p1, p2):.4f}", MessageType.SUCCESS)
    editor.print(f"Delta X = {p2.x - p1.x:.4f}, Delta Y = {p2.y - p1.y:.4f}")
    editor.print(f"Angle in XY plane = {angle(p1, p2):.2f}")
    editor.print(f"From {format_point(p1)} to {format_point(p2)}")


def undo_command(ctx):
    action = ctx.document.undo(owner=ctx.runner)
    if action is None:
        ctx.editor.print("Nothing to undo")
    else:
        ctx.editor.print(f"Undo {action.label}", MessageType.SUCCESS)


def redo_command(ctx):
    action = ctx.document.redo(owner=ctx.runner)
    if action is None:
        ctx.editor.print("Nothing to redo")
    else:
        ctx.editor.print(f"Redo {action.label}", MessageType.SUCCESS)
