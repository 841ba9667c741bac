"""Transformation commands: MOVE and COPY"""
import logging
from typing import List

from cad_engine.geometry import Entity
from cad_engine.operations import displace_entities
from editor.command_line import MessageType
from editor.jigs import DisplacementJig
from editor.prompts import PointOptions
from .common import EXIT, UNDO, acquire_selection, plural, report_empty_selection

logger = logging.getLogger(__name__)


def move_command(ctx):
    """Displace the selection by base point -> second point"""
    editor, document = ctx.editor, ctx.document

    selected = yield from acquire_selection(ctx, "Select objects to move")
    if not selected:
        report_empty_selection(ctx)
        return

    movable = [entity for entity in selected if not document.is_entity_locked(entity)]
    skipped = len(selected) - len(movable)
    if skipped:
        editor.print(f"{plural(skipped, 'object')} on locked layer(s) - skipped")
    if not movable:
        return

    document.highlight_entities(movable)

    base = yield from editor.get_point(PointOptions("Specify base point"))
    if not base.is_ok:
        return

    second = yield from editor.get_point(PointOptions(
        "Specify second point",
        base_point=base.value,
        jig=DisplacementJig(document, movable, base.value),
    ))
    if not second.is_ok:
        return

    dx = second.value.x - base.value.x
    dy = second.value.y - base.value.y
    displace_entities(movable, dx, dy)
    document.record_move_action(movable, dx, dy)
    document.notify()
    logger.debug(f"Moved {len(movable)} entities by ({dx}, {dy})")
    editor.print(f"{plural(len(movable), 'object')} moved", MessageType.SUCCESS)


def copy_command(ctx):
    """Place displaced copies of the selection until Enter or eXit"""
    editor, document = ctx.editor, ctx.document

    sources = yield from acquire_selection(ctx, "Select objects to copy")
    if not sources:
        report_empty_selection(ctx)
        return

    document.highlight_entities(sources)

    base = yield from editor.get_point(PointOptions("Specify base point"))
    if not base.is_ok:
        return

    placements: List[List[Entity]] = []
    try:
        while True:
            editor.check_cancelled()
            result = yield from editor.get_point(PointOptions(
                "Specify second point",
                keywords=[EXIT, UNDO] if placements else [],
                allow_none=True,
                base_point=base.value,
                jig=DisplacementJig(document, sources, base.value),
            ))

            if result.is_ok:
                dx = result.value.x - base.value.x
                dy = result.value.y - base.value.y
                clones = [document.clone_entity(source) for source in sources]
                displace_entities(clones, dx, dy)
                document.notify()
                placements.append(clones)
                editor.print(f"{plural(len(clones), 'object')} copied")
            elif result.keyword == "UNDO":
                for clone in placements.pop():
                    document.delete_entity(clone)
            else:
                break
    finally:
        if placements:
            document.record_add_action([clone for clones in placements for clone in clones],
                                       "Copy")

    if placements:
        editor.print(f"{plural(len(placements), 'copy', 'copies')} placed",
                     MessageType.SUCCESS)
