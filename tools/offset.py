"""OFFSET command"""
import logging

from cad_engine.operations import OFFSETTABLE_TYPES, distance_to_entity, offset_entity
from cad_engine.settings import DEFAULT_OFFSET_DISTANCE, LENGTH_EPSILON
from editor.command_line import MessageType
from editor.prompts import DistanceOptions, EntityOptions, Keyword, PointOptions, PromptStatus
from .common import add_entities, plural

logger = logging.getLogger(__name__)

THROUGH = Keyword("Through", "THROUGH", "T")


def offset_command(ctx):
    """Parallel copies at a fixed distance, or through a picked point"""
    editor, document = ctx.editor, ctx.document

    default = ctx.variables.get("OFFSETDIST", DEFAULT_OFFSET_DISTANCE)
    result = yield from editor.get_distance(DistanceOptions(
        f"Specify offset distance <{default:.4f}>",
        keywords=[THROUGH],
        allow_none=True,
        default_value=default,
    ))

    if result.status == PromptStatus.CANCEL:
        return

    through = result.keyword == "THROUGH"
    distance = default
    if result.is_ok:
        distance = result.value
        ctx.variables["OFFSETDIST"] = distance

    created = 0
    while True:
        editor.check_cancelled()
        picked = yield from editor.get_entity(EntityOptions(
            "Select object to offset", allow_none=True))
        if not picked.is_ok:
            break

        entity = picked.value
        if entity.dxftype() not in OFFSETTABLE_TYPES:
            editor.print(f"Cannot offset {entity.dxftype()}", MessageType.ERROR)
            continue
        if document.is_entity_locked(entity):
            editor.print(f"Object is on locked layer \"{entity.layer}\"", MessageType.ERROR)
            continue

        document.highlight_entities([entity])
        message = "Specify through point" if through else "Specify point on side to offset"
        side = yield from editor.get_point(PointOptions(message))
        document.clear_highlight()
        if not side.is_ok:
            break

        step = distance
        if through:
            step = distance_to_entity(entity, side.value)
            if step is None or step <= LENGTH_EPSILON:
                editor.print("Through point lies on the object", MessageType.ERROR)
                continue

        result_entity = offset_entity(entity, step, side.value)
        if result_entity is None:
            editor.print("Cannot create offset", MessageType.ERROR)
            continue

        add_entities(document, [result_entity], "Offset")
        created += 1
        logger.debug(f"Offset {entity.dxftype()} {entity.handle} by {step}")
        editor.print("Offset created", MessageType.SUCCESS)

    if created:
        editor.print(f"{plural(created, 'offset')} created")
