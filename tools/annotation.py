"""DIM / DIMLINEAR command"""
import logging

from cad_engine.operations import linear_dimension
from editor.command_line import MessageType
from editor.jigs import DimensionJig, LineJig
from editor.prompts import Keyword, PointOptions
from .common import add_entities, current_layer

logger = logging.getLogger(__name__)

ALIGNED = Keyword("Aligned", "ALIGNED", "A")
HORIZONTAL = Keyword("Horizontal", "HORIZONTAL", "H")
VERTICAL = Keyword("Vertical", "VERTICAL", "V")

_MODE_KEYWORDS = {"ALIGNED": "aligned", "HORIZONTAL": "horizontal", "VERTICAL": "vertical"}


def dim_command(ctx):
    """Linear dimension between two extension line origins"""
    editor, document = ctx.editor, ctx.document

    first = yield from editor.get_point(PointOptions("Specify first extension line origin",
                                                     allow_none=True))
    if not first.is_ok:
        return
    document.add_drawing_point(first.value.x, first.value.y)

    second = yield from editor.get_point(PointOptions(
        "Specify second extension line origin",
        base_point=first.value,
        jig=LineJig(document, first.value),
    ))
    if not second.is_ok:
        return
    document.add_drawing_point(second.value.x, second.value.y)

    p1, p2 = first.value, second.value
    dim_type = "auto"
    while True:
        editor.check_cancelled()
        result = yield from editor.get_point(PointOptions(
            "Specify dimension line location",
            keywords=[ALIGNED, HORIZONTAL, VERTICAL],
            jig=DimensionJig(document, p1, p2, dim_type),
        ))
        if result.is_ok:
            break
        if result.keyword not in _MODE_KEYWORDS:
            return
        dim_type = _MODE_KEYWORDS[result.keyword]
        logger.debug("dimension mode %s", dim_type)

    dimension = linear_dimension(p1, p2, result.value, dim_type)
    if dimension is None:
        editor.print("Extension line origins are too close", MessageType.ERROR)
        return

    dimension.layer = current_layer(document)
    add_entities(document, [dimension], "Dimension")
    editor.print(f"Dimension text = {dimension.measurement:.4f}", MessageType.SUCCESS)
