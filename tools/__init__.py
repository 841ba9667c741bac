"""CAD Tools module"""
from editor.registry import CommandRegistry, CommandSpec
from .selection import SelectionTool
from .drawing import (arc_command, circle_command, line_command, polyline_command,
                      rectangle_command)
from .transform import copy_command, move_command
from .erase import erase_command
from .offset import offset_command
from .pedit import pedit_command
from .inquiry import dist_command, redo_command, undo_command
from .annotation import dim_command

CAD_COMMANDS = [
    CommandSpec("LINE", "L", "Create straight line segments", "Draw", line_command),
    CommandSpec("PLINE", "PL", "Create a polyline", "Draw", polyline_command),
    CommandSpec("CIRCLE", "C", "Create circles", "Draw", circle_command),
    CommandSpec("ARC", "A", "Create arcs", "Draw", arc_command),
    CommandSpec("RECTANGLE", "REC", "Create a rectangular polyline", "Draw", rectangle_command),
    CommandSpec("MOVE", "M", "Move objects", "Modify", move_command),
    CommandSpec("COPY", "CO", "Copy objects", "Modify", copy_command),
    CommandSpec("ERASE", "E", "Erase objects", "Modify", erase_command),
    CommandSpec("OFFSET", "O", "Create parallel copies", "Modify", offset_command),
    CommandSpec("PEDIT", "PE", "Edit polylines", "Modify", pedit_command),
    CommandSpec("DIM", "DLI", "Create linear dimensions", "Annotate", dim_command),
    CommandSpec("DIMLINEAR", "DIMLIN", "Create linear dimensions", "Annotate", dim_command),
    CommandSpec("DIST", "DI", "Measure distance and angle", "Inquiry", dist_command),
    CommandSpec("UNDO", "U", "Undo the last action", "Edit", undo_command),
    CommandSpec("REDO", "REDO", "Redo the last undone action", "Edit", redo_command),
]


def register_cad_commands(registry: CommandRegistry) -> CommandRegistry:
    for spec in CAD_COMMANDS:
        registry.register(spec)
    return registry


def build_registry() -> CommandRegistry:
    return register_cad_commands(CommandRegistry())


__all__ = ['SelectionTool', 'CAD_COMMANDS', 'register_cad_commands', 'build_registry']
