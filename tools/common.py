"""Helpers shared by the command implementations"""
from typing import List, Sequence

from cad_engine.geometry import Entity
from editor.command_line import MessageType
from editor.prompts import Keyword, SelectionOptions

# Keywords reused by several commands
CLOSE = Keyword("Close", "CLOSE", "C")
UNDO = Keyword("Undo", "UNDO", "U")
EXIT = Keyword("eXit", "EXIT", "X")


def plural(count: int, noun: str, nouns: str = "") -> str:
    return f"{count} {noun if count == 1 else (nouns or noun + 's')}"


def current_layer(document) -> str:
    return document.layer_manager.get_current_layer()


def add_entities(document, entities: Sequence[Entity], label: str) -> List[Entity]:
    """Add freshly built entities and record them as one undo step"""
    added = [document.add_entity(entity) for entity in entities]
    document.record_add_action(added, label)
    return added


def acquire_selection(ctx, message: str = "Select objects"):
    """Use the pre-selection, or prompt for one. Returns a list (possibly empty)."""
    selected = ctx.document.get_selected_entities()
    if selected:
        ctx.editor.print(f"{plural(len(selected), 'object')} selected")
        return selected

    result = yield from ctx.editor.get_selection(SelectionOptions(message))
    if not result.is_ok:
        return []
    return list(result.value)


def report_empty_selection(ctx):
    ctx.editor.print("No objects selected. Select objects first.", MessageType.RESPONSE)
