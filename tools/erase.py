"""ERASE command"""
import logging

from editor.command_line import MessageType
from .common import acquire_selection, plural

logger = logging.getLogger(__name__)


def erase_command(ctx):
    editor, document = ctx.editor, ctx.document

    selected = yield from acquire_selection(ctx, "Select objects to erase")
    if not selected:
        editor.print("No objects selected")
        return

    deletable = [entity for entity in selected if not document.is_entity_locked(entity)]
    locked = len(selected) - len(deletable)
    if locked:
        editor.print(f"{plural(locked, 'object')} on locked layer(s) - skipped")

    erased = document.delete_entities(deletable)
    if erased:
        editor.print(f"{plural(erased, 'object')} erased", MessageType.SUCCESS)
