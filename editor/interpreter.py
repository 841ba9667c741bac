"""Classify raw input events against the prompt that is waiting for them"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from cad_engine.geometry import Entity
from cad_engine.settings import PICK_TOLERANCE
from .command_line import MessageType
from .coordinates import distance, parse_coordinate, parse_number
from .events import CancelInput, InputEvent, PointerClick, PointerMove, TextInput
from .prompts import (DistanceOptions, EntityOptions, KeywordOptions, PointOptions,
                      PromptOptions, PromptResult, SelectionOptions, match_keyword)

logger = logging.getLogger(__name__)


@dataclass
class Interpretation:
    """What one event means for the pending prompt.

    A set result ends the prompt; otherwise the prompt keeps waiting,
    after printing message (if any) and updating the jig with preview.
    """
    result: Optional[PromptResult] = None
    message: str = ""
    preview: Any = None
    severity: MessageType = MessageType.ERROR

    @property
    def terminal(self) -> bool:
        return self.result is not None


class InputInterpreter:
    """Turns events into PromptResults for point, distance, entity, selection
    and keyword prompts"""

    def __init__(self, document, pick_tolerance: float = PICK_TOLERANCE):
        self.document = document
        self.pick_tolerance = pick_tolerance

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    def _common(self, event: InputEvent, options: PromptOptions) -> Optional[Interpretation]:
        """Cancel and keyword handling shared by every prompt kind"""
        if isinstance(event, CancelInput):
            return Interpretation(PromptResult.cancel())

        if isinstance(event, TextInput) and event.text.strip():
            keyword = match_keyword(event.text, options.keywords)
            if keyword is not None:
                return Interpretation(PromptResult.from_keyword(keyword.global_name))
        return None

    def pick_entity(self, event: PointerClick) -> Optional[Entity]:
        if event.entity_handle:
            entity = self.document.get_entity(event.entity_handle)
            if entity is not None:
                return entity
        hits = self.document.get_geometries_at_point(event.point.x, event.point.y,
                                                     self.pick_tolerance)
        return hits[0] if hits else None

    # ------------------------------------------------------------------
    # Prompt kinds
    # ------------------------------------------------------------------

    def interpret_point(self, event: InputEvent, options: PointOptions) -> Interpretation:
        common = self._common(event, options)
        if common:
            return common

        if isinstance(event, PointerMove):
            return Interpretation(preview=event.point)

        if isinstance(event, PointerClick):
            return Interpretation(PromptResult.ok(event.point))

        text = event.text.strip()
        if not text:
            if options.allow_none:
                return Interpretation(PromptResult.none())
            return Interpretation()

        parsed = parse_coordinate(text, options.base_point)
        if parsed.success:
            return Interpretation(PromptResult.ok(parsed.point))
        logger.debug(parsed.error)
        return Interpretation(message="Invalid point. Enter x,y or @dx,dy or @distance<angle")

    def interpret_distance(self, event: InputEvent, options: DistanceOptions) -> Interpretation:
        common = self._common(event, options)
        if common:
            return common

        base = options.base_point

        if isinstance(event, PointerMove):
            if base is None:
                return Interpretation()
            return Interpretation(preview=distance(base, event.point))

        if isinstance(event, PointerClick):
            if base is None:
                return Interpretation()
            return self._checked_distance(distance(base, event.point), options)

        text = event.text.strip()
        if not text:
            if options.default_value is not None:
                return Interpretation(PromptResult.ok(options.default_value))
            if options.allow_none:
                return Interpretation(PromptResult.none())
            return Interpretation()

        value = parse_number(text)
        if value is not None:
            return self._checked_distance(value, options)

        if base is not None:
            parsed = parse_coordinate(text, base)
            if parsed.success:
                return self._checked_distance(distance(base, parsed.point), options)

        return Interpretation(message="Requires a numeric distance or a point")

    @staticmethod
    def _checked_distance(value: float, options: DistanceOptions) -> Interpretation:
        if options.only_positive and value <= 0:
            return Interpretation(message="Value must be positive and nonzero")
        return Interpretation(PromptResult.ok(value))

    def interpret_entity(self, event: InputEvent, options: EntityOptions) -> Interpretation:
        common = self._common(event, options)
        if common:
            return common

        if isinstance(event, PointerMove):
            return Interpretation()

        if isinstance(event, TextInput):
            if not event.text.strip() and options.allow_none:
                return Interpretation(PromptResult.none())
            return Interpretation(message="Select an object by clicking on it")

        entity = self.pick_entity(event)
        if entity is None:
            return Interpretation(message="Nothing selected")
        if options.allowed_types and entity.dxftype() not in options.allowed_types:
            return Interpretation(message=options.reject_message or
                                  f"Cannot select {entity.dxftype()}")
        return Interpretation(PromptResult.ok(entity))

    def interpret_selection(self, event: InputEvent, options: SelectionOptions) -> Interpretation:
        common = self._common(event, options)
        if common:
            return common

        if isinstance(event, PointerMove):
            return Interpretation()

        if isinstance(event, PointerClick):
            entity = self.pick_entity(event)
            if entity is None:
                return Interpretation(message="Nothing selected")
            self.document.toggle_selection(entity.handle)
            count = self.document.selected_count
            return Interpretation(message=f"{count} object{'s' if count != 1 else ''} selected",
                                  severity=MessageType.RESPONSE)

        if event.text.strip():
            return Interpretation(message="Select objects or press Enter to finish")

        selected = self.document.get_selected_entities()
        if selected:
            return Interpretation(PromptResult.ok(selected))
        if options.allow_none:
            return Interpretation(PromptResult.none())
        return Interpretation(message="No objects selected")

    def interpret_keywords(self, event: InputEvent, options: KeywordOptions) -> Interpretation:
        common = self._common(event, options)
        if common:
            return common

        if not isinstance(event, TextInput):
            return Interpretation()

        if not event.text.strip():
            if options.default_keyword:
                return Interpretation(PromptResult.from_keyword(options.default_keyword))
            if options.allow_none:
                return Interpretation(PromptResult.none())
            return Interpretation()

        return Interpretation(message="Invalid option keyword")
