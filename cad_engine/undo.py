"""Undo/redo history"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .settings import UNDO_MAX_DEPTH

logger = logging.getLogger(__name__)


@dataclass
class UndoAction:
    """A reversible edit: undo() and redo() mutate the live document"""
    label: str
    undo: Callable[[], None]
    redo: Callable[[], None]


class CompositeAction(UndoAction):
    """Several actions undone/redone as one step.

    Children are redone in order and undone in reverse order. If a child
    fails, the children already applied in that pass are reverted before
    the error propagates, so the document is never left half changed.
    """

    def __init__(self, label: str, actions: Sequence[UndoAction]):
        self.actions = list(actions)
        super().__init__(label, self._undo_all, self._redo_all)

    def _redo_all(self):
        self._apply([a.redo for a in self.actions], [a.undo for a in self.actions])

    def _undo_all(self):
        reversed_actions = self.actions[::-1]
        self._apply([a.undo for a in reversed_actions], [a.redo for a in reversed_actions])

    @staticmethod
    def _apply(steps: List[Callable[[], None]], rollbacks: List[Callable[[], None]]):
        done = 0
        try:
            for step in steps:
                step()
                done += 1
        except Exception:
            for rollback in reversed(rollbacks[:done]):
                rollback()
            raise


class UndoRedoLog:
    """Linear undo/redo history of UndoActions"""

    def __init__(self, max_depth: Optional[int] = UNDO_MAX_DEPTH):
        self.undo_stack: List[UndoAction] = []
        self.redo_stack: List[UndoAction] = []
        self.max_depth = max_depth
        self.applying_history = False

    def record(self, action: UndoAction):
        """Push a new action; pending redo entries are discarded"""
        if self.applying_history:
            return
        self.undo_stack.append(action)
        self.redo_stack.clear()

        if self.max_depth is not None and len(self.undo_stack) > self.max_depth:
            self.undo_stack.pop(0)  # Remove oldest
        logger.debug(f"Recorded '{action.label}' ({len(self.undo_stack)} undo steps)")

    def undo(self) -> Optional[UndoAction]:
        """Revert the most recent action. Returns it, or None if there is none."""
        if not self.undo_stack:
            logger.debug("Undo stack is empty")
            return None

        action = self.undo_stack[-1]
        self._run(action.undo)
        self.undo_stack.pop()
        self.redo_stack.append(action)
        return action

    def redo(self) -> Optional[UndoAction]:
        """Re-apply the most recently undone action"""
        if not self.redo_stack:
            logger.debug("Redo stack is empty")
            return None

        action = self.redo_stack[-1]
        self._run(action.redo)
        self.redo_stack.pop()
        self.undo_stack.append(action)
        return action

    def _run(self, step: Callable[[], None]):
        self.applying_history = True
        try:
            step()
        finally:
            self.applying_history = False

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def clear(self):
        self.undo_stack.clear()
        self.redo_stack.clear()
