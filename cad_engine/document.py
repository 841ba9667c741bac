"""CAD Document - owns entities, selection, layers and undo history"""
import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .geometry import Entity, Line, Point, Point2D, Polyline
from .layer_manager import LayerManager
from .operations import displace_entities
from .undo import CompositeAction, UndoAction, UndoRedoLog

logger = logging.getLogger(__name__)


class DocumentBusyError(RuntimeError):
    """Raised when a second writer asks for exclusive access"""


class CADDocument:
    """Main CAD document that holds all entities.

    Entity order is significant: undo restores deleted entities at the
    index they had, so index based records stay valid.
    """

    def __init__(self):
        self.entities: List[Entity] = []
        self.layer_manager = LayerManager()
        self.selected_objects: List[str] = []  # Handles of selected entities
        self.highlighted: List[str] = []
        self.drawing_points: List[Point2D] = []
        self.preview: List[Entity] = []
        self.history = UndoRedoLog()
        self.modified = False

        self._by_handle: Dict[str, Entity] = {}
        self._next_handle = 0x100
        self._writer: Optional[object] = None
        self._listeners: List[Callable[[], None]] = []
        self._group: Optional[List[UndoAction]] = None

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def add_listener(self, callback: Callable[[], None]):
        """Register a callback invoked after every visible change"""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def notify(self):
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------------
    # Exclusive access
    # ------------------------------------------------------------------

    @contextmanager
    def exclusive_access(self, owner: object) -> Iterator[object]:
        """Single-writer token held for the whole run of a command"""
        if self._writer is not None:
            raise DocumentBusyError(f"Document is busy with {self._writer!r}")
        self._writer = owner
        try:
            yield owner
        finally:
            self._writer = None

    @property
    def active_writer(self) -> Optional[object]:
        return self._writer

    # ------------------------------------------------------------------
    # Entity CRUD
    # ------------------------------------------------------------------

    def generate_handle(self) -> str:
        """Return a handle never handed out before by this document"""
        handle = f"{self._next_handle:X}"
        self._next_handle += 1
        return handle

    def add_entity(self, entity: Entity, index: Optional[int] = None) -> Entity:
        """Add entity (optionally at a list index), assigning a handle if needed"""
        if not entity.handle:
            entity.handle = self.generate_handle()
        elif entity.handle in self._by_handle:
            if self._by_handle[entity.handle] is entity:
                return entity
            raise ValueError(f"Duplicate handle '{entity.handle}'")

        if index is None or index < 0 or index > len(self.entities):
            self.entities.append(entity)
        else:
            self.entities.insert(index, entity)
        self._by_handle[entity.handle] = entity
        self.modified = True
        self.notify()
        return entity

    def delete_entity(self, entity: Entity) -> bool:
        """Remove entity from the document (no undo record)"""
        if self._by_handle.get(entity.handle) is not entity:
            return False

        self.entities.remove(entity)
        del self._by_handle[entity.handle]
        if entity.handle in self.selected_objects:
            self.selected_objects.remove(entity.handle)
        if entity.handle in self.highlighted:
            self.highlighted.remove(entity.handle)
        entity.selected = False
        self.modified = True
        self.notify()
        return True

    def insert_entities_at_indices(self, entities: Sequence[Entity], indices: Sequence[int]):
        """Re-insert entities at their former positions (lowest index first)"""
        pairs = list(zip(entities, indices))
        pairs.sort(key=lambda pair: (pair[1] < 0, pair[1]))
        for entity, index in pairs:
            self.add_entity(entity, index if index >= 0 else None)

    def clone_entity(self, entity: Entity) -> Entity:
        """Copy entity under a new handle and add it to the document"""
        cloned = entity.copy()
        cloned.handle = self.generate_handle()
        return self.add_entity(cloned)

    def get_entity(self, handle: str) -> Optional[Entity]:
        return self._by_handle.get(handle)

    def get_entity_index(self, entity: Entity) -> int:
        if self._by_handle.get(entity.handle) is not entity:
            return -1
        return self.entities.index(entity)

    def contains(self, entity: Entity) -> bool:
        return self._by_handle.get(entity.handle) is entity

    def get_geometries_at_point(self, x: float, y: float, tolerance: float = 5.0) -> List[Entity]:
        """Find visible entities near a point, topmost (last drawn) first"""
        result = []
        for entity in reversed(self.entities):
            if self._is_displayed(entity) and entity.contains_point(x, y, tolerance):
                result.append(entity)
        return result

    def get_geometries_in_layer(self, layer: str) -> List[Entity]:
        return [entity for entity in self.entities if entity.layer == layer]

    def get_visible_geometries(self) -> List[Entity]:
        return [entity for entity in self.entities if self._is_displayed(entity)]

    def _is_displayed(self, entity: Entity) -> bool:
        return entity.visible and self.layer_manager.is_layer_visible(entity.layer)

    def is_layer_locked(self, layer_name: str) -> bool:
        return self.layer_manager.is_layer_locked(layer_name or "0")

    def is_entity_locked(self, entity: Entity) -> bool:
        return self.is_layer_locked(entity.layer)

    # ------------------------------------------------------------------
    # Selection and highlight
    # ------------------------------------------------------------------

    def select_object(self, handle: str):
        """Select an object"""
        entity = self.get_entity(handle)
        if entity and handle not in self.selected_objects:
            self.selected_objects.append(handle)
            entity.selected = True
            self.notify()

    def deselect_object(self, handle: str):
        """Deselect an object"""
        if handle in self.selected_objects:
            self.selected_objects.remove(handle)
            entity = self.get_entity(handle)
            if entity:
                entity.selected = False
            self.notify()

    def toggle_selection(self, handle: str):
        if handle in self.selected_objects:
            self.deselect_object(handle)
        else:
            self.select_object(handle)

    def select_all(self):
        """Select all visible objects"""
        self.clear_selection()
        for entity in self.get_visible_geometries():
            self.select_object(entity.handle)

    def clear_selection(self):
        """Clear all selections"""
        for handle in self.selected_objects.copy():
            self.deselect_object(handle)

    def get_selected_entities(self) -> List[Entity]:
        return [self._by_handle[h] for h in self.selected_objects if h in self._by_handle]

    @property
    def selected_count(self) -> int:
        return len(self.selected_objects)

    def highlight_entities(self, entities: Sequence[Entity]):
        self.highlighted = [e.handle for e in entities if self.contains(e)]
        self.notify()

    def clear_highlight(self):
        if self.highlighted:
            self.highlighted = []
            self.notify()

    # ------------------------------------------------------------------
    # Drawing aids (markers and jig previews)
    # ------------------------------------------------------------------

    def add_drawing_point(self, x: float, y: float):
        self.drawing_points.append(Point2D(x, y))
        self.notify()

    def set_preview(self, entities: Sequence[Entity]):
        """Replace the rubber band geometry shown by the viewport"""
        self.preview = list(entities)
        self.notify()

    def clear_preview(self):
        if self.preview:
            self.preview = []
            self.notify()

    def cancel_drawing(self):
        """Remove markers and previews left by a command"""
        self.drawing_points = []
        self.preview = []
        self.notify()

    # ------------------------------------------------------------------
    # Undo recording
    # ------------------------------------------------------------------

    def record_action(self, action: UndoAction):
        if self._group is not None:
            self._group.append(action)
        else:
            self.history.record(action)

    @contextmanager
    def undo_group(self, label: str) -> Iterator[None]:
        """Collect every action recorded inside the block into one undo step.

        If the block raises, the collected actions are undone and nothing is recorded.
        """
        if self._group is not None:
            # Nested groups fold into the outer one
            yield
            return
        collected: List[UndoAction] = []
        self._group = collected
        try:
            yield
        except BaseException:
            self._group = None
            for action in reversed(collected):
                action.undo()
            self.notify()
            raise
        self._group = None
        if collected:
            self.history.record(CompositeAction(label, collected))

    def record_add_action(self, entities: Sequence[Entity], label: str = "Add"):
        """Record that entities (already in the document) were created"""
        entities = list(entities)
        if not entities:
            return
        indices = [self.get_entity_index(e) for e in entities]

        def undo():
            for entity in entities:
                self.delete_entity(entity)

        def redo():
            self.insert_entities_at_indices(entities, indices)

        self.record_action(UndoAction(label, undo, redo))

    def record_delete_action(self, entities: Sequence[Entity], indices: Sequence[int],
                             label: str = "Delete"):
        """Record that entities were removed from the given indices"""
        entities = list(entities)
        indices = list(indices)
        if not entities:
            return

        def undo():
            self.insert_entities_at_indices(entities, indices)

        def redo():
            for entity in entities:
                self.delete_entity(entity)

        self.record_action(UndoAction(label, undo, redo))

    def record_move_action(self, entities: Sequence[Entity], dx: float, dy: float):
        entities = list(entities)
        if not entities:
            return

        def undo():
            displace_entities(entities, -dx, -dy)
            self.notify()

        def redo():
            displace_entities(entities, dx, dy)
            self.notify()

        self.record_action(UndoAction("Move", undo, redo))

    def record_polyline_modify_action(self, polyline: Polyline,
                                      old_vertices: Sequence[Point2D], old_closed: bool,
                                      new_vertices: Sequence[Point2D], new_closed: bool,
                                      label: str = "PEDIT Modify"):
        """Record a change of vertices and/or closed flag of one polyline"""
        old_vertices = list(old_vertices)
        new_vertices = list(new_vertices)

        def undo():
            polyline.vertices = list(old_vertices)
            polyline.closed = old_closed
            self.notify()

        def redo():
            polyline.vertices = list(new_vertices)
            polyline.closed = new_closed
            self.notify()

        self.record_action(UndoAction(label, undo, redo))

    def record_replace_action(self, deleted: Sequence[Entity], deleted_indices: Sequence[int],
                              created: Sequence[Entity], label: str = "PEDIT"):
        """Record deletion of some entities together with creation of others"""
        deleted = list(deleted)
        deleted_indices = list(deleted_indices)
        created = list(created)
        created_indices = [self.get_entity_index(e) for e in created]

        def undo():
            for entity in created:
                self.delete_entity(entity)
            self.insert_entities_at_indices(deleted, deleted_indices)

        def redo():
            for entity in deleted:
                self.delete_entity(entity)
            self.insert_entities_at_indices(created, created_indices)

        self.record_action(UndoAction(label, undo, redo))

    def delete_entities(self, entities: Sequence[Entity], record_undo: bool = True) -> int:
        """Delete several entities as one undoable step"""
        entities = [e for e in entities if self.contains(e)]
        indices = [self.get_entity_index(e) for e in entities]
        for entity in entities:
            self.delete_entity(entity)
        if record_undo:
            self.record_delete_action(entities, indices)
        return len(entities)

    def delete_selected_entities(self) -> Tuple[int, int]:
        """Delete the selection, skipping locked layers. Returns (deleted, locked)."""
        selected = self.get_selected_entities()
        deletable = [e for e in selected if not self.is_entity_locked(e)]
        locked = len(selected) - len(deletable)
        deleted = self.delete_entities(deletable)
        return deleted, locked

    def undo(self, owner: Optional[object] = None) -> Optional[UndoAction]:
        """Undo last action; refused while another command owns the document"""
        if self._writer is not None and self._writer is not owner:
            logger.warning("Undo refused: a command is running")
            return None
        action = self.history.undo()
        if action is not None:
            logger.info(f"Undo {action.label}")
            self.notify()
        return action

    def redo(self, owner: Optional[object] = None) -> Optional[UndoAction]:
        """Redo last undone action; refused while another command owns the document"""
        if self._writer is not None and self._writer is not owner:
            logger.warning("Redo refused: a command is running")
            return None
        action = self.history.redo()
        if action is not None:
            logger.info(f"Redo {action.label}")
            self.notify()
        return action

    # ------------------------------------------------------------------
    # Convenience and queries
    # ------------------------------------------------------------------

    def add_line(self, x1: float, y1: float, x2: float, y2: float,
                 layer: Optional[str] = None) -> Line:
        """Convenience method to add a line"""
        if layer is None:
            layer = self.layer_manager.get_current_layer()
        line = Line(start=Point2D(x1, y1), end=Point2D(x2, y2), layer=layer)
        self.add_entity(line)
        return line

    def add_point(self, x: float, y: float, layer: Optional[str] = None) -> Point:
        """Convenience method to add a point"""
        if layer is None:
            layer = self.layer_manager.get_current_layer()
        point = Point(position=Point2D(x, y), layer=layer)
        self.add_entity(point)
        return point

    def get_bounding_box(self) -> Optional[Tuple[float, float, float, float]]:
        """Get bounding box of all visible geometry"""
        visible = self.get_visible_geometries()
        if not visible:
            return None

        min_x = float('inf')
        min_y = float('inf')
        max_x = float('-inf')
        max_y = float('-inf')

        for entity in visible:
            bbox = entity.get_bounding_box()
            min_x = min(min_x, bbox[0])
            min_y = min(min_y, bbox[1])
            max_x = max(max_x, bbox[2])
            max_y = max(max_y, bbox[3])

        return (min_x, min_y, max_x, max_y)

    def clear(self):
        """Clear all geometry and history"""
        self.entities.clear()
        self._by_handle.clear()
        self.selected_objects.clear()
        self.highlighted.clear()
        self.history.clear()
        self.cancel_drawing()
        self.modified = False

    def get_statistics(self) -> dict:
        """Get document statistics"""
        counts: Dict[str, int] = {}
        for entity in self.entities:
            counts[entity.dxftype()] = counts.get(entity.dxftype(), 0) + 1
        return {
            'total_objects': len(self.entities),
            'by_type': counts,
            'selected': len(self.selected_objects),
            'layers': len(self.layer_manager.get_all_layers()),
            'undo_steps': len(self.history.undo_stack),
        }
