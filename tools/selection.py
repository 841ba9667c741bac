"""Selection tool for CAD objects (used while no command is running)"""
from typing import Optional, Tuple

from cad_engine.settings import PICK_TOLERANCE


class SelectionTool:
    """Tool for selecting CAD objects"""

    def __init__(self, document):
        self.document = document

    def select_at_point(self, x: float, y: float, tolerance: float = PICK_TOLERANCE,
                        add_to_selection: bool = False) -> bool:
        """Select the topmost object at a point"""
        hits = self.document.get_geometries_at_point(x, y, tolerance)

        if not add_to_selection:
            self.document.clear_selection()

        if hits:
            self.document.select_object(hits[0].handle)

        return len(hits) > 0

    def select_in_window(self, x1: float, y1: float, x2: float, y2: float,
                         add_to_selection: bool = False) -> int:
        """Select all objects completely inside a rectangular window"""
        if not add_to_selection:
            self.document.clear_selection()

        min_x, max_x = min(x1, x2), max(x1, x2)
        min_y, max_y = min(y1, y2), max(y1, y2)

        selected_count = 0
        for entity in self.document.get_visible_geometries():
            bbox = entity.get_bounding_box()
            if (bbox[0] >= min_x and bbox[2] <= max_x and
                    bbox[1] >= min_y and bbox[3] <= max_y):
                self.document.select_object(entity.handle)
                selected_count += 1

        return selected_count

    def select_crossing_window(self, x1: float, y1: float, x2: float, y2: float,
                               add_to_selection: bool = False) -> int:
        """Select all objects whose bounding box touches the window"""
        if not add_to_selection:
            self.document.clear_selection()

        min_x, max_x = min(x1, x2), max(x1, x2)
        min_y, max_y = min(y1, y2), max(y1, y2)

        selected_count = 0
        for entity in self.document.get_visible_geometries():
            bbox = entity.get_bounding_box()
            if not (bbox[2] < min_x or bbox[0] > max_x or
                    bbox[3] < min_y or bbox[1] > max_y):
                self.document.select_object(entity.handle)
                selected_count += 1

        return selected_count

    def toggle_at_point(self, x: float, y: float, tolerance: float = PICK_TOLERANCE) -> bool:
        """Toggle selection of the topmost object at a point"""
        hits = self.document.get_geometries_at_point(x, y, tolerance)
        if hits:
            self.document.toggle_selection(hits[0].handle)
        return len(hits) > 0

    def get_selection_center(self) -> Optional[Tuple[float, float]]:
        """Get center point of the selected objects' bounding boxes"""
        selected = self.document.get_selected_entities()
        if not selected:
            return None

        sum_x = 0.0
        sum_y = 0.0
        for entity in selected:
            bbox = entity.get_bounding_box()
            sum_x += (bbox[0] + bbox[2]) / 2
            sum_y += (bbox[1] + bbox[3]) / 2

        return (sum_x / len(selected), sum_y / len(selected))
