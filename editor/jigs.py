"""Rubber band previews shown while a prompt waits for input"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

from cad_engine.geometry import Circle, Entity, Line, Point2D, Polyline
from cad_engine.operations import (apply_displacement, arc_through_points, linear_dimension,
                                   rectangle_vertices)


class PreviewJig(ABC):
    """Base class for previews; owned by the prompt step that created it"""

    def __init__(self, document):
        self.document = document
        self.entities: List[Entity] = []

    @abstractmethod
    def build(self, value) -> List[Entity]:
        """Preview entities for the current pointer value"""

    def update(self, value):
        self.entities = self.build(value)
        self.document.set_preview(self.entities)

    def clear(self):
        self.entities = []
        self.document.clear_preview()


class LineJig(PreviewJig):
    def __init__(self, document, base_point: Point2D):
        super().__init__(document)
        self.base_point = base_point

    def build(self, value: Point2D) -> List[Entity]:
        return [Line(start=self.base_point, end=value)]


class CircleJig(PreviewJig):
    """Circle around a fixed center; accepts a radius or a point on the circle"""

    def __init__(self, document, center: Point2D, diameter: bool = False):
        super().__init__(document)
        self.center = center
        self.diameter = diameter

    def build(self, value: Union[float, Point2D]) -> List[Entity]:
        if isinstance(value, Point2D):
            value = self.center.distance_to(value)
        radius = value / 2 if self.diameter else value
        if radius <= 0:
            return []
        return [Circle(center=self.center, radius=radius)]


class RectangleJig(PreviewJig):
    def __init__(self, document, first_corner: Point2D):
        super().__init__(document)
        self.first_corner = first_corner

    def build(self, value: Point2D) -> List[Entity]:
        return [Polyline(vertices=rectangle_vertices(self.first_corner, value), closed=True)]


class PolylineJig(PreviewJig):
    """Segment from the last picked vertex to the pointer"""

    def __init__(self, document, vertices: Sequence[Point2D]):
        super().__init__(document)
        self.vertices = list(vertices)

    def build(self, value: Point2D) -> List[Entity]:
        if not self.vertices:
            return []
        return [Line(start=self.vertices[-1], end=value)]


class Arc3PointJig(PreviewJig):
    """Arc through two fixed points and the pointer, a chord while collinear"""

    def __init__(self, document, start: Point2D, second: Point2D):
        super().__init__(document)
        self.start = start
        self.second = second

    def build(self, value: Point2D) -> List[Entity]:
        arc = arc_through_points(self.start, self.second, value)
        if arc is None:
            return [Line(start=self.start, end=value)]
        return [arc]


class DisplacementJig(PreviewJig):
    """Copies of the selection dragged from a base point"""

    def __init__(self, document, entities: Sequence[Entity], base_point: Point2D):
        super().__init__(document)
        self.sources = list(entities)
        self.base_point = base_point

    def build(self, value: Point2D) -> List[Entity]:
        dx = value.x - self.base_point.x
        dy = value.y - self.base_point.y
        preview: List[Entity] = [Line(start=self.base_point, end=value)]
        for source in self.sources:
            ghost = source.copy()
            apply_displacement(ghost, dx, dy)
            preview.append(ghost)
        return preview


class DimensionJig(PreviewJig):
    """Dimension following the pointer as the dimension line location"""

    def __init__(self, document, first: Point2D, second: Point2D, dim_type: str = "auto"):
        super().__init__(document)
        self.first = first
        self.second = second
        self.dim_type = dim_type

    def build(self, value: Point2D) -> List[Entity]:
        dimension = linear_dimension(self.first, self.second, value, self.dim_type)
        if dimension is None:
            return [Line(start=self.first, end=self.second)]
        return [dimension]


def clear_jig(jig: Optional[PreviewJig]):
    if jig is not None:
        jig.clear()
