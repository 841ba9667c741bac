"""CAD Viewport widget (QPainter 2D renderer)"""
from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QPointF, QLineF, QRectF, Signal
from PySide6.QtGui import QPainter, QPen, QColor, QWheelEvent, QMouseEvent, QPolygonF
import math
from typing import Tuple

from cad_engine.geometry import (Arc, Circle, Dimension, Ellipse, Insert, Line, Point,
                                 Polyline, Spline, Text)
from cad_engine.settings import PICK_TOLERANCE

# AutoCAD color index -> RGB for the handful of standard colors
ACI_COLORS = {
    1: (255, 0, 0),
    2: (255, 255, 0),
    3: (0, 255, 0),
    4: (0, 255, 255),
    5: (0, 0, 255),
    6: (255, 0, 255),
    7: (255, 255, 255),
    8: (128, 128, 128),
    9: (192, 192, 192),
}

ARC_SEGMENTS = 64


class CADViewport(QWidget):
    """CAD Viewport with pan and zoom"""

    clicked = Signal(float, float)  # Left click (x, y in CAD coords)
    moved = Signal(float, float)    # Pointer movement (x, y in CAD coords)

    def __init__(self, document, parent=None):
        super().__init__(parent)
        self.document = document

        # View transformation parameters
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = 1.0

        # Mouse interaction
        self.last_mouse_pos = None
        self.is_panning = False

        self.selection_tolerance = PICK_TOLERANCE

        self.setMinimumSize(400, 300)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

        self.document.add_listener(self.update)

    def paintEvent(self, event):
        """Paint grid, entities, previews and markers"""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        # Fill background
        painter.fillRect(self.rect(), QColor(30, 30, 30))

        # Apply transformations
        painter.translate(self.width() / 2, self.height() / 2)
        painter.scale(self.zoom, -self.zoom)  # Flip Y axis for CAD coords
        painter.translate(self.pan_x, self.pan_y)

        self._draw_grid(painter)

        highlighted = set(self.document.highlighted)
        for entity in self.document.get_visible_geometries():
            if entity.selected:
                color = QColor(255, 255, 0)
            elif entity.handle in highlighted:
                color = QColor(0, 170, 255)
            else:
                color = self._entity_color(entity)
            self._draw_entity(painter, entity, QPen(color, 1.0 / self.zoom))

        # Rubber band of the running command
        preview_pen = QPen(QColor(0, 200, 255), 1.0 / self.zoom, Qt.DashLine)
        for entity in self.document.preview:
            self._draw_entity(painter, entity, preview_pen)

        self._draw_markers(painter)

        painter.end()

    def _entity_color(self, entity) -> QColor:
        index = entity.color
        if index == 256 or index not in ACI_COLORS:
            layer = self.document.layer_manager.get_layer(entity.layer)
            index = layer.color if layer else 7
        r, g, b = ACI_COLORS.get(index, ACI_COLORS[7])
        return QColor(r, g, b)

    def _draw_grid(self, painter):
        """Draw background grid"""
        grid_size = 50.0
        grid_color = QColor(60, 60, 60)

        # Calculate visible range
        view_width = self.width() / self.zoom
        view_height = self.height() / self.zoom

        min_x = -view_width / 2 - self.pan_x
        max_x = view_width / 2 - self.pan_x
        min_y = -view_height / 2 - self.pan_y
        max_y = view_height / 2 - self.pan_y

        pen = QPen(grid_color, 0.5 / self.zoom)
        painter.setPen(pen)

        x = math.floor(min_x / grid_size) * grid_size
        while x <= max_x:
            painter.drawLine(QLineF(x, min_y, x, max_y))
            x += grid_size

        y = math.floor(min_y / grid_size) * grid_size
        while y <= max_y:
            painter.drawLine(QLineF(min_x, y, max_x, y))
            y += grid_size

        # Draw axes
        axis_pen = QPen(QColor(100, 100, 100), 1.0 / self.zoom)
        painter.setPen(axis_pen)
        painter.drawLine(QLineF(min_x, 0, max_x, 0))  # X axis
        painter.drawLine(QLineF(0, min_y, 0, max_y))  # Y axis

    def _draw_entity(self, painter, entity, pen):
        """Draw a single entity"""
        painter.setPen(pen)

        if isinstance(entity, Line):
            painter.drawLine(QLineF(entity.start.x, entity.start.y, entity.end.x, entity.end.y))
        elif isinstance(entity, Circle):
            painter.drawEllipse(QPointF(entity.center.x, entity.center.y),
                                entity.radius, entity.radius)
        elif isinstance(entity, Arc):
            sweep = (entity.end_angle - entity.start_angle) % 360.0 or 360.0
            steps = max(2, int(ARC_SEGMENTS * sweep / 360.0))
            points = [entity.point_at(entity.start_angle + sweep * i / steps)
                      for i in range(steps + 1)]
            painter.drawPolyline(QPolygonF([QPointF(p.x, p.y) for p in points]))
        elif isinstance(entity, Ellipse):
            self._draw_ellipse(painter, entity)
        elif isinstance(entity, Polyline):
            polygon = QPolygonF([QPointF(v.x, v.y) for v in entity.vertices])
            if entity.closed and len(entity.vertices) > 2:
                painter.drawPolygon(polygon)
            else:
                painter.drawPolyline(polygon)
        elif isinstance(entity, Spline):
            hull = entity.fit_points or entity.control_points
            painter.drawPolyline(QPolygonF([QPointF(p.x, p.y) for p in hull]))
        elif isinstance(entity, Text):
            painter.save()
            painter.translate(entity.position.x, entity.position.y)
            painter.rotate(entity.rotation)
            painter.scale(1.0, -1.0)
            font = painter.font()
            font.setPointSizeF(max(entity.height, 0.1))
            painter.setFont(font)
            painter.drawText(QPointF(0, 0), entity.text)
            painter.restore()
        elif isinstance(entity, (Point, Insert)):
            self._draw_cross(painter, entity.position.x, entity.position.y)
        elif isinstance(entity, Dimension):
            self._draw_dimension(painter, entity)

    def _draw_dimension(self, painter, dimension):
        start, end = dimension.dimension_line()
        painter.drawLine(QLineF(start.x, start.y, end.x, end.y))
        for origin, foot in ((dimension.first_point, start), (dimension.second_point, end)):
            painter.drawLine(QLineF(origin.x, origin.y, foot.x, foot.y))
        painter.save()
        painter.translate(dimension.text_midpoint.x, dimension.text_midpoint.y)
        painter.rotate(dimension.rotation)
        painter.scale(1.0, -1.0)
        painter.drawText(QPointF(0, 0), f"{dimension.measurement:.2f}")
        painter.restore()

    def _draw_ellipse(self, painter, ellipse):
        a = ellipse.major_axis.length()
        b = a * ellipse.ratio
        theta = math.atan2(ellipse.major_axis.y, ellipse.major_axis.x)
        painter.save()
        painter.translate(ellipse.center.x, ellipse.center.y)
        painter.rotate(math.degrees(theta))
        painter.drawEllipse(QRectF(-a, -b, 2 * a, 2 * b))
        painter.restore()

    def _draw_cross(self, painter, x: float, y: float):
        size = 3.0 / self.zoom
        painter.drawLine(QLineF(x - size, y, x + size, y))
        painter.drawLine(QLineF(x, y - size, x, y + size))

    def _draw_markers(self, painter):
        """Drawing aids placed by commands (picked points, current vertex)"""
        painter.setPen(QPen(QColor(255, 80, 80), 1.5 / self.zoom))
        size = 4.0 / self.zoom
        for point in self.document.drawing_points:
            painter.drawRect(QRectF(point.x - size, point.y - size, 2 * size, 2 * size))

    def screen_to_cad(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        """Convert screen coordinates to CAD coordinates"""
        # Center
        x = screen_x - self.width() / 2
        y = screen_y - self.height() / 2

        # Unzoom
        x /= self.zoom
        y /= -self.zoom  # Flip Y

        # Unpan
        x -= self.pan_x
        y -= self.pan_y

        return (x, y)

    def cad_to_screen(self, cad_x: float, cad_y: float) -> Tuple[int, int]:
        """Convert CAD coordinates to screen coordinates"""
        x = (cad_x + self.pan_x) * self.zoom + self.width() / 2
        y = -(cad_y + self.pan_y) * self.zoom + self.height() / 2
        return (int(x), int(y))

    def mousePressEvent(self, event: QMouseEvent):
        """Handle mouse press"""
        if event.button() == Qt.MiddleButton:
            self.is_panning = True
            self.last_mouse_pos = event.position()
            self.setCursor(Qt.ClosedHandCursor)
        elif event.button() == Qt.LeftButton:
            cad_x, cad_y = self.screen_to_cad(event.position().x(), event.position().y())
            self.clicked.emit(cad_x, cad_y)

    def mouseMoveEvent(self, event: QMouseEvent):
        """Handle mouse move"""
        if self.is_panning and self.last_mouse_pos is not None:
            delta = event.position() - self.last_mouse_pos
            self.pan_x += delta.x() / self.zoom
            self.pan_y -= delta.y() / self.zoom
            self.last_mouse_pos = event.position()
            self.update()
            return

        cad_x, cad_y = self.screen_to_cad(event.position().x(), event.position().y())
        self.moved.emit(cad_x, cad_y)

    def mouseReleaseEvent(self, event: QMouseEvent):
        """Handle mouse release"""
        if event.button() == Qt.MiddleButton:
            self.is_panning = False
            self.setCursor(Qt.ArrowCursor)

    def wheelEvent(self, event: QWheelEvent):
        """Handle mouse wheel for zooming"""
        zoom_factor = 1.1
        if event.angleDelta().y() > 0:
            self.zoom *= zoom_factor
        else:
            self.zoom /= zoom_factor

        self.zoom = max(0.01, min(100.0, self.zoom))
        self.update()

    def pick_tolerance(self) -> float:
        """Pick radius in drawing units for the current zoom"""
        return self.selection_tolerance / self.zoom

    def zoom_extents(self):
        """Zoom to fit all geometry"""
        bbox = self.document.get_bounding_box()
        if not bbox:
            return

        min_x, min_y, max_x, max_y = bbox
        width = max(max_x - min_x, 1e-6)
        height = max(max_y - min_y, 1e-6)

        # Calculate zoom to fit
        margin = 1.1  # 10% margin
        zoom_x = self.width() / (width * margin)
        zoom_y = self.height() / (height * margin)
        self.zoom = max(0.01, min(100.0, min(zoom_x, zoom_y)))

        # Center view
        self.pan_x = -(min_x + max_x) / 2
        self.pan_y = -(min_y + max_y) / 2

        self.update()

    def zoom_in(self):
        """Zoom in"""
        self.zoom *= 1.2
        self.update()

    def zoom_out(self):
        """Zoom out"""
        self.zoom /= 1.2
        self.update()

    def reset_view(self):
        """Reset view to default"""
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = 1.0
        self.update()

    def refresh(self):
        """Refresh the viewport"""
        self.update()
