"""
Crosshair Overlay

This module draws the MPR crosshair on top of one plane view: a horizontal
line, a vertical line and a draggable center point. Pressing on one of the
three parts starts a drag whose positions are reported through the
crosshair_moved signal.

Inputs:
    - Marker position in view coordinates
    - Mouse press / move / release on the overlay

Outputs:
    - crosshair_moved(x, y, target) while a part is dragged

Requirements:
    - PySide6 for graphics components
    - core.mpr_planes for plane and drag target names
"""

from PySide6.QtWidgets import QGraphicsObject, QGraphicsItem, QGraphicsSceneMouseEvent
from PySide6.QtCore import Qt, QPointF, QRectF, Signal
from PySide6.QtGui import QPen, QColor, QBrush, QPainter
from typing import Optional, Tuple

from core.mpr_planes import DragTarget, Plane

# (horizontal line, vertical line) colors per view
VIEW_LINE_COLORS = {
    Plane.AXIAL: ((255, 0, 0), (0, 0, 255)),
    Plane.CORONAL: ((0, 0, 255), (0, 255, 0)),
    Plane.SAGITTAL: ((255, 0, 0), (0, 255, 0)),
}

CENTER_RADIUS = 6.0
LINE_HIT_TOLERANCE = 4.0


class CrosshairOverlay(QGraphicsObject):
    """
    Crosshair graphics for one view.

    The horizontal line is the depth-axis handle (dragged vertically), the
    vertical line is the orthogonal-axis handle (dragged horizontally) and
    the center point moves freely.
    """

    crosshair_moved = Signal(float, float, str)  # x, y, DragTarget value

    def __init__(self, plane: Plane, view_size: float, line_thickness: int = 2,
                 parent: Optional[QGraphicsItem] = None):
        """
        Initialize the overlay.

        Args:
            plane: View this overlay belongs to (selects line colors)
            view_size: Side length of the square scene
            line_thickness: Line width in pixels
            parent: Optional parent item
        """
        super().__init__(parent)
        self.plane = Plane(plane)
        self.view_size = float(view_size)
        self.line_thickness = line_thickness
        horizontal, vertical = VIEW_LINE_COLORS[self.plane]
        self.horizontal_color = QColor(*horizontal)
        self.vertical_color = QColor(*vertical)

        self.center = QPointF(self.view_size / 2.0, self.view_size / 2.0)
        self.axis_lines_visible = True
        self.center_point_visible = True
        self._drag_target: Optional[DragTarget] = None

        self.setZValue(200)
        self.setAcceptedMouseButtons(Qt.MouseButton.LeftButton)

    def boundingRect(self) -> QRectF:
        pad = CENTER_RADIUS + self.line_thickness
        return QRectF(-pad, -pad, self.view_size + 2 * pad, self.view_size + 2 * pad)

    def paint(self, painter: QPainter, option, widget=None) -> None:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        x, y = self.center.x(), self.center.y()

        if self.axis_lines_visible:
            pen = QPen(self.horizontal_color, self.line_thickness)
            pen.setCosmetic(True)
            painter.setPen(pen)
            painter.drawLine(QPointF(0.0, y), QPointF(self.view_size, y))

            pen = QPen(self.vertical_color, self.line_thickness)
            pen.setCosmetic(True)
            painter.setPen(pen)
            painter.drawLine(QPointF(x, 0.0), QPointF(x, self.view_size))

        if self.center_point_visible:
            painter.setPen(QPen(QColor(0, 0, 0), 2))
            painter.setBrush(QBrush(QColor(255, 255, 255)))
            painter.drawEllipse(self.center, CENTER_RADIUS, CENTER_RADIUS)

    def update_position(self, x: float, y: float) -> None:
        """
        Move the crosshair to a view position.

        Args:
            x: Horizontal view coordinate
            y: Vertical view coordinate
        """
        self.center = QPointF(float(x), float(y))
        self.update()

    def position(self) -> Tuple[float, float]:
        return (self.center.x(), self.center.y())

    def set_axis_lines_visible(self, visible: bool) -> None:
        self.axis_lines_visible = visible
        self.update()

    def set_center_point_visible(self, visible: bool) -> None:
        self.center_point_visible = visible
        self.update()

    def set_all_visible(self, visible: bool) -> None:
        """Show or hide the whole overlay, resetting the part toggles to match."""
        self.axis_lines_visible = visible
        self.center_point_visible = visible
        self.setVisible(visible)
        self.update()

    def hit_test(self, pos: QPointF) -> Optional[DragTarget]:
        """
        Find the crosshair part under a point.

        The center point wins over the lines; hidden parts are never hit.

        Args:
            pos: Point in item (= scene) coordinates

        Returns:
            DragTarget of the part, or None when nothing is under the point
        """
        dx = pos.x() - self.center.x()
        dy = pos.y() - self.center.y()
        if self.center_point_visible and dx * dx + dy * dy <= (CENTER_RADIUS + 2) ** 2:
            return DragTarget.CENTER
        if self.axis_lines_visible:
            if abs(dy) <= LINE_HIT_TOLERANCE:
                return DragTarget.DEPTH_AXIS
            if abs(dx) <= LINE_HIT_TOLERANCE:
                return DragTarget.ORTHOGONAL_AXIS
        return None

    def begin_drag(self, pos: QPointF) -> Optional[DragTarget]:
        """Start dragging the part under pos; returns it (None if no part was hit)."""
        self._drag_target = self.hit_test(pos)
        return self._drag_target

    def drag_to(self, pos: QPointF) -> None:
        """
        Report a drag position for the part being dragged.

        An axis line only moves along its own axis, so the other coordinate
        is taken from the current center.
        """
        if self._drag_target is None:
            return
        if self._drag_target == DragTarget.DEPTH_AXIS:
            x, y = self.center.x(), pos.y()
        elif self._drag_target == DragTarget.ORTHOGONAL_AXIS:
            x, y = pos.x(), self.center.y()
        else:
            x, y = pos.x(), pos.y()
        self.crosshair_moved.emit(float(x), float(y), self._drag_target.value)

    def end_drag(self) -> None:
        self._drag_target = None

    @property
    def dragging(self) -> bool:
        return self._drag_target is not None

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton or self.begin_drag(event.pos()) is None:
            # Not on the crosshair: let the view treat it as a click
            event.ignore()
            return
        event.accept()

    def mouseMoveEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        if self.dragging:
            self.drag_to(event.pos())
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        self.end_drag()
        super().mouseReleaseEvent(event)
