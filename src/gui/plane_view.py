"""
Plane View Widget

This module implements one of the three MPR panes: a fixed-size square
QGraphicsView that shows the plane's raster scaled to fill the view, the
crosshair overlay on top of it, and any measurement items.

View coordinates are scene coordinates: (0, 0) is the top-left corner of the
view and (view_size, view_size) the bottom-right, whatever the raster size.

Inputs:
    - uint8 rasters from the slice reconstructor
    - Marker positions from the sync controller
    - Mouse interactions

Outputs:
    - view_clicked / crosshair_dragged signals (crosshair mode)
    - measurement_started / updated / finished signals (measure mode)

Requirements:
    - PySide6 for graphics view
    - PIL/Pillow and numpy for raster conversion
"""

from PySide6.QtWidgets import QGraphicsView, QGraphicsScene, QGraphicsPixmapItem, QFrame, QWidget
from PySide6.QtCore import Qt, QRectF, Signal, QPointF
from PySide6.QtGui import QPixmap, QMouseEvent, QPainter, QColor, QBrush
import numpy as np
from typing import Optional

from core.mpr_planes import Plane
from gui.crosshair_overlay import CrosshairOverlay
from utils.image_utils import array_to_image, image_to_qimage

MOUSE_MODE_CROSSHAIR = "crosshair"
MOUSE_MODE_MEASURE = "measure"


class PlaneView(QGraphicsView):
    """
    Square view of one MPR plane.

    Features:
    - Raster display stretched to the full view
    - Crosshair overlay with draggable center and lines
    - Measurement drawing in measure mode
    """

    # Signals
    view_clicked = Signal(float, float)  # Emitted on a click off the crosshair (x, y)
    crosshair_dragged = Signal(float, float, str)  # Emitted while a crosshair part is dragged (x, y, target)
    measurement_started = Signal(QPointF)  # Emitted when measurement starts (start position)
    measurement_updated = Signal(QPointF)  # Emitted when measurement is updated (current position)
    measurement_finished = Signal()  # Emitted when measurement is finished

    def __init__(self, plane: Plane, view_size: int = 350, line_thickness: int = 2,
                 parent: Optional[QWidget] = None):
        """
        Initialize the plane view.

        Args:
            plane: Plane shown by this view
            view_size: Side length of the square view in pixels
            line_thickness: Crosshair line width
            parent: Parent widget
        """
        super().__init__(parent)
        self.plane = Plane(plane)
        self.view_size = int(view_size)
        self.mouse_mode = MOUSE_MODE_CROSSHAIR
        self._measuring = False

        self.scene = QGraphicsScene(self)
        self.scene.setSceneRect(QRectF(0, 0, self.view_size, self.view_size))
        self.setScene(self.scene)
        self.setBackgroundBrush(QBrush(QColor(0, 0, 0)))

        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setFixedSize(self.view_size, self.view_size)
        self.setMouseTracking(False)

        self.image_item: Optional[QGraphicsPixmapItem] = None

        self.overlay = CrosshairOverlay(self.plane, self.view_size, line_thickness)
        self.scene.addItem(self.overlay)
        self.overlay.crosshair_moved.connect(self.crosshair_dragged.emit)

    @property
    def has_image(self) -> bool:
        return self.image_item is not None

    def set_raster(self, raster: np.ndarray) -> None:
        """
        Display a uint8 raster, stretched to the full view.

        Args:
            raster: 2-D uint8 array (rows x columns)
        """
        qimage = image_to_qimage(array_to_image(raster))
        pixmap = QPixmap.fromImage(qimage).scaled(
            self.view_size,
            self.view_size,
            Qt.AspectRatioMode.IgnoreAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )

        if self.image_item is None:
            self.image_item = QGraphicsPixmapItem(pixmap)
            # Lowest Z so overlay and measurements stay on top
            self.image_item.setZValue(0)
            self.scene.addItem(self.image_item)
        else:
            self.image_item.setPixmap(pixmap)
        self.viewport().update()

    def clear_image(self) -> None:
        if self.image_item is not None:
            self.scene.removeItem(self.image_item)
            self.image_item = None

    def set_marker(self, x: float, y: float) -> None:
        """Move the crosshair to a view position."""
        self.overlay.update_position(x, y)

    def set_mouse_mode(self, mode: str) -> None:
        """
        Switch between crosshair interaction and measurement drawing.

        Args:
            mode: "crosshair" or "measure"
        """
        if mode not in (MOUSE_MODE_CROSSHAIR, MOUSE_MODE_MEASURE):
            return
        self.mouse_mode = mode
        self._measuring = False
        self.overlay.end_drag()
        # The overlay must not swallow presses while measuring
        buttons = Qt.MouseButton.LeftButton if mode == MOUSE_MODE_CROSSHAIR else Qt.MouseButton.NoButton
        self.overlay.setAcceptedMouseButtons(buttons)

    def _clamped_scene_pos(self, event: QMouseEvent) -> QPointF:
        pos = self.mapToScene(event.position().toPoint())
        return QPointF(
            min(max(pos.x(), 0.0), float(self.view_size)),
            min(max(pos.y(), 0.0), float(self.view_size)),
        )

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """
        Handle mouse press events for crosshair interaction or measurement.

        Args:
            event: Mouse event
        """
        if event.button() != Qt.MouseButton.LeftButton or not self.has_image:
            super().mousePressEvent(event)
            return

        pos = self._clamped_scene_pos(event)
        if self.mouse_mode == MOUSE_MODE_MEASURE:
            self._measuring = True
            self.measurement_started.emit(pos)
            event.accept()
            return

        if self.overlay.isVisible() and self.overlay.hit_test(pos) is not None:
            # Overlay takes the drag through scene event delivery
            super().mousePressEvent(event)
            return

        self.view_clicked.emit(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._measuring:
            self.measurement_updated.emit(self._clamped_scene_pos(event))
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if self._measuring and event.button() == Qt.MouseButton.LeftButton:
            self._measuring = False
            self.measurement_updated.emit(self._clamped_scene_pos(event))
            self.measurement_finished.emit()
            event.accept()
            return
        super().mouseReleaseEvent(event)
