"""
Measurement Items – graphics classes for distance measurements.

This module provides the Qt graphics item used to display a distance
measurement in a plane view: a line between the two view points and a
text label with the real-world distance next to its midpoint.

Purpose:
    - Host MeasurementItem, used both for the draft being drawn and for
      committed measurements
    - Used by gui.measurement_coordinator.MeasurementCoordinator

Inputs:
    - View coordinates (QPointF) of both endpoints, formatted distance text

Outputs:
    - Graphics items that can be added to a QGraphicsScene

Requirements:
    - PySide6 (QtWidgets, QtCore, QtGui)
    - typing
"""

from PySide6.QtWidgets import (
    QGraphicsLineItem,
    QGraphicsTextItem,
    QGraphicsItemGroup,
    QGraphicsItem,
)
from PySide6.QtCore import Qt, QPointF, QLineF
from PySide6.QtGui import QPen, QColor, QFont
from typing import Optional, Tuple


class MeasurementItem(QGraphicsItemGroup):
    """
    Represents a single distance measurement.

    Inherits from QGraphicsItemGroup so the line and its label are added to,
    and removed from, a scene together.
    """

    def __init__(
        self,
        start_point: QPointF,
        end_point: QPointF,
        text: str = "",
        line_color: Tuple[int, int, int] = (0, 255, 0),
        line_thickness: int = 2,
        font_size: int = 12,
        font_color: Tuple[int, int, int] = (0, 255, 0),
        committed: bool = False,
    ):
        """
        Initialize measurement item.

        Args:
            start_point: Start point in view coordinates
            end_point: End point in view coordinates
            text: Distance label
            line_color: (r, g, b) line color
            line_thickness: Line width in pixels
            font_size: Label font size in points
            font_color: (r, g, b) label color
            committed: False while the measurement is still being drawn
        """
        super().__init__()

        self.start_point = QPointF(start_point)
        self.end_point = QPointF(end_point)
        self.committed = committed
        self.text_offset = QPointF(6.0, -22.0)

        pen = QPen(QColor(*line_color), line_thickness)
        pen.setCosmetic(True)
        if not committed:
            pen.setStyle(Qt.PenStyle.DashLine)
        self.line_item = QGraphicsLineItem()
        self.line_item.setPen(pen)
        self.line_item.setZValue(150)
        self.addToGroup(self.line_item)

        self.text_item = QGraphicsTextItem()
        self.text_item.setDefaultTextColor(QColor(*font_color))
        font = QFont("Arial", max(6, font_size))
        font.setBold(True)
        self.text_item.setFont(font)
        self.text_item.setZValue(151)
        self.addToGroup(self.text_item)

        self.setZValue(150)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable, False)

        self.update_endpoints(start_point, end_point, text)

    @property
    def text(self) -> str:
        return self.text_item.toPlainText()

    def update_endpoints(self, start_point: QPointF, end_point: QPointF,
                         text: Optional[str] = None) -> None:
        """
        Move the line and re-anchor the label at the new midpoint.

        Args:
            start_point: Start point in view coordinates
            end_point: End point in view coordinates
            text: New label, or None to keep the current one
        """
        self.start_point = QPointF(start_point)
        self.end_point = QPointF(end_point)
        self.line_item.setLine(QLineF(self.start_point, self.end_point))
        if text is not None:
            self.text_item.setPlainText(text)

        mid_point = QPointF(
            (self.start_point.x() + self.end_point.x()) / 2.0,
            (self.start_point.y() + self.end_point.y()) / 2.0,
        )
        self.text_item.setPos(mid_point + self.text_offset)

    def line_length(self) -> float:
        """Length of the line in view pixels."""
        return QLineF(self.start_point, self.end_point).length()
