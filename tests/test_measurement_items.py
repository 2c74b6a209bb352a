"""
Unit tests for Measurement Items module (tools.measurement_items).

Tests MeasurementItem construction, styling of draft and committed items,
and endpoint updates. Requires PySide6; a QApplication is created if needed.
"""

import unittest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from PySide6.QtCore import QPointF, Qt
from PySide6.QtWidgets import QApplication, QGraphicsScene


class TestMeasurementItem(unittest.TestCase):
    """Test MeasurementItem construction and attributes. Requires QApplication."""

    @classmethod
    def setUpClass(cls):
        """Ensure QApplication exists for Qt graphics items."""
        cls._app = QApplication.instance() or QApplication(sys.argv)

    def test_constructs_with_line_and_label(self):
        from tools.measurement_items import MeasurementItem

        item = MeasurementItem(QPointF(0.0, 0.0), QPointF(30.0, 40.0), "5.00 mm")

        self.assertEqual(item.start_point, QPointF(0.0, 0.0))
        self.assertEqual(item.end_point, QPointF(30.0, 40.0))
        self.assertEqual(item.text, "5.00 mm")
        self.assertAlmostEqual(item.line_length(), 50.0)
        self.assertIn(item.line_item, item.childItems())
        self.assertIn(item.text_item, item.childItems())

    def test_label_anchored_at_midpoint(self):
        from tools.measurement_items import MeasurementItem

        item = MeasurementItem(QPointF(10.0, 10.0), QPointF(30.0, 50.0), "")
        self.assertEqual(item.text_item.pos(), QPointF(20.0, 30.0) + item.text_offset)

    def test_draft_is_dashed_and_committed_is_solid(self):
        from tools.measurement_items import MeasurementItem

        draft = MeasurementItem(QPointF(0, 0), QPointF(5, 0))
        committed = MeasurementItem(QPointF(0, 0), QPointF(5, 0), committed=True)
        self.assertEqual(draft.line_item.pen().style(), Qt.PenStyle.DashLine)
        self.assertEqual(committed.line_item.pen().style(), Qt.PenStyle.SolidLine)

    def test_custom_colors(self):
        from tools.measurement_items import MeasurementItem

        item = MeasurementItem(
            QPointF(0, 0), QPointF(5, 0), "x",
            line_color=(255, 0, 0), font_color=(0, 0, 255), line_thickness=3,
        )
        pen = item.line_item.pen()
        self.assertEqual(pen.color().red(), 255)
        self.assertEqual(pen.width(), 3)
        self.assertEqual(item.text_item.defaultTextColor().blue(), 255)

    def test_update_endpoints_keeps_text_when_none(self):
        from tools.measurement_items import MeasurementItem

        item = MeasurementItem(QPointF(0, 0), QPointF(5, 0), "first")
        item.update_endpoints(QPointF(0, 0), QPointF(0, 8))
        self.assertEqual(item.text, "first")
        self.assertAlmostEqual(item.line_length(), 8.0)
        item.update_endpoints(QPointF(0, 0), QPointF(0, 9), "second")
        self.assertEqual(item.text, "second")

    def test_added_to_scene_as_one_item(self):
        from tools.measurement_items import MeasurementItem

        scene = QGraphicsScene()
        item = MeasurementItem(QPointF(0, 0), QPointF(5, 0), "x")
        scene.addItem(item)
        self.assertIs(item.line_item.scene(), scene)
        scene.removeItem(item)
        self.assertIsNone(item.text_item.scene())


if __name__ == "__main__":
    unittest.main()
