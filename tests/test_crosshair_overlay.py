"""
Unit tests for the crosshair overlay (gui.crosshair_overlay).

Tests part hit-testing, visibility toggles and drag position reporting.
Requires PySide6; a QApplication is created if needed.
"""

import unittest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from PySide6.QtCore import QPointF
from PySide6.QtWidgets import QApplication

from core.mpr_planes import DragTarget, Plane
from gui.crosshair_overlay import CrosshairOverlay, VIEW_LINE_COLORS


class TestCrosshairOverlay(unittest.TestCase):
    """Hit testing and dragging on a 350 pixel view."""

    @classmethod
    def setUpClass(cls):
        cls._app = QApplication.instance() or QApplication(sys.argv)

    def setUp(self):
        self.overlay = CrosshairOverlay(Plane.AXIAL, 350)
        self.overlay.update_position(100, 200)
        self.moves = []
        self.overlay.crosshair_moved.connect(lambda x, y, t: self.moves.append((x, y, t)))

    def test_starts_centered(self):
        self.assertEqual(CrosshairOverlay(Plane.CORONAL, 350).position(), (175.0, 175.0))

    def test_line_colors_per_plane(self):
        overlay = CrosshairOverlay(Plane.CORONAL, 350)
        self.assertEqual(overlay.horizontal_color.blue(), 255)
        self.assertEqual(overlay.vertical_color.green(), 255)
        self.assertEqual(set(VIEW_LINE_COLORS), {Plane.AXIAL, Plane.CORONAL, Plane.SAGITTAL})

    def test_hit_center(self):
        self.assertEqual(self.overlay.hit_test(QPointF(103, 203)), DragTarget.CENTER)

    def test_hit_horizontal_line(self):
        self.assertEqual(self.overlay.hit_test(QPointF(300, 202)), DragTarget.DEPTH_AXIS)

    def test_hit_vertical_line(self):
        self.assertEqual(self.overlay.hit_test(QPointF(98, 20)), DragTarget.ORTHOGONAL_AXIS)

    def test_miss(self):
        self.assertIsNone(self.overlay.hit_test(QPointF(20, 20)))

    def test_hidden_parts_not_hit(self):
        self.overlay.set_axis_lines_visible(False)
        self.assertIsNone(self.overlay.hit_test(QPointF(300, 202)))
        self.assertEqual(self.overlay.hit_test(QPointF(100, 200)), DragTarget.CENTER)
        self.overlay.set_center_point_visible(False)
        self.assertIsNone(self.overlay.hit_test(QPointF(100, 200)))

    def test_set_all_visible(self):
        self.overlay.set_all_visible(False)
        self.assertFalse(self.overlay.isVisible())
        self.overlay.set_all_visible(True)
        self.assertTrue(self.overlay.axis_lines_visible)
        self.assertTrue(self.overlay.center_point_visible)

    def test_drag_horizontal_line_keeps_x(self):
        self.assertEqual(self.overlay.begin_drag(QPointF(300, 201)), DragTarget.DEPTH_AXIS)
        self.overlay.drag_to(QPointF(310, 250))
        self.assertEqual(self.moves, [(100.0, 250.0, "depth_axis")])

    def test_drag_vertical_line_keeps_y(self):
        self.overlay.begin_drag(QPointF(101, 20))
        self.overlay.drag_to(QPointF(140, 30))
        self.assertEqual(self.moves, [(140.0, 200.0, "orthogonal_axis")])

    def test_drag_center_moves_freely(self):
        self.overlay.begin_drag(QPointF(100, 200))
        self.overlay.drag_to(QPointF(50, 60))
        self.assertEqual(self.moves, [(50.0, 60.0, "center")])

    def test_no_signal_after_end_drag(self):
        self.overlay.begin_drag(QPointF(100, 200))
        self.assertTrue(self.overlay.dragging)
        self.overlay.end_drag()
        self.overlay.drag_to(QPointF(50, 60))
        self.assertFalse(self.overlay.dragging)
        self.assertEqual(self.moves, [])


if __name__ == "__main__":
    unittest.main()
