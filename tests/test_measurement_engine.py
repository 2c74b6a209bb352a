"""
Unit tests for MeasurementEngine (core.measurement_engine).

Tests per-plane scale factors, distances, the commit threshold and the
draw/commit lifecycle. No QApplication required.
"""

import unittest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import numpy as np

from core.measurement_engine import MeasurementEngine
from core.mpr_planes import Plane
from core.slice_record import SliceRecord
from core.volume_model import VolumeModel


def make_volume(pixel_spacing=(1.0, 1.0), slice_thickness=1.0):
    """10 columns x 20 rows x 5 slices."""
    volume = VolumeModel()
    volume.load([
        SliceRecord(
            pixel_data=np.zeros((20, 10), dtype=np.int16),
            image_position=(0.0, 0.0, float(k)),
            pixel_spacing=pixel_spacing,
            slice_thickness=slice_thickness,
        )
        for k in range(5)
    ])
    return volume


class TestScaleFactors(unittest.TestCase):
    """mm per view pixel for each plane."""

    def setUp(self):
        self.engine = MeasurementEngine(make_volume((0.5, 2.0), 3.0), view_size=100)

    def test_axial(self):
        sx, sy = self.engine.scale_factors(Plane.AXIAL)
        self.assertAlmostEqual(sx, 0.05)
        self.assertAlmostEqual(sy, 0.4)

    def test_coronal(self):
        sx, sy = self.engine.scale_factors(Plane.CORONAL)
        self.assertAlmostEqual(sx, 0.05)
        self.assertAlmostEqual(sy, 0.15)

    def test_sagittal(self):
        sx, sy = self.engine.scale_factors(Plane.SAGITTAL)
        self.assertAlmostEqual(sx, 0.4)
        self.assertAlmostEqual(sy, 0.15)

    def test_empty_volume(self):
        engine = MeasurementEngine(VolumeModel(), view_size=100)
        self.assertEqual(engine.scale_factors(Plane.CORONAL), (0.0, 0.0))
        self.assertEqual(engine.distance(Plane.CORONAL, (0, 0), (50, 50)), 0.0)


class TestDistance(unittest.TestCase):
    """Euclidean distance in the plane's own axes."""

    def test_axial_distance(self):
        engine = MeasurementEngine(make_volume(), view_size=100)
        # sx = 10/100, sy = 20/100
        self.assertAlmostEqual(engine.distance(Plane.AXIAL, (0, 0), (30, 20)), 5.0)

    def test_direction_does_not_matter(self):
        engine = MeasurementEngine(make_volume(), view_size=100)
        forward = engine.distance(Plane.SAGITTAL, (10, 10), (40, 70))
        backward = engine.distance(Plane.SAGITTAL, (40, 70), (10, 10))
        self.assertAlmostEqual(forward, backward)


class TestMeasurementLifecycle(unittest.TestCase):
    """Draft, commit and clear."""

    def setUp(self):
        self.engine = MeasurementEngine(make_volume(), view_size=100)
        self.session = self.engine.session(Plane.AXIAL)

    def test_short_drag_is_discarded(self):
        self.session.start((10, 10))
        self.session.update((11, 11))
        self.assertIsNone(self.session.finish())
        self.assertEqual(self.session.measurements, ())
        self.assertFalse(self.session.measuring)

    def test_drag_at_threshold_is_discarded(self):
        self.session.start((10, 10))
        self.session.update((12, 12))
        self.assertIsNone(self.session.finish())

    def test_drag_above_threshold_is_committed(self):
        self.session.start((10, 10))
        self.assertTrue(self.session.measuring)
        self.assertAlmostEqual(self.session.update((20, 10)), 1.0)
        measurement = self.session.finish()
        self.assertIsNotNone(measurement)
        self.assertEqual(measurement.plane, Plane.AXIAL)
        self.assertEqual(measurement.start, (10.0, 10.0))
        self.assertEqual(measurement.end, (20.0, 10.0))
        self.assertEqual(measurement.formatted, "1.00 mm")
        self.assertEqual(self.session.measurements, (measurement,))

    def test_update_without_start(self):
        self.assertIsNone(self.session.update((5, 5)))
        self.assertIsNone(self.session.finish())

    def test_custom_threshold(self):
        engine = MeasurementEngine(make_volume(), view_size=100, min_pixels=10)
        session = engine.session(Plane.CORONAL)
        session.start((0, 0))
        session.update((8, 8))
        self.assertIsNone(session.finish())

    def test_sessions_are_per_plane(self):
        self.session.start((0, 0))
        self.session.update((50, 0))
        self.session.finish()
        self.assertEqual(self.engine.session(Plane.CORONAL).measurements, ())

    def test_clear_all(self):
        self.session.start((0, 0))
        self.session.update((50, 0))
        self.session.finish()
        self.engine.session(Plane.SAGITTAL).start((1, 1))
        self.engine.clear_all()
        self.assertEqual(self.session.measurements, ())
        self.assertFalse(self.engine.session(Plane.SAGITTAL).measuring)


if __name__ == "__main__":
    unittest.main()
