"""
Tests for ConfigManager (utils.config_manager).

Covers defaults, validated getters/setters and persistence. HOME and APPDATA
point at a temporary directory so the user's real config is never touched.
"""

import json
import os
import sys
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from utils.config_manager import ConfigManager


TEST_CONFIG_FILENAME = "mpr_viewer_config_test.json"


class TestConfigManager(unittest.TestCase):
    """Tests for config keys and getters/setters."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._env = mock.patch.dict(os.environ, {"HOME": self._tmp.name, "APPDATA": self._tmp.name})
        self._env.start()
        self.config = ConfigManager(config_filename=TEST_CONFIG_FILENAME)
        self.config_path = self.config.config_path

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def test_config_lives_under_temp_home(self):
        self.assertTrue(str(self.config_path).startswith(self._tmp.name))

    def test_defaults(self):
        self.assertEqual(self.config.get_view_size(), 350)
        self.assertEqual(self.config.get_theme(), "dark")
        self.assertTrue(self.config.get_crosshair_visible())
        self.assertTrue(self.config.get_crosshair_axis_lines_visible())
        self.assertTrue(self.config.get_crosshair_center_visible())
        self.assertEqual(self.config.get_measurement_min_pixels(), 2.0)
        self.assertEqual(self.config.get_measurement_line_color(), (0, 255, 0))
        self.assertEqual(self.config.get_last_path(), "")

    def test_persists_to_disk(self):
        """Values are written on set and reloaded by a new ConfigManager."""
        self.config.set_crosshair_axis_lines_visible(False)
        self.config.set_last_path("/data/ct")
        self.assertTrue(self.config_path.exists(), "Config file should exist after set")
        reloaded = ConfigManager(config_filename=TEST_CONFIG_FILENAME)
        self.assertFalse(reloaded.get_crosshair_axis_lines_visible())
        self.assertEqual(reloaded.get_last_path(), "/data/ct")

    def test_invalid_theme_ignored(self):
        self.config.set_theme("purple")
        self.assertEqual(self.config.get_theme(), "dark")
        self.config.set_theme("light")
        self.assertEqual(self.config.get_theme(), "light")

    def test_view_size_validation(self):
        self.config.set_view_size(10)
        self.assertEqual(self.config.get_view_size(), 350)
        self.config.set_view_size(400)
        self.assertEqual(self.config.get_view_size(), 400)
        self.config.set("view_size", "huge")
        self.assertEqual(self.config.get_view_size(), 350)

    def test_min_pixels_validation(self):
        self.config.set_measurement_min_pixels(-1)
        self.assertEqual(self.config.get_measurement_min_pixels(), 2.0)
        self.config.set_measurement_min_pixels(5)
        self.assertEqual(self.config.get_measurement_min_pixels(), 5.0)

    def test_line_color_clamped(self):
        self.config.set_measurement_line_color(300, -5, 128)
        self.assertEqual(self.config.get_measurement_line_color(), (255, 0, 128))

    def test_corrupt_file_falls_back_to_defaults(self):
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        reloaded = ConfigManager(config_filename=TEST_CONFIG_FILENAME)
        self.assertEqual(reloaded.get_view_size(), 350)

    def test_partial_file_merged_with_defaults(self):
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump({"theme": "light"}, f)
        reloaded = ConfigManager(config_filename=TEST_CONFIG_FILENAME)
        self.assertEqual(reloaded.get_theme(), "light")
        self.assertEqual(reloaded.get_crosshair_line_thickness(), 2)


if __name__ == "__main__":
    unittest.main()
