"""
Tests for MainWindow (gui.main_window) and FileOperationsHandler
(core.file_operations_handler).

The window's ConfigManager writes into a temporary HOME. The file handler
is exercised with stand-in loader and dialog objects so no real dialogs
open. Requires PySide6; a QApplication is created if needed.
"""

import os
import sys
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import numpy as np
from PySide6.QtWidgets import QApplication

from core.errors import VolumeLoadError
from core.file_operations_handler import FileOperationsHandler
from core.mpr_planes import ALL_PLANES, Plane
from core.slice_record import SliceRecord
from utils.config_manager import ConfigManager


class QtTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._app = QApplication.instance() or QApplication(sys.argv)

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._env = mock.patch.dict(os.environ, {"HOME": self._tmp.name, "APPDATA": self._tmp.name})
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()


class TestMainWindow(QtTestCase):
    """Layout, toggles and mode switching."""

    def setUp(self):
        super().setUp()
        from gui.main_window import MainWindow
        self.config = ConfigManager(config_filename="mpr_viewer_config_test.json")
        self.window = MainWindow(self.config)

    def tearDown(self):
        self.window.deleteLater()
        super().tearDown()

    def test_title_and_panes(self):
        self.assertEqual(self.window.windowTitle(), "DICOM Multi-Planar Reconstruction Viewer")
        self.assertEqual(set(self.window.views), set(ALL_PLANES))
        for plane in ALL_PLANES:
            self.assertEqual(self.window.views[plane].view_size, 350)
            self.assertFalse(self.window.sliders[plane].isEnabled())

    def test_initial_labels(self):
        self.assertEqual(self.window.coord_label.text(), "Patient Coords: (0.0, 0.0, 0.0)")
        self.assertEqual(self.window.slice_label.text(), "Slices: A:0/0 C:0/0 S:0/0")
        self.assertEqual(self.window.status_label.text(), "Ready")

    def test_label_setters(self):
        self.window.set_coordinate_text("Patient Coords: (1.0, 2.0, 3.0)")
        self.window.set_slice_text("Slices: A:1/2 C:1/2 S:1/2")
        self.window.update_status("Loading")
        self.assertEqual(self.window.coord_label.text(), "Patient Coords: (1.0, 2.0, 3.0)")
        self.assertEqual(self.window.slice_label.text(), "Slices: A:1/2 C:1/2 S:1/2")
        self.assertEqual(self.window.status_label.text(), "Loading")

    def test_mouse_mode_combo(self):
        modes = []
        self.window.mouse_mode_changed.connect(modes.append)
        self.window.mouse_mode_combo.setCurrentText("Measure")
        self.assertEqual(modes, ["measure"])
        self.assertEqual(self.window.get_current_mouse_mode(), "measure")
        for view in self.window.views.values():
            self.assertEqual(view.mouse_mode, "measure")

    def test_crosshair_toggle_disables_sub_toggles(self):
        emitted = []
        self.window.crosshair_visibility_changed.connect(emitted.append)
        self.window.crosshair_checkbox.setChecked(False)
        self.assertEqual(emitted, [False])
        self.assertFalse(self.window.axis_lines_checkbox.isEnabled())
        self.assertFalse(self.window.intersections_checkbox.isEnabled())
        self.assertFalse(self.config.get_crosshair_visible())

    def test_reenabling_crosshair_reemits_sub_toggles(self):
        axis = []
        self.window.axis_lines_checkbox.setChecked(False)
        self.window.crosshair_checkbox.setChecked(False)
        self.window.axis_lines_visibility_changed.connect(axis.append)
        self.window.crosshair_checkbox.setChecked(True)
        self.assertEqual(axis, [False])

    def test_apply_crosshair_settings(self):
        self.window.axis_lines_checkbox.setChecked(False)
        self.window.apply_crosshair_settings()
        overlay = self.window.views[Plane.AXIAL].overlay
        self.assertTrue(overlay.isVisible())
        self.assertFalse(overlay.axis_lines_visible)

    def test_theme_action_saves_theme(self):
        self.assertTrue(self.window.dark_theme_action.isChecked())
        self.window.light_theme_action.trigger()
        self.assertEqual(self.config.get_theme(), "light")
        self.assertFalse(self.window.dark_theme_action.isChecked())


class FakeLoader:
    def __init__(self, slices=None, error=None, failed=0):
        self.slices = slices or []
        self.error = error
        self.failed_files = [("bad.dcm", "No pixel data")] * failed

    def load_directory(self, directory, progress_callback=None):
        if progress_callback:
            progress_callback(1, 1, "slice.dcm")
        if self.error is not None:
            raise self.error
        return self.slices


class FakeDialog:
    def __init__(self, folder=None):
        self.folder = folder
        self.errors = []

    def open_folder(self, parent=None):
        return self.folder

    def show_error(self, parent, title, header, message):
        self.errors.append((title, header, message))


class TestFileOperationsHandler(QtTestCase):
    """Load flow, status messages and error reporting."""

    def _handler(self, loader, dialog):
        self.cleared = []
        self.published = []
        self.status = []
        return FileOperationsHandler(
            loader,
            dialog,
            None,
            clear_data_callback=lambda: self.cleared.append(True),
            load_volume_callback=self.published.append,
            update_status_callback=self.status.append,
            get_summary_callback=lambda: "Loaded 1 slices\nVolume dimensions: 2x2x1",
        )

    def _slices(self):
        return [SliceRecord(pixel_data=np.zeros((2, 2), dtype=np.int16))]

    def test_successful_load(self):
        slices = self._slices()
        handler = self._handler(FakeLoader(slices), FakeDialog())
        self.assertTrue(handler.load_folder("/data/series1"))
        self.assertEqual(self.cleared, [True])
        self.assertEqual(self.published, [slices])
        self.assertIn("Loading file 1/1: slice.dcm...", self.status)
        self.assertEqual(self.status[-1], "series1: Loaded 1 slices - Volume dimensions: 2x2x1")

    def test_skipped_files_reported(self):
        handler = self._handler(FakeLoader(self._slices(), failed=2), FakeDialog())
        handler.load_folder("/data/series1")
        self.assertTrue(self.status[-1].endswith("(2 file(s) skipped)"))

    def test_load_error_keeps_previous_volume(self):
        dialog = FakeDialog()
        handler = self._handler(FakeLoader(error=VolumeLoadError("No DICOM files found")), dialog)
        self.assertFalse(handler.load_folder("/data/empty"))
        self.assertEqual(self.published, [])
        self.assertEqual(self.cleared, [])
        self.assertEqual(self.status[-1], "Ready")
        self.assertEqual(dialog.errors, [("Error", "Failed to load DICOM volume", "No DICOM files found")])

    def test_memory_error(self):
        dialog = FakeDialog()
        handler = self._handler(FakeLoader(error=MemoryError("too big")), dialog)
        self.assertFalse(handler.load_folder("/data/huge"))
        self.assertEqual(dialog.errors[0][0], "Memory Error")

    def test_cancelled_dialog(self):
        handler = self._handler(FakeLoader(self._slices()), FakeDialog(folder=None))
        self.assertFalse(handler.open_folder())
        self.assertEqual(self.published, [])

    def test_open_folder_loads_selection(self):
        handler = self._handler(FakeLoader(self._slices()), FakeDialog(folder="/data/series2"))
        self.assertTrue(handler.open_folder())
        self.assertEqual(len(self.published), 1)


if __name__ == "__main__":
    unittest.main()
