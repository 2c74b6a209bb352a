"""
MPR Viewer - Main Application Entry Point

This module is the main entry point for the multi-planar reconstruction
viewer. It initializes the application, creates the main window, wires the
coordinators together and runs the event loop.

Inputs:
    - Command line arguments (optional DICOM folder to open)

Outputs:
    - Running MPR viewer application

Requirements:
    - PySide6 for application framework
    - pydicom for DICOM file handling
    - PIL/Pillow for image processing
    - numpy for array operations
    - All other application modules
"""

import sys
import os
from pathlib import Path

# Add src directory to path
src_dir = Path(__file__).parent
sys.path.insert(0, str(src_dir))

from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory
from PySide6.QtCore import QObject, QTimer

from gui.main_window import MainWindow
from gui.dialogs.file_dialog import FileDialog
from gui.measurement_coordinator import MeasurementCoordinator
from gui.mpr_coordinator import MPRCoordinator
from core.dicom_loader import DICOMLoader
from core.file_operations_handler import FileOperationsHandler
from core.measurement_engine import MeasurementEngine
from core.volume_model import VolumeModel
from utils.config_manager import ConfigManager


class MPRViewerApp(QObject):
    """
    Main application class for the MPR viewer.

    Coordinates all components and handles application logic.
    """

    def __init__(self, argv=None):
        """Initialize the application."""
        super().__init__()

        argv = list(sys.argv if argv is None else argv)

        # Create Qt application first (before any widgets)
        self.app = QApplication.instance() or QApplication(argv)
        self.app.setApplicationName("MPR Viewer")

        # Set Fusion style for consistent cross-platform appearance
        self.app.setStyle(QStyleFactory.create("Fusion"))

        # Initialize managers
        self.config_manager = ConfigManager()
        self.dicom_loader = DICOMLoader()
        self.volume = VolumeModel()

        # Create main window
        self.main_window = MainWindow(self.config_manager)
        self.file_dialog = FileDialog(self.config_manager)

        self.measurement_engine = MeasurementEngine(
            self.volume,
            view_size=self.config_manager.get_view_size(),
            min_pixels=self.config_manager.get_measurement_min_pixels(),
        )
        self._initialize_handlers()
        self._connect_signals()

        # Folder given on the command line is loaded once the window is up
        self._initial_folder = argv[1] if len(argv) > 1 else None

    def _initialize_handlers(self) -> None:
        """Initialize coordinators and handlers."""
        self.mpr_coordinator = MPRCoordinator(
            self.volume,
            self.main_window.views,
            self.main_window.sliders,
            set_coordinate_text=self.main_window.set_coordinate_text,
            set_slice_text=self.main_window.set_slice_text,
        )
        self.measurement_coordinator = MeasurementCoordinator(
            self.measurement_engine,
            self.main_window.views,
            self.config_manager,
        )
        self.file_operations_handler = FileOperationsHandler(
            self.dicom_loader,
            self.file_dialog,
            self.main_window,
            clear_data_callback=self.measurement_coordinator.clear_measurements,
            load_volume_callback=self.mpr_coordinator.load_volume,
            update_status_callback=self.main_window.update_status,
            get_summary_callback=self.volume.summary,
        )

    def _connect_signals(self) -> None:
        """Connect main window signals to handlers."""
        self.mpr_coordinator.connect_widgets()
        self.measurement_coordinator.connect_views()

        self.main_window.open_folder_requested.connect(self._open_folder)
        self.main_window.reset_views_requested.connect(self.mpr_coordinator.reset_views)
        self.main_window.sync_views_requested.connect(self.mpr_coordinator.sync_views)
        self.main_window.clear_measurements_requested.connect(self.measurement_coordinator.clear_measurements)
        self.main_window.crosshair_visibility_changed.connect(self.mpr_coordinator.set_crosshair_visible)
        self.main_window.axis_lines_visibility_changed.connect(self.mpr_coordinator.set_axis_lines_visible)
        self.main_window.plane_intersections_visibility_changed.connect(
            self.mpr_coordinator.set_center_point_visible
        )

    def _open_folder(self) -> None:
        """Handle open folder request."""
        self.file_operations_handler.open_folder()

    def _open_initial_folder(self) -> None:
        if self._initial_folder and os.path.isdir(self._initial_folder):
            self.file_operations_handler.load_folder(self._initial_folder)

    def run(self) -> int:
        """
        Run the application.

        Returns:
            Exit code
        """
        self.main_window.show()
        QTimer.singleShot(0, self._open_initial_folder)
        return self.app.exec()


def exception_hook(exctype, value, tb):
    """Global exception handler to catch unhandled exceptions."""
    import traceback
    error_msg = ''.join(traceback.format_exception(exctype, value, tb))
    print(f"Unhandled exception:\n{error_msg}")

    if QApplication.instance():
        QMessageBox.critical(
            None,
            "Fatal Error",
            f"An unexpected error occurred:\n\n{exctype.__name__}: {value}\n\nThe application may be unstable."
        )


def main():
    """Main entry point."""
    # Install global exception hook
    sys.excepthook = exception_hook

    try:
        app = MPRViewerApp()
        return app.run()
    except Exception as e:
        print(f"Fatal error: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
