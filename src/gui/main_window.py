"""
Main Application Window

This module implements the main application window with menu bar, toolbar,
the three MPR panes (coronal, sagittal, axial) and the status bar.

Inputs:
    - User interactions (menu selections, toolbar clicks, checkbox toggles)
    - Application configuration

Outputs:
    - Main application interface
    - Request signals handled by the application controller

Requirements:
    - PySide6 for GUI components
    - ConfigManager for settings
    - PlaneView for the three panes
"""

from PySide6.QtWidgets import (QMainWindow, QToolBar, QWidget, QVBoxLayout, QHBoxLayout,
                                QComboBox, QLabel, QSizePolicy, QCheckBox, QSlider,
                                QApplication)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QAction, QActionGroup, QBrush, QKeySequence
from typing import Dict, Optional

from core.mpr_planes import Plane
from gui.main_window_theme import get_theme_stylesheet, get_theme_viewer_background_color
from gui.plane_view import MOUSE_MODE_CROSSHAIR, MOUSE_MODE_MEASURE, PlaneView
from utils.config_manager import ConfigManager

# Left-to-right pane order
PANE_ORDER = (Plane.CORONAL, Plane.SAGITTAL, Plane.AXIAL)


class MainWindow(QMainWindow):
    """
    Main application window for the MPR viewer.

    Provides:
    - Menu bar with file operations and theme selection
    - Toolbar with load, crosshair toggles, reset/sync, measurement controls
    - Three plane views, each with a slice slider
    - Status bar for load messages
    """

    # Signals
    open_folder_requested = Signal()
    reset_views_requested = Signal()  # Emitted when Reset Views is clicked
    sync_views_requested = Signal()  # Emitted when Sync Views is clicked
    clear_measurements_requested = Signal()  # Emitted when Clear Measurements is clicked
    mouse_mode_changed = Signal(str)  # Emitted when mouse mode changes ("crosshair" or "measure")
    crosshair_visibility_changed = Signal(bool)  # "Crosshair Tool" checkbox
    axis_lines_visibility_changed = Signal(bool)  # "Axis Lines" checkbox
    plane_intersections_visibility_changed = Signal(bool)  # "Plane Intersections" checkbox

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize the main window.

        Args:
            config_manager: Optional ConfigManager instance
        """
        super().__init__()

        self.config_manager = config_manager or ConfigManager()
        self.views: Dict[Plane, PlaneView] = {}
        self.sliders: Dict[Plane, QSlider] = {}

        # Window properties
        self.setWindowTitle("DICOM Multi-Planar Reconstruction Viewer")
        self.setGeometry(100, 100,
                         self.config_manager.get("window_width", 1400),
                         self.config_manager.get("window_height", 700))

        # Create UI components
        self._create_menu_bar()
        self._create_toolbar()
        self._create_status_bar()
        self._create_central_widget()

        # Apply theme
        self._apply_theme()

    def _create_menu_bar(self) -> None:
        """Create the application menu bar."""
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        open_folder_action = QAction("Load DICOM &Folder...", self)
        open_folder_action.setShortcut(QKeySequence("Ctrl+O"))
        open_folder_action.triggered.connect(self.open_folder_requested.emit)
        file_menu.addAction(open_folder_action)
        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menu_bar.addMenu("&View")
        theme_menu = view_menu.addMenu("&Theme")
        theme_group = QActionGroup(self)
        theme_group.setExclusive(True)

        self.light_theme_action = QAction("&Light", self)
        self.light_theme_action.setCheckable(True)
        self.light_theme_action.triggered.connect(lambda: self._set_theme("light"))
        theme_group.addAction(self.light_theme_action)
        theme_menu.addAction(self.light_theme_action)

        self.dark_theme_action = QAction("&Dark", self)
        self.dark_theme_action.setCheckable(True)
        self.dark_theme_action.triggered.connect(lambda: self._set_theme("dark"))
        theme_group.addAction(self.dark_theme_action)
        theme_menu.addAction(self.dark_theme_action)

        if self.config_manager.get_theme() == "light":
            self.light_theme_action.setChecked(True)
        else:
            self.dark_theme_action.setChecked(True)

    def _create_toolbar(self) -> None:
        """Create the application toolbar."""
        toolbar = QToolBar("Main Toolbar", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)
        self.main_toolbar = toolbar

        load_action = QAction("Load DICOM Folder", self)
        load_action.setToolTip("Load a folder of axial DICOM slices")
        load_action.triggered.connect(self.open_folder_requested.emit)
        toolbar.addAction(load_action)

        toolbar.addSeparator()

        # Crosshair visibility toggles
        self.crosshair_checkbox = QCheckBox("Crosshair Tool")
        self.crosshair_checkbox.setChecked(self.config_manager.get_crosshair_visible())
        self.crosshair_checkbox.toggled.connect(self._on_crosshair_toggled)
        toolbar.addWidget(self.crosshair_checkbox)

        self.axis_lines_checkbox = QCheckBox("Axis Lines")
        self.axis_lines_checkbox.setChecked(self.config_manager.get_crosshair_axis_lines_visible())
        self.axis_lines_checkbox.toggled.connect(self._on_axis_lines_toggled)
        toolbar.addWidget(self.axis_lines_checkbox)

        self.intersections_checkbox = QCheckBox("Plane Intersections")
        self.intersections_checkbox.setChecked(self.config_manager.get_crosshair_center_visible())
        self.intersections_checkbox.toggled.connect(self._on_intersections_toggled)
        toolbar.addWidget(self.intersections_checkbox)

        toolbar.addSeparator()

        reset_views_action = QAction("Reset Views", self)
        reset_views_action.setToolTip("Move every view to its middle slice")
        reset_views_action.triggered.connect(self.reset_views_requested.emit)
        toolbar.addAction(reset_views_action)

        sync_views_action = QAction("Sync Views", self)
        sync_views_action.setToolTip("Re-derive all slices from the crosshair position")
        sync_views_action.triggered.connect(self.sync_views_requested.emit)
        toolbar.addAction(sync_views_action)

        toolbar.addSeparator()

        toolbar.addWidget(QLabel("Mode:"))
        self.mouse_mode_combo = QComboBox()
        self.mouse_mode_combo.setObjectName("mouse_mode_combo")
        self.mouse_mode_combo.addItems(["Crosshair", "Measure"])
        self.mouse_mode_combo.currentTextChanged.connect(self._on_mouse_mode_combo_changed)
        toolbar.addWidget(self.mouse_mode_combo)

        clear_measurements_action = QAction("Clear Measurements", self)
        clear_measurements_action.triggered.connect(self.clear_measurements_requested.emit)
        toolbar.addAction(clear_measurements_action)

        # Spacer pushes the status labels to the right
        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        toolbar.addWidget(spacer)

        self.coord_label = QLabel("Patient Coords: (0.0, 0.0, 0.0)")
        toolbar.addWidget(self.coord_label)
        toolbar.addSeparator()
        self.slice_label = QLabel("Slices: A:0/0 C:0/0 S:0/0")
        toolbar.addWidget(self.slice_label)

    def _create_status_bar(self) -> None:
        """Create the status bar."""
        self.status_label = QLabel("Ready")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
        self.statusBar().addPermanentWidget(self.status_label, stretch=1)

    def _create_central_widget(self) -> None:
        """Create the three MPR panes side by side."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(12)

        view_size = self.config_manager.get_view_size()
        line_thickness = self.config_manager.get_crosshair_line_thickness()

        for plane in PANE_ORDER:
            pane = QWidget()
            pane_layout = QVBoxLayout(pane)
            pane_layout.setContentsMargins(0, 0, 0, 0)
            pane_layout.setSpacing(4)

            title = QLabel(f"{plane.value.capitalize()} View")
            title.setObjectName("view_title")
            title.setAlignment(Qt.AlignmentFlag.AlignCenter)
            pane_layout.addWidget(title)

            view = PlaneView(plane, view_size, line_thickness)
            pane_layout.addWidget(view, alignment=Qt.AlignmentFlag.AlignCenter)

            slider_row = QHBoxLayout()
            slider_row.addWidget(QLabel(f"{plane.value.capitalize()} Slice:"))
            slider = QSlider(Qt.Orientation.Horizontal)
            slider.setRange(0, 0)
            slider.setEnabled(False)
            slider_row.addWidget(slider, stretch=1)
            pane_layout.addLayout(slider_row)

            main_layout.addWidget(pane)
            self.views[plane] = view
            self.sliders[plane] = slider

        self.apply_crosshair_settings()

    def apply_crosshair_settings(self) -> None:
        """Push the checkbox states to every view's overlay."""
        self.axis_lines_checkbox.setEnabled(self.crosshair_checkbox.isChecked())
        self.intersections_checkbox.setEnabled(self.crosshair_checkbox.isChecked())
        for view in self.views.values():
            view.overlay.set_all_visible(self.crosshair_checkbox.isChecked())
            if self.crosshair_checkbox.isChecked():
                view.overlay.set_axis_lines_visible(self.axis_lines_checkbox.isChecked())
                view.overlay.set_center_point_visible(self.intersections_checkbox.isChecked())

    def _apply_theme(self) -> None:
        """Apply the current theme stylesheet and view background."""
        theme = self.config_manager.get_theme()
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(get_theme_stylesheet(theme))
        background = QBrush(get_theme_viewer_background_color(theme))
        for view in self.views.values():
            view.setBackgroundBrush(background)

    def _set_theme(self, theme: str) -> None:
        """
        Set the application theme and save the preference.

        Args:
            theme: Theme name ("light" or "dark")
        """
        self.config_manager.set_theme(theme)
        self._apply_theme()

    def _on_crosshair_toggled(self, checked: bool) -> None:
        self.config_manager.set_crosshair_visible(checked)
        # Sub-toggles follow the master toggle
        self.axis_lines_checkbox.setEnabled(checked)
        self.intersections_checkbox.setEnabled(checked)
        self.crosshair_visibility_changed.emit(checked)
        if checked:
            self.axis_lines_visibility_changed.emit(self.axis_lines_checkbox.isChecked())
            self.plane_intersections_visibility_changed.emit(self.intersections_checkbox.isChecked())

    def _on_axis_lines_toggled(self, checked: bool) -> None:
        self.config_manager.set_crosshair_axis_lines_visible(checked)
        self.axis_lines_visibility_changed.emit(checked)

    def _on_intersections_toggled(self, checked: bool) -> None:
        self.config_manager.set_crosshair_center_visible(checked)
        self.plane_intersections_visibility_changed.emit(checked)

    def _on_mouse_mode_combo_changed(self, text: str) -> None:
        mode = MOUSE_MODE_MEASURE if text == "Measure" else MOUSE_MODE_CROSSHAIR
        for view in self.views.values():
            view.set_mouse_mode(mode)
        self.mouse_mode_changed.emit(mode)

    def get_current_mouse_mode(self) -> str:
        return MOUSE_MODE_MEASURE if self.mouse_mode_combo.currentText() == "Measure" else MOUSE_MODE_CROSSHAIR

    def set_coordinate_text(self, text: str) -> None:
        self.coord_label.setText(text)

    def set_slice_text(self, text: str) -> None:
        self.slice_label.setText(text)

    def update_status(self, message: str) -> None:
        """
        Update the status bar message.

        Args:
            message: Status message to display
        """
        self.status_label.setText(message)

    def closeEvent(self, event) -> None:
        """
        Handle window close event.

        Args:
            event: Close event
        """
        # Save window geometry
        geometry = self.geometry()
        self.config_manager.set("window_width", geometry.width())
        self.config_manager.set("window_height", geometry.height())
        self.config_manager.save_config()

        event.accept()
