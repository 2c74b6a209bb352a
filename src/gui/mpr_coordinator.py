"""
MPR Coordinator

This module coordinates the three plane views, their sliders and the status
labels with the crosshair sync controller.

Inputs:
    - View clicks and crosshair drags from the plane views
    - Slider value changes
    - Toolbar requests (reset, sync, crosshair visibility)

Outputs:
    - Rasters, markers and slider positions pushed into the widgets
    - Patient coordinate and slice status text

Requirements:
    - PySide6 for widgets
    - CrosshairSyncController for the interaction state machine
    - PlaneView for display
"""

from PySide6.QtWidgets import QSlider
from typing import Callable, Dict, List, Optional, Tuple
import numpy as np

from core.coordinate_transform import CoordinateTransformEngine
from core.crosshair_sync_controller import CrosshairSyncController
from core.mpr_planes import ALL_PLANES, DragTarget, Plane
from core.slice_reconstructor import SliceReconstructor
from core.slice_record import SliceRecord
from core.volume_model import VolumeModel
from gui.plane_view import PlaneView
from utils.dicom_utils import format_patient_coordinate


class MPRCoordinator:
    """
    Coordinates MPR display operations.

    Responsibilities:
    - Forward view and slider interactions to the sync controller
    - Apply controller output to views, sliders and labels
    - Toggle crosshair visibility in all views
    """

    def __init__(
        self,
        volume: VolumeModel,
        views: Dict[Plane, PlaneView],
        sliders: Dict[Plane, QSlider],
        set_coordinate_text: Optional[Callable[[str], None]] = None,
        set_slice_text: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the MPR coordinator.

        Args:
            volume: Volume model shared with the measurement engine
            views: Plane view per plane
            sliders: Slice slider per plane
            set_coordinate_text: Callback to show the patient coordinate label
            set_slice_text: Callback to show the slice status label
        """
        self.volume = volume
        self.views = views
        self.sliders = sliders
        self.set_coordinate_text = set_coordinate_text
        self.set_slice_text = set_slice_text

        view_size = next(iter(views.values())).view_size if views else 350
        self.transform = CoordinateTransformEngine(volume, view_size)
        self.reconstructor = SliceReconstructor(volume)
        self.controller = CrosshairSyncController(
            volume,
            self.transform,
            self.reconstructor,
            set_slider_value=self._set_slider_value,
            show_raster=self._show_raster,
            show_markers=self._show_markers,
            show_cursor=self._show_cursor,
            show_slice_indices=self._show_slice_indices,
            configure_sliders=self._configure_sliders,
        )

    def connect_widgets(self) -> None:
        """Connect view and slider signals to the controller."""
        for plane in ALL_PLANES:
            view = self.views[plane]
            view.view_clicked.connect(lambda x, y, p=plane: self.handle_view_clicked(p, x, y))
            view.crosshair_dragged.connect(
                lambda x, y, target, p=plane: self.handle_crosshair_dragged(p, x, y, target)
            )
            self.sliders[plane].valueChanged.connect(
                lambda value, p=plane: self.controller.on_slider_change(p, value)
            )

    def load_volume(self, slices: List[SliceRecord]) -> Tuple[int, int, int]:
        """
        Publish a new set of slices and reset the views to its center.

        Args:
            slices: Loaded slice records

        Returns:
            (width, height, depth) of the new volume

        Raises:
            VolumeLoadError: If slices is empty
        """
        self.volume.load(slices)
        self.controller.on_volume_loaded()
        return (self.volume.width, self.volume.height, self.volume.depth)

    def handle_view_clicked(self, plane: Plane, x: float, y: float) -> None:
        self.controller.on_view_interaction(plane, x, y, DragTarget.CENTER)

    def handle_crosshair_dragged(self, plane: Plane, x: float, y: float, target: str) -> None:
        self.controller.on_view_interaction(plane, x, y, DragTarget(target))

    def reset_views(self) -> None:
        self.controller.reset()

    def sync_views(self) -> None:
        self.controller.synchronize()

    def set_crosshair_visible(self, visible: bool) -> None:
        for view in self.views.values():
            view.overlay.set_all_visible(visible)

    def set_axis_lines_visible(self, visible: bool) -> None:
        for view in self.views.values():
            view.overlay.set_axis_lines_visible(visible)

    def set_center_point_visible(self, visible: bool) -> None:
        for view in self.views.values():
            view.overlay.set_center_point_visible(visible)

    # Controller output

    def _configure_sliders(self, maxima: Dict[Plane, int]) -> None:
        for plane, maximum in maxima.items():
            slider = self.sliders[plane]
            slider.setMinimum(0)
            slider.setMaximum(max(0, maximum))
            slider.setEnabled(True)

    def _set_slider_value(self, plane: Plane, index: int) -> None:
        # valueChanged fires here; the controller ignores it while propagating
        self.sliders[plane].setValue(index)

    def _show_raster(self, plane: Plane, raster: np.ndarray) -> None:
        self.views[plane].set_raster(raster)

    def _show_markers(self, markers: Dict[Plane, Tuple[float, float]]) -> None:
        for plane, (x, y) in markers.items():
            self.views[plane].set_marker(x, y)

    def _show_cursor(self, point: np.ndarray) -> None:
        if self.set_coordinate_text:
            self.set_coordinate_text(format_patient_coordinate(point))

    def _show_slice_indices(self, indices: Dict[Plane, int]) -> None:
        if self.set_slice_text:
            self.set_slice_text(f"Slices: {self.controller.slice_status_text()}")
