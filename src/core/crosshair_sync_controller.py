"""
Crosshair Sync Controller

This module keeps the single 3-D crosshair consistent across the axial,
coronal and sagittal views. An interaction in one view (click, crosshair
drag, slider move) is turned into a new real-world cursor and new slice
indices, and the results are pushed to the presentation layer.

Inputs:
    - View interactions classified by plane and drag target
    - Slider value changes per plane
    - Reset / synchronize requests

Outputs (through presentation callbacks):
    - Slider values, raster images, 2-D marker positions per view
    - Current real-world cursor and slice indices

Requirements:
    - numpy for the cursor
    - core.coordinate_transform, core.slice_reconstructor, core.volume_model
    - utils.debug_log for transition tracing
"""

from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple
import numpy as np

from core.coordinate_transform import CoordinateTransformEngine
from core.mpr_planes import ALL_PLANES, DragTarget, Plane
from core.slice_reconstructor import SliceReconstructor
from core.volume_model import VolumeModel
from utils.debug_log import debug_log


class SyncState(Enum):
    """Controller state; PROPAGATING suppresses re-entrant updates."""

    IDLE = "idle"
    PROPAGATING = "propagating"


class CrosshairSyncController:
    """
    State machine that propagates cursor and slice changes between views.

    Every public entry point runs its cascade in the PROPAGATING state.
    Slider callbacks that fire because the controller itself moved a slider
    arrive while PROPAGATING and are ignored, which is what prevents update
    cycles between the three views.
    """

    def __init__(
        self,
        volume: VolumeModel,
        transform: CoordinateTransformEngine,
        reconstructor: SliceReconstructor,
        set_slider_value: Optional[Callable[[Plane, int], None]] = None,
        show_raster: Optional[Callable[[Plane, np.ndarray], None]] = None,
        show_markers: Optional[Callable[[Dict[Plane, Tuple[float, float]]], None]] = None,
        show_cursor: Optional[Callable[[np.ndarray], None]] = None,
        show_slice_indices: Optional[Callable[[Dict[Plane, int]], None]] = None,
        configure_sliders: Optional[Callable[[Dict[Plane, int]], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            volume: Volume model
            transform: Coordinate transform engine for the same volume
            reconstructor: Raster source for the same volume
            set_slider_value: Called to move a plane's slider programmatically
            show_raster: Called with a plane's new uint8 raster
            show_markers: Called with the 2-D marker position of every view
            show_cursor: Called with the real-world cursor
            show_slice_indices: Called with the current index of every plane
            configure_sliders: Called with the maximum slider value of every plane after a load
        """
        self.volume = volume
        self.transform = transform
        self.reconstructor = reconstructor
        self.set_slider_value = set_slider_value
        self.show_raster = show_raster
        self.show_markers = show_markers
        self.show_cursor = show_cursor
        self.show_slice_indices = show_slice_indices
        self.configure_sliders = configure_sliders

        self._state = SyncState.IDLE
        self._cursor = np.zeros(3, dtype=np.float64)
        self._indices: Dict[Plane, int] = {plane: 0 for plane in ALL_PLANES}

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def cursor(self) -> np.ndarray:
        """Copy of the real-world crosshair position."""
        return self._cursor.copy()

    @property
    def slice_indices(self) -> Dict[Plane, int]:
        """Copy of the current slice index of every plane."""
        return dict(self._indices)

    def slice_index(self, plane: Plane) -> int:
        return self._indices[Plane(plane)]

    @contextmanager
    def _propagating(self) -> Iterator[None]:
        self._state = SyncState.PROPAGATING
        try:
            yield
        finally:
            self._state = SyncState.IDLE

    def _accepts_input(self) -> bool:
        return self._state == SyncState.IDLE and not self.volume.is_empty

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def on_volume_loaded(self) -> None:
        """Configure slider ranges for a new volume and reset to its center."""
        if self.volume.is_empty:
            return
        with self._propagating():
            if self.configure_sliders:
                self.configure_sliders({plane: self.volume.extent(plane) - 1 for plane in ALL_PLANES})
        self.reset()

    def on_view_interaction(
        self,
        plane: Plane,
        view_x: float,
        view_y: float,
        target: DragTarget = DragTarget.CENTER,
    ) -> None:
        """
        Handle a click or crosshair drag in one view.

        CENTER moves the cursor to the clicked point and re-derives all three
        slice indices. A line drag changes only the slice of the plane that
        line represents.

        Args:
            plane: View the interaction happened in
            view_x: Horizontal view coordinate
            view_y: Vertical view coordinate
            target: Which part of the crosshair is dragged
        """
        if not self._accepts_input():
            return
        plane = Plane(plane)
        target = DragTarget(target)

        with self._propagating():
            debug_log(
                "crosshair_sync_controller.on_view_interaction",
                "view interaction",
                {"plane": plane, "x": view_x, "y": view_y, "target": target},
            )
            if target == DragTarget.CENTER:
                point = self.transform.view_to_real_world(
                    plane, view_x, view_y, self._indices[plane], fallback=self._cursor
                )
                self._set_cursor(point)
                self._apply_indices(self.transform.slice_indices_for(point))
                self._refresh_markers()
                self._emit_slice_indices()
                return

            affected, index = self.transform.index_from_drag(plane, target, view_x, view_y)
            if index != self._indices[affected]:
                self._change_slice(affected, index)

    def on_slider_change(self, plane: Plane, index: int) -> None:
        """
        Handle a user slider move.

        Ignored while propagating. Out-of-range values are clamped; a value
        equal to the current index is a no-op.

        Args:
            plane: Plane whose slider moved
            index: New slider value
        """
        if not self._accepts_input():
            return
        plane = Plane(plane)
        index = self.volume.clamp_index(plane, index)
        if index == self._indices[plane]:
            return

        with self._propagating():
            debug_log(
                "crosshair_sync_controller.on_slider_change",
                "slider change",
                {"plane": plane, "index": index},
            )
            self._change_slice(plane, index)

    def reset(self) -> None:
        """Move every plane to its middle slice and center the cursor there."""
        if not self._accepts_input():
            return

        with self._propagating():
            middle = self.volume.middle_indices()
            point = self.volume.get_slice(middle[Plane.AXIAL]).image_position.copy()
            # The cursor must lie on every displayed slice, so move it onto the middle row and column
            point = self.transform.point_for_slice(Plane.CORONAL, middle[Plane.CORONAL], point)
            point = self.transform.point_for_slice(Plane.SAGITTAL, middle[Plane.SAGITTAL], point)
            debug_log("crosshair_sync_controller.reset", "reset to center", {"indices": middle})

            self._apply_indices(middle, force=True)
            self._set_cursor(point)
            self._refresh_markers()
            self._emit_slice_indices()

    def synchronize(self) -> None:
        """Re-derive all slice indices from the current cursor."""
        if not self._accepts_input():
            return

        with self._propagating():
            self._apply_indices(self.transform.slice_indices_for(self._cursor))
            self._emit_cursor()
            self._refresh_markers()
            self._emit_slice_indices()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def markers(self) -> Dict[Plane, Tuple[float, float]]:
        """2-D crosshair position of every view for the current cursor."""
        if self.volume.is_empty:
            return {plane: (0.0, 0.0) for plane in ALL_PLANES}
        return {
            Plane.AXIAL: self.transform.real_world_to_view(Plane.AXIAL, self._cursor, self._indices[Plane.AXIAL]),
            Plane.CORONAL: self.transform.real_world_to_view(Plane.CORONAL, self._cursor),
            Plane.SAGITTAL: self.transform.real_world_to_view(Plane.SAGITTAL, self._cursor),
        }

    def slice_status_text(self) -> str:
        """Slice positions as "A:i/N C:j/M S:k/L" with 1-based indices."""
        return " ".join(
            f"{plane.short_name}:{self._indices[plane] + 1}/{self.volume.extent(plane)}"
            for plane in ALL_PLANES
        )

    # ------------------------------------------------------------------
    # Cascade helpers (only called while PROPAGATING)
    # ------------------------------------------------------------------

    def _change_slice(self, plane: Plane, index: int) -> None:
        """Move one plane to a slice and bring the cursor onto it."""
        self._apply_indices({plane: index})
        self._set_cursor(self.transform.point_for_slice(plane, index, self._cursor))
        self._refresh_markers()
        self._emit_slice_indices()

    def _apply_indices(self, indices: Dict[Plane, int], force: bool = False) -> None:
        """Store changed indices, move their sliders and re-render their rasters."""
        for plane in ALL_PLANES:
            if plane not in indices:
                continue
            index = self.volume.clamp_index(plane, indices[plane])
            if index == self._indices[plane] and not force:
                continue
            self._indices[plane] = index
            if self.set_slider_value:
                self.set_slider_value(plane, index)
            self._render(plane)

    def _render(self, plane: Plane) -> None:
        if not self.show_raster:
            return
        raster = self.reconstructor.reconstruct(plane, self._indices[plane])
        if raster is not None:
            self.show_raster(plane, raster)

    def _set_cursor(self, point: Sequence[float]) -> None:
        self._cursor = np.array(point, dtype=np.float64)
        self._emit_cursor()

    def _emit_cursor(self) -> None:
        if self.show_cursor:
            self.show_cursor(self._cursor.copy())

    def _refresh_markers(self) -> None:
        if self.show_markers:
            self.show_markers(self.markers())

    def _emit_slice_indices(self) -> None:
        if self.show_slice_indices:
            self.show_slice_indices(dict(self._indices))
