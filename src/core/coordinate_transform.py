"""
Coordinate Transform Engine

This module converts between on-screen view coordinates, per-slice pixel
coordinates and the shared real-world (patient) coordinate space for the
axial, coronal and sagittal planes.

Every view is a fixed square of view_size x view_size pixels. The axial view
shows one acquired slice; the coronal and sagittal views show the volume
resampled along a row or a column, with slice depth on the vertical axis.

Inputs:
    - View pixel coordinates and the current slice index of a plane
    - Real-world points (mm)

Outputs:
    - Real-world points, view pixel coordinates, slice indices

Requirements:
    - numpy for vector math
    - core.volume_model for the spatial basis and slice positions
"""

from typing import Dict, Optional, Sequence, Tuple
import numpy as np

from core.mpr_planes import DragTarget, Plane
from core.slice_record import SliceRecord
from core.volume_model import VolumeModel

DEFAULT_VIEW_SIZE = 350.0

# Absorbs float error so a point placed exactly on slice k maps back to k
_INDEX_EPSILON = 1e-6


class CoordinateTransformEngine:
    """
    Stateless conversions parameterized by the volume and the view size.

    The engine holds no cursor state; it reads the volume model's basis,
    which only changes on reload.
    """

    def __init__(self, volume: VolumeModel, view_size: float = DEFAULT_VIEW_SIZE):
        """
        Initialize the transform engine.

        Args:
            volume: Volume model providing dimensions, slices and basis
            view_size: Side length of every (square) view in pixels
        """
        self.volume = volume
        self.view_size = float(view_size)

    # ------------------------------------------------------------------
    # View -> real world
    # ------------------------------------------------------------------

    def view_to_real_world(
        self,
        plane: Plane,
        view_x: float,
        view_y: float,
        slice_index: int,
        fallback: Optional[Sequence[float]] = None,
    ) -> np.ndarray:
        """
        Convert a view pixel on a plane to a real-world point.

        Args:
            plane: Plane of the view that was clicked
            view_x: Horizontal view coordinate
            view_y: Vertical view coordinate
            slice_index: Current slice index of that plane (axial slice, coronal row, sagittal column)
            fallback: Point returned when no volume is loaded

        Returns:
            Real-world point as a length-3 float array
        """
        if self.volume.is_empty:
            return np.array(fallback if fallback is not None else (0.0, 0.0, 0.0), dtype=np.float64)

        basis = self.volume.basis
        size = self.view_size

        if plane == Plane.AXIAL:
            record = self.volume.get_slice(slice_index)
            image_x = view_x / size * record.columns
            image_y = view_y / size * record.rows
            return (
                record.image_position
                + image_x * record.pixel_spacing[0] * basis.row_direction
                + image_y * record.pixel_spacing[1] * basis.column_direction
            )

        reference = self.volume.reference_slice
        row_spacing, col_spacing = reference.pixel_spacing
        slice_z = view_y / size * self.volume.depth

        if plane == Plane.CORONAL:
            image_x = view_x / size * self.volume.width
            row_index = slice_index
            return (
                reference.image_position
                + image_x * row_spacing * basis.row_direction
                + row_index * col_spacing * basis.column_direction
                + slice_z * basis.slice_thickness * basis.normal_direction
            )

        image_y = view_x / size * self.volume.height
        column_index = slice_index
        return (
            reference.image_position
            + column_index * row_spacing * basis.row_direction
            + image_y * col_spacing * basis.column_direction
            + slice_z * basis.slice_thickness * basis.normal_direction
        )

    # ------------------------------------------------------------------
    # Real world -> view
    # ------------------------------------------------------------------

    def real_world_to_image_coords(self, point: Sequence[float], record: SliceRecord) -> Tuple[float, float]:
        """
        Project a real-world point onto a slice's pixel grid.

        Args:
            point: Real-world point
            record: Slice whose image position is the projection origin

        Returns:
            (column, row) in fractional pixel units
        """
        basis = self.volume.basis
        to_point = np.asarray(point, dtype=np.float64) - record.image_position
        x_projection = float(np.dot(to_point, basis.row_direction))
        y_projection = float(np.dot(to_point, basis.column_direction))
        return (x_projection / record.pixel_spacing[0], y_projection / record.pixel_spacing[1])

    def real_world_to_view(
        self,
        plane: Plane,
        point: Sequence[float],
        slice_index: Optional[int] = None,
    ) -> Tuple[float, float]:
        """
        Convert a real-world point to view coordinates on a plane.

        The depth axis of the coronal and sagittal views is resolved with the
        nearest-slice search, so their vertical coordinate snaps to slice rows.

        Args:
            plane: Target plane
            point: Real-world point
            slice_index: Axial slice to project onto; nearest slice when None.
                Ignored for coronal and sagittal.

        Returns:
            (view_x, view_y)
        """
        if self.volume.is_empty:
            return (0.0, 0.0)

        size = self.view_size

        if plane == Plane.AXIAL:
            if slice_index is None:
                slice_index = self.find_nearest_axial_slice(point)
            record = self.volume.get_slice(slice_index)
            image_x, image_y = self.real_world_to_image_coords(point, record)
            return (image_x / record.columns * size, image_y / record.rows * size)

        basis = self.volume.basis
        reference = self.volume.reference_slice
        to_point = np.asarray(point, dtype=np.float64) - reference.image_position
        view_y = self.find_nearest_axial_slice(point) / self.volume.depth * size

        if plane == Plane.CORONAL:
            x_projection = float(np.dot(to_point, basis.row_direction))
            view_x = x_projection / reference.pixel_spacing[0] / self.volume.width * size
        else:
            y_projection = float(np.dot(to_point, basis.column_direction))
            view_x = y_projection / reference.pixel_spacing[1] / self.volume.height * size
        return (view_x, view_y)

    # ------------------------------------------------------------------
    # Slice index derivation
    # ------------------------------------------------------------------

    def find_nearest_axial_slice(self, point: Sequence[float]) -> int:
        """
        Index of the axial slice whose image position is closest to a point.

        Ties resolve to the first slice in stack order.

        Args:
            point: Real-world point

        Returns:
            Axial slice index, 0 when the volume is empty
        """
        slices = self.volume.slices
        if not slices:
            return 0
        target = np.asarray(point, dtype=np.float64)
        closest = 0
        min_distance = float("inf")
        for index, record in enumerate(slices):
            distance = float(np.linalg.norm(target - record.image_position))
            if distance < min_distance:
                min_distance = distance
                closest = index
        return closest

    def coronal_index_for(self, point: Sequence[float]) -> int:
        """
        Coronal (row) index containing a real-world point.

        Assumes unit-length, orthogonal orientation vectors; the projection is
        not corrected for non-orthonormal acquisitions.
        """
        if self.volume.is_empty:
            return 0
        reference = self.volume.reference_slice
        to_point = np.asarray(point, dtype=np.float64) - reference.image_position
        y_projection = float(np.dot(to_point, self.volume.basis.column_direction))
        return self.volume.clamp_index(Plane.CORONAL, int(y_projection / reference.pixel_spacing[1] + _INDEX_EPSILON))

    def sagittal_index_for(self, point: Sequence[float]) -> int:
        """Sagittal (column) index containing a real-world point. Same assumption as coronal."""
        if self.volume.is_empty:
            return 0
        reference = self.volume.reference_slice
        to_point = np.asarray(point, dtype=np.float64) - reference.image_position
        x_projection = float(np.dot(to_point, self.volume.basis.row_direction))
        return self.volume.clamp_index(Plane.SAGITTAL, int(x_projection / reference.pixel_spacing[0] + _INDEX_EPSILON))

    def slice_indices_for(self, point: Sequence[float]) -> Dict[Plane, int]:
        """All three slice indices for a real-world point."""
        return {
            Plane.AXIAL: self.find_nearest_axial_slice(point),
            Plane.CORONAL: self.coronal_index_for(point),
            Plane.SAGITTAL: self.sagittal_index_for(point),
        }

    def index_from_drag(
        self,
        view_plane: Plane,
        target: DragTarget,
        view_x: float,
        view_y: float,
    ) -> Optional[Tuple[Plane, int]]:
        """
        Slice change implied by dragging one crosshair line.

        Args:
            view_plane: Plane of the view containing the dragged line
            target: DEPTH_AXIS (horizontal line) or ORTHOGONAL_AXIS (vertical line)
            view_x: Horizontal drag coordinate
            view_y: Vertical drag coordinate

        Returns:
            (affected plane, clamped index), or None for CENTER
        """
        if target == DragTarget.CENTER:
            return None

        size = self.view_size
        if target == DragTarget.DEPTH_AXIS:
            if view_plane == Plane.AXIAL:
                affected, ratio = Plane.CORONAL, view_y / size
            else:
                affected, ratio = Plane.AXIAL, view_y / size
        else:
            if view_plane == Plane.SAGITTAL:
                affected, ratio = Plane.CORONAL, view_x / size
            else:
                affected, ratio = Plane.SAGITTAL, view_x / size

        index = int(ratio * self.volume.extent(affected))
        return affected, self.volume.clamp_index(affected, index)

    def point_for_slice(self, plane: Plane, slice_index: int, current: Sequence[float]) -> np.ndarray:
        """
        Move a real-world point onto a plane's slice, keeping its other components.

        Only the component along the plane's governing axis is replaced:
        column direction for coronal, row direction for sagittal, slice normal
        for axial.

        Args:
            plane: Plane whose slice changed
            slice_index: New slice index (clamped)
            current: Current crosshair point

        Returns:
            Updated real-world point
        """
        point = np.array(current, dtype=np.float64)
        if self.volume.is_empty:
            return point

        basis = self.volume.basis
        reference = self.volume.reference_slice
        slice_index = self.volume.clamp_index(plane, slice_index)

        if plane == Plane.AXIAL:
            axis = basis.normal_direction
            target = float(np.dot(self.volume.get_slice(slice_index).image_position - point, axis))
            return point + target * axis

        if plane == Plane.CORONAL:
            axis = basis.column_direction
            wanted = slice_index * reference.pixel_spacing[1]
        else:
            axis = basis.row_direction
            wanted = slice_index * reference.pixel_spacing[0]
        current_offset = float(np.dot(point - reference.image_position, axis))
        return point + (wanted - current_offset) * axis
