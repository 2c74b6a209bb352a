"""
Volume Model

This module owns the ordered stack of axial slices and derives the dense
3-D sample grid and the shared spatial basis used by every view.

Inputs:
    - Ordered or unordered list of SliceRecord objects from the ingestion layer

Outputs:
    - Volume dimensions (width, height, depth)
    - Dense int16 sample grid indexed [depth][height][width]
    - Spatial basis: origin, row/column/normal directions, spacing, thickness

Requirements:
    - numpy for grid and vector storage
    - core.slice_record, core.mpr_planes, core.errors
"""

from typing import Dict, Optional, Sequence, Tuple
import numpy as np

from core.errors import VolumeLoadError
from core.mpr_planes import Plane
from core.slice_record import SliceRecord


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.float64)
    array.setflags(write=False)
    return array


class SpatialBasis:
    """
    Right-handed frame of the volume, taken from the first (lowest) slice.

    All arrays are read-only; a new basis is built on every load.
    """

    def __init__(
        self,
        origin: Sequence[float],
        row_direction: Sequence[float],
        column_direction: Sequence[float],
        pixel_spacing: Tuple[float, float],
        slice_thickness: float,
    ):
        self.origin = _frozen(origin)
        self.row_direction = _frozen(row_direction)
        self.column_direction = _frozen(column_direction)
        self.normal_direction = _frozen(np.cross(self.row_direction, self.column_direction))
        self.pixel_spacing = (float(pixel_spacing[0]), float(pixel_spacing[1]))
        self.slice_thickness = float(slice_thickness)

    @classmethod
    def from_slice(cls, slice_record: SliceRecord) -> "SpatialBasis":
        """Build the basis from a slice's position, orientation and spacing."""
        return cls(
            slice_record.image_position,
            slice_record.row_direction,
            slice_record.column_direction,
            slice_record.pixel_spacing,
            slice_record.slice_thickness,
        )

    @classmethod
    def identity(cls) -> "SpatialBasis":
        """Axis-aligned unit basis at the origin, used while nothing is loaded."""
        return cls((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0), 1.0)


class VolumeModel:
    """
    Stack of axial slices plus derived geometry.

    The slice sequence is replaced wholesale on every load and never mutated
    in place. A load either completes fully or leaves the previous volume
    active.
    """

    def __init__(self):
        """Initialize an empty volume."""
        self._slices: Tuple[SliceRecord, ...] = ()
        self._volume_data: Optional[np.ndarray] = None
        self._basis = SpatialBasis.identity()
        self.width = 0
        self.height = 0
        self.depth = 0

    def load(self, slices: Sequence[SliceRecord]) -> None:
        """
        Replace the volume with a new set of slices.

        Slices are sorted ascending by slice_location (stable for equal keys).
        Each slice is copied into its depth layer; samples outside the
        first slice's rows x columns are skipped.

        Args:
            slices: Slice records to load

        Raises:
            VolumeLoadError: If slices is empty
        """
        if not slices:
            raise VolumeLoadError("No valid DICOM slices could be loaded")

        ordered = tuple(sorted(slices, key=lambda s: s.slice_location))
        first = ordered[0]
        width, height, depth = first.columns, first.rows, len(ordered)

        volume = np.zeros((depth, height, width), dtype=np.int16)
        for z, record in enumerate(ordered):
            rows = min(height, record.rows)
            cols = min(width, record.columns)
            if rows and cols:
                volume[z, :rows, :cols] = record.pixel_data[:rows, :cols]
        volume.setflags(write=False)

        basis = SpatialBasis.from_slice(first)

        # Publish only after everything above succeeded
        self._slices = ordered
        self._volume_data = volume
        self._basis = basis
        self.width, self.height, self.depth = width, height, depth

    def clear(self) -> None:
        """Drop the loaded volume."""
        self._slices = ()
        self._volume_data = None
        self._basis = SpatialBasis.identity()
        self.width = self.height = self.depth = 0

    @property
    def is_empty(self) -> bool:
        return not self._slices

    @property
    def slices(self) -> Tuple[SliceRecord, ...]:
        return self._slices

    @property
    def volume_data(self) -> Optional[np.ndarray]:
        """Dense read-only grid [depth][height][width], or None when empty."""
        return self._volume_data

    @property
    def basis(self) -> SpatialBasis:
        return self._basis

    @property
    def reference_slice(self) -> Optional[SliceRecord]:
        """First slice after sorting; its window and geometry are used for reconstruction."""
        return self._slices[0] if self._slices else None

    def get_slice(self, index: int) -> Optional[SliceRecord]:
        """Return the axial slice at a clamped index, or None when empty."""
        if not self._slices:
            return None
        return self._slices[self.clamp_index(Plane.AXIAL, index)]

    def extent(self, plane: Plane) -> int:
        """
        Number of slices available along a plane's governing axis.

        Args:
            plane: Viewing plane

        Returns:
            depth for axial, height for coronal, width for sagittal
        """
        if plane == Plane.AXIAL:
            return self.depth
        if plane == Plane.CORONAL:
            return self.height
        return self.width

    def clamp_index(self, plane: Plane, index: int) -> int:
        """Clamp a slice index to [0, extent - 1]; 0 when the volume is empty."""
        extent = self.extent(plane)
        if extent <= 0:
            return 0
        return max(0, min(extent - 1, int(index)))

    def middle_indices(self) -> Dict[Plane, int]:
        """Midpoint slice index of every plane."""
        return {
            Plane.AXIAL: self.depth // 2,
            Plane.CORONAL: self.height // 2,
            Plane.SAGITTAL: self.width // 2,
        }

    def summary(self) -> str:
        """Short human-readable description of the loaded volume."""
        if self.is_empty:
            return "No volume loaded"
        return (
            f"Loaded {self.depth} slices\n"
            f"Volume dimensions: {self.width}x{self.height}x{self.depth}"
        )
