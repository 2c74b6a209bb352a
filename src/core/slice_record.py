"""
Slice Record

This module defines the record for one acquired cross-sectional image plus
the spatial metadata needed to place it in patient space.

Inputs:
    - Raw sample grid and header values supplied by the ingestion layer

Outputs:
    - SliceRecord objects with validated geometry

Requirements:
    - numpy for sample and vector storage
    - utils.dicom_utils for the default depth key
"""

from typing import Optional, Sequence, Tuple
import numpy as np

from utils.dicom_utils import get_slice_depth_key

DEFAULT_IMAGE_POSITION = (0.0, 0.0, 0.0)
DEFAULT_IMAGE_ORIENTATION = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)
DEFAULT_PIXEL_SPACING = (1.0, 1.0)
DEFAULT_SLICE_THICKNESS = 1.0
DEFAULT_WINDOW_CENTER = 128.0
DEFAULT_WINDOW_WIDTH = 256.0


def _normalized(vector: np.ndarray, fallback: Sequence[float]) -> np.ndarray:
    """Return vector scaled to unit length, or the fallback if it has no length."""
    length = float(np.linalg.norm(vector))
    if length <= 1e-12 or not np.isfinite(length):
        return np.array(fallback, dtype=np.float64)
    return vector / length


class SliceRecord:
    """
    One acquired 2-D cross-section.

    Geometry that is missing or degenerate (zero spacing, zero-length
    orientation vectors) is replaced by identity-like defaults so that
    downstream math never divides by zero. Distances computed from a
    defaulted record may be meaningless.
    """

    def __init__(
        self,
        pixel_data: Optional[np.ndarray] = None,
        image_position: Optional[Sequence[float]] = None,
        image_orientation: Optional[Sequence[float]] = None,
        pixel_spacing: Optional[Sequence[float]] = None,
        slice_thickness: Optional[float] = None,
        window_center: Optional[float] = None,
        window_width: Optional[float] = None,
        slice_location: Optional[float] = None,
        instance_uid: str = "",
        source_path: str = "",
    ):
        """
        Initialize a slice record.

        Args:
            pixel_data: rows x columns array of signed integer samples
            image_position: Real-world position of the top-left sample (x, y, z)
            image_orientation: Row direction followed by column direction (6 values)
            pixel_spacing: (row_spacing, column_spacing) in mm
            slice_thickness: Slice thickness in mm
            window_center: Display window center
            window_width: Display window width
            slice_location: Sortable depth key; defaults to image_position projected on the slice normal
            instance_uid: SOPInstanceUID, informational
            source_path: File the record was read from, informational
        """
        if pixel_data is None:
            pixel_data = np.zeros((0, 0), dtype=np.int16)
        self.pixel_data = np.asarray(pixel_data, dtype=np.int16)
        if self.pixel_data.ndim != 2:
            raise ValueError(f"pixel_data must be 2-D, got shape {self.pixel_data.shape}")
        self.rows, self.columns = self.pixel_data.shape

        self.image_position = self._position(image_position)
        self.image_orientation = self._orientation(image_orientation)
        self.pixel_spacing = self._spacing(pixel_spacing)
        self.slice_thickness = self._positive(slice_thickness, DEFAULT_SLICE_THICKNESS, "slice thickness")
        self.window_center = float(window_center) if window_center is not None else DEFAULT_WINDOW_CENTER
        self.window_width = float(window_width) if window_width is not None else DEFAULT_WINDOW_WIDTH
        self.slice_location = (
            float(slice_location) if slice_location is not None
            else get_slice_depth_key(self.image_position, (self.row_direction, self.column_direction))
        )
        self.instance_uid = instance_uid
        self.source_path = source_path

    @staticmethod
    def _position(value: Optional[Sequence[float]]) -> np.ndarray:
        if value is None or len(value) < 3:
            return np.array(DEFAULT_IMAGE_POSITION, dtype=np.float64)
        return np.array([float(v) for v in value[:3]], dtype=np.float64)

    @staticmethod
    def _orientation(value: Optional[Sequence[float]]) -> np.ndarray:
        if value is None or len(value) < 6:
            return np.array(DEFAULT_IMAGE_ORIENTATION, dtype=np.float64)
        raw = np.array([float(v) for v in value[:6]], dtype=np.float64)
        row = _normalized(raw[:3], DEFAULT_IMAGE_ORIENTATION[:3])
        col = _normalized(raw[3:], DEFAULT_IMAGE_ORIENTATION[3:])
        return np.concatenate([row, col])

    @staticmethod
    def _spacing(value: Optional[Sequence[float]]) -> Tuple[float, float]:
        if value is None or len(value) < 2:
            return DEFAULT_PIXEL_SPACING
        row_spacing = float(value[0])
        col_spacing = float(value[1])
        if row_spacing <= 0 or col_spacing <= 0:
            print(f"Warning: Invalid pixel spacing {tuple(value)}, using {DEFAULT_PIXEL_SPACING}")
            return DEFAULT_PIXEL_SPACING
        return (row_spacing, col_spacing)

    @staticmethod
    def _positive(value: Optional[float], default: float, name: str) -> float:
        if value is None:
            return default
        value = float(value)
        if value <= 0 or not np.isfinite(value):
            print(f"Warning: Invalid {name} {value}, using {default}")
            return default
        return value

    @property
    def row_direction(self) -> np.ndarray:
        """Unit vector along increasing column index (first 3 orientation values)."""
        return self.image_orientation[:3]

    @property
    def column_direction(self) -> np.ndarray:
        """Unit vector along increasing row index (last 3 orientation values)."""
        return self.image_orientation[3:]

    def __repr__(self) -> str:
        return (
            f"SliceRecord({self.rows}x{self.columns}, "
            f"position={tuple(round(v, 3) for v in self.image_position)}, "
            f"location={self.slice_location:.3f})"
        )
