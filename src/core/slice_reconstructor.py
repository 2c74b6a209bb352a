"""
Slice Reconstructor

This module produces the raster images shown in the three views: the axial
slice as acquired, and coronal/sagittal planes resampled from the dense
volume grid.

Inputs:
    - VolumeModel with a loaded grid
    - Plane and slice index

Outputs:
    - uint8 gray arrays (rows = screen rows), or PIL Images

Requirements:
    - numpy for array slicing
    - PIL/Pillow for image conversion
    - core.dicom_window_level for the window function
"""

from typing import Optional
import numpy as np
from PIL import Image

from core.dicom_window_level import apply_linear_window_level
from core.mpr_planes import Plane
from core.volume_model import VolumeModel
from utils.image_utils import array_to_image


class SliceReconstructor:
    """
    Builds display rasters for each plane.

    Coronal and sagittal rasters use the window of the first slice for the
    whole volume. The depth axis is flipped so the last acquired slice is
    the top row.
    """

    def __init__(self, volume: VolumeModel):
        """
        Initialize the reconstructor.

        Args:
            volume: Volume model to sample from
        """
        self.volume = volume

    def _global_window(self):
        reference = self.volume.reference_slice
        return reference.window_center, reference.window_width

    def axial(self, slice_index: int) -> Optional[np.ndarray]:
        """
        Windowed axial slice, shape (rows, columns), using the slice's own window.

        Returns:
            uint8 array, or None when no volume is loaded
        """
        record = self.volume.get_slice(slice_index)
        if record is None:
            return None
        return apply_linear_window_level(record.pixel_data, record.window_center, record.window_width)

    def coronal(self, row_index: int) -> Optional[np.ndarray]:
        """
        Coronal plane through one image row, shape (depth, width).

        Returns:
            uint8 array, or None when no volume is loaded
        """
        data = self.volume.volume_data
        if data is None:
            return None
        row_index = self.volume.clamp_index(Plane.CORONAL, row_index)
        center, width = self._global_window()
        plane = data[:, row_index, :]
        return apply_linear_window_level(plane[::-1], center, width)

    def sagittal(self, column_index: int) -> Optional[np.ndarray]:
        """
        Sagittal plane through one image column, shape (depth, height).

        Returns:
            uint8 array, or None when no volume is loaded
        """
        data = self.volume.volume_data
        if data is None:
            return None
        column_index = self.volume.clamp_index(Plane.SAGITTAL, column_index)
        center, width = self._global_window()
        plane = data[:, :, column_index]
        return apply_linear_window_level(plane[::-1], center, width)

    def reconstruct(self, plane: Plane, index: int) -> Optional[np.ndarray]:
        """Raster for any plane at a (clamped) slice index."""
        if plane == Plane.AXIAL:
            return self.axial(index)
        if plane == Plane.CORONAL:
            return self.coronal(index)
        return self.sagittal(index)

    def reconstruct_image(self, plane: Plane, index: int) -> Optional[Image.Image]:
        """Raster for a plane as a grayscale PIL Image."""
        array = self.reconstruct(plane, index)
        if array is None:
            return None
        return array_to_image(array)
