"""
DICOM Utility Functions

This module provides helper functions for DICOM operations including:
- Pixel spacing and slice thickness lookups
- Image position / orientation lookups and the slice depth key
- Distance and patient coordinate formatting

Inputs:
    - pydicom.Dataset objects
    - Distance measurements

Outputs:
    - Converted values
    - Formatted strings

Requirements:
    - pydicom library
    - numpy for calculations
"""

from typing import Optional, Sequence, Tuple
import numpy as np
from pydicom.dataset import Dataset


def get_pixel_spacing(dataset: Dataset) -> Optional[Tuple[float, float]]:
    """
    Get pixel spacing from DICOM dataset.
    Checks sources in priority order:
    1. Pixel Spacing (0028,0030) - primary
    2. Imager Pixel Spacing (0018,1164) - fallback

    Args:
        dataset: pydicom Dataset

    Returns:
        Tuple of (row_spacing, column_spacing) in mm, or None if not available
    """
    for keyword in ('PixelSpacing', 'ImagerPixelSpacing'):
        try:
            spacing = getattr(dataset, keyword, None)
            if spacing and len(spacing) >= 2:
                row_spacing = float(spacing[0])
                col_spacing = float(spacing[1])
                if row_spacing > 0 and col_spacing > 0:
                    return (row_spacing, col_spacing)
        except (TypeError, ValueError):
            pass
    return None


def get_slice_thickness(dataset: Dataset) -> Optional[float]:
    """
    Get slice thickness from DICOM dataset.

    Args:
        dataset: pydicom Dataset

    Returns:
        Slice thickness in mm, or None if not available
    """
    try:
        if hasattr(dataset, 'SliceThickness') and dataset.SliceThickness not in (None, ''):
            return float(dataset.SliceThickness)
    except (TypeError, ValueError):
        pass

    return None


def get_image_position(dataset: Dataset) -> Optional[np.ndarray]:
    """
    Get ImagePositionPatient from DICOM dataset.

    Args:
        dataset: pydicom Dataset

    Returns:
        NumPy array of [X, Y, Z] coordinates, or None if not available
    """
    try:
        if hasattr(dataset, 'ImagePositionPatient'):
            pos = dataset.ImagePositionPatient
            if pos and len(pos) >= 3:
                return np.array([float(pos[0]), float(pos[1]), float(pos[2])])
    except (TypeError, ValueError):
        pass

    return None


def get_image_orientation(dataset: Dataset) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Get ImageOrientationPatient from DICOM dataset.

    Args:
        dataset: pydicom Dataset

    Returns:
        Tuple of (row_cosine, column_cosine) arrays, or None if not available
    """
    try:
        if hasattr(dataset, 'ImageOrientationPatient'):
            orient = dataset.ImageOrientationPatient
            if orient and len(orient) >= 6:
                row_cosine = np.array([float(orient[0]), float(orient[1]), float(orient[2])])
                col_cosine = np.array([float(orient[3]), float(orient[4]), float(orient[5])])
                return (row_cosine, col_cosine)
    except (TypeError, ValueError):
        pass

    return None


def get_slice_depth_key(position: Optional[np.ndarray],
                        orientation: Optional[Tuple[np.ndarray, np.ndarray]]) -> float:
    """
    Sortable depth of a slice along the acquisition axis.

    Projects the image position onto the slice normal (row x column). Falls
    back to the Z coordinate when the orientation is missing or degenerate,
    and to 0.0 when the position is missing.

    Args:
        position: ImagePositionPatient as an array, or None
        orientation: (row_cosine, column_cosine), or None

    Returns:
        Depth key in mm
    """
    if position is None:
        return 0.0
    if orientation is not None:
        normal = np.cross(orientation[0], orientation[1])
        length = float(np.linalg.norm(normal))
        if length > 1e-12:
            return float(np.dot(position, normal / length))
    return float(position[2])


def format_distance_mm(mm: float) -> str:
    """
    Format a distance in millimeters: one decimal from 10 mm up, two below.

    Args:
        mm: Distance in mm

    Returns:
        Formatted string (e.g., "10.5 mm" or "2.50 mm")
    """
    if mm >= 10:
        return f"{mm:.1f} mm"
    return f"{mm:.2f} mm"


def format_patient_coordinate(point: Sequence[float]) -> str:
    """
    Format a real-world point for the toolbar label.

    Args:
        point: (x, y, z) in mm

    Returns:
        "Patient Coords: (x, y, z)" with one decimal
    """
    return f"Patient Coords: ({point[0]:.1f}, {point[1]:.1f}, {point[2]:.1f})"
