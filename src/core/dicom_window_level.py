"""
DICOM window/level handling.

This module maps raw sample intensities onto 8-bit display gray values using
a window center and width, and extracts window center/width from DICOM
datasets.

Inputs:
    - Raw sample arrays, window center/width
    - pydicom Dataset

Outputs:
    - Windowed pixel arrays (0-255 uint8), (center, width) tuples

Requirements:
    - numpy, pydicom
"""

import numpy as np
from typing import Optional, Tuple
from pydicom.dataset import Dataset
from pydicom.multival import MultiValue


def apply_linear_window_level(
    pixel_array: np.ndarray,
    window_center: float,
    window_width: float,
) -> np.ndarray:
    """
    Apply the linear window function to a sample array. Returns 0-255 uint8.

    gray = clamp(trunc(((sample - (center - 0.5)) / (width - 1) + 0.5) * 255), 0, 255)

    A width of 1 or less becomes a hard threshold at the center.
    """
    samples = np.asarray(pixel_array, dtype=np.float64)
    if window_width <= 1:
        return np.where(samples > window_center - 0.5, 255, 0).astype(np.uint8)
    scaled = ((samples - (window_center - 0.5)) / (window_width - 1) + 0.5) * 255.0
    # trunc before clamping so negatives round toward zero like an int cast
    return np.clip(np.trunc(scaled), 0, 255).astype(np.uint8)


def _first_value(value) -> Optional[float]:
    """First numeric value of a possibly multi-valued window tag."""
    if value is None:
        return None
    if isinstance(value, (MultiValue, list, tuple)):
        return float(value[0]) if value else None
    if isinstance(value, str) and '\\' in value:
        return float(value.split('\\')[0].strip())
    return float(value)


def get_window_level_from_dataset(
    dataset: Dataset,
    pixel_array: Optional[np.ndarray] = None,
) -> Tuple[Optional[float], Optional[float]]:
    """
    Get window center and width from DICOM dataset.

    Falls back to the pixel range when the tags are absent and a pixel
    array is supplied. Returns (window_center, window_width); either may be
    None when nothing can be determined.
    """
    window_center = None
    window_width = None
    try:
        if hasattr(dataset, 'WindowCenter'):
            window_center = _first_value(dataset.WindowCenter)
        if hasattr(dataset, 'WindowWidth'):
            window_width = _first_value(dataset.WindowWidth)
    except (TypeError, ValueError) as e:
        print(f"Warning: Could not parse window center/width: {e}")
        window_center = window_width = None

    if (window_center is None or window_width is None) and pixel_array is not None and pixel_array.size:
        pixel_min = float(np.min(pixel_array))
        pixel_max = float(np.max(pixel_array))
        if window_center is None:
            window_center = (pixel_min + pixel_max) / 2.0
        if window_width is None:
            window_width = max(pixel_max - pixel_min, 1.0)
    return window_center, window_width
