"""
Image Utility Functions

This module provides conversions between NumPy rasters, PIL images and Qt
images used by the views.

Inputs:
    - NumPy arrays
    - PIL Image objects

Outputs:
    - Converted images

Requirements:
    - PIL/Pillow for image handling
    - numpy for array operations
"""

from typing import Optional
import numpy as np
from PIL import Image


def array_to_image(array: np.ndarray) -> Optional[Image.Image]:
    """
    Convert NumPy array to PIL Image.

    Args:
        array: NumPy array (2D for grayscale, 3D for RGB)

    Returns:
        PIL Image or None if conversion fails
    """
    try:
        if array.dtype != np.uint8:
            # Normalize to 0-255
            if array.size and array.max() > array.min():
                array = ((array - array.min()) / (array.max() - array.min()) * 255.0).astype(np.uint8)
            else:
                array = np.zeros_like(array, dtype=np.uint8)

        if array.ndim not in (2, 3):
            return None
        return Image.fromarray(np.ascontiguousarray(array))
    except (TypeError, ValueError) as e:
        print(f"Error converting array to image: {e}")
        return None


def image_to_qimage(image: Image.Image):
    """
    Convert PIL Image to a QImage that owns its pixel data.

    Args:
        image: PIL Image ('L' or any mode convertible to RGB)

    Returns:
        QImage copy
    """
    from PySide6.QtGui import QImage

    if image.mode == 'L':
        # Keep the bytes alive until the deep copy below
        image_bytes = image.tobytes()
        qimage = QImage(image_bytes, image.width, image.height, image.width,
                        QImage.Format.Format_Grayscale8)
    else:
        image = image.convert('RGB')
        image_bytes = image.tobytes()
        qimage = QImage(image_bytes, image.width, image.height, image.width * 3,
                        QImage.Format.Format_RGB888)
    return qimage.copy()
