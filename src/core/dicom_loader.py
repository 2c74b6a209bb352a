"""
DICOM File Loader

This module reads a folder of single-frame DICOM slices into SliceRecord
objects for the volume model. Files that cannot be read are recorded and
skipped; the load fails only when no usable slice remains.

Inputs:
    - Directory paths
    - Individual file paths

Outputs:
    - List of SliceRecord objects (unsorted; the volume model sorts them)
    - List of files that failed to load (with error messages)

Requirements:
    - pydicom library for DICOM file reading
    - numpy for pixel arrays
    - pathlib for path handling
"""

import os
import warnings
from pathlib import Path
from typing import Callable, List, Optional, Tuple
import numpy as np
import pydicom
from pydicom.errors import InvalidDicomError

from core.dicom_window_level import get_window_level_from_dataset
from core.errors import VolumeLoadError
from core.slice_record import SliceRecord
from utils.dicom_utils import (
    get_image_orientation,
    get_image_position,
    get_pixel_spacing,
    get_slice_depth_key,
    get_slice_thickness,
)

DICOM_EXTENSIONS = ('.dcm', '.dicom')

_INT16_MIN = np.iinfo(np.int16).min
_INT16_MAX = np.iinfo(np.int16).max


class DICOMLoader:
    """
    Handles loading DICOM slices from a directory.

    Supports:
    - .dcm / .dicom files and files without an extension
    - Optionally any file, read with force=True
    - Per-file failure tracking without aborting the load
    """

    def __init__(self, accept_any_extension: bool = False):
        """
        Initialize the DICOM loader.

        Args:
            accept_any_extension: Try every regular file, not only DICOM-looking names
        """
        self.accept_any_extension = accept_any_extension
        self.loaded_files: List[str] = []
        self.failed_files: List[Tuple[str, str]] = []  # (path, error_message)

    def clear(self) -> None:
        """Forget loaded and failed file lists."""
        self.loaded_files = []
        self.failed_files = []

    def is_candidate(self, path: Path) -> bool:
        """True when a file name looks like a DICOM slice."""
        if not path.is_file():
            return False
        if self.accept_any_extension:
            return True
        name = path.name.lower()
        return name.endswith(DICOM_EXTENSIONS) or '.' not in name

    def load_file(self, file_path: str) -> Optional[SliceRecord]:
        """
        Load a single DICOM file as a slice record.

        Args:
            file_path: Path to the DICOM file

        Returns:
            SliceRecord if successful, None otherwise (failure recorded in failed_files)
        """
        try:
            with warnings.catch_warnings():
                warnings.filterwarnings('ignore', message='.*excess padding.*', category=UserWarning)
                dataset = pydicom.dcmread(file_path, force=True)

            if 'PixelData' not in dataset:
                raise InvalidDicomError("No pixel data")

            pixel_array = np.asarray(dataset.pixel_array)
            frames = int(getattr(dataset, 'NumberOfFrames', 1) or 1)
            if frames > 1:
                pixel_array = pixel_array[0]
            if pixel_array.ndim == 3:
                # Color: keep the first sample of each pixel
                pixel_array = pixel_array[..., 0]
            if pixel_array.ndim != 2:
                raise InvalidDicomError(f"Unsupported pixel array shape {pixel_array.shape}")

            pixel_data = np.clip(pixel_array, _INT16_MIN, _INT16_MAX).astype(np.int16)
            position = get_image_position(dataset)
            orientation = get_image_orientation(dataset)
            window_center, window_width = get_window_level_from_dataset(dataset, pixel_data)

            record = SliceRecord(
                pixel_data=pixel_data,
                image_position=position,
                image_orientation=None if orientation is None else np.concatenate(orientation),
                pixel_spacing=get_pixel_spacing(dataset),
                slice_thickness=get_slice_thickness(dataset),
                window_center=window_center,
                window_width=window_width,
                slice_location=get_slice_depth_key(position, orientation),
                instance_uid=str(getattr(dataset, 'SOPInstanceUID', '')),
                source_path=str(file_path),
            )
        except (InvalidDicomError, OSError, ValueError, TypeError, AttributeError,
                NotImplementedError, RuntimeError) as e:
            print(f"Failed to load DICOM file: {os.path.basename(str(file_path))} - {e}")
            self.failed_files.append((str(file_path), str(e)))
            return None
        except Exception as e:
            # Truncated or malformed files surface as assorted pydicom errors
            error_msg = f"{type(e).__name__}: {e}"
            print(f"Failed to load DICOM file: {os.path.basename(str(file_path))} - {error_msg}")
            self.failed_files.append((str(file_path), error_msg))
            return None

        self.loaded_files.append(str(file_path))
        return record

    def load_directory(
        self,
        directory: str,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ) -> List[SliceRecord]:
        """
        Load every DICOM slice directly inside a directory.

        Args:
            directory: Folder to scan (not recursive)
            progress_callback: Optional callback(current, total, filename) called before each file

        Returns:
            Slice records in file-name order

        Raises:
            VolumeLoadError: If the folder has no candidate files or no file loads
        """
        self.clear()
        folder = Path(directory)
        if not folder.is_dir():
            raise VolumeLoadError(f"Not a directory: {directory}")

        files = sorted(p for p in folder.iterdir() if self.is_candidate(p))
        if not files:
            raise VolumeLoadError("No DICOM files found in the selected directory")

        slices = []
        for i, path in enumerate(files, start=1):
            if progress_callback:
                progress_callback(i, len(files), path.name)
            record = self.load_file(str(path))
            if record is not None:
                slices.append(record)

        if self.failed_files:
            print(f"Warning: {len(self.failed_files)} of {len(files)} files could not be loaded")
        if not slices:
            raise VolumeLoadError("No valid DICOM slices could be loaded")
        return slices
