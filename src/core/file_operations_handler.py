"""
File Operations Handler

This module handles loading a DICOM folder into the MPR views: folder
selection, slice loading with status updates, and error reporting.

Inputs:
    - Folder paths (from the dialog or given directly)

Outputs:
    - Slice records handed to the volume load callback
    - Status bar messages and error dialogs

Requirements:
    - DICOMLoader for loading files
    - FileDialog for user dialogs
"""

import os
from typing import Callable, List, Optional
from PySide6.QtWidgets import QApplication, QWidget
from core.dicom_loader import DICOMLoader
from core.errors import VolumeLoadError
from core.slice_record import SliceRecord
from gui.dialogs.file_dialog import FileDialog


class FileOperationsHandler:
    """
    Handles the Load DICOM Folder operation.

    Responsibilities:
    - Ask for a folder
    - Load its slices, reporting progress in the status bar
    - Clear measurements and publish the new volume
    - Report load failures without touching the current volume
    """

    def __init__(
        self,
        dicom_loader: DICOMLoader,
        file_dialog: FileDialog,
        parent_widget: Optional[QWidget],
        clear_data_callback: Callable[[], None],
        load_volume_callback: Callable[[List[SliceRecord]], object],
        update_status_callback: Callable[[str], None],
        get_summary_callback: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the file operations handler.

        Args:
            dicom_loader: DICOM loader instance
            file_dialog: File dialog instance
            parent_widget: Parent for dialogs
            clear_data_callback: Callback to clear existing data (measurements)
            load_volume_callback: Callback that publishes the loaded slices
            update_status_callback: Callback to update status bar
            get_summary_callback: Callback returning the loaded volume summary
        """
        self.dicom_loader = dicom_loader
        self.file_dialog = file_dialog
        self.parent_widget = parent_widget
        self.clear_data_callback = clear_data_callback
        self.load_volume_callback = load_volume_callback
        self.update_status_callback = update_status_callback
        self.get_summary_callback = get_summary_callback

    def open_folder(self) -> bool:
        """
        Handle open folder request.

        Returns:
            True if a volume was loaded, False if cancelled or failed
        """
        folder_path = self.file_dialog.open_folder(self.parent_widget)
        if not folder_path:
            return False
        return self.load_folder(folder_path)

    def load_folder(self, folder_path: str) -> bool:
        """
        Load a folder of slices and publish it.

        On failure the previously loaded volume stays active.

        Args:
            folder_path: Folder to load

        Returns:
            True on success
        """
        source_name = os.path.basename(os.path.normpath(folder_path))

        def progress_callback(current: int, total: int, filename: str) -> None:
            self.update_status_callback(f"Loading file {current}/{total}: {filename}...")
            QApplication.processEvents()

        try:
            self.update_status_callback(f"Loading files from {source_name}...")
            QApplication.processEvents()

            slices = self.dicom_loader.load_directory(folder_path, progress_callback=progress_callback)
            self.clear_data_callback()
            self.load_volume_callback(slices)
        except (VolumeLoadError, OSError) as e:
            self.update_status_callback("Ready")
            self.file_dialog.show_error(
                self.parent_widget,
                "Error",
                "Failed to load DICOM volume",
                str(e),
            )
            return False
        except MemoryError as e:
            self.update_status_callback("Ready")
            self.file_dialog.show_error(
                self.parent_widget,
                "Memory Error",
                "Failed to load DICOM volume",
                f"Out of memory while loading folder. "
                f"Try closing other applications or loading fewer files.\n\nError: {str(e)}",
            )
            return False

        summary = self.get_summary_callback() if self.get_summary_callback else ""
        status = summary.replace("\n", " - ") if summary else f"Loaded {len(slices)} slices"
        failed = len(self.dicom_loader.failed_files)
        if failed:
            status += f" ({failed} file(s) skipped)"
        self.update_status_callback(f"{source_name}: {status}")
        return True
