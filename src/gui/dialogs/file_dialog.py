"""
File Selection Dialog

This module provides the DICOM folder selection dialog with last path memory,
plus the message boxes used to report load results.

Inputs:
    - User folder selection
    - Configuration for last path

Outputs:
    - Selected folder path
    - Updated configuration

Requirements:
    - PySide6 for dialogs
    - ConfigManager for path memory
"""

from PySide6.QtWidgets import QFileDialog, QMessageBox
from PySide6.QtCore import Qt
from typing import Optional
import os
import platform

from utils.config_manager import ConfigManager


class FileDialog:
    """
    Handles folder selection and message dialogs.

    Features:
    - Last path memory
    - Native dialog on macOS
    - Proper window focus (appears on top initially)
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize the file dialog handler.

        Args:
            config_manager: Optional ConfigManager instance
        """
        self.config_manager = config_manager or ConfigManager()

    def start_directory(self) -> str:
        """Directory the dialog opens in: the last used folder, else the working directory."""
        last_path = self.config_manager.get_last_path()
        if last_path and os.path.isfile(last_path):
            return os.path.dirname(last_path)
        if last_path and os.path.isdir(last_path):
            return last_path
        return os.getcwd()

    def open_folder(self, parent=None) -> Optional[str]:
        """
        Open folder selection dialog.

        Args:
            parent: Parent widget for the dialog

        Returns:
            Selected folder path or None
        """
        start = self.start_directory()

        if platform.system() == "Darwin":
            # Static method gives the native macOS dialog with sidebar
            selected_folder = QFileDialog.getExistingDirectory(parent, "Select DICOM Folder", start)
        else:
            dialog = QFileDialog(parent)
            dialog.setWindowTitle("Select DICOM Folder")
            dialog.setFileMode(QFileDialog.FileMode.Directory)
            dialog.setOption(QFileDialog.Option.ShowDirsOnly, True)
            dialog.setDirectory(start)

            # Ensure dialog appears on top
            dialog.setWindowFlags(dialog.windowFlags() | Qt.WindowStaysOnTopHint)
            dialog.activateWindow()
            dialog.raise_()

            selected_folder = ""
            if dialog.exec():
                selected = dialog.selectedFiles()
                if selected:
                    selected_folder = selected[0]

        if not selected_folder:
            return None
        self.config_manager.set_last_path(selected_folder)
        return selected_folder

    def _show_message(self, parent, icon: QMessageBox.Icon, title: str,
                      header: str, message: str) -> None:
        msg_box = QMessageBox(parent)
        msg_box.setIcon(icon)
        msg_box.setWindowTitle(title)
        msg_box.setText(header)
        if message:
            msg_box.setInformativeText(message)

        # Ensure dialog appears on top
        msg_box.setWindowFlags(msg_box.windowFlags() | Qt.WindowStaysOnTopHint)
        msg_box.activateWindow()
        msg_box.raise_()

        msg_box.exec()

    def show_error(self, parent=None, title: str = "Error",
                   header: str = "", message: str = "") -> None:
        """
        Show an error dialog.

        Args:
            parent: Parent widget
            title: Dialog title
            header: Main text
            message: Error message
        """
        self._show_message(parent, QMessageBox.Icon.Critical, title, header, message)
