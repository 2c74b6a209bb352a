"""
Configuration Manager

This module handles persistent storage and retrieval of user preferences and settings.
Settings are stored in a JSON file in the user's application data directory.

Inputs:
    - User preferences (last opened folder, view size, crosshair and measurement styling)

Outputs:
    - Loaded configuration values
    - Saved configuration file

Requirements:
    - json module (standard library)
    - pathlib module (standard library)
    - os module (standard library)
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Tuple


class ConfigManager:
    """
    Manages application configuration and user preferences.

    Handles loading and saving of settings including:
    - Last opened folder path
    - View size shared by the three panes
    - Crosshair visibility and styling
    - Measurement threshold and styling
    - Window geometry and theme
    """

    def __init__(self, config_filename: str = "mpr_viewer_config.json"):
        """
        Initialize the configuration manager.

        Args:
            config_filename: Name of the configuration file to use
        """
        if os.name == 'nt':  # Windows
            app_data = os.getenv('APPDATA', os.path.expanduser('~'))
            self.config_dir = Path(app_data) / "MPRViewer"
        else:  # Mac/Linux
            self.config_dir = Path.home() / ".config" / "MPRViewer"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.config_dir / config_filename

        self.default_config = {
            "last_path": "",
            "theme": "dark",
            "view_size": 350,  # Side length of each square view in pixels
            "window_width": 1400,
            "window_height": 700,
            "crosshair_visible": True,
            "crosshair_axis_lines_visible": True,
            "crosshair_center_visible": True,  # "Plane Intersections" toggle
            "crosshair_line_thickness": 2,
            "measurement_min_pixels": 2,  # Drags at or below this on both axes are discarded
            "measurement_line_thickness": 2,
            "measurement_line_color_r": 0,  # Measurement line color (green default)
            "measurement_line_color_g": 255,
            "measurement_line_color_b": 0,
            "measurement_font_size": 12,
            "measurement_font_color_r": 0,
            "measurement_font_color_g": 255,
            "measurement_font_color_b": 0,
        }

        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from file, or return defaults if file doesn't exist.

        Returns:
            Dictionary containing configuration values
        """
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    loaded_config = json.load(f)
                # Merge with defaults to ensure all keys exist
                config = self.default_config.copy()
                config.update(loaded_config)
                return config
            except (json.JSONDecodeError, IOError) as e:
                print(f"Warning: Could not load config file: {e}")
                return self.default_config.copy()
        return self.default_config.copy()

    def save_config(self) -> bool:
        """
        Save current configuration to file.

        Returns:
            True if save was successful, False otherwise
        """
        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=4, ensure_ascii=False)
            return True
        except IOError as e:
            print(f"Error saving config file: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key to retrieve
            default: Default value if key doesn't exist

        Returns:
            Configuration value or default
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            key: Configuration key to set
            value: Value to set
        """
        self.config[key] = value

    def get_last_path(self) -> str:
        """
        Get the last opened folder path.

        Returns:
            Path string, empty if not set
        """
        return self.config.get("last_path", "")

    def set_last_path(self, path: str) -> None:
        """
        Set the last opened folder path.

        Args:
            path: Path to save
        """
        self.config["last_path"] = path
        self.save_config()

    def get_theme(self) -> str:
        return self.config.get("theme", "dark")

    def set_theme(self, theme: str) -> None:
        if theme in ["light", "dark"]:
            self.config["theme"] = theme
            self.save_config()

    def get_view_size(self) -> int:
        """
        Get the side length of the square views.

        Returns:
            View size in pixels (at least 50)
        """
        value = self.config.get("view_size", 350)
        try:
            return max(50, int(value))
        except (TypeError, ValueError):
            return 350

    def set_view_size(self, size: int) -> None:
        if size >= 50:
            self.config["view_size"] = int(size)
            self.save_config()

    def get_crosshair_visible(self) -> bool:
        return bool(self.config.get("crosshair_visible", True))

    def set_crosshair_visible(self, visible: bool) -> None:
        self.config["crosshair_visible"] = bool(visible)
        self.save_config()

    def get_crosshair_axis_lines_visible(self) -> bool:
        return bool(self.config.get("crosshair_axis_lines_visible", True))

    def set_crosshair_axis_lines_visible(self, visible: bool) -> None:
        self.config["crosshair_axis_lines_visible"] = bool(visible)
        self.save_config()

    def get_crosshair_center_visible(self) -> bool:
        return bool(self.config.get("crosshair_center_visible", True))

    def set_crosshair_center_visible(self, visible: bool) -> None:
        self.config["crosshair_center_visible"] = bool(visible)
        self.save_config()

    def get_crosshair_line_thickness(self) -> int:
        return int(self.config.get("crosshair_line_thickness", 2))

    def get_measurement_min_pixels(self) -> float:
        """
        Get the minimum drag (view pixels, either axis) for a measurement to be kept.

        Returns:
            Threshold in view pixels
        """
        try:
            return max(0.0, float(self.config.get("measurement_min_pixels", 2)))
        except (TypeError, ValueError):
            return 2.0

    def set_measurement_min_pixels(self, pixels: float) -> None:
        if pixels >= 0:
            self.config["measurement_min_pixels"] = pixels
            self.save_config()

    def get_measurement_line_thickness(self) -> int:
        return int(self.config.get("measurement_line_thickness", 2))

    def get_measurement_line_color(self) -> Tuple[int, int, int]:
        """
        Get measurement line color.

        Returns:
            (r, g, b) tuple
        """
        return (
            self.config.get("measurement_line_color_r", 0),
            self.config.get("measurement_line_color_g", 255),
            self.config.get("measurement_line_color_b", 0),
        )

    def set_measurement_line_color(self, r: int, g: int, b: int) -> None:
        self.config["measurement_line_color_r"] = max(0, min(255, r))
        self.config["measurement_line_color_g"] = max(0, min(255, g))
        self.config["measurement_line_color_b"] = max(0, min(255, b))
        self.save_config()

    def get_measurement_font_size(self) -> int:
        return int(self.config.get("measurement_font_size", 12))

    def get_measurement_font_color(self) -> Tuple[int, int, int]:
        return (
            self.config.get("measurement_font_color_r", 0),
            self.config.get("measurement_font_color_g", 255),
            self.config.get("measurement_font_color_b", 0),
        )
