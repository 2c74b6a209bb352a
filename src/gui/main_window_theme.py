"""
Main Window Theme – stylesheet and view background for light/dark themes.

Provides stylesheet strings and the plane view background color for
MainWindow theme switching. No dependency on MainWindow or config.

Purpose:
    - Return stylesheet for a given theme name
    - Return plane view background QColor for a given theme

Inputs:
    - theme: "light" or "dark"

Outputs:
    - Stylesheet string for QApplication.setStyleSheet
    - QColor for plane view background

Requirements:
    - PySide6.QtGui.QColor
"""

from PySide6.QtGui import QColor

_PALETTES = {
    "dark": {
        "window": "#2b2b2b",
        "text": "#ffffff",
        "panel": "#1b1b1b",
        "border": "#555555",
        "button": "#3a3a3a",
        "button_hover": "#4a4a4a",
        "accent": "#4285da",
    },
    "light": {
        "window": "#f0f0f0",
        "text": "#000000",
        "panel": "#ffffff",
        "border": "#c0c0c0",
        "button": "#e1e1e1",
        "button_hover": "#d0d0d0",
        "accent": "#2a6fc9",
    },
}


def get_theme_stylesheet(theme: str) -> str:
    """
    Return the application stylesheet for the given theme.

    Unknown theme names fall back to dark.

    Args:
        theme: "light" or "dark"

    Returns:
        Stylesheet string to pass to QApplication.instance().setStyleSheet()
    """
    colors = _PALETTES.get(theme, _PALETTES["dark"])
    return """
        QMainWindow, QWidget {{
            background-color: {window};
            color: {text};
        }}

        QToolBar {{
            background-color: {window};
            border-bottom: 1px solid {border};
            spacing: 6px;
            padding: 2px;
        }}

        QPushButton {{
            background-color: {button};
            color: {text};
            border: 1px solid {border};
            border-radius: 3px;
            padding: 4px 10px;
        }}

        QPushButton:hover {{
            background-color: {button_hover};
        }}

        QComboBox {{
            background-color: {button};
            color: {text};
            border: 1px solid {border};
            padding: 2px 6px;
        }}

        QCheckBox {{
            color: {text};
            spacing: 4px;
        }}

        QSlider::groove:horizontal {{
            background-color: {panel};
            border: 1px solid {border};
            height: 6px;
        }}

        QSlider::handle:horizontal {{
            background-color: {accent};
            width: 12px;
            margin: -4px 0;
            border-radius: 3px;
        }}

        QLabel#view_title {{
            font-weight: bold;
        }}

        QStatusBar {{
            background-color: {panel};
            color: {text};
            border-top: 1px solid {border};
        }}
    """.format(**colors)


def get_theme_viewer_background_color(theme: str) -> QColor:
    """
    Return the plane view background color for the given theme.

    Args:
        theme: "light" or "dark"

    Returns:
        QColor for the view background brush
    """
    if theme == "light":
        return QColor(64, 64, 64)
    return QColor(0, 0, 0)
