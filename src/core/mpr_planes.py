"""
MPR Planes

This module defines the three anatomical viewing planes and the crosshair
drag targets shared by the transform engine, the sync controller, the
measurement engine and the GUI.

Inputs:
    - Plane names from the GUI ("axial", "coronal", "sagittal")
    - Drag target names emitted by the crosshair overlay

Outputs:
    - Plane and DragTarget enum members

Requirements:
    - enum module (standard library)
"""

from enum import Enum


class Plane(str, Enum):
    """Canonical orthogonal viewing planes."""

    AXIAL = "axial"
    CORONAL = "coronal"
    SAGITTAL = "sagittal"

    @property
    def short_name(self) -> str:
        """Single-letter label used in the slice status text (A/C/S)."""
        return self.value[0].upper()


class DragTarget(str, Enum):
    """
    Part of a crosshair overlay that is being dragged.

    DEPTH_AXIS is the horizontal line, moved along view-y.
    ORTHOGONAL_AXIS is the vertical line, moved along view-x.
    """

    CENTER = "center"
    DEPTH_AXIS = "depth_axis"
    ORTHOGONAL_AXIS = "orthogonal_axis"


ALL_PLANES = (Plane.AXIAL, Plane.CORONAL, Plane.SAGITTAL)
