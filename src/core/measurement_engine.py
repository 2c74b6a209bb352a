"""
Measurement Engine

This module converts line segments drawn in a view into real-world
distances, and tracks the draw/commit lifecycle of measurements per plane.

Distances are Euclidean in the plane's own two axes, scaled with the same
factors as the view -> real-world transform of that plane.

Inputs:
    - Two view pixel points on a plane
    - Pointer down / move / up events per plane

Outputs:
    - Distances in mm
    - Committed Measurement objects per plane

Requirements:
    - math module (standard library)
    - core.volume_model for spacing and dimensions
    - utils.dicom_utils for distance formatting
"""

import math
from typing import Dict, Optional, Tuple

from core.coordinate_transform import DEFAULT_VIEW_SIZE
from core.mpr_planes import ALL_PLANES, Plane
from core.volume_model import VolumeModel
from utils.dicom_utils import format_distance_mm

# A drag must move more than this many view pixels on either axis to be kept
MIN_MEASUREMENT_PIXELS = 2.0

Point = Tuple[float, float]


class Measurement:
    """A committed, immutable measurement on one plane."""

    __slots__ = ("_plane", "_start", "_end", "_distance_mm")

    def __init__(self, plane: Plane, start: Point, end: Point, distance_mm: float):
        self._plane = plane
        self._start = (float(start[0]), float(start[1]))
        self._end = (float(end[0]), float(end[1]))
        self._distance_mm = float(distance_mm)

    @property
    def plane(self) -> Plane:
        return self._plane

    @property
    def start(self) -> Point:
        return self._start

    @property
    def end(self) -> Point:
        return self._end

    @property
    def distance_mm(self) -> float:
        return self._distance_mm

    @property
    def formatted(self) -> str:
        return format_distance_mm(self._distance_mm)

    def __repr__(self) -> str:
        return f"Measurement({self._plane.value}, {self._start} -> {self._end}, {self.formatted})"


class PlaneMeasurements:
    """
    Measurement state of one view: the draft being drawn and the committed list.
    """

    def __init__(self, engine: "MeasurementEngine", plane: Plane):
        self.engine = engine
        self.plane = plane
        self.start_point: Optional[Point] = None
        self.end_point: Optional[Point] = None
        self._committed = []

    @property
    def measuring(self) -> bool:
        return self.start_point is not None

    @property
    def measurements(self) -> Tuple[Measurement, ...]:
        return tuple(self._committed)

    def start(self, point: Point) -> None:
        """Begin a draft at the pointer-down position."""
        self.start_point = (float(point[0]), float(point[1]))
        self.end_point = self.start_point

    def update(self, point: Point) -> Optional[float]:
        """
        Move the draft's end point.

        Returns:
            Current draft distance in mm, or None when no draft is active
        """
        if self.start_point is None:
            return None
        self.end_point = (float(point[0]), float(point[1]))
        return self.engine.distance(self.plane, self.start_point, self.end_point)

    def finish(self) -> Optional[Measurement]:
        """
        End the draft on pointer-up.

        Returns:
            The committed Measurement, or None if the drag was too short
        """
        if self.start_point is None:
            return None
        start, end = self.start_point, self.end_point
        self.start_point = self.end_point = None

        if not self.engine.is_committable(start, end):
            return None
        measurement = Measurement(self.plane, start, end, self.engine.distance(self.plane, start, end))
        self._committed.append(measurement)
        return measurement

    def cancel(self) -> None:
        """Discard the draft."""
        self.start_point = self.end_point = None

    def clear(self) -> None:
        """Discard the draft and every committed measurement."""
        self.cancel()
        self._committed = []


class MeasurementEngine:
    """
    Per-plane view-pixel to real-world distance conversion.

    Spacing and thickness come from the volume's spatial basis (first slice).
    """

    def __init__(
        self,
        volume: VolumeModel,
        view_size: float = DEFAULT_VIEW_SIZE,
        min_pixels: float = MIN_MEASUREMENT_PIXELS,
    ):
        """
        Initialize the measurement engine.

        Args:
            volume: Volume model
            view_size: Side length of every (square) view in pixels
            min_pixels: Threshold a drag must exceed on either axis to be committed
        """
        self.volume = volume
        self.view_size = float(view_size)
        self.min_pixels = float(min_pixels)
        self._sessions: Dict[Plane, PlaneMeasurements] = {
            plane: PlaneMeasurements(self, plane) for plane in ALL_PLANES
        }

    def session(self, plane: Plane) -> PlaneMeasurements:
        return self._sessions[Plane(plane)]

    def clear_all(self) -> None:
        for session in self._sessions.values():
            session.clear()

    def scale_factors(self, plane: Plane) -> Tuple[float, float]:
        """
        Real-world mm per view pixel along the view's x and y axes.

        Args:
            plane: Viewing plane

        Returns:
            (sx, sy); (0.0, 0.0) when no volume is loaded
        """
        if self.volume.is_empty:
            return (0.0, 0.0)
        basis = self.volume.basis
        row_spacing, col_spacing = basis.pixel_spacing
        size = self.view_size

        if plane == Plane.AXIAL:
            reference = self.volume.reference_slice
            return (row_spacing * reference.columns / size, col_spacing * reference.rows / size)
        if plane == Plane.CORONAL:
            return (row_spacing * self.volume.width / size, basis.slice_thickness * self.volume.depth / size)
        return (col_spacing * self.volume.height / size, basis.slice_thickness * self.volume.depth / size)

    def distance(self, plane: Plane, start: Point, end: Point) -> float:
        """Real-world length of a view-pixel segment on a plane."""
        sx, sy = self.scale_factors(Plane(plane))
        return math.hypot((end[0] - start[0]) * sx, (end[1] - start[1]) * sy)

    def is_committable(self, start: Point, end: Point) -> bool:
        """True when the segment moves more than min_pixels on either axis."""
        return abs(end[0] - start[0]) > self.min_pixels or abs(end[1] - start[1]) > self.min_pixels
