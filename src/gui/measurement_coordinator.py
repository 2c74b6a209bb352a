"""
Measurement Coordinator

This module coordinates measurement drawing between the plane views and the
measurement engine.

Inputs:
    - Measurement drawing events from the three plane views
    - Clear requests

Outputs:
    - Draft and committed measurement items in the view scenes

Requirements:
    - MeasurementEngine for distances and the commit threshold
    - PlaneView for scene operations
    - MeasurementItem for graphics
"""

from PySide6.QtCore import QPointF
from typing import Dict, List, Optional

from core.measurement_engine import Measurement, MeasurementEngine
from core.mpr_planes import Plane
from gui.plane_view import PlaneView
from tools.measurement_items import MeasurementItem
from utils.config_manager import ConfigManager
from utils.dicom_utils import format_distance_mm


class MeasurementCoordinator:
    """
    Coordinates measurement operations.

    Responsibilities:
    - Handle measurement drawing events per view
    - Keep the draft item in sync with the pointer
    - Draw committed measurements and clear them on request
    """

    def __init__(
        self,
        engine: MeasurementEngine,
        views: Dict[Plane, PlaneView],
        config_manager: Optional[ConfigManager] = None,
    ):
        """
        Initialize the measurement coordinator.

        Args:
            engine: Measurement engine shared by all views
            views: Plane view per plane
            config_manager: Optional ConfigManager for measurement styling
        """
        self.engine = engine
        self.views = views
        self.config_manager = config_manager
        self._drafts: Dict[Plane, Optional[MeasurementItem]] = {plane: None for plane in views}
        self._items: Dict[Plane, List[MeasurementItem]] = {plane: [] for plane in views}

    def connect_views(self) -> None:
        """Connect the measurement signals of every view."""
        for plane, view in self.views.items():
            view.measurement_started.connect(lambda pos, p=plane: self.handle_measurement_started(p, pos))
            view.measurement_updated.connect(lambda pos, p=plane: self.handle_measurement_updated(p, pos))
            view.measurement_finished.connect(lambda p=plane: self.handle_measurement_finished(p))

    def _style(self) -> dict:
        if self.config_manager is None:
            return {}
        return {
            "line_color": self.config_manager.get_measurement_line_color(),
            "line_thickness": self.config_manager.get_measurement_line_thickness(),
            "font_size": self.config_manager.get_measurement_font_size(),
            "font_color": self.config_manager.get_measurement_font_color(),
        }

    def handle_measurement_started(self, plane: Plane, pos: QPointF) -> None:
        """
        Handle measurement start.

        Args:
            plane: View the measurement is drawn in
            pos: Starting position
        """
        if self.engine.volume.is_empty:
            return
        self._remove_draft(plane)
        self.engine.session(plane).start((pos.x(), pos.y()))

        draft = MeasurementItem(pos, pos, "", committed=False, **self._style())
        self.views[plane].scene.addItem(draft)
        self._drafts[plane] = draft

    def handle_measurement_updated(self, plane: Plane, pos: QPointF) -> None:
        """
        Handle measurement update.

        Args:
            plane: View the measurement is drawn in
            pos: Current position
        """
        session = self.engine.session(plane)
        distance = session.update((pos.x(), pos.y()))
        draft = self._drafts.get(plane)
        if distance is None or draft is None:
            return
        start = QPointF(*session.start_point)
        draft.update_endpoints(start, pos, format_distance_mm(distance))

    def handle_measurement_finished(self, plane: Plane) -> Optional[Measurement]:
        """
        Handle measurement finish.

        Commits the draft when it passed the minimum drag threshold,
        otherwise discards it.

        Returns:
            The committed Measurement, or None
        """
        self._remove_draft(plane)
        measurement = self.engine.session(plane).finish()
        if measurement is None:
            return None

        item = MeasurementItem(
            QPointF(*measurement.start),
            QPointF(*measurement.end),
            measurement.formatted,
            committed=True,
            **self._style(),
        )
        self.views[plane].scene.addItem(item)
        self._items[plane].append(item)
        return measurement

    def measurement_items(self, plane: Plane) -> List[MeasurementItem]:
        return list(self._items[plane])

    def clear_measurements(self) -> None:
        """Remove every draft and committed measurement from all views."""
        for plane, view in self.views.items():
            self._remove_draft(plane)
            for item in self._items[plane]:
                if item.scene() is not None:
                    view.scene.removeItem(item)
            self._items[plane] = []
        self.engine.clear_all()

    def _remove_draft(self, plane: Plane) -> None:
        draft = self._drafts.get(plane)
        if draft is not None and draft.scene() is not None:
            draft.scene().removeItem(draft)
        self._drafts[plane] = None
