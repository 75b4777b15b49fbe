"""
Route planner - two-point route between a start and an end location.

Drawing is delegated to the RouteWidget. A new route replaces the
previous one. When the widget reports the route, the map is fitted to
the bounds of its waypoints.
"""

import logging
import math
from typing import Any, List, Optional

from campusmap.errors import ValidationError
from campusmap.widgets import LatLng, MapWidget, RouteWidget

logger = logging.getLogger(__name__)


def _parse_point(lat: Any, lng: Any, message: str) -> LatLng:
    try:
        point = (float(lat), float(lng))
    except (TypeError, ValueError):
        raise ValidationError(message) from None
    if not all(math.isfinite(value) for value in point):
        raise ValidationError(message)
    return point


class RoutePlanner:
    def __init__(self, route_widget: RouteWidget, map_widget: MapWidget):
        self._routes = route_widget
        self._map = map_widget
        self.start: Optional[LatLng] = None
        self.end: Optional[LatLng] = None
        self._handle: Any = None
    
    @property
    def has_route(self) -> bool:
        return self._handle is not None
    
    def set_start(self, lat: Any, lng: Any) -> LatLng:
        self.start = _parse_point(lat, lng, "Select a start location on map!")
        return self.start
    
    def set_end(self, lat: Any, lng: Any) -> LatLng:
        self.end = _parse_point(lat, lng, "Select an end location on map!")
        return self.end
    
    def show_route(self) -> Any:
        """
        Draw the route between start and end, replacing any earlier route.
        
        Raises:
            ValidationError: If start or end is not set
        """
        if self.start is None or self.end is None:
            raise ValidationError("Please set both Start and End points first!")
        
        if self._handle is not None:
            self._routes.remove(self._handle)
            self._handle = None
        
        self._handle = self._routes.draw(self.start, self.end, self._on_route_found)
        logger.info(f"Route requested from {self.start} to {self.end}")
        return self._handle
    
    def _on_route_found(self, waypoints: List[LatLng]) -> None:
        if not waypoints:
            return
        lats = [lat for lat, _ in waypoints]
        lngs = [lng for _, lng in waypoints]
        self._map.fit_bounds((min(lats), min(lngs)), (max(lats), max(lngs)))
