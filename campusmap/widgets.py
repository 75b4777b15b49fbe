"""
View collaborators - map, route widget, and user alerts.

The protocols describe what the core needs from the rendering layer.
The headless implementations keep everything in memory; they back the
test suite and any non-graphical embedding.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


LatLng = Tuple[float, float]


class MapWidget(Protocol):
    def add_point(self, lat: float, lng: float) -> Any:
        ...
    
    def remove_point(self, handle: Any) -> None:
        ...
    
    def bind_popup(self, handle: Any, html: str) -> None:
        ...
    
    def fit_bounds(self, south_west: LatLng, north_east: LatLng) -> None:
        ...


class RouteWidget(Protocol):
    def draw(
        self,
        start: LatLng,
        end: LatLng,
        on_route_found: Callable[[List[LatLng]], None],
    ) -> Any:
        ...
    
    def remove(self, handle: Any) -> None:
        ...


class Notifier(Protocol):
    def alert(self, message: str) -> None:
        ...


@dataclass
class MapPoint:
    """A point currently drawn on a HeadlessMap."""
    
    lat: float
    lng: float
    popup: Optional[str] = None


class HeadlessMap:
    """In-memory MapWidget. Handles are increasing integers."""
    
    def __init__(self):
        self.points: Dict[int, MapPoint] = {}
        self.fitted_bounds: Optional[Tuple[LatLng, LatLng]] = None
        self._handles = itertools.count(1)
    
    def add_point(self, lat: float, lng: float) -> int:
        handle = next(self._handles)
        self.points[handle] = MapPoint(lat=lat, lng=lng)
        return handle
    
    def remove_point(self, handle: int) -> None:
        if self.points.pop(handle, None) is None:
            logger.debug(f"remove_point: unknown handle {handle}")
    
    def bind_popup(self, handle: int, html: str) -> None:
        self.points[handle].popup = html
    
    def fit_bounds(self, south_west: LatLng, north_east: LatLng) -> None:
        self.fitted_bounds = (south_west, north_east)


@dataclass
class DrawnRoute:
    start: LatLng
    end: LatLng
    on_route_found: Callable[[List[LatLng]], None]


class HeadlessRouteWidget:
    """
    In-memory RouteWidget.
    
    Routes are not computed. Call `resolve()` to fire the route-found
    callback of the current route with a list of waypoints.
    """
    
    def __init__(self):
        self.routes: Dict[int, DrawnRoute] = {}
        self._handles = itertools.count(1)
    
    def draw(self, start, end, on_route_found) -> int:
        handle = next(self._handles)
        self.routes[handle] = DrawnRoute(start=start, end=end, on_route_found=on_route_found)
        return handle
    
    def remove(self, handle: int) -> None:
        self.routes.pop(handle, None)
    
    def resolve(self, handle: int, waypoints: Optional[List[LatLng]] = None) -> None:
        route = self.routes[handle]
        route.on_route_found(waypoints or [route.start, route.end])


@dataclass
class RecordingNotifier:
    """Notifier that keeps every alert message."""
    
    messages: List[str] = field(default_factory=list)
    
    def alert(self, message: str) -> None:
        logger.debug(f"alert: {message}")
        self.messages.append(message)
