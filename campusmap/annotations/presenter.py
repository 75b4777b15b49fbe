"""
Annotation presenter - turns spots into map points with info popups.

The presenter holds only rendering handles. The AnnotationStore owns the
canonical list of spots.
"""

from typing import Any, Protocol

from campusmap.markup import popup_html
from campusmap.widgets import MapWidget

from .models import Annotation


class AnnotationPresenter(Protocol):
    def render(self, annotation: Annotation) -> Any:
        ...
    
    def unrender(self, handle: Any) -> None:
        ...


class MapPresenter:
    """Draws each spot as a map point with a popup carrying a remove button."""
    
    def __init__(self, map_widget: MapWidget):
        self._map = map_widget
    
    def render(self, annotation: Annotation) -> Any:
        handle = self._map.add_point(annotation.lat, annotation.lng)
        self._map.bind_popup(
            handle,
            popup_html(annotation.id, annotation.name, annotation.description),
        )
        return handle
    
    def unrender(self, handle: Any) -> None:
        self._map.remove_point(handle)
