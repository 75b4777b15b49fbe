"""
Campus map application - explicit state and a single dispatch entry point.

Startup order:
--------------
1. Restore spots (campusMarkers)
2. Load events (campusEvents)
3. Restore chat transcript (campusChat)
4. Accept commands

Restored spots therefore always precede spots created in the session.

All commands run synchronously on the caller's thread. The chat reply is
the only deferred work and goes through the Scheduler.

Error handling:
- ValidationError from a handler becomes a user alert; the command aborts
- Everything else propagates to the caller
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Type

from campusmap.annotations import AnnotationStore, IdGenerator, MapPresenter
from campusmap.annotations.models import Annotation
from campusmap.chat import ChatSession, ChatTranscript, KeywordResponder
from campusmap.commands import (
    AnyCommand,
    Command,
    DeleteEvent,
    MapClick,
    PanMap,
    RemoveSpot,
    SetRouteEnd,
    SetRouteStart,
    ShowRoute,
    SpotClick,
    SubmitChat,
    SubmitEvent,
    SubmitSpot,
    TogglePanel,
    ZoomMap,
)
from campusmap.config import CampusSettings
from campusmap.errors import ValidationError
from campusmap.events import EventLog
from campusmap.gallery import GalleryPanel, SpotGallery
from campusmap.markup import preview_popup_html
from campusmap.routing import RoutePlanner
from campusmap.scheduling import ManualScheduler, Scheduler
from campusmap.storage import MemorySlotStore, SlotStore, SqliteSlotStore
from campusmap.widgets import (
    HeadlessMap,
    HeadlessRouteWidget,
    MapWidget,
    Notifier,
    RecordingNotifier,
    RouteWidget,
)

logger = logging.getLogger(__name__)


PANELS = ("image", "events", "chat")


@dataclass
class FormState:
    """Values of the spot form's coordinate fields."""
    
    latitude: str = ""
    longitude: str = ""
    
    def clear(self) -> None:
        self.latitude = ""
        self.longitude = ""


@dataclass
class AppState:
    """Everything the application owns. Built once by CampusMapApp.build()."""
    
    settings: CampusSettings
    slots: SlotStore
    map: MapWidget
    notifier: Notifier
    annotations: AnnotationStore
    gallery: SpotGallery
    events: EventLog
    chat: ChatSession
    routes: RoutePlanner
    form: FormState = field(default_factory=FormState)
    panels: Dict[str, bool] = field(default_factory=lambda: {name: False for name in PANELS})
    gallery_panel: Optional[GalleryPanel] = None
    preview_handle: Any = None
    center: Tuple[float, float] = (0.0, 0.0)
    zoom: float = 0.0


class CampusMapApp:
    def __init__(self, state: AppState):
        self.state = state
        self._started = False
        self._handlers: Dict[Type[Command], Callable[[Any], Any]] = {
            MapClick: self._on_map_click,
            PanMap: self._on_pan,
            ZoomMap: self._on_zoom,
            SubmitSpot: self._on_submit_spot,
            RemoveSpot: self._on_remove_spot,
            SpotClick: self._on_spot_click,
            SetRouteStart: self._on_set_route_start,
            SetRouteEnd: self._on_set_route_end,
            ShowRoute: self._on_show_route,
            TogglePanel: self._on_toggle_panel,
            SubmitEvent: self._on_submit_event,
            DeleteEvent: self._on_delete_event,
            SubmitChat: self._on_submit_chat,
        }
    
    @classmethod
    def build(
        cls,
        settings: Optional[CampusSettings] = None,
        slots: Optional[SlotStore] = None,
        map_widget: Optional[MapWidget] = None,
        route_widget: Optional[RouteWidget] = None,
        notifier: Optional[Notifier] = None,
        scheduler: Optional[Scheduler] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> "CampusMapApp":
        """
        Wire all components.
        
        Collaborators not supplied get headless implementations. Slots
        default to a SQLite file when settings.storage_path is set,
        otherwise to memory.
        """
        settings = settings or CampusSettings()
        if slots is None:
            slots = SqliteSlotStore(settings.storage_path) if settings.storage_path else MemorySlotStore()
        map_widget = map_widget if map_widget is not None else HeadlessMap()
        route_widget = route_widget if route_widget is not None else HeadlessRouteWidget()
        
        state = AppState(
            settings=settings,
            slots=slots,
            map=map_widget,
            notifier=notifier if notifier is not None else RecordingNotifier(),
            annotations=AnnotationStore(slots, MapPresenter(map_widget), id_generator),
            gallery=SpotGallery(),
            events=EventLog(slots),
            chat=ChatSession(
                ChatTranscript(slots),
                KeywordResponder(),
                scheduler if scheduler is not None else ManualScheduler(),
                reply_delay=settings.chat_reply_delay,
            ),
            routes=RoutePlanner(route_widget, map_widget),
            center=(settings.viewport.center_lat, settings.viewport.center_lng),
            zoom=settings.viewport.initial_zoom,
        )
        return cls(state)
    
    @property
    def started(self) -> bool:
        return self._started
    
    def start(self) -> None:
        """Restore persisted state. Must run before the first dispatch."""
        if self._started:
            raise RuntimeError("Application already started")
        
        spots = self.state.annotations.restore()
        events = len(self.state.events.list())
        chat = self.state.chat.transcript.restore()
        self._started = True
        logger.info(f"Started with {spots} spot(s), {events} event(s), chat restored: {chat}")
    
    def dispatch(self, command: AnyCommand) -> Any:
        """
        Run one command.
        
        Returns:
            The handler's result, or None when validation failed
        
        Raises:
            RuntimeError: If start() has not run
            TypeError: For objects that are not known commands
        """
        if not self._started:
            raise RuntimeError("start() must be called before dispatching commands")
        
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {type(command).__name__}")
        
        try:
            return handler(command)
        except ValidationError as e:
            logger.info(f"{type(command).__name__} rejected: {e.message}")
            self.state.notifier.alert(e.message)
            return None
    
    # View accessors
    
    def event_cards_html(self) -> str:
        return self.state.events.render_cards()
    
    def chat_html(self) -> str:
        return self.state.chat.transcript.markup
    
    # Map
    
    def _on_map_click(self, command: MapClick) -> Tuple[str, str]:
        state = self.state
        lat = f"{command.lat:.6f}"
        lng = f"{command.lng:.6f}"
        state.form.latitude = lat
        state.form.longitude = lng
        
        self._clear_preview()
        state.preview_handle = state.map.add_point(float(lat), float(lng))
        state.map.bind_popup(state.preview_handle, preview_popup_html(lat, lng))
        
        for name in PANELS:
            state.panels[name] = False
        return lat, lng
    
    def _on_pan(self, command: PanMap) -> Tuple[float, float]:
        self.state.center = self.state.settings.viewport.clamp(command.lat, command.lng)
        return self.state.center
    
    def _on_zoom(self, command: ZoomMap) -> float:
        self.state.zoom = self.state.settings.viewport.clamp_zoom(command.zoom)
        return self.state.zoom
    
    def _clear_preview(self) -> None:
        if self.state.preview_handle is not None:
            self.state.map.remove_point(self.state.preview_handle)
            self.state.preview_handle = None
    
    # Spots
    
    def _on_submit_spot(self, command: SubmitSpot) -> Annotation:
        form = self.state.form
        lat = command.latitude if command.latitude is not None else form.latitude
        lng = command.longitude if command.longitude is not None else form.longitude
        
        if not lat.strip() or not lng.strip():
            raise ValidationError("Click on the map to select a location first!")
        
        annotation = self.state.annotations.create(lat, lng, command.name, command.description)
        self._clear_preview()
        form.clear()
        return annotation
    
    def _on_remove_spot(self, command: RemoveSpot) -> bool:
        removed = self.state.annotations.remove(command.id)
        if removed:
            self.state.notifier.alert("Marker removed successfully!")
        return removed
    
    def _on_spot_click(self, command: SpotClick) -> GalleryPanel:
        annotation = self.state.annotations.get(command.id)
        name = annotation.name if annotation else "Unknown Spot"
        self.state.gallery_panel = self.state.gallery.render_panel(name)
        self.state.panels["image"] = True
        return self.state.gallery_panel
    
    # Route
    
    def _on_set_route_start(self, command: SetRouteStart):
        point = self.state.routes.set_start(self.state.form.latitude, self.state.form.longitude)
        self.state.notifier.alert("✅ Start point set!")
        return point
    
    def _on_set_route_end(self, command: SetRouteEnd):
        point = self.state.routes.set_end(self.state.form.latitude, self.state.form.longitude)
        self.state.notifier.alert("✅ End point set!")
        return point
    
    def _on_show_route(self, command: ShowRoute):
        return self.state.routes.show_route()
    
    # Panels, events, chat
    
    def _on_toggle_panel(self, command: TogglePanel) -> bool:
        panels = self.state.panels
        panels[command.panel] = not panels[command.panel]
        return panels[command.panel]
    
    def _on_submit_event(self, command: SubmitEvent):
        return self.state.events.add(command.name, command.description)
    
    def _on_delete_event(self, command: DeleteEvent) -> bool:
        return self.state.events.remove_at(command.index)
    
    def _on_submit_chat(self, command: SubmitChat) -> bool:
        return self.state.chat.submit(command.text)
