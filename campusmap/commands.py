"""
User commands accepted by CampusMapApp.dispatch().

Each click, drag or form submit of the view layer becomes one command.
All models reject unknown fields.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class Command(BaseModel):
    """Base for all commands."""
    
    model_config = ConfigDict(extra="forbid", frozen=True)


class MapClick(Command):
    """Click on empty map: pick a location and close side panels."""
    
    lat: float
    lng: float


class PanMap(Command):
    lat: float
    lng: float


class ZoomMap(Command):
    zoom: float


class SubmitSpot(Command):
    """
    Spot form submission.
    
    latitude / longitude override the form fields filled by the last
    map click. They stay strings, as typed.
    """
    
    name: str = ""
    description: str = ""
    latitude: Optional[str] = None
    longitude: Optional[str] = None


class RemoveSpot(Command):
    """Remove button inside a spot popup."""
    
    id: str


class SpotClick(Command):
    id: str


class SetRouteStart(Command):
    pass


class SetRouteEnd(Command):
    pass


class ShowRoute(Command):
    pass


class TogglePanel(Command):
    panel: Literal["events", "chat"]


class SubmitEvent(Command):
    name: str = ""
    description: str = ""


class DeleteEvent(Command):
    """Delete button on an event card; index comes from the rendered list."""
    
    index: int


class SubmitChat(Command):
    text: str = ""


AnyCommand = Union[
    MapClick,
    PanMap,
    ZoomMap,
    SubmitSpot,
    RemoveSpot,
    SpotClick,
    SetRouteStart,
    SetRouteEnd,
    ShowRoute,
    TogglePanel,
    SubmitEvent,
    DeleteEvent,
    SubmitChat,
]
