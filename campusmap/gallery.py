"""
Spot gallery - photo sets keyed by spot name.

Lookups are exact and case-sensitive. The table is fixed at import time
and read-only. A name without photos yields an empty tuple; callers
render the "no images" affordance instead of treating it as a failure.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from campusmap.markup import gallery_html


SPOT_IMAGES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Flag": ("./img1.jpg", "./img2.jpg", "./img3.jpg"),
    "Principal room": (
        "./img4.jpg",
        "./img5.jpg",
        "./img6.jpg",
        "./img7.jpg",
        "./img8.jpg",
        "./img9.jpg",
        "./img10.jpg",
    ),
    "Civil": ("./img11.jpg", "./img12.jpg", "./img13.jpg"),
    "Indoor": ("./img16.jpg",),
    "Stadium": ("./img14.jpg", "./img15.jpg"),
    "CSE": (
        "./img17.jpg",
        "./img18.jpg",
        "./img19.jpg",
        "./img20.jpg",
        "./img21.jpg",
        "./img22.jpg",
    ),
    "Library": ("./img23.jpg", "./img24.jpg", "./img25.jpg"),
    "Girls hostel": ("./img28.jpg",),
    "Boys hostel": ("./img29.jpg", "./img30.jpg"),
    "Auditorium": ("./img31.jpg", "./img32.jpg"),
})


@dataclass(frozen=True)
class GalleryPanel:
    """Rendered content of the image panel."""
    
    title: str
    images: Tuple[str, ...]
    body_html: str
    
    @property
    def is_empty(self) -> bool:
        return not self.images


class SpotGallery:
    def __init__(self, table: Optional[Mapping[str, Tuple[str, ...]]] = None):
        self._table = SPOT_IMAGES if table is None else MappingProxyType(
            {name: tuple(images) for name, images in table.items()}
        )
    
    def images_for(self, name: str) -> Tuple[str, ...]:
        return self._table.get(name, ())
    
    def render_panel(self, name: str) -> GalleryPanel:
        images = self.images_for(name)
        return GalleryPanel(
            title=f"{name} Photos",
            images=images,
            body_html=gallery_html(images),
        )
