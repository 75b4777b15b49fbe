"""
Markup rendering for the view layer.

Every user-supplied string is escaped before it is placed in markup.
The chat transcript is persisted as this markup, so its format is the
round-trip format of the campusChat slot.
"""

from html import escape
from typing import Iterable, Sequence


def escape_html(value: object = "") -> str:
    """Escape &, <, >, double and single quotes."""
    return escape(str(value), quote=True)


def popup_html(annotation_id: str, name: str, description: str) -> str:
    """Info popup for a spot, with a remove button carrying the spot id."""
    return (
        '<div class="popup-content">'
        f"<b>{escape_html(name)}</b><br>"
        f"<div>{escape_html(description)}</div>"
        '<div style="margin-top:8px;">'
        f'<button class="remove-btn" data-id="{escape_html(annotation_id)}">🗑 Remove</button>'
        "</div>"
        "</div>"
    )


def preview_popup_html(lat: str, lng: str) -> str:
    return f"Preview Spot<br>Lat: {escape_html(lat)}<br>Lng: {escape_html(lng)}"


def message_html(text: str, role: str) -> str:
    """One chat message; role is the styling class (userMsg / botMsg)."""
    return f'<div class="message {escape_html(role)}">{escape_html(text)}</div>'


def event_cards_html(events: Sequence[tuple[str, str]]) -> str:
    if not events:
        return '<p style="text-align:center; color:#666;">No ongoing events.</p>'
    
    cards = []
    for index, (name, description) in enumerate(events):
        cards.append(
            '<div class="eventCard">'
            f'<button class="delete-btn" data-index="{index}">🗑</button>'
            f"<h5>{escape_html(name)}</h5>"
            f"<p>{escape_html(description)}</p>"
            "</div>"
        )
    return "".join(cards)


def gallery_html(images: Iterable[str]) -> str:
    images = list(images)
    if not images:
        return '<p style="text-align:center; color:#555;">No images available for this spot.</p>'
    return "".join(f'<img src="{escape_html(url)}">' for url in images)
