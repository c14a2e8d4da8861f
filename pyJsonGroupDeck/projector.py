"""Projection of button settings onto what the key shows."""

from __future__ import annotations

from typing import NamedTuple

from pyJsonGroupDeck.settings import ButtonSettings

#: Suffix appended to the title of the pressed button in a group.
PRESSED_MARKER: str = " *"


class ButtonAppearance(NamedTuple):
    """Title and image (``data:`` URL or ``""``) to render on a key."""

    title: str
    image: str


def default_title(settings: ButtonSettings) -> str:
    """Numbered fallback title, 1-based."""
    return f"button {settings.index_number + 1}"


def project(settings: ButtonSettings) -> ButtonAppearance:
    """Map *settings* to its rendering.  Pure: performs no I/O."""
    if settings.pressed:
        return ButtonAppearance(
            (settings.title or default_title(settings)) + PRESSED_MARKER,
            settings.image_url_pressed,
        )
    return ButtonAppearance(
        settings.title or default_title(settings),
        settings.image_url,
    )
