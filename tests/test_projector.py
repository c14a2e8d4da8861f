"""Tests for the button state projector."""

from pyJsonGroupDeck.projector import (
    PRESSED_MARKER,
    ButtonAppearance,
    default_title,
    project,
)
from pyJsonGroupDeck.settings import ButtonSettings


def _settings(**kwargs) -> ButtonSettings:
    defaults = {
        "json": "/decks/group.json",
        "index": "2",
        "title": "Lights",
        "image_url": "data:image/png;base64,AAA",
        "image_url_pressed": "data:image/png;base64,BBB",
    }
    defaults.update(kwargs)
    return ButtonSettings(**defaults)


class TestProject:

    def test_unpressed(self):
        assert project(_settings()) == ButtonAppearance(
            "Lights", "data:image/png;base64,AAA"
        )

    def test_pressed(self):
        appearance = project(_settings(pressed=True))
        assert appearance.title == "Lights *"
        assert appearance.image == "data:image/png;base64,BBB"

    def test_marker(self):
        assert PRESSED_MARKER == " *"

    def test_missing_title_uses_numbered_default(self):
        appearance = project(_settings(title=None))
        assert appearance.title == "button 3"

    def test_empty_title_uses_numbered_default(self):
        assert project(_settings(title="")).title == "button 3"

    def test_unset_index_numbers_from_one(self):
        assert default_title(ButtonSettings()) == "button 1"

    def test_projection_does_not_mutate(self):
        settings = _settings(pressed=True)
        before = settings.to_dict()
        project(settings)
        assert settings.to_dict() == before
