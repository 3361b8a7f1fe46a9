"""Tests for the Streamlit playback controls."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def _button(at, label):
    return next(b for b in at.button if b.label == label)


@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


class TestPlaybackControls:
    """Play state is cleared by Pause and by anything that changes the input."""

    def test_pause_stops_playback(self, app) -> None:
        app.session_state["playing"] = True
        _button(app, "⏸ Pause").click().run()
        assert not app.exception
        assert app.session_state["playing"] is False

    def test_preset_stops_playback(self, app) -> None:
        app.session_state["playing"] = True
        app.session_state["current_step"] = 5
        _button(app, "Preset 1").click().run()
        assert app.session_state["playing"] is False
        assert app.session_state["current_step"] == 0
        assert app.session_state["frames"] == 3

    def test_randomize_stops_playback(self, app) -> None:
        app.session_state["playing"] = True
        _button(app, "🔀 Randomize").click().run()
        assert app.session_state["playing"] is False
        assert app.session_state["current_step"] == 0

    def test_next_and_prev_move_one_step(self, app) -> None:
        _button(app, "Next ▶").click().run()
        assert app.session_state["current_step"] == 1
        _button(app, "◀ Prev").click().run()
        assert app.session_state["current_step"] == 0
