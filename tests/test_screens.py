from pathlib import Path

import pytest
import requests
from streamlit.testing.v1 import AppTest

from potato_doctor.models import PredictionResult
from potato_doctor.state import (
    Notice,
    NoticeLevel,
    Phase,
    initial_state,
    notify,
    prediction_succeeded,
    select_image,
    start_prediction,
)
from potato_doctor.utils import api_client

PACKAGE_DIR = Path(__file__).resolve().parents[1] / "potato_doctor"
UPLOAD_SCREEN = PACKAGE_DIR / "app.py"
CAPTURE_SCREEN = PACKAGE_DIR / "pages" / "capture.py"
ANALYZE = "🔍 Analyze Disease"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("POTATO_API_URL", "POTATO_PREDICT_TIMEOUT", "POTATO_PING_TIMEOUT", "POTATO_USE_MOCK", "POTATO_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def use_mock(monkeypatch):
    monkeypatch.setenv("POTATO_USE_MOCK", "true")


def screen(path, key=None, state=None):
    at = AppTest.from_file(str(path), default_timeout=30)
    if key is not None:
        at.session_state[key] = state
    return at.run()


def button(at, label):
    return next(b for b in at.button if b.label == label)


# ======================================================
# UPLOAD SCREEN
# ======================================================
def test_upload_screen_starts_idle(use_mock):
    at = screen(UPLOAD_SCREEN)
    assert not at.exception
    assert at.session_state["upload_screen"].phase is Phase.IDLE
    assert all(b.label != "Predict Disease" for b in at.button)


def test_cleared_uploader_resets_screen(use_mock, image):
    at = screen(UPLOAD_SCREEN, "upload_screen", select_image(initial_state(), image))
    assert not at.exception
    assert at.session_state["upload_screen"].phase is Phase.IDLE
    assert all(b.label != "Predict Disease" for b in at.button)


def test_rejected_drop_warning_is_shown(use_mock):
    notice = Notice(level=NoticeLevel.WARNING, title="Invalid File", message="notes.txt is not an image (text/plain).")
    at = screen(UPLOAD_SCREEN, "upload_screen", notify(initial_state(), notice))
    assert not at.exception
    assert "Invalid File" in at.warning[0].value
    assert at.session_state["upload_screen"].notice is None


def test_invalid_configuration_is_reported(monkeypatch):
    monkeypatch.setenv("POTATO_API_URL", "localhost:8000")
    at = screen(UPLOAD_SCREEN)
    assert not at.exception
    assert "POTATO_API_URL" in at.error[0].value


# ======================================================
# CAPTURE SCREEN
# ======================================================
def test_predict_without_image_warns(use_mock):
    at = screen(CAPTURE_SCREEN)
    button(at, ANALYZE).click().run()
    assert not at.exception
    assert "No Image" in at.warning[0].value


def test_predict_shows_result(use_mock, image):
    at = screen(CAPTURE_SCREEN, "capture_screen", select_image(initial_state(), image))
    assert not button(at, ANALYZE).disabled

    button(at, ANALYZE).click().run()

    assert not at.exception
    assert at.session_state["capture_screen"].phase is Phase.RESULT_SHOWN
    text = " ".join(m.value for m in at.markdown)
    assert "Early Blight" in text
    assert "92.00%" in text
    assert button(at, ANALYZE).disabled


def test_predict_disabled_while_result_shown(use_mock, image):
    shown = prediction_succeeded(
        start_prediction(select_image(initial_state(), image)),
        PredictionResult(label="Potato___healthy", confidence=0.9567),
    )
    at = screen(CAPTURE_SCREEN, "capture_screen", shown)
    assert button(at, ANALYZE).disabled
    assert "95.67%" in " ".join(m.value for m in at.markdown)


def test_failed_prediction_shows_error(monkeypatch, image):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(api_client.requests, "post", fake_post)
    at = screen(CAPTURE_SCREEN, "capture_screen", select_image(initial_state(), image))

    button(at, ANALYZE).click().run()

    assert not at.exception
    assert "Failed to predict disease. Make sure the API server is running." in at.error[0].value
    state = at.session_state["capture_screen"]
    assert state.phase is Phase.IMAGE_SELECTED
    assert state.result is None
    assert not button(at, ANALYZE).disabled


def test_start_over_resets(use_mock, image):
    at = screen(CAPTURE_SCREEN, "capture_screen", select_image(initial_state(), image))
    button(at, "Start Over").click().run()
    assert at.session_state["capture_screen"].phase is Phase.IDLE
