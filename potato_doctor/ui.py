# ======================================================
# Shared Streamlit layout and state helpers
# ======================================================
import hashlib

import streamlit as st
from pydantic import ValidationError

from potato_doctor.acquisition import AcquisitionStatus, CaptureSource, accept_upload, capture_image
from potato_doctor.config import Settings, format_validation_error
from potato_doctor.diseases import ResultView
from potato_doctor.state import (
    Notice,
    NoticeLevel,
    Phase,
    ScreenState,
    dismiss_notice,
    initial_state,
    is_busy,
    notify,
    prediction_failed,
    prediction_succeeded,
    reset,
    select_image,
    start_prediction,
)
from potato_doctor.utils.logger import logger


def set_page(title: str):
    st.set_page_config(page_title=title, page_icon="🥔", layout="centered")


def header(subtitle: str):
    st.title("🥔 Potato Disease Detector")
    st.caption(subtitle)


def _streamlit_secrets() -> dict:
    # st.secrets raises when no secrets.toml exists
    try:
        return dict(st.secrets)
    except FileNotFoundError:
        return {}


def load_settings() -> Settings:
    try:
        return Settings.from_env(secrets=_streamlit_secrets())
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        st.error(format_validation_error(exc).replace("\n", "  \n"))
        st.stop()


def sidebar(settings: Settings, client):
    st.sidebar.header("Settings")
    st.sidebar.code(f"API_URL = {client.base_url}", language="text")
    st.sidebar.caption(f"Prediction timeout: {settings.predict_timeout:g}s")
    if st.sidebar.button("Check API"):
        if client.ping():
            st.sidebar.success("API is running ✅")
        else:
            st.sidebar.error("API is not reachable")


def file_hash(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


# ======================================================
# SCREEN STATE
# ======================================================
def get_screen_state(key: str) -> ScreenState:
    if key not in st.session_state:
        st.session_state[key] = initial_state()
    return st.session_state[key]


def set_screen_state(key: str, state: ScreenState):
    st.session_state[key] = state


def commit(key: str, old: ScreenState, new: ScreenState):
    """Store ``new`` and rerun the page if the transition changed anything."""
    if new is old:
        return
    set_screen_state(key, new)
    st.rerun()


def show_pending_notice(key: str):
    state = get_screen_state(key)
    if state.notice is None:
        return
    show_notice(state.notice)
    set_screen_state(key, dismiss_notice(state))


def show_notice(notice: Notice):
    text = f"**{notice.title}**: {notice.message}"
    if notice.level is NoticeLevel.ERROR:
        st.error(text)
    elif notice.level is NoticeLevel.WARNING:
        st.warning(text)
    else:
        st.info(text)


def run_prediction(state: ScreenState, client) -> ScreenState:
    # Predicting is never stored: a rerun that interrupts the request must not
    # leave the screen stuck with the predict control disabled.
    state = start_prediction(state)
    if not is_busy(state):
        return state

    with st.spinner("Analyzing..."):
        outcome = client.try_predict(state.image)

    if outcome.ok:
        return prediction_succeeded(state, outcome.result)
    logger.error("Prediction failed (%s): %s", outcome.error.kind.value, outcome.error.message)
    return prediction_failed(state, outcome.error)


# ======================================================
# RESULT
# ======================================================
def render_result(view: ResultView):
    info = view.info
    st.subheader("Diagnosis Result")
    st.markdown(
        f"<div style='text-align:center'><span style='background-color:{info.color};"
        f"color:#fff;padding:12px 20px;border-radius:25px;font-weight:bold'>"
        f"{info.name}</span></div>",
        unsafe_allow_html=True,
    )
    st.markdown(f"**Confidence:** {view.confidence}")
    st.markdown(f"**Description:** {info.description}")
    st.markdown(f"**Recommendation:** {info.recommendation}")


# ======================================================
# WIDGET INPUT
# ======================================================
# ``seen`` is st.session_state on the screens and a plain dict in tests.
def handle_upload(state: ScreenState, seen, uploaded_file) -> ScreenState:
    """Apply the file uploader's current value to the upload screen state."""
    if uploaded_file is None:
        seen["last_upload_hash"] = None
        return reset(state) if state.phase is not Phase.IDLE else state

    data = uploaded_file.getvalue()
    upload_hash = file_hash(data)
    if seen.get("last_upload_hash") == upload_hash:
        return state
    seen["last_upload_hash"] = upload_hash

    outcome = accept_upload(uploaded_file.name, uploaded_file.type, data)
    if outcome.is_selected:
        return select_image(state, outcome.image)
    if outcome.error_kind is not None:
        notice = Notice(level=NoticeLevel.WARNING, title=outcome.title, message=outcome.message)
        return notify(reset(state), notice)
    return state


def handle_capture(state: ScreenState, seen, source: CaptureSource, widget_file, provider) -> ScreenState:
    """Apply a camera or gallery widget's current value to the capture screen state.

    A capture refused for lack of permission is not marked as seen, so granting
    access afterwards picks up the same photo.
    """
    hash_key = f"last_{source.value}_hash"
    denied_key = f"denied_{source.value}_hash"
    if widget_file is None:
        seen[hash_key] = None
        seen[denied_key] = None
        return state

    capture_hash = file_hash(widget_file.getvalue())
    if seen.get(hash_key) == capture_hash:
        return state

    outcome = capture_image(provider, source)
    if outcome.status is AcquisitionStatus.PERMISSION_DENIED:
        if seen.get(denied_key) == capture_hash:
            return state
        seen[denied_key] = capture_hash
        notice = Notice(level=NoticeLevel.WARNING, title=outcome.title, message=outcome.message)
        return notify(state, notice)

    seen[hash_key] = capture_hash
    seen[denied_key] = None
    if outcome.is_selected:
        return select_image(state, outcome.image)
    if outcome.status is AcquisitionStatus.FAILED:
        notice = Notice(level=NoticeLevel.ERROR, title=outcome.title, message=outcome.message)
        return notify(state, notice)
    return state
