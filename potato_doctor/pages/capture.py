# ======================================================
# Potato Doctor — capture screen
# ======================================================
import streamlit as st

from potato_doctor.acquisition import CaptureSource, UploadedFileCaptureProvider, load_preview
from potato_doctor.diseases import build_result_view
from potato_doctor.state import Phase, can_predict, reset
from potato_doctor.ui import (
    commit,
    get_screen_state,
    handle_capture,
    header,
    load_settings,
    render_result,
    run_prediction,
    set_page,
    show_pending_notice,
    sidebar,
)
from potato_doctor.utils.api_client import build_client
from potato_doctor.utils.logger import setup_logger

SCREEN_KEY = "capture_screen"

set_page("Capture · Potato Doctor")
settings = load_settings()
setup_logger(settings.log_level)
client = build_client(settings)

header("Capture or upload a leaf image for diagnosis")
sidebar(settings, client)

show_pending_notice(SCREEN_KEY)
state = get_screen_state(SCREEN_KEY)

# ======================================================
# CAPTURE
# ======================================================
granted = st.toggle("Allow camera and photo library access", key="capture_permission")

take_tab, pick_tab = st.tabs(["📷 Take Photo", "🖼️ Pick from Gallery"])
with take_tab:
    photo = st.camera_input("Take Photo")
with pick_tab:
    picked = st.file_uploader("Pick from Gallery", type=["jpg", "jpeg", "png"])

provider = UploadedFileCaptureProvider(granted, camera_file=photo, library_file=picked)

for source, widget_file in [(CaptureSource.CAMERA, photo), (CaptureSource.LIBRARY, picked)]:
    commit(SCREEN_KEY, state, handle_capture(state, st.session_state, source, widget_file, provider))

# ======================================================
# IMAGE DISPLAY
# ======================================================
if state.image is not None:
    st.image(load_preview(state.image.data), caption=state.image.filename, width="content")
else:
    st.markdown("<div style='text-align:center;font-size:64px'>📸</div>", unsafe_allow_html=True)
    st.caption("No image selected")

# ======================================================
# PREDICTION
# ======================================================
predict_enabled = can_predict(state) or state.phase is Phase.IDLE
if st.button("🔍 Analyze Disease", type="primary", disabled=not predict_enabled):
    commit(SCREEN_KEY, state, run_prediction(state, client))

if state.phase is Phase.RESULT_SHOWN:
    render_result(build_result_view(state.result))

if state.phase is not Phase.IDLE and st.button("Start Over"):
    commit(SCREEN_KEY, state, reset(state))
