# ======================================================
# Potato Doctor — upload screen
# ======================================================
# Run with: streamlit run potato_doctor/app.py

import streamlit as st

from potato_doctor.acquisition import load_preview
from potato_doctor.diseases import build_result_view
from potato_doctor.state import Phase, can_predict, reset
from potato_doctor.ui import (
    commit,
    get_screen_state,
    handle_upload,
    header,
    load_settings,
    render_result,
    run_prediction,
    set_page,
    set_screen_state,
    show_pending_notice,
    sidebar,
)
from potato_doctor.utils.api_client import build_client
from potato_doctor.utils.logger import setup_logger

SCREEN_KEY = "upload_screen"

set_page("Potato Doctor")
settings = load_settings()
setup_logger(settings.log_level)
client = build_client(settings)

header("Drag and drop an image of a potato plant leaf to process")
sidebar(settings, client)

# ======================================================
# SESSION SAFETY
# ======================================================
for k, default in [("last_upload_hash", None), ("upload_generation", 0)]:
    if k not in st.session_state:
        st.session_state[k] = default


def start_over():
    # A fresh widget key is the only way to clear a file_uploader
    st.session_state.upload_generation += 1
    st.session_state.last_upload_hash = None
    set_screen_state(SCREEN_KEY, reset(get_screen_state(SCREEN_KEY)))
    st.rerun()


show_pending_notice(SCREEN_KEY)
state = get_screen_state(SCREEN_KEY)

# ======================================================
# IMAGE UPLOAD
# ======================================================
uploaded_file = st.file_uploader(
    "Choose File",
    key=f"upload_{st.session_state.upload_generation}",
)
commit(SCREEN_KEY, state, handle_upload(state, st.session_state, uploaded_file))

# ======================================================
# PREDICTION
# ======================================================
if state.image is not None:
    st.image(load_preview(state.image.data), caption="Preview", width="content")

    if state.phase is Phase.RESULT_SHOWN:
        render_result(build_result_view(state.result))
        if st.button("Analyze Another Image"):
            start_over()
    else:
        c1, c2 = st.columns(2)
        if c1.button("Predict Disease", type="primary", disabled=not can_predict(state)):
            commit(SCREEN_KEY, state, run_prediction(state, client))
        if c2.button("Upload New Image"):
            start_over()
