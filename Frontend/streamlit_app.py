import html
import logging

import streamlit as st

from ser_ui.config import settings
from ser_ui.controller import InteractionController
from ser_ui.schemas import UploadRequest
from ser_ui import view

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# --- Page Config ---
st.set_page_config(
    page_title="Speech Emotion Recognition",
    page_icon="🎙️",
    layout="centered",
)

# --- CSS Styling ---
st.markdown("""
<style>
    .main-header {
        font-size: 2rem;
        font-weight: 700;
        text-align: center;
        margin-bottom: 1.5rem;
    }
    .overview-card {
        padding: 1rem;
        border-radius: 8px;
    }
    .overview-positive { background-color: #eff6ff; color: #2563eb; }
    .overview-negative { background-color: #fef2f2; color: #dc2626; }
    .overview-value {
        font-size: 1.9rem;
        font-weight: 700;
    }
    .emotion-badge {
        padding: 2px 12px;
        border-radius: 9999px;
        font-size: 0.85rem;
        font-weight: 500;
    }
    .muted {
        color: #6b7280;
        font-size: 0.85rem;
    }
</style>
""", unsafe_allow_html=True)

# --- Session ---
if "controller" not in st.session_state:
    st.session_state["controller"] = InteractionController()
controller: InteractionController = st.session_state["controller"]
state = controller.state
controller.poll_playback()


def on_file_change():
    uploaded = st.session_state.get("wav_upload")
    upload = None
    if uploaded is not None:
        upload = UploadRequest(name=uploaded.name, content=uploaded.getvalue(), media_type=uploaded.type)
    controller.select_file(upload)


def play_control(file_path: str, duration: float, key: str):
    playing = controller.is_playing(file_path)
    st.button(
        view.play_label(playing),
        key=key,
        on_click=controller.toggle_playback,
        args=(file_path, duration),
        type="primary",
    )
    if playing and state.playing.audio is not None:
        st.audio(state.playing.audio, format="audio/wav", autoplay=True)


@st.fragment(run_every=1)
def watch_playback():
    # the browser does not report the end of a clip; rerun the page once it has run out
    if controller.poll_playback():
        st.rerun()


# --- Upload Form ---
st.markdown('<div class="main-header">Speech Emotion Recognition</div>', unsafe_allow_html=True)

with st.container(border=True):
    st.file_uploader(
        "🎵 Choose WAV File",
        type=["wav"],
        key="wav_upload",
        on_change=on_file_change,
    )
    if state.selected_file is not None:
        st.caption(f"Selected: {state.selected_file.name}")

    if state.error:
        st.error(state.error)

    if st.button(
        view.submit_label(state.is_loading),
        type="primary",
        use_container_width=True,
        disabled=not controller.can_submit,
    ):
        with st.spinner("Analyzing..."):
            controller.submit()
        st.rerun()

# --- Results View ---
result = state.result
if result is not None:
    with st.container(border=True):
        st.subheader("Original Audio")
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(f"**{html.escape(result.original_file)}**")
            st.markdown(
                f'<span class="muted">Duration: {view.seconds(result.original_duration)}</span>',
                unsafe_allow_html=True,
            )
        with col2:
            play_control(result.original_file_path, result.original_duration, key="play-original")

    with st.container(border=True):
        st.subheader("Analysis Overview")
        pos, neg = st.columns(2)
        with pos:
            st.markdown(
                '<div class="overview-card overview-positive">🙂 Positive Emotion'
                f'<div class="overview-value">{view.percent(result.overview_percentage.positive_percentage)}</div></div>',
                unsafe_allow_html=True,
            )
        with neg:
            st.markdown(
                '<div class="overview-card overview-negative">🙁 Negative Emotion'
                f'<div class="overview-value">{view.percent(result.overview_percentage.negative_percentage)}</div></div>',
                unsafe_allow_html=True,
            )

    with st.container(border=True):
        st.subheader("Emotion Distribution")
        frame = view.distribution_frame(result)
        if frame.empty:
            st.info("No emotions detected.")
        else:
            st.altair_chart(view.distribution_chart(frame), use_container_width=True)

    with st.container(border=True):
        st.subheader("Detailed Analysis")
        for index, prediction in enumerate(result.predictions_details):
            with st.container(border=True):
                info, badge, control = st.columns([3, 2, 1])
                with info:
                    st.markdown(f"**{html.escape(prediction.file)}**")
                    st.markdown(
                        f'<span class="muted">Duration: {view.seconds(prediction.duration)}</span>',
                        unsafe_allow_html=True,
                    )
                with badge:
                    st.markdown(view.emotion_badge(prediction.emotion), unsafe_allow_html=True)
                with control:
                    play_control(prediction.file_path, prediction.duration, key=f"play-{index}")
                st.markdown('<span class="muted">Probability</span>', unsafe_allow_html=True)
                st.markdown(f"**{view.percent(prediction.probability)}**")

if state.playing is not None:
    watch_playback()
