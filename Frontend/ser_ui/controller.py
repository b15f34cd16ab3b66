import logging
from dataclasses import dataclass

from ser_ui.client import InferenceClient
from ser_ui.config import ClientSettings, settings as default_settings
from ser_ui.playback import (
    HandleFactory,
    PlaybackError,
    PlaybackHandle,
    http_handle_factory,
    resolve_audio_url,
)
from ser_ui.schemas import EmotionResult, UploadRequest

logger = logging.getLogger(__name__)

INVALID_FILE_MESSAGE = "Please select a valid WAV file"
PLAYBACK_FAILED_MESSAGE = "Failed to play audio file"


@dataclass
class ControllerState:
    selected_file: UploadRequest | None = None
    is_loading: bool = False
    result: EmotionResult | None = None
    error: str | None = None
    playing: PlaybackHandle | None = None


class InteractionController:
    """
    Owns everything the page shows: the selected file, the in-flight flag,
    the last result or error, and the single playback handle.

    Every handler runs to completion before the next one (one Streamlit rerun
    per event), so no locking is involved.
    """

    def __init__(
        self,
        client: InferenceClient | None = None,
        handle_factory: HandleFactory | None = None,
        settings: ClientSettings | None = None,
    ):
        self.settings = settings or default_settings
        self.client = client or InferenceClient(self.settings)
        self.handle_factory = handle_factory or http_handle_factory(timeout=self.settings.request_timeout)
        self.state = ControllerState()

    # ---- upload ----

    def select_file(self, upload: UploadRequest | None):
        self.stop_playback()
        if upload is not None and upload.is_wav:
            self.state.selected_file = upload
            self.state.error = None
            self.state.result = None
        else:
            self.state.error = INVALID_FILE_MESSAGE
            self.state.selected_file = None
            self.state.result = None

    @property
    def can_submit(self) -> bool:
        return self.state.selected_file is not None and not self.state.is_loading

    def submit(self):
        if not self.can_submit:
            return

        self.stop_playback()
        self.state.is_loading = True
        self.state.error = None
        self.state.result = None
        try:
            outcome = self.client.predict_emotion(self.state.selected_file)
            if isinstance(outcome, EmotionResult):
                self.state.result = outcome
            else:
                self.state.error = outcome.message
        finally:
            self.state.is_loading = False

    # ---- playback ----

    def audio_url(self, file_path: str | None) -> str | None:
        return resolve_audio_url(self.settings.media_base_url, file_path)

    def is_playing(self, file_path: str | None) -> bool:
        url = self.audio_url(file_path)
        handle = self.state.playing
        return url is not None and handle is not None and handle.url == url

    def toggle_playback(self, file_path: str | None, duration: float | None = None):
        url = self.audio_url(file_path)
        if url is None:
            return
        if self.is_playing(file_path):
            self._replace_playback(None)
        else:
            self._replace_playback(url, duration)

    def stop_playback(self):
        self._replace_playback(None)

    def on_playback_ended(self):
        self.stop_playback()

    def on_playback_error(self):
        self.stop_playback()
        self.state.error = PLAYBACK_FAILED_MESSAGE

    def poll_playback(self) -> bool:
        """Clear a handle whose clip has run out. True when it did."""
        handle = self.state.playing
        if handle is not None and handle.finished:
            self.on_playback_ended()
            return True
        return False

    def _replace_playback(self, url: str | None, duration: float | None = None):
        # the only place the handle changes: stop first, then maybe start
        current = self.state.playing
        if current is not None:
            current.stop()
            self.state.playing = None
        if url is None:
            return

        handle = self.handle_factory(url, duration)
        try:
            handle.start()
        except PlaybackError:
            self.on_playback_error()
            return
        self.state.playing = handle
