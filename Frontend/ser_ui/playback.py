import logging
import time
from typing import Callable

import requests

logger = logging.getLogger(__name__)


class PlaybackError(Exception):
    pass


def resolve_audio_url(media_base_url: str, file_path: str | None) -> str | None:
    """Relative paths from a result are served by the inference host."""
    if not file_path:
        return None
    return media_base_url.rstrip("/") + file_path


class PlaybackHandle:
    """
    One playable audio resource. The page renders `audio` with autoplay while
    the handle is active; `start` pulls the WAV bytes so a broken URL fails
    here instead of silently in the browser.

    The browser never reports the end of a clip back to the script, so a
    handle with a known `duration` counts as finished once that much time has
    passed since `start`.
    """

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
        duration: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.duration = duration
        self.clock = clock
        self.audio: bytes | None = None
        self.active = False
        self.started_at: float | None = None

    def start(self):
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Audio play error for %s: %s", self.url, e)
            raise PlaybackError(str(e)) from e
        self.audio = response.content
        self.active = True
        self.started_at = self.clock()

    def stop(self):
        self.active = False

    @property
    def finished(self) -> bool:
        if not self.active or self.duration is None or self.started_at is None:
            return False
        return self.clock() - self.started_at >= self.duration


HandleFactory = Callable[[str, float | None], PlaybackHandle]


def http_handle_factory(
    session: requests.Session | None = None,
    timeout: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> HandleFactory:
    session = session or requests.Session()

    def make(url: str, duration: float | None = None) -> PlaybackHandle:
        return PlaybackHandle(url, session=session, timeout=timeout, duration=duration, clock=clock)

    return make
