import json

import pytest
import requests

from ser_ui.config import ClientSettings
from ser_ui.playback import PlaybackError
from ser_ui.schemas import UploadRequest

SERVICE = "http://localhost:8386"

SAMPLE_RESULT = {
    "original_file": "call.wav",
    "original_file_path": "/uploads/call.wav",
    "original_duration": 12.3456,
    "overview_percentage": {"positive_percentage": 42.54, "negative_percentage": 57.46},
    "emotion_percentages": {"Vui Vẻ": 42.5, "Buồn": 0, "Giận": 57.5},
    "predictions_details": [
        {
            "file": "segment_0.wav",
            "file_path": "/uploads/segments/segment_0.wav",
            "duration": 3.0,
            "emotion": "Vui Vẻ",
            "probability": 88.12,
        },
        {
            "file": "segment_1.wav",
            "file_path": "/uploads/segments/segment_1.wav",
            "duration": 2.5,
            "emotion": "Giận",
            "probability": 71.0,
        },
    ],
}


def make_response(status=200, payload=None, reason="OK", content=None):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    if content is None:
        content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    response._content = content
    response.headers["Content-Type"] = "application/json"
    return response


class StubSession:
    """Stands in for requests.Session, recording every call."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.observer = None

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        if self.observer is not None:
            self.observer()
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class FakeHandle:
    def __init__(self, url, log, fail=False, duration=None):
        self.url = url
        self.duration = duration
        self.finished = False
        self.log = log
        self.fail = fail
        self.audio = b"RIFF"
        self.active = False

    def start(self):
        self.log.append(("start", self.url))
        if self.fail:
            raise PlaybackError("boom")
        self.active = True

    def stop(self):
        self.log.append(("stop", self.url))
        self.active = False


class FakeHandleFactory:
    def __init__(self):
        self.log = []
        self.handles = []
        self.failing = set()

    def __call__(self, url, duration=None):
        handle = FakeHandle(url, self.log, fail=url in self.failing, duration=duration)
        self.handles.append(handle)
        return handle

    def active(self):
        return [h for h in self.handles if h.active]


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def client_settings():
    return ClientSettings(
        api_base_url=SERVICE,
        media_base_url=SERVICE,
        _env_file=None,
    )


@pytest.fixture
def wav():
    return UploadRequest(name="call.wav", content=b"RIFF....WAVE", media_type="audio/wav")
