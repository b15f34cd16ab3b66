import logging

import requests
from pydantic import ValidationError

from ser_ui.config import ClientSettings, settings as default_settings
from ser_ui.schemas import (
    EmotionResult,
    PredictionOutcome,
    ServiceError,
    TransportError,
    UploadRequest,
    WAV_MEDIA_TYPE,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "An error occurred while analyzing the audio"


class InferenceClient:
    """Talks to the emotion classification service (directly or through the gateway)."""

    def __init__(self, settings: ClientSettings | None = None, session: requests.Session | None = None):
        self.settings = settings or default_settings
        self.session = session or requests.Session()

    def predict_emotion(self, upload: UploadRequest) -> PredictionOutcome:
        """
        POST the file as multipart field "file" and return one of
        EmotionResult, ServiceError or TransportError. Never raises for
        network or HTTP failures.
        """
        files = {"file": (upload.name, upload.content, upload.media_type or WAV_MEDIA_TYPE)}
        try:
            response = self.session.post(
                self.settings.predict_url,
                files=files,
                headers={"Accept": "application/json"},
                timeout=self.settings.request_timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error("Error details: %s", e)
            return TransportError(target=self.settings.api_base_url)
        except requests.RequestException as e:
            logger.error("Error details: %s", e)
            return ServiceError(detail=str(e) or GENERIC_FAILURE)

        if not response.ok:
            detail = _error_detail(response)
            logger.warning("Prediction failed with %s: %s", response.status_code, detail)
            return ServiceError(detail=detail)

        try:
            return EmotionResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("Unreadable prediction payload: %s", e)
            return ServiceError(detail=GENERIC_FAILURE)


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    return f"Server error: {response.status_code} {response.reason}"
