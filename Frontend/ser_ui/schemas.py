from dataclasses import dataclass
from typing import Dict, List, Union

from pydantic import BaseModel

WAV_MEDIA_TYPE = "audio/wav"


@dataclass(frozen=True)
class UploadRequest:
    name: str
    content: bytes
    media_type: str | None = None

    @property
    def is_wav(self) -> bool:
        return self.media_type == WAV_MEDIA_TYPE


class OverviewPercentage(BaseModel):
    positive_percentage: float
    negative_percentage: float

class PredictionDetail(BaseModel):
    file: str
    file_path: str
    duration: float
    emotion: str
    probability: float

class EmotionResult(BaseModel):
    # Percentages are trusted as delivered: no sum-to-100 or sign checks.
    original_file: str
    original_file_path: str
    original_duration: float
    overview_percentage: OverviewPercentage
    emotion_percentages: Dict[str, float]
    predictions_details: List[PredictionDetail] = []


@dataclass(frozen=True)
class ServiceError:
    """The service answered, but not with a usable result."""
    detail: str

    @property
    def message(self) -> str:
        return self.detail


@dataclass(frozen=True)
class TransportError:
    """No response at all from `target`."""
    target: str

    @property
    def message(self) -> str:
        return (
            "Unable to connect to the server. "
            f"Please check if the server is running at {self.target}"
        )


PredictionOutcome = Union[EmotionResult, ServiceError, TransportError]
