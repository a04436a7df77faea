from dataclasses import dataclass, field
from typing import IO, Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TRANSITION_DURATION = 0.5


class BackendPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TranscribeRequest(BackendPayload):
    video_id: str = Field(alias="videoId", min_length=1)


class StoryRequest(BackendPayload):
    video_id: str = Field(alias="videoId")
    prompt: str
    mode: str = "normal"


class RenderRequest(BackendPayload):
    video_id: str = Field(alias="videoId")
    scenes: list[Any]
    transition_duration: float = Field(DEFAULT_TRANSITION_DURATION, alias="transitionDuration")


class SearchRequest(BackendPayload):
    video_id: str = Field(alias="videoId")
    query: str


class RenderOptions(BaseModel):
    transition_duration: float | None = None


@dataclass
class UploadForm:
    filename: str
    content: bytes | IO[bytes]
    content_type: str = "video/mp4"
    field_name: str = "video"
    fields: dict[str, str] = field(default_factory=dict)

    def files(self) -> dict[str, tuple[str, bytes | IO[bytes], str]]:
        return {self.field_name: (self.filename, self.content, self.content_type)}


@dataclass(frozen=True)
class UploadProgress:
    loaded: int
    total: int

    @property
    def percent(self) -> int:
        if not self.total:
            return 100
        return round(self.loaded * 100 / self.total)
