"""Data model shared by the pipeline, the CLI and the HTTP server."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .utils.exceptions import ValidationError

REQUIRED_CLIP_COUNT = 5
RANKS = frozenset(range(1, REQUIRED_CLIP_COUNT + 1))

Style = Literal["energetic", "casual", "professional"]
AudioMode = Literal["replace", "mix"]


class TTSBackend(str, Enum):
    """Speech synthesis backends; a result always names the one that produced the file."""

    MOCK = "mock"
    HUGGINGFACE = "huggingface"
    ELEVENLABS = "elevenlabs"
    COQUI = "coqui"
    EDGE = "edge"


@dataclass(frozen=True)
class MediaProperties:
    """Intrinsic properties of a media file, as reported by ffprobe."""

    width: int
    height: int
    duration_seconds: float
    frame_rate: float
    has_audio_track: bool
    codec_name: str

    @classmethod
    def unknown(cls) -> "MediaProperties":
        """Default record returned when probing fails."""
        return cls(width=0, height=0, duration_seconds=0.0, frame_rate=30.0, has_audio_track=False, codec_name="unknown")

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class NarrationItem:
    rank: int
    title_or_name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class RankedClip:
    """One uploaded clip with its user-assigned rank."""

    source_path: Path
    rank: int
    description: Optional[str] = None
    title: Optional[str] = None

    def to_narration_item(self) -> NarrationItem:
        return NarrationItem(
            rank=self.rank,
            title_or_name=self.title or Path(self.source_path).name,
            description=self.description,
        )


@dataclass(frozen=True)
class NarrationResult:
    script_text: str
    was_polished: bool
    word_count: int
    estimated_duration_seconds: int


@dataclass(frozen=True)
class SynthesisResult:
    audio_file_path: Path
    duration_seconds: int  # estimated from word count, never measured
    backend_used: TTSBackend


@dataclass
class ProcessingResult:
    success: bool
    output_path: Optional[Path] = None
    duration: float = 0.0
    resolution: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None
    tts_backend: Optional[TTSBackend] = None
    audio_trimmed: Optional[bool] = None


def validate_rank_permutation(ranks: Iterable[int]) -> None:
    """
    Enforce the job invariant: exactly five ranks forming a permutation of 1-5.

    Raises:
        ValidationError: Wrong count, out-of-range or duplicate ranks
    """
    ranks = list(ranks)
    if len(ranks) != REQUIRED_CLIP_COUNT:
        raise ValidationError(f"Exactly {REQUIRED_CLIP_COUNT} videos are required. Received: {len(ranks)}")

    out_of_range = [r for r in ranks if r not in RANKS]
    if out_of_range:
        raise ValidationError(f"Each video must have a rank between 1 and {REQUIRED_CLIP_COUNT} (got {out_of_range[0]})")

    if len(set(ranks)) != REQUIRED_CLIP_COUNT:
        raise ValidationError(f"All ranks must be unique (1-{REQUIRED_CLIP_COUNT})")


# ---------------------------------------------------------------------------
# Request schemas (HTTP and CLI input)
# ---------------------------------------------------------------------------

class ScriptOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    style: Style = "energetic"
    include_emojis: bool = Field(default=True, alias="includeEmojis")
    use_llm: Optional[bool] = Field(default=None, alias="useLLM")


class VideoInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "tempId"))
    title: str
    rank: int = Field(ge=1, le=REQUIRED_CLIP_COUNT)
    description: Optional[str] = None

    @field_validator('id', 'title')
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    def to_narration_item(self) -> NarrationItem:
        return NarrationItem(rank=self.rank, title_or_name=self.title, description=self.description)


class ScriptRequest(BaseModel):
    """Narration request: five ranked items plus optional topic and options."""

    videos: List[VideoInput]
    topic: Optional[str] = None
    options: ScriptOptions = Field(default_factory=ScriptOptions)

    @model_validator(mode='after')
    def _check_ranking(self) -> "ScriptRequest":
        try:
            validate_rank_permutation(v.rank for v in self.videos)
        except ValidationError as e:
            # pydantic wraps ValueError into its own ValidationError
            raise ValueError(str(e))
        return self

    def narration_items(self) -> List[NarrationItem]:
        return [v.to_narration_item() for v in self.videos]
