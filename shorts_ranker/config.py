"""Configuration management for Shorts Ranker."""

import logging
from pathlib import Path
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Project root directory (where shorts_ranker/ lives)
PROJECT_ROOT = Path(__file__).parent.parent

TTS_SERVICES = ("mock", "huggingface", "elevenlabs", "coqui", "edge")
POLISH_SERVICES = ("huggingface", "openai", "claude")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False
    )

    # API Keys
    huggingface_api_key: str = Field(default="", description="Hugging Face token (free TTS and script polishing)")
    elevenlabs_api_key: str = Field(default="", description="ElevenLabs API key for premium narration")
    openai_api_key: str = Field(default="", description="OpenAI API key (script polishing when polish_service=openai)")
    anthropic_api_key: str = Field(default="", description="Anthropic API key (script polishing when polish_service=claude)")

    # Service preferences
    tts_service: str = Field(default="", description="mock, huggingface, elevenlabs, coqui or edge; empty = auto-detect from keys")
    use_coqui_tts: bool = Field(default=False, description="Use a local Coqui TTS install when no remote key is set")
    polish_service: str = Field(default="huggingface", description="huggingface, openai or claude")
    polish_models: List[str] = Field(default_factory=list, description="Models to try in order (empty = provider defaults)")

    # Remote endpoints and voices
    huggingface_api_url: str = Field(default="https://api-inference.huggingface.co/models")
    huggingface_tts_model: str = Field(default="facebook/mms-tts-eng")
    elevenlabs_voice_id: str = Field(default="pNInz6obpgDQGcFmaJgB", description="Default voice (Adam)")
    elevenlabs_model: str = Field(default="eleven_monolingual_v1")
    edge_voice: str = Field(default="en-US-GuyNeural")
    remote_timeout: Optional[float] = Field(default=None, description="Seconds; None leaves remote calls unbounded")

    # Local engine
    coqui_python: str = Field(default="python3", description="Interpreter that has the TTS package installed")
    coqui_model: str = Field(default="tts_models/en/ljspeech/tacotron2-DDC")
    coqui_timeout: int = Field(default=300, description="Ceiling in seconds for one local synthesis run")

    # TTS chunking
    tts_max_chars_per_chunk: int = Field(default=1000, ge=100)
    tts_chunk_delay: float = Field(default=0.5, ge=0, description="Pause between chunk requests (rate limits)")

    # Processing options
    add_overlays: bool = Field(default=True)
    audio_mode: str = Field(default="replace", pattern="^(replace|mix)$")
    original_audio_volume: float = Field(default=0.3, ge=0.0, le=1.0)
    narration_volume: float = Field(default=1.0, ge=0.0, le=2.0)
    overlay_font_file: Optional[str] = Field(default=None, description="TTF used for the rank label (ffmpeg default font if unset)")
    default_style: str = Field(default="energetic", pattern="^(energetic|casual|professional)$")
    output_retention_seconds: int = Field(default=60, ge=0, description="How long a finished video survives on disk")

    # Use absolute paths anchored to project root (not relative to cwd)
    # This ensures CLI and server use the same directories
    temp_dir: Path = Field(default=PROJECT_ROOT / "temp")
    output_dir: Path = Field(default=PROJECT_ROOT / "output")

    @field_validator('tts_service', mode='before')
    @classmethod
    def _normalize_tts_service(cls, value):
        name = (value or "").strip().lower()
        if name and name not in TTS_SERVICES:
            logger.warning(f"Unknown TTS_SERVICE '{value}', falling back to auto-detection")
            return ""
        return name

    @field_validator('polish_service', mode='before')
    @classmethod
    def _normalize_polish_service(cls, value):
        name = (value or "huggingface").strip().lower()
        if name not in POLISH_SERVICES:
            raise ValueError(f"polish_service must be one of {', '.join(POLISH_SERVICES)}")
        return name

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Create directories if they don't exist
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)


def get_settings(**overrides) -> Settings:
    """Get application settings, optionally overriding individual fields."""
    return Settings(**overrides)
