"""Shared fixtures."""

import pytest

from shorts_ranker.config import Settings
from shorts_ranker.models import RankedClip


@pytest.fixture
def settings_factory(tmp_path):
    """Build settings isolated from the environment, with overrides."""
    def make(**overrides):
        values = dict(
            huggingface_api_key="",
            elevenlabs_api_key="",
            openai_api_key="",
            anthropic_api_key="",
            tts_service="",
            use_coqui_tts=False,
            polish_service="huggingface",
            polish_models=[],
            tts_chunk_delay=0,
            overlay_font_file=None,
            temp_dir=tmp_path / "temp",
            output_dir=tmp_path / "output",
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return make


@pytest.fixture
def mock_settings(settings_factory):
    """Create mock settings with temporary directories and no credentials."""
    return settings_factory()


@pytest.fixture
def ranked_clips(tmp_path):
    """Five placeholder clip files ranked out of order."""
    clips_dir = tmp_path / "clips"
    clips_dir.mkdir()
    clips = []
    for i, rank in enumerate([3, 1, 5, 2, 4]):
        path = clips_dir / f"clip_{i}.mp4"
        path.write_bytes(b"not really a video")
        clips.append(RankedClip(source_path=path, rank=rank, title=f"clip-{rank}_title.mp4"))
    return clips
