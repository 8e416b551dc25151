"""Tests for the data model and request schemas."""

import pytest
from pathlib import Path
from pydantic import ValidationError as PydanticValidationError

from shorts_ranker.models import (
    MediaProperties,
    RankedClip,
    ScriptRequest,
    TTSBackend,
    validate_rank_permutation,
)
from shorts_ranker.utils.exceptions import ValidationError


def _videos(ranks):
    return [{"id": f"v{i}", "title": f"Video {i}", "rank": rank} for i, rank in enumerate(ranks)]


class TestRankPermutation:
    """Tests for validate_rank_permutation."""

    def test_accepts_any_permutation(self):
        validate_rank_permutation([3, 1, 5, 2, 4])
        validate_rank_permutation([5, 4, 3, 2, 1])

    def test_rejects_wrong_count(self):
        with pytest.raises(ValidationError, match="Received: 4"):
            validate_rank_permutation([1, 2, 3, 4])

    def test_rejects_duplicates(self):
        with pytest.raises(ValidationError, match="unique"):
            validate_rank_permutation([1, 1, 3, 4, 5])

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            validate_rank_permutation([0, 2, 3, 4, 5])
        with pytest.raises(ValidationError):
            validate_rank_permutation([1, 2, 3, 4, 6])

    def test_error_kind(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_rank_permutation([])
        assert exc_info.value.kind == "validation_error"


class TestScriptRequest:
    """Tests for the generate-script request schema."""

    def test_valid_request(self):
        request = ScriptRequest.model_validate({
            "videos": _videos([3, 1, 5, 2, 4]),
            "topic": "goals",
            "options": {"style": "casual", "includeEmojis": False, "useLLM": True},
        })

        assert request.topic == "goals"
        assert request.options.style == "casual"
        assert request.options.include_emojis is False
        assert request.options.use_llm is True
        assert [item.rank for item in request.narration_items()] == [3, 1, 5, 2, 4]

    def test_defaults(self):
        request = ScriptRequest.model_validate({"videos": _videos([1, 2, 3, 4, 5])})

        assert request.options.style == "energetic"
        assert request.options.include_emojis is True
        assert request.options.use_llm is None

    def test_temp_id_alias(self):
        videos = [{"tempId": f"t{i}", "title": "x", "rank": i + 1} for i in range(5)]
        request = ScriptRequest.model_validate({"videos": videos})
        assert request.videos[0].id == "t0"

    def test_duplicate_ranks_rejected(self):
        with pytest.raises(PydanticValidationError, match="unique"):
            ScriptRequest.model_validate({"videos": _videos([1, 1, 2, 3, 4])})

    def test_wrong_count_rejected(self):
        with pytest.raises(PydanticValidationError, match="Exactly 5"):
            ScriptRequest.model_validate({"videos": _videos([1, 2, 3])})

    def test_blank_title_rejected(self):
        videos = _videos([1, 2, 3, 4, 5])
        videos[2]["title"] = "   "
        with pytest.raises(PydanticValidationError):
            ScriptRequest.model_validate({"videos": videos})

    def test_unknown_style_rejected(self):
        with pytest.raises(PydanticValidationError):
            ScriptRequest.model_validate({"videos": _videos([1, 2, 3, 4, 5]), "options": {"style": "shouty"}})


class TestRecords:
    """Tests for the plain records."""

    def test_unknown_media_properties(self):
        props = MediaProperties.unknown()
        assert (props.width, props.height, props.duration_seconds) == (0, 0, 0.0)
        assert props.frame_rate == 30.0
        assert props.has_audio_track is False
        assert props.codec_name == "unknown"
        assert props.resolution == "0x0"

    def test_narration_item_uses_file_name_without_title(self):
        clip = RankedClip(source_path=Path("/tmp/epic_goal.mp4"), rank=2, description="Wow")
        item = clip.to_narration_item()
        assert item.title_or_name == "epic_goal.mp4"
        assert item.rank == 2
        assert item.description == "Wow"

    def test_narration_item_prefers_title(self):
        clip = RankedClip(source_path=Path("/tmp/a.mp4"), rank=1, title="The Save")
        assert clip.to_narration_item().title_or_name == "The Save"

    def test_backend_values(self):
        assert TTSBackend("mock") is TTSBackend.MOCK
        assert TTSBackend.ELEVENLABS.value == "elevenlabs"
