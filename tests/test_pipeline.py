"""Tests for the pipeline orchestrator."""

from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest

from shorts_ranker.models import MediaProperties, ProcessingResult, RankedClip, SynthesisResult, TTSBackend
from shorts_ranker.pipeline import RankerPipeline, sort_clips_by_rank
from shorts_ranker.utils.cleanup import CleanupScheduler
from shorts_ranker.utils.exceptions import MediaToolFailure, RemoteServiceFailure, ToolUnavailable, ValidationError

OUTPUT_PROPS = MediaProperties(width=1080, height=1920, duration_seconds=25.0, frame_rate=30.0,
                               has_audio_track=True, codec_name="h264")


@pytest.fixture
def stages():
    """Mocked stage implementations."""
    normalizer = MagicMock()
    overlay = MagicMock()
    concatenator = MagicMock()
    concatenator.concatenate.side_effect = lambda paths, output: output
    synthesizer = MagicMock()
    synthesizer.synthesize.side_effect = lambda text, path: SynthesisResult(path, 20, TTSBackend.MOCK)
    composer = MagicMock()
    composer.replace_audio.return_value = True
    composer.mix_audio.return_value = True
    return dict(normalizer=normalizer, overlay=overlay, concatenator=concatenator,
                synthesizer=synthesizer, composer=composer)


@pytest.fixture
def pipeline(mock_settings, stages):
    return RankerPipeline(mock_settings, **stages)


class TestSortClips:
    """Tests for sort_clips_by_rank."""

    def test_countdown_order(self, ranked_clips):
        assert [clip.rank for clip in sort_clips_by_rank(ranked_clips)] == [5, 4, 3, 2, 1]


class TestNewJob:
    """Tests for job creation."""

    def test_defaults_from_settings(self, pipeline, mock_settings):
        job = pipeline.new_job("Script")

        assert job.working_dir.is_dir()
        assert job.working_dir.parent == mock_settings.temp_dir
        assert job.output_path == mock_settings.output_dir / f"{job.job_id}_output.mp4"
        assert job.add_overlays is True
        assert job.audio_mode == "replace"
        assert job.original_volume == 0.3

    def test_jobs_are_isolated(self, pipeline):
        first, second = pipeline.new_job("A"), pipeline.new_job("B")
        assert first.job_id != second.job_id
        assert first.working_dir != second.working_dir

    def test_overrides(self, pipeline, tmp_path):
        job = pipeline.new_job("S", job_id="abc", add_overlays=False, audio_mode="mix",
                               original_volume=0.0, output_path=tmp_path / "x.mp4")

        assert job.job_id == "abc"
        assert job.add_overlays is False
        assert job.audio_mode == "mix"
        assert job.original_volume == 0.0
        assert job.output_path == tmp_path / "x.mp4"


class TestRun:
    """Tests for RankerPipeline.run."""

    @patch('shorts_ranker.pipeline.probe_media', return_value=OUTPUT_PROPS)
    def test_stage_order_and_result(self, mock_probe, pipeline, stages, ranked_clips):
        job = pipeline.new_job("Narration", clips=ranked_clips)
        progress = []

        result = pipeline.run(job, progress_callback=lambda stage, msg: progress.append(stage))

        assert result.success is True
        assert result.output_path == job.output_path
        assert result.resolution == "1080x1920"
        assert result.duration == 25.0
        assert result.tts_backend is TTSBackend.MOCK
        assert result.audio_trimmed is True

        normalized_sources = [call[0][0] for call in stages['normalizer'].normalize.call_args_list]
        by_path = {clip.source_path: clip.rank for clip in ranked_clips}
        assert [by_path[path] for path in normalized_sources] == [5, 4, 3, 2, 1]
        assert [call[0][2] for call in stages['overlay'].add_rank_overlay.call_args_list] == [5, 4, 3, 2, 1]

        segments = stages['concatenator'].concatenate.call_args[0][0]
        assert [p.name for p in segments] == [f"overlay_{i}.mp4" for i in range(5)]

        assert progress[0] == "SORT"
        assert progress[-1] == "COMPLETE"
        order = [s for i, s in enumerate(progress) if i == 0 or progress[i - 1] != s]
        assert order == ["SORT", "NORMALIZE", "OVERLAY", "CONCAT", "NARRATE", "COMPOSE", "PROBE", "COMPLETE"]

    @patch('shorts_ranker.pipeline.probe_media', return_value=OUTPUT_PROPS)
    def test_without_overlays(self, mock_probe, pipeline, stages, ranked_clips):
        job = pipeline.new_job("Narration", clips=ranked_clips, add_overlays=False)

        pipeline.run(job)

        stages['overlay'].add_rank_overlay.assert_not_called()
        segments = stages['concatenator'].concatenate.call_args[0][0]
        assert [p.name for p in segments] == [f"normalized_{i}.mp4" for i in range(5)]

    @patch('shorts_ranker.pipeline.probe_media', return_value=OUTPUT_PROPS)
    def test_mix_mode(self, mock_probe, pipeline, stages, ranked_clips):
        job = pipeline.new_job("Narration", clips=ranked_clips, audio_mode="mix", original_volume=0.5)

        result = pipeline.run(job)

        assert result.success is True
        stages['composer'].replace_audio.assert_not_called()
        assert stages['composer'].mix_audio.call_args[1]['original_volume'] == 0.5

    @patch('shorts_ranker.pipeline.probe_media', return_value=OUTPUT_PROPS)
    def test_untrimmed_output_is_reported(self, mock_probe, pipeline, stages, ranked_clips):
        stages['composer'].replace_audio.return_value = False

        result = pipeline.run(pipeline.new_job("Narration", clips=ranked_clips))

        assert result.audio_trimmed is False

    def test_stage_failure_aborts(self, pipeline, stages, ranked_clips):
        stages['normalizer'].normalize.side_effect = [None, MediaToolFailure("ffmpeg failed: bad codec")]

        result = pipeline.run(pipeline.new_job("Narration", clips=ranked_clips))

        assert result.success is False
        assert result.error_kind == "tool_execution_failure"
        assert "bad codec" in result.error
        stages['concatenator'].concatenate.assert_not_called()

    def test_premium_tts_failure(self, pipeline, stages, ranked_clips):
        stages['synthesizer'].synthesize.side_effect = RemoteServiceFailure("ElevenLabs TTS failed: quota")

        result = pipeline.run(pipeline.new_job("Narration", clips=ranked_clips))

        assert result.success is False
        assert result.error_kind == "remote_service_failure"
        stages['composer'].replace_audio.assert_not_called()

    def test_unexpected_error(self, pipeline, stages, ranked_clips):
        stages['concatenator'].concatenate.side_effect = KeyError("boom")

        result = pipeline.run(pipeline.new_job("Narration", clips=ranked_clips))

        assert result.success is False
        assert result.error_kind == "internal_error"


class TestExecute:
    """Tests for RankerPipeline.execute."""

    def test_rejects_bad_ranks_before_any_stage(self, pipeline, stages, ranked_clips):
        clips = ranked_clips[:4] + [RankedClip(ranked_clips[4].source_path, rank=1)]
        job = pipeline.new_job("Narration", clips=clips)

        with pytest.raises(ValidationError):
            pipeline.execute(job)

        stages['normalizer'].normalize.assert_not_called()
        assert not job.working_dir.exists()

    def test_rejects_wrong_count(self, pipeline, ranked_clips):
        with pytest.raises(ValidationError, match="Received: 3"):
            pipeline.execute(pipeline.new_job("Narration", clips=ranked_clips[:3]))

    def test_rejects_missing_file(self, pipeline, ranked_clips):
        clips = ranked_clips[:4] + [RankedClip(Path("/nonexistent/clip.mp4"), rank=ranked_clips[4].rank)]

        with pytest.raises(ValidationError, match="not found"):
            pipeline.execute(pipeline.new_job("Narration", clips=clips))

    def test_rejects_empty_script(self, pipeline, ranked_clips):
        with pytest.raises(ValidationError, match="script"):
            pipeline.execute(pipeline.new_job("   ", clips=ranked_clips))

    @patch('shorts_ranker.pipeline.check_ffmpeg_available', return_value=False)
    def test_ffmpeg_missing(self, mock_check, pipeline, stages, ranked_clips):
        job = pipeline.new_job("Narration", clips=ranked_clips)

        with pytest.raises(ToolUnavailable):
            pipeline.execute(job)

        stages['normalizer'].normalize.assert_not_called()
        assert not job.working_dir.exists()

    @patch('shorts_ranker.pipeline.check_ffmpeg_available', return_value=True)
    def test_success_schedules_output_and_cleans_up(self, mock_check, mock_settings, stages, ranked_clips):
        scheduler = CleanupScheduler(use_timers=False)
        pipeline = RankerPipeline(mock_settings, scheduler=scheduler, **stages)
        job = pipeline.new_job("Narration", clips=ranked_clips)
        expected = ProcessingResult(success=True, output_path=job.output_path)

        with patch.object(pipeline, 'run', return_value=expected):
            result = pipeline.execute(job)

        assert result is expected
        assert not job.working_dir.exists()
        assert [h.path for h in scheduler.pending()] == [job.output_path]
        assert scheduler.pending()[0].due_at > 0

    @patch('shorts_ranker.pipeline.check_ffmpeg_available', return_value=True)
    def test_failure_is_not_scheduled(self, mock_check, mock_settings, stages, ranked_clips):
        scheduler = CleanupScheduler(use_timers=False)
        pipeline = RankerPipeline(mock_settings, scheduler=scheduler, **stages)
        job = pipeline.new_job("Narration", clips=ranked_clips)

        with patch.object(pipeline, 'run', return_value=ProcessingResult(success=False, error="x")):
            pipeline.execute(job)

        assert scheduler.pending() == []
        assert not job.working_dir.exists()
