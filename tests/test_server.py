"""Tests for the HTTP server."""

from io import BytesIO
from unittest.mock import patch

import pytest

from shorts_ranker.models import ProcessingResult, TTSBackend
from shorts_ranker.pipeline import RankerPipeline
from shorts_ranker.server.app import create_app
from shorts_ranker.utils.cleanup import CleanupScheduler
from shorts_ranker.utils.exceptions import ToolUnavailable


@pytest.fixture
def pipeline(mock_settings):
    return RankerPipeline(mock_settings, scheduler=CleanupScheduler(use_timers=False))


@pytest.fixture
def client(mock_settings, pipeline):
    app = create_app(settings=mock_settings, pipeline=pipeline)
    app.config['TESTING'] = True
    return app.test_client()


def _videos(ranks=(3, 1, 5, 2, 4)):
    return [{"id": f"v{i}", "title": f"clip_{i}.mp4", "rank": rank} for i, rank in enumerate(ranks)]


def _upload_form(count=5, ranks=None, numbered=True, **fields):
    data = {'finalScript': "At number 5... great clip.", **fields}
    for i in range(count):
        if numbered:
            data[f'video{i + 1}'] = (BytesIO(b"fake video"), f"clip{i + 1}.mp4")
            if ranks:
                data[f'rank{i + 1}'] = str(ranks[i])
        else:
            data[f'video_{i}'] = (BytesIO(b"fake video"), f"clip{i}.mp4")
            if ranks:
                data[f'rank_{i}'] = str(ranks[i])
    return data


def _fake_execute(captured):
    def execute(job, progress_callback=None):
        captured['job'] = job
        captured['clips'] = [(clip.source_path.name, clip.rank) for clip in job.clips]
        job.output_path.parent.mkdir(parents=True, exist_ok=True)
        job.output_path.write_bytes(b"final video bytes")
        return ProcessingResult(success=True, output_path=job.output_path, duration=24.5,
                                resolution="1080x1920", tts_backend=TTSBackend.MOCK, audio_trimmed=True)
    return execute


class TestGenerateScript:
    """Tests for /api/generate-script."""

    def test_generates_script(self, client):
        response = client.post('/api/generate-script', json={"videos": _videos(), "topic": "goals"})

        assert response.status_code == 200
        body = response.get_json()
        assert "goals" in body['script']
        assert body['wasPolished'] is False
        assert body['wordCount'] == len(body['script'].split())
        assert body['estimatedDuration'] == -(-body['wordCount'] * 60 // 150)

    def test_options(self, client):
        response = client.post('/api/generate-script', json={
            "videos": _videos(),
            "options": {"style": "professional", "includeEmojis": False, "useLLM": True},
        })

        assert response.status_code == 200
        assert response.get_json()['wasPolished'] is False

    def test_duplicate_ranks(self, client):
        response = client.post('/api/generate-script', json={"videos": _videos((1, 1, 2, 3, 4))})

        assert response.status_code == 400
        body = response.get_json()
        assert body['kind'] == "validation_error"
        assert "unique" in body['details']

    def test_wrong_count(self, client):
        response = client.post('/api/generate-script', json={"videos": _videos((1, 2, 3))})

        assert response.status_code == 400
        assert "Exactly 5 videos are required" in response.get_json()['details']

    def test_not_json(self, client):
        response = client.post('/api/generate-script', data="videos", content_type='text/plain')
        assert response.status_code == 400


class TestProcessVideo:
    """Tests for /api/process-video."""

    def test_missing_script(self, client):
        data = _upload_form()
        del data['finalScript']

        response = client.post('/api/process-video', data=data, content_type='multipart/form-data')

        assert response.status_code == 400
        assert response.get_json()['error'] == "Missing required field"

    def test_wrong_upload_count(self, client):
        response = client.post('/api/process-video', data=_upload_form(count=3), content_type='multipart/form-data')

        assert response.status_code == 400
        assert response.get_json()['details'] == "Exactly 5 videos are required. Received: 3"

    def test_bad_audio_mode(self, client):
        response = client.post('/api/process-video', data=_upload_form(audioMode="blend"),
                               content_type='multipart/form-data')
        assert response.status_code == 400

    def test_non_numeric_rank(self, client):
        data = _upload_form()
        data['rank2'] = "second"

        response = client.post('/api/process-video', data=data, content_type='multipart/form-data')

        assert response.status_code == 400
        assert response.get_json()['kind'] == "validation_error"

    def test_duplicate_ranks_rejected_and_cleaned(self, client, mock_settings):
        response = client.post('/api/process-video', data=_upload_form(ranks=[1, 1, 2, 3, 4]),
                               content_type='multipart/form-data')

        assert response.status_code == 400
        assert "unique" in response.get_json()['details']
        assert list(mock_settings.temp_dir.iterdir()) == []

    def test_success(self, client, pipeline, mock_settings):
        captured = {}
        with patch.object(pipeline, 'execute', side_effect=_fake_execute(captured)):
            response = client.post('/api/process-video', data=_upload_form(ranks=[2, 5, 1, 4, 3]),
                                   content_type='multipart/form-data')

        assert response.status_code == 200
        assert response.data == b"final video bytes"
        assert response.mimetype == "video/mp4"
        assert response.headers['X-Video-Duration'] == "24.5"
        assert response.headers['X-Video-Resolution'] == "1080x1920"
        assert response.headers['X-TTS-Service'] == "mock"
        assert f"shorts-ranker-{captured['job'].job_id}.mp4" in response.headers['Content-Disposition']
        assert captured['clips'] == [(f"input_{i}.mp4", rank) for i, rank in enumerate([2, 5, 1, 4, 3])]
        assert not captured['job'].working_dir.exists()

    def test_default_ranks(self, client, pipeline):
        captured = {}
        with patch.object(pipeline, 'execute', side_effect=_fake_execute(captured)):
            client.post('/api/process-video', data=_upload_form(), content_type='multipart/form-data')

        assert [rank for _, rank in captured['clips']] == [5, 4, 3, 2, 1]

    def test_underscore_naming_and_alias_route(self, client, pipeline):
        captured = {}
        with patch.object(pipeline, 'execute', side_effect=_fake_execute(captured)):
            response = client.post('/api/generate-video', data=_upload_form(numbered=False, audioMode="mix"),
                                   content_type='multipart/form-data')

        assert response.status_code == 200
        assert [rank for _, rank in captured['clips']] == [5, 4, 3, 2, 1]
        assert captured['job'].audio_mode == "mix"

    def test_overlay_flag(self, client, pipeline):
        captured = {}
        with patch.object(pipeline, 'execute', side_effect=_fake_execute(captured)):
            client.post('/api/process-video', data=_upload_form(addOverlays="false"),
                        content_type='multipart/form-data')

        assert captured['job'].add_overlays is False

    def test_failed_result(self, client, pipeline):
        failed = ProcessingResult(success=False, error="ffmpeg failed: bad codec", error_kind="tool_execution_failure")
        with patch.object(pipeline, 'execute', return_value=failed):
            response = client.post('/api/process-video', data=_upload_form(), content_type='multipart/form-data')

        assert response.status_code == 500
        body = response.get_json()
        assert body['kind'] == "tool_execution_failure"
        assert "bad codec" in body['details']

    def test_tool_unavailable(self, client, pipeline):
        with patch.object(pipeline, 'execute', side_effect=ToolUnavailable("FFmpeg not found")):
            response = client.post('/api/process-video', data=_upload_form(), content_type='multipart/form-data')

        assert response.status_code == 500
        assert response.get_json()['kind'] == "tool_unavailable"

    def test_upload_write_failure(self, client, pipeline, mock_settings):
        with patch('werkzeug.datastructures.FileStorage.save', side_effect=OSError("No space left on device")), \
             patch.object(pipeline, 'execute') as mock_execute:
            response = client.post('/api/process-video', data=_upload_form(), content_type='multipart/form-data')

        assert response.status_code == 500
        body = response.get_json()
        assert body['kind'] == "internal_error"
        assert "No space left" in body['details']
        mock_execute.assert_not_called()
        assert list(mock_settings.temp_dir.iterdir()) == []

    def test_missing_output_file(self, client, pipeline, tmp_path):
        result = ProcessingResult(success=True, output_path=tmp_path / "gone.mp4", resolution="1080x1920",
                                  tts_backend=TTSBackend.MOCK)
        with patch.object(pipeline, 'execute', return_value=result):
            response = client.post('/api/process-video', data=_upload_form(), content_type='multipart/form-data')

        assert response.status_code == 500
        assert response.get_json()['kind'] == "internal_error"


class TestHealth:
    """Tests for /health."""

    @patch('shorts_ranker.server.app.check_ffmpeg_available', return_value=True)
    def test_health(self, mock_check, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json() == {
            'status': 'ok',
            'ffmpeg': True,
            'tts_backend': 'mock',
            'pending_cleanups': 0,
        }
