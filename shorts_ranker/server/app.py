"""
Shorts Ranker HTTP Server

Small Flask app exposing script generation and video compilation to a web
front end. Each request runs synchronously in its worker.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from pydantic import ValidationError as PydanticValidationError

from ..config import Settings, get_settings
from ..models import REQUIRED_CLIP_COUNT, RankedClip, ScriptRequest
from ..modules.narrator import NarrationGenerator
from ..modules.polisher import ScriptPolisher
from ..modules.tts import select_backend
from ..pipeline import RankerPipeline
from ..utils.cleanup import CleanupScheduler, cleanup_directory
from ..utils.exceptions import RankerError, ValidationError
from ..utils.video_utils import check_ffmpeg_available

logger = logging.getLogger(__name__)


def _error(message: str, kind: str, details=None, status: int = 400):
    body = {'error': message, 'kind': kind}
    if details is not None:
        body['details'] = details
    return jsonify(body), status


def _describe_validation_errors(error: PydanticValidationError) -> str:
    messages = []
    for err in error.errors():
        msg = err['msg'].removeprefix('Value error, ')
        location = '.'.join(str(part) for part in err['loc'])
        messages.append(f"{location}: {msg}" if location else msg)
    return "; ".join(messages)


def _form_flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _collect_uploads() -> List[Tuple[int, object, int, Optional[str], Optional[str]]]:
    """
    Find uploaded clips under either naming convention.

    video1..video5 with rank<i> (default 6-i), or video_0..video_4 with
    rank_<i> (default 5-i). Returns (index, file, rank, description, title).
    """
    def parse_rank(raw: Optional[str], default: int) -> int:
        try:
            return int(raw) if raw else default
        except ValueError:
            raise ValidationError(f"Rank must be a number between 1 and {REQUIRED_CLIP_COUNT} (got {raw!r})")

    def present(upload) -> bool:
        return upload is not None and bool(upload.filename)

    uploads = []
    for i in range(1, REQUIRED_CLIP_COUNT + 1):
        upload = request.files.get(f"video{i}")
        if present(upload):
            uploads.append((
                i - 1,
                upload,
                parse_rank(request.form.get(f"rank{i}"), REQUIRED_CLIP_COUNT + 1 - i),
                request.form.get(f"description{i}") or None,
                request.form.get(f"title{i}") or None,
            ))

    if not uploads:
        for i in range(REQUIRED_CLIP_COUNT):
            upload = request.files.get(f"video_{i}")
            if present(upload):
                uploads.append((
                    i,
                    upload,
                    parse_rank(request.form.get(f"rank_{i}"), REQUIRED_CLIP_COUNT - i),
                    request.form.get(f"description_{i}") or None,
                    request.form.get(f"title_{i}") or None,
                ))

    return uploads


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[RankerPipeline] = None,
    scheduler: Optional[CleanupScheduler] = None
) -> Flask:
    """
    Build the Flask app.

    Args:
        settings: Application settings (loaded from the environment if None)
        pipeline: Pipeline to run jobs with (built from settings if None)
        scheduler: Deferred output deletion (a timer-driven one if None)
    """
    settings = settings or get_settings()
    if pipeline is None:
        pipeline = RankerPipeline(settings, scheduler=scheduler or CleanupScheduler())

    app = Flask(__name__)
    CORS(app, expose_headers=['X-Video-Duration', 'X-Video-Resolution', 'X-TTS-Service', 'Content-Disposition'])

    @app.route('/api/generate-script', methods=['POST'])
    def generate_script():
        """Generate a countdown narration script from five ranked videos."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Invalid request", ValidationError.kind, "Request body must be a JSON object")

        try:
            script_request = ScriptRequest.model_validate(data)
        except PydanticValidationError as e:
            return _error("Invalid request", ValidationError.kind, _describe_validation_errors(e))

        polisher = ScriptPolisher(settings)
        options = script_request.options
        use_llm = options.use_llm if options.use_llm is not None else polisher.is_configured()

        try:
            result = NarrationGenerator(polisher=polisher).generate(
                script_request.narration_items(),
                topic=script_request.topic,
                style=options.style,
                include_emojis=options.include_emojis,
                use_llm=use_llm,
            )
        except Exception as e:
            logger.exception("Script generation failed")
            return _error("Failed to generate script", RankerError.kind, str(e), status=500)

        return jsonify({
            'script': result.script_text,
            'wasPolished': result.was_polished,
            'wordCount': result.word_count,
            'estimatedDuration': result.estimated_duration_seconds,
        })

    @app.route('/api/process-video', methods=['POST'])
    @app.route('/api/generate-video', methods=['POST'])
    def process_video():
        """Compile five uploaded clips and a script into one vertical MP4."""
        script = request.form.get('finalScript') or request.form.get('script')
        if not script or not script.strip():
            return _error("Missing required field", ValidationError.kind, "finalScript is required")

        try:
            uploads = _collect_uploads()
        except ValidationError as e:
            return _error("Invalid request", e.kind, str(e))

        if len(uploads) != REQUIRED_CLIP_COUNT:
            return _error(
                "Invalid request",
                ValidationError.kind,
                f"Exactly {REQUIRED_CLIP_COUNT} videos are required. Received: {len(uploads)}"
            )

        audio_mode = request.form.get('audioMode') or None
        if audio_mode not in (None, 'replace', 'mix'):
            return _error("Invalid request", ValidationError.kind, "audioMode must be 'replace' or 'mix'")

        job = pipeline.new_job(
            script,
            add_overlays=_form_flag(request.form.get('addOverlays'), settings.add_overlays),
            audio_mode=audio_mode,
        )

        try:
            clips = []
            for index, upload, rank, description, title in uploads:
                suffix = Path(upload.filename).suffix or '.mp4'
                path = job.working_dir / f"input_{index}{suffix}"
                upload.save(str(path))
                clips.append(RankedClip(source_path=path, rank=rank, description=description, title=title))
            job.clips = clips

            logger.info(f"Processing job {job.job_id} ({len(clips)} clips, {job.audio_mode} audio)")
            result = pipeline.execute(job)

        except ValidationError as e:
            return _error("Invalid request", e.kind, str(e))
        except RankerError as e:
            logger.error(f"Job {job.job_id} rejected: {e}")
            return _error("Video processing failed", e.kind, str(e), status=500)
        except OSError as e:
            logger.error(f"Job {job.job_id} failed on file I/O: {e}")
            return _error("Video processing failed", RankerError.kind, str(e), status=500)
        finally:
            cleanup_directory(job.working_dir)

        if not result.success:
            return _error("Video processing failed", result.error_kind or RankerError.kind, result.error, status=500)

        try:
            video_bytes = Path(result.output_path).read_bytes()
        except OSError as e:
            logger.error(f"Job {job.job_id} output unreadable: {e}")
            return _error("Video processing failed", RankerError.kind, str(e), status=500)

        response = send_file(
            BytesIO(video_bytes),
            mimetype='video/mp4',
            as_attachment=True,
            download_name=f"shorts-ranker-{job.job_id}.mp4"
        )
        response.headers['X-Video-Duration'] = str(result.duration)
        response.headers['X-Video-Resolution'] = result.resolution
        response.headers['X-TTS-Service'] = result.tts_backend.value if result.tts_backend else ''
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'ok',
            'ffmpeg': check_ffmpeg_available(),
            'tts_backend': select_backend(settings).value,
            'pending_cleanups': len(pipeline.scheduler.pending()) if pipeline.scheduler else 0,
        })

    return app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    app = create_app()

    print("=" * 60)
    print("Shorts Ranker Server")
    print("=" * 60)
    print("\nServer starting on http://127.0.0.1:5000")
    print("\nEndpoints:")
    print("  POST   /api/generate-script - Generate narration script (JSON)")
    print("  POST   /api/process-video   - Compile ranked video (multipart)")
    print("  POST   /api/generate-video  - Alias of /api/process-video")
    print("  GET    /health              - Health check")
    print("\n" + "=" * 60 + "\n")

    app.run(host='0.0.0.0', port=5000, debug=False)


if __name__ == '__main__':
    main()
