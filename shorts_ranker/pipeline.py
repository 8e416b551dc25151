"""Main pipeline orchestrator for ranked countdown videos."""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import Settings
from .models import ProcessingResult, RankedClip, validate_rank_permutation
from .modules.compositor import AudioComposer
from .modules.concatenator import VideoConcatenator
from .modules.normalizer import VideoNormalizer
from .modules.overlay import RankOverlay
from .modules.tts import SpeechSynthesizer
from .utils.cleanup import CleanupScheduler, cleanup_directory
from .utils.exceptions import RankerError, ToolUnavailable, ValidationError
from .utils.video_utils import check_ffmpeg_available, probe_media

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]


@dataclass
class Job:
    """One compile request, isolated in its own working directory."""

    job_id: str
    working_dir: Path
    clips: List[RankedClip]
    script: str
    output_path: Path
    add_overlays: bool = True
    audio_mode: str = "replace"
    original_volume: float = 0.3
    narration_volume: float = 1.0


def sort_clips_by_rank(clips: Iterable[RankedClip]) -> List[RankedClip]:
    """Countdown order: rank 5 first, rank 1 last."""
    return sorted(clips, key=lambda clip: clip.rank, reverse=True)


class RankerPipeline:
    """Runs the fixed stage sequence that turns five ranked clips into one short."""

    def __init__(
        self,
        settings: Settings,
        normalizer: Optional[VideoNormalizer] = None,
        overlay: Optional[RankOverlay] = None,
        concatenator: Optional[VideoConcatenator] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        composer: Optional[AudioComposer] = None,
        scheduler: Optional[CleanupScheduler] = None
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Application settings
            normalizer, overlay, concatenator, synthesizer, composer: Stage
                implementations (defaults built from settings)
            scheduler: Deferred deletion of finished outputs (none = keep outputs)
        """
        self.settings = settings
        self.normalizer = normalizer or VideoNormalizer()
        self.overlay = overlay or RankOverlay(font_file=settings.overlay_font_file)
        self.concatenator = concatenator or VideoConcatenator()
        self.synthesizer = synthesizer or SpeechSynthesizer(settings)
        self.composer = composer or AudioComposer()
        self.scheduler = scheduler

    def new_job(
        self,
        script: str,
        clips: Iterable[RankedClip] = (),
        job_id: Optional[str] = None,
        add_overlays: Optional[bool] = None,
        audio_mode: Optional[str] = None,
        original_volume: Optional[float] = None,
        narration_volume: Optional[float] = None,
        output_path: Optional[Path] = None
    ) -> Job:
        """
        Create a job with a unique working directory under temp_dir.

        Options left as None take their values from settings.
        """
        job_id = job_id or uuid.uuid4().hex
        working_dir = self.settings.temp_dir / job_id
        working_dir.mkdir(parents=True, exist_ok=True)

        return Job(
            job_id=job_id,
            working_dir=working_dir,
            clips=list(clips),
            script=script,
            output_path=Path(output_path) if output_path else self.settings.output_dir / f"{job_id}_output.mp4",
            add_overlays=self.settings.add_overlays if add_overlays is None else add_overlays,
            audio_mode=audio_mode or self.settings.audio_mode,
            original_volume=self.settings.original_audio_volume if original_volume is None else original_volume,
            narration_volume=self.settings.narration_volume if narration_volume is None else narration_volume,
        )

    def validate(self, job: Job) -> None:
        """
        Check a job before any external process is started.

        Raises:
            ValidationError: Wrong clip count or ranks, missing source, empty script
        """
        validate_rank_permutation(clip.rank for clip in job.clips)

        for clip in job.clips:
            if not Path(clip.source_path).is_file():
                raise ValidationError(f"Video file not found: {clip.source_path}")

        if not job.script or not job.script.strip():
            raise ValidationError("Narration script is required")

        if job.audio_mode not in ("replace", "mix"):
            raise ValidationError(f"Unknown audio mode: {job.audio_mode}")

    def execute(self, job: Job, progress_callback: Optional[ProgressCallback] = None) -> ProcessingResult:
        """
        Validate, run and clean up a job.

        The working directory is always removed afterwards. On success the
        output is scheduled for deletion after the retention window when a
        scheduler is attached.

        Raises:
            ValidationError: The job is malformed
            ToolUnavailable: ffmpeg/ffprobe are not installed
        """
        try:
            self.validate(job)
            if not check_ffmpeg_available():
                raise ToolUnavailable("FFmpeg not found. Please install ffmpeg and make sure it is on PATH.")

            result = self.run(job, progress_callback=progress_callback)
        finally:
            cleanup_directory(job.working_dir)

        if result.success and self.scheduler is not None:
            self.scheduler.schedule(job.output_path, self.settings.output_retention_seconds)

        return result

    def run(self, job: Job, progress_callback: Optional[ProgressCallback] = None) -> ProcessingResult:
        """
        Run every stage of a job in order.

        Stages: sort, normalize, overlay (optional), concatenate, narrate,
        compose audio, probe. The first failing stage aborts the job.

        Args:
            job: The job to run
            progress_callback: Optional callback(stage, message)

        Returns:
            ProcessingResult; failures are reported in it rather than raised
        """
        def update_progress(stage: str, message: str):
            logger.info(f"[{stage}] {message}")
            if progress_callback:
                progress_callback(stage, message)

        work = job.working_dir
        work.mkdir(parents=True, exist_ok=True)

        try:
            update_progress("SORT", "Ordering clips for countdown...")
            ordered = sort_clips_by_rank(job.clips)

            normalized = []
            for i, clip in enumerate(ordered):
                update_progress("NORMALIZE", f"Normalizing clip {i + 1}/{len(ordered)} (rank #{clip.rank})...")
                target = work / f"normalized_{i}.mp4"
                self.normalizer.normalize(clip.source_path, target)
                normalized.append(target)

            if job.add_overlays:
                labelled = []
                for i, (clip, path) in enumerate(zip(ordered, normalized)):
                    update_progress("OVERLAY", f"Adding rank #{clip.rank} overlay...")
                    target = work / f"overlay_{i}.mp4"
                    self.overlay.add_rank_overlay(path, target, clip.rank)
                    labelled.append(target)
                segments = labelled
            else:
                segments = normalized

            update_progress("CONCAT", f"Concatenating {len(segments)} clips...")
            concatenated = self.concatenator.concatenate(segments, work / "concatenated.mp4")

            update_progress("NARRATE", "Generating voiceover...")
            synthesis = self.synthesizer.synthesize(job.script, work / "voiceover.mp3")
            logger.info(f"Voiceover by {synthesis.backend_used.value}: ~{synthesis.duration_seconds}s")

            job.output_path.parent.mkdir(parents=True, exist_ok=True)
            if job.audio_mode == "mix":
                update_progress("COMPOSE", "Mixing narration with original audio...")
                trimmed = self.composer.mix_audio(
                    concatenated,
                    synthesis.audio_file_path,
                    job.output_path,
                    original_volume=job.original_volume,
                    narration_volume=job.narration_volume,
                )
            else:
                update_progress("COMPOSE", "Replacing audio with narration...")
                trimmed = self.composer.replace_audio(concatenated, synthesis.audio_file_path, job.output_path)

            update_progress("PROBE", "Reading output properties...")
            props = probe_media(job.output_path)

            update_progress("COMPLETE", f"Video ready: {job.output_path}")
            return ProcessingResult(
                success=True,
                output_path=job.output_path,
                duration=props.duration_seconds,
                resolution=props.resolution,
                tts_backend=synthesis.backend_used,
                audio_trimmed=trimmed,
            )

        except RankerError as e:
            logger.error(f"Job {job.job_id} failed: {e}")
            return ProcessingResult(success=False, error=str(e), error_kind=e.kind)
        except Exception as e:
            logger.exception(f"Job {job.job_id} failed unexpectedly")
            return ProcessingResult(success=False, error=str(e), error_kind=RankerError.kind)
