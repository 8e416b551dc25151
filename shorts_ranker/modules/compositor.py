"""Final audio composition: narration over the concatenated video."""

from pathlib import Path
import logging

from ..utils.exceptions import MediaToolFailure
from ..utils.video_utils import encoder_args, run_ffmpeg

logger = logging.getLogger(__name__)


class AudioComposer:
    """Puts the narration track onto the concatenated video."""

    def replace_audio(self, video_path: Path, audio_path: Path, output_path: Path) -> bool:
        """
        Replace the video's audio with the narration.

        The output is trimmed to the shorter of the two streams. If ffmpeg
        rejects the trimmed form, the command is retried once without the
        trim and a warning is logged.

        Args:
            video_path: Concatenated video
            audio_path: Narration audio
            output_path: Path for the final video

        Returns:
            True if the output was trimmed to the shorter stream, False if the
            untrimmed retry produced it

        Raises:
            MediaToolFailure: Both attempts failed
        """
        base_cmd = [
            'ffmpeg', '-y',
            '-i', str(video_path),
            '-i', str(audio_path),
            '-map', '0:v',
            '-map', '1:a',
            *encoder_args(),
        ]

        logger.info(f"Replacing audio of {Path(video_path).name} with narration")
        try:
            run_ffmpeg(base_cmd + ['-shortest', str(output_path)])
            return True
        except MediaToolFailure as e:
            logger.warning(f"Audio replacement with -shortest failed, retrying without it: {e.stderr[-200:]}")

        run_ffmpeg(base_cmd + [str(output_path)])
        return False

    def mix_audio(
        self,
        video_path: Path,
        audio_path: Path,
        output_path: Path,
        original_volume: float = 0.3,
        narration_volume: float = 1.0
    ) -> bool:
        """
        Mix the narration with the video's original audio.

        The mix lasts as long as the video's own audio. When mixing fails
        (typically because the video has no audio track) the narration
        replaces the audio instead.

        Args:
            video_path: Concatenated video
            audio_path: Narration audio
            output_path: Path for the final video
            original_volume: Gain applied to the original audio
            narration_volume: Gain applied to the narration

        Returns:
            True on the mix path; otherwise the result of replace_audio()
        """
        filter_complex = (
            f"[0:a]volume={original_volume}[a0];"
            f"[1:a]volume={narration_volume}[a1];"
            f"[a0][a1]amix=inputs=2:duration=first:dropout_transition=2[aout]"
        )

        cmd = [
            'ffmpeg', '-y',
            '-i', str(video_path),
            '-i', str(audio_path),
            '-filter_complex', filter_complex,
            '-map', '0:v',
            '-map', '[aout]',
            '-c:v', 'copy',
            '-c:a', 'aac',
            '-b:a', '192k',
            str(output_path)
        ]

        logger.info(f"Mixing narration into {Path(video_path).name} (original {original_volume}, narration {narration_volume})")
        try:
            run_ffmpeg(cmd)
            return True
        except MediaToolFailure:
            logger.warning("Audio mixing failed, falling back to audio replacement")
            return self.replace_audio(video_path, audio_path, output_path)
