"""Clip normalization to the vertical 1080x1920 @ 30fps target."""

from pathlib import Path
import logging

from ..models import MediaProperties
from ..utils.video_utils import (
    TARGET_ASPECT,
    TARGET_FPS,
    TARGET_HEIGHT,
    TARGET_WIDTH,
    encoder_args,
    probe_media,
    run_ffmpeg,
)

logger = logging.getLogger(__name__)


class VideoNormalizer:
    """Rewrites clips into the fixed target geometry, frame rate and codec profile."""

    def build_filter(self, props: MediaProperties) -> str:
        """
        Build the -vf filter chain for a clip with the given properties.

        Wider than 9:16 clips are center-cropped horizontally then scaled;
        narrower clips are scaled to fit inside the target frame and padded
        with black to it; clips already at 9:16 (or with unknown geometry) are scaled
        straight to the target. Every path forces square pixels and 30fps.
        """
        width, height = props.width, props.height
        input_aspect = width / height if width > 0 and height > 0 else None

        if input_aspect is not None and input_aspect > TARGET_ASPECT:
            crop_width = round(height * TARGET_ASPECT)
            crop_x = round((width - crop_width) / 2)
            steps = [
                f"crop={crop_width}:{height}:{crop_x}:0",
                f"scale={TARGET_WIDTH}:{TARGET_HEIGHT}",
            ]
        elif input_aspect is not None and input_aspect < TARGET_ASPECT:
            steps = [
                f"scale={TARGET_WIDTH}:{TARGET_HEIGHT}:force_original_aspect_ratio=decrease",
                f"pad={TARGET_WIDTH}:{TARGET_HEIGHT}:(ow-iw)/2:(oh-ih)/2:black",
            ]
        else:
            steps = [f"scale={TARGET_WIDTH}:{TARGET_HEIGHT}"]

        steps += ["setsar=1", f"fps={TARGET_FPS}"]
        return ",".join(steps)

    def normalize(self, input_path: Path, output_path: Path) -> MediaProperties:
        """
        Normalize a clip to the target profile.

        Args:
            input_path: Source clip
            output_path: Path for the normalized clip

        Returns:
            MediaProperties of the normalized clip

        Raises:
            MediaToolFailure: ffmpeg rejected the clip (fatal to the job)
        """
        props = probe_media(input_path)
        vf = self.build_filter(props)
        logger.info(f"Normalizing {Path(input_path).name} ({props.resolution}) with {vf}")

        cmd = [
            'ffmpeg', '-y',
            '-i', str(input_path),
            '-vf', vf,
            *encoder_args(),
            '-movflags', '+faststart',
            str(output_path)
        ]
        run_ffmpeg(cmd)

        return probe_media(output_path)
