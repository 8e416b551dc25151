"""Burns a fading "Rank #N" label into a clip."""

from pathlib import Path
from typing import Optional
import logging

from ..utils.video_utils import encoder_args, run_ffmpeg

logger = logging.getLogger(__name__)

FONT_SIZE = 72
FONT_COLOR = "white"
BORDER_COLOR = "black"
BORDER_WIDTH = 3
LABEL_Y = 100

FADE_IN_SECONDS = 0.5
HOLD_SECONDS = 2.5
FADE_OUT_SECONDS = 0.5


def alpha_expression(
    fade_in: float = FADE_IN_SECONDS,
    hold: float = HOLD_SECONDS,
    fade_out: float = FADE_OUT_SECONDS
) -> str:
    """
    Opacity envelope of the label as an ffmpeg expression in t.

    Linear ramp 0->1 over fade_in, fully opaque until fade_in + hold,
    linear ramp 1->0 over fade_out, invisible afterwards.
    """
    hold_end = fade_in + hold
    out_end = hold_end + fade_out
    return (
        f"if(lt(t,{fade_in}),t/{fade_in},"
        f"if(lt(t,{hold_end}),1,"
        f"if(lt(t,{out_end}),({out_end}-t)/{fade_out},0)))"
    )


class RankOverlay:
    """Adds the rank label to a normalized clip."""

    def __init__(self, font_file: Optional[str] = None):
        """
        Args:
            font_file: TTF file for the label; ffmpeg's default font when None
        """
        self.font_file = font_file

    def build_filter(self, rank: int) -> str:
        options = [
            f"text='Rank #{rank}'",
            f"fontsize={FONT_SIZE}",
            f"fontcolor={FONT_COLOR}",
            f"bordercolor={BORDER_COLOR}",
            f"borderw={BORDER_WIDTH}",
            "x=(w-text_w)/2",
            f"y={LABEL_Y}",
            f"alpha='{alpha_expression()}'",
        ]
        if self.font_file:
            font = str(Path(self.font_file)).replace('\\', '/').replace(':', '\\:').replace("'", "\\'")
            options.insert(0, f"fontfile='{font}'")
        return "drawtext=" + ":".join(options)

    def add_rank_overlay(self, input_path: Path, output_path: Path, rank: int) -> Path:
        """
        Draw "Rank #<rank>" near the top center of the clip.

        Args:
            input_path: Normalized clip
            output_path: Path for the labelled clip
            rank: Rank shown in the label

        Returns:
            Path to the labelled clip

        Raises:
            MediaToolFailure: ffmpeg failed (fatal to the job)
        """
        logger.info(f"Adding rank #{rank} overlay to {Path(input_path).name}")

        cmd = [
            'ffmpeg', '-y',
            '-i', str(input_path),
            '-vf', self.build_filter(rank),
            *encoder_args(),
            str(output_path)
        ]
        run_ffmpeg(cmd)

        return output_path
