"""Joins normalized clips into one continuous video."""

from pathlib import Path
from typing import List
import logging

from ..utils.audio_utils import escape_concat_path
from ..utils.video_utils import (
    TARGET_FPS,
    TARGET_HEIGHT,
    TARGET_WIDTH,
    encoder_args,
    probe_media,
    run_ffmpeg,
)

logger = logging.getLogger(__name__)

CONCAT_LIST_NAME = "concat_list.txt"


class VideoConcatenator:
    """Concatenates clips that already share the target profile."""

    def concatenate(self, input_paths: List[Path], output_path: Path) -> Path:
        """
        Join clips in order with the concat demuxer, copying streams.

        Relies on every input having been normalized to the same codec
        profile. The manifest is written next to the output and removed
        afterwards.

        Args:
            input_paths: Clips in playback order
            output_path: Path for the joined video

        Returns:
            Path to the joined video
        """
        output_path = Path(output_path)
        concat_file = output_path.parent / CONCAT_LIST_NAME

        with open(concat_file, 'w', encoding='utf-8') as f:
            for path in input_paths:
                f.write(f"file '{escape_concat_path(path)}'\n")

        logger.info(f"Concatenating {len(input_paths)} clips into {output_path.name}")

        try:
            cmd = [
                'ffmpeg', '-y',
                '-f', 'concat',
                '-safe', '0',
                '-i', str(concat_file),
                '-c', 'copy',
                str(output_path)
            ]
            run_ffmpeg(cmd)
        finally:
            concat_file.unlink(missing_ok=True)

        return output_path

    def concatenate_with_reencode(self, input_paths: List[Path], output_path: Path) -> Path:
        """
        Join clips with the concat filter, re-encoding to the target profile.

        Each input is scaled and padded to 1080x1920 first, so clips of mixed
        geometry are accepted. Audio is joined only when every input has an
        audio track.

        Raises:
            ValueError: input_paths is empty
        """
        if not input_paths:
            raise ValueError("At least one input video is required")

        with_audio = all(probe_media(path).has_audio_track for path in input_paths)
        count = len(input_paths)

        cmd = ['ffmpeg', '-y']
        for path in input_paths:
            cmd += ['-i', str(path)]

        filters = []
        for i in range(count):
            filters.append(
                f"[{i}:v]scale={TARGET_WIDTH}:{TARGET_HEIGHT}:force_original_aspect_ratio=decrease,"
                f"pad={TARGET_WIDTH}:{TARGET_HEIGHT}:(ow-iw)/2:(oh-ih)/2,setsar=1,fps={TARGET_FPS}[v{i}]"
            )

        if with_audio:
            streams = "".join(f"[v{i}][{i}:a]" for i in range(count))
            filters.append(f"{streams}concat=n={count}:v=1:a=1[outv][outa]")
            maps = ['-map', '[outv]', '-map', '[outa]']
        else:
            streams = "".join(f"[v{i}]" for i in range(count))
            filters.append(f"{streams}concat=n={count}:v=1:a=0[outv]")
            maps = ['-map', '[outv]']

        cmd += [
            '-filter_complex', ";".join(filters),
            *maps,
            *encoder_args(),
            '-s', f"{TARGET_WIDTH}x{TARGET_HEIGHT}",
            '-r', str(TARGET_FPS),
            str(output_path)
        ]

        logger.info(f"Concatenating {count} clips with re-encode into {Path(output_path).name}")
        run_ffmpeg(cmd)

        return output_path
