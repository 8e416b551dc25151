"""Video processing utilities: ffmpeg invocation, probing and target profile."""

import json
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from ..models import MediaProperties
from .exceptions import MediaToolFailure, ToolUnavailable

logger = logging.getLogger(__name__)

# Target output profile for vertical shorts
TARGET_WIDTH = 1080
TARGET_HEIGHT = 1920
TARGET_FPS = 30
TARGET_ASPECT = TARGET_WIDTH / TARGET_HEIGHT  # 9:16 = 0.5625

VIDEO_CODEC = "libx264"
VIDEO_PRESET = "fast"
VIDEO_CRF = 23  # lower = better, 18-28 recommended

AUDIO_CODEC = "aac"
AUDIO_BITRATE = "192k"
AUDIO_SAMPLE_RATE = 44100

DEFAULT_FRAME_RATE = 30.0


def run_ffmpeg(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    """
    Run an ffmpeg/ffprobe command, capturing its output.

    Args:
        cmd: Full argument list, binary first

    Returns:
        The completed process

    Raises:
        ToolUnavailable: The binary is not installed
        MediaToolFailure: The tool exited non-zero (carries its stderr)
    """
    cmd = [str(part) for part in cmd]
    try:
        return subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError:
        raise ToolUnavailable(f"{cmd[0]} is not installed or not on PATH")
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        logger.error(f"{cmd[0]} failed: {stderr[-2000:]}")
        logger.debug(f"Command was: {' '.join(cmd)[:500]}")
        raise MediaToolFailure(
            f"{cmd[0]} failed: {stderr or e}",
            stderr=stderr,
            command=cmd
        )


def check_ffmpeg_available() -> bool:
    """Check if ffmpeg and ffprobe can be invoked."""
    for binary in ('ffmpeg', 'ffprobe'):
        try:
            subprocess.run([binary, '-version'], capture_output=True, check=True)
        except (OSError, subprocess.CalledProcessError):
            return False
    return True


def drawtext_available() -> bool:
    """Check if the installed ffmpeg was built with the drawtext filter."""
    try:
        result = subprocess.run(['ffmpeg', '-hide_banner', '-filters'], capture_output=True, text=True, check=True)
    except (OSError, subprocess.CalledProcessError):
        return False
    return ' drawtext ' in result.stdout


def encoder_args() -> List[str]:
    """Standard re-encode arguments for every geometry-changing step."""
    return [
        '-c:v', VIDEO_CODEC,
        '-preset', VIDEO_PRESET,
        '-crf', str(VIDEO_CRF),
        '-pix_fmt', 'yuv420p',
        '-c:a', AUDIO_CODEC,
        '-b:a', AUDIO_BITRATE,
    ]


def parse_frame_rate(value: Optional[str]) -> float:
    """
    Parse an ffprobe frame rate such as "30/1", "30000/1001" or "29.97".

    A zero denominator or an unparseable value yields the default of 30.
    """
    if not value:
        return DEFAULT_FRAME_RATE

    if '/' in value:
        num, _, den = value.partition('/')
        try:
            numerator, denominator = int(num), int(den)
        except ValueError:
            return DEFAULT_FRAME_RATE
        if denominator == 0:
            return DEFAULT_FRAME_RATE
        return numerator / denominator

    try:
        return float(value) or DEFAULT_FRAME_RATE
    except ValueError:
        return DEFAULT_FRAME_RATE


def probe_media(path: Path) -> MediaProperties:
    """
    Get intrinsic properties of a media file.

    Probing is advisory: any failure (missing file, unreadable container,
    missing tool) returns MediaProperties.unknown() instead of raising.

    Args:
        path: Path to the media file

    Returns:
        MediaProperties of the file
    """
    cmd = [
        'ffprobe',
        '-v', 'quiet',
        '-print_format', 'json',
        '-show_streams',
        '-show_format',
        str(path)
    ]

    try:
        result = run_ffmpeg(cmd)
        info = json.loads(result.stdout or "{}")
    except (ToolUnavailable, MediaToolFailure, ValueError) as e:
        logger.warning(f"Probe failed for {path}: {e}")
        return MediaProperties.unknown()

    streams = info.get('streams') or []
    video_stream = next((s for s in streams if s.get('codec_type') == 'video'), {})
    audio_stream = next((s for s in streams if s.get('codec_type') == 'audio'), None)

    raw_duration = (info.get('format') or {}).get('duration') or video_stream.get('duration') or 0
    try:
        duration = float(raw_duration)
    except (TypeError, ValueError):
        duration = 0.0

    return MediaProperties(
        width=int(video_stream.get('width') or 0),
        height=int(video_stream.get('height') or 0),
        duration_seconds=duration,
        frame_rate=parse_frame_rate(video_stream.get('r_frame_rate')),
        has_audio_track=audio_stream is not None,
        codec_name=video_stream.get('codec_name') or "unknown",
    )
