"""Audio processing utilities."""

import ast
import wave
from pathlib import Path
from typing import List, Optional
import logging

from .video_utils import AUDIO_SAMPLE_RATE, run_ffmpeg
from .exceptions import MediaToolFailure, ToolUnavailable

logger = logging.getLogger(__name__)


def extract_api_error_message(error: Exception) -> Optional[str]:
    """
    Extract human-readable message from API error JSON response.

    Expected formats:
    - OpenAI: body: {'error': {'message': '...'}}
    - ElevenLabs: body: {'detail': {'message': '...'}} or {'detail': 'string'}
    - Hugging Face: body: {'error': '...'}

    Returns:
        Extracted message string if found and non-blank, None otherwise
    """
    error_str = str(error)

    # Look for body: {...} in error string
    if "body: {" not in error_str:
        return None

    try:
        # Extract dict from "body: {...}"
        start = error_str.index("body: {") + 6
        # Find matching closing brace
        brace_count = 0
        end = start
        for i, char in enumerate(error_str[start:], start):
            if char == '{':
                brace_count += 1
            elif char == '}':
                brace_count -= 1
                if brace_count == 0:
                    end = i + 1
                    break

        # Use ast.literal_eval to parse Python dict string (with single quotes)
        body = ast.literal_eval(error_str[start:end])

        error_field = body.get('error')
        if isinstance(error_field, dict):
            msg = error_field.get('message')
            if msg and msg.strip():
                return msg.strip()
        elif isinstance(error_field, str) and error_field.strip():
            return error_field.strip()

        if 'detail' in body:
            detail = body['detail']
            if isinstance(detail, dict):
                msg = detail.get('message')
                if msg and msg.strip():
                    return msg.strip()
            elif isinstance(detail, str) and detail.strip():
                return detail.strip()

        msg = body.get('message')
        if isinstance(msg, str) and msg.strip():
            return msg.strip()

    except (SyntaxError, ValueError, KeyError, IndexError, AttributeError):
        pass

    return None


def create_silent_audio(output_path: Path, duration_seconds: int, sample_rate: int = AUDIO_SAMPLE_RATE) -> Path:
    """
    Create a silent MP3 with ffmpeg's null audio source.

    Args:
        output_path: Path to output audio file
        duration_seconds: Length of the silence
        sample_rate: Sample rate in Hz

    Returns:
        Path to the silent audio file
    """
    cmd = [
        'ffmpeg', '-y',
        '-f', 'lavfi',
        '-i', f'anullsrc=r={sample_rate}:cl=stereo',
        '-t', str(duration_seconds),
        '-acodec', 'libmp3lame',
        '-q:a', '2',
        str(output_path)
    ]

    run_ffmpeg(cmd)
    logger.info(f"Created {duration_seconds}s of silence at {output_path}")
    return output_path


def write_silent_wav(
    output_path: Path,
    duration_seconds: int,
    sample_rate: int = AUDIO_SAMPLE_RATE,
    channels: int = 2
) -> Path:
    """
    Write a silent 16-bit PCM WAV file without any external tool.

    Args:
        output_path: Path to output file (written as-is; caller picks the suffix)
        duration_seconds: Length of the silence
        sample_rate: Sample rate in Hz
        channels: Number of channels

    Returns:
        Path to the WAV file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame_bytes = channels * 2
    one_second = b'\x00' * (sample_rate * frame_bytes)

    with wave.open(str(output_path), 'wb') as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        for _ in range(duration_seconds):
            wav.writeframes(one_second)

    logger.info(f"Wrote {duration_seconds}s silent WAV at {output_path}")
    return output_path


def concatenate_audio_files(input_paths: List[Path], output_path: Path) -> Path:
    """
    Join audio files in order into one MP3 using the ffmpeg concat demuxer.

    Args:
        input_paths: Audio files in playback order
        output_path: Path to the combined file

    Returns:
        Path to the combined file
    """
    concat_file = output_path.with_name(f"{output_path.stem}_concat.txt")

    with open(concat_file, 'w', encoding='utf-8') as f:
        for path in input_paths:
            f.write(f"file '{escape_concat_path(path)}'\n")

    try:
        cmd = [
            'ffmpeg', '-y',
            '-f', 'concat',
            '-safe', '0',
            '-i', str(concat_file),
            '-acodec', 'libmp3lame',
            '-q:a', '2',
            str(output_path)
        ]
        run_ffmpeg(cmd)
    finally:
        concat_file.unlink(missing_ok=True)

    logger.info(f"Combined {len(input_paths)} audio chunks into {output_path}")
    return output_path


def escape_concat_path(path: Path) -> str:
    """Absolute path quoted for a concat demuxer manifest line."""
    return str(Path(path).absolute()).replace("'", "'\\''")


def get_audio_duration(audio_path: Path) -> float:
    """
    Get duration of audio file in seconds.

    Returns 0.0 when the file cannot be probed.
    """
    cmd = [
        'ffprobe',
        '-v', 'error',
        '-show_entries', 'format=duration',
        '-of', 'default=noprint_wrappers=1:nokey=1',
        str(audio_path)
    ]

    try:
        result = run_ffmpeg(cmd)
        return float(result.stdout.strip())
    except (ToolUnavailable, MediaToolFailure, ValueError) as e:
        logger.warning(f"Failed to get audio duration: {e}")
        return 0.0
