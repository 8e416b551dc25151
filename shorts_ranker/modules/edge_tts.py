"""Edge TTS module using Microsoft Edge's TTS API."""

import asyncio
from pathlib import Path
from typing import List
import logging
import edge_tts

from ..utils.exceptions import RemoteServiceFailure

logger = logging.getLogger(__name__)


def speed_to_rate(speed: float) -> str:
    """Convert a speed multiplier (1.0 = normal) to an Edge rate string like "+10%"."""
    return f"{round((speed - 1.0) * 100):+d}%"


class EdgeTTS:
    """Text-to-speech using Microsoft Edge TTS (free, no API key)."""

    async def _generate_speech_async(
        self,
        text: str,
        voice: str,
        rate: str,
        output_path: Path
    ) -> Path:
        communicate = edge_tts.Communicate(text, voice, rate=rate)
        await communicate.save(str(output_path))
        return output_path

    def generate_speech(
        self,
        text: str,
        output_path: Path,
        voice: str = "en-US-GuyNeural",
        speed: float = 1.0
    ) -> Path:
        """
        Generate speech from text using Edge TTS.

        Args:
            text: Text to convert to speech
            output_path: Path to save generated audio (MP3)
            voice: Voice name (default: en-US-GuyNeural)
            speed: Speaking speed multiplier

        Returns:
            Path to generated audio file

        Raises:
            RemoteServiceFailure: The Edge service rejected or dropped the request
        """
        try:
            logger.info(f"Generating speech with Edge TTS voice {voice} ({len(text)} characters)")
            asyncio.run(self._generate_speech_async(text, voice, speed_to_rate(speed), output_path))
            return output_path

        except Exception as e:
            logger.error(f"Edge TTS generation failed: {e}")
            raise RemoteServiceFailure(f"Failed to generate speech with Edge TTS: {e}") from e

    def list_voices(self) -> List[dict]:
        """
        List all available Edge TTS voices.

        Returns:
            List of voice dictionaries with name, gender, locale
        """
        try:
            voices = asyncio.run(edge_tts.list_voices())
            return [
                {
                    'name': v['ShortName'],
                    'gender': v.get('Gender', 'Unknown'),
                    'locale': v.get('Locale', 'Unknown')
                }
                for v in voices
            ]
        except Exception as e:
            logger.error(f"Failed to list Edge TTS voices: {e}")
            return []
