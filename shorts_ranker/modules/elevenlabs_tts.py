"""Premium narration through the ElevenLabs API."""

from pathlib import Path
import logging
from elevenlabs.client import ElevenLabs
from elevenlabs import save

from ..utils.audio_utils import extract_api_error_message
from ..utils.exceptions import RemoteServiceFailure

logger = logging.getLogger(__name__)


class ElevenLabsTTS:
    """Generates speech with an ElevenLabs voice."""

    def __init__(self, api_key: str, timeout: float = None):
        """
        Initialize the client.

        Args:
            api_key: ElevenLabs API key
            timeout: Request timeout in seconds (None = SDK default)
        """
        if timeout is None:
            self.client = ElevenLabs(api_key=api_key)
        else:
            self.client = ElevenLabs(api_key=api_key, timeout=timeout)

    def generate_speech(
        self,
        text: str,
        voice_id: str,
        output_path: Path,
        model: str = "eleven_monolingual_v1",
        stability: float = 0.5,
        similarity_boost: float = 0.5,
        speed: float = 1.0
    ) -> Path:
        """
        Generate speech from text in a single request.

        Args:
            text: Full narration text
            voice_id: ElevenLabs voice ID
            output_path: Path to save generated audio
            model: ElevenLabs model to use
            stability: Voice stability (0-1)
            similarity_boost: Voice similarity boost (0-1)
            speed: Speaking speed multiplier

        Returns:
            Path to generated audio file

        Raises:
            RemoteServiceFailure: The API call failed
        """
        try:
            logger.info(f"Generating speech with ElevenLabs voice {voice_id} ({len(text)} characters)")

            audio = self.client.text_to_speech.convert(
                voice_id=voice_id,
                text=text,
                model_id=model,
                voice_settings={
                    "stability": stability,
                    "similarity_boost": similarity_boost,
                    "speed": speed
                }
            )

            save(audio, str(output_path))

            logger.info(f"Speech generated and saved to: {output_path}")
            return output_path

        except Exception as e:
            error_msg = extract_api_error_message(e)
            logger.error(f"ElevenLabs speech generation failed: {error_msg or e}")
            raise RemoteServiceFailure(f"ElevenLabs TTS failed: {error_msg or e}") from e
