"""Speech synthesis through the Hugging Face inference API (free tier)."""

from pathlib import Path
from typing import Optional
import logging

import requests

from ..utils.exceptions import RemoteServiceFailure

logger = logging.getLogger(__name__)


class HuggingFaceTTS:
    """Text-to-speech using a hosted Hugging Face TTS model."""

    def __init__(
        self,
        api_key: str,
        model: str = "facebook/mms-tts-eng",
        api_url: str = "https://api-inference.huggingface.co/models",
        timeout: Optional[float] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: Hugging Face token
            model: TTS model id
            api_url: Inference API base URL
            timeout: Request timeout in seconds (None = no timeout)
        """
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout

    def generate_speech(self, text: str, output_path: Path) -> Path:
        """
        Synthesize one chunk of text and write the returned audio bytes.

        Args:
            text: Text to speak (keep under the chunk threshold)
            output_path: Path to save the audio

        Returns:
            Path to the audio file

        Raises:
            RemoteServiceFailure: Network error or non-success HTTP status
        """
        logger.debug(f"Requesting {len(text)} characters from {self.model}")
        try:
            response = requests.post(
                f"{self.api_url}/{self.model}",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={"inputs": text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteServiceFailure(f"Hugging Face request failed: {e}") from e

        if not response.ok:
            detail = response.text[:200]
            raise RemoteServiceFailure(f"Hugging Face API error: {response.status_code} - {detail}")

        Path(output_path).write_bytes(response.content)
        return output_path
