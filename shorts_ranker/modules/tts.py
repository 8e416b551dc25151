"""Speech synthesis router with graceful degradation to silent audio."""

import time
from pathlib import Path
from typing import Callable, Dict, Optional
import logging

from ..config import Settings
from ..models import SynthesisResult, TTSBackend
from ..utils.audio_utils import concatenate_audio_files, create_silent_audio, write_silent_wav
from ..utils.exceptions import RankerError
from ..utils.text_utils import count_words, estimate_duration_seconds, split_text_into_chunks
from .coqui_tts import CoquiTTS
from .edge_tts import EdgeTTS
from .elevenlabs_tts import ElevenLabsTTS
from .huggingface_tts import HuggingFaceTTS

logger = logging.getLogger(__name__)

# Mock narration never shorter than this
MIN_MOCK_DURATION = 10


def select_backend(settings: Settings) -> TTSBackend:
    """
    Pick the backend for the current configuration.

    Order: explicit tts_service, ElevenLabs key, Hugging Face key,
    use_coqui_tts, mock. Holds no state, so configuration changes take
    effect on the next call.
    """
    if settings.tts_service:
        return TTSBackend(settings.tts_service)
    if settings.elevenlabs_api_key:
        return TTSBackend.ELEVENLABS
    if settings.huggingface_api_key:
        return TTSBackend.HUGGINGFACE
    if settings.use_coqui_tts:
        return TTSBackend.COQUI
    return TTSBackend.MOCK


class SpeechSynthesizer:
    """Turns narration text into an audio file with the configured backend."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._handlers: Dict[TTSBackend, Callable[..., SynthesisResult]] = {
            TTSBackend.MOCK: self._synthesize_mock,
            TTSBackend.HUGGINGFACE: self._synthesize_huggingface,
            TTSBackend.ELEVENLABS: self._synthesize_elevenlabs,
            TTSBackend.COQUI: self._synthesize_coqui,
            TTSBackend.EDGE: self._synthesize_edge,
        }

    def default_output_path(self) -> Path:
        tts_dir = self.settings.temp_dir / "tts"
        tts_dir.mkdir(parents=True, exist_ok=True)
        return tts_dir / f"tts_{int(time.time() * 1000)}.mp3"

    def synthesize(
        self,
        text: str,
        output_path: Optional[Path] = None,
        voice: Optional[str] = None,
        speed: Optional[float] = None
    ) -> SynthesisResult:
        """
        Synthesize text to speech.

        Free and local backends fall back to silent mock audio on any
        failure; the premium backend raises instead.

        Args:
            text: Narration text
            output_path: Where to write the audio (temp_dir/tts/ if None)
            voice: Backend-specific voice id or name (configured default if None)
            speed: Speaking speed multiplier (1.0 if None)

        Returns:
            SynthesisResult naming the backend that actually produced the file

        Raises:
            RemoteServiceFailure: Premium backend failed
        """
        output_path = Path(output_path) if output_path else self.default_output_path()
        output_path.parent.mkdir(parents=True, exist_ok=True)

        backend = select_backend(self.settings)
        logger.info(f"Synthesizing {count_words(text)} words with {backend.value} TTS")
        return self._handlers[backend](text, output_path, voice=voice, speed=speed or 1.0)

    def _estimate(self, text: str) -> int:
        return estimate_duration_seconds(count_words(text))

    def _synthesize_mock(self, text: str, output_path: Path, **_) -> SynthesisResult:
        duration = max(MIN_MOCK_DURATION, self._estimate(text))
        try:
            create_silent_audio(output_path, duration)
        except (RankerError, OSError) as e:
            logger.debug(f"ffmpeg silence failed ({e}), writing WAV instead")
            if output_path.suffix.lower() != '.wav':
                output_path = output_path.with_suffix('.wav')
            write_silent_wav(output_path, duration)

        logger.info(f"Generated {duration}s of silent narration at {output_path}")
        return SynthesisResult(audio_file_path=output_path, duration_seconds=duration, backend_used=TTSBackend.MOCK)

    def _synthesize_huggingface(self, text: str, output_path: Path, **_) -> SynthesisResult:
        if not self.settings.huggingface_api_key:
            logger.warning("No Hugging Face API key, falling back to mock TTS")
            return self._synthesize_mock(text, output_path)

        client = HuggingFaceTTS(
            api_key=self.settings.huggingface_api_key,
            model=self.settings.huggingface_tts_model,
            api_url=self.settings.huggingface_api_url,
            timeout=self.settings.remote_timeout,
        )

        try:
            chunks = split_text_into_chunks(text, self.settings.tts_max_chars_per_chunk)
            if len(chunks) == 1:
                client.generate_speech(chunks[0], output_path)
            else:
                logger.info(f"Split narration into {len(chunks)} chunks")
                chunk_paths = []
                try:
                    for i, chunk in enumerate(chunks):
                        chunk_path = output_path.with_name(f"{output_path.stem}_chunk{i}.wav")
                        client.generate_speech(chunk, chunk_path)
                        chunk_paths.append(chunk_path)
                        if i < len(chunks) - 1:
                            time.sleep(self.settings.tts_chunk_delay)
                    concatenate_audio_files(chunk_paths, output_path)
                finally:
                    for chunk_path in chunk_paths:
                        chunk_path.unlink(missing_ok=True)
        except Exception as e:
            logger.warning(f"Hugging Face TTS failed ({e}), falling back to mock TTS")
            return self._synthesize_mock(text, output_path)

        return SynthesisResult(output_path, self._estimate(text), TTSBackend.HUGGINGFACE)

    def _synthesize_elevenlabs(self, text: str, output_path: Path, voice: Optional[str] = None, speed: float = 1.0) -> SynthesisResult:
        if not self.settings.elevenlabs_api_key:
            logger.warning("No ElevenLabs API key, falling back to mock TTS")
            return self._synthesize_mock(text, output_path)

        client = ElevenLabsTTS(self.settings.elevenlabs_api_key, timeout=self.settings.remote_timeout)
        client.generate_speech(
            text,
            voice_id=voice or self.settings.elevenlabs_voice_id,
            output_path=output_path,
            model=self.settings.elevenlabs_model,
            stability=0.5,
            similarity_boost=0.5,
            speed=speed,
        )
        return SynthesisResult(output_path, self._estimate(text), TTSBackend.ELEVENLABS)

    def _synthesize_coqui(self, text: str, output_path: Path, **_) -> SynthesisResult:
        engine = CoquiTTS(
            python=self.settings.coqui_python,
            model=self.settings.coqui_model,
            timeout=self.settings.coqui_timeout,
        )
        if not engine.is_available():
            logger.warning("Coqui TTS not installed, falling back to mock TTS")
            return self._synthesize_mock(text, output_path)

        try:
            engine.generate_speech(text, output_path)
        except Exception as e:
            logger.warning(f"Coqui TTS failed ({e}), falling back to mock TTS")
            return self._synthesize_mock(text, output_path)

        return SynthesisResult(output_path, self._estimate(text), TTSBackend.COQUI)

    def _synthesize_edge(self, text: str, output_path: Path, voice: Optional[str] = None, speed: float = 1.0) -> SynthesisResult:
        try:
            EdgeTTS().generate_speech(text, output_path, voice=voice or self.settings.edge_voice, speed=speed)
        except Exception as e:
            logger.warning(f"Edge TTS failed ({e}), falling back to mock TTS")
            return self._synthesize_mock(text, output_path)

        return SynthesisResult(output_path, self._estimate(text), TTSBackend.EDGE)
