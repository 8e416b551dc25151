"""Local speech synthesis with a Coqui TTS install."""

import subprocess
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# Runs inside the Coqui interpreter: argv = model, text file, output file
_DRIVER = """
import sys
from TTS.api import TTS

model_name, text_path, output_path = sys.argv[1:4]
with open(text_path, encoding="utf-8") as f:
    text = f.read()

TTS(model_name=model_name, progress_bar=False).tts_to_file(text=text, file_path=output_path)
print("OK")
"""


class CoquiTTS:
    """Drives Coqui TTS in a separate Python interpreter."""

    def __init__(
        self,
        python: str = "python3",
        model: str = "tts_models/en/ljspeech/tacotron2-DDC",
        timeout: int = 300
    ):
        """
        Args:
            python: Interpreter that has the TTS package installed
            model: Coqui model name
            timeout: Ceiling in seconds for one synthesis run
        """
        self.python = python
        self.model = model
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check that the interpreter can import the Coqui API."""
        try:
            subprocess.run(
                [self.python, '-c', 'from TTS.api import TTS'],
                capture_output=True,
                check=True,
                timeout=60
            )
            return True
        except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
            return False

    def generate_speech(self, text: str, output_path: Path) -> Path:
        """
        Synthesize text to a file.

        The text goes through a temp file next to the output to avoid any
        command-line quoting.

        Raises:
            RuntimeError: The engine failed or exceeded the timeout
        """
        output_path = Path(output_path)
        text_path = output_path.with_name(f"{output_path.stem}_script.txt")
        text_path.write_text(text, encoding='utf-8')

        logger.info(f"Generating speech with Coqui model {self.model} ({len(text)} characters)")
        try:
            result = subprocess.run(
                [self.python, '-c', _DRIVER, self.model, str(text_path), str(output_path)],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout
            )
            if result.stderr and "UserWarning" not in result.stderr:
                logger.debug(f"Coqui warnings: {result.stderr[-500:]}")
        except subprocess.TimeoutExpired as e:
            raise RuntimeError(f"Coqui TTS timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise RuntimeError(f"Coqui TTS failed: {(e.stderr or '').strip()[-500:]}") from e
        finally:
            text_path.unlink(missing_ok=True)

        return output_path
