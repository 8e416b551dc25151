import sys
from pathlib import Path

import click
from colorama import Fore, Style

from ...config import TTS_SERVICES, get_settings
from ...modules.tts import SpeechSynthesizer
from ...utils.audio_utils import get_audio_duration
from ...utils.exceptions import RankerError

from ..app import cli


@cli.command()
@click.argument('text_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output audio path (default: next to the text file, .mp3)')
@click.option('--voice', '-v', default=None, help='Voice id/name for the selected backend')
@click.option('--speed', type=click.FloatRange(0.5, 2.0), default=None, help='Speaking speed multiplier')
@click.option(
    '--service',
    type=click.Choice(TTS_SERVICES),
    default=None,
    help='Force a TTS backend (default: auto-detect from configured keys)'
)
def tts(text_file, output, voice, speed, service):
    """
    Convert a narration script file to speech.

    Examples:

        shorts-ranker tts script.txt

        shorts-ranker tts script.txt --service edge --voice en-GB-RyanNeural
    """
    overrides = {'tts_service': service} if service else {}
    settings = get_settings(**overrides)

    text_path = Path(text_file)
    text = text_path.read_text(encoding='utf-8').strip()
    if not text:
        print(f"{Fore.RED}Error: {text_path.name} is empty{Style.RESET_ALL}")
        sys.exit(1)

    output_path = Path(output) if output else text_path.with_suffix('.mp3')

    try:
        result = SpeechSynthesizer(settings).synthesize(text, output_path, voice=voice, speed=speed)
    except RankerError as e:
        print(f"{Fore.RED}✗ Error: {e}{Style.RESET_ALL}")
        sys.exit(1)

    measured = get_audio_duration(result.audio_file_path)
    print(f"{Fore.CYAN}TTS backend: {result.backend_used.value}{Style.RESET_ALL}")
    print(f"  Estimated duration: {result.duration_seconds}s")
    print(f"  Measured duration: {measured:.1f}s" if measured else "  Measured duration: unknown")
    print(f"  {Fore.GREEN}✓ Saved to: {result.audio_file_path}{Style.RESET_ALL}")
