import click
from colorama import Fore, Back, Style

from ...config import get_settings
from ...modules.polisher import ScriptPolisher
from ...modules.tts import select_backend
from ...utils.video_utils import check_ffmpeg_available, drawtext_available

from ..app import cli

_OK = f"{Style.BRIGHT}{Fore.GREEN}{Back.LIGHTBLACK_EX} ✔ {Style.RESET_ALL}"
_MISSING = f"{Style.BRIGHT}{Fore.RED} ✗ {Style.RESET_ALL}"


@cli.command()
def check():
    """
    Check configuration and external tools.
    """
    print(f"\n{Fore.CYAN}Checking Shorts Ranker Configuration...{Style.RESET_ALL}\n")

    settings = get_settings()

    print("Directories:")
    print(f"  Temp: {settings.temp_dir} {_OK if settings.temp_dir.exists() else _MISSING}")
    print(f"  Output: {settings.output_dir} {_OK if settings.output_dir.exists() else _MISSING}")
    print()

    print("Dependencies:")
    ffmpeg_found = check_ffmpeg_available()
    print(f"  ffmpeg/ffprobe: {_OK}" if ffmpeg_found else f"  ffmpeg/ffprobe: {_MISSING} Not found (required)")
    if ffmpeg_found:
        if drawtext_available():
            print(f"  drawtext filter: {_OK}")
        else:
            print(f"  drawtext filter: {_MISSING} Not available (rank overlays will fail; use --no-overlays)")
    print()

    print("API Keys:")
    for name, value in [
        ('Hugging Face', settings.huggingface_api_key),
        ('ElevenLabs', settings.elevenlabs_api_key),
        ('OpenAI', settings.openai_api_key),
        ('Anthropic', settings.anthropic_api_key),
    ]:
        print(f"  {name}: {_OK} Set" if value else f"  {name}: {_MISSING} Not set (optional)")
    print()

    polisher = ScriptPolisher(settings)
    print("Services:")
    print(f"  TTS backend: {Fore.CYAN}{select_backend(settings).value}{Style.RESET_ALL}")
    polish_state = "configured" if polisher.is_configured() else "no credential, template scripts only"
    print(f"  Script polishing: {Fore.CYAN}{settings.polish_service}{Style.RESET_ALL} ({polish_state})")
    print()

    if ffmpeg_found:
        print(f"{_OK} {Fore.GREEN}Ready to compile videos{Style.RESET_ALL}\n")
    else:
        print(f"{Fore.YELLOW}⚠ Install ffmpeg to compile videos.{Style.RESET_ALL}\n")
