import sys

import click
from colorama import Fore, Style

from ...modules.edge_tts import EdgeTTS

from ..app import cli


@cli.command()
@click.option('--lang', default=None, help='Filter by language/locale (e.g., "en", "US", "en-GB")')
def voices(lang):
    """
    List the Edge TTS voices usable with `tts --service edge --voice`.
    """
    title = "Available Edge TTS Voices"
    if lang:
        title += f" - Filtered by: {lang}"
    print(f"\n{Fore.CYAN}{title}:{Style.RESET_ALL}\n")

    found = EdgeTTS().list_voices()
    if lang:
        found = [v for v in found if lang.lower() in v['locale'].lower()]

    if not found:
        print(f"{Fore.RED}No voices found.{Style.RESET_ALL}")
        sys.exit(1)

    by_locale = {}
    for v in found:
        by_locale.setdefault(v['locale'], []).append(v)

    for locale in sorted(by_locale):
        print(f"{Fore.YELLOW}{locale}{Style.RESET_ALL}")
        for v in sorted(by_locale[locale], key=lambda v: v['name']):
            print(f"  {v['name']} ({v['gender']})")
    print(f"\nTotal: {len(found)} voices\n")
