import sys
from pathlib import Path

import click
from colorama import Fore, Style

from ...config import get_settings
from ...models import validate_rank_permutation
from ...modules.narrator import NarrationGenerator
from ...modules.polisher import ScriptPolisher
from ...utils.exceptions import ValidationError
from ...utils.text_utils import split_script_by_rank
from ..common import _load_rankings

from ..app import cli


@cli.command()
@click.argument('rankings', type=click.Path(exists=True, dir_okay=False))
@click.option('--topic', '-t', default=None, help='What the clips are about (e.g. "football goals")')
@click.option(
    '--style', '-s',
    type=click.Choice(['energetic', 'casual', 'professional']),
    default=None,
    help='Narration style. Default: from settings (energetic)'
)
@click.option('--emojis/--no-emojis', default=True, help='Decorate energetic scripts with emojis')
@click.option('--llm', is_flag=True, default=False, help='Polish the script with the configured LLM provider')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the script to this file')
@click.option('--sections', is_flag=True, default=False, help='Also show the script split into intro, ranks and outro')
def script(rankings, topic, style, emojis, llm, output, sections):
    """
    Generate a countdown narration script.

    RANKINGS: JSON file listing five clips with "path", "rank" and optional
    "title" and "description".

    Examples:

        shorts-ranker script rankings.json --topic "football goals"

        shorts-ranker script rankings.json --style professional --no-emojis -o script.txt
    """
    settings = get_settings()

    try:
        clips = _load_rankings(Path(rankings))
        validate_rank_permutation(clip.rank for clip in clips)
    except ValidationError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        sys.exit(1)

    polisher = ScriptPolisher(settings)
    if llm and not polisher.is_configured():
        print(f"{Fore.YELLOW}No credential for {settings.polish_service}; using the template script.{Style.RESET_ALL}")

    generator = NarrationGenerator(polisher=polisher)
    result = generator.generate(
        [clip.to_narration_item() for clip in clips],
        topic=topic,
        style=style or settings.default_style,
        include_emojis=emojis,
        use_llm=llm,
    )

    print(f"\n{Fore.CYAN}{'=' * 80}{Style.RESET_ALL}")
    print(result.script_text)
    print(f"{Fore.CYAN}{'=' * 80}{Style.RESET_ALL}\n")
    print(f"  Words: {result.word_count}")
    print(f"  Estimated duration: {result.estimated_duration_seconds}s")
    print(f"  Polished: {'yes' if result.was_polished else 'no'}")

    if sections:
        parts = split_script_by_rank(result.script_text)
        print(f"\n{Fore.CYAN}Sections:{Style.RESET_ALL}")
        print(f"  {Fore.YELLOW}[intro]{Style.RESET_ALL} {parts['intro']}")
        for part in parts['ranks']:
            text = part['text'].replace('\n', ' ')
            print(f"  {Fore.YELLOW}[#{part['rank']}]{Style.RESET_ALL} {text}")
        print(f"  {Fore.YELLOW}[outro]{Style.RESET_ALL} {parts['outro']}")

    if output:
        Path(output).write_text(result.script_text, encoding='utf-8')
        print(f"\n  {Fore.GREEN}✓ Saved to: {output}{Style.RESET_ALL}")
    print()
