import logging
import sys
from pathlib import Path

import click
from colorama import Fore, Style

from ...config import get_settings
from ...modules.narrator import NarrationGenerator
from ...modules.polisher import ScriptPolisher
from ...pipeline import RankerPipeline
from ...utils.exceptions import RankerError
from ..common import _load_rankings
from ..progress import ProgressDisplay

from ..app import cli

logger = logging.getLogger(__name__)


@cli.command(name='compile')
@click.argument('rankings', type=click.Path(exists=True, dir_okay=False))
@click.option('--script', 'script_file', type=click.Path(exists=True, dir_okay=False), help='Narration script file (generated when omitted)')
@click.option('--topic', '-t', default=None, help='Topic used when generating the script')
@click.option(
    '--style', '-s',
    type=click.Choice(['energetic', 'casual', 'professional']),
    default=None,
    help='Style used when generating the script'
)
@click.option('--llm', is_flag=True, default=False, help='Polish a generated script with the configured LLM provider')
@click.option(
    '--audio-mode',
    type=click.Choice(['replace', 'mix']),
    default=None,
    help='replace: narration only; mix: narration over the clips\' own audio'
)
@click.option('--overlays/--no-overlays', default=None, help='Burn "Rank #N" labels into the clips')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file path (default: output/<job>_output.mp4)')
def compile_video(rankings, script_file, topic, style, llm, audio_mode, overlays, output):
    """
    Compile five ranked clips into one narrated countdown short.

    RANKINGS: JSON file listing five clips with "path", "rank" and optional
    "title" and "description".

    Examples:

        shorts-ranker compile rankings.json --topic "best saves"

        shorts-ranker compile rankings.json --script script.txt --audio-mode mix -o short.mp4
    """
    settings = get_settings()

    try:
        clips = _load_rankings(Path(rankings))

        if script_file:
            script_text = Path(script_file).read_text(encoding='utf-8')
        else:
            generator = NarrationGenerator(polisher=ScriptPolisher(settings))
            narration = generator.generate(
                [clip.to_narration_item() for clip in clips],
                topic=topic,
                style=style or settings.default_style,
                include_emojis=False,
                use_llm=llm,
            )
            script_text = narration.script_text
            print(f"{Fore.CYAN}Generated script ({narration.word_count} words, ~{narration.estimated_duration_seconds}s){Style.RESET_ALL}\n")

        pipeline = RankerPipeline(settings)
        job = pipeline.new_job(
            script_text,
            clips,
            add_overlays=overlays,
            audio_mode=audio_mode,
            output_path=Path(output) if output else None,
        )

        print(f"{Fore.GREEN}Starting job {job.job_id}...{Style.RESET_ALL}\n")
        result = pipeline.execute(job, progress_callback=ProgressDisplay.show)

    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}Interrupted{Style.RESET_ALL}")
        sys.exit(1)
    except RankerError as e:
        print(f"\n{Fore.RED}Error ({e.kind}): {e}{Style.RESET_ALL}")
        sys.exit(1)

    if not result.success:
        print(f"\n{Fore.RED}✗ Compilation failed ({result.error_kind}): {result.error}{Style.RESET_ALL}")
        sys.exit(1)

    print(f"\n{Fore.GREEN}{'=' * 60}{Style.RESET_ALL}")
    print(f"{Fore.GREEN}✓ Video ready: {result.output_path}{Style.RESET_ALL}")
    print(f"  Resolution: {result.resolution}")
    print(f"  Duration: {result.duration:.1f}s")
    print(f"  Narration: {result.tts_backend.value if result.tts_backend else 'unknown'}")
    if result.audio_trimmed is False:
        print(f"  {Fore.YELLOW}Note: output was not trimmed to the shorter stream{Style.RESET_ALL}")
    print(f"{Fore.GREEN}{'=' * 60}{Style.RESET_ALL}\n")
