import click
from colorama import Fore, Style

from ...utils.video_utils import probe_media

from ..app import cli


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def probe(file):
    """
    Show the properties ffprobe reports for a media file.
    """
    props = probe_media(file)

    print(f"\n{Fore.CYAN}Media Properties:{Style.RESET_ALL}\n")
    print(f"Resolution: {props.resolution}")
    print(f"Duration: {props.duration_seconds:.2f}s")
    print(f"Frame rate: {props.frame_rate:.2f} fps")
    print(f"Codec: {props.codec_name}")
    print(f"Audio track: {'yes' if props.has_audio_track else 'no'}")
    print()
