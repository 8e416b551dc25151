import click
from colorama import init as colorama_init

from .. import __version__
from . import logging as _logging  # noqa: F401

# Initialize colorama for cross-platform colored output
colorama_init()


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    Shorts Ranker - Countdown Shorts from Five Ranked Clips

    Rank five clips, get a narrated vertical countdown video.
    """
    pass


from .commands import check as _check  # noqa: E402,F401
from .commands import compile as _compile  # noqa: E402,F401
from .commands import probe as _probe  # noqa: E402,F401
from .commands import script as _script  # noqa: E402,F401
from .commands import tts as _tts  # noqa: E402,F401
from .commands import voices as _voices  # noqa: E402,F401
