from colorama import Fore, Style

from .logging import _PATH_RE, _BLUE, _RESET


class ProgressDisplay:
    """Display pipeline progress updates with colors."""

    STAGE_COLORS = {
        'SORT': Fore.CYAN,
        'NORMALIZE': Fore.BLUE,
        'OVERLAY': Fore.MAGENTA,
        'CONCAT': Fore.CYAN,
        'NARRATE': Fore.YELLOW,
        'COMPOSE': Fore.GREEN,
        'PROBE': Fore.WHITE,
        'COMPLETE': Fore.GREEN,
    }

    @staticmethod
    def show(stage: str, message: str):
        """Show progress message."""
        color = ProgressDisplay.STAGE_COLORS.get(stage, Fore.WHITE)
        message = _PATH_RE.sub(lambda m: f"{_BLUE}{m.group()}{_RESET}", message)
        print(f"{color}[{stage}]{Style.RESET_ALL} {message}")
