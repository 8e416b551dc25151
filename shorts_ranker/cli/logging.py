import logging
import re

_LOG_FMT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_BLUE = '\033[94m'
_YELLOW = '\033[93m'
_RESET = '\033[0m'

# Media and script files, or anything that looks like a path
_PATH_RE = re.compile(
    r'(?:'
    r'[\w./\\-]+/[\w./\\-]+'
    r'|'
    r'\w[\w._-]*\.(?:json|mp3|mp4|wav|txt|mov|webm|mkv|log)'
    r')'
)
# Pipeline stage tags ("[NORMALIZE]") and rank labels ("rank #3")
_MARKER_RE = re.compile(r'\[[A-Z]+\]|[Rr]ank #\d')


class _ColorStreamFormatter(logging.Formatter):
    """Console formatter: paths in blue, stage tags and ranks in yellow."""
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        msg = _PATH_RE.sub(lambda m: f"{_BLUE}{m.group()}{_RESET}", msg)
        return _MARKER_RE.sub(lambda m: f"{_YELLOW}{m.group()}{_RESET}", msg)


def _install_handlers() -> None:
    file_handler = logging.FileHandler('shorts_ranker.log', delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_LOG_FMT))

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(_ColorStreamFormatter(_LOG_FMT))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(file_handler)
    root.addHandler(stream_handler)

    # SDK request chatter
    for name in ('httpx', 'httpcore', 'urllib3'):
        logging.getLogger(name).setLevel(logging.WARNING)


_install_handlers()
