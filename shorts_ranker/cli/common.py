import json
import logging
from pathlib import Path
from typing import List

from ..models import RankedClip
from ..utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _load_rankings(filepath: Path) -> List[RankedClip]:
    """
    Load ranked clips from a JSON file.

    Accepts either a list of entries or {"videos": [...]}. Each entry has
    "path" and "rank", plus optional "title" and "description". Relative
    paths resolve against the JSON file's directory.

    Raises:
        ValidationError: Malformed file or entry
    """
    filepath = Path(filepath)
    try:
        data = json.loads(filepath.read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Could not read rankings from {filepath}: {e}")

    if isinstance(data, dict):
        data = data.get('videos')
    if not isinstance(data, list):
        raise ValidationError("Rankings file must hold a list of videos or an object with a 'videos' list")

    clips = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or 'path' not in entry or 'rank' not in entry:
            raise ValidationError(f"Entry {i + 1} needs 'path' and 'rank'")
        try:
            rank = int(entry['rank'])
        except (TypeError, ValueError):
            raise ValidationError(f"Entry {i + 1} has a non-numeric rank: {entry['rank']!r}")

        path = Path(entry['path']).expanduser()
        if not path.is_absolute():
            path = filepath.parent / path

        clips.append(RankedClip(
            source_path=path,
            rank=rank,
            description=entry.get('description') or None,
            title=entry.get('title') or None,
        ))

    return clips
