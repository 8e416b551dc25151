"""Text helpers for narration scripts."""

import re
from typing import Dict, List, Optional

# Speaking rate used for every duration estimate
WORDS_PER_MINUTE = 150

_SENTENCE_BOUNDARY_RE = re.compile(r'(?<=[.!?])\s+')
_EXTENSION_RE = re.compile(r'\.[^/.]+$')
_SEPARATOR_RE = re.compile(r'[-_]')

_ORDINAL_WORDS = {
    'first': 1, 'one': 1,
    'second': 2, 'two': 2,
    'third': 3, 'three': 3,
    'fourth': 4, 'four': 4,
    'fifth': 5, 'five': 5,
}
_RANK_PATTERNS = [
    re.compile(r'number\s*(\d)', re.IGNORECASE),
    re.compile(r'#(\d)'),
    re.compile(r'position\s*(\d)', re.IGNORECASE),
    re.compile(r'(\d)\s*spot', re.IGNORECASE),
    re.compile(r'\b(?:at|in)\s+(\d)\b', re.IGNORECASE),
    re.compile(r'\b(?:position|number|in|at)\s+(first|second|third|fourth|fifth|one|two|three|four|five)\b', re.IGNORECASE),
    re.compile(r'\b(first|second|third|fourth|fifth)\s+(?:position|place|entry|selection)\b', re.IGNORECASE),
]


def count_words(text: str) -> int:
    """Whitespace-delimited token count."""
    return len(text.split())


def estimate_duration_seconds(word_count: int, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """ceil(word_count / wpm * 60), computed in integers so 250 words is exactly 100s."""
    return -(-word_count * 60 // words_per_minute)


def clean_title(title: str) -> str:
    """Turn a file name like "epic_goal-final.mp4" into "epic goal final"."""
    return _SEPARATOR_RE.sub(' ', _EXTENSION_RE.sub('', title)).strip()


def split_sentences(text: str) -> List[str]:
    """Split text into sentences at terminal punctuation."""
    return [s.strip() for s in _SENTENCE_BOUNDARY_RE.split(text) if s.strip()]


def split_text_into_chunks(text: str, max_chars: int) -> List[str]:
    """
    Split text into chunks of at most max_chars characters.

    Chunks break at sentence boundaries; a single sentence longer than
    max_chars is broken at word boundaries instead. A single word longer
    than max_chars becomes its own (oversized) chunk.

    Args:
        text: Text to split
        max_chars: Maximum characters per chunk

    Returns:
        Ordered list of chunks
    """
    if len(text) <= max_chars:
        return [text]

    chunks = []
    current = ""

    for sentence in split_sentences(text):
        if len(current) + len(sentence) + (1 if current else 0) <= max_chars:
            current = f"{current} {sentence}" if current else sentence
            continue

        if current:
            chunks.append(current)
            current = ""

        if len(sentence) <= max_chars:
            current = sentence
            continue

        # Sentence is too long on its own: fall back to word boundaries
        for word in sentence.split():
            if len(current) + len(word) + (1 if current else 0) <= max_chars:
                current = f"{current} {word}" if current else word
            else:
                if current:
                    chunks.append(current)
                current = word

    if current:
        chunks.append(current)

    return chunks


def _detect_rank(paragraph: str) -> Optional[int]:
    for pattern in _RANK_PATTERNS:
        match = pattern.search(paragraph)
        if not match:
            continue
        token = match.group(1).lower()
        rank = _ORDINAL_WORDS.get(token) or (int(token) if token.isdigit() else None)
        if rank and 1 <= rank <= 5:
            return rank
    return None


def split_script_by_rank(script: str) -> Dict:
    """
    Split a countdown script into intro, per-rank sections and outro.

    Paragraphs are separated by blank lines. The first paragraph is the
    intro, the last the outro; paragraphs in between are kept when a rank
    1-5 can be detected in them.

    Returns:
        Dictionary with:
            - intro: First paragraph
            - ranks: List of {'rank': int, 'text': str}
            - outro: Last paragraph
    """
    paragraphs = [p.strip() for p in script.split('\n\n') if p.strip()]
    if not paragraphs:
        return {'intro': "", 'ranks': [], 'outro': ""}

    ranks = []
    for paragraph in paragraphs[1:-1]:
        rank = _detect_rank(paragraph)
        if rank is not None:
            ranks.append({'rank': rank, 'text': paragraph})

    return {
        'intro': paragraphs[0],
        'ranks': ranks,
        'outro': paragraphs[-1],
    }
