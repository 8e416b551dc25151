"""Countdown narration script generation."""

import random
from typing import Iterable, List, Optional
import logging

from ..models import NarrationItem, NarrationResult
from ..utils import narration_templates as templates
from ..utils.text_utils import clean_title, count_words, estimate_duration_seconds
from .polisher import ScriptPolisher

logger = logging.getLogger(__name__)


class NarrationGenerator:
    """Builds a spoken countdown script from ranked items."""

    def __init__(self, polisher: Optional[ScriptPolisher] = None, rng: Optional[random.Random] = None):
        """
        Initialize the generator.

        Args:
            polisher: LLM polisher used when use_llm is requested (optional)
            rng: Random source for phrase selection; inject a seeded one for
                reproducible scripts
        """
        self.polisher = polisher
        self.rng = rng or random.Random()

    def generate(
        self,
        items: Iterable[NarrationItem],
        topic: Optional[str] = None,
        style: str = "energetic",
        include_emojis: bool = True,
        use_llm: bool = False
    ) -> NarrationResult:
        """
        Generate the narration script.

        Items are narrated from rank 5 down to rank 1. The script is one
        paragraph for the intro, one per item ("<rank intro>\\n<body>") and
        one for the outro, separated by blank lines.

        Args:
            items: Ranked items to narrate
            topic: What the clips are about ("best goals"); "clips" if None
            style: energetic, casual or professional
            include_emojis: Decorate the energetic style with emoji glyphs
            use_llm: Try to rewrite the script with the configured polisher

        Returns:
            NarrationResult with the script, word count and estimated duration
        """
        ordered = sorted(items, key=lambda item: item.rank, reverse=True)
        topic_text = f" {topic}" if topic else " clips"

        paragraphs = [self._intro(topic_text, style, include_emojis)]
        for item in ordered:
            paragraphs.append(f"{self._rank_intro(item.rank, style, include_emojis)}\n{self._body(item, style)}")
        paragraphs.append(self._outro(style, include_emojis))

        script = "\n\n".join(paragraphs)
        was_polished = False

        if use_llm and self.polisher is not None and self.polisher.is_configured():
            try:
                polished = self.polisher.polish(script, topic)
            except Exception as e:
                logger.warning(f"LLM polishing failed, using template script: {e}")
                polished = None
            if polished:
                script = polished
                was_polished = True

        word_count = count_words(script)
        return NarrationResult(
            script_text=script,
            was_polished=was_polished,
            word_count=word_count,
            estimated_duration_seconds=estimate_duration_seconds(word_count),
        )

    def _pick(self, options: List):
        return options[self.rng.randrange(len(options))]

    def _intro(self, topic_text: str, style: str, include_emojis: bool) -> str:
        template, glyph = self._pick(templates.INTROS[style])
        return template.format(topic=topic_text, e=glyph if include_emojis else "")

    def _rank_intro(self, rank: int, style: str, include_emojis: bool) -> str:
        options = templates.RANK_INTROS[style].get(rank)
        if not options:
            return templates.GENERIC_RANK_INTRO.format(rank=rank)
        glyph = templates.rank_intro_glyph(style, rank) if include_emojis else ""
        return self._pick(options).format(e=glyph)

    def _body(self, item: NarrationItem, style: str) -> str:
        if item.description and item.description.strip():
            return item.description.strip()

        options = templates.DEFAULT_BODIES[style].get(item.rank)
        if not options:
            return templates.GENERIC_BODY
        return self._pick(options).format(title=clean_title(item.title_or_name))

    def _outro(self, style: str, include_emojis: bool) -> str:
        template, glyph = self._pick(templates.OUTROS[style])
        return template.format(e=glyph if include_emojis else "")
