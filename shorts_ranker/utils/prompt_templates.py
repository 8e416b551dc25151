"""LLM prompt templates for polishing countdown scripts."""

POLISH_SYSTEM_PROMPT = """You are a professional YouTube script writer.

Rewrite countdown video scripts to make them more engaging and natural-sounding while keeping the same structure and information.
Keep the same ranking order and general content, but improve the flow and add personality.

**Constraints:**
1. Keep every rank in the same order, counting down from number 5 to number 1
2. Keep one paragraph per rank, separated by blank lines, plus the intro and the outro
3. The script will be read aloud: no stage directions, headings, markdown or emojis
4. Reply with the rewritten script only
"""

POLISH_USER_PROMPT = """Rewrite the following countdown video script{topic_context}.

Original script:
{script}

Rewritten script:"""

# Single-string form for instruction-tuned models served by the HF inference API
INSTRUCT_PROMPT = """<s>[INST] You are a professional YouTube script writer. Rewrite the following countdown video script{topic_context} to make it more engaging and natural-sounding while keeping the same structure and information. Keep the same ranking order and general content, but improve the flow and add personality.

Original script:
{script}

Rewritten script: [/INST]"""


def _topic_context(topic: str = None) -> str:
    return f" about {topic}" if topic else ""


def get_polish_prompt(script: str, topic: str = None) -> tuple[str, str]:
    """
    Generate system and user prompts for chat-style providers.

    Args:
        script: Template-generated countdown script
        topic: Optional topic the clips are about

    Returns:
        Tuple of (system_prompt, user_prompt)
    """
    user_prompt = POLISH_USER_PROMPT.format(topic_context=_topic_context(topic), script=script)
    return POLISH_SYSTEM_PROMPT, user_prompt


def get_instruct_prompt(script: str, topic: str = None) -> str:
    """Generate the [INST]-wrapped prompt used for text-generation endpoints."""
    return INSTRUCT_PROMPT.format(topic_context=_topic_context(topic), script=script)
