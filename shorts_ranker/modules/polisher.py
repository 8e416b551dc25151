"""Optional LLM rewrite of template narration scripts."""

import re
from typing import List, Optional
import logging

import requests
from anthropic import Anthropic
from openai import OpenAI

from ..config import Settings
from ..utils.audio_utils import extract_api_error_message
from ..utils.prompt_templates import get_instruct_prompt, get_polish_prompt

logger = logging.getLogger(__name__)

# Answers this short are treated as a failed generation
MIN_USABLE_LENGTH = 100

DEFAULT_MODELS = {
    "huggingface": [
        "mistralai/Mistral-7B-Instruct-v0.2",
        "HuggingFaceH4/zephyr-7b-beta",
        "google/flan-t5-large",
    ],
    "openai": ["gpt-4o-mini", "gpt-4o"],
    "claude": ["claude-sonnet-4-20250514", "claude-3-5-haiku-latest"],
}

_INSTRUCTION_TOKENS_RE = re.compile(r'</?s>|\[/?INST\]')
_PREAMBLE_RE = re.compile(r"^(?:rewritten script:|here(?:'s| is)(?:[^\n:]*(?::|\n))?)[:\s]*", re.IGNORECASE)
_OPENING_RE = re.compile(r'^(?:What|Hey|Welcome|Alright|Hi|Hello)', re.IGNORECASE)
_OPENING_SENTENCE_RE = re.compile(r'\b(?:What|Hey|Welcome|Alright|Hi|Hello)\b[^.!?]*[.!?]', re.IGNORECASE)


def clean_llm_output(text: str) -> str:
    """
    Strip instruction artifacts and chatter from a model's rewrite.

    Removes <s>/[INST] tokens and a leading "Rewritten script:" or
    "Here's ..." preamble (up to a colon or the end of its line), then drops
    anything before the first greeting-like sentence.
    """
    cleaned = _INSTRUCTION_TOKENS_RE.sub('', text).strip()
    cleaned = _PREAMBLE_RE.sub('', cleaned).strip()

    if not _OPENING_RE.match(cleaned):
        match = _OPENING_SENTENCE_RE.search(cleaned)
        if match and match.start() > 0:
            cleaned = cleaned[match.start():]

    return cleaned


class ScriptPolisher:
    """Rewrites a countdown script through a remote text-generation provider."""

    def __init__(self, settings: Settings):
        """
        Initialize the polisher.

        Args:
            settings: Application settings (provider, keys, model list, timeout)
        """
        self.settings = settings
        self.provider = settings.polish_service
        self._client = None

    @property
    def api_key(self) -> str:
        return {
            "huggingface": self.settings.huggingface_api_key,
            "openai": self.settings.openai_api_key,
            "claude": self.settings.anthropic_api_key,
        }.get(self.provider, "")

    def is_configured(self) -> bool:
        """Check whether the selected provider has a credential."""
        return bool(self.api_key)

    @property
    def models(self) -> List[str]:
        return list(self.settings.polish_models) or DEFAULT_MODELS[self.provider]

    def polish(self, script: str, topic: Optional[str] = None) -> Optional[str]:
        """
        Rewrite the script, trying each configured model in order.

        Args:
            script: Template-generated script
            topic: Optional topic for context

        Returns:
            The cleaned rewrite, or None when no credential is configured or
            every model failed or answered with fewer than 100 characters
        """
        if not self.is_configured():
            return None

        for model in self.models:
            try:
                logger.info(f"Polishing script with {self.provider} model {model}")
                text = self._generate(model, script, topic)
            except Exception as e:
                message = extract_api_error_message(e) or str(e)
                logger.warning(f"Model {model} unavailable: {message}")
                continue

            if text and len(text) > MIN_USABLE_LENGTH:
                return clean_llm_output(text)

            logger.warning(f"Model {model} returned an unusable answer ({len(text or '')} characters)")

        logger.warning("All polishing models failed, keeping template script")
        return None

    def _generate(self, model: str, script: str, topic: Optional[str]) -> Optional[str]:
        if self.provider == "huggingface":
            return self._generate_huggingface(model, script, topic)
        if self.provider == "openai":
            return self._generate_openai(model, script, topic)
        return self._generate_claude(model, script, topic)

    def _generate_huggingface(self, model: str, script: str, topic: Optional[str]) -> Optional[str]:
        response = requests.post(
            f"{self.settings.huggingface_api_url}/{model}",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "inputs": get_instruct_prompt(script, topic),
                "parameters": {
                    "max_new_tokens": 1500,
                    "temperature": 0.7,
                    "top_p": 0.9,
                    "do_sample": True,
                    "return_full_text": False,
                },
            },
            timeout=self.settings.remote_timeout,
        )
        if not response.ok:
            raise RuntimeError(f"HTTP {response.status_code}: {response.text[:200]}")

        data = response.json()
        if isinstance(data, list):
            data = data[0] if data else {}
        return data.get("generated_text") if isinstance(data, dict) else None

    def _generate_openai(self, model: str, script: str, topic: Optional[str]) -> Optional[str]:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.settings.remote_timeout)

        system_prompt, user_prompt = get_polish_prompt(script, topic)
        api_params = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if model.startswith("gpt-5") or model.startswith("o1"):
            api_params["max_completion_tokens"] = 1500
        else:
            api_params["max_tokens"] = 1500
            api_params["temperature"] = 0.7

        completion = self._client.chat.completions.create(**api_params)
        return completion.choices[0].message.content

    def _generate_claude(self, model: str, script: str, topic: Optional[str]) -> Optional[str]:
        if self._client is None:
            self._client = Anthropic(api_key=self.api_key, timeout=self.settings.remote_timeout)

        system_prompt, user_prompt = get_polish_prompt(script, topic)
        message = self._client.messages.create(
            model=model,
            max_tokens=1500,
            temperature=0.7,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return message.content[0].text
