"""Tests for LLM script polishing."""

from unittest.mock import patch, MagicMock

import pytest

from shorts_ranker.modules.polisher import DEFAULT_MODELS, ScriptPolisher, clean_llm_output
from shorts_ranker.utils.prompt_templates import get_instruct_prompt, get_polish_prompt

LONG_ANSWER = "Welcome to the countdown! " + "These clips are amazing and you will love them. " * 4


def _response(status=200, payload=None, text=""):
    response = MagicMock()
    response.ok = status < 400
    response.status_code = status
    response.text = text
    response.json.return_value = payload
    return response


class TestCleanLlmOutput:
    """Tests for clean_llm_output."""

    def test_strips_instruction_tokens(self):
        assert clean_llm_output("<s>[INST] Welcome back! [/INST]</s>") == "Welcome back!"

    def test_strips_preamble(self):
        assert clean_llm_output("Rewritten script: Hey folks, here we go.") == "Hey folks, here we go."
        assert clean_llm_output("Here's the rewritten script:\nWelcome everyone.") == "Welcome everyone."

    def test_strips_preamble_line_without_colon(self):
        text = "Here's the rewritten script\n\nNumber five is great."
        assert clean_llm_output(text) == "Number five is great."

    def test_strips_bare_here_is(self):
        assert clean_llm_output("Here is number five, a classic.") == "number five, a classic."

    def test_drops_chatter_before_greeting(self):
        text = "Sure thing. I made it punchier. Hello everyone, let's count down!"
        assert clean_llm_output(text) == "Hello everyone, let's count down!"

    def test_leaves_plain_text(self):
        assert clean_llm_output("Number five is great.") == "Number five is great."


class TestPrompts:
    """Tests for prompt construction."""

    def test_polish_prompt_includes_script_and_topic(self):
        system, user = get_polish_prompt("SCRIPT BODY", "skate tricks")
        assert "SCRIPT BODY" in user
        assert "skate tricks" in user
        assert system

    def test_instruct_prompt_format(self):
        prompt = get_instruct_prompt("SCRIPT BODY", None)
        assert prompt.startswith("<s>[INST]")
        assert prompt.rstrip().endswith("[/INST]")
        assert "SCRIPT BODY" in prompt


class TestScriptPolisher:
    """Tests for ScriptPolisher."""

    def test_unconfigured(self, mock_settings):
        polisher = ScriptPolisher(mock_settings)

        assert polisher.is_configured() is False
        assert polisher.polish("script") is None

    def test_default_models(self, settings_factory):
        polisher = ScriptPolisher(settings_factory(polish_service="openai", openai_api_key="sk-test"))
        assert polisher.models == DEFAULT_MODELS["openai"]
        assert polisher.is_configured() is True

    def test_configured_models(self, settings_factory):
        polisher = ScriptPolisher(settings_factory(polish_models=["my/model"]))
        assert polisher.models == ["my/model"]

    @patch('shorts_ranker.modules.polisher.requests.post')
    def test_huggingface_falls_through_models(self, mock_post, settings_factory):
        mock_post.side_effect = [
            _response(503, text="Model is loading"),
            _response(200, payload=[{"generated_text": LONG_ANSWER}]),
        ]
        polisher = ScriptPolisher(settings_factory(huggingface_api_key="hf_test"))

        result = polisher.polish("template script", "goals")

        assert result == LONG_ANSWER.strip()
        assert mock_post.call_count == 2
        first_url = mock_post.call_args_list[0][0][0]
        second_url = mock_post.call_args_list[1][0][0]
        assert first_url.endswith(DEFAULT_MODELS["huggingface"][0])
        assert second_url.endswith(DEFAULT_MODELS["huggingface"][1])
        kwargs = mock_post.call_args_list[1][1]
        assert kwargs['headers']['Authorization'] == "Bearer hf_test"
        assert kwargs['json']['parameters']['max_new_tokens'] == 1500
        assert kwargs['json']['parameters']['return_full_text'] is False

    @patch('shorts_ranker.modules.polisher.requests.post')
    def test_short_answers_rejected(self, mock_post, settings_factory):
        mock_post.return_value = _response(200, payload={"generated_text": "Too short."})
        polisher = ScriptPolisher(settings_factory(huggingface_api_key="hf_test"))

        assert polisher.polish("template script") is None
        assert mock_post.call_count == len(DEFAULT_MODELS["huggingface"])

    @patch('shorts_ranker.modules.polisher.requests.post')
    def test_network_errors_are_contained(self, mock_post, settings_factory):
        mock_post.side_effect = ConnectionError("unreachable")
        polisher = ScriptPolisher(settings_factory(huggingface_api_key="hf_test"))

        assert polisher.polish("template script") is None

    @patch('shorts_ranker.modules.polisher.OpenAI')
    def test_openai(self, mock_openai_class, settings_factory):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content=LONG_ANSWER))]
        )
        mock_openai_class.return_value = mock_client
        polisher = ScriptPolisher(settings_factory(polish_service="openai", openai_api_key="sk-test"))

        result = polisher.polish("template script", "goals")

        assert result == LONG_ANSWER.strip()
        call_kwargs = mock_client.chat.completions.create.call_args[1]
        assert call_kwargs['model'] == "gpt-4o-mini"
        assert call_kwargs['max_tokens'] == 1500
        assert call_kwargs['temperature'] == 0.7
        assert call_kwargs['messages'][0]['role'] == "system"

    @patch('shorts_ranker.modules.polisher.OpenAI')
    def test_openai_reasoning_models_use_completion_tokens(self, mock_openai_class, settings_factory):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content=LONG_ANSWER))]
        )
        mock_openai_class.return_value = mock_client
        polisher = ScriptPolisher(settings_factory(
            polish_service="openai", openai_api_key="sk-test", polish_models=["gpt-5-mini"]
        ))

        polisher.polish("template script")

        call_kwargs = mock_client.chat.completions.create.call_args[1]
        assert call_kwargs['max_completion_tokens'] == 1500
        assert 'max_tokens' not in call_kwargs
        assert 'temperature' not in call_kwargs

    @patch('shorts_ranker.modules.polisher.Anthropic')
    def test_claude(self, mock_anthropic_class, settings_factory):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(content=[MagicMock(text=LONG_ANSWER)])
        mock_anthropic_class.return_value = mock_client
        polisher = ScriptPolisher(settings_factory(polish_service="claude", anthropic_api_key="sk-ant"))

        assert polisher.polish("template script") == LONG_ANSWER.strip()
        assert mock_client.messages.create.call_args[1]['max_tokens'] == 1500


def test_unknown_polish_service_rejected(settings_factory):
    with pytest.raises(Exception):
        settings_factory(polish_service="bard")
