"""Tests for outbound completion request assembly."""

import pytest

from chat_proxy.app.errors import ValidationError
from chat_proxy.app.prompt_builder import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    SYSTEM_PROMPT,
    build_completion_request,
    effective_history,
)
from chat_proxy.app.schemas import Turn

STORED = [Turn(role="user", content="Hi"), Turn(role="assistant", content="Hello!")]
SUPPLIED = [Turn(role="user", content="from client"), Turn(role="assistant", content="ok")]


def test_builtin_prompt_is_always_first():
    request = build_completion_request(STORED, "What now?", model="m")
    messages = request.messages()

    assert messages[0] == Turn(role="system", content=SYSTEM_PROMPT)
    assert messages[1:] == STORED + [Turn(role="user", content="What now?")]
    assert "BeaconLight AI" in SYSTEM_PROMPT


def test_caller_system_message_goes_second():
    request = build_completion_request(
        STORED, "What now?", model="m", system_message="Answer in French."
    )
    messages = request.messages()

    assert messages[0].content == SYSTEM_PROMPT
    assert messages[1] == Turn(role="system", content="Answer in French.")
    assert messages[2:4] == STORED


def test_supplied_history_replaces_stored_history():
    request = build_completion_request(STORED, "next", model="m", history=SUPPLIED)

    assert request.history == SUPPLIED
    assert request.messages()[1:] == SUPPLIED + [Turn(role="user", content="next")]


def test_empty_supplied_history_uses_stored():
    assert effective_history(STORED, []) == STORED
    assert effective_history(STORED, None) == STORED
    assert effective_history([], SUPPLIED) == SUPPLIED


def test_sampling_defaults():
    request = build_completion_request([], "hi", model="m")

    assert request.temperature == DEFAULT_TEMPERATURE == 0.7
    assert request.max_tokens == DEFAULT_MAX_TOKENS == 1000


@pytest.mark.parametrize("temperature,max_tokens", [(0.0, 1), (1.9, 4096), (-3.0, 0)])
def test_explicit_sampling_values_pass_through(temperature, max_tokens):
    request = build_completion_request(
        [], "hi", model="m", temperature=temperature, max_tokens=max_tokens
    )

    assert request.temperature == temperature
    assert request.max_tokens == max_tokens


def test_payload_shape():
    request = build_completion_request(STORED, "hi", model="deepseek/deepseek-r1:free")

    assert request.to_payload() == {
        "model": "deepseek/deepseek-r1:free",
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "hi"},
        ],
        "temperature": 0.7,
        "max_tokens": 1000,
    }


@pytest.mark.parametrize("message", [None, "", "   \n"])
def test_missing_message_is_rejected(message):
    with pytest.raises(ValidationError, match="message"):
        build_completion_request(STORED, message, model="m")
