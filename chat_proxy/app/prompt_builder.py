"""Assembly of the outbound completion request."""
from __future__ import annotations

from typing import List, Optional, Sequence

from .errors import ValidationError
from .schemas import CompletionRequest, Turn

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000

SYSTEM_PROMPT = "\n".join(
    [
        "You are BeaconLight AI, developed by Muhammad Saim Hussain.",
        "- Creator: Muhammad Saim Hussain (13-year-old developer)",
        "- Skills: DevOps, Full-stack development, Automation",
        "- Education: Grade 7 at Beaconhouse School System",
        "Maintain professional tone focused on technical topics.",
    ]
)


def effective_history(
    stored: Sequence[Turn], supplied: Optional[Sequence[Turn]] = None
) -> List[Turn]:
    """Caller-supplied history wins outright when non-empty; no merging."""

    if supplied:
        return list(supplied)
    return list(stored)


def build_completion_request(
    stored_history: Sequence[Turn],
    message: Optional[str],
    *,
    model: str,
    history: Optional[Sequence[Turn]] = None,
    system_message: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> CompletionRequest:
    """Build the request sent upstream for one exchange.

    The built-in system prompt always comes first. A caller system message is
    added after it, never instead of it. Temperature and max tokens fall back
    to defaults only when omitted; supplied values are forwarded as given.
    """

    if message is None or not message.strip():
        raise ValidationError("message must be a non-empty string")

    override = None
    if system_message:
        override = Turn(role="system", content=system_message)

    return CompletionRequest(
        system_prompt=Turn(role="system", content=SYSTEM_PROMPT),
        override_system_prompt=override,
        history=effective_history(stored_history, history),
        new_user_turn=Turn(role="user", content=message),
        temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
        max_tokens=DEFAULT_MAX_TOKENS if max_tokens is None else max_tokens,
        model=model,
    )
