"""Pydantic schemas shared across the chat proxy."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]


class Turn(BaseModel):
    """One message in a conversation."""

    role: Role
    content: str

    class Config:
        frozen = True


class ChatRequest(BaseModel):
    message: Optional[str] = None
    history: List[Turn] = Field(default_factory=list)
    system_message: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class ChatResponse(BaseModel):
    content: str


class ErrorResponse(BaseModel):
    error: str
    debug: Optional[str] = None


class CompletionRequest(BaseModel):
    """Outbound request to the completion provider, rebuilt per exchange."""

    system_prompt: Turn
    override_system_prompt: Optional[Turn] = None
    history: List[Turn] = Field(default_factory=list)
    new_user_turn: Turn
    temperature: float
    max_tokens: int
    model: str

    class Config:
        frozen = True

    def messages(self) -> List[Turn]:
        messages = [self.system_prompt]
        if self.override_system_prompt is not None:
            messages.append(self.override_system_prompt)
        messages.extend(self.history)
        messages.append(self.new_user_turn)
        return messages

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [turn.model_dump() for turn in self.messages()],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
