"""Test doubles for the upstream completion provider."""

import json
from typing import Any, Callable, Optional

import httpx

from chat_proxy.app.schemas import CompletionRequest


def completion_body(content: Any) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it saw."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def sent_json(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


class FakeCompletionClient:
    """Stands in for OpenRouterClient; echoes the last user turn."""

    def __init__(
        self,
        reply: Optional[Callable[[CompletionRequest], str]] = None,
        error: Optional[Exception] = None,
    ):
        self.requests: list[CompletionRequest] = []
        self._reply = reply or (lambda request: f"reply to {request.new_user_turn.content}")
        self._error = error

    async def complete(self, request: CompletionRequest) -> str:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._reply(request)
