"""One chat exchange: history in, completion out, history updated."""
from __future__ import annotations

import enum
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Request

from .config import Settings, get_settings
from .errors import ChatProxyError, UpstreamError, ValidationError
from .identity import ClientIdentityResolver
from .openrouter_client import OpenRouterClient
from .prompt_builder import build_completion_request
from .schemas import ChatRequest, Turn
from .session_store import SessionStore

logger = logging.getLogger(__name__)


class ExchangeState(str, enum.Enum):
    RECEIVED = "received"
    IDENTITY_RESOLVED = "identity_resolved"
    HISTORY_LOADED = "history_loaded"
    REQUEST_BUILT = "request_built"
    UPSTREAM_PENDING = "upstream_pending"
    COMPLETED = "completed"
    FAILED = "failed"


class ChatService:
    """Ties the session store, request builder and upstream client together.

    Holds no per-request state; everything that outlives a request lives in
    the session store.
    """

    def __init__(
        self,
        store: SessionStore,
        client: OpenRouterClient,
        settings: Optional[Settings] = None,
    ) -> None:
        self._store = store
        self._client = client
        self._settings = settings or get_settings()

    async def handle(
        self,
        http_request: Request,
        payload: ChatRequest,
        resolver: ClientIdentityResolver,
    ) -> str:
        """Resolve the caller's identity, then run the exchange for it."""

        _log_state("-", ExchangeState.RECEIVED)
        client_id = resolver.resolve(http_request)
        return await self.exchange(client_id, payload)

    async def exchange(self, client_id: str, payload: ChatRequest) -> str:
        """Run one exchange for ``client_id`` and return the assistant text.

        Raises ValidationError or UpstreamError as-is; anything else is
        wrapped in ChatProxyError. The stored history only changes on success.
        """

        _log_state(client_id, ExchangeState.IDENTITY_RESOLVED)
        try:
            async with self._store.lock(client_id):
                stored = self._store.get(client_id)
                _log_state(client_id, ExchangeState.HISTORY_LOADED, turns=len(stored))

                request = build_completion_request(
                    stored,
                    payload.message,
                    model=self._settings.openrouter_model,
                    history=payload.history,
                    system_message=payload.system_message,
                    temperature=payload.temperature,
                    max_tokens=payload.max_tokens,
                )
                _log_state(client_id, ExchangeState.REQUEST_BUILT)

                _log_state(client_id, ExchangeState.UPSTREAM_PENDING)
                reply = await self._client.complete(request)

                self._store.replace(
                    client_id,
                    [
                        *request.history,
                        request.new_user_turn,
                        Turn(role="assistant", content=reply),
                    ],
                )
        except (ValidationError, UpstreamError) as exc:
            _log_state(client_id, ExchangeState.FAILED, error=exc.message)
            raise
        except Exception as exc:
            logger.exception("Chat exchange failed for client %s", client_id)
            _log_state(client_id, ExchangeState.FAILED, error=str(exc))
            raise ChatProxyError(str(exc)) from exc

        _log_state(client_id, ExchangeState.COMPLETED, reply_chars=len(reply))
        return reply


def _log_state(client_id: str, state: ExchangeState, **details: object) -> None:
    logger.debug("exchange client=%s state=%s %s", client_id, state.value, details or "")


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    """Return the process-wide ChatService."""

    settings = get_settings()
    store = SessionStore(
        max_sessions=settings.max_sessions,
        ttl_seconds=settings.session_ttl_seconds,
        max_history_messages=settings.max_history_messages,
    )
    return ChatService(store, OpenRouterClient(settings), settings)
