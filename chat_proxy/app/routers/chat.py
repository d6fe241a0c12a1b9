from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..chat_service import ChatService, get_chat_service
from ..config import Settings, get_settings
from ..errors import ChatProxyError, ValidationError
from ..identity import ClientIdentityResolver, get_client_resolver
from .. import schemas

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)

FRIENDLY_ERROR = "Sorry, I'm experiencing technical difficulties. Please try again later."


@router.post(
    "/chat",
    response_model=schemas.ChatResponse,
    responses={
        400: {"model": schemas.ErrorResponse},
        500: {"model": schemas.ErrorResponse},
    },
)
async def chat(
    payload: schemas.ChatRequest,
    request: Request,
    service: ChatService = Depends(get_chat_service),
    settings: Settings = Depends(get_settings),
    resolver: ClientIdentityResolver = Depends(get_client_resolver),
):
    try:
        content = await service.handle(request, payload, resolver)
    except ValidationError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.message, settings)
    except ChatProxyError as exc:
        logger.error("Chat request failed: %s", exc.message)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, FRIENDLY_ERROR, exc.message, settings
        )
    return schemas.ChatResponse(content=content)


def error_response(
    status_code: int, message: str, debug: Optional[str], settings: Settings
) -> JSONResponse:
    body = schemas.ErrorResponse(
        error=message, debug=debug if settings.is_development else None
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())
