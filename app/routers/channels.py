from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.adapters.registry import HandlerRegistry
from app.services.backend import get_backend
from app.types import Backend, HandlerResult, ResponseEnvelope, result_events

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/c", tags=["channels"])


def _render(result: HandlerResult) -> JSONResponse:
    if result.is_ignored:
        message = "Ignored"
    elif result.msgs:
        message = "Message Accepted"
    else:
        message = "Status Update Accepted"
    envelope = ResponseEnvelope(message=message, data=result_events(result))
    return JSONResponse(envelope.model_dump(), status_code=200)


@router.post("/{channel_type}/{channel_uuid}/{action}")
async def channel_webhook(
    channel_type: str,
    channel_uuid: str,
    action: str,
    request: Request,
    backend: Backend = Depends(get_backend),
) -> JSONResponse:
    """Generic webhook entry point for every channel type.

    - Resolves the handler registered for `channel_type`
    - Loads the channel by uuid from the backend
    - Dispatches the raw body to the handler's route for `action`

    Handler errors (`ChannelError`) are turned into 400 responses by the
    exception handlers registered on the app.
    """
    try:
        handler = HandlerRegistry.get(channel_type, backend)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"unknown channel type: {channel_type}")

    route = handler.routes().get(action)
    if route is None:
        raise HTTPException(status_code=404, detail=f"unknown action: {action}")

    channel = backend.get_channel(channel_type, channel_uuid)
    if channel is None:
        raise HTTPException(status_code=404, detail=f"channel not found: {channel_uuid}")

    body = await request.body()
    logger.debug("webhook received", extra={"channel_uuid": channel_uuid, "action": action})

    result = await run_in_threadpool(route, channel, body)
    if result.is_ignored:
        logger.info("webhook ignored", extra={"channel_uuid": channel_uuid, "reason": result.ignored})
    return _render(result)
