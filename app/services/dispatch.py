"""Outbound dispatch: hand a send request to its channel's handler."""

from __future__ import annotations

import logging

from app.adapters.registry import HandlerRegistry
from app.types import Backend, MsgStatus, OutgoingMsg

logger = logging.getLogger(__name__)


def send_outgoing(msg: OutgoingMsg, backend: Backend) -> MsgStatus:
    """Send `msg` once and persist the resulting status and its logs.

    Configuration errors from the handler propagate; no status is written
    for them since nothing was attempted.
    """
    handler = HandlerRegistry.get(msg.channel.channel_type.value, backend)
    status = handler.send_msg(msg)

    backend.write_msg_status(status)
    if status.logs:
        backend.write_channel_logs(status.logs)

    logger.info(
        "sent message",
        extra={"msg_id": msg.id, "channel_uuid": msg.channel.uuid, "status": status.status.value},
    )
    return status
