from __future__ import annotations

from typing import Any, Dict, List

from .messages import IncomingMsg
from .results import HandlerResult, MsgStatus


def msg_event(msg: IncomingMsg) -> Dict[str, Any]:
    """Serialize an accepted inbound message for webhook acknowledgements."""
    return {
        "type": "msg",
        "channel_uuid": msg.channel_uuid,
        "msg_uuid": msg.uuid,
        "text": msg.text,
        "urn": msg.urn,
        "external_id": msg.external_id,
        "received_on": msg.received_on.isoformat(),
    }


def status_event(status: MsgStatus) -> Dict[str, Any]:
    """Serialize a status update for webhook acknowledgements."""
    return {
        "type": "status",
        "channel_uuid": status.channel_uuid,
        "status": status.status.value,
        "msg_id": status.msg_id,
    }


def result_events(result: HandlerResult) -> List[Dict[str, Any]]:
    """Return the response `data` entries for a handler result.

    Message results list every accepted message, not just the primary event.
    """
    if result.is_ignored:
        return [{"type": "info", "info": result.ignored}]
    if result.msgs:
        return [msg_event(m) for m in result.msgs]
    return [status_event(s) for s in result.statuses]
