from __future__ import annotations

from enum import Enum


class MsgStatusValue(str, Enum):
    """Normalized delivery status shared by every channel handler.

    Values are the single-letter codes the message store persists. Handlers
    translate provider vocabularies onto this set; the Infobip handler only
    ever produces SENT, DELIVERED, FAILED, ERRORED and WIRED.

    - WIRED: the gateway accepted the message; delivery confirmation will
      arrive later through a status callback
    - ERRORED: the send attempt failed and may be retried by the dispatcher

    Example:
        >>> from app.types import MsgStatusValue
        >>> MsgStatusValue("D") is MsgStatusValue.DELIVERED
        True
    """

    PENDING = "P"
    QUEUED = "Q"
    SENT = "S"
    WIRED = "W"
    ERRORED = "E"
    DELIVERED = "D"
    FAILED = "F"


class ChannelType(str, Enum):
    """Channel type codes known to this service."""

    INFOBIP = "IB"
