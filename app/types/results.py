from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import MsgStatusValue
from .messages import IncomingMsg


class ChannelLogError(BaseModel):
    message: str
    detail: str = ""


class ChannelLog(BaseModel):
    """Audit record of one HTTP exchange with a gateway.

    Attached to the status produced by a send so failed attempts can be
    inspected later: what was posted, what came back, and why it was
    considered an error.
    """

    description: str
    channel_uuid: str
    msg_id: Optional[int] = None
    method: str = "POST"
    url: str = ""
    request: str = ""
    response: str = ""
    status_code: Optional[int] = None
    elapsed_ms: int = 0
    created_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    errors: List[ChannelLogError] = Field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return bool(self.errors)

    def with_error(self, message: str, err: Union[BaseException, str]) -> "ChannelLog":
        self.errors.append(ChannelLogError(message=message, detail=str(err)))
        return self


class MsgStatus(BaseModel):
    """Normalized delivery status for one message.

    Produced either by a status callback or by a send attempt. A send never
    raises for transport problems; it returns a status of ERRORED with the
    reason in `logs` instead.

    Attributes:
        channel_uuid: Channel the message belongs to.
        msg_id: Internal message id.
        status: Normalized status value.
        logs: HTTP exchanges that led to this status (send attempts only).

    Example:
        >>> MsgStatus(channel_uuid="c1", msg_id=12345, status=MsgStatusValue.WIRED)
    """

    model_config = ConfigDict(frozen=True)

    channel_uuid: str
    msg_id: int
    status: MsgStatusValue
    logs: List[ChannelLog] = Field(default_factory=list)


Event = Union[IncomingMsg, MsgStatus]


class HandlerResult(BaseModel):
    """Outcome of a webhook entry point, rendered into a response by the router.

    `events` holds the primary events for the dispatcher (the first accepted
    message, or the single status). An ignored result carries the reason in
    `ignored` and no events; it is neither a success nor an error.
    """

    events: List[Event] = Field(default_factory=list)
    msgs: List[IncomingMsg] = Field(default_factory=list)
    statuses: List[MsgStatus] = Field(default_factory=list)
    ignored: Optional[str] = None

    @property
    def is_ignored(self) -> bool:
        return self.ignored is not None

    @classmethod
    def ignore(cls, reason: str) -> "HandlerResult":
        return cls(ignored=reason)

    @classmethod
    def for_msgs(cls, msgs: List[IncomingMsg]) -> "HandlerResult":
        return cls(events=[msgs[0]], msgs=list(msgs))

    @classmethod
    def for_status(cls, status: MsgStatus) -> "HandlerResult":
        return cls(events=[status], statuses=[status])
