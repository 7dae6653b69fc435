from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .channel import Channel


class IncomingMsg(BaseModel):
    """A normalized message received from a gateway.

    Handlers build one per accepted inbound record and hand it straight to
    the backend; nothing mutates it afterwards.

    Attributes:
        uuid: Internal identifier assigned on creation.
        channel_uuid: Channel the message arrived on.
        urn: Sender address as a scheme-qualified URN, e.g. `tel:+2348067886565`.
        text: Message body.
        received_on: When the gateway received the message (timezone aware).
        external_id: Provider's identifier for the message, when given.

    Example:
        >>> IncomingMsg(channel_uuid="c1", urn="tel:+385916242493", text="hello",
        ...             received_on=datetime.now(timezone.utc))
    """

    model_config = ConfigDict(frozen=True)

    uuid: str = Field(default_factory=lambda: str(uuid4()))
    channel_uuid: str
    urn: str
    text: str
    received_on: datetime
    external_id: Optional[str] = None


class OutgoingMsg(BaseModel):
    """An internal send request, read-only to channel handlers.

    Fields:
        id: Internal message id; echoed to the gateway so status callbacks
            can be matched back.
        channel: Channel to send through (address, credentials, callback domain).
        urn: Destination URN, e.g. `tel:+15551234567`.
        text: Body text.
        attachments: Optional `content-type:url` strings.

    Example:
        >>> OutgoingMsg(id=10, channel=channel, urn="tel:+15551234567", text="Hi")
    """

    model_config = ConfigDict(frozen=True)

    id: int
    channel: Channel
    urn: str
    text: str = ""
    attachments: List[str] = Field(default_factory=list)

    @field_validator("urn")
    @classmethod
    def _validate_urn(cls, v: str) -> str:
        if ":" not in v:
            raise ValueError("urn must be scheme qualified, e.g. tel:+15551234567")
        return v

    def urn_path(self) -> str:
        """Return the URN without its scheme (`tel:+1555` -> `+1555`)."""
        return self.urn.split(":", 1)[1]

    def text_and_attachments(self) -> str:
        """Body text followed by attachment URLs, one per line.

        SMS gateways cannot carry media, so attachments travel as links.
        """
        parts: List[str] = []
        if self.text:
            parts.append(self.text)
        for attachment in self.attachments:
            # "image/jpeg:https://..." -> "https://..."
            _, sep, url = attachment.partition(":")
            parts.append(url if sep and not url.startswith("//") else attachment)
        return "\n".join(parts)
