from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import ChannelType

CONFIG_USERNAME = "username"
CONFIG_PASSWORD = "password"


class Channel(BaseModel):
    """A configured gateway channel as handed to handlers by the dispatcher.

    Attributes:
        uuid: Identifier used in callback URLs (`/c/<type>/<uuid>/<action>`).
        channel_type: Code of the gateway this channel talks to.
        address: The channel's own phone number or sender id.
        country: ISO-3166 alpha-2 code used to normalize local numbers.
        callback_domain: Public host the gateway should call back, if it
            differs from the server's default domain.
        config: Free-form string settings, e.g. gateway credentials.

    Example:
        >>> Channel(uuid="8eb2...", address="2020", country="NG",
        ...         config={"username": "user", "password": "secret"})
    """

    model_config = ConfigDict(frozen=True)

    uuid: str
    channel_type: ChannelType = ChannelType.INFOBIP
    address: str = ""
    country: str = ""
    callback_domain: Optional[str] = None
    config: Dict[str, str] = Field(default_factory=dict)

    def string_config(self, key: str, default: str = "") -> str:
        value = self.config.get(key)
        if value is None:
            return default
        return str(value)

    def resolve_callback_domain(self, fallback: str) -> str:
        """Return the channel's callback domain, or `fallback` when unset."""
        return self.callback_domain or fallback
