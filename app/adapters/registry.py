from __future__ import annotations

from typing import Callable, Dict

from app.types import Backend, ChannelHandler
from app.adapters.infobip import InfobipHandler

HandlerFactory = Callable[[Backend], ChannelHandler]


class HandlerRegistry:
    """Registry for channel handlers by channel type code.

    Codes are matched case-insensitively so `/c/ib/...` and channels typed
    `IB` resolve to the same handler. New gateways plug in here without
    changing router or dispatch logic.
    """

    _registry: Dict[str, HandlerFactory] = {
        "ib": InfobipHandler,
    }

    @classmethod
    def get(cls, channel_type: str, backend: Backend) -> ChannelHandler:
        handler_cls = cls._registry.get(channel_type.lower())
        if handler_cls is None:
            raise KeyError(f"Unknown channel type: {channel_type}")
        return handler_cls(backend)

    @classmethod
    def register(cls, channel_type: str, handler_cls: HandlerFactory) -> None:
        cls._registry[channel_type.lower()] = handler_cls

    @classmethod
    def channel_types(cls) -> list[str]:
        return sorted(cls._registry)
