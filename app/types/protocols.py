from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional, Protocol

from .channel import Channel
from .messages import IncomingMsg, OutgoingMsg
from .results import ChannelLog, HandlerResult, MsgStatus

RouteHandler = Callable[[Channel, bytes], HandlerResult]


class Backend(Protocol):
    """Persistence collaborator used by channel handlers.

    Implementations own storage of messages, statuses and channel logs, and
    look up configured channels. Handlers never retry or swallow backend
    errors; whatever a backend raises reaches the dispatcher unchanged.
    """

    def get_channel(self, channel_type: str, uuid: str) -> Optional[Channel]:
        """Return the channel with this type and uuid, or None."""
        ...

    def write_msg(self, msg: IncomingMsg) -> None:
        ...

    def write_msg_status(self, status: MsgStatus) -> None:
        ...

    def write_channel_logs(self, logs: Iterable[ChannelLog]) -> None:
        ...


class ChannelHandler(Protocol):
    """Protocol for gateway channel handlers.

    Concrete implementations encapsulate one gateway's wire formats so the
    router and dispatcher remain gateway-agnostic.

    Responsibilities:
        - Publish the webhook actions they serve via `routes()`
        - Normalize inbound webhook bodies into messages and statuses
        - Translate an `OutgoingMsg` into a gateway call and report the
          outcome as a `MsgStatus`

    Minimal example:
        >>> class EchoHandler(ChannelHandler):
        ...     channel_type = "EX"
        ...     name = "Example"
        ...     def __init__(self, backend: Backend) -> None:
        ...         self.backend = backend
        ...     def routes(self) -> Dict[str, RouteHandler]:
        ...         return {}
        ...     def send_msg(self, msg: OutgoingMsg) -> MsgStatus:
        ...         return MsgStatus(channel_uuid=msg.channel.uuid, msg_id=msg.id,
        ...                          status=MsgStatusValue.WIRED)
    """

    channel_type: str
    name: str

    def routes(self) -> Dict[str, RouteHandler]:
        """Map webhook action names (e.g. "receive") to entry points."""
        ...

    def send_msg(self, msg: OutgoingMsg) -> MsgStatus:
        """Send an outbound message.

        Implementations raise only for problems with the request itself
        (e.g. missing credentials); transport failures are reported through
        the returned status.
        """
        ...
