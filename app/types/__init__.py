"""Core types for the channel bridge.

This package centralizes all enums, message models, handler protocols, and
result/event schemas in one place to keep the codebase discoverable and
maintainable. Most modules should import types from here rather than directly
from submodules.

Usage:
    from app.types import OutgoingMsg, MsgStatus, MsgStatusValue
"""

from .api import ResponseEnvelope
from .channel import CONFIG_PASSWORD, CONFIG_USERNAME, Channel
from .enums import ChannelType, MsgStatusValue
from .events import msg_event, result_events, status_event
from .messages import IncomingMsg, OutgoingMsg
from .protocols import Backend, ChannelHandler, RouteHandler
from .results import ChannelLog, ChannelLogError, Event, HandlerResult, MsgStatus

__all__ = [
    "Backend",
    "CONFIG_PASSWORD",
    "CONFIG_USERNAME",
    "Channel",
    "ChannelHandler",
    "ChannelLog",
    "ChannelLogError",
    "ChannelType",
    "Event",
    "HandlerResult",
    "IncomingMsg",
    "MsgStatus",
    "MsgStatusValue",
    "OutgoingMsg",
    "ResponseEnvelope",
    "RouteHandler",
    "msg_event",
    "result_events",
    "status_event",
]
