"""Simple in-memory backend for local runs and tests.

Stores channels, received messages, statuses and channel logs in process
memory. A production deployment swaps this for a real message store that
implements the same `Backend` protocol.
"""

from __future__ import annotations

import json
import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from app.types import Channel, ChannelLog, IncomingMsg, MsgStatus
from server.config import get_settings

logger = logging.getLogger(__name__)


class MemoryBackend:
    def __init__(self, channels: Iterable[Channel] = ()) -> None:
        self._lock = threading.Lock()
        self._channels: Dict[Tuple[str, str], Channel] = {}
        self.msgs: List[IncomingMsg] = []
        self.statuses: List[MsgStatus] = []
        self.channel_logs: List[ChannelLog] = []
        for channel in channels:
            self.add_channel(channel)

    @classmethod
    def from_file(cls, path: str) -> "MemoryBackend":
        """Build a backend seeded with the channels listed in a JSON file."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        channels = [Channel.model_validate(item) for item in raw]
        logger.info("loaded %d channel(s) from %s", len(channels), path)
        return cls(channels)

    def add_channel(self, channel: Channel) -> None:
        with self._lock:
            self._channels[(channel.channel_type.value.lower(), channel.uuid)] = channel

    def get_channel(self, channel_type: str, uuid: str) -> Optional[Channel]:
        with self._lock:
            return self._channels.get((channel_type.lower(), uuid))

    def write_msg(self, msg: IncomingMsg) -> None:
        with self._lock:
            self.msgs.append(msg)

    def write_msg_status(self, status: MsgStatus) -> None:
        with self._lock:
            self.statuses.append(status)

    def write_channel_logs(self, logs: Iterable[ChannelLog]) -> None:
        with self._lock:
            self.channel_logs.extend(logs)


@lru_cache(maxsize=1)
def get_backend() -> MemoryBackend:
    """Get the process-wide backend, seeded from CHANNELS_FILE when set."""
    settings = get_settings()
    if settings.channels_file:
        return MemoryBackend.from_file(settings.channels_file)
    return MemoryBackend()
