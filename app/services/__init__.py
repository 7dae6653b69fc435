"""Services package for the channel bridge."""

from .backend import MemoryBackend, get_backend
from .dispatch import send_outgoing

__all__ = [
    "MemoryBackend",
    "get_backend",
    "send_outgoing",
]
