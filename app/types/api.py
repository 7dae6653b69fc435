from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ResponseEnvelope(BaseModel):
    """Body returned by every webhook endpoint.

    Attributes:
        message: Short summary, e.g. "Message Accepted", "Ignored" or "Error".
        data: One entry per event, info note or error.

    Examples:
        Accepted:
            {
              "message": "Message Accepted",
              "data": [{"type": "msg", "msg_uuid": "...", "text": "hello", ...}]
            }

        Ignored:
            {"message": "Ignored", "data": [{"type": "info", "info": "ignoring request, no message"}]}

        Error:
            {"message": "Error", "data": [{"type": "error", "error": "unknown status 'X', ..."}]}
    """

    message: str
    data: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def error(cls, detail: str) -> "ResponseEnvelope":
        return cls(message="Error", data=[{"type": "error", "error": detail}])
