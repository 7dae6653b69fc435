"""Infobip wire formats.

Inbound message batch (receive webhook):

    {
      "results": [
        {
          "messageId": "817790313235066447",
          "from": "385916242493",
          "to": "385921004026",
          "text": "QUIZ Correct answer is Paris",
          "cleanText": "Correct answer is Paris",
          "keyword": "QUIZ",
          "receivedAt": "2016-10-06T09:28:39.220+0000",
          "smsCount": 1,
          "price": {"pricePerMessage": 0, "currency": "EUR"},
          "callbackData": "callbackData"
        }
      ],
      "messageCount": 1,
      "pendingMessageCount": 0
    }

Delivery report (delivered webhook):

    {"results": [{"messageId": 12345, "status": {"groupName": "DELIVERED"}}]}

Outbound send (https://dev.infobip.com/docs/fully-featured-textual-message):

    {
      "messages": [
        {
          "from": "InfoSMS",
          "destinations": [{"to": "41793026727", "messageId": "MESSAGE-ID-123-xyz"}],
          "text": "...",
          "intermediateReport": true,
          "notifyUrl": "http://www.example.com/sms/advanced",
          "notifyContentType": "application/json"
        }
      ]
    }
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from app.errors import PayloadParseError, PayloadValidationError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Inbound messages ---
class InboundMessage(_Payload):
    message_id: Optional[str] = Field(default=None, alias="messageId")
    from_: str = Field(alias="from", min_length=1)
    text: str = ""
    received_at: Optional[str] = Field(default=None, alias="receivedAt")

    @field_validator("message_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("text", mode="before")
    @classmethod
    def _null_text(cls, v: Any) -> Any:
        return "" if v is None else v


class InboundEnvelope(_Payload):
    message_count: int = Field(default=0, alias="messageCount")
    pending_message_count: int = Field(default=0, alias="pendingMessageCount")
    results: List[InboundMessage]


# --- Delivery reports ---
class ReportStatus(_Payload):
    group_name: str = Field(alias="groupName", min_length=1)


class StatusReport(_Payload):
    message_id: int = Field(alias="messageId", strict=True)
    status: ReportStatus

    @field_validator("message_id")
    @classmethod
    def _nonzero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("messageId is required")
        return v


class StatusEnvelope(_Payload):
    results: List[StatusReport] = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _first_report_only(cls, data: Any) -> Any:
        # only the head of the batch is consulted, so only it is validated
        if isinstance(data, dict) and isinstance(data.get("results"), list):
            data = {**data, "results": data["results"][:1]}
        return data


# --- Outbound ---
class Destination(_Payload):
    to: str
    message_id: str = Field(alias="messageId")


class OutgoingMessage(_Payload):
    from_: str = Field(alias="from")
    destinations: List[Destination]
    text: str
    notify_content_type: str = Field(default="application/json", alias="notifyContentType")
    intermediate_report: bool = Field(default=True, alias="intermediateReport")
    notify_url: str = Field(alias="notifyUrl")


class OutgoingEnvelope(_Payload):
    messages: List[OutgoingMessage]

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _describe(exc: ValidationError) -> str:
    fields = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        fields.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "invalid request body: " + "; ".join(fields)


def decode_and_validate(model: Type[PayloadT], body: Union[bytes, str]) -> PayloadT:
    """Parse a JSON body and validate it against `model`.

    Raises:
        PayloadParseError: the body is not JSON (or not a JSON object).
        PayloadValidationError: required fields are missing or malformed.
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise PayloadParseError(f"unable to parse request JSON: {e}") from e
    if not isinstance(data, dict):
        raise PayloadParseError("unable to parse request JSON: expected an object")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PayloadValidationError(_describe(e), errors=e.errors(include_url=False)) from e


def decode_inbound(body: Union[bytes, str]) -> InboundEnvelope:
    return decode_and_validate(InboundEnvelope, body)


def decode_status(body: Union[bytes, str]) -> StatusEnvelope:
    return decode_and_validate(StatusEnvelope, body)


def encode_outgoing(
    *, sender: str, to_path: str, msg_id: int, text: str, notify_url: str
) -> Dict[str, Any]:
    """Build the advanced-send JSON body for a single destination.

    The destination is sent without its leading "+"; the internal message id
    is echoed as `messageId` so delivery reports can be matched back.
    """
    envelope = OutgoingEnvelope(
        messages=[
            OutgoingMessage(
                from_=sender,
                destinations=[Destination(to=to_path.lstrip("+"), message_id=str(msg_id))],
                text=text,
                notify_content_type="application/json",
                intermediate_report=True,
                notify_url=notify_url,
            )
        ]
    )
    return envelope.to_wire()
