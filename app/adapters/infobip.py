from __future__ import annotations

import json
import logging
import re
import time
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import httpx

from app.adapters.infobip_payloads import decode_inbound, decode_status, encode_outgoing
from app.errors import ChannelConfigError, TimestampParseError, UnknownStatusError
from app.types import (
    CONFIG_PASSWORD,
    CONFIG_USERNAME,
    Backend,
    Channel,
    ChannelHandler,
    ChannelLog,
    HandlerResult,
    IncomingMsg,
    MsgStatus,
    MsgStatusValue,
    OutgoingMsg,
    RouteHandler,
)
from app.utils.urns import tel_urn_for_country
from server.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Infobip delivery report group names -> internal status
STATUS_MAPPING: Mapping[str, MsgStatusValue] = MappingProxyType(
    {
        "PENDING": MsgStatusValue.SENT,
        "EXPIRED": MsgStatusValue.SENT,
        "DELIVERED": MsgStatusValue.DELIVERED,
        "REJECTED": MsgStatusValue.FAILED,
        "UNDELIVERABLE": MsgStatusValue.FAILED,
    }
)
_STATUS_NAMES = ["PENDING", "DELIVERED", "EXPIRED", "REJECTED", "UNDELIVERABLE"]

# groupId values in a send response meaning the message was accepted/queued
ACCEPTED_GROUP_IDS = frozenset({1, 3})

IGNORED_NO_MESSAGE = "ignoring request, no message"

_RECEIVED_AT_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def map_status(group_name: str) -> MsgStatusValue:
    """Translate an Infobip status group name into an internal status.

    Raises:
        UnknownStatusError: for any name outside the known vocabulary.
    """
    try:
        return STATUS_MAPPING[group_name]
    except KeyError:
        raise UnknownStatusError(group_name, _STATUS_NAMES) from None


def parse_received_at(value: str) -> datetime:
    """Parse `receivedAt` values like `2016-10-06T09:28:39.220+0000`."""
    # strptime's %f stops at microseconds
    trimmed = _LONG_FRACTION.sub(r"\1", value)
    for fmt in _RECEIVED_AT_FORMATS:
        try:
            return datetime.strptime(trimmed, fmt)
        except ValueError:
            continue
    raise TimestampParseError(value)


def _response_group_id(body: str) -> Optional[int]:
    """Pull `messages[0].status.groupId` out of a send response, if present."""
    try:
        data = json.loads(body)
        group_id = data["messages"][0]["status"]["groupId"]
    except (ValueError, KeyError, IndexError, TypeError):
        return None
    if isinstance(group_id, bool) or not isinstance(group_id, int):
        return None
    return group_id


class InfobipHandler(ChannelHandler):
    """Infobip SMS handler implementing the ChannelHandler protocol.

    Routes:
    - `receive`: inbound SMS batches pushed by Infobip
    - `delivered`: delivery reports for messages we sent

    Sending uses the "fully featured textual message" API with basic auth
    taken from the channel's `username`/`password` config, and asks Infobip
    to post delivery reports back to our `delivered` route.
    """

    channel_type = "IB"
    name = "Infobip"

    def __init__(self, backend: Backend, settings: Optional[Settings] = None) -> None:
        self.backend = backend
        self.settings = settings or get_settings()

    def routes(self) -> Dict[str, RouteHandler]:
        return {
            "receive": self.receive_message,
            "delivered": self.receive_status,
        }

    def status_url(self, channel: Channel) -> str:
        domain = channel.resolve_callback_domain(self.settings.domain)
        return f"https://{domain}/c/ib/{channel.uuid}/delivered"

    # --- Inbound ---
    def receive_message(self, channel: Channel, body: bytes) -> HandlerResult:
        """Normalize an inbound batch into messages and write them to the backend.

        Every record is validated and built before anything is written, so a
        bad `receivedAt` rejects the whole batch. Records with empty text are
        skipped; a batch with nothing left is ignored rather than rejected.
        """
        envelope = decode_inbound(body)

        if envelope.message_count == 0:
            return HandlerResult.ignore(IGNORED_NO_MESSAGE)

        msgs: List[IncomingMsg] = []
        for record in envelope.results:
            if not record.text:
                continue

            received_on = datetime.now(timezone.utc)
            if record.received_at:
                received_on = parse_received_at(record.received_at)

            msgs.append(
                IncomingMsg(
                    channel_uuid=channel.uuid,
                    urn=tel_urn_for_country(record.from_, channel.country),
                    text=record.text,
                    received_on=received_on,
                    external_id=record.message_id or None,
                )
            )

        if not msgs:
            return HandlerResult.ignore(IGNORED_NO_MESSAGE)

        for msg in msgs:
            self.backend.write_msg(msg)

        logger.info(
            "received %d message(s)", len(msgs), extra={"channel_uuid": channel.uuid}
        )
        return HandlerResult.for_msgs(msgs)

    def receive_status(self, channel: Channel, body: bytes) -> HandlerResult:
        """Record a delivery report.

        Only the first report in `results` is read; see DESIGN.md.
        """
        envelope = decode_status(body)
        report = envelope.results[0]

        status = MsgStatus(
            channel_uuid=channel.uuid,
            msg_id=report.message_id,
            status=map_status(report.status.group_name),
        )
        self.backend.write_msg_status(status)
        return HandlerResult.for_status(status)

    # --- Outbound ---
    def send_msg(self, msg: OutgoingMsg) -> MsgStatus:
        """Send `msg` through Infobip and report the outcome as a status.

        Raises ChannelConfigError when credentials are missing. Every other
        failure (network errors, HTTP errors, unexpected response bodies)
        yields an ERRORED status whose log records what went wrong. A
        response with groupId 1 (pending) or 3 (queued) yields WIRED.
        """
        channel = msg.channel
        username = channel.string_config(CONFIG_USERNAME)
        if not username:
            raise ChannelConfigError("no username set for IB channel")
        password = channel.string_config(CONFIG_PASSWORD)
        if not password:
            raise ChannelConfigError("no password set for IB channel")

        payload = encode_outgoing(
            sender=channel.address,
            to_path=msg.urn_path(),
            msg_id=msg.id,
            text=msg.text_and_attachments(),
            notify_url=self.status_url(channel),
        )
        request_body = json.dumps(payload)
        url = self.settings.ib_send_url

        log = ChannelLog(
            description="Message Sent",
            channel_uuid=channel.uuid,
            msg_id=msg.id,
            url=url,
            request=request_body,
        )
        status = self._attempt_send(log, url, request_body, (username, password))
        return MsgStatus(channel_uuid=channel.uuid, msg_id=msg.id, status=status, logs=[log])

    def _attempt_send(
        self, log: ChannelLog, url: str, request_body: str, auth: Any
    ) -> MsgStatusValue:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        started = time.monotonic()
        try:
            with httpx.Client(timeout=self.settings.ib_http_timeout) as client:
                response = client.post(url, content=request_body, headers=headers, auth=auth)
                log.response = response.text
                log.status_code = response.status_code
                response.raise_for_status()
        except httpx.HTTPError as e:
            log.with_error("Message Send Error", e)
            logger.warning(
                "Infobip send failed",
                extra={"msg_id": log.msg_id, "channel_uuid": log.channel_uuid, "error": str(e)},
            )
            return MsgStatusValue.ERRORED
        finally:
            log.elapsed_ms = int((time.monotonic() - started) * 1000)

        group_id = _response_group_id(log.response)
        if group_id not in ACCEPTED_GROUP_IDS:
            if group_id is None:
                detail = "unable to read groupId from response"
            else:
                detail = f"received error status: '{group_id}'"
            log.with_error("Message Send Error", detail)
            logger.warning(
                "Infobip rejected message",
                extra={"msg_id": log.msg_id, "channel_uuid": log.channel_uuid, "group_id": group_id},
            )
            return MsgStatusValue.ERRORED

        return MsgStatusValue.WIRED
