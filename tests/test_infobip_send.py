from __future__ import annotations

import base64
import json

import httpx
import pytest
import respx

from app.adapters.infobip import InfobipHandler
from app.errors import ChannelConfigError
from app.types import Channel, MsgStatusValue, OutgoingMsg
from tests.fixtures.infobip_events import CHANNEL_UUID, SEND_URL, send_response


def outgoing(channel: Channel, **kwargs) -> OutgoingMsg:
    fields = {"id": 10, "channel": channel, "urn": "tel:+15551234567", "text": "Simple Message"}
    fields.update(kwargs)
    return OutgoingMsg(**fields)


@respx.mock
def test_send_wired_on_pending(handler: InfobipHandler, channel: Channel) -> None:
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(1)))

    status = handler.send_msg(outgoing(channel))

    assert route.called
    assert status.status is MsgStatusValue.WIRED
    assert status.msg_id == 10
    assert status.channel_uuid == CHANNEL_UUID
    assert len(status.logs) == 1
    assert not status.logs[0].is_error


@respx.mock
def test_send_request_shape(handler: InfobipHandler, channel: Channel) -> None:
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(3)))

    handler.send_msg(outgoing(channel))

    request = route.calls.last.request
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"
    expected_auth = base64.b64encode(b"user1:pass1").decode()
    assert request.headers["Authorization"] == f"Basic {expected_auth}"

    assert json.loads(request.content.decode()) == {
        "messages": [
            {
                "from": "2020",
                "destinations": [{"to": "15551234567", "messageId": "10"}],
                "text": "Simple Message",
                "notifyContentType": "application/json",
                "intermediateReport": True,
                "notifyUrl": f"https://courier.example.com/c/ib/{CHANNEL_UUID}/delivered",
            }
        ]
    }


@respx.mock
def test_send_uses_channel_callback_domain(handler: InfobipHandler, channel: Channel) -> None:
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(1)))
    custom = channel.model_copy(update={"callback_domain": "hooks.example.org"})

    handler.send_msg(outgoing(custom))

    sent = json.loads(route.calls.last.request.content.decode())
    assert sent["messages"][0]["notifyUrl"] == f"https://hooks.example.org/c/ib/{CHANNEL_UUID}/delivered"


@respx.mock
def test_send_appends_attachment_urls(handler: InfobipHandler, channel: Channel) -> None:
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(1)))

    handler.send_msg(
        outgoing(channel, text="My pic!", attachments=["image/jpeg:https://foo.bar/image.jpg"])
    )

    sent = json.loads(route.calls.last.request.content.decode())
    assert sent["messages"][0]["text"] == "My pic!\nhttps://foo.bar/image.jpg"


@pytest.mark.parametrize("group_id", [0, 2, 4, 5])
@respx.mock
def test_send_errored_on_other_group_ids(handler: InfobipHandler, channel: Channel, group_id) -> None:
    respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(group_id)))

    status = handler.send_msg(outgoing(channel))

    assert status.status is MsgStatusValue.ERRORED
    log = status.logs[0]
    assert log.is_error
    assert log.errors[0].message == "Message Send Error"
    assert log.errors[0].detail == f"received error status: '{group_id}'"


@pytest.mark.parametrize("group_id", ["1", None])
@respx.mock
def test_send_errored_on_missing_group_id(handler: InfobipHandler, channel: Channel, group_id) -> None:
    respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(group_id)))

    status = handler.send_msg(outgoing(channel))

    assert status.status is MsgStatusValue.ERRORED
    assert status.logs[0].errors[0].detail == "unable to read groupId from response"


@respx.mock
def test_send_errored_on_unparsable_body(handler: InfobipHandler, channel: Channel) -> None:
    respx.post(SEND_URL).mock(return_value=httpx.Response(200, text="I am not json"))

    status = handler.send_msg(outgoing(channel))

    assert status.status is MsgStatusValue.ERRORED
    assert status.logs[0].response == "I am not json"
    assert status.logs[0].is_error
    assert status.logs[0].errors[0].detail == "unable to read groupId from response"


@respx.mock
def test_send_errored_on_http_error(handler: InfobipHandler, channel: Channel) -> None:
    respx.post(SEND_URL).mock(
        return_value=httpx.Response(401, json={"requestError": {"serviceException": {"text": "Invalid login"}}})
    )

    status = handler.send_msg(outgoing(channel))

    assert status.status is MsgStatusValue.ERRORED
    log = status.logs[0]
    assert log.status_code == 401
    assert "Invalid login" in log.response
    assert log.is_error


@respx.mock
def test_send_errored_on_transport_error(handler: InfobipHandler, channel: Channel) -> None:
    respx.post(SEND_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    status = handler.send_msg(outgoing(channel))

    assert status.status is MsgStatusValue.ERRORED
    log = status.logs[0]
    assert log.status_code is None
    assert "connection refused" in log.errors[0].detail
    assert json.loads(log.request)["messages"][0]["destinations"][0]["to"] == "15551234567"


@respx.mock
def test_send_errored_on_timeout(handler: InfobipHandler, channel: Channel) -> None:
    respx.post(SEND_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    status = handler.send_msg(outgoing(channel))

    assert status.status is MsgStatusValue.ERRORED


@pytest.mark.parametrize(
    "config, error",
    [
        ({"password": "pass1"}, "no username set for IB channel"),
        ({"username": "", "password": "pass1"}, "no username set for IB channel"),
        ({"username": "user1"}, "no password set for IB channel"),
        ({"username": "user1", "password": ""}, "no password set for IB channel"),
    ],
)
@respx.mock
def test_send_requires_credentials(handler: InfobipHandler, channel: Channel, config, error) -> None:
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(200, json=send_response(1)))
    unconfigured = channel.model_copy(update={"config": config})

    with pytest.raises(ChannelConfigError, match=error):
        handler.send_msg(outgoing(unconfigured))

    assert not route.called


def test_destination_without_plus(channel: Channel) -> None:
    msg = outgoing(channel, urn="tel:+2348067886565")
    assert msg.urn_path() == "+2348067886565"


def test_outgoing_requires_scheme(channel: Channel) -> None:
    with pytest.raises(ValueError):
        outgoing(channel, urn="15551234567")
