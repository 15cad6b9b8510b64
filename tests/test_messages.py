import json

import pytest
from pydantic import ValidationError

from agent_state.messages import (
    INVALID_JSON_ERROR,
    ConnectionStatusMessage,
    ErrorMessage,
    PingMessage,
    StateUpdateMessage,
    SubscribeMessage,
    create_client_message,
    create_server_message,
    dump_message,
    parse_client_message,
    parse_server_message,
)


def test_parse_server_connection_status() -> None:
    result = parse_server_message(
        '{"type": "connection:status", "data": {"connectionId": "c1", "connectedAt": 1700000000000}}'
    )
    assert result.success is True
    assert isinstance(result.data, ConnectionStatusMessage)
    assert result.data.data.connection_id == "c1"
    assert result.data.data.connected_at == 1700000000000


def test_parse_server_state_update_and_error() -> None:
    update = parse_server_message(
        json.dumps({"type": "state:update", "data": {"state": {"count": 3}, "timestamp": 5}})
    )
    assert update.success is True
    assert isinstance(update.data, StateUpdateMessage)
    assert update.data.data.state == {"count": 3}

    error = parse_server_message(json.dumps({"type": "error", "data": {"message": "nope"}}))
    assert error.success is True
    assert isinstance(error.data, ErrorMessage)
    assert error.data.data.code is None
    assert error.data.data.message == "nope"


def test_parse_server_message_rejects_invalid_json() -> None:
    result = parse_server_message("{not json")
    assert result.success is False
    assert result.data is None
    assert result.error == INVALID_JSON_ERROR


def test_parse_server_message_rejects_unknown_type_and_missing_fields() -> None:
    unknown = parse_server_message('{"type": "hello", "data": {}}')
    assert unknown.success is False
    assert unknown.error

    missing = parse_server_message('{"type": "connection:status", "data": {"connectionId": "c1"}}')
    assert missing.success is False
    assert "connectedAt" in (missing.error or "")


def test_parse_client_messages() -> None:
    ping = parse_client_message('{"type": "ping"}')
    assert ping.success is True
    assert isinstance(ping.data, PingMessage)
    assert ping.data.data is None

    subscribe = parse_client_message('{"type": "subscribe", "data": {"topic": "news"}}')
    assert subscribe.success is True
    assert isinstance(subscribe.data, SubscribeMessage)
    assert subscribe.data.data.topic == "news"

    bad = parse_client_message('{"type": "unsubscribe", "data": {}}')
    assert bad.success is False


def test_create_client_message_and_dump() -> None:
    ping = create_client_message("ping")
    assert json.loads(dump_message(ping)) == {"type": "ping"}

    subscribe = create_client_message("subscribe", {"topic": "news"})
    assert json.loads(dump_message(subscribe)) == {"type": "subscribe", "data": {"topic": "news"}}


def test_create_server_message_uses_wire_aliases() -> None:
    message = create_server_message(
        "connection:status", {"connection_id": "c1", "connected_at": 10}
    )
    assert json.loads(dump_message(message)) == {
        "type": "connection:status",
        "data": {"connectionId": "c1", "connectedAt": 10.0},
    }


def test_create_message_rejects_bad_payload() -> None:
    with pytest.raises(ValidationError):
        create_server_message("error", {"code": "E1"})
    with pytest.raises(ValidationError):
        create_client_message("subscribe")


def test_parse_rejects_values_that_need_coercion() -> None:
    stringly_number = parse_server_message(
        '{"type": "connection:status", "data": {"connectionId": "c1", "connectedAt": "123"}}'
    )
    assert stringly_number.success is False

    numeric_id = parse_server_message(
        '{"type": "connection:status", "data": {"connectionId": 7, "connectedAt": 1}}'
    )
    assert numeric_id.success is False

    topic = parse_client_message('{"type": "subscribe", "data": {"topic": 5}}')
    assert topic.success is False


def test_parse_rejects_null_for_optional_fields() -> None:
    assert parse_client_message('{"type": "ping", "data": null}').success is False
    assert parse_client_message('{"type": "ping", "data": {"timestamp": null}}').success is False
    assert parse_server_message('{"type": "error", "data": {"message": "x", "code": null}}').success is False

    ping = parse_client_message('{"type": "ping", "data": {"timestamp": 5}}')
    assert ping.success is True
    assert ping.data.data.timestamp == 5
