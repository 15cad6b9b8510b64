"""agent websocket 消息模型：服务端/客户端消息的校验、解析与构建。

所有消息都是 JSON 文本帧，形如 ``{"type": ..., "data": {...}}``，
按 ``type`` 区分具体结构。字段在线上使用 camelCase，Python 侧使用 snake_case。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictStr,
    TypeAdapter,
    ValidationError,
)

INVALID_JSON_ERROR = "Invalid JSON"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# 可选字段只允许缺省，不接受显式 null；数值与字符串字段不做类型转换


# 服务端 -> 客户端


class ConnectionStatusData(_WireModel):
    connection_id: StrictStr = Field(alias="connectionId")
    connected_at: StrictFloat = Field(alias="connectedAt")


class StateUpdateData(_WireModel):
    state: Any = None
    timestamp: StrictFloat


class ErrorData(_WireModel):
    code: StrictStr = Field(default=None)
    message: StrictStr
    details: Any = None


class ConnectionStatusMessage(_WireModel):
    type: Literal["connection:status"]
    data: ConnectionStatusData


class StateUpdateMessage(_WireModel):
    type: Literal["state:update"]
    data: StateUpdateData


class ErrorMessage(_WireModel):
    type: Literal["error"]
    data: ErrorData


ServerMessage = Annotated[
    Union[ConnectionStatusMessage, StateUpdateMessage, ErrorMessage],
    Field(discriminator="type"),
]


# 客户端 -> 服务端


class PingData(_WireModel):
    timestamp: StrictFloat = Field(default=None)


class SubscribeData(_WireModel):
    topic: StrictStr


class UnsubscribeData(_WireModel):
    topic: StrictStr


class PingMessage(_WireModel):
    type: Literal["ping"]
    data: PingData = Field(default=None)


class SubscribeMessage(_WireModel):
    type: Literal["subscribe"]
    data: SubscribeData


class UnsubscribeMessage(_WireModel):
    type: Literal["unsubscribe"]
    data: UnsubscribeData


ClientMessage = Annotated[
    Union[PingMessage, SubscribeMessage, UnsubscribeMessage],
    Field(discriminator="type"),
]

_server_message_adapter: TypeAdapter[Any] = TypeAdapter(ServerMessage)
_client_message_adapter: TypeAdapter[Any] = TypeAdapter(ClientMessage)


@dataclass(frozen=True)
class ParseResult:
    """消息解析结果；失败时 error 为可读错误文本。"""

    success: bool
    data: Any = None
    error: str | None = None


def _parse(raw: str | bytes, adapter: TypeAdapter[Any]) -> ParseResult:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return ParseResult(success=False, error=INVALID_JSON_ERROR)
    try:
        return ParseResult(success=True, data=adapter.validate_python(payload))
    except ValidationError as exc:
        return ParseResult(success=False, error=str(exc))


def parse_server_message(raw: str | bytes) -> ParseResult:
    """解析并校验服务端消息，不抛异常。"""
    return _parse(raw, _server_message_adapter)


def parse_client_message(raw: str | bytes) -> ParseResult:
    """解析并校验客户端消息，不抛异常。"""
    return _parse(raw, _client_message_adapter)


def create_server_message(message_type: str, data: Any) -> Any:
    """构建服务端消息，data 可为对应模型或 dict；不合法时抛出 ValidationError。"""
    return _server_message_adapter.validate_python({"type": message_type, "data": data})


def create_client_message(message_type: str, data: Any = None) -> Any:
    """构建客户端消息；ping 的 data 可省略。"""
    payload: dict[str, Any] = {"type": message_type}
    if data is not None:
        payload["data"] = data
    return _client_message_adapter.validate_python(payload)


def dump_message(message: BaseModel) -> str:
    """序列化为线上 JSON（camelCase，省略未设置的可选字段）。"""
    return message.model_dump_json(by_alias=True, exclude_unset=True)
