"""agent websocket 传输：用 websocket-client 驱动连接生命周期适配。"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import websocket
from pydantic import BaseModel

from agent_state.connection import AgentConnection
from agent_state.messages import dump_message, parse_server_message
from agent_state.settings import DEFAULT_RECONNECT_INTERVAL_S

logger = logging.getLogger(__name__)

DEFAULT_AGENT_NAME = "default"
_SCHEME_MAP = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}


@dataclass(frozen=True)
class CloseEvent:
    """websocket 关闭信息。"""

    code: int | None
    reason: str | None


def agent_path_name(agent: str) -> str:
    """agent 类名转为 URL 路径段：MyAgent -> my-agent。"""
    kebab = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", agent.strip())
    return kebab.replace("_", "-").lower()


def build_agent_url(
    host: str,
    agent: str,
    name: str | None = None,
    *,
    prefix: str = "agents",
) -> str:
    """拼接 agent websocket 地址，http(s) 自动换成 ws(s)。"""

    raw = host.strip().rstrip("/")
    if not raw:
        raise ValueError("host 不能为空")
    scheme, sep, rest = raw.partition("://")
    if not sep:
        scheme, rest = "ws", raw
    ws_scheme = _SCHEME_MAP.get(scheme.lower())
    if ws_scheme is None:
        raise ValueError(f"不支持的 host scheme: {scheme}")

    segments = [prefix.strip("/"), agent_path_name(agent), (name or "").strip() or DEFAULT_AGENT_NAME]
    path = "/".join(s for s in segments if s)
    return f"{ws_scheme}://{rest}/{path}"


class AgentSocket:
    """单条 agent websocket 连接，带固定间隔重连。

    run() 会阻塞调用线程；在其他线程调用 stop() 结束。
    """

    def __init__(
        self,
        url: str,
        connection: AgentConnection,
        *,
        on_message: Optional[Callable[[Any], None]] = None,
        app_factory: Callable[..., Any] = websocket.WebSocketApp,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url = url
        self.connection = connection
        self._on_message = on_message
        self._app_factory = app_factory
        self._sleep = sleep
        self._app: Any = None
        self._stopped = False

    def connect(self) -> None:
        """执行一次连接尝试，直到连接关闭才返回。"""
        self.connection.mark_connecting()
        self._app = self._app_factory(
            self.url,
            on_open=self._handle_open,
            on_message=self._handle_message,
            on_error=self._handle_error,
            on_close=self._handle_close,
        )
        self._app.run_forever()

    def run(
        self,
        *,
        max_reconnects: int | None = None,
        reconnect_interval_s: float = DEFAULT_RECONNECT_INTERVAL_S,
    ) -> None:
        """连接并在断开后重连；max_reconnects 为 None 时不限次数。"""
        self._stopped = False
        reconnects = 0
        try:
            while not self._stopped:
                self.connect()
                if self._stopped:
                    break
                if max_reconnects is not None and reconnects >= max_reconnects:
                    logger.info("已达到最大重连次数: %s", max_reconnects)
                    break
                reconnects += 1
                logger.info("%.1fs 后重连 %s（第 %d 次）", reconnect_interval_s, self.url, reconnects)
                self._sleep(reconnect_interval_s)
        finally:
            self._app = None
            self.connection.teardown()

    def stop(self) -> None:
        self._stopped = True
        if self._app is not None:
            self._app.close()

    def send(self, message: BaseModel) -> None:
        """发送客户端消息。"""
        if self._app is None or not self.connection.connection_state.is_connected:
            raise RuntimeError(f"agent 未连接: {self.connection.agent_id}")
        self._app.send(dump_message(message))

    def _handle_open(self, ws: Any) -> None:
        self.connection.handle_open()

    def _handle_message(self, ws: Any, raw: str | bytes) -> None:
        result = parse_server_message(raw)
        if not result.success:
            logger.warning("忽略无法解析的服务端消息: %s", result.error)
            return
        if self._on_message is not None:
            self._on_message(result.data)

    def _handle_error(self, ws: Any, error: Any) -> None:
        self.connection.handle_error(error)

    def _handle_close(self, ws: Any, close_status_code: int | None, close_msg: str | None) -> None:
        self.connection.handle_close(CloseEvent(code=close_status_code, reason=close_msg))
