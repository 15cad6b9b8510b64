"""连接生命周期适配：把 socket 的 open/close/error 回调映射为仓库状态更新。"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from agent_state.derive_ui_state import derive_ui_state
from agent_state.store import AgentStateStore, Listener
from agent_state.types import AgentConnectionState, AgentUiState

logger = logging.getLogger(__name__)


class AgentConnectionError(ConnectionError):
    """websocket 传输层错误，保存在连接状态的 error 字段中。"""

    def __init__(self, message: str = "WebSocket connection error", event: Any = None) -> None:
        super().__init__(message)
        self.event = event


def create_agent_id(agent: str, name: str | None = None) -> str:
    """生成连接 ID：有实例名时为 agent:name，否则为 agent。"""
    return f"{agent}:{name}" if name else agent


def _now_ms() -> float:
    return time.time() * 1000


class AgentConnection:
    """单个 agent 连接与状态仓库之间的胶水层。

    用户回调均在仓库更新之后调用，回调中读取到的已是新状态。
    """

    def __init__(
        self,
        store: AgentStateStore,
        agent: str,
        name: str | None = None,
        *,
        on_open: Optional[Callable[[], None]] = None,
        on_close: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Any], None]] = None,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        if not agent.strip():
            raise ValueError("agent 不能为空")
        self.store = store
        self.agent = agent
        self.name = name
        self.agent_id = create_agent_id(agent, name)
        self._on_open = on_open
        self._on_close = on_close
        self._on_error = on_error
        self._clock = clock

    @property
    def connection_state(self) -> AgentConnectionState:
        return self.store.get_state(self.agent_id)

    @property
    def ui_state(self) -> AgentUiState:
        return derive_ui_state(self.connection_state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def mark_connecting(self) -> None:
        """开始一次连接尝试（首次或重连）。"""
        self.store.set_state(self.agent_id, is_connecting=True)

    def handle_open(self) -> None:
        self.store.set_state(
            self.agent_id,
            is_connected=True,
            is_connecting=False,
            error=None,
            connected_at=self._clock(),
        )
        logger.info("agent 已连接: %s", self.agent_id)
        if self._on_open is not None:
            self._on_open()

    def handle_close(self, event: Any = None) -> None:
        current = self.store.get_state(self.agent_id)
        self.store.set_state(
            self.agent_id,
            is_connected=False,
            is_connecting=False,
            reconnect_attempts=current.reconnect_attempts + 1,
            connected_at=None,
        )
        logger.info("agent 连接关闭: %s (%s)", self.agent_id, event)
        if self._on_close is not None:
            self._on_close(event)

    def handle_error(self, event: Any = None) -> None:
        self.store.set_state(
            self.agent_id,
            error=AgentConnectionError(event=event),
            is_connecting=False,
        )
        logger.warning("agent 连接出错: %s (%s)", self.agent_id, event)
        if self._on_error is not None:
            self._on_error(event)

    def teardown(self) -> None:
        """连接所属会话结束时清理状态。"""
        self.store.clear_state(self.agent_id)

    def __enter__(self) -> AgentConnection:
        self.mark_connecting()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()
