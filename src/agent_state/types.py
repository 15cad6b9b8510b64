"""Agent 连接状态类型：原始连接数据与派生 UI 状态。"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


@dataclass(frozen=True)
class AgentConnectionState:
    """单个 agent websocket 连接的原始状态。"""

    is_connected: bool = False
    is_connecting: bool = False
    error: BaseException | str | None = None
    # 建立连接时的时间戳（毫秒）
    connected_at: float | None = None
    reconnect_attempts: int = 0

    def evolve(self, **changes: object) -> AgentConnectionState:
        """返回覆盖指定字段后的新状态，未知字段抛出 TypeError。"""
        return replace(self, **changes)


class AgentUiState(str, Enum):
    """由原始状态派生、供展示使用的连接状态。"""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    ERROR = "error"


INITIAL_CONNECTION_STATE = AgentConnectionState()
