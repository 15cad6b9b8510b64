"""agent 连接状态管理：状态仓库 + 派生 UI 状态 + 连接生命周期适配。"""

from __future__ import annotations

from agent_state.connection import AgentConnection, AgentConnectionError, create_agent_id
from agent_state.derive_ui_state import derive_ui_state, get_ui_state_label, label_for
from agent_state.store import AgentStateStore, create_agent_state_store
from agent_state.types import INITIAL_CONNECTION_STATE, AgentConnectionState, AgentUiState

__all__ = [
    "INITIAL_CONNECTION_STATE",
    "AgentConnection",
    "AgentConnectionError",
    "AgentConnectionState",
    "AgentStateStore",
    "AgentUiState",
    "create_agent_id",
    "create_agent_state_store",
    "derive_ui_state",
    "get_ui_state_label",
    "label_for",
]
