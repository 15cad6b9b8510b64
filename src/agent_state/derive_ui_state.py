"""从原始连接状态计算 UI 状态。

不维护显式状态机，展示状态每次都由原始数据按顺序规则算出。
"""

from __future__ import annotations

from agent_state.types import AgentConnectionState, AgentUiState

UI_STATE_LABELS = {
    AgentUiState.CONNECTED: "Connected",
    AgentUiState.CONNECTING: "Connecting...",
    AgentUiState.RECONNECTING: "Reconnecting...",
    AgentUiState.ERROR: "Connection Error",
    AgentUiState.DISCONNECTED: "Disconnected",
}


def derive_ui_state(state: AgentConnectionState) -> AgentUiState:
    """按规则顺序派生 UI 状态，先命中者生效。"""

    # 已连接时的错误视为过期，让位于 connected
    if state.error is not None and not state.is_connected:
        return AgentUiState.ERROR

    if state.is_connected:
        return AgentUiState.CONNECTED

    if state.is_connecting and state.reconnect_attempts > 0:
        return AgentUiState.RECONNECTING

    if state.is_connecting:
        return AgentUiState.CONNECTING

    return AgentUiState.DISCONNECTED


def get_ui_state_label(ui_state: AgentUiState | str) -> str:
    """返回 UI 状态的可读标签，未知状态抛出 ValueError。"""
    try:
        normalized = AgentUiState(ui_state)
    except ValueError as exc:
        raise ValueError(f"未知 UI 状态: {ui_state}") from exc
    return UI_STATE_LABELS[normalized]


label_for = get_ui_state_label
