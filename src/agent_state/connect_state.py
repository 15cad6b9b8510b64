"""连接区控件状态纯逻辑：由 UI 状态决定按钮与状态文本。"""

from __future__ import annotations

from dataclasses import dataclass

from agent_state.derive_ui_state import get_ui_state_label
from agent_state.types import AgentUiState

CONNECT_BUTTON_TEXTS = {
    AgentUiState.CONNECTED: "Reconnect",
    AgentUiState.ERROR: "Retry",
    AgentUiState.DISCONNECTED: "Connect",
}


@dataclass(frozen=True)
class ConnectControls:
    """连接区控件状态。"""

    connect_enabled: bool
    cancel_enabled: bool
    connect_button_text: str
    status_text: str


def build_connect_controls(ui_state: AgentUiState | str) -> ConnectControls:
    """根据 UI 状态构建按钮展示逻辑。"""

    state = AgentUiState(ui_state)
    status_text = get_ui_state_label(state)

    if state in {AgentUiState.CONNECTING, AgentUiState.RECONNECTING}:
        return ConnectControls(
            connect_enabled=False,
            cancel_enabled=True,
            connect_button_text=status_text,
            status_text=status_text,
        )
    return ConnectControls(
        connect_enabled=True,
        cancel_enabled=False,
        connect_button_text=CONNECT_BUTTON_TEXTS[state],
        status_text=status_text,
    )
