import pytest

from agent_state.derive_ui_state import derive_ui_state, get_ui_state_label, label_for
from agent_state.types import AgentConnectionState, AgentUiState


@pytest.mark.parametrize(
    ("is_connected", "is_connecting", "error", "reconnect_attempts", "expected"),
    [
        (False, False, None, 0, AgentUiState.DISCONNECTED),
        (False, True, None, 0, AgentUiState.CONNECTING),
        (False, True, None, 2, AgentUiState.RECONNECTING),
        (True, False, None, 0, AgentUiState.CONNECTED),
        (False, False, RuntimeError("boom"), 0, AgentUiState.ERROR),
        (True, False, RuntimeError("boom"), 0, AgentUiState.CONNECTED),
        (True, True, None, 3, AgentUiState.CONNECTED),
        (False, True, "timeout", 1, AgentUiState.ERROR),
    ],
)
def test_derive_ui_state_truth_table(
    is_connected: bool,
    is_connecting: bool,
    error: object,
    reconnect_attempts: int,
    expected: AgentUiState,
) -> None:
    state = AgentConnectionState(
        is_connected=is_connected,
        is_connecting=is_connecting,
        error=error,
        reconnect_attempts=reconnect_attempts,
    )
    assert derive_ui_state(state) is expected


def test_derive_ui_state_ignores_reconnect_count_when_idle() -> None:
    state = AgentConnectionState(reconnect_attempts=5)
    assert derive_ui_state(state) is AgentUiState.DISCONNECTED


def test_derive_ui_state_is_repeatable() -> None:
    state = AgentConnectionState(is_connecting=True, reconnect_attempts=1)
    assert derive_ui_state(state) is derive_ui_state(state)


def test_labels_cover_every_ui_state() -> None:
    assert get_ui_state_label(AgentUiState.CONNECTED) == "Connected"
    assert get_ui_state_label(AgentUiState.CONNECTING) == "Connecting..."
    assert get_ui_state_label(AgentUiState.RECONNECTING) == "Reconnecting..."
    assert get_ui_state_label(AgentUiState.ERROR) == "Connection Error"
    assert get_ui_state_label(AgentUiState.DISCONNECTED) == "Disconnected"
    for ui_state in AgentUiState:
        assert label_for(ui_state)


def test_label_accepts_plain_string_value() -> None:
    assert get_ui_state_label("reconnecting") == "Reconnecting..."


def test_label_rejects_unknown_state() -> None:
    with pytest.raises(ValueError, match="未知 UI 状态"):
        get_ui_state_label("offline")
