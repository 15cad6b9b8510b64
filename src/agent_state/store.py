"""Agent 连接状态仓库：按连接 ID 保存状态，变更时同步通知订阅者。"""

from __future__ import annotations

import logging
from typing import Callable

from agent_state.types import INITIAL_CONNECTION_STATE, AgentConnectionState

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class AgentStateStore:
    """多连接状态仓库。

    每个实例相互独立，由组装根负责创建并注入使用方，
    不提供模块级全局实例。
    """

    def __init__(self) -> None:
        self._states: dict[str, AgentConnectionState] = {}
        # dict 保留注册顺序，同一回调只登记一次
        self._listeners: dict[Listener, None] = {}

    @classmethod
    def create(cls) -> AgentStateStore:
        return cls()

    def get_state(self, agent_id: str) -> AgentConnectionState:
        """读取连接状态；未出现过的 ID 返回初始状态。"""
        return self._states.get(agent_id, INITIAL_CONNECTION_STATE)

    def set_state(self, agent_id: str, **changes: object) -> None:
        """把 changes 浅合并进当前状态，未给出的字段保持不变。"""
        current = self._states.get(agent_id, INITIAL_CONNECTION_STATE)
        self._states[agent_id] = current.evolve(**changes)
        self._emit_change()

    def clear_state(self, agent_id: str) -> None:
        """移除连接状态，之后 get_state 回到初始状态。"""
        self._states.pop(agent_id, None)
        self._emit_change()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """注册变更回调，返回取消订阅函数（重复调用无副作用）。"""
        self._listeners[listener] = None

        def unsubscribe() -> None:
            self._listeners.pop(listener, None)

        return unsubscribe

    def get_agent_ids(self) -> list[str]:
        return list(self._states)

    def _emit_change(self) -> None:
        # 遍历快照，回调内取消订阅不影响本轮通知
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("状态订阅回调执行失败: %r", listener)


def create_agent_state_store() -> AgentStateStore:
    return AgentStateStore.create()
