"""连接设置：agent_settings.yaml 持久化与环境变量解析。"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Mapping

import yaml

DEFAULT_RECONNECT_INTERVAL_S = 3.0
MIN_RECONNECT_INTERVAL_S = 0.5
MAX_RECONNECT_INTERVAL_S = 60.0
RECONNECT_INTERVAL_ENV = "AGENT_STATE_RECONNECT_INTERVAL_S"

SUPPORTED_HOST_SCHEMES = ("http://", "https://", "ws://", "wss://")


@dataclass
class AgentSettings:
    """watch 命令使用的可持久化连接设置。"""

    host: str = "http://localhost:8787"
    agent: str = "my-agent"
    name: str = ""
    reconnect_interval_s: float = DEFAULT_RECONNECT_INTERVAL_S
    max_reconnects: int = 5


class AgentSettingsStore:
    """读取/写入 agent_settings.yaml。"""

    def __init__(self, settings_path: str | Path = "config/agent_settings.yaml") -> None:
        self.settings_path = Path(settings_path)

    def load(self) -> AgentSettings:
        if not self.settings_path.exists():
            return AgentSettings()

        with self.settings_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return AgentSettings()

        return AgentSettings(
            host=_normalize_host(data.get("host")),
            agent=_normalize_agent(data.get("agent")),
            name=str(data.get("name") or "").strip(),
            reconnect_interval_s=_normalize_reconnect_interval(data.get("reconnect_interval_s")),
            max_reconnects=_normalize_max_reconnects(data.get("max_reconnects")),
        )

    def save(self, settings: AgentSettings) -> Path:
        payload = asdict(
            AgentSettings(
                host=_normalize_host(settings.host),
                agent=_normalize_agent(settings.agent),
                name=settings.name.strip(),
                reconnect_interval_s=_normalize_reconnect_interval(settings.reconnect_interval_s),
                max_reconnects=_normalize_max_reconnects(settings.max_reconnects),
            )
        )
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with self.settings_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(payload, f, allow_unicode=True, sort_keys=False)
        return self.settings_path


def read_reconnect_interval_s(env: Mapping[str, str] | None = None) -> float:
    """读取重连间隔（秒），非法或越界值回退默认值。"""

    source = env if env is not None else os.environ
    interval = parse_reconnect_interval_s(source.get(RECONNECT_INTERVAL_ENV, ""))
    if interval is None:
        return DEFAULT_RECONNECT_INTERVAL_S
    return interval


def parse_reconnect_interval_s(value: object) -> float | None:
    """解析重连间隔（秒）；非数字、NaN 或越界时返回 None。"""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        interval = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    # 区间判断同时排除 NaN
    if not MIN_RECONNECT_INTERVAL_S <= interval <= MAX_RECONNECT_INTERVAL_S:
        return None
    return interval


def _normalize_host(value: object) -> str:
    host = str(value or "").strip().rstrip("/")
    if host.lower().startswith(SUPPORTED_HOST_SCHEMES):
        return host
    return AgentSettings.host


def _normalize_agent(value: object) -> str:
    return str(value or "").strip() or AgentSettings.agent


def _normalize_reconnect_interval(value: object) -> float:
    interval = parse_reconnect_interval_s(value)
    if interval is None:
        return DEFAULT_RECONNECT_INTERVAL_S
    return interval


def _normalize_max_reconnects(value: object) -> int:
    if isinstance(value, bool):
        return AgentSettings.max_reconnects
    try:
        count = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return AgentSettings.max_reconnects
    if count < 0:
        return AgentSettings.max_reconnects
    return count
