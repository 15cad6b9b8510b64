"""命令行入口。"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Mapping, Sequence

from agent_state.connection import AgentConnectionError
from agent_state.derive_ui_state import derive_ui_state, get_ui_state_label
from agent_state.settings import (
    RECONNECT_INTERVAL_ENV,
    AgentSettings,
    AgentSettingsStore,
    parse_reconnect_interval_s,
)
from agent_state.types import AgentConnectionState


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="agent 连接状态工具")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    derive = sub.add_parser("derive", help="由原始连接字段计算 UI 状态")
    derive.add_argument("--connected", action="store_true", help="传输已连通")
    derive.add_argument("--connecting", action="store_true", help="连接尝试进行中")
    derive.add_argument("--error", default=None, help="最近一次错误信息")
    derive.add_argument(
        "--reconnect-attempts", type=int, default=0, help="已观察到的断开次数"
    )

    watch = sub.add_parser("watch", help="连接 agent 并输出状态变化")
    watch.add_argument(
        "--settings",
        default="config/agent_settings.yaml",
        help="连接设置 YAML 路径",
    )
    watch.add_argument("--host", default=None, help="服务地址，如 http://localhost:8787")
    watch.add_argument("--agent", default=None, help="agent 名称")
    watch.add_argument("--name", default=None, help="agent 实例名")
    watch.add_argument(
        "--max-reconnects", type=int, default=None, help="最多重连次数"
    )
    return parser


def validate_derive_args(args: argparse.Namespace) -> AgentConnectionState:
    if args.reconnect_attempts < 0:
        raise ValueError("--reconnect-attempts 必须 >= 0")
    return AgentConnectionState(
        is_connected=args.connected,
        is_connecting=args.connecting,
        error=AgentConnectionError(args.error) if args.error else None,
        reconnect_attempts=args.reconnect_attempts,
    )


def resolve_watch_settings(
    args: argparse.Namespace,
    settings: AgentSettings,
    env: Mapping[str, str] | None = None,
) -> AgentSettings:
    """命令行参数与合法的环境变量优先于设置文件。"""
    source = env if env is not None else os.environ
    reconnect_interval_s = parse_reconnect_interval_s(source.get(RECONNECT_INTERVAL_ENV, ""))
    if reconnect_interval_s is None:
        reconnect_interval_s = settings.reconnect_interval_s
    max_reconnects = settings.max_reconnects
    if args.max_reconnects is not None:
        if args.max_reconnects < 0:
            raise ValueError("--max-reconnects 必须 >= 0")
        max_reconnects = args.max_reconnects
    return AgentSettings(
        host=args.host or settings.host,
        agent=args.agent or settings.agent,
        name=settings.name if args.name is None else args.name,
        reconnect_interval_s=reconnect_interval_s,
        max_reconnects=max_reconnects,
    )


def run_derive(args: argparse.Namespace) -> None:
    state = validate_derive_args(args)
    ui_state = derive_ui_state(state)
    print(f"{ui_state.value}\t{get_ui_state_label(ui_state)}")


def run_watch(args: argparse.Namespace) -> None:
    # 按需导入，避免 derive 子命令要求 websocket 依赖。
    from agent_state.connection import AgentConnection
    from agent_state.store import AgentStateStore
    from agent_state.ws_client import AgentSocket, build_agent_url

    settings = resolve_watch_settings(args, AgentSettingsStore(args.settings).load())
    store = AgentStateStore.create()
    connection = AgentConnection(store, settings.agent, settings.name or None)
    url = build_agent_url(settings.host, settings.agent, settings.name or None)

    last_label = ""

    def print_status() -> None:
        nonlocal last_label
        label = get_ui_state_label(connection.ui_state)
        if label != last_label:
            last_label = label
            print(f"[{connection.agent_id}] {label}")

    unsubscribe = store.subscribe(print_status)
    print(f"连接 {url}")
    socket = AgentSocket(url, connection, on_message=lambda message: print(message))
    try:
        socket.run(
            max_reconnects=settings.max_reconnects,
            reconnect_interval_s=settings.reconnect_interval_s,
        )
    except KeyboardInterrupt:
        socket.stop()
    finally:
        unsubscribe()


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "derive":
            run_derive(args)
        elif args.command == "watch":
            run_watch(args)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
