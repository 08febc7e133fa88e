"""Command line entry point: ``python -m dam_agent <command>``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from typing import Any

from dam_agent.config.settings import (
    CONFIG_FILE_NAME,
    AgentSettings,
    ConfigStore,
    EnterpriseSettings,
    load_local_env,
)
from dam_agent.errors import DamAgentError
from dam_agent.monitoring.service import build_monitoring_service
from dam_agent.storage.db import AgentDatabase
from dam_agent.sync.dashboard import DashboardSyncService
from dam_agent.watchers.logger import configure_logging

# Under "python -m" __name__ is "__main__", outside the package logger.
logger = logging.getLogger("dam_agent.cli")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5577
MASKED = "***"


def cmd_run(settings: AgentSettings, store: ConfigStore, args: argparse.Namespace) -> int:
    if not args.force and not store.monitoring().auto_start:
        logger.info("Auto-start disabled, not monitoring")
        print("Auto-start is disabled in config; use --force to start anyway.")
        return 0

    service = build_monitoring_service(settings, store)
    service.start()
    print("Monitoring started. Press Ctrl-C to stop.")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        service.close()
    return 0


def cmd_analyze_once(settings: AgentSettings, store: ConfigStore, args: argparse.Namespace) -> int:
    service = build_monitoring_service(settings, store)
    try:
        result = service.trigger_analysis()
    finally:
        service.close()
    print(json.dumps(result.to_dict() if result else None, indent=2))
    return 0


def cmd_serve(settings: AgentSettings, store: ConfigStore, args: argparse.Namespace) -> int:
    import uvicorn

    from dam_agent.api.main import app, attach_service

    attach_service(build_monitoring_service(settings, store))
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def cmd_purge(settings: AgentSettings, store: ConfigStore, args: argparse.Namespace) -> int:
    days = args.days or store.retention_days()
    database = AgentDatabase(settings.db_path)
    try:
        deleted = database.purge_older_than(days)
    finally:
        database.close()
    print(f"Deleted {deleted} records older than {days} days.")
    return 0


def cmd_config(settings: AgentSettings, store: ConfigStore, args: argparse.Namespace) -> int:
    if args.action == "reset":
        store.reset()
        print(f"Config reset to defaults: {store.path}")
        return 0
    data = store.all()
    enterprise = data.get("enterprise")
    if isinstance(enterprise, dict) and enterprise.get("api_key"):
        enterprise["api_key"] = MASKED
    print(json.dumps(data, indent=2))
    return 0


def cmd_enterprise(settings: AgentSettings, store: ConfigStore, args: argparse.Namespace) -> int:
    changes: dict[str, Any] = {}
    if args.enabled is not None:
        changes["enabled"] = args.enabled
    if args.url is not None:
        changes["dashboard_url"] = args.url
    if args.api_key is not None:
        changes["api_key"] = args.api_key
    if args.org is not None:
        changes["organization_id"] = args.org

    if changes:
        enterprise = store.save_enterprise(**changes)
    else:
        enterprise = store.enterprise(settings)
    print(json.dumps(_masked(enterprise), indent=2))

    if not args.test:
        return 0
    sync = DashboardSyncService(enterprise)
    try:
        ok = sync.test_connection()
    finally:
        sync.close()
    print("Dashboard connection OK." if ok else "Dashboard connection failed.")
    return 0 if ok else 1


def _masked(enterprise: EnterpriseSettings) -> dict[str, Any]:
    data = enterprise.model_dump()
    if data["api_key"]:
        data["api_key"] = MASKED
    data["active"] = enterprise.active
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dam-agent", description="Monitor AI tool usage on this desktop."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="start monitoring until Ctrl-C")
    run.add_argument("--force", action="store_true", help="ignore auto_start=false")
    run.set_defaults(func=cmd_run)

    once = sub.add_parser("analyze-once", help="analyze the current screen once")
    once.set_defaults(func=cmd_analyze_once)

    serve = sub.add_parser("serve", help="run the local control API")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)
    serve.set_defaults(func=cmd_serve)

    purge = sub.add_parser("purge", help="delete records past the retention period")
    purge.add_argument("--days", type=int, default=None)
    purge.set_defaults(func=cmd_purge)

    config = sub.add_parser("config", help="show or reset the stored config")
    config.add_argument("action", choices=["show", "reset"], nargs="?", default="show")
    config.set_defaults(func=cmd_config)

    enterprise = sub.add_parser("enterprise", help="configure dashboard sync")
    toggle = enterprise.add_mutually_exclusive_group()
    toggle.add_argument("--enable", dest="enabled", action="store_true")
    toggle.add_argument("--disable", dest="enabled", action="store_false")
    enterprise.add_argument("--url", help="dashboard base URL")
    enterprise.add_argument("--api-key", help="dashboard API key")
    enterprise.add_argument("--org", help="organization id")
    enterprise.add_argument("--test", action="store_true", help="test the connection")
    enterprise.set_defaults(func=cmd_enterprise, enabled=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_local_env()
    settings = AgentSettings.from_env()
    configure_logging(settings.log_dir, settings.log_level)
    store = ConfigStore(settings.config_dir / CONFIG_FILE_NAME)
    try:
        return args.func(settings, store, args)
    except DamAgentError as e:
        logger.exception("Command %s failed", args.command)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
