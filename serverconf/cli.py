from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from .config import config
from .errors import ConfigError
from .services.config_manager import ConfigManager
from .services.documents import render_xml


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serverconf",
        description="Inspect and persist the server configuration directory",
    )
    parser.add_argument(
        "--config-dir",
        dest="config_dir",
        default=None,
        help="Configuration directory (default: SERVERCONF_CONFIG_DIR or <root>/conf)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="Load and validate the configuration directory")

    dump = subparsers.add_parser("dump", help="Print the loaded Server configuration")
    dump.add_argument("--format", choices=["json", "xml"], default="json", help="Output format")

    persist = subparsers.add_parser("persist", help="Write the loaded Server configuration to a file")
    persist.add_argument("--output", default=None, help="Destination file (default: last known good file)")

    serve = subparsers.add_parser("serve", help="Run the admin API server")
    serve.add_argument("--host", default=config.API.HOST)
    serve.add_argument("--port", type=int, default=config.API.PORT)
    return parser


def _run(args: argparse.Namespace, manager: ConfigManager) -> int:
    manager.load_configs(args.config_dir)
    if args.command == "check":
        print(f"Configuration directory: {manager.config_path}")
        print(f"Server id: {manager.server_id}")
        print("Configuration OK")
    elif args.command == "dump":
        if args.format == "xml":
            print(render_xml(manager.get_current_config_as_xml()))
        else:
            print(json.dumps(manager.get_current_config_as_json(), ensure_ascii=False, indent=2))
    elif args.command == "persist":
        if args.output:
            path = manager.save_current_config(manager.get_current_config_as_xml(), args.output)
        else:
            path = manager.save_current_config_to_default()
        print(f"Current config is written to {path}")
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("serverconf.main:app", host=args.host, port=args.port, reload=False)
    return 0


def main(argv: Sequence[str] | None = None, manager: ConfigManager | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command == "serve":
        return _serve(args)
    manager = manager or ConfigManager()
    try:
        return _run(args, manager)
    except ConfigError as exc:
        print(json.dumps(exc.to_payload(), ensure_ascii=False, indent=2), file=sys.stderr)
        return 1
    finally:
        manager.logging_backend.close()
