"""Registry service entry point."""

from __future__ import annotations

import argparse
import os
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bluechain-registry",
        description="Bluechain Supply Registry - SupplyItem records over a key-value ledger",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: BLUECHAIN_PORT or 7051)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Force JSON log output (default: auto-detect)",
    )
    parser.add_argument(
        "--ledger",
        choices=["memory", "sqlite"],
        default=None,
        help="Ledger backend (default: BLUECHAIN_LEDGER_BACKEND or memory)",
    )
    parser.add_argument(
        "--db-path",
        default=None,
        help="SQLite ledger path (default: BLUECHAIN_DB_PATH or data/bluechain.db)",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create the SupplyItem index at startup if it is missing",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the registry service."""
    args = build_parser().parse_args(argv)

    from bluechain.service.logging import configure_logging

    configure_logging(
        level=args.log_level.upper(),
        json_output=True if args.json_logs else None,
    )

    # The app factory reads its configuration from the environment
    if args.ledger:
        os.environ["BLUECHAIN_LEDGER_BACKEND"] = args.ledger
    if args.db_path:
        os.environ["BLUECHAIN_DB_PATH"] = args.db_path
    if args.init:
        os.environ["BLUECHAIN_AUTO_INIT"] = "1"
    if args.port is not None:
        os.environ["BLUECHAIN_PORT"] = str(args.port)
    port = int(os.environ.get("BLUECHAIN_PORT", "7051"))

    import uvicorn

    try:
        uvicorn.run(
            "bluechain.service.app:create_app_from_env",
            host=args.host,
            port=port,
            reload=args.reload,
            log_level=args.log_level,
            factory=True,
        )
    except KeyboardInterrupt:
        print("\nShutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
