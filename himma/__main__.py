"""CLI entry point -- python -m himma."""
from __future__ import annotations

import argparse
import logging
import sys

from himma import __version__


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="himma",
        description="Himma -- role-scoped notification and alerting API for the work dashboard.",
    )
    p.add_argument("--version", action="version", version=f"himma {__version__}")
    p.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    p.add_argument("--port", type=int, default=9750, help="Bind port (default: 9750)")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    import uvicorn

    from himma.api.app import create_app

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    uvicorn.run(
        create_app(),
        host=args.host,
        port=args.port,
        log_level="debug" if args.verbose else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
