"""Burrow CLI — start the gateway.

Entry point registered as ``burrow`` in ``pyproject.toml``::

    [project.scripts]
    burrow = "burrow.cli:main"
"""

import argparse
import logging
import sys
from pathlib import Path

from burrow.config import DEFAULT_PORT, GatewayConfig, Mount, default_mounts, port_from_env
from burrow.errors import ConfigurationError

logger = logging.getLogger("burrow.server")


def parse_mount(value: str) -> Mount:
    """Parse ``PREFIX=DIR`` into a Mount.

    Slashes are added to the prefix as needed, so ``uv=./dist`` and
    ``/uv/=./dist`` are equivalent.
    """
    prefix, sep, directory = value.partition("=")
    prefix = prefix.strip("/")
    if not sep or not prefix or not directory:
        msg = f"expected PREFIX=DIR, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return Mount(f"/{prefix}/", Path(directory))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="burrow",
        description="Burrow — static asset front end with a tunnel upgrade endpoint.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- burrow serve -----------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the gateway")
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Bind host address (default: every interface, IPv6 dual-stack when available)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Bind port number (default: $PORT, else {DEFAULT_PORT})",
    )
    serve_parser.add_argument(
        "--assets",
        default="assets",
        help="Directory holding the uv/, epoxy/ and baremux/ bundles (default: ./assets)",
    )
    serve_parser.add_argument(
        "--mount",
        action="append",
        type=parse_mount,
        default=None,
        metavar="PREFIX=DIR",
        help="Serve DIR under /PREFIX/ (repeatable; replaces the default bundles)",
    )
    serve_parser.add_argument(
        "--tunnel",
        default=None,
        metavar="MODULE:ATTR",
        help="ASGI app that takes over /wisp/ upgrades (e.g. wisp_bridge:app)",
    )
    serve_parser.add_argument(
        "--log-level",
        default="info",
        choices=("debug", "info", "warning", "error", "critical"),
        help="Logging level (default: info)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GatewayConfig:
    """Build the gateway configuration from parsed ``serve`` arguments."""
    mounts = tuple(args.mount) if args.mount else default_mounts(args.assets)
    return GatewayConfig(
        host=args.host,
        port=args.port if args.port is not None else port_from_env(),
        mounts=mounts,
        log_level=args.log_level,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``burrow`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        serve(args)


def serve(args: argparse.Namespace) -> None:
    """Run ``burrow serve``; exits 1 on startup configuration errors."""
    from burrow.app import Gateway

    config = config_from_args(args)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    tunnel = None
    if args.tunnel:
        from burrow.cli._resolve import resolve_tunnel

        try:
            tunnel = resolve_tunnel(args.tunnel)
        except (ModuleNotFoundError, AttributeError, TypeError) as exc:
            logger.error("Cannot load tunnel handler %r: %s", args.tunnel, exc)
            raise SystemExit(1) from exc

    try:
        Gateway(config, tunnel=tunnel).run()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
