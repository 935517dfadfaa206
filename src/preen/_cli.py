"""Preen CLI — ``preen TEMPLATE [--data FILE] [--port N]``.

Entry point for the ``preen`` command-line interface.
"""

from __future__ import annotations

import argparse
import logging
import sys

from preen.config import DEFAULT_PORT


def _port(value: str) -> int:
    """argparse type for a TCP port."""
    try:
        port = int(value)
    except ValueError:
        msg = f"invalid port {value!r}: must be an integer"
        raise argparse.ArgumentTypeError(msg) from None
    if not 0 < port <= 65535:
        msg = "Port must be an integer between 1 and 65535"
        raise argparse.ArgumentTypeError(msg)
    return port


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the preen CLI."""
    parser = argparse.ArgumentParser(
        prog="preen",
        description="Render a Kida template on every request and reload the browser on change.",
        epilog=(
            "examples:\n"
            "  preen example/template.html\n"
            "  preen -t example/template.html -d example/data.json -p 4000"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("template", nargs="?", default=None, help="Path to the template file")
    parser.add_argument(
        "-t",
        "--template",
        dest="template_option",
        metavar="PATH",
        default=None,
        help="Path to the template file (alternative to the positional argument)",
    )
    parser.add_argument(
        "-d", "--data", metavar="PATH", default=None, help="Path to a JSON, YAML or TOML data file",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=_port,
        default=None,
        help=f"Port to listen on (default: {DEFAULT_PORT})",
    )
    parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    parser.add_argument(
        "--verbose", action="store_true", help="Log every reload broadcast",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from preen import __version__

    return __version__


def _resolve_template(parser: argparse.ArgumentParser, args: argparse.Namespace) -> str:
    """Pick the template from the positional argument or ``--template``."""
    if args.template and args.template_option:
        parser.error(f"unexpected positional argument: {args.template}")
    template = args.template_option or args.template
    if not template:
        parser.error("--template is required")
    return template


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    template = _resolve_template(parser, args)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(message)s",
        stream=sys.stderr,
    )

    from preen._errors import ConfigError
    from preen.app import dev

    try:
        dev(template, data=args.data, host=args.host, port=args.port)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("", file=sys.stderr)
        parser.print_usage(sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
