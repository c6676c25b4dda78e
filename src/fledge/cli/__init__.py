"""Fledge CLI — client and server bundle builds.

Entry point registered as ``fledge`` in ``pyproject.toml``::

    [project.scripts]
    fledge = "fledge.cli:main"
"""

import argparse
import sys


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root directory (default: current directory)",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Config file, relative to root (default: fledge.config.py)",
    )
    parser.add_argument(
        "--mode",
        "-m",
        default=None,
        help="Build mode passed to the config (default: production)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``fledge`` command."""
    parser = argparse.ArgumentParser(
        prog="fledge",
        description="Fledge — split routes into server bundles and build them.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- fledge build -----------------------------------------------------
    build_parser = subparsers.add_parser("build", help="Build client and server bundles")
    _add_config_arguments(build_parser)
    build_parser.add_argument(
        "--empty-out-dir",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force emptying the server build directory (even outside root)",
    )
    build_parser.add_argument(
        "--assets-inline-limit",
        type=int,
        default=None,
        help="Static asset base64 inline threshold in bytes",
    )
    build_parser.add_argument(
        "--minify",
        nargs="?",
        const="true",
        default=None,
        help="Enable/disable minification, or pick a minifier",
    )
    build_parser.add_argument(
        "--force",
        action="store_true",
        default=None,
        help="Force the bundler to ignore its dependency cache",
    )
    build_parser.add_argument(
        "--log-level",
        "-l",
        choices=("debug", "info", "warning", "error", "silent"),
        default=None,
        help="Log level (default: info)",
    )
    build_parser.add_argument(
        "--clear-screen",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Allow the bundler to clear the screen when logging",
    )

    # -- fledge bundles ---------------------------------------------------
    bundles_parser = subparsers.add_parser(
        "bundles", help="Show how routes are split into server bundles",
    )
    _add_config_arguments(bundles_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "build":
        from fledge.cli._build import run_build_command

        run_build_command(args)
    elif args.command == "bundles":
        from fledge.cli._bundles import run_bundles

        run_bundles(args)
