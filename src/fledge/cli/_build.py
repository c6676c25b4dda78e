"""``fledge build`` — run the client build and every server bundle build.

Exits with code 1 on any build error, after all launched server bundle
builds have finished.
"""

import argparse
import logging
import sys
from pathlib import Path

from fledge.build import build
from fledge.config import BuildOptions
from fledge.errors import FledgeError, ServerBuildsFailed
from fledge.terminal import format_build_error, format_build_report

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "silent": logging.CRITICAL + 1,
}


def _parse_minify(value: str | None) -> bool | str | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    return value


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    """Translate parsed CLI arguments into :class:`BuildOptions`."""
    return BuildOptions(
        assets_inline_limit=args.assets_inline_limit,
        clear_screen=args.clear_screen,
        config=args.config,
        empty_out_dir=args.empty_out_dir,
        force=args.force,
        log_level=args.log_level,
        minify=_parse_minify(args.minify),
        mode=args.mode,
    )


def run_build_command(args: argparse.Namespace) -> None:
    """Build the project at ``args.root`` and print a summary.

    Fatal errors before the server phase print a short banner.  Server
    bundle failures print the full report so every bundle's error is
    visible.
    """
    options = options_from_args(args)
    logging.basicConfig(
        level=_LOG_LEVELS[options.log_level or "info"],
        format="%(levelname)s %(name)s: %(message)s",
    )
    root = Path(args.root).resolve()

    try:
        report = build(root, options)
    except ServerBuildsFailed as exc:
        sys.stderr.write(format_build_report(exc.report, root=root))
        raise SystemExit(1) from exc
    except FledgeError as exc:
        sys.stderr.write(format_build_error(exc))
        raise SystemExit(1) from exc

    sys.stderr.write(format_build_report(report, root=root))
