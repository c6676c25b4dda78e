"""``fledge bundles`` — list server bundles without building.

Resolves the project config and prints each bundle directory with the
route ids it will build.
"""

import argparse
import sys
from pathlib import Path

from fledge.bundles import get_server_bundles
from fledge.errors import FledgeError
from fledge.loader import resolve_config
from fledge.terminal import format_build_error, format_bundles


def run_bundles(args: argparse.Namespace) -> None:
    """Print the server bundle partition for ``args.root``."""
    root = Path(args.root).resolve()
    try:
        config = resolve_config(args.config, args.mode, root)
        if not config.ssr:
            print("SPA mode (ssr=False): no server bundles.")
            return
        server_builds = get_server_bundles(
            config.routes, config.server_build_directory, config.server_bundles,
        )
    except FledgeError as exc:
        sys.stderr.write(format_build_error(exc))
        raise SystemExit(1) from exc

    sys.stdout.write(format_bundles(server_builds, root=root))
