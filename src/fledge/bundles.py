"""Server bundle assignment.

Groups leaf routes into server builds using the ``server_bundles``
classification function from the build config.  Grouping is by leaf so
every bundle carries the full ancestor chain each of its leaves needs.
Leaves that classify to the same directory share one build.

Pipeline::

    leaf_routes(routes)                     # manifest order
      -> match_chain(routes, leaf.id)       # root-first
      -> server_bundles(ServerBundleArgs)   # "admin", "public", ...
      -> <server_build_directory>/admin     # bundle key
      -> merge chain into bundle.routes
"""

import logging
import os
from collections.abc import Iterable
from itertools import combinations
from pathlib import Path

from fledge.errors import ConfigurationError
from fledge.routes.manifest import leaf_routes, match_chain
from fledge.routes.types import (
    Route,
    RouteManifest,
    ServerBuildConfig,
    ServerBundleArgs,
    ServerBundleFunction,
)

logger = logging.getLogger("fledge.bundles")


def get_server_bundles(
    routes: RouteManifest,
    server_build_directory: str | Path,
    server_bundles: ServerBundleFunction | None = None,
) -> list[ServerBuildConfig]:
    """Split a route manifest into server build configs.

    Without a classification function the whole manifest is built as a
    single bundle into *server_build_directory*.

    Args:
        routes: The full route manifest.  Read, never mutated.
        server_build_directory: Top-level server output directory.
        server_bundles: Maps a leaf route and its match chain to a
            directory relative to *server_build_directory*.

    Returns:
        Bundles ordered by the first leaf that mapped to each directory.

    Raises:
        ConfigurationError: The classification function failed, returned
            a path outside *server_build_directory*, or produced
            overlapping bundle directories.
        CorruptManifest: A match chain could not be resolved.
    """
    server_dir = Path(os.path.normpath(server_build_directory))

    if server_bundles is None:
        return [ServerBuildConfig(routes=dict(routes), server_build_directory=server_dir)]

    bundles: dict[Path, ServerBuildConfig] = {}

    for route in leaf_routes(routes):
        matches = match_chain(routes, route.id)
        relative = _classify(server_bundles, route, matches)
        directory = _bundle_directory(server_dir, relative, route)

        bundle = bundles.get(directory)
        if bundle is None:
            bundle = ServerBuildConfig(routes={}, server_build_directory=directory)
            bundles[directory] = bundle
        for match in matches:
            bundle.routes[match.id] = match

        logger.debug("Route %s -> server bundle %s", route.id, directory)

    _check_disjoint(bundles)
    return list(bundles.values())


def _classify(
    server_bundles: ServerBundleFunction,
    route: Route,
    matches: tuple[Route, ...],
) -> str:
    """Call the classification function and normalise its result to a str."""
    try:
        result = server_bundles(ServerBundleArgs(route=route, matches=matches))
    except Exception as exc:
        msg = f"server_bundles raised for route {route.id!r}: {exc}"
        raise ConfigurationError(msg) from exc

    if not isinstance(result, (str, os.PathLike)):
        msg = (
            f"server_bundles returned {type(result).__name__} for route "
            f"{route.id!r}, expected a relative directory"
        )
        raise ConfigurationError(msg)
    return os.fspath(result)


def _bundle_directory(server_dir: Path, relative: str, route: Route) -> Path:
    """Join *relative* onto *server_dir*, rejecting paths that escape it."""
    if os.path.isabs(relative):
        msg = (
            f"server_bundles returned absolute path {relative!r} for route "
            f"{route.id!r}; bundle directories must be relative"
        )
        raise ConfigurationError(msg)

    directory = Path(os.path.normpath(server_dir / relative))
    if not directory.is_relative_to(server_dir):
        msg = (
            f"server_bundles returned {relative!r} for route {route.id!r}, "
            f"which resolves outside {server_dir}"
        )
        raise ConfigurationError(msg)
    return directory


def _check_disjoint(directories: Iterable[Path]) -> None:
    """Reject bundle directories that nest inside one another."""
    for first, second in combinations(directories, 2):
        if first.is_relative_to(second) or second.is_relative_to(first):
            msg = (
                f"Server bundle directories overlap: {first} and {second}. "
                "Each bundle must build into its own directory."
            )
            raise ConfigurationError(msg)
