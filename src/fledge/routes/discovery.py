"""Filesystem route discovery for the app directory.

Walks ``<app>/routes`` and builds a route manifest:

- ``<app>/root.py`` is the ``root`` route; every other route nests in it
- a directory containing ``_layout.py`` is a layout route, parent of
  everything beneath it
- other ``.py`` files are leaf routes; ``page.py`` is the index route
  of its directory
- ``{param}`` names become ``:param`` path segments

Conventions::

    app/
      root.py                  # root
      routes/
        page.py                # routes/page        (index of /)
        about.py               # routes/about       /about
        blog/
          _layout.py           # routes/blog        /blog
          page.py              # routes/blog/page   (index of /blog)
          {slug}.py            # routes/blog/{slug} /blog/:slug
"""

from __future__ import annotations

import re
from pathlib import Path

from fledge.errors import ConfigurationError
from fledge.routes.types import Route

ROOT_ROUTE_ID = "root"

# Regex matching {param} file and directory names
_PARAM_RE = re.compile(r"^\{(\w+)\}$")


def discover_routes(app_directory: str | Path) -> dict[str, Route]:
    """Walk an app directory and build its route manifest.

    Args:
        app_directory: Directory holding ``root.py`` and ``routes/``.

    Returns:
        Manifest keyed by route id, root first, then routes in sorted
        walk order.

    Raises:
        ConfigurationError: The directory or its ``root.py`` is missing.
    """
    app_dir = Path(app_directory).resolve()
    if not app_dir.is_dir():
        msg = f"App directory not found: {app_dir}"
        raise ConfigurationError(msg)

    root_file = app_dir / "root.py"
    if not root_file.is_file():
        msg = f"Root route not found: expected {root_file}"
        raise ConfigurationError(msg)

    manifest: dict[str, Route] = {
        ROOT_ROUTE_ID: Route(id=ROOT_ROUTE_ID, file="root.py", path=""),
    }

    routes_dir = app_dir / "routes"
    if routes_dir.is_dir():
        _walk_directory(
            routes_dir,
            app_dir,
            parent_id=ROOT_ROUTE_ID,
            segments=[],
            manifest=manifest,
        )
    return manifest


def _walk_directory(
    directory: Path,
    app_dir: Path,
    *,
    parent_id: str,
    segments: list[str],
    manifest: dict[str, Route],
) -> None:
    """Recursively walk a directory, adding layout and leaf routes.

    Args:
        directory: Current directory being walked.
        app_dir: App directory (for computing ids and file paths).
        parent_id: Id of the nearest enclosing layout route.
        segments: URL segments accumulated since that layout.
        manifest: Accumulator for discovered routes.
    """
    # The routes/ directory itself is laid out by root.py
    layout_file = directory / "_layout.py"
    if layout_file.is_file() and segments:
        route = Route(
            id=_route_id(directory, app_dir),
            parent_id=parent_id,
            file=layout_file.relative_to(app_dir).as_posix(),
            path="/".join(segments),
        )
        _add_route(manifest, route)
        parent_id = route.id
        segments = []

    for item in sorted(directory.iterdir()):
        if not item.is_file() or item.suffix != ".py":
            continue
        if item.name.startswith("_"):
            continue

        index = item.stem == "page"
        path_segments = segments if index else [*segments, _segment(item.stem)]
        route = Route(
            id=_route_id(item.with_suffix(""), app_dir),
            parent_id=parent_id,
            file=item.relative_to(app_dir).as_posix(),
            path="/".join(path_segments) or None,
            index=index,
        )
        _add_route(manifest, route)

    for item in sorted(directory.iterdir()):
        if not item.is_dir():
            continue
        if item.name.startswith("_") or item.name.startswith("."):
            continue

        _walk_directory(
            item,
            app_dir,
            parent_id=parent_id,
            segments=[*segments, _segment(item.name)],
            manifest=manifest,
        )


def _add_route(manifest: dict[str, Route], route: Route) -> None:
    """Insert *route*, rejecting a second file that maps to the same id."""
    existing = manifest.get(route.id)
    if existing is not None:
        msg = (
            f"Route id {route.id!r} is claimed by both {existing.file} and {route.file}"
        )
        raise ConfigurationError(msg)
    manifest[route.id] = route


def _route_id(path: Path, app_dir: Path) -> str:
    return path.relative_to(app_dir).as_posix()


def _segment(name: str) -> str:
    """Convert a file or directory name into a URL segment."""
    param_match = _PARAM_RE.match(name)
    if param_match:
        return ":" + param_match.group(1)
    return name
