"""Data models for the route manifest and server bundles.

Immutable frozen dataclasses.  The manifest itself is a plain mapping
from route id to :class:`Route`, owned by the resolved config for the
duration of one build and never mutated.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Route:
    """A node in the application's route tree.

    Attributes:
        id: Unique id across the manifest (e.g. ``"routes/blog"``).
        parent_id: Id of the enclosing route.  ``None`` only for
            root-level routes.
        file: Module path relative to the app directory.
        path: URL pattern segment relative to the parent route.
        index: True for the index route of its parent.
        case_sensitive: Whether ``path`` matches case-sensitively.
    """

    id: str
    parent_id: str | None = None
    file: str = ""
    path: str | None = None
    index: bool = False
    case_sensitive: bool = False


RouteManifest: TypeAlias = Mapping[str, Route]


@dataclass(frozen=True, slots=True)
class ServerBundleArgs:
    """Argument passed to a ``server_bundles`` classification function.

    Attributes:
        route: The leaf route being classified.
        matches: Its match chain, root-first, ending with ``route``.
    """

    route: Route
    matches: tuple[Route, ...]


ServerBundleFunction: TypeAlias = Callable[[ServerBundleArgs], str]


@dataclass(frozen=True, slots=True)
class ServerBuildConfig:
    """One unit of server build work.

    Built once per build invocation by :func:`fledge.bundles.get_server_bundles`
    and consumed exactly once by the orchestrator.

    Attributes:
        routes: Every route on every match chain assigned to the bundle.
        server_build_directory: Output directory for this bundle.
    """

    routes: dict[str, Route]
    server_build_directory: Path
