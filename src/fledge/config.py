"""Build configuration.

Three frozen dataclasses, immutable after creation:

- :class:`BuildOptions` — per-invocation flags from the CLI or ``build()``
- :class:`FledgeConfig` — user-authored, lives in ``fledge.config.py``
- :class:`ResolvedConfig` — absolute paths and a concrete route manifest,
  produced by :func:`fledge.loader.resolve_config`
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

if TYPE_CHECKING:
    from fledge.routes.types import Route, ServerBundleFunction
    from fledge.runner import BuildRunner


LogLevel: TypeAlias = Literal["debug", "info", "warning", "error", "silent"]


class BuildMode(Enum):
    """Which side of the app a single build produces."""

    CLIENT = "client"
    SERVER = "server"


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Flags for one build invocation.

    Passed through to the build runner untouched.  Only
    ``empty_out_dir`` is read by fledge itself, as an override for the
    output directory guard.  ``None`` means "not given".
    """

    assets_inline_limit: int | None = None
    clear_screen: bool | None = None
    config: str | None = None
    empty_out_dir: bool | None = None
    force: bool | None = None
    log_level: LogLevel | None = None
    minify: bool | str | None = None
    mode: str | None = None


@dataclass(frozen=True, slots=True)
class FledgeConfig:
    """User build configuration.  Export it as ``fledge`` from ``fledge.config.py``::

        from fledge import CommandRunner, FledgeConfig

        def server_bundles(args):
            return "admin" if args.route.id.startswith("routes/admin") else "public"

        fledge = FledgeConfig(
            server_bundles=server_bundles,
            runner=CommandRunner(client=("npm", "run", "build:client"),
                                 server=("npm", "run", "build:server")),
        )
    """

    # Routes: explicit manifest, or None to discover from app_directory
    routes: Mapping[str, Route] | None = None
    app_directory: str | Path = "app"

    # Output
    build_directory: str | Path = "build"
    empty_out_dir: bool | None = None

    # Server bundles (None = single bundle)
    server_bundles: ServerBundleFunction | None = None

    # SPA mode: client build only
    ssr: bool = True

    runner: BuildRunner | None = None


@dataclass(frozen=True, slots=True)
class ResolvedConfig:
    """Build configuration with every path made absolute.

    ``routes`` is owned by this object for one build and treated as
    read-only by every consumer.
    """

    root_directory: Path
    routes: Mapping[str, Route]
    build_directory: Path
    client_build_directory: Path
    server_build_directory: Path
    server_bundles: ServerBundleFunction | None = None
    empty_out_dir: bool | None = None
    ssr: bool = True
    runner: BuildRunner | None = None
    mode: str = "production"
