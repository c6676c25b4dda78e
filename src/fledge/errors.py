"""Fledge exception hierarchy.

Shared across config resolution, bundle assignment, the output guard,
and the build orchestrator so every module raises and catches the same
types.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fledge.build import BuildReport


class FledgeError(Exception):
    """Base for all fledge-specific errors."""


class ConfigurationError(FledgeError):
    """Raised when build configuration is invalid.

    Covers bad ``server_bundles`` results as well as malformed
    ``fledge.config.py`` files.
    """


class ConfigNotFound(ConfigurationError):  # noqa: N818
    """The build configuration could not be located."""


class CorruptManifest(FledgeError):
    """The route manifest is internally inconsistent."""


class MissingRoute(CorruptManifest):  # noqa: N818
    """A parent id on a match-chain walk is absent from the manifest."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Missing route for {route_id}")


class RouteCycle(CorruptManifest):  # noqa: N818
    """The parent links starting at a route loop back on themselves."""

    def __init__(self, route_id: str, chain: tuple[str, ...]) -> None:
        self.route_id = route_id
        self.chain = chain
        super().__init__(
            f"Route {route_id!r} has a cyclic parent chain: {' -> '.join(chain)}"
        )


class GuardFailure(FledgeError):
    """Removing the previous server build output failed."""


class ClientBuildFailure(FledgeError):
    """The client build failed; no server build was started."""


@dataclass(frozen=True, slots=True)
class BundleBuildFailure:
    """One server bundle's failed build.

    Not raised on its own: collected into :class:`ServerBuildsFailed`
    so sibling bundles keep building.
    """

    server_build_directory: Path
    error: BaseException

    def __str__(self) -> str:
        return f"{self.server_build_directory}: {self.error}"


class ServerBuildsFailed(FledgeError):  # noqa: N818
    """One or more server bundle builds failed.

    Raised only after every launched bundle build has settled.
    ``failures`` maps each failing bundle's directory to its failure.
    """

    def __init__(self, failures: dict[Path, BundleBuildFailure], report: BuildReport) -> None:
        self.failures = failures
        self.report = report
        count = len(failures)
        lines = [f"{count} server build{'s' if count != 1 else ''} failed"]
        lines.extend(f"  {failure}" for failure in failures.values())
        super().__init__("\n".join(lines))
