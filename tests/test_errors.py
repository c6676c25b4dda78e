"""Tests for fledge.errors — exception hierarchy and error messages."""

from pathlib import Path

from fledge.build import BuildReport, BundleResult
from fledge.errors import (
    BundleBuildFailure,
    ClientBuildFailure,
    ConfigNotFound,
    ConfigurationError,
    CorruptManifest,
    FledgeError,
    GuardFailure,
    MissingRoute,
    RouteCycle,
    ServerBuildsFailed,
)


class TestHierarchy:
    def test_configuration_errors(self) -> None:
        assert issubclass(ConfigurationError, FledgeError)
        assert issubclass(ConfigNotFound, ConfigurationError)

    def test_corrupt_manifest(self) -> None:
        assert issubclass(MissingRoute, CorruptManifest)
        assert issubclass(RouteCycle, CorruptManifest)
        assert issubclass(CorruptManifest, FledgeError)

    def test_build_failures(self) -> None:
        assert issubclass(GuardFailure, FledgeError)
        assert issubclass(ClientBuildFailure, FledgeError)
        assert issubclass(ServerBuildsFailed, FledgeError)


class TestRouteCycle:
    def test_message(self) -> None:
        err = RouteCycle("a", ("a", "b", "a"))
        assert str(err) == "Route 'a' has a cyclic parent chain: a -> b -> a"


class TestServerBuildsFailed:
    def test_lists_every_failure(self) -> None:
        a = Path("/build/server/a")
        b = Path("/build/server/b")
        report = BuildReport(
            cleaned=True,
            bundles=(
                BundleResult(a, ("root",), RuntimeError("first")),
                BundleResult(b, ("root",), RuntimeError("second")),
            ),
        )
        failures = {
            a: BundleBuildFailure(a, RuntimeError("first")),
            b: BundleBuildFailure(b, RuntimeError("second")),
        }
        err = ServerBuildsFailed(failures, report)

        assert err.failures is failures
        assert err.report is report
        assert str(err).splitlines() == [
            "2 server builds failed",
            f"  {a}: first",
            f"  {b}: second",
        ]

    def test_singular(self) -> None:
        a = Path("/build/server/a")
        err = ServerBuildsFailed(
            {a: BundleBuildFailure(a, RuntimeError("x"))},
            BuildReport(cleaned=False),
        )
        assert str(err).startswith("1 server build failed")
