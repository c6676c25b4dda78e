"""Build orchestration — one client build, then N server builds.

Phases run strictly in order::

    1. Guard    remove the previous server output (if allowed)
    2. Client   runner(BuildRequest(CLIENT))        -- awaited alone
    3. Server   runner(BuildRequest(SERVER, b))     -- one per bundle,
                                                       concurrently

A failure in phase 1 or 2 aborts immediately.  Phase-3 builds never
cancel each other: each task records its own outcome, and once the task
group has settled every failure is raised together in
:class:`ServerBuildsFailed`.

Usage::

    from fledge.build import build
    from fledge.config import BuildOptions

    report = build(".", BuildOptions(minify=True))
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import anyio

from fledge.bundles import get_server_bundles
from fledge.config import BuildMode, BuildOptions, ResolvedConfig
from fledge.errors import (
    BundleBuildFailure,
    ClientBuildFailure,
    ConfigurationError,
    ServerBuildsFailed,
)
from fledge.guard import clean_server_build_directory
from fledge.loader import resolve_config
from fledge.routes.types import ServerBuildConfig
from fledge.runner import BuildRequest, BuildRunner

logger = logging.getLogger("fledge.build")


@dataclass(frozen=True, slots=True)
class BundleResult:
    """Outcome of one server bundle build."""

    server_build_directory: Path
    route_ids: tuple[str, ...]
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class BuildReport:
    """Summary of a build run.

    Attributes:
        cleaned: Whether the server build directory was emptied first.
        bundles: One result per server bundle, in bundle order (not
            completion order).  Empty in SPA mode.
    """

    cleaned: bool
    bundles: tuple[BundleResult, ...] = ()

    @property
    def failures(self) -> tuple[BundleResult, ...]:
        return tuple(b for b in self.bundles if not b.ok)

    @property
    def ok(self) -> bool:
        return not self.failures


async def run_build(
    config: ResolvedConfig,
    options: BuildOptions | None = None,
    runner: BuildRunner | None = None,
) -> BuildReport:
    """Run the guard, client build, and server bundle builds.

    Args:
        config: Resolved build configuration.
        options: Invocation flags, passed through to the runner.
        runner: Overrides ``config.runner``.

    Raises:
        ConfigurationError: No runner is configured, or bundle
            assignment rejected the config.
        CorruptManifest: The route manifest is inconsistent.
        GuardFailure: The previous output could not be removed.
        ClientBuildFailure: The client build failed.
        ServerBuildsFailed: One or more bundle builds failed, raised
            after all of them have finished.
    """
    options = options or BuildOptions()
    runner = runner or config.runner
    if runner is None:
        msg = "No build runner configured. Set `runner=` in FledgeConfig."
        raise ConfigurationError(msg)

    # Bundle assignment is pure; resolve it before touching the filesystem
    server_builds = (
        get_server_bundles(config.routes, config.server_build_directory, config.server_bundles)
        if config.ssr
        else []
    )

    # Phase 1: guard
    empty_out_dir = options.empty_out_dir if options.empty_out_dir is not None else config.empty_out_dir
    cleaned = await anyio.to_thread.run_sync(
        clean_server_build_directory,
        config.root_directory,
        config.server_build_directory,
        empty_out_dir,
    )

    # Phase 2: client build
    logger.info("Building client into %s", config.client_build_directory)
    try:
        await runner(BuildRequest(mode=BuildMode.CLIENT, config=config, options=options))
    except Exception as exc:
        msg = f"Client build failed: {exc}"
        raise ClientBuildFailure(msg) from exc

    if not config.ssr:
        logger.info("SPA mode: skipping server build")
        return BuildReport(cleaned=cleaned)

    # Phase 3: server builds
    results = await _build_server_bundles(config, options, runner, server_builds)
    report = BuildReport(cleaned=cleaned, bundles=results)

    failures = {
        result.server_build_directory: BundleBuildFailure(
            result.server_build_directory, result.error
        )
        for result in report.failures
        if result.error is not None
    }
    if failures:
        raise ServerBuildsFailed(failures, report)
    return report


async def _build_server_bundles(
    config: ResolvedConfig,
    options: BuildOptions,
    runner: BuildRunner,
    server_builds: list[ServerBuildConfig],
) -> tuple[BundleResult, ...]:
    """Build every bundle concurrently and wait for all of them."""
    logger.info(
        "Building %d server bundle%s",
        len(server_builds),
        "s" if len(server_builds) != 1 else "",
    )
    results: dict[Path, BundleResult] = {}

    async def _build(server_build: ServerBuildConfig) -> None:
        directory = server_build.server_build_directory
        route_ids = tuple(server_build.routes)
        request = BuildRequest(
            mode=BuildMode.SERVER,
            config=config,
            options=options,
            server_build=server_build,
        )
        try:
            await runner(request)
        except Exception as exc:
            logger.error("Server build failed for %s: %s", directory, exc)
            results[directory] = BundleResult(directory, route_ids, exc)
        else:
            logger.info("Built server bundle %s (%d routes)", directory, len(route_ids))
            results[directory] = BundleResult(directory, route_ids)

    async with anyio.create_task_group() as tg:
        for server_build in server_builds:
            tg.start_soon(_build, server_build)

    return tuple(results[sb.server_build_directory] for sb in server_builds)


def build(root: str | Path, options: BuildOptions | None = None) -> BuildReport:
    """Resolve ``fledge.config.py`` under *root* and run the full build.

    Synchronous entry point used by the CLI.  See :func:`run_build` for
    the errors raised.
    """
    options = options or BuildOptions()
    config = resolve_config(options.config, options.mode, root)
    return anyio.run(run_build, config, options)
