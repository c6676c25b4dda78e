"""Build runners — the one operation fledge delegates to a bundler.

A runner is any async callable taking a :class:`BuildRequest`.  It is
called once in client mode, then once per server bundle.  Raising any
exception marks that build as failed.

:class:`CommandRunner` runs an external command per build and hands it
the request through environment variables::

    FLEDGE_BUILD_MODE              client | server
    FLEDGE_ROOT                    project root
    FLEDGE_CLIENT_BUILD_DIRECTORY  client output directory
    FLEDGE_BUILD_OPTIONS           JSON of BuildOptions
    FLEDGE_SERVER_BUILD            JSON of the bundle (server mode only)

The invoked command reads its bundle back with :func:`load_server_build`.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import anyio

from fledge.config import BuildMode, BuildOptions
from fledge.errors import CorruptManifest
from fledge.routes.manifest import manifest_from_dict, manifest_to_dict
from fledge.routes.types import ServerBuildConfig

if TYPE_CHECKING:
    from fledge.config import ResolvedConfig

logger = logging.getLogger("fledge.build")

SERVER_BUILD_ENV = "FLEDGE_SERVER_BUILD"


@dataclass(frozen=True, slots=True)
class BuildRequest:
    """One build for a runner to perform.

    Attributes:
        mode: Client or server build.
        config: The resolved build configuration.
        options: Invocation flags, passed through untouched.
        server_build: The bundle to build.  ``None`` in client mode.
    """

    mode: BuildMode
    config: ResolvedConfig
    options: BuildOptions
    server_build: ServerBuildConfig | None = None


class BuildRunner(Protocol):
    """Performs a single client or server build."""

    async def __call__(self, request: BuildRequest) -> None: ...


@dataclass(frozen=True, slots=True)
class CommandRunner:
    """Run one external command per build.

    Attributes:
        client: Command for the client build.
        server: Command for each server bundle build.
        env: Extra environment variables for both commands.
    """

    client: tuple[str, ...]
    server: tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)

    async def __call__(self, request: BuildRequest) -> None:
        command = self.client if request.mode is BuildMode.CLIENT else self.server
        if not command:
            msg = f"No {request.mode.value} build command configured"
            raise ValueError(msg)

        env = {**os.environ, **self.env, **build_environment(request)}
        logger.debug("Running %s build: %s", request.mode.value, " ".join(command))
        await anyio.run_process(
            list(command),
            cwd=request.config.root_directory,
            env=env,
            stdout=None,
            stderr=None,
            check=True,
        )


def build_environment(request: BuildRequest) -> dict[str, str]:
    """Environment variables describing *request* for an external command."""
    env = {
        "FLEDGE_BUILD_MODE": request.mode.value,
        "FLEDGE_ROOT": str(request.config.root_directory),
        "FLEDGE_CLIENT_BUILD_DIRECTORY": str(request.config.client_build_directory),
        "FLEDGE_BUILD_OPTIONS": json.dumps(dataclasses.asdict(request.options)),
    }
    if request.server_build is not None:
        env[SERVER_BUILD_ENV] = json.dumps(server_build_to_dict(request.server_build))
    return env


# ---------------------------------------------------------------------------
# Server build serialization
# ---------------------------------------------------------------------------


def server_build_to_dict(server_build: ServerBuildConfig) -> dict[str, Any]:
    return {
        "serverBuildDirectory": str(server_build.server_build_directory),
        "routes": manifest_to_dict(server_build.routes),
    }


def server_build_from_dict(data: Mapping[str, Any]) -> ServerBuildConfig:
    """Inverse of :func:`server_build_to_dict`.

    Raises:
        CorruptManifest: Required keys are missing.
    """
    try:
        directory = data["serverBuildDirectory"]
        routes = data["routes"]
    except KeyError as exc:
        msg = f"Server build is missing {exc.args[0]!r}"
        raise CorruptManifest(msg) from None
    return ServerBuildConfig(
        routes=manifest_from_dict(routes),
        server_build_directory=Path(directory),
    )


def load_server_build(environ: Mapping[str, str] | None = None) -> ServerBuildConfig | None:
    """Read the bundle handed to a command by :class:`CommandRunner`.

    Returns ``None`` when not running as a server bundle build.
    """
    env = os.environ if environ is None else environ
    raw = env.get(SERVER_BUILD_ENV)
    if not raw:
        return None
    return server_build_from_dict(json.loads(raw))
