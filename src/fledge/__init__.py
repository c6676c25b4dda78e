"""Fledge — split an app's routes into server bundles and build them.

One client build, then one independent server build per bundle, run
concurrently.  Bundles are chosen by a ``server_bundles`` function over
each leaf route and its match chain.

Basic usage (``fledge.config.py``)::

    from fledge import CommandRunner, FledgeConfig

    def server_bundles(args):
        return "admin" if args.route.id.startswith("routes/admin") else "public"

    fledge = FledgeConfig(
        server_bundles=server_bundles,
        runner=CommandRunner(
            client=("npm", "run", "build:client"),
            server=("npm", "run", "build:server"),
        ),
    )

Then::

    $ fledge build
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "BuildMode",
    "BuildOptions",
    "BuildReport",
    "BuildRequest",
    "BuildRunner",
    "CommandRunner",
    "ConfigurationError",
    "FledgeConfig",
    "FledgeError",
    "Route",
    "ServerBuildConfig",
    "ServerBundleArgs",
    "get_server_bundles",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import fledge`` fast (anyio is only imported when building).
    """
    if name in ("BuildMode", "BuildOptions", "FledgeConfig"):
        from fledge import config as _config

        return getattr(_config, name)

    if name == "BuildReport":
        from fledge.build import BuildReport

        return BuildReport

    if name in ("BuildRequest", "BuildRunner", "CommandRunner"):
        from fledge import runner as _runner

        return getattr(_runner, name)

    if name in ("Route", "ServerBuildConfig", "ServerBundleArgs"):
        from fledge.routes import types as _types

        return getattr(_types, name)

    if name == "get_server_bundles":
        from fledge.bundles import get_server_bundles

        return get_server_bundles

    if name in ("ConfigurationError", "FledgeError"):
        from fledge import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
