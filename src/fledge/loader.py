"""Config resolution — loads ``fledge.config.py`` into a :class:`ResolvedConfig`.

Shared by ``fledge build`` and ``fledge bundles``.  The config file is a
plain Python module exporting ``fledge``: either a :class:`FledgeConfig`
or a factory called with the build mode.
"""

import importlib.util
import os
from pathlib import Path

from fledge.config import FledgeConfig, ResolvedConfig
from fledge.errors import ConfigNotFound, ConfigurationError, CorruptManifest
from fledge.routes.discovery import discover_routes

DEFAULT_CONFIG_FILE = "fledge.config.py"
DEFAULT_MODE = "production"
CONFIG_ATTRIBUTE = "fledge"


def resolve_config(
    config_file: str | Path | None,
    mode: str | None,
    root: str | Path,
) -> ResolvedConfig:
    """Locate, load, and resolve the build configuration for *root*.

    Args:
        config_file: Config module path, relative to *root* unless
            absolute.  Defaults to ``fledge.config.py``.
        mode: Build mode passed to config factories.  Defaults to
            ``"production"``.
        root: Project root directory.

    Raises:
        ConfigNotFound: The config file is missing or exports no
            ``fledge`` attribute.
        ConfigurationError: The config is invalid.
        CorruptManifest: An explicit route manifest is inconsistent.
    """
    root_dir = Path(os.path.abspath(root))
    mode = mode or DEFAULT_MODE
    path = root_dir / (config_file or DEFAULT_CONFIG_FILE)

    user_config = load_config(path, mode)
    return _resolve(user_config, root_dir, mode)


def load_config(path: str | Path, mode: str) -> FledgeConfig:
    """Import a config module and return its ``fledge`` config.

    Raises:
        ConfigNotFound: The file does not exist or exports no ``fledge``.
        ConfigurationError: The module failed to import, or ``fledge``
            is not a :class:`FledgeConfig`.
    """
    path = Path(path)
    if not path.is_file():
        msg = (
            f"Fledge config not found: {path}. "
            f"Create {DEFAULT_CONFIG_FILE} in the project root or pass --config."
        )
        raise ConfigNotFound(msg)

    spec = importlib.util.spec_from_file_location("_fledge_config", path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import fledge config from {path}"
        raise ConfigurationError(msg)

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        msg = f"Error loading fledge config {path}: {exc}"
        raise ConfigurationError(msg) from exc

    obj = getattr(module, CONFIG_ATTRIBUTE, None)
    if obj is None:
        msg = (
            f"Fledge config not found in {path}. "
            f"Export it as `{CONFIG_ATTRIBUTE} = FledgeConfig(...)`."
        )
        raise ConfigNotFound(msg)

    # Support factory functions - call them with the mode
    if callable(obj) and not isinstance(obj, FledgeConfig):
        try:
            obj = obj(mode)
        except Exception as exc:
            msg = f"Config factory in {path} raised an error: {exc}"
            raise ConfigurationError(msg) from exc

    if not isinstance(obj, FledgeConfig):
        msg = f"`{CONFIG_ATTRIBUTE}` in {path} is {type(obj).__name__}, not a FledgeConfig"
        raise ConfigurationError(msg)
    return obj


def _resolve(config: FledgeConfig, root_dir: Path, mode: str) -> ResolvedConfig:
    if not config.ssr and config.server_bundles is not None:
        msg = "server_bundles cannot be used with ssr=False (SPA mode has no server build)"
        raise ConfigurationError(msg)

    if config.routes is None:
        routes = discover_routes(root_dir / config.app_directory)
    else:
        routes = dict(config.routes)
        for key, route in routes.items():
            if key != route.id:
                msg = f"Manifest key {key!r} does not match route id {route.id!r}"
                raise CorruptManifest(msg)

    build_dir = _absolute(root_dir, config.build_directory)
    return ResolvedConfig(
        root_directory=root_dir,
        routes=routes,
        build_directory=build_dir,
        client_build_directory=build_dir / "client",
        server_build_directory=build_dir / "server",
        server_bundles=config.server_bundles,
        empty_out_dir=config.empty_out_dir,
        ssr=config.ssr,
        runner=config.runner,
        mode=mode,
    )


def _absolute(root_dir: Path, path: str | Path) -> Path:
    return Path(os.path.normpath(root_dir / path))
