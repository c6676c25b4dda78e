"""Tests for fledge.loader — fledge.config.py resolution."""

import textwrap
from pathlib import Path

import pytest

from fledge.config import FledgeConfig, ResolvedConfig
from fledge.errors import ConfigNotFound, ConfigurationError, CorruptManifest
from fledge.loader import load_config, resolve_config


def _write(path: Path, source: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source))
    return path


EXPLICIT_ROUTES = """
    from fledge.config import FledgeConfig
    from fledge.routes.types import Route

    fledge = FledgeConfig(
        routes={
            "root": Route(id="root"),
            "a": Route(id="a", parent_id="root"),
        },
    )
"""


class TestLoadConfig:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFound, match="fledge.config.py"):
            load_config(tmp_path / "fledge.config.py", "production")

    def test_missing_attribute(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "fledge.config.py", "other = 1\n")
        with pytest.raises(ConfigNotFound, match="FledgeConfig"):
            load_config(path, "production")

    def test_config_not_found_is_configuration_error(self) -> None:
        assert issubclass(ConfigNotFound, ConfigurationError)

    def test_wrong_type(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "fledge.config.py", "fledge = {'routes': {}}\n")
        with pytest.raises(ConfigurationError, match="dict"):
            load_config(path, "production")

    def test_import_error_wrapped(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "fledge.config.py", "raise RuntimeError('broken')\n")
        with pytest.raises(ConfigurationError, match="broken"):
            load_config(path, "production")

    def test_factory_receives_mode(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "fledge.config.py",
            """
            from fledge.config import FledgeConfig

            def fledge(mode):
                return FledgeConfig(build_directory="dist-" + mode)
            """,
        )
        config = load_config(path, "staging")
        assert isinstance(config, FledgeConfig)
        assert config.build_directory == "dist-staging"


class TestResolveConfig:
    def test_paths_are_absolute(self, tmp_path: Path) -> None:
        _write(tmp_path / "fledge.config.py", EXPLICIT_ROUTES)
        config = resolve_config(None, None, tmp_path)

        assert isinstance(config, ResolvedConfig)
        assert config.root_directory == tmp_path
        assert config.build_directory == tmp_path / "build"
        assert config.client_build_directory == tmp_path / "build" / "client"
        assert config.server_build_directory == tmp_path / "build" / "server"
        assert config.mode == "production"
        assert list(config.routes) == ["root", "a"]

    def test_custom_config_file_and_mode(self, tmp_path: Path) -> None:
        _write(tmp_path / "config" / "build.py", EXPLICIT_ROUTES)
        config = resolve_config("config/build.py", "development", tmp_path)
        assert config.mode == "development"

    def test_build_directory_outside_root(self, tmp_path: Path) -> None:
        root = tmp_path / "project"
        _write(
            root / "fledge.config.py",
            """
            from fledge.config import FledgeConfig
            from fledge.routes.types import Route

            fledge = FledgeConfig(routes={"root": Route(id="root")}, build_directory="../out")
            """,
        )
        config = resolve_config(None, None, root)
        assert config.server_build_directory == tmp_path / "out" / "server"

    def test_discovers_routes_when_not_given(self, tmp_path: Path) -> None:
        _write(tmp_path / "fledge.config.py", "from fledge.config import FledgeConfig\nfledge = FledgeConfig()\n")
        _write(tmp_path / "app" / "root.py", "")
        _write(tmp_path / "app" / "routes" / "about.py", "")

        config = resolve_config(None, None, tmp_path)
        assert list(config.routes) == ["root", "routes/about"]

    def test_manifest_key_mismatch(self, tmp_path: Path) -> None:
        _write(
            tmp_path / "fledge.config.py",
            """
            from fledge.config import FledgeConfig
            from fledge.routes.types import Route

            fledge = FledgeConfig(routes={"root": Route(id="index")})
            """,
        )
        with pytest.raises(CorruptManifest):
            resolve_config(None, None, tmp_path)

    def test_spa_mode_rejects_server_bundles(self, tmp_path: Path) -> None:
        _write(
            tmp_path / "fledge.config.py",
            """
            from fledge.config import FledgeConfig
            from fledge.routes.types import Route

            fledge = FledgeConfig(
                routes={"root": Route(id="root")},
                ssr=False,
                server_bundles=lambda args: "x",
            )
            """,
        )
        with pytest.raises(ConfigurationError, match="ssr=False"):
            resolve_config(None, None, tmp_path)
