"""Tests for velix.cli: ``velix run`` and ``velix routes``."""

import sys
import types
from unittest.mock import MagicMock, patch

import pytest

from velix.app import App
from velix.cli import main
from velix.cli._resolve import resolve_app
from velix.config import AppConfig


def _list_users():
    return []


def _create_user():
    return {}


@pytest.fixture
def fake_app(monkeypatch: pytest.MonkeyPatch) -> App:
    """Register a fake module with a velix App instance."""
    app = App(config=AppConfig(host="127.0.0.1", port=8000, debug=True, public_dir=None))
    app.get("/api/users", _list_users)
    app.post("/api/users/{name}", _create_user)
    mod = types.ModuleType("_velix_cli_app")
    mod.app = app  # type: ignore[attr-defined]
    mod.factory = lambda: App(AppConfig(public_dir=None))  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_velix_cli_app", mod)
    return app


class TestResolveApp:
    def test_explicit_attribute(self, fake_app: App) -> None:
        assert resolve_app("_velix_cli_app:app") is fake_app

    def test_default_attribute(self, fake_app: App) -> None:
        assert resolve_app("_velix_cli_app") is fake_app

    def test_factory(self, fake_app: App) -> None:
        assert isinstance(resolve_app("_velix_cli_app:factory"), App)

    def test_not_an_app(self, fake_app: App) -> None:
        with pytest.raises(TypeError, match="not a velix.App"):
            resolve_app("_velix_cli_app:not_an_app")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("nonexistent_module_xyz:app")

    def test_missing_attribute(self, fake_app: App) -> None:
        with pytest.raises(AttributeError):
            resolve_app("_velix_cli_app:does_not_exist")


class TestVelixRun:
    @patch("velix.server.dev.run_server")
    def test_default_host_and_port(self, mock_server: MagicMock, fake_app: App) -> None:
        main(["run", "_velix_cli_app:app"])
        mock_server.assert_called_once()
        args = mock_server.call_args[0]
        assert args[0] is fake_app
        assert args[1] == "127.0.0.1"
        assert args[2] == 8000

    @patch("velix.server.dev.run_server")
    def test_overrides(self, mock_server: MagicMock, fake_app: App) -> None:
        main(["run", "_velix_cli_app:app", "--host", "0.0.0.0", "--port", "3000", "--workers", "4"])
        args, kwargs = mock_server.call_args
        assert args[1] == "0.0.0.0"
        assert args[2] == 3000
        assert kwargs["workers"] == 4

    @patch("velix.server.dev.run_server")
    def test_app_path_and_reload(self, mock_server: MagicMock, fake_app: App) -> None:
        main(["run", "_velix_cli_app:app"])
        kwargs = mock_server.call_args[1]
        assert kwargs["app_path"] == "_velix_cli_app:app"
        assert kwargs["reload"] is True  # debug=True in fixture

    @patch("velix.server.dev.run_server")
    def test_app_frozen_before_serving(self, mock_server: MagicMock, fake_app: App) -> None:
        main(["run", "_velix_cli_app:app"])
        with pytest.raises(RuntimeError):
            fake_app.get("/late", _list_users)

    def test_invalid_import_string(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "nonexistent_module_xyz:app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestVelixRoutes:
    def test_table(self, fake_app: App, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_velix_cli_app:app"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert lines[2].split() == ["GET", "/api/users", "_list_users"]
        assert lines[3].split() == ["POST", "/api/users/{name}", "_create_user"]

    def test_no_routes(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        mod = types.ModuleType("_velix_empty_app")
        mod.app = App(AppConfig(public_dir=None))  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "_velix_empty_app", mod)
        main(["routes", "_velix_empty_app:app"])
        assert "No routes registered." in capsys.readouterr().out

    def test_invalid_import_string(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "nonexistent_module_xyz:app"])
        assert exc_info.value.code == 1


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "velix" in capsys.readouterr().out
