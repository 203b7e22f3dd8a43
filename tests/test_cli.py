"""Tests for the pipeweave CLI — parser, app resolution, routes, run."""

import argparse

import pytest

from pipeweave.app import App
from pipeweave.cli import build_parser, main
from pipeweave.cli._resolve import resolve_app
from pipeweave.cli._routes import format_routes
from pipeweave.cli._run import run_server


class TestParser:
    def test_no_command_prints_help(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "pipeweave" in capsys.readouterr().out

    def test_run_arguments(self) -> None:
        args = build_parser().parse_args(
            ["run", "hello_app.app:app", "--host", "0.0.0.0", "--port", "9000"]
        )
        assert args.command == "run"
        assert args.app == "hello_app.app:app"
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.log_level is None

    def test_run_requires_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 2


class TestResolveApp:
    def test_attribute(self) -> None:
        assert isinstance(resolve_app("hello_app.app:app"), App)

    def test_factory_is_called(self) -> None:
        assert isinstance(resolve_app("hello_app.app:create_app"), App)

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("no_such_module_xyz")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_app("hello_app.app:nope")

    def test_not_an_app(self) -> None:
        with pytest.raises(TypeError, match="not a pipeweave.App"):
            resolve_app("hello_app.controller:DEFAULT_OWNER")

    def test_failing_factory(self) -> None:
        with pytest.raises(TypeError, match="raised an error"):
            resolve_app("hello_app.controller:Hello")


class TestRoutes:
    def test_format_routes(self) -> None:
        (line,) = format_routes(resolve_app("hello_app.app:app").routes)

        assert line.startswith("root")
        assert "GET" in line
        assert "/{owner?}" in line
        assert "uppercaseOwner | Hello.hello" in line
        assert "[owner='World']" in line

    def test_routes_command(self, capsys) -> None:
        main(["routes", "hello_app.app:app"])
        assert "uppercaseOwner | Hello.hello" in capsys.readouterr().out

    def test_routes_command_bad_app(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "no_such_module_xyz"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestRun:
    def test_run_uses_cli_overrides(self, monkeypatch) -> None:
        calls: list[tuple[object, object]] = []

        def fake_run(self: App, host: str | None = None, port: int | None = None) -> None:
            calls.append((host, port))

        monkeypatch.setattr(App, "run", fake_run)
        monkeypatch.setattr("pipeweave.cli._run.configure_logging", lambda level: None)

        args = argparse.Namespace(
            app="hello_app.app:app", host="0.0.0.0", port=9000, log_level=None
        )
        run_server(args)
        assert calls == [("0.0.0.0", 9000)]

    def test_run_bad_app_exits(self) -> None:
        args = argparse.Namespace(app="no_such_module_xyz", host=None, port=None, log_level=None)
        with pytest.raises(SystemExit) as exc_info:
            run_server(args)
        assert exc_info.value.code == 1

    def test_run_startup_error_exits(self, monkeypatch, capsys) -> None:
        from hello_app.app import create_app

        broken = create_app(settings={})
        monkeypatch.setattr("pipeweave.cli._run.resolve_app", lambda import_string: broken)

        args = argparse.Namespace(app="hello_app.app:app", host=None, port=None, log_level=None)
        with pytest.raises(SystemExit) as exc_info:
            run_server(args)

        assert exc_info.value.code == 1
        assert "HelloMessage" in capsys.readouterr().err
