"""Tests for CLI argument handling."""

from __future__ import annotations

from unittest.mock import patch

from ezstremio.interfaces.cli.cli import DEFAULT_PORT, _cli_overrides, _parse_args, start


class TestParseArgs:
    def test_defaults(self) -> None:
        args = _parse_args([])
        assert args.host is None
        assert args.port is None
        assert _cli_overrides(args) == {}

    def test_overrides(self) -> None:
        args = _parse_args(
            ["--search-mode", "httpx", "--log-level", "DEBUG", "--log-format", "json"]
        )
        assert _cli_overrides(args) == {
            "search_mode": "httpx",
            "log_level": "DEBUG",
            "log_format": "json",
        }


class TestStart:
    def test_port_from_env(self, monkeypatch, tmp_path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.delenv("HOST", raising=False)
        with (
            patch("ezstremio.interfaces.cli.cli.configure_logging", return_value={}),
            patch("ezstremio.interfaces.cli.cli.uvicorn.run") as run,
        ):
            start([])

        assert run.call_args.kwargs["port"] == 9090
        assert run.call_args.kwargs["host"] == "0.0.0.0"

    def test_default_port(self, monkeypatch, tmp_path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("HOST", raising=False)
        with (
            patch("ezstremio.interfaces.cli.cli.configure_logging", return_value={}),
            patch("ezstremio.interfaces.cli.cli.uvicorn.run") as run,
        ):
            start(["--host", "127.0.0.1"])

        assert run.call_args.kwargs["port"] == DEFAULT_PORT == 8080
        assert run.call_args.kwargs["host"] == "127.0.0.1"
