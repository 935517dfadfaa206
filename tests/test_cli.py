"""Tests for preen._cli — argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from preen._cli import _build_parser, main
from preen._errors import ConfigError


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_positional_template(self) -> None:
        args = _build_parser().parse_args(["page.html"])
        assert args.template == "page.html"
        assert args.template_option is None
        assert args.data is None
        assert args.port is None
        assert args.host is None
        assert args.verbose is False

    def test_template_option(self) -> None:
        args = _build_parser().parse_args(["-t", "page.html"])
        assert args.template_option == "page.html"

    def test_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "--template", "page.html",
            "--data", "data.json",
            "--port", "4000",
            "--host", "0.0.0.0",
            "--verbose",
        ])
        assert args.template_option == "page.html"
        assert args.data == "data.json"
        assert args.port == 4000
        assert args.host == "0.0.0.0"
        assert args.verbose is True

    def test_short_flags(self) -> None:
        args = _build_parser().parse_args(["page.html", "-d", "data.yaml", "-p", "8080"])
        assert args.data == "data.yaml"
        assert args.port == 8080

    @pytest.mark.parametrize("port", ["0", "65536", "-1", "abc"])
    def test_invalid_port(self, port: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["page.html", "-p", port])
        assert exc_info.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out


class TestMain:
    """main — dispatch to preen.app.dev."""

    def test_positional_dispatch(self) -> None:
        with patch("preen.app.dev") as dev:
            main(["page.html", "-d", "data.json", "-p", "4000"])
        dev.assert_called_once_with("page.html", data="data.json", host=None, port=4000)

    def test_template_option_dispatch(self) -> None:
        with patch("preen.app.dev") as dev:
            main(["-t", "page.html"])
        dev.assert_called_once_with("page.html", data=None, host=None, port=None)

    def test_missing_template(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2
        assert "--template is required" in capsys.readouterr().err

    def test_both_template_forms(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["a.html", "-t", "b.html"])
        assert exc_info.value.code == 2
        assert "unexpected positional argument" in capsys.readouterr().err

    def test_config_error_exits_1(self, capsys: pytest.CaptureFixture[str]) -> None:
        with (
            patch("preen.app.dev", side_effect=ConfigError("bad config")),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["page.html"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Error: bad config" in err
        assert "usage:" in err

    def test_keyboard_interrupt_is_quiet(self) -> None:
        with patch("preen.app.dev", side_effect=KeyboardInterrupt):
            main(["page.html"])

    def test_bad_config_file_exits_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "page.html").write_text("<p>x</p>")
        (tmp_path / "preen.yaml").write_text("reload_delay_ms: soon\n")
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "page.html")])
        assert exc_info.value.code == 1
        assert "Error: reload_delay_ms" in capsys.readouterr().err
