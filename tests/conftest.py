"""Shared test fixtures for preen."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from preen.config import PreenConfig


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project: a template, a data file and one stylesheet.

    Returns the project directory.
    """
    (tmp_path / "template.html").write_text(
        "<!DOCTYPE html>\n<html>\n<body>\n<h1>{{ title }}</h1>\n</body>\n</html>\n"
    )
    (tmp_path / "data.json").write_text(json.dumps({"title": "Hi"}))
    (tmp_path / "styles.css").write_text("body { margin: 0; }\n")
    return tmp_path


@pytest.fixture
def project_config(tmp_project: Path) -> PreenConfig:
    """A PreenConfig for ``tmp_project`` with its data file."""
    return PreenConfig(
        template=tmp_project / "template.html",
        data=tmp_project / "data.json",
    )


def header(response: object, name: str) -> str | None:
    """First value of header *name* on a TestClient response (case-insensitive)."""
    wanted = name.lower()
    for key, value in getattr(response, "headers", ()):
        if key.lower() == wanted:
            return value
    return None
