"""Renderer — turns the template and its data into HTML or a diagnostic.

Every call reads the template and data from disk; nothing is cached, so
edits are visible on the next request without a restart.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kida import Environment

from preen._errors import TemplateError
from preen.content.data import load_data

if TYPE_CHECKING:
    from collections.abc import Mapping

    from preen.config import RenderRequest


@dataclass(frozen=True, slots=True)
class RenderSuccess:
    """A fully rendered HTML document."""

    html: str


@dataclass(frozen=True, slots=True)
class RenderFailure:
    """A render that failed.

    Attributes:
        diagnostic: Error type and message followed by the traceback.
        title: Short heading for the error page.

    """

    diagnostic: str
    title: str = "Template Render Error"


type RenderResult = RenderSuccess | RenderFailure


def create_environment() -> Environment:
    """Create the Kida environment used to compile the template source.

    Autoescaping is on, so values from the data file are HTML-escaped
    unless the template marks them safe.
    """
    return Environment(autoescape=True)


def render_template(env: Environment, source: str, data: Mapping[str, Any]) -> str:
    """Render Kida *source* against *data*.

    Raises:
        TemplateError: On any syntax or runtime failure in the engine. The
            engine's exception is chained as ``__cause__``.

    """
    try:
        template = env.from_string(source)
        return template.render(dict(data))
    except Exception as exc:
        raise TemplateError(_describe(exc)) from exc


def render_document(env: Environment, request: RenderRequest) -> RenderResult:
    """Read the template and data from disk and render them.

    Never raises for template or data problems: a missing template or an
    engine failure comes back as a ``RenderFailure``.
    """
    try:
        source = request.template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return RenderFailure(
            diagnostic=format_diagnostic(exc),
            title="Template Not Readable",
        )

    data = load_data(request.data_path)

    try:
        html = render_template(env, source, data)
    except TemplateError as exc:
        return RenderFailure(diagnostic=format_diagnostic(exc.__cause__ or exc))

    return RenderSuccess(html=html)


def format_diagnostic(exc: BaseException) -> str:
    """Format *exc* as ``Type: message`` followed by its traceback."""
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"{_describe(exc)}\n\n{trace}"


def _describe(exc: BaseException) -> str:
    # Kida errors carry a compact, location-aware rendering of themselves.
    compact = getattr(exc, "format_compact", None)
    if callable(compact):
        return f"{type(exc).__name__}: {compact()}"
    return f"{type(exc).__name__}: {exc}"
