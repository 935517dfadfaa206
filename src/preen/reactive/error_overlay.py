"""Error overlay — renders a render failure as a styled HTML page.

Provides two mechanisms:
1. ``build_error_page`` — turns a diagnostic string into a standalone page
   that is served with status 500 when the template fails to render.
2. ``error_overlay_middleware`` — Chirp middleware that catches anything
   else raised while handling a request and returns the same page instead
   of a bare 500.

The live-reload script is injected into the page like any other HTML
response, so fixing the template and saving brings the real page back.
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING

from chirp.http.response import Response

if TYPE_CHECKING:
    from chirp.http.request import Request
    from chirp.middleware.protocol import AnyResponse, Next


logger = logging.getLogger("preen.server")


# ---------------------------------------------------------------------------
# Error page template (inline CSS, no external assets)
# ---------------------------------------------------------------------------

_ERROR_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>
*,*::before,*::after{{box-sizing:border-box}}
body{{margin:0;font-family:ui-monospace,SFMono-Regular,Menlo,Monaco,Consolas,monospace;
  background:#111827;color:#e5e7eb;line-height:1.6}}
.overlay{{max-width:960px;margin:2rem auto;padding:0 1.5rem}}
.error-header{{background:#2d1010;border:1px solid #f97316;border-radius:8px;
  padding:1.25rem 1.5rem;margin-bottom:1.5rem}}
.error-header h1{{margin:0;font-size:1rem;color:#f97316;font-weight:600}}
.error-header .message{{margin:0.5rem 0 0;font-size:0.95rem;color:#fdba74;
  word-break:break-word;white-space:pre-wrap}}
.trace{{background:#020617;border:1px solid #374151;border-radius:8px;
  padding:1rem 1.25rem;font-size:0.8rem;overflow-x:auto;white-space:pre;
  color:#9ca3af}}
.hint{{color:#9ca3af;font-size:0.85rem}}
</style>
</head>
<body>
<div class="overlay">
  <div class="error-header">
    <h1>{title}</h1>
    <p class="message">{summary}</p>
  </div>
  <pre class="trace">{diagnostic}</pre>
  <p class="hint">Fix the template or its data file and save.
  This page reloads on the next change.</p>
</div>
</body>
</html>
"""


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def build_error_page(diagnostic: str, *, title: str = "Template Render Error") -> str:
    """Render a full HTML error page for *diagnostic*.

    The first line of the diagnostic is shown as the summary, the whole
    text below it. Everything is escaped, including quotes.
    """
    summary = diagnostic.strip().splitlines()[0] if diagnostic.strip() else title
    return _ERROR_PAGE.format(
        title=_escape(title),
        summary=_escape(summary),
        diagnostic=_escape(diagnostic),
    )


def error_page_response(diagnostic: str, *, title: str = "Template Render Error") -> Response:
    """Wrap the error page in an uncached 500 response."""
    return Response(
        body=build_error_page(diagnostic, title=title),
        status=500,
        content_type="text/html; charset=utf-8",
    ).with_header("Cache-Control", "no-cache")


# ---------------------------------------------------------------------------
# Chirp middleware
# ---------------------------------------------------------------------------

async def error_overlay_middleware(request: Request, next: Next) -> AnyResponse:
    """Chirp middleware that turns unexpected exceptions into the error page.

    Only wraps the request handling: if the inner handler raises, we catch
    it and return the HTML error page instead of letting the 500 propagate.
    HTTP errors (404 and friends) are left to the framework.

    """
    from chirp.errors import HTTPError

    from preen.content.renderer import format_diagnostic

    try:
        return await next(request)
    except HTTPError:
        raise
    except Exception as exc:
        logger.exception("500 %s %s", request.method, request.path)
        return error_page_response(format_diagnostic(exc), title="Internal Server Error")
