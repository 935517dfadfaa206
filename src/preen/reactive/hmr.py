"""Live reload — script injection for every served HTML page.

Injects a small script that connects the browser to the ``/__livereload``
SSE endpoint. The injected script:

1. Reloads the page when a ``reload`` message arrives
2. Reloads after a short delay when the channel errors or closes, so a
   restarted server is picked up without a manual refresh
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from chirp.http.request import Request
    from chirp.middleware.protocol import AnyResponse, Next


LIVERELOAD_PATH = "/__livereload"

_CLOSING_BODY = re.compile(r"</body\s*>", re.IGNORECASE)

# No dependencies, just native EventSource.
_RELOAD_SCRIPT = """
<script data-preen-livereload>
(function () {
  var es = new EventSource('%(path)s');
  es.onmessage = function (event) {
    if (event.data === 'reload') {
      location.reload();
    }
  };
  es.onerror = function () {
    es.close();
    setTimeout(function () { location.reload(); }, %(delay)d);
  };
})();
</script>
"""


def reload_script(*, path: str = LIVERELOAD_PATH, delay_ms: int = 2000) -> str:
    """Return the live-reload ``<script>`` fragment."""
    return _RELOAD_SCRIPT % {"path": path, "delay": delay_ms}


def inject_reload_script(html: str, *, script: str | None = None) -> str:
    """Insert the live-reload script into an HTML document.

    The script goes immediately before the last ``</body>`` (matched
    case-insensitively); without one it is appended to the end.
    """
    snippet = reload_script() if script is None else script
    matches = list(_CLOSING_BODY.finditer(html))
    if matches:
        i = matches[-1].start()
        return html[:i] + snippet + html[i:]
    return html + snippet


def make_hmr_middleware(
    *, delay_ms: int = 2000,
) -> Callable[[Request, Next], Awaitable[AnyResponse]]:
    """Build Chirp middleware that injects the reload script into HTML.

    Only modifies regular responses with a ``text/html`` content type;
    SSE and streaming responses pass through untouched.
    """
    script = reload_script(delay_ms=delay_ms)

    async def hmr_middleware(request: Request, next: Next) -> AnyResponse:
        response = await next(request)

        if not hasattr(response, "body") or not hasattr(response, "content_type"):
            return response
        if "text/html" not in response.content_type:
            return response

        body = response.body
        if isinstance(body, bytes):
            body = body.decode("utf-8")

        return replace(response, body=inject_reload_script(body, script=script))

    return hmr_middleware
