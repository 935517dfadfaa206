"""Document router — serves the rendered template and the live-reload channel.

There is exactly one document. ``/`` and ``/index.html`` render it fresh on
every request; ``/__livereload`` holds an SSE connection open so the
browser can be told to reload. Asset paths are handled by
``preen.content.assets.AssetFiles``.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from chirp import EventStream
from chirp.http.request import Request
from chirp.http.response import Response

from preen.content.renderer import RenderFailure, render_document
from preen.reactive.broadcaster import LiveConnection
from preen.reactive.error_overlay import error_page_response
from preen.reactive.hmr import LIVERELOAD_PATH

if TYPE_CHECKING:
    from chirp import App
    from kida import Environment

    from preen.config import RenderRequest
    from preen.reactive.broadcaster import ClientRegistry


DOCUMENT_PATHS = ("/", "/index.html")

# Reserved paths that are never served from disk
RESERVED_PATHS = frozenset({*DOCUMENT_PATHS, LIVERELOAD_PATH})


class DocumentRouter:
    """Registers the document and live-reload routes on a Chirp app.

    Args:
        app: Chirp App to register routes on (must not yet be frozen).
        env: Kida environment used to compile the template source.
        render_request: Template and data paths, fixed for the process.
        registry: Registry that live-reload connections join.

    """

    def __init__(
        self,
        app: App,
        env: Environment,
        render_request: RenderRequest,
        registry: ClientRegistry,
    ) -> None:
        self._app = app
        self._env = env
        self._render_request = render_request
        self._registry = registry

    def register(self) -> None:
        """Register every route. Must be called before the app is frozen."""
        self.register_document()
        self.register_livereload()

    def render(self) -> Response:
        """Render the document into an uncached response (200 or 500)."""
        result = render_document(self._env, self._render_request)
        if isinstance(result, RenderFailure):
            return error_page_response(result.diagnostic, title=result.title)
        return Response(
            body=result.html,
            status=200,
            content_type="text/html; charset=utf-8",
        ).with_header("Cache-Control", "no-cache")

    def register_document(self) -> None:
        """Register ``/`` and ``/index.html``."""

        def document() -> Response:
            return self.render()

        document.__name__ = "preen_document"
        document.__qualname__ = "DocumentRouter.preen_document"

        for path in DOCUMENT_PATHS:
            self._app.route(path, name=f"preen:document:{path}")(document)

    def register_livereload(self) -> None:
        """Register the ``/__livereload`` SSE endpoint.

        Each request creates a LiveConnection. The route returns a Chirp
        ``EventStream`` fed from the connection's queue; the connection
        joins the registry when the stream starts and leaves it when the
        generator is cancelled or closed.

        """
        registry = self._registry

        async def livereload(request: Request) -> Any:
            conn = LiveConnection(loop=asyncio.get_running_loop())

            async def generate():  # type: ignore[return]
                # Registration lives exactly as long as the generator.
                registry.register(conn)
                try:
                    async for event in conn.events():
                        yield event
                finally:
                    conn.close()
                    registry.unregister(conn)

            return EventStream(generate())

        livereload.__name__ = "preen_livereload"
        livereload.__qualname__ = "DocumentRouter.preen_livereload"

        self._app.route(LIVERELOAD_PATH, name="preen:livereload")(livereload)
