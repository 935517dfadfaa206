"""Asset serving — files that sit next to the template.

Any request path that maps to a regular file beneath the template's
directory is served as-is with caching disabled. Everything else falls
through to the routes, and a path nobody handles becomes a plain-text 404.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from chirp.errors import HTTPError
from chirp.http.response import Response

if TYPE_CHECKING:
    from chirp.http.request import Request
    from chirp.middleware.protocol import AnyResponse, Next


logger = logging.getLogger("preen.server")

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".css": "text/css",
    ".js": "application/javascript",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def content_type_for(path: str | Path) -> str:
    """Content type for *path* from the fixed extension table."""
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def not_found_response() -> Response:
    """The plain-text 404 used for every unknown path."""
    return Response(
        body="Not found",
        status=404,
        content_type="text/plain; charset=utf-8",
    )


class AssetFiles:
    """Middleware that serves files from the template's directory.

    Paths in *reserved* (the document and live-reload paths) are never
    looked up on disk, so an ``index.html`` next to the template cannot
    shadow the rendered page.

    Usage::

        app.add_middleware(AssetFiles(
            config.template_dir,
            reserved=frozenset({"/", "/index.html", "/__livereload"}),
        ))
    """

    __slots__ = ("_directory", "_reserved")

    def __init__(self, directory: str | Path, *, reserved: frozenset[str] = frozenset()) -> None:
        self._directory = Path(directory).resolve()
        self._reserved = reserved

    @property
    def directory(self) -> Path:
        """Root directory assets are served from."""
        return self._directory

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Serve an asset, or fall through to the routes."""
        if request.method not in ("GET", "HEAD") or request.path in self._reserved:
            return await self._call_next(request, next)

        file_path = self.resolve(request.path)
        if file_path is None:
            return await self._call_next(request, next)

        return self._serve_file(file_path)

    def resolve(self, url_path: str) -> Path | None:
        """Map a URL path to an existing regular file, or None."""
        relative = url_path.lstrip("/")
        if not relative:
            return None
        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return None
        if not file_path.is_file():
            return None
        return file_path

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build an uncached response; unreadable files are 404."""
        try:
            body = file_path.read_bytes()
        except OSError as exc:
            logger.warning("Cannot read asset %s: %s", file_path, exc)
            return not_found_response()
        return (
            Response(body=body, content_type=content_type_for(file_path), status=200)
            .with_header("Cache-Control", "no-cache")
        )

    async def _call_next(self, request: Request, next: Next) -> AnyResponse:
        """Fall through to the routes; a 404 from the router becomes plain text."""
        try:
            return await next(request)
        except HTTPError as exc:
            if exc.status != 404:
                raise
            return not_found_response()
