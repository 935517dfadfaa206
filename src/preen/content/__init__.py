"""Content layer — the template, its data, its assets and its watcher.

Handles rendering (template + data -> HTML or diagnostic), asset serving,
document routing and file watching.
"""

from preen.content.assets import AssetFiles, content_type_for
from preen.content.data import load_data
from preen.content.renderer import (
    RenderFailure,
    RenderResult,
    RenderSuccess,
    render_document,
    render_template,
)
from preen.content.router import DocumentRouter
from preen.content.watcher import ChangeEvent, LiveWatcher

__all__ = [
    "AssetFiles",
    "ChangeEvent",
    "DocumentRouter",
    "LiveWatcher",
    "RenderFailure",
    "RenderResult",
    "RenderSuccess",
    "content_type_for",
    "load_data",
    "render_document",
    "render_template",
]
