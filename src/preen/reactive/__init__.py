"""Reactive layer — getting changes to the browser.

Connects file changes to browser reloads through the client registry,
the injected reload script and the error overlay.
"""

from preen.reactive.broadcaster import ClientRegistry, LiveConnection
from preen.reactive.error_overlay import build_error_page, error_overlay_middleware
from preen.reactive.hmr import inject_reload_script, make_hmr_middleware

__all__ = [
    "ClientRegistry",
    "LiveConnection",
    "build_error_page",
    "error_overlay_middleware",
    "inject_reload_script",
    "make_hmr_middleware",
]
