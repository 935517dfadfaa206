"""Preen — a live-reloading preview server for a single Kida template.

Renders one template on every request, serves the files next to it, and
reloads the browser whenever the template or its data file changes.

Quick start::

    import preen

    preen.dev("page.html", data="data.json")

Or from the shell::

    preen page.html --data data.json --port 4000

Built on the Bengal stack:

    chirp       Web framework     (routes, SSE)
    kida        Template engine   (renders HTML)
    pounce      ASGI server       (serves the app)
    watchfiles  File watcher      (triggers reloads)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "PreenConfig",
    "__version__",
    "create_dev_server",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import preen`` fast while providing a clean top-level API.
    """
    if name == "PreenConfig":
        from preen.config import PreenConfig

        return PreenConfig

    if name in ("dev", "create_dev_server"):
        from preen import app as _app

        return getattr(_app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
