"""Preen application — wires the renderer, broadcaster and watcher into Chirp.

``create_dev_server`` builds everything without binding a socket (tests use
it with Chirp's TestClient); ``dev`` builds and runs it on Pounce.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from preen.config_loader import load_config

if TYPE_CHECKING:
    from chirp import App

    from preen.config import PreenConfig
    from preen.content.watcher import ChangeEvent, LiveWatcher
    from preen.reactive.broadcaster import ClientRegistry

logger = logging.getLogger("preen.server")


@dataclass(frozen=True, slots=True)
class DevServer:
    """Everything a running preen server owns.

    Attributes:
        config: Resolved configuration.
        app: The Chirp ASGI app.
        registry: Open live-reload connections.
        watcher: Watches the template and data file.

    """

    config: PreenConfig
    app: App
    registry: ClientRegistry
    watcher: LiveWatcher

    def startup_warnings(self) -> list[str]:
        """Problems worth showing in the banner; none of them are fatal."""
        warnings: list[str] = []
        if not self.config.template.is_file():
            warnings.append(
                f"Template {self.config.template} does not exist yet; "
                "requests will show an error page until it does"
            )
        if self.config.data is not None and not self.config.data.exists():
            warnings.append(
                f"Data file {self.config.data} does not exist; "
                "the template renders with no data and changes to it are not watched"
            )
        return warnings

    def run(self) -> None:
        """Print the banner and serve until interrupted.

        The address is checked before the banner is printed. Runs Pounce
        with a single worker so the registry and the SSE connections share
        one event loop.

        Raises:
            ConfigError: If the host/port cannot be bound.

        """
        ensure_bindable(self.config.host, self.config.port)

        from pounce.config import ServerConfig
        from pounce.server import Server

        from preen.banner import print_banner

        print_banner(
            self.config,
            watched=self.watcher.watched_paths,
            warnings=self.startup_warnings(),
        )

        server_config = ServerConfig(
            host=self.config.host,
            port=self.config.port,
            workers=1,
        )
        Server(server_config, self.app).run()


def ensure_bindable(host: str, port: int) -> None:
    """Check that *host*:*port* can be listened on right now.

    Raises:
        ConfigError: If the address does not resolve or is already in use.

    """
    from preen._errors import ConfigError

    try:
        family, kind, proto, _, address = socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM,
        )[0]
        with socket.socket(family, kind, proto) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(address)
    except OSError as exc:
        msg = f"Cannot listen on {host}:{port}: {exc.strerror or exc}"
        raise ConfigError(msg) from exc


def _create_chirp_app() -> App:
    """Create a bare Chirp App.

    Chirp's own HTML snippet injection is switched off: the only thing
    added to the document is the live-reload script.
    """
    from chirp import App, AppConfig

    app_config = AppConfig(
        debug=False,
        safe_target=False,
        sse_lifecycle=False,
        static_dir=None,
    )
    return App(config=app_config)


def _start_watcher(config: PreenConfig, registry: ClientRegistry, app: App) -> LiveWatcher:
    """Wire the LiveWatcher to the registry via Chirp lifecycle hooks.

    Flow:
        on_startup  → start the watcher thread
        file change → registry.broadcast_reload()
        on_shutdown → stop the watcher thread

    """
    from preen.content.watcher import LiveWatcher

    def _reload(events: tuple[ChangeEvent, ...]) -> None:
        count = registry.broadcast_reload()
        logger.debug("Reload sent to %d client(s) after %d change(s)", count, len(events))

    watcher = LiveWatcher(
        (config.template, config.data),
        _reload,
        debounce_ms=config.debounce_ms,
    )

    @app.on_startup
    def _start_watching() -> None:
        watcher.start()

    @app.on_shutdown
    def _stop_watching() -> None:
        watcher.stop()

    return watcher


def create_dev_server(config: PreenConfig) -> DevServer:
    """Build the Chirp app, live-reload registry and watcher for *config*.

    Middleware order (outermost first): assets, live-reload injection,
    error overlay, routes. Error pages therefore get the reload script too.

    """
    from preen.content.assets import AssetFiles
    from preen.content.renderer import create_environment
    from preen.content.router import RESERVED_PATHS, DocumentRouter
    from preen.reactive.broadcaster import ClientRegistry
    from preen.reactive.error_overlay import error_overlay_middleware
    from preen.reactive.hmr import make_hmr_middleware

    app = _create_chirp_app()
    registry = ClientRegistry()

    router = DocumentRouter(app, create_environment(), config.render_request, registry)
    router.register()

    app.add_middleware(AssetFiles(config.template_dir, reserved=RESERVED_PATHS))
    app.add_middleware(make_hmr_middleware(delay_ms=config.reload_delay_ms))
    app.add_middleware(error_overlay_middleware)

    watcher = _start_watcher(config, registry, app)

    return DevServer(config=config, app=app, registry=registry, watcher=watcher)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def dev(template: str | Path, **kwargs: object) -> None:
    """Serve *template* with live reload.

    Args:
        template: Path to the Kida template.
        **kwargs: Override PreenConfig fields (``data``, ``host``, ``port``...).

    Raises:
        ConfigError: If the configuration is invalid.

    """
    config = load_config(Path(template), **kwargs)
    create_dev_server(config).run()
