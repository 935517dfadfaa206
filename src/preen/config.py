"""Preen configuration.

PreenConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass
from pathlib import Path

from preen._errors import ConfigError

DEFAULT_PORT = 3111


@dataclass(frozen=True, slots=True)
class RenderRequest:
    """What to render on every document request.

    Attributes:
        template_path: Absolute path to the Kida template.
        data_path: Absolute path to the data file, or None.

    """

    template_path: Path
    data_path: Path | None = None


@dataclass(frozen=True, slots=True)
class PreenConfig:
    """Configuration for a preen dev server.

    Attributes:
        template: Path to the template file. Resolved to an absolute path on
            construction. The file does not have to exist yet.
        data: Optional path to a JSON, YAML or TOML data file.
        host: Bind address.
        port: Bind port (1-65535).
        reload_delay_ms: How long the browser waits before reloading when the
            live-reload channel drops (e.g. on server restart).
        debounce_ms: Watcher debounce window passed to watchfiles.

    """

    template: Path
    data: Path | None = None
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    reload_delay_ms: int = 2000
    debounce_ms: int = 50

    def __post_init__(self) -> None:
        # Resolve to absolute so watchfiles paths compare equal.
        object.__setattr__(self, "template", Path(self.template).resolve())
        if self.data is not None:
            object.__setattr__(self, "data", Path(self.data).resolve())

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            msg = f"Port must be an integer, got {self.port!r}"
            raise ConfigError(msg)
        if not 0 < self.port <= 65535:
            msg = "Port must be an integer between 1 and 65535"
            raise ConfigError(msg)
        for name in ("reload_delay_ms", "debounce_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                msg = f"{name} must be a non-negative integer, got {value!r}"
                raise ConfigError(msg)

    @property
    def template_dir(self) -> Path:
        """Directory that static assets are served from."""
        return self.template.parent

    @property
    def render_request(self) -> RenderRequest:
        """The immutable render inputs for this run."""
        return RenderRequest(template_path=self.template, data_path=self.data)

    @property
    def url(self) -> str:
        """Address the server listens on."""
        return f"http://{self.host}:{self.port}"
