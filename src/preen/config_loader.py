"""Load PreenConfig, merging preen.yaml / preen.toml if present.

The config file lives next to the template. CLI overrides file.
"""

from __future__ import annotations

from pathlib import Path

from preen.config import PreenConfig

_CONFIG_KEYS = frozenset({"data", "host", "port", "reload_delay_ms", "debounce_ms"})


def load_config(template: str | Path, **overrides: object) -> PreenConfig:
    """Build a PreenConfig for *template*, optionally merging a config file.

    Looks for preen.yaml, preen.yml or preen.toml in the template's directory.
    Overrides whose value is None are ignored so that unset CLI flags do not
    mask file values.

    Raises:
        ConfigError: If the merged values are invalid (e.g. a bad port).

    """
    template_path = Path(template).resolve()
    file_config = _read_preen_config(template_path.parent)

    # A relative data path in the file is relative to the file, not the cwd.
    if "data" in file_config and file_config["data"] is not None:
        data = Path(str(file_config["data"]))
        if not data.is_absolute():
            data = template_path.parent / data
        file_config["data"] = data

    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if "data" in merged and not isinstance(merged["data"], Path):
        merged["data"] = Path(str(merged["data"]))
    return PreenConfig(template=template_path, **merged)


def _read_preen_config(directory: Path) -> dict[str, object]:
    """Read preen config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("preen.yaml", "preen.yml"):
        path = directory / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = directory / "preen.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    import yaml

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return _flatten_preen_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return _flatten_preen_section(data)


def _flatten_preen_section(data: dict[str, object]) -> dict[str, object]:
    """Extract preen.* keys and known top-level keys into one dict."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    section = data.get("preen")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _CONFIG_KEYS:
                result[k] = v
    return result
