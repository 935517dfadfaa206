"""Startup banner — what is being served and watched.

Printed to stdout once the app is wired. Colour is skipped when stdout is
not a terminal, when ``NO_COLOR`` is set, or when ``TERM=dumb``.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from preen.config import PreenConfig


# SGR codes used by the banner (https://no-color.org for the opt-out)
_STYLES = {
    "bold": "1",
    "dim": "2",
    "green": "32",
    "yellow": "33",
    "cyan": "36",
}


def _use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, *styles: str, color: bool) -> str:
    """Wrap *text* in SGR escapes for *styles*, or return it unchanged."""
    if not color or not styles:
        return text
    codes = ";".join(_STYLES[s] for s in styles)
    return f"\033[{codes}m{text}\033[0m"


def _link(url: str, *, color: bool) -> str:
    """OSC 8 hyperlink around *url* on colour terminals."""
    if not color:
        return url
    return f"\033]8;;{url}\033\\{_paint(url, 'bold', 'cyan', color=True)}\033]8;;\033\\"


def format_banner(
    config: PreenConfig,
    *,
    watched: Sequence[Path] = (),
    warnings: Sequence[str] = (),
    color: bool | None = None,
) -> str:
    """Build the startup banner text.

    Args:
        config: Resolved PreenConfig.
        watched: Files with an active watch subscription.
        warnings: Non-fatal problems to list under the banner.
        color: Force colour on or off; detected from stdout when None.

    """
    from preen import __version__

    if color is None:
        color = _use_color()

    def branch(glyph: str, label: str, value: object) -> str:
        return f"  {_paint(glyph, 'dim', color=color)} {label:<9} {value}"

    out = [
        "",
        f"  {_paint('preen', 'bold', color=color)} "
        f"{_paint(f'v{__version__}', 'dim', color=color)}  "
        f"listening on {_link(config.url, color=color)}",
        "  " + _paint("─" * 43, "dim", color=color),
        branch("├─", "Template:", config.template),
    ]
    if config.data is not None:
        out.append(branch("├─", "Data:", config.data))
    out.append(branch("├─", "Assets:", config.template_dir))

    if watched:
        names = ", ".join(p.name for p in watched)
        out.append(f"  {_paint('└─', 'dim', color=color)} "
                   f"{_paint('live', 'green', color=color)} watching {names}")
    else:
        out.append(f"  {_paint('└─', 'dim', color=color)} "
                   f"{_paint('not watching', 'yellow', color=color)} (no files yet)")

    if warnings:
        out.append("")
        out.extend(f"  {_paint('!', 'yellow', color=color)} {w}" for w in warnings)

    out.append("")
    return "\n".join(out)


def print_banner(
    config: PreenConfig,
    *,
    watched: Sequence[Path] = (),
    warnings: Sequence[str] = (),
) -> None:
    """Print the startup banner to stdout."""
    print(format_banner(config, watched=watched, warnings=warnings), flush=True)
