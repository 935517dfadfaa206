"""File watcher — triggers a live reload when the template or data changes.

Watches exactly two files: the template and, when configured, the data
file. Only files that exist when the watcher starts are subscribed; a data
file created later is picked up on the next request but does not trigger
reloads until restart.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from preen._types import ChangeKind


logger = logging.getLogger("preen.watch")


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A change to one of the watched files.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: ChangeKind


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def to_change_events(
    raw_changes: Iterable[tuple[Change, str]],
    watched: frozenset[Path],
) -> tuple[ChangeEvent, ...]:
    """Convert a watchfiles batch into ChangeEvents for the watched files.

    Paths outside *watched* are dropped. Every change kind is kept: a
    rename or delete of the template reloads the browser just like an edit.
    """
    events: list[ChangeEvent] = []
    for change_type, path_str in raw_changes:
        path = Path(path_str)
        if path not in watched:
            continue
        kind = _CHANGE_KIND_MAP.get(change_type, "modified")
        events.append(ChangeEvent(path=path, kind=kind))
    return tuple(events)


class LiveWatcher:
    """Watches the template and data files and calls back on change.

    Uses watchfiles in a background thread. Each batch of notifications
    from watchfiles that touches a watched file results in exactly one
    call to *on_change*; several notifications for one save may still
    produce several calls, which only means an extra reload.

    Args:
        paths: Files to watch. Paths that do not exist are skipped.
        on_change: Called from the watcher thread with the batch's events.
        debounce_ms: watchfiles debounce window.

    """

    def __init__(
        self,
        paths: Iterable[Path | None],
        on_change: Callable[[tuple[ChangeEvent, ...]], object],
        *,
        debounce_ms: int = 50,
    ) -> None:
        self._paths = tuple(
            p.resolve() for p in paths if p is not None and p.exists()
        )
        self._on_change = on_change
        self._debounce_ms = debounce_ms
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def watched_paths(self) -> tuple[Path, ...]:
        """Files that have a subscription (existed at construction)."""
        return self._paths

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread. No-op with nothing to watch."""
        if self.is_running or not self._paths:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="preen-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def dispatch(self, raw_changes: Iterable[tuple[Change, str]]) -> bool:
        """Handle one watchfiles batch. Returns True if the callback ran."""
        events = to_change_events(raw_changes, frozenset(self._paths))
        if not events:
            return False

        for event in events:
            logger.info("%s %s -> reload", event.path.name, event.kind)

        try:
            self._on_change(events)
        except Exception:
            logger.exception("Live-reload callback failed")
        return True

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and dispatch each batch."""
        from watchfiles import watch

        for raw_changes in watch(
            *self._paths,
            stop_event=self._stop_event,
            debounce=self._debounce_ms,
            step=50,
        ):
            self.dispatch(raw_changes)
