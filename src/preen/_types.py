"""Shared type definitions for preen."""

from typing import Any, Literal

# Parsed data file handed to the template
type DataMap = dict[str, Any]

# Live-reload client identifier
type ClientID = str

# Kind of filesystem change reported by the watcher
type ChangeKind = Literal["created", "modified", "deleted"]
