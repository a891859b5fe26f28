"""Execution runtimes registered with the server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Runtime:
    """A named runtime with its environment-derived metadata."""

    name: str = ""
    status: int = 0
    metadata: Optional[dict[str, str]] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    def current_runtime_metadata(self, key: str) -> str:
        """Return metadata ``<NAME>_<KEY>`` (upper-cased), or ''."""
        lookup = f"{self.name}_{key}".upper()
        return (self.metadata or {}).get(lookup, "")

    def api_server_token(self) -> str:
        return self.current_runtime_metadata("API_SERVER_TOKEN")

    def api_server_host(self) -> str:
        return self.current_runtime_metadata("API_SERVER_HOST")