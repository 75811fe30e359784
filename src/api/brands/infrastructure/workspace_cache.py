"""In-process, time-limited cache of workspace lookups."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import replace

from brands.domain.aggregates import BrandWorkspace
from brands.ports.services import IWorkspaceCache


class InMemoryWorkspaceCache(IWorkspaceCache):
    """Slug to workspace cache with a fixed time-to-live.

    Entries are copies, so callers mutating a returned workspace never change
    the cached one. A ``ttl_seconds`` of 0 disables caching.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, BrandWorkspace]] = {}
        self._lock = threading.Lock()

    def get(self, slug: str) -> BrandWorkspace | None:
        with self._lock:
            entry = self._entries.get(slug)
            if entry is None:
                return None
            expires_at, workspace = entry
            if self._clock() >= expires_at:
                del self._entries[slug]
                return None
            return replace(workspace)

    def set(self, workspace: BrandWorkspace) -> None:
        if self._ttl <= 0:
            return
        with self._lock:
            self._entries[workspace.slug] = (
                self._clock() + self._ttl,
                replace(workspace),
            )

    def invalidate(self, slug: str) -> None:
        with self._lock:
            self._entries.pop(slug, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
