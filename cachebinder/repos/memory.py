"""In-memory distributed cache that records the commands it receives."""

from __future__ import annotations

from cachebinder.domain.models import CacheCommand, CacheOperation, CacheRegion


class RecordingDistributedCache:
    """List-backed sink: every call is stored as a CacheCommand."""

    def __init__(self, supports_batch: bool = True) -> None:
        self.supports_batch = supports_batch
        self._commands: list[CacheCommand] = []

    def _record(self, region: CacheRegion, operation: CacheOperation, keys=()) -> None:
        self._commands.append(
            CacheCommand(region=region, operation=operation, keys=tuple(keys))
        )

    def refresh(self, region: CacheRegion, key: int) -> None:
        self._record(region, CacheOperation.REFRESH, (key,))

    def remove(self, region: CacheRegion, key: int) -> None:
        self._record(region, CacheOperation.REMOVE, (key,))

    def refresh_branch(self, region: CacheRegion, key: int) -> None:
        self._record(region, CacheOperation.REFRESH_BRANCH, (key,))

    def refresh_all(self, region: CacheRegion) -> None:
        self._record(region, CacheOperation.REFRESH_ALL)

    def refresh_many(self, region: CacheRegion, keys: tuple[int, ...]) -> None:
        self._record(region, CacheOperation.REFRESH, keys)

    def remove_many(self, region: CacheRegion, keys: tuple[int, ...]) -> None:
        self._record(region, CacheOperation.REMOVE, keys)

    def list_all(self) -> list[CacheCommand]:
        return list(self._commands)

    def list_for_region(self, region: CacheRegion) -> list[CacheCommand]:
        return [c for c in self._commands if c.region == region]

    def clear(self) -> None:
        self._commands.clear()
