"""Broadcast of cache commands to every server's local cache."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Any

from cachebinder.domain.models import CacheCommand, CacheOperation, CacheRegion

logger = logging.getLogger(__name__)


class LocalCacheNode:
    """One application server's cache: region → key → value.

    Parent links are kept so a branch refresh or remove can evict a whole
    subtree.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[CacheRegion, dict[int, Any]] = defaultdict(dict)
        self._parents: dict[CacheRegion, dict[int, int]] = defaultdict(dict)

    def put(
        self, region: CacheRegion, key: int, value: Any, parent: int | None = None
    ) -> None:
        self._entries[region][key] = value
        if parent is not None:
            self._parents[region][key] = parent

    def get(self, region: CacheRegion, key: int) -> Any | None:
        return self._entries[region].get(key)

    def keys(self, region: CacheRegion) -> set[int]:
        return set(self._entries[region])

    def _descendants(self, region: CacheRegion, root: int) -> set[int]:
        parents = self._parents[region]
        found = {root}
        grew = True
        while grew:
            grew = False
            # Snapshot: another request thread may put while we walk
            for child, parent in list(parents.items()):
                if parent in found and child not in found:
                    found.add(child)
                    grew = True
        return found

    def apply(self, command: CacheCommand) -> None:
        entries = self._entries[command.region]
        if command.operation is CacheOperation.REFRESH_ALL:
            entries.clear()
            self._parents[command.region].clear()
            return

        evict: set[int] = set(command.keys)
        # A node remove or branch refresh names a subtree root
        if command.operation in (CacheOperation.REFRESH_BRANCH, CacheOperation.REMOVE):
            for key in command.keys:
                evict |= self._descendants(command.region, key)

        for key in evict:
            entries.pop(key, None)
            if command.operation is CacheOperation.REMOVE:
                self._parents[command.region].pop(key, None)


class ClusterMessenger:
    """Distributed cache that fans every command out to all nodes.

    Commands are applied to nodes in registration order; a failing node
    aborts the broadcast and the error propagates to the caller.
    """

    def __init__(self, supports_batch: bool = True, journal_size: int = 1000) -> None:
        self.supports_batch = supports_batch
        self._nodes: list[LocalCacheNode] = []
        self._journal: deque[CacheCommand] = deque(maxlen=journal_size)

    def register(self, node: LocalCacheNode) -> None:
        self._nodes.append(node)

    @property
    def nodes(self) -> list[LocalCacheNode]:
        return list(self._nodes)

    def journal(self) -> list[CacheCommand]:
        """Most recent broadcast commands, oldest first."""
        return list(self._journal)

    def broadcast(self, command: CacheCommand) -> None:
        logger.debug(
            "Broadcasting %s %s %s to %d node(s)",
            command.operation,
            command.region,
            list(command.keys),
            len(self._nodes),
        )
        self._journal.append(command)
        for node in self._nodes:
            node.apply(command)

    # ------------------------------------------------------------------
    # DistributedCache
    # ------------------------------------------------------------------

    def refresh(self, region: CacheRegion, key: int) -> None:
        self.broadcast(
            CacheCommand(region=region, operation=CacheOperation.REFRESH, keys=(key,))
        )

    def remove(self, region: CacheRegion, key: int) -> None:
        self.broadcast(
            CacheCommand(region=region, operation=CacheOperation.REMOVE, keys=(key,))
        )

    def refresh_branch(self, region: CacheRegion, key: int) -> None:
        self.broadcast(
            CacheCommand(region=region, operation=CacheOperation.REFRESH_BRANCH, keys=(key,))
        )

    def refresh_all(self, region: CacheRegion) -> None:
        self.broadcast(CacheCommand(region=region, operation=CacheOperation.REFRESH_ALL))

    def refresh_many(self, region: CacheRegion, keys: tuple[int, ...]) -> None:
        self.broadcast(
            CacheCommand(region=region, operation=CacheOperation.REFRESH, keys=tuple(keys))
        )

    def remove_many(self, region: CacheRegion, keys: tuple[int, ...]) -> None:
        self.broadcast(
            CacheCommand(region=region, operation=CacheOperation.REMOVE, keys=tuple(keys))
        )
