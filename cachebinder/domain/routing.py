"""Notification → cache command routing.

The routing table is plain data keyed by ``(change, kind)``; the router looks
a notification up, expands its payload into commands and hands each command
to the distributed cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable, Protocol

from cachebinder.domain.models import (
    CacheCommand,
    CacheOperation,
    CacheRegion,
    EntityKind,
    TreeChangeType,
)
from cachebinder.domain.notifications import ChangeKind, Notification
from cachebinder.errors import UnmappedEntityKindError

logger = logging.getLogger(__name__)


class DistributedCache(Protocol):
    """Outbound cache-coordination facility.

    ``refresh_many``/``remove_many`` are only called when ``supports_batch``
    is true.
    """

    supports_batch: bool

    def refresh(self, region: CacheRegion, key: int) -> None: ...

    def remove(self, region: CacheRegion, key: int) -> None: ...

    def refresh_branch(self, region: CacheRegion, key: int) -> None: ...

    def refresh_all(self, region: CacheRegion) -> None: ...

    def refresh_many(self, region: CacheRegion, keys: tuple[int, ...]) -> None: ...

    def remove_many(self, region: CacheRegion, keys: tuple[int, ...]) -> None: ...


class RouteShape(StrEnum):
    PER_ENTITY = "per_entity"  # one command per entity
    BATCH = "batch"  # one multi-key command when the sink allows it
    REGION = "region"  # one region-wide refresh
    TREE = "tree"  # one command per tree change record
    STRUCTURE = "structure"  # one refresh per type change record


@dataclass(frozen=True)
class Route:
    region: CacheRegion
    operation: CacheOperation
    shape: RouteShape = RouteShape.PER_ENTITY


def _saved_deleted(
    kind: EntityKind, region: CacheRegion, shape: RouteShape = RouteShape.PER_ENTITY
) -> dict[tuple[ChangeKind, EntityKind], Route]:
    return {
        (ChangeKind.SAVED, kind): Route(region, CacheOperation.REFRESH, shape),
        (ChangeKind.DELETED, kind): Route(region, CacheOperation.REMOVE, shape),
    }


ROUTES: dict[tuple[ChangeKind, EntityKind], Route] = {
    **_saved_deleted(EntityKind.DATA_TYPE, CacheRegion.DATA_TYPE),
    **_saved_deleted(EntityKind.DICTIONARY_ITEM, CacheRegion.DICTIONARY),
    **_saved_deleted(EntityKind.DOMAIN, CacheRegion.DOMAIN),
    **_saved_deleted(EntityKind.LANGUAGE, CacheRegion.LANGUAGE),
    **_saved_deleted(EntityKind.MACRO, CacheRegion.MACRO),
    **_saved_deleted(EntityKind.MEMBER_GROUP, CacheRegion.MEMBER_GROUP),
    **_saved_deleted(EntityKind.RELATION_TYPE, CacheRegion.RELATION_TYPE),
    **_saved_deleted(EntityKind.TEMPLATE, CacheRegion.TEMPLATE),
    **_saved_deleted(EntityKind.USER, CacheRegion.USER),
    **_saved_deleted(EntityKind.USER_GROUP, CacheRegion.USER_GROUP),
    **_saved_deleted(EntityKind.MEMBER, CacheRegion.MEMBER, RouteShape.BATCH),
    (ChangeKind.SAVED, EntityKind.PUBLIC_ACCESS_ENTRY): Route(
        CacheRegion.PUBLIC_ACCESS, CacheOperation.REFRESH_ALL, RouteShape.REGION
    ),
    (ChangeKind.DELETED, EntityKind.PUBLIC_ACCESS_ENTRY): Route(
        CacheRegion.PUBLIC_ACCESS, CacheOperation.REFRESH_ALL, RouteShape.REGION
    ),
    (ChangeKind.TREE_CHANGED, EntityKind.CONTENT): Route(
        CacheRegion.CONTENT, CacheOperation.REFRESH, RouteShape.TREE
    ),
    (ChangeKind.TREE_CHANGED, EntityKind.MEDIA): Route(
        CacheRegion.MEDIA, CacheOperation.REFRESH, RouteShape.TREE
    ),
    (ChangeKind.STRUCTURE_CHANGED, EntityKind.CONTENT_TYPE): Route(
        CacheRegion.CONTENT_TYPE, CacheOperation.REFRESH, RouteShape.STRUCTURE
    ),
    (ChangeKind.STRUCTURE_CHANGED, EntityKind.MEDIA_TYPE): Route(
        CacheRegion.CONTENT_TYPE, CacheOperation.REFRESH, RouteShape.STRUCTURE
    ),
    (ChangeKind.STRUCTURE_CHANGED, EntityKind.MEMBER_TYPE): Route(
        CacheRegion.CONTENT_TYPE, CacheOperation.REFRESH, RouteShape.STRUCTURE
    ),
}

TREE_OPERATIONS: dict[TreeChangeType, CacheOperation] = {
    TreeChangeType.REFRESH_NODE: CacheOperation.REFRESH,
    TreeChangeType.REFRESH_BRANCH: CacheOperation.REFRESH_BRANCH,
    TreeChangeType.REMOVE: CacheOperation.REMOVE,
    TreeChangeType.REFRESH_ALL: CacheOperation.REFRESH_ALL,
}


def _payload(notification: Notification) -> tuple:
    # Saved/deleted carry ``entities``, tree/structure carry ``changes``
    if hasattr(notification, "entities"):
        return notification.entities
    return notification.changes


class NotificationRouter:
    """Translates notifications into commands for a distributed cache.

    Stateless apart from the injected cache, so one instance may be shared by
    every request thread.
    """

    def __init__(self, cache: DistributedCache) -> None:
        self.cache = cache

    def route(self, notification: Notification) -> list[CacheCommand]:
        # The bare Notification base carries no change tag
        change = getattr(type(notification), "change", None)
        route = ROUTES.get((change, notification.kind)) if change else None
        if route is None:
            raise UnmappedEntityKindError(str(change), notification.kind)

        payload = _payload(notification)
        if not payload:
            return []

        if route.shape is RouteShape.PER_ENTITY:
            return self._per_entity(route, (e.id for e in payload))

        if route.shape is RouteShape.BATCH:
            ids = tuple(e.id for e in payload)
            if getattr(self.cache, "supports_batch", False):
                return [CacheCommand(region=route.region, operation=route.operation, keys=ids)]
            return self._per_entity(route, ids)

        if route.shape is RouteShape.REGION:
            return [CacheCommand(region=route.region, operation=CacheOperation.REFRESH_ALL)]

        if route.shape is RouteShape.TREE:
            commands = []
            for change in payload:
                operation = TREE_OPERATIONS[change.change_type]
                keys = () if operation is CacheOperation.REFRESH_ALL else (change.item.id,)
                commands.append(
                    CacheCommand(region=route.region, operation=operation, keys=keys)
                )
            return commands

        # RouteShape.STRUCTURE
        return self._per_entity(route, (c.item.id for c in payload))

    def handle(self, notification: Notification) -> list[CacheCommand]:
        """Route ``notification`` and dispatch every command, in order."""
        commands = self.route(notification)
        logger.debug(
            "Routing %s(%s) to %d cache command(s)",
            type(notification).__name__,
            notification.kind,
            len(commands),
        )
        for command in commands:
            self._dispatch(command)
        return commands

    def _dispatch(self, command: CacheCommand) -> None:
        region, keys = command.region, command.keys
        if command.operation is CacheOperation.REFRESH_ALL:
            self.cache.refresh_all(region)
        elif command.operation is CacheOperation.REFRESH_BRANCH:
            self.cache.refresh_branch(region, keys[0])
        elif command.operation is CacheOperation.REFRESH:
            if len(keys) > 1:
                self.cache.refresh_many(region, keys)
            else:
                self.cache.refresh(region, keys[0])
        else:
            if len(keys) > 1:
                self.cache.remove_many(region, keys)
            else:
                self.cache.remove(region, keys[0])

    @staticmethod
    def _per_entity(route: Route, ids: Iterable[int]) -> list[CacheCommand]:
        return [
            CacheCommand(region=route.region, operation=route.operation, keys=(i,))
            for i in ids
        ]
