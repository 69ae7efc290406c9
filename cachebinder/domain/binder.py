"""Binds the notification router to the bus for cache refreshing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from cachebinder.domain import notifications as n
from cachebinder.domain.bus import EventBus
from cachebinder.domain.routing import NotificationRouter
from cachebinder.errors import IllegalStateError

logger = logging.getLogger(__name__)

# Notification topics routed to the distributed cache. Stylesheet saves and
# deletes are not bound: there is no stylesheet cache to refresh.
BOUND_NOTIFICATIONS: tuple[type[n.Notification], ...] = (
    n.DataTypeSaved,
    n.DataTypeDeleted,
    n.DictionaryItemSaved,
    n.DictionaryItemDeleted,
    n.DomainSaved,
    n.DomainDeleted,
    n.LanguageSaved,
    n.LanguageDeleted,
    n.MacroSaved,
    n.MacroDeleted,
    n.MemberSaved,
    n.MemberDeleted,
    n.MemberGroupSaved,
    n.MemberGroupDeleted,
    n.PublicAccessEntrySaved,
    n.PublicAccessEntryDeleted,
    n.RelationTypeSaved,
    n.RelationTypeDeleted,
    n.TemplateSaved,
    n.TemplateDeleted,
    n.UserSaved,
    n.UserDeleted,
    n.UserGroupWithUsersSaved,
    n.UserGroupDeleted,
    n.ContentTreeChanged,
    n.MediaTreeChanged,
    n.ContentTypeStructureChanged,
    n.MediaTypeStructureChanged,
    n.MemberTypeStructureChanged,
)


@dataclass(frozen=True)
class Binding:
    attach: Callable[[], None]
    detach: Callable[[], None]


class DistributedCacheBinder:
    """Wires every cache-relevant notification on the bus to the router.

    ``start``/``stop`` must be called from a single thread (the host's
    lifecycle); no lock is taken, misuse raises ``IllegalStateError``.
    """

    def __init__(self, bus: EventBus, router: NotificationRouter) -> None:
        self.bus = bus
        self.router = router
        self._bound = False
        self._unbinders: list[Callable[[], None]] | None = None

    @property
    def is_bound(self) -> bool:
        return self._bound

    def bindings(self) -> list[Binding]:
        handler = self.router.handle
        return [
            Binding(
                attach=lambda t=topic: self.bus.subscribe(t, handler),
                detach=lambda t=topic: self.bus.unsubscribe(t, handler),
            )
            for topic in BOUND_NOTIFICATIONS
        ]

    def start(self, support_teardown: bool = False) -> None:
        """Attach all handlers now; keep their detach actions if asked to."""
        if self._bound:
            raise IllegalStateError("Cache refresh handlers are already bound")

        logger.info(
            "Binding %d notification handlers for cache refreshing",
            len(BOUND_NOTIFICATIONS),
        )
        self._unbinders = [] if support_teardown else None
        for binding in self.bindings():
            binding.attach()
            if self._unbinders is not None:
                self._unbinders.append(binding.detach)
        self._bound = True

    def stop(self) -> None:
        """Run every retained detach action once, in registration order."""
        if self._unbinders is None:
            raise IllegalStateError(
                "No unbind actions retained; start(support_teardown=True) was not used"
            )

        unbinders, self._unbinders = self._unbinders, None
        for unbind in unbinders:
            unbind()
        self._bound = False
        logger.info("Unbound %d cache refresh handlers", len(unbinders))
