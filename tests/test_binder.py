"""Tests for binding and unbinding cache refresh handlers."""

from __future__ import annotations

import pytest

from cachebinder.domain import notifications as n
from cachebinder.domain.binder import BOUND_NOTIFICATIONS, DistributedCacheBinder
from cachebinder.domain.bus import EventBus
from cachebinder.domain.models import CacheOperation, CacheRegion, EntityRef
from cachebinder.domain.routing import NotificationRouter
from cachebinder.errors import IllegalStateError
from cachebinder.repos.memory import RecordingDistributedCache


@pytest.fixture()
def env():
    """Fresh bus + cache + router + binder for each test."""
    bus = EventBus()
    cache = RecordingDistributedCache()
    router = NotificationRouter(cache)
    binder = DistributedCacheBinder(bus=bus, router=router)

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.cache = cache
    e.router = router
    e.binder = binder
    return e


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------


def test_start_attaches_one_handler_per_topic(env):
    env.binder.start()

    assert env.binder.is_bound
    for topic in BOUND_NOTIFICATIONS:
        assert env.bus.handler_count(topic) == 1
    assert env.bus.handler_count() == len(BOUND_NOTIFICATIONS)


def test_published_notification_reaches_cache(env):
    env.binder.start()

    env.bus.publish(n.LanguageSaved(entities=[EntityRef(id=7)]))

    commands = env.cache.list_all()
    assert len(commands) == 1
    assert commands[0].region == CacheRegion.LANGUAGE
    assert commands[0].operation == CacheOperation.REFRESH
    assert commands[0].key == 7


def test_start_twice_is_rejected(env):
    env.binder.start(support_teardown=True)

    with pytest.raises(IllegalStateError):
        env.binder.start(support_teardown=True)
    assert env.bus.handler_count() == len(BOUND_NOTIFICATIONS)


# ---------------------------------------------------------------------------
# Unbinding
# ---------------------------------------------------------------------------


def test_stop_detaches_every_handler(env):
    env.binder.start(support_teardown=True)
    env.binder.stop()

    assert not env.binder.is_bound
    assert env.bus.handler_count() == 0

    env.bus.publish(n.UserGroupDeleted(entities=[EntityRef(id=3)]))
    env.bus.publish(n.MemberSaved(entities=[EntityRef(id=1)]))
    assert env.cache.list_all() == []


def test_second_stop_fails(env):
    env.binder.start(support_teardown=True)
    env.binder.stop()

    with pytest.raises(IllegalStateError):
        env.binder.stop()


def test_stop_without_teardown_support_fails(env):
    env.binder.start(support_teardown=False)

    with pytest.raises(IllegalStateError):
        env.binder.stop()
    # Handlers stay live
    assert env.bus.handler_count() == len(BOUND_NOTIFICATIONS)


def test_stop_before_start_fails(env):
    with pytest.raises(IllegalStateError):
        env.binder.stop()


def test_restart_after_stop(env):
    env.binder.start(support_teardown=True)
    env.binder.stop()
    env.binder.start()

    env.bus.publish(n.TemplateDeleted(entities=[EntityRef(id=5)]))

    assert [c.key for c in env.cache.list_all()] == [5]


def test_stop_leaves_foreign_handlers_attached(env):
    seen = []
    env.bus.subscribe(n.LanguageSaved, seen.append)
    env.binder.start(support_teardown=True)
    env.binder.stop()

    env.bus.publish(n.LanguageSaved(entities=[EntityRef(id=1)]))

    assert len(seen) == 1
    assert env.cache.list_all() == []


def test_detach_is_idempotent(env):
    env.binder.start(support_teardown=True)
    bindings = env.binder.bindings()
    env.binder.stop()

    # Detaching again leaves the bus untouched
    for binding in bindings:
        binding.detach()
    assert env.bus.handler_count() == 0
