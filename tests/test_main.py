"""API tests for the host lifecycle and diagnostics routes."""

from __future__ import annotations

from fastapi.testclient import TestClient

from cachebinder.config import BinderSettings
from cachebinder.domain import notifications as n
from cachebinder.domain.binder import BOUND_NOTIFICATIONS
from cachebinder.domain.models import EntityRef
from cachebinder.main import create_app


def test_lifespan_binds_and_unbinds_with_teardown():
    app = create_app(BinderSettings(support_teardown=True, cluster_nodes=3))

    with TestClient(app) as client:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"bound": True, "nodes": 3}
        assert app.state.bus.handler_count() == len(BOUND_NOTIFICATIONS)

    assert not app.state.binder.is_bound
    assert app.state.bus.handler_count() == 0


def test_handlers_stay_bound_without_teardown():
    app = create_app(BinderSettings(support_teardown=False))

    with TestClient(app):
        pass

    assert app.state.binder.is_bound
    assert app.state.bus.handler_count() == len(BOUND_NOTIFICATIONS)


def test_journal_lists_broadcast_commands():
    app = create_app(BinderSettings(support_teardown=True))

    with TestClient(app) as client:
        app.state.bus.publish(n.UserGroupDeleted(entities=[EntityRef(id=3)]))
        resp = client.get("/cache/journal")

    assert resp.status_code == 200
    assert resp.json() == [{"region": "UserGroup", "operation": "remove", "keys": [3]}]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CACHEBINDER_SUPPORT_TEARDOWN", "true")
    monkeypatch.setenv("CACHEBINDER_BATCH_INVALIDATION", "false")

    app = create_app()

    assert app.state.settings.support_teardown is True
    assert app.state.messenger.supports_batch is False
