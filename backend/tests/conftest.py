"""Shared fixtures: an app wired to a throwaway SQLite store."""

import pytest
from fastapi.testclient import TestClient

from aggie.api import dependencies as deps
from aggie.core.config import Settings
from aggie.main import app
from aggie.models.database import ReportStore

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}
MONITOR = {"X-User-Id": "monitor-1", "X-User-Role": "monitor"}
VIEWER = {"X-User-Id": "viewer-1", "X-User-Role": "viewer"}


@pytest.fixture
def test_settings(tmp_path):
    return Settings(sqlite_path=str(tmp_path / "reports.db"), page_size=3, batch_size=2)


@pytest.fixture
def store(test_settings):
    s = ReportStore(test_settings.sqlite_path)
    s.init_db()
    yield s
    s.close()


@pytest.fixture
def client(store, test_settings):
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_report(store, rid, authored="2021-01-15T12:00:00", stored=None, **fields):
    doc = {
        "_id": rid,
        "authoredAt": authored,
        "storedAt": stored or authored,
        "content": fields.pop("content", f"report {rid}"),
        "author": fields.pop("author", "someone"),
        "_media": fields.pop("_media", "twitter"),
        "_source": fields.pop("_source", "src-1"),
    }
    doc.update(fields)
    store.insert(doc)
    return doc
