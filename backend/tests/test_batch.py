"""Batch checkout / load / cancel."""

from conftest import MONITOR, VIEWER, make_report

BASE = "/api/v1/report/batch"
OTHER = {"X-User-Id": "monitor-2", "X-User-Role": "monitor"}


def _seed(store):
    make_report(store, "r1", authored="2021-01-01T00:00:00")
    make_report(store, "r2", authored="2021-01-02T00:00:00")
    make_report(store, "r3", authored="2021-01-03T00:00:00")
    make_report(store, "done", authored="2020-01-01T00:00:00", read=True)


def test_empty_batch(client):
    r = client.get(BASE, headers=VIEWER)
    assert r.status_code == 200
    assert r.json() == {"results": [], "total": 0}


def test_checkout_takes_oldest_unread(client, store):
    _seed(store)
    r = client.patch(BASE, headers=MONITOR)
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    assert sorted(d["_id"] for d in body["results"]) == ["r1", "r2"]
    assert all(d["checkedOutBy"] == "monitor-1" for d in body["results"])

    loaded = client.get(BASE, headers=MONITOR).json()
    assert sorted(d["_id"] for d in loaded["results"]) == ["r1", "r2"]


def test_users_do_not_share_reports(client, store):
    _seed(store)
    client.patch(BASE, headers=MONITOR)
    other = client.patch(BASE, headers=OTHER).json()
    assert [d["_id"] for d in other["results"]] == ["r3"]


def test_checkout_replaces_previous_batch(client, store):
    _seed(store)
    client.patch(BASE, headers=MONITOR)
    store.save({**store.find_by_id("r1"), "read": True})
    again = client.patch(BASE, headers=MONITOR).json()
    assert sorted(d["_id"] for d in again["results"]) == ["r2", "r3"]


def test_cancel_releases_reports(client, store):
    _seed(store)
    client.patch(BASE, headers=MONITOR)
    r = client.put(BASE, headers=MONITOR)
    assert r.status_code == 200
    assert r.content == b""
    assert client.get(BASE, headers=MONITOR).json()["total"] == 0
    assert store.find_by_id("r1")["checkedOutBy"] is None


def test_viewer_cannot_checkout(client, store):
    _seed(store)
    assert client.patch(BASE, headers=VIEWER).status_code == 403
    assert client.put(BASE, headers=VIEWER).status_code == 403
