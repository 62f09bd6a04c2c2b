"""
End-to-end smoke test for the Aggie Report API.

Seeds a few reports straight into the configured SQLite store, then drives
every report route of a running server:

    uvicorn aggie.main:app --port 8001
    python backend/smoke_e2e.py
"""
import os
import time
import uuid

import requests

from aggie.core.config import settings
from aggie.models.database import ReportStore

BASE = os.getenv("AGGIE_SMOKE_BASE", "http://localhost:8001/api/v1")
ADMIN = {"X-User-Id": "smoke-admin", "X-User-Role": "admin"}
VIEWER = {"X-User-Id": "smoke-viewer", "X-User-Role": "viewer"}
PASS = "\033[92m✓\033[0m"
FAIL = "\033[91m✗\033[0m"
INFO = "\033[94m→\033[0m"

results = []


def test(name, fn):
    try:
        t = time.time()
        result = fn()
        elapsed = round(time.time() - t, 2)
        print(f"  {PASS} {name} ({elapsed}s)")
        results.append((name, True, elapsed, None))
        return result
    except Exception as e:
        print(f"  {FAIL} {name}: {e}")
        results.append((name, False, 0, str(e)))
        return None


def expect(response, status):
    assert response.status_code == status, f"expected {status}, got {response.status_code}: {response.text[:200]}"
    return response


print("\nAggie Report API — End-to-End Smoke Test")
print("=" * 60)

# ── Seed ────────────────────────────────────────────────────────
print(f"\n{INFO} Seeding")
store = ReportStore(settings.sqlite_path)
store.init_db()
tag = uuid.uuid4().hex[:8]
ids = [f"smoke-{tag}-{i}" for i in range(3)]
for i, rid in enumerate(ids):
    store.insert(
        {
            "_id": rid,
            "authoredAt": f"2021-01-0{i + 1}T12:00:00",
            "content": f"smoke {tag} report {i}",
            "author": "smoke",
            "_media": "twitter",
        }
    )
print(f"  {INFO} inserted {len(ids)} reports tagged {tag}")

# ── Health ──────────────────────────────────────────────────────
print(f"\n{INFO} Health & Connectivity")
test("Health check", lambda: requests.get(f"{BASE.replace('/api/v1', '')}/health", timeout=5).raise_for_status())
test("Who am I", lambda: expect(requests.get(f"{BASE}/auth/me", headers=ADMIN, timeout=5), 200).json())

# ── Reads ───────────────────────────────────────────────────────
print(f"\n{INFO} Reads")
test("List reports", lambda: expect(requests.get(f"{BASE}/report", headers=VIEWER, timeout=10), 200).json())
test(
    "Keyword search",
    lambda: expect(requests.get(f"{BASE}/report", params={"keywords": tag}, headers=VIEWER, timeout=10), 200).json()[
        "total"
    ]
    == 3,
)
test(
    "Viz range",
    lambda: expect(
        requests.get(
            f"{BASE}/report/viz",
            params={"startTime": "2021-01-01T00:00:00", "endTime": "2021-01-31T23:59:59"},
            headers=VIEWER,
            timeout=10,
        ),
        200,
    ).json(),
)
test("Get one", lambda: expect(requests.get(f"{BASE}/report/{ids[0]}", timeout=10), 200).json())
test("Get missing → 404", lambda: expect(requests.get(f"{BASE}/report/missing-{tag}", timeout=10), 404))

# ── Writes ──────────────────────────────────────────────────────
print(f"\n{INFO} Writes")
test(
    "Update allow-listed fields",
    lambda: expect(requests.put(f"{BASE}/report/{ids[0]}", json={"read": True, "content": "x"}, headers=ADMIN, timeout=10), 200),
)
test(
    "Bulk flag",
    lambda: expect(requests.patch(f"{BASE}/report/_flag", json={"ids": ids[:2], "flagged": True}, headers=ADMIN, timeout=10), 200),
)
test(
    "Bulk read (empty ids)",
    lambda: expect(requests.patch(f"{BASE}/report/_read", json={"ids": []}, headers=ADMIN, timeout=10), 200),
)
test("Viewer cannot edit", lambda: expect(requests.put(f"{BASE}/report/{ids[0]}", json={}, headers=VIEWER, timeout=10), 403))

# ── Batch ───────────────────────────────────────────────────────
print(f"\n{INFO} Batch")
test("Checkout batch", lambda: expect(requests.patch(f"{BASE}/report/batch", headers=ADMIN, timeout=10), 200).json())
test("Load batch", lambda: expect(requests.get(f"{BASE}/report/batch", headers=ADMIN, timeout=10), 200).json())
test("Cancel batch", lambda: expect(requests.put(f"{BASE}/report/batch", headers=ADMIN, timeout=10), 200))

# ── Summary ─────────────────────────────────────────────────────
print("\n" + "=" * 60)
passed = sum(1 for _, ok, _, _ in results if ok)
failed = sum(1 for _, ok, _, _ in results if not ok)
total = len(results)
print(f"Results: {passed}/{total} passed | {failed} failed")
if failed > 0:
    print("\nFailed tests:")
    for name, ok, _, err in results:
        if not ok:
            print(f"  {FAIL} {name}: {err}")
print()
