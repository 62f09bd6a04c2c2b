"""Report helpers used by the routes."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Mapping, Optional

from aggie.models.database import ReportStore, StoreError
from aggie.models.report_query import QUERY_FIELDS, ReportQuery


def parse_query_data(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Pick the recognised search parameters. ``None`` when none are present."""
    if not params:
        return None
    picked = {k: params[k] for k in QUERY_FIELDS if k in params and params[k] not in (None, "")}
    return picked or None


# keeps page * page_size inside SQLite's 64-bit OFFSET
MAX_PAGE = 2**31 - 1


def parse_page(raw: Optional[str]) -> int:
    try:
        page = int(raw) if raw is not None else 0
    except (TypeError, ValueError):
        return 0
    return min(max(page, 0), MAX_PAGE)


def build_query(query_data: Dict[str, Any]) -> ReportQuery:
    return ReportQuery.from_params(query_data)


async def toggle_and_save(
    store: ReportStore,
    ids: Optional[List[str]],
    toggle: Callable[[Dict[str, Any], bool], Dict[str, Any]],
    value: bool,
) -> Optional[StoreError]:
    """Apply ``toggle`` to every report in ``ids`` and save them concurrently.

    Waits for every save to finish. Returns the first failure in id order,
    or ``None`` when all saves succeeded (or there was nothing to do).
    Successful saves are not rolled back.
    """
    if not ids:
        return None

    try:
        reports = await asyncio.to_thread(store.find_by_ids, ids)
    except StoreError as e:
        return e
    if not reports:
        return None

    async def _save(report: Dict[str, Any]) -> int:
        toggle(report, value)
        return await asyncio.to_thread(store.save, report)

    outcomes = await asyncio.gather(*(_save(r) for r in reports), return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, StoreError):
            return outcome
        if isinstance(outcome, BaseException):
            raise outcome
    return None
