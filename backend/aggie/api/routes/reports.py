"""Report CRUD, bulk read/flag and batch workflow routes."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from aggie.api import dependencies as deps
from aggie.core.config import Settings
from aggie.core.security import DELETE_DATA, EDIT_REPORTS, VIEW_DATA
from aggie.core.time_utils import date_from_iso8601, to_timestamp
from aggie.models.database import ReportStore, StoreError
from aggie.models.report_model import (
    BulkFlagRequest,
    BulkReadRequest,
    ReportUpdate,
    apply_update,
    toggle_flagged,
    toggle_read,
)
from aggie.models.user_model import User
from aggie.services import report_service
from aggie.services.batch_service import BatchService

logger = logging.getLogger(__name__)

router = APIRouter()


def _fail(route: str, err: StoreError) -> HTTPException:
    logger.warning("%s failed: %s %s", route, err.status, err.message)
    return HTTPException(status_code=err.status, detail=err.message)


# ── VISUALISATION ─────────────────────────────────────────────────────────────


@router.get("/report/viz", dependencies=[Depends(deps.require(VIEW_DATA))])
async def get_reports_in_range(
    startTime: Optional[str] = Query(None),
    endTime: Optional[str] = Query(None),
    store: ReportStore = Depends(deps.get_store),
):
    if not startTime or not endTime:
        raise HTTPException(status_code=400, detail="startTime and endTime are required")
    try:
        start = to_timestamp(date_from_iso8601(startTime))
        end = to_timestamp(date_from_iso8601(endTime))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return store.find_authored_between(start, end)
    except StoreError as e:
        raise _fail("GET /report/viz", e)


# ── LISTING / SEARCH ──────────────────────────────────────────────────────────


@router.get("/report", dependencies=[Depends(deps.require(VIEW_DATA))])
async def list_reports(
    request: Request,
    store: ReportStore = Depends(deps.get_store),
    cfg: Settings = Depends(deps.get_settings),
):
    page = report_service.parse_page(request.query_params.get("page"))
    query_data = report_service.parse_query_data(request.query_params)
    try:
        if query_data:
            query = report_service.build_query(query_data)
            return store.query_reports(query, page, cfg.page_size)
        return store.find_sorted_page(page, cfg.page_size)
    except StoreError as e:
        raise _fail("GET /report", e)


# ── BATCH ─────────────────────────────────────────────────────────────────────


@router.get("/report/batch")
async def load_batch(
    user: User = Depends(deps.require(VIEW_DATA)),
    batches: BatchService = Depends(deps.get_batch_service),
):
    try:
        reports = batches.load(user.id)
    except StoreError as e:
        raise _fail("GET /report/batch", e)
    return {"results": reports, "total": len(reports)}


@router.patch("/report/batch")
async def checkout_batch(
    user: User = Depends(deps.require(EDIT_REPORTS)),
    batches: BatchService = Depends(deps.get_batch_service),
):
    try:
        reports = batches.checkout(user.id)
    except StoreError as e:
        raise _fail("PATCH /report/batch", e)
    return {"results": reports, "total": len(reports)}


@router.put("/report/batch")
async def cancel_batch(
    user: User = Depends(deps.require(EDIT_REPORTS)),
    batches: BatchService = Depends(deps.get_batch_service),
):
    try:
        batches.cancel(user.id)
    except StoreError as e:
        raise _fail("PUT /report/batch", e)
    return Response(status_code=200)


# ── BULK ──────────────────────────────────────────────────────────────────────


@router.delete("/report/_all", dependencies=[Depends(deps.require(DELETE_DATA))])
async def delete_all_reports(store: ReportStore = Depends(deps.get_store)):
    try:
        removed = store.remove_all()
    except StoreError as e:
        raise _fail("DELETE /report/_all", e)
    logger.info("removed %d reports", removed)
    return Response(status_code=200)


@router.patch("/report/_read", dependencies=[Depends(deps.require(EDIT_REPORTS))])
async def mark_reports_read(body: Optional[BulkReadRequest] = None, store: ReportStore = Depends(deps.get_store)):
    body = body or BulkReadRequest()
    err = await report_service.toggle_and_save(store, body.ids, toggle_read, body.read)
    if err is not None:
        raise _fail("PATCH /report/_read", err)
    return Response(status_code=200)


@router.patch("/report/_flag", dependencies=[Depends(deps.require(EDIT_REPORTS))])
async def flag_reports(body: Optional[BulkFlagRequest] = None, store: ReportStore = Depends(deps.get_store)):
    body = body or BulkFlagRequest()
    err = await report_service.toggle_and_save(store, body.ids, toggle_flagged, body.flagged)
    if err is not None:
        raise _fail("PATCH /report/_flag", err)
    return Response(status_code=200)


# ── SINGLE REPORT ─────────────────────────────────────────────────────────────


@router.get("/report/{report_id}")
async def get_report(report_id: str, store: ReportStore = Depends(deps.get_store)):
    try:
        report = store.find_by_id(report_id)
    except StoreError as e:
        raise _fail("GET /report/{id}", e)
    if not report:
        return Response(status_code=404)
    return report


@router.put("/report/{report_id}", dependencies=[Depends(deps.require(EDIT_REPORTS))])
async def update_report(
    report_id: str,
    update: Optional[ReportUpdate] = None,
    store: ReportStore = Depends(deps.get_store),
):
    try:
        report = store.find_by_id(report_id)
        if not report:
            return Response(status_code=404)
        apply_update(report, update or ReportUpdate())
        affected = store.save(report)
    except StoreError as e:
        raise _fail("PUT /report/{id}", e)
    if not affected:
        return Response(status_code=404)
    return Response(status_code=200)
