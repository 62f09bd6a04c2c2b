"""Report request models and in-place mutators."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Fields a client may change through PUT /report/{id}
UPDATABLE_FIELDS = ("flagged", "_incident", "read")


class ReportUpdate(BaseModel):
    """Partial update of a report. Anything outside the allow-list is dropped."""

    model_config = ConfigDict(extra="ignore")

    flagged: Optional[bool] = None
    incident: Optional[str] = Field(default=None, alias="_incident")
    read: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class BulkReadRequest(BaseModel):
    ids: Optional[List[str]] = None
    read: bool = False


class BulkFlagRequest(BaseModel):
    ids: Optional[List[str]] = None
    flagged: bool = False


def apply_update(report: Dict[str, Any], update: ReportUpdate) -> Dict[str, Any]:
    for key, value in update.changes().items():
        if key in UPDATABLE_FIELDS:
            report[key] = value
    return report


def toggle_read(report: Dict[str, Any], read: bool) -> Dict[str, Any]:
    report["read"] = bool(read)
    return report


def toggle_flagged(report: Dict[str, Any], flagged: bool) -> Dict[str, Any]:
    report["flagged"] = bool(flagged)
    # a flagged report has been looked at
    if flagged:
        report["read"] = True
    return report
