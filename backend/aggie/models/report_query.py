"""Structured search over reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from aggie.core.time_utils import to_timestamp

QUERY_FIELDS = ("keywords", "status", "after", "before", "media", "sourceId", "incidentId", "author")

# status value -> SQL predicate
STATUS_CLAUSES = {
    "flagged": "flagged = 1",
    "unflagged": "flagged = 0",
    "read": "read = 1",
    "unread": "read = 0",
    "assigned": "incident_id IS NOT NULL",
    "unassigned": "incident_id IS NULL",
}


def _like_term(term: str) -> str:
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class ReportQuery:
    keywords: Optional[str] = None
    status: Optional[str] = None
    after: Optional[str] = None
    before: Optional[str] = None
    media: Optional[str] = None
    sourceId: Optional[str] = None
    incidentId: Optional[str] = None
    author: Optional[str] = None

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "ReportQuery":
        return cls(**{k: params[k] for k in QUERY_FIELDS if params.get(k) not in (None, "")})

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Return a WHERE clause (without the keyword) and its parameters.

        Raises:
            ValueError: ``after`` or ``before`` is not a date-time.
        """
        clauses: List[str] = []
        params: List[Any] = []

        if self.keywords:
            for term in self.keywords.split():
                clauses.append("(LOWER(content) LIKE ? ESCAPE '\\' OR LOWER(author) LIKE ? ESCAPE '\\')")
                params.extend([_like_term(term), _like_term(term)])

        status_clause = STATUS_CLAUSES.get((self.status or "").lower())
        if status_clause:
            clauses.append(status_clause)

        if self.after:
            clauses.append("authored_at >= ?")
            params.append(to_timestamp(self.after))
        if self.before:
            clauses.append("authored_at <= ?")
            params.append(to_timestamp(self.before))

        for column, value in (
            ("media", self.media),
            ("source_id", self.sourceId),
            ("incident_id", self.incidentId),
            ("author", self.author),
        ):
            if value:
                clauses.append(f"{column} = ?")
                params.append(value)

        return (" AND ".join(clauses) or "1 = 1"), params
