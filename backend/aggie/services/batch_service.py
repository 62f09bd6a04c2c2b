"""Batch workflow: the set of reports a user has checked out for review."""

from __future__ import annotations

import logging
from typing import Dict, List

from aggie.models.database import ReportStore

logger = logging.getLogger(__name__)


class BatchService:
    def __init__(self, store: ReportStore, batch_size: int = 10):
        self.store = store
        self.batch_size = batch_size

    def load(self, user_id: str) -> List[Dict]:
        return self.store.find_checked_out(user_id)

    def checkout(self, user_id: str) -> List[Dict]:
        """Drop the user's current batch and hand out a fresh one."""
        self.store.release(user_id)
        claimed = self.store.claim_unread(user_id, self.batch_size)
        logger.info("batch checked out user=%s reports=%d", user_id, claimed)
        return self.store.find_checked_out(user_id)

    def cancel(self, user_id: str) -> None:
        released = self.store.release(user_id)
        logger.info("batch cancelled user=%s reports=%d", user_id, released)
