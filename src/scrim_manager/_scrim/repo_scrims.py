# Area: Scrim
"""
scrim_manager._scrim.repo_scrims — Scrims Repository
====================================================

Read access to the ``scrims`` collection. All mutation of an existing
scrim goes through the TransactionCoordinator.
"""

from typing import List, Optional

from .database import BaseRepository
from .enums import ScrimStatus
from .state import ScrimState

SCRIMS = "scrims"


class ScrimRepository(BaseRepository):
    """Repository for scrim documents."""

    collection = SCRIMS

    def get_scrim(self, scrim_id: str) -> Optional[ScrimState]:
        """
        Get a scrim by ID.

        Args:
            scrim_id: Scrim identifier to look up

        Returns:
            ScrimState or None if not found
        """
        doc = self._get(scrim_id)
        if doc is None:
            return None
        return ScrimState.from_document(scrim_id, doc)

    def list_scrims(self, status: Optional[ScrimStatus] = None) -> List[ScrimState]:
        """
        Get all scrims, newest first.

        Args:
            status: Only return scrims in this status

        Returns:
            List of scrim states
        """
        scrims = [ScrimState.from_document(doc_id, doc) for doc_id, doc in self._list()]
        if status is not None:
            scrims = [s for s in scrims if s.status == status]
        scrims.sort(key=lambda s: s.created_at or "", reverse=True)
        return scrims
