# Area: Scrim
"""
scrim_manager._scrim.repo_matches — Matches Repository
======================================================

Read access to the ``matches`` collection, written by end_game.
"""

from typing import List, Optional

from .database import BaseRepository
from .match_record import MatchRecord

MATCHES = "matches"


class MatchRepository(BaseRepository):
    """Repository for finished match records."""

    collection = MATCHES

    def get_match(self, match_id: str) -> Optional[MatchRecord]:
        doc = self._get(match_id)
        if doc is None:
            return None
        return MatchRecord.from_document(doc)

    def list_matches(self, scrim_id: Optional[str] = None) -> List[MatchRecord]:
        """
        Get match records, most recent first.

        Args:
            scrim_id: Only return matches played in this scrim

        Returns:
            List of match records
        """
        matches = [MatchRecord.from_document(doc) for _, doc in self._list()]
        if scrim_id is not None:
            matches = [m for m in matches if m.scrim_id == scrim_id]
        matches.sort(key=lambda m: m.match_date or m.finished_at or "", reverse=True)
        return matches
