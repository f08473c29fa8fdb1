# Area: Scrim
"""
scrim_manager._scrim.repo_users — Users Repository
==================================================

Repository for the ``users`` collection: player profiles keyed by
email, holding the role used for permission checks and the running
totals end_game maintains.
"""

import copy
from typing import Any, Dict, List, Optional

from .database import BaseRepository
from .enums import Role
from .match_record import MatchPlayer

USERS = "users"


class UserRepository(BaseRepository):
    """
    Repository for user profiles.

    Handles saving, retrieving and listing profiles.
    """

    collection = USERS

    def save_user(self, email: str, nickname: str, role: Role = Role.MEMBER,
                  total_scrims_played: int = 0) -> None:
        """
        Save a profile, keeping any stats already recorded.

        Args:
            email: Player identity (document key)
            nickname: Display name
            role: Permission role
            total_scrims_played: Initial played count for new profiles
        """
        def write(tx):
            existing = tx.get(USERS, email) or {}
            profile = {
                "email": email,
                "nickname": nickname,
                "role": role.value,
                "totalScrimsPlayed": existing.get("totalScrimsPlayed", total_scrims_played),
                "championStats": existing.get("championStats", {}),
            }
            tx.set(USERS, email, profile)
        self.store.transaction(write)

    def get_user(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Get a profile by email.

        Returns:
            Profile dict or None if not found
        """
        return self._get(email)

    def get_all_users(self) -> List[Dict[str, Any]]:
        return [doc for _, doc in self._list()]

    def nickname_map(self) -> Dict[str, str]:
        return {doc["email"]: doc.get("nickname", "") for doc in self.get_all_users()}


def apply_match_to_profile(profile: Dict[str, Any], player: MatchPlayer, won: bool) -> Dict[str, Any]:
    """
    Return a profile updated with one finished match.

    Increments the played count and, when a champion was entered,
    that champion's wins or losses.
    """
    updated = copy.deepcopy(profile)
    updated["totalScrimsPlayed"] = updated.get("totalScrimsPlayed", 0) + 1
    if player.champion:
        stats = updated.setdefault("championStats", {})
        line = stats.setdefault(player.champion, {"wins": 0, "losses": 0})
        line["wins" if won else "losses"] += 1
    return updated


def move_champion_result(profile: Dict[str, Any], old: Optional[str], new: str, won: bool) -> Dict[str, Any]:
    """Return a profile with one match's result moved from ``old`` to ``new``."""
    updated = copy.deepcopy(profile)
    stats = updated.setdefault("championStats", {})
    key = "wins" if won else "losses"
    if old and old in stats and stats[old].get(key, 0) > 0:
        stats[old][key] -= 1
        if not stats[old]["wins"] and not stats[old]["losses"]:
            del stats[old]
    line = stats.setdefault(new, {"wins": 0, "losses": 0})
    line[key] += 1
    return updated


def new_profile(email: str, nickname: str, role: Role = Role.MEMBER) -> Dict[str, Any]:
    return {
        "email": email,
        "nickname": nickname,
        "role": role.value,
        "totalScrimsPlayed": 0,
        "championStats": {},
    }
