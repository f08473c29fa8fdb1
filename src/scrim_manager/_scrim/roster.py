# Area: Scrim
"""
scrim_manager._scrim.roster — Roster Slot Model
===============================================

Defines the Applicant dataclass: one player's registration and, once
placed on a team, the slot they occupy. Pure data plus validation
predicates; no mutation of scrim state happens here.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .enums import ALL_POSITIONS, Position, ScrimType
from ..errors import MalformedPayloadError

MAX_PREFERENCES = 3

POSITION_NAMES = [p.value for p in Position]

# Legacy documents store preferences as "TOP (1순위)"
_RANKED_LABEL = re.compile(r"^\s*([A-Za-z]+)\s*\((\d+)[^)]*\)\s*$")


@dataclass
class Applicant:
    """
    A player's registration record.

    Attributes:
        email: Stable identity of the player
        nickname: Display name
        tier: Free-form rank label (empty for ARAM)
        positions: Preferences in rank order, or ["ALL"]
        champion: Champion played in the current match, if recorded
        assigned_position: Slot held on a team, if placed
    """

    email: str
    nickname: str = ""
    tier: str = ""
    positions: List[str] = field(default_factory=list)
    champion: Optional[str] = None
    assigned_position: Optional[Position] = None

    @property
    def accepts_any_position(self) -> bool:
        return ALL_POSITIONS in self.positions

    def can_play(self, position: Position) -> bool:
        return self.accepts_any_position or position.value in self.positions

    def cleared(self) -> "Applicant":
        """Copy without any in-game placement (slot or champion)."""
        return replace(self, positions=list(self.positions), champion=None,
                       assigned_position=None)

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "email": self.email,
            "nickname": self.nickname,
            "tier": self.tier,
            "positions": list(self.positions),
        }
        if self.champion is not None:
            doc["champion"] = self.champion
        if self.assigned_position is not None:
            doc["assignedPosition"] = self.assigned_position.value
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Applicant":
        assigned = doc.get("assignedPosition")
        return cls(
            email=doc["email"],
            nickname=doc.get("nickname") or "",
            tier=doc.get("tier") or "",
            positions=normalize_positions(doc.get("positions") or []),
            champion=doc.get("champion") or None,
            assigned_position=Position(assigned) if assigned else None,
        )


def normalize_positions(raw: List[str]) -> List[str]:
    """
    Normalize stored position preferences into rank order.

    Accepts plain names ("MID") as well as legacy ranked labels
    ("MID (1순위)"), which are sorted by their rank.
    """
    ranked = []
    for index, label in enumerate(raw):
        match = _RANKED_LABEL.match(label)
        if match:
            ranked.append((int(match.group(2)), match.group(1).upper()))
        else:
            ranked.append((index + 1, label.strip().upper()))
    ranked.sort(key=lambda item: item[0])
    return [name for _, name in ranked]


def position_errors(positions: List[str]) -> List[str]:
    """
    Check a preference list.

    Valid lists are exactly ["ALL"] or 1-3 distinct names from the
    five-position set.

    Returns:
        List of problems (empty if valid)
    """
    if positions == [ALL_POSITIONS]:
        return []
    if not positions:
        return ["at least one position is required"]
    errors = []
    if ALL_POSITIONS in positions:
        errors.append("'ALL' cannot be combined with other positions")
    if len(positions) > MAX_PREFERENCES:
        errors.append(f"at most {MAX_PREFERENCES} positions may be ranked")
    if len(set(positions)) != len(positions):
        errors.append("positions must be distinct")
    unknown = [p for p in positions if p != ALL_POSITIONS and p not in POSITION_NAMES]
    if unknown:
        errors.append(f"unknown positions: {', '.join(unknown)}")
    return errors


def validate_registration(applicant: Applicant, scrim_type: ScrimType) -> None:
    """
    Validate an applicant's tier and positions for a scrim type.

    ARAM scrims skip tier and position checks entirely.

    Raises:
        MalformedPayloadError: If the registration is incomplete
    """
    if not applicant.email:
        raise MalformedPayloadError("An applicant email is required")
    if scrim_type == ScrimType.ARAM:
        return
    errors = []
    if not applicant.tier.strip():
        errors.append("a tier is required")
    errors.extend(position_errors(applicant.positions))
    if errors:
        raise MalformedPayloadError("Invalid registration", details=errors)
