# Area: Scrim
"""
scrim_manager._scrim.payloads — Action Payload Schemas
======================================================

Pydantic models for the payload of each action. ``parse_payload``
turns validation failures into MalformedPayloadError so handlers only
ever see well-formed input.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enums import Position, Team
from ..errors import MalformedPayloadError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class EmptyPayload(_Payload):
    pass


class ApplyPayload(_Payload):
    """Registration data for apply / apply_waitlist."""
    nickname: Optional[str] = None
    tier: str = ""
    positions: List[str] = Field(default_factory=list)

    @field_validator("positions")
    @classmethod
    def _upper(cls, value: List[str]) -> List[str]:
        return [p.strip().upper() for p in value]


class MemberPayload(_Payload):
    """Target member for remove_member / unassign_slot."""
    email: str = Field(min_length=1)


class SlotAssignment(_Payload):
    email: str = Field(min_length=1)
    position: Optional[Position] = None


class TeamsPayload(_Payload):
    """Full rosters for update_teams."""
    blue_team: List[SlotAssignment] = Field(default_factory=list)
    red_team: List[SlotAssignment] = Field(default_factory=list)

    def assignments(self) -> Dict[Team, List[tuple]]:
        return {
            Team.BLUE: [(s.email, s.position) for s in self.blue_team],
            Team.RED: [(s.email, s.position) for s in self.red_team],
        }


class StartGamePayload(_Payload):
    """Optional final rosters sent along with start_game."""
    teams: Optional[TeamsPayload] = None


class AssignSlotPayload(_Payload):
    email: str = Field(min_length=1)
    team: Team
    position: Optional[Position] = None


class ChampionPick(_Payload):
    email: str = Field(min_length=1)
    champion: Optional[str] = None

    @field_validator("champion")
    @classmethod
    def _blank_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class EndGamePayload(_Payload):
    winning_team: Team
    picks: List[ChampionPick] = Field(default_factory=list)


class RenamePayload(_Payload):
    name: str = Field(min_length=1, max_length=100)


def parse_payload(model: Type[PayloadT], payload: Optional[Dict[str, Any]]) -> PayloadT:
    """
    Validate a raw payload against an action's schema.

    Raises:
        MalformedPayloadError: If the payload is not a dict or fails validation
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"Payload must be an object, got {type(payload).__name__}"
        )
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        details = [
            f"{'.'.join(str(loc) for loc in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        ]
        raise MalformedPayloadError("Invalid payload", details=details) from e
