# Area: Scrim
"""
scrim_manager._scrim.enums — Scrim State Machine Enums
======================================================

Defines the statuses, scrim types, positions and actions of the scrim
lifecycle state machine.
"""

from enum import Enum


class ScrimStatus(Enum):
    """
    Lifecycle status of a scrim.

    Status transitions:
    RECRUITING -> TEAM_BUILDING (start_team_building)
    TEAM_BUILDING -> IN_PROGRESS (start_game)
    TEAM_BUILDING -> RECRUITING (reset_to_recruiting)
    IN_PROGRESS -> FINISHED (end_game)
    IN_PROGRESS -> TEAM_BUILDING (reset_to_team_building)
    FINISHED -> TEAM_BUILDING (reset_to_team_building)
    FINISHED -> RECRUITING (reset_to_recruiting)
    """
    RECRUITING = "recruiting"
    TEAM_BUILDING = "team_building"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"

    @classmethod
    def from_label(cls, label: str) -> "ScrimStatus":
        """Parse a stored status, accepting legacy Korean labels."""
        if label in _LEGACY_STATUS_LABELS:
            return _LEGACY_STATUS_LABELS[label]
        return cls(label)


class ScrimType(Enum):
    """
    Scrim game mode.

    - NORMAL: positions + tiers, free champion selection
    - FEARLESS: champions already picked in this scrim are banned
    - ARAM: random teams, no positions, tiers or champion selection
    """
    NORMAL = "normal"
    FEARLESS = "fearless"
    ARAM = "aram"

    @classmethod
    def from_label(cls, label: str) -> "ScrimType":
        """Parse a stored scrim type, accepting legacy Korean labels."""
        if label in _LEGACY_TYPE_LABELS:
            return _LEGACY_TYPE_LABELS[label]
        return cls(label)


class Team(Enum):
    BLUE = "blue"
    RED = "red"


class Position(Enum):
    """The five team slots, in display order."""
    TOP = "TOP"
    JG = "JG"
    MID = "MID"
    AD = "AD"
    SUP = "SUP"


# Sentinel preference: the player accepts any slot
ALL_POSITIONS = "ALL"


class Role(Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MEMBER = "member"

    @property
    def is_admin(self) -> bool:
        return self in (Role.SUPER_ADMIN, Role.ADMIN)

    @classmethod
    def from_label(cls, label: str) -> "Role":
        """Parse a stored role; unknown labels are plain members."""
        if label in _LEGACY_ROLE_LABELS:
            return _LEGACY_ROLE_LABELS[label]
        try:
            return cls(label)
        except ValueError:
            return cls.MEMBER


class ScrimAction(Enum):
    """
    Actions accepted by the transition engine.

    Privileged actions require the actor to be an admin or the scrim
    creator; see PRIVILEGED_ACTIONS.
    """
    APPLY = "apply"
    APPLY_WAITLIST = "apply_waitlist"
    LEAVE = "leave"
    LEAVE_WAITLIST = "leave_waitlist"
    START_TEAM_BUILDING = "start_team_building"
    UPDATE_TEAMS = "update_teams"
    ASSIGN_SLOT = "assign_slot"
    UNASSIGN_SLOT = "unassign_slot"
    START_GAME = "start_game"
    END_GAME = "end_game"
    RESET_TO_TEAM_BUILDING = "reset_to_team_building"
    RESET_TO_RECRUITING = "reset_to_recruiting"
    RESET_FEARLESS = "reset_fearless"
    REMOVE_MEMBER = "remove_member"
    RENAME = "rename"
    DISBAND = "disband"

    @classmethod
    def parse(cls, name: str) -> "ScrimAction":
        """Parse an action name, accepting known aliases."""
        return cls(_ACTION_ALIASES.get(name, name))


PRIVILEGED_ACTIONS = frozenset({
    ScrimAction.START_TEAM_BUILDING,
    ScrimAction.UPDATE_TEAMS,
    ScrimAction.ASSIGN_SLOT,
    ScrimAction.UNASSIGN_SLOT,
    ScrimAction.START_GAME,
    ScrimAction.END_GAME,
    ScrimAction.RESET_TO_TEAM_BUILDING,
    ScrimAction.RESET_TO_RECRUITING,
    ScrimAction.RESET_FEARLESS,
    ScrimAction.REMOVE_MEMBER,
    ScrimAction.RENAME,
    ScrimAction.DISBAND,
})

_ACTION_ALIASES = {
    "reset_peerless": "reset_fearless",
}

_LEGACY_STATUS_LABELS = {
    "모집중": ScrimStatus.RECRUITING,
    "팀 구성중": ScrimStatus.TEAM_BUILDING,
    "경기중": ScrimStatus.IN_PROGRESS,
    "종료": ScrimStatus.FINISHED,
}

_LEGACY_TYPE_LABELS = {
    "일반": ScrimType.NORMAL,
    "피어리스": ScrimType.FEARLESS,
    "칼바람": ScrimType.ARAM,
}

_LEGACY_ROLE_LABELS = {
    "총관리자": Role.SUPER_ADMIN,
    "관리자": Role.ADMIN,
}
