# Area: Scrim
"""
scrim_manager._scrim.state — Scrim State and Roster Invariants
==============================================================

Defines the ScrimState aggregate (one scrim document) and the pure
roster operations the transition handlers are built from: capacity
checks, leaving with waitlist promotion, slot assignment and the
invariant check run on every computed state.

Every operation that changes rosters returns a new ScrimState; the
state passed in is never modified.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .enums import Position, ScrimStatus, ScrimType, Team
from .match_record import MatchRecord
from .roster import Applicant
from ..errors import (
    CapacityExceededError,
    DuplicateRegistrationError,
    InvariantViolationError,
    MalformedPayloadError,
    NotFoundError,
)

MAX_APPLICANTS = 10
MAX_WAITLIST = 10
TEAM_SIZE = 5


@dataclass
class ScrimState:
    """
    One scrim document.

    Attributes:
        scrim_id: Document key
        name: Display name
        creator_email: Immutable owner
        scrim_type: Game mode
        status: Lifecycle status
        applicants: Registered players; during team building, the unassigned pool
        waitlist: Overflow queue, oldest first
        blue_team: Blue side, in slot order
        red_team: Red side, in slot order
        fearless_used_champions: Champions banned for the rest of a fearless scrim
        match_history: Finished normal/fearless matches
        aram_match_history: Finished ARAM matches
        winning_team: Set only while FINISHED
        start_time: ISO timestamp stamped by start_game
        created_at: ISO timestamp of creation
    """

    scrim_id: str
    name: str
    creator_email: str
    scrim_type: ScrimType = ScrimType.NORMAL
    status: ScrimStatus = ScrimStatus.RECRUITING
    applicants: List[Applicant] = field(default_factory=list)
    waitlist: List[Applicant] = field(default_factory=list)
    blue_team: List[Applicant] = field(default_factory=list)
    red_team: List[Applicant] = field(default_factory=list)
    fearless_used_champions: List[str] = field(default_factory=list)
    match_history: List[MatchRecord] = field(default_factory=list)
    aram_match_history: List[MatchRecord] = field(default_factory=list)
    winning_team: Optional[Team] = None
    start_time: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_aram(self) -> bool:
        return self.scrim_type == ScrimType.ARAM

    @property
    def is_fearless(self) -> bool:
        return self.scrim_type == ScrimType.FEARLESS

    def copy(self) -> "ScrimState":
        return copy.deepcopy(self)

    def team(self, team: Team) -> List[Applicant]:
        return self.blue_team if team == Team.BLUE else self.red_team

    def active_players(self) -> List[Applicant]:
        """Pool plus both teams (everyone but the waitlist)."""
        return self.applicants + self.blue_team + self.red_team

    def buckets(self) -> Dict[str, List[Applicant]]:
        return {
            "applicants": self.applicants,
            "waitlist": self.waitlist,
            "blue_team": self.blue_team,
            "red_team": self.red_team,
        }

    def locate(self, email: str) -> Optional[str]:
        """Return the name of the bucket holding a player, or None."""
        for name, bucket in self.buckets().items():
            if any(a.email == email for a in bucket):
                return name
        return None

    def find_member(self, email: str) -> Optional[Applicant]:
        for bucket in self.buckets().values():
            for applicant in bucket:
                if applicant.email == email:
                    return applicant
        return None

    def slot_occupant(self, team: Team, position: Position) -> Optional[Applicant]:
        for applicant in self.team(team):
            if applicant.assigned_position == position:
                return applicant
        return None

    def history(self) -> List[MatchRecord]:
        return self.aram_match_history if self.is_aram else self.match_history

    def to_document(self) -> Dict[str, Any]:
        return {
            "scrimName": self.name,
            "creatorEmail": self.creator_email,
            "scrimType": self.scrim_type.value,
            "status": self.status.value,
            "applicants": [a.to_document() for a in self.applicants],
            "waitlist": [a.to_document() for a in self.waitlist],
            "blueTeam": [a.to_document() for a in self.blue_team],
            "redTeam": [a.to_document() for a in self.red_team],
            "fearlessUsedChampions": list(self.fearless_used_champions),
            "matchHistory": [m.to_document() for m in self.match_history],
            "aramMatchHistory": [m.to_document() for m in self.aram_match_history],
            "winningTeam": self.winning_team.value if self.winning_team else None,
            "startTime": self.start_time,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, scrim_id: str, doc: Dict[str, Any]) -> "ScrimState":
        winning = doc.get("winningTeam")
        return cls(
            scrim_id=scrim_id,
            name=doc.get("scrimName", ""),
            creator_email=doc.get("creatorEmail", ""),
            scrim_type=ScrimType.from_label(doc.get("scrimType", ScrimType.NORMAL.value)),
            status=ScrimStatus.from_label(doc.get("status", ScrimStatus.RECRUITING.value)),
            applicants=_load_bucket(doc.get("applicants")),
            waitlist=_load_bucket(doc.get("waitlist")),
            blue_team=_load_bucket(doc.get("blueTeam")),
            red_team=_load_bucket(doc.get("redTeam")),
            fearless_used_champions=list(doc.get("fearlessUsedChampions") or []),
            match_history=[MatchRecord.from_document(m) for m in doc.get("matchHistory") or []],
            aram_match_history=[
                MatchRecord.from_document(m) for m in doc.get("aramMatchHistory") or []
            ],
            winning_team=Team(winning) if winning else None,
            start_time=doc.get("startTime"),
            created_at=doc.get("createdAt"),
        )


def _load_bucket(raw: Optional[List[Any]]) -> List[Applicant]:
    # Skip entries without an email; older documents carry stray values
    return [
        Applicant.from_document(item)
        for item in raw or []
        if isinstance(item, dict) and isinstance(item.get("email"), str)
    ]


# ══════════════════════════════════════════════════════════════
# REGISTRATION
# ══════════════════════════════════════════════════════════════

def can_apply(state: ScrimState, applicant: Applicant) -> None:
    """
    Check that a player may join the applicant pool.

    Raises:
        CapacityExceededError: If 10 players have already applied
        DuplicateRegistrationError: If the player applied or is waitlisted
    """
    _check_not_registered(state, applicant.email)
    if len(state.applicants) >= MAX_APPLICANTS:
        raise CapacityExceededError("The applicant list is full")


def can_join_waitlist(state: ScrimState, applicant: Applicant) -> None:
    """
    Check that a player may join the waitlist.

    Raises:
        CapacityExceededError: If the waitlist already holds 10 players
        DuplicateRegistrationError: If the player applied or is waitlisted
    """
    _check_not_registered(state, applicant.email)
    if len(state.waitlist) >= MAX_WAITLIST:
        raise CapacityExceededError("The waitlist is full")


def _check_not_registered(state: ScrimState, email: str) -> None:
    if any(a.email == email for a in state.applicants):
        raise DuplicateRegistrationError(f"{email} has already applied to this scrim")
    if any(w.email == email for w in state.waitlist):
        raise DuplicateRegistrationError(f"{email} is already on the waitlist")


def add_applicant(state: ScrimState, applicant: Applicant) -> ScrimState:
    can_apply(state, applicant)
    new_state = state.copy()
    new_state.applicants.append(applicant.cleared())
    return new_state


def add_to_waitlist(state: ScrimState, applicant: Applicant) -> ScrimState:
    can_join_waitlist(state, applicant)
    new_state = state.copy()
    new_state.waitlist.append(applicant.cleared())
    return new_state


def _promote_one(state: ScrimState) -> Optional[Applicant]:
    """Move the oldest waitlisted player into the pool (mutates state)."""
    if not state.waitlist:
        return None
    promoted = state.waitlist.pop(0)
    state.applicants.append(promoted)
    return promoted


def leave(state: ScrimState, email: str) -> ScrimState:
    """
    Remove a player from the applicants.

    If the pool drops below capacity, exactly one waitlisted player
    (the oldest) is promoted.

    Raises:
        NotFoundError: If the player has not applied
    """
    if not any(a.email == email for a in state.applicants):
        raise NotFoundError(f"{email} has not applied to this scrim")
    new_state = state.copy()
    new_state.applicants = [a for a in new_state.applicants if a.email != email]
    if len(new_state.applicants) < MAX_APPLICANTS:
        _promote_one(new_state)
    return new_state


def leave_waitlist(state: ScrimState, email: str) -> ScrimState:
    if not any(w.email == email for w in state.waitlist):
        raise NotFoundError(f"{email} is not on the waitlist")
    new_state = state.copy()
    new_state.waitlist = [w for w in new_state.waitlist if w.email != email]
    return new_state


def remove_member(state: ScrimState, email: str) -> ScrimState:
    """
    Strike a player from whichever bucket holds them.

    While recruiting, one waitlisted player is promoted if the pool is
    below capacity. During team building one is promoted into the pool
    if fewer than 10 players remain active.

    Raises:
        NotFoundError: If no bucket holds the player
    """
    if state.locate(email) is None:
        raise NotFoundError(f"{email} is not a member of this scrim")
    new_state = state.copy()
    new_state.applicants = [a for a in new_state.applicants if a.email != email]
    new_state.waitlist = [w for w in new_state.waitlist if w.email != email]
    new_state.blue_team = [p for p in new_state.blue_team if p.email != email]
    new_state.red_team = [p for p in new_state.red_team if p.email != email]

    if new_state.status == ScrimStatus.RECRUITING:
        if len(new_state.applicants) < MAX_APPLICANTS:
            _promote_one(new_state)
    elif new_state.status == ScrimStatus.TEAM_BUILDING:
        if len(new_state.active_players()) < MAX_APPLICANTS:
            _promote_one(new_state)
    return new_state


# ══════════════════════════════════════════════════════════════
# SLOTS
# ══════════════════════════════════════════════════════════════

def _detach(state: ScrimState, email: str) -> Applicant:
    """Take a player out of the pool or a team (mutates state)."""
    for bucket in (state.applicants, state.blue_team, state.red_team):
        for index, applicant in enumerate(bucket):
            if applicant.email == email:
                return bucket.pop(index)
    raise NotFoundError(f"{email} is not in the pool or on a team")


def assign_to_slot(
    state: ScrimState, team: Team, position: Optional[Position], email: str
) -> ScrimState:
    """
    Place a player into a team slot.

    The player may come from the pool or from another slot. If the
    target slot is occupied, its previous occupant returns to the pool.
    ARAM teams have no positions; a full ARAM team rejects the move.

    Raises:
        NotFoundError: If the player is not in the pool or on a team
        MalformedPayloadError: If the position is missing or not one the
            player registered for
        CapacityExceededError: If an ARAM team is already full
    """
    new_state = state.copy()
    player = new_state.find_member(email)
    if player is None or new_state.locate(email) == "waitlist":
        raise NotFoundError(f"{email} is not in the pool or on a team")

    if new_state.is_aram:
        if new_state.locate(email) == f"{team.value}_team":
            return new_state
        if len(new_state.team(team)) >= TEAM_SIZE:
            raise CapacityExceededError(f"The {team.value} team is full")
        moved = _detach(new_state, email).cleared()
        new_state.team(team).append(moved)
        return new_state

    if position is None:
        raise MalformedPayloadError("A position is required to fill a slot")
    if not player.can_play(position):
        raise MalformedPayloadError(
            f"{email} did not register for {position.value}",
            details=[f"registered positions: {', '.join(player.positions)}"],
        )

    occupant = new_state.slot_occupant(team, position)
    if occupant is not None and occupant.email == email:
        return new_state
    moved = _detach(new_state, email)
    if occupant is not None:
        _detach(new_state, occupant.email)
        new_state.applicants.append(occupant.cleared())
    moved.assigned_position = position
    moved.champion = None
    new_state.team(team).append(moved)
    _sort_by_slot(new_state.team(team))
    return new_state


def unassign(state: ScrimState, email: str) -> ScrimState:
    """Move a player from a team back to the pool."""
    if state.locate(email) not in ("blue_team", "red_team"):
        raise NotFoundError(f"{email} is not on a team")
    new_state = state.copy()
    player = _detach(new_state, email)
    new_state.applicants.append(player.cleared())
    return new_state


def overwrite_teams(
    state: ScrimState,
    assignments: Dict[Team, List[Tuple[str, Optional[Position]]]],
) -> ScrimState:
    """
    Replace both team rosters.

    ``assignments`` maps each team to (email, position) pairs naming
    players already in the pool or on a team. Players left out return
    to the pool; nobody is dropped.

    Raises:
        NotFoundError: If an email is not in the pool or on a team
        MalformedPayloadError: If a player or slot appears twice, or a
            position is missing or unregistered
        CapacityExceededError: If a team lists more than 5 players
    """
    new_state = state.copy()
    pool = {a.email: a for a in merge_into_pool(new_state)}
    placed = set()
    teams: Dict[Team, List[Applicant]] = {Team.BLUE: [], Team.RED: []}

    for team, entries in assignments.items():
        if len(entries) > TEAM_SIZE:
            raise CapacityExceededError(f"The {team.value} team lists {len(entries)} players")
        taken = set()
        for email, position in entries:
            if email in placed:
                raise MalformedPayloadError(f"{email} is listed more than once")
            if email not in pool:
                raise NotFoundError(f"{email} is not in the pool or on a team")
            player = pool[email]
            if not new_state.is_aram:
                if position is None:
                    raise MalformedPayloadError(f"A position is required for {email}")
                if position in taken:
                    raise MalformedPayloadError(
                        f"{team.value} {position.value} is assigned twice"
                    )
                if not player.can_play(position):
                    raise MalformedPayloadError(f"{email} did not register for {position.value}")
                taken.add(position)
                player.assigned_position = position
            placed.add(email)
            teams[team].append(player)

    new_state.blue_team = teams[Team.BLUE]
    new_state.red_team = teams[Team.RED]
    _sort_by_slot(new_state.blue_team)
    _sort_by_slot(new_state.red_team)
    new_state.applicants = [a for email, a in pool.items() if email not in placed]
    return new_state


def merge_into_pool(state: ScrimState) -> List[Applicant]:
    """Pool plus both teams, cleared and de-duplicated by email."""
    merged: Dict[str, Applicant] = {}
    for applicant in state.active_players():
        if applicant.email not in merged:
            merged[applicant.email] = applicant.cleared()
    return list(merged.values())


def _sort_by_slot(team: List[Applicant]) -> None:
    order = {p: i for i, p in enumerate(Position)}
    team.sort(key=lambda a: order.get(a.assigned_position, len(order)))


# ══════════════════════════════════════════════════════════════
# INVARIANTS
# ══════════════════════════════════════════════════════════════

def invariant_errors(state: ScrimState) -> List[str]:
    """
    Collect violated roster invariants.

    Returns:
        List of problems (empty if the state is consistent)
    """
    errors = []
    if len(state.applicants) > MAX_APPLICANTS:
        errors.append(f"{len(state.applicants)} applicants exceed {MAX_APPLICANTS}")
    if len(state.waitlist) > MAX_WAITLIST:
        errors.append(f"{len(state.waitlist)} waitlisted exceed {MAX_WAITLIST}")

    seen: Dict[str, str] = {}
    for name, bucket in state.buckets().items():
        for applicant in bucket:
            if applicant.email in seen:
                errors.append(f"{applicant.email} is in both {seen[applicant.email]} and {name}")
            seen[applicant.email] = name

    if state.status == ScrimStatus.RECRUITING and (state.blue_team or state.red_team):
        errors.append("teams must be empty while recruiting")
    if state.winning_team is not None and state.status != ScrimStatus.FINISHED:
        errors.append("a winning team is only set once the scrim is finished")

    for team in Team:
        members = state.team(team)
        if len(members) > TEAM_SIZE:
            errors.append(f"{team.value} team has {len(members)} players")
        errors.extend(_slot_errors(state, team, members))

    for applicant in state.applicants + state.waitlist:
        if applicant.assigned_position is not None:
            errors.append(f"{applicant.email} holds a slot but is not on a team")
    return errors


def _slot_errors(state: ScrimState, team: Team, members: List[Applicant]) -> List[str]:
    errors = []
    if state.is_aram:
        for member in members:
            if member.assigned_position is not None:
                errors.append(f"{member.email} has a position in an ARAM team")
        return errors
    taken = set()
    for member in members:
        position = member.assigned_position
        if position is None:
            errors.append(f"{member.email} is on the {team.value} team without a slot")
            continue
        if position in taken:
            errors.append(f"{team.value} {position.value} is filled twice")
        taken.add(position)
        if not member.can_play(position):
            errors.append(f"{member.email} did not register for {position.value}")
    return errors


def check_invariants(state: ScrimState) -> None:
    """
    Raises:
        InvariantViolationError: If any roster invariant is broken
    """
    errors = invariant_errors(state)
    if errors:
        raise InvariantViolationError("Scrim roster is inconsistent", details=errors)
