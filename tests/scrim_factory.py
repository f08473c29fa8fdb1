# Area: Scrim Tests
"""Builders shared by the scrim tests."""

import random
from typing import Dict, List, Optional

from scrim_manager._scrim.enums import ScrimStatus, ScrimType
from scrim_manager._scrim.handler_base import ActionContext
from scrim_manager._scrim.roster import Applicant
from scrim_manager._scrim.state import ScrimState

CREATOR = "creator@example.com"
ADMIN = "admin@example.com"
OUTSIDER = "outsider@example.com"
NOW = "2026-03-01T20:00:00+00:00"

POSITIONS = ["TOP", "JG", "MID", "AD", "SUP"]

CHAMPIONS = [
    "Ahri", "Akali", "Ashe", "Caitlyn", "Darius", "Ezreal", "Garen", "Jinx",
    "Lee Sin", "Lux", "Nami", "Orianna", "Sett", "Thresh", "Vi", "Yasuo",
    "Zed", "Zyra", "Leona", "Jhin",
]


def email(i: int) -> str:
    return f"p{i}@example.com"


def make_applicant(i: int, positions: Optional[List[str]] = None, tier: str = "Gold") -> Applicant:
    """Player ``i``; by default prefers POSITIONS[i % 5] only."""
    return Applicant(
        email=email(i),
        nickname=f"Player{i}",
        tier=tier,
        positions=positions if positions is not None else [POSITIONS[i % 5]],
    )


def recruiting_state(
    applicants: int = 10,
    waitlist: int = 0,
    scrim_type: ScrimType = ScrimType.NORMAL,
) -> ScrimState:
    """Recruiting scrim with players p0.. in the pool and the next ones waitlisted."""
    aram = scrim_type == ScrimType.ARAM
    state = ScrimState(
        scrim_id="scrim-1",
        name="Friday scrim",
        creator_email=CREATOR,
        scrim_type=scrim_type,
        status=ScrimStatus.RECRUITING,
        created_at=NOW,
    )
    for i in range(applicants):
        state.applicants.append(make_applicant(i, [] if aram else None, "" if aram else "Gold"))
    for i in range(applicants, applicants + waitlist):
        state.waitlist.append(make_applicant(i, [] if aram else None, "" if aram else "Gold"))
    return state


def make_ctx(
    actor: str = CREATOR,
    payload: Optional[Dict] = None,
    admin: bool = False,
    champion_names: Optional[Dict[str, str]] = None,
    seed: int = 7,
    new_match_id: str = "match-1",
) -> ActionContext:
    return ActionContext(
        actor_email=actor,
        payload=payload or {},
        now=NOW,
        actor_is_admin=admin,
        champion_names=champion_names,
        rng=random.Random(seed),
        new_match_id=new_match_id,
    )


def champion_map(names: List[str] = CHAMPIONS) -> Dict[str, str]:
    return {name.lower(): name for name in names}


def picks_for(state: ScrimState, champions: List[str]) -> List[Dict[str, str]]:
    """Pair blue then red players, in slot order, with ``champions``."""
    players = state.blue_team + state.red_team
    return [{"email": p.email, "champion": c} for p, c in zip(players, champions)]
