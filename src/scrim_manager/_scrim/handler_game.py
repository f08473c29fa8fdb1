# Area: Scrim
"""
scrim_manager._scrim.handler_game — Game Handlers
=================================================

Handles the privileged actions around a running or finished game:
end_game, reset_to_team_building and reset_fearless.

end_game validates every champion pick before touching anything. A
rejected call leaves the scrim in progress with no history appended
and the fearless ban list unchanged.
"""

import logging
from typing import Dict, List, Mapping, Optional

from .enums import ScrimAction, ScrimStatus, Team
from .handler_base import ActionContext, BaseActionHandler, TransitionResult
from .match_record import MatchPlayer, MatchRecord
from .payloads import EndGamePayload
from .state import ScrimState
from ..errors import (
    InvalidChampionSelectionError,
    InvalidStateForActionError,
    MalformedPayloadError,
    NotFoundError,
)

logger = logging.getLogger("scrim_manager.scrim.handler.game")


def collect_picks(state: ScrimState, payload: EndGamePayload) -> Dict[str, Optional[str]]:
    """
    Map every team member's email to their pick (None if not entered).

    Raises:
        MalformedPayloadError: If a player is picked for twice
        NotFoundError: If a pick names someone not on a team
    """
    picks: Dict[str, Optional[str]] = {p.email: None for p in state.blue_team + state.red_team}
    seen = set()
    for pick in payload.picks:
        if pick.email in seen:
            raise MalformedPayloadError(f"{pick.email} has more than one pick")
        if pick.email not in picks:
            raise NotFoundError(f"{pick.email} is not playing in this game")
        seen.add(pick.email)
        picks[pick.email] = pick.champion
    return picks


def champion_errors(
    picks: Dict[str, Optional[str]],
    champion_names: Optional[Mapping[str, str]],
    used_champions: List[str],
    fearless: bool,
) -> List[str]:
    """
    Check champion picks for one match.

    Every entered pick must be a catalog champion (skipped when the
    catalog is unavailable). Fearless matches additionally need a pick
    for every player, no champion twice within the match, and no
    champion from the scrim's ban list.

    Returns:
        List of problems (empty if every pick is acceptable)
    """
    errors = []
    if champion_names is not None:
        for email, champion in picks.items():
            if champion and champion.lower() not in champion_names:
                errors.append(f"{champion} ({email}) is not a known champion")
    if not fearless:
        return errors

    missing = sorted(email for email, champion in picks.items() if not champion)
    if missing:
        errors.append(f"every player needs a champion; missing: {', '.join(missing)}")

    banned = {c.lower() for c in used_champions}
    counts: Dict[str, int] = {}
    display: Dict[str, str] = {}
    for champion in picks.values():
        if champion:
            key = champion.lower()
            counts[key] = counts.get(key, 0) + 1
            display.setdefault(key, champion)
    for key in sorted(counts):
        if counts[key] > 1:
            errors.append(f"{display[key]} is picked more than once in this match")
        if key in banned:
            errors.append(f"{display[key]} was already played in this scrim")
    return errors


def canonical_champion(name: Optional[str], champion_names: Optional[Mapping[str, str]]) -> Optional[str]:
    if not name or champion_names is None:
        return name
    return champion_names.get(name.lower(), name)


class EndGameHandler(BaseActionHandler):
    """
    Record the result of an in-progress game.

    Appends a match record to the scrim's history (ARAM scrims keep a
    separate history), stores each player's champion, grows the
    fearless ban list and marks the scrim finished.
    """

    action = ScrimAction.END_GAME
    payload_model = EndGamePayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.IN_PROGRESS)
        payload: EndGamePayload = self.parse(ctx)

        if state.is_aram:
            picks = {p.email: None for p in state.blue_team + state.red_team}
        else:
            picks = collect_picks(state, payload)
            errors = champion_errors(
                picks, ctx.champion_names, state.fearless_used_champions, state.is_fearless
            )
            if errors:
                raise InvalidChampionSelectionError("Invalid champion selection", details=errors)
            picks = {email: canonical_champion(c, ctx.champion_names) for email, c in picks.items()}

        new_state = state.copy()
        for player in new_state.blue_team + new_state.red_team:
            player.champion = picks.get(player.email)

        history = new_state.history()
        record = MatchRecord(
            match_id=ctx.new_match_id or f"{state.scrim_id}-{len(history) + 1}",
            scrim_id=state.scrim_id,
            scrim_type=state.scrim_type,
            winning_team=payload.winning_team,
            blue_team=[_line(p, Team.BLUE) for p in new_state.blue_team],
            red_team=[_line(p, Team.RED) for p in new_state.red_team],
            match_date=state.start_time,
            finished_at=ctx.now,
        )
        history.append(record)

        if state.is_fearless:
            known = {c.lower() for c in new_state.fearless_used_champions}
            for champion in record.champions():
                if champion.lower() not in known:
                    new_state.fearless_used_champions.append(champion)
                    known.add(champion.lower())

        new_state.winning_team = payload.winning_team
        new_state.status = ScrimStatus.FINISHED
        logger.info(f"Game ended for {state.scrim_id}: {payload.winning_team.value} won "
                    f"(match {record.match_id})")
        return TransitionResult(new_state, match_record=record)


def _line(player, team: Team) -> MatchPlayer:
    return MatchPlayer(
        email=player.email,
        nickname=player.nickname,
        team=team,
        champion=player.champion,
        position=player.assigned_position,
    )


class ResetToTeamBuildingHandler(BaseActionHandler):
    """Return to team building, keeping rosters and history."""

    action = ScrimAction.RESET_TO_TEAM_BUILDING

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.IN_PROGRESS, ScrimStatus.FINISHED)
        new_state = state.copy()
        for player in new_state.blue_team + new_state.red_team:
            player.champion = None
        new_state.winning_team = None
        new_state.start_time = None
        new_state.status = ScrimStatus.TEAM_BUILDING
        return TransitionResult(new_state)


class ResetFearlessHandler(BaseActionHandler):
    """Clear the fearless ban list; nothing else changes."""

    action = ScrimAction.RESET_FEARLESS

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.IN_PROGRESS, ScrimStatus.FINISHED)
        if not state.is_fearless:
            raise InvalidStateForActionError(
                self.action.value, state.status.value,
                "Only fearless scrims keep a champion ban list",
            )
        new_state = state.copy()
        cleared = len(new_state.fearless_used_champions)
        new_state.fearless_used_champions = []
        logger.info(f"Cleared {cleared} fearless champions for {state.scrim_id}")
        return TransitionResult(new_state)
