# Area: Scrim
"""
scrim_manager._scrim.handler_team_building — Team Building Handlers
===================================================================

Handles the privileged actions that move a scrim from recruiting into
team building and shape the two rosters: start_team_building,
update_teams, assign_slot, unassign_slot, start_game and
reset_to_recruiting.
"""

import logging
from typing import List

from .enums import Position, ScrimAction, ScrimStatus, Team
from .handler_base import ActionContext, BaseActionHandler, TransitionResult
from .payloads import AssignSlotPayload, MemberPayload, StartGamePayload, TeamsPayload
from .roster import MAX_PREFERENCES, Applicant
from .state import (
    MAX_APPLICANTS,
    TEAM_SIZE,
    ScrimState,
    assign_to_slot,
    merge_into_pool,
    overwrite_teams,
    unassign,
)
from ..errors import InvalidStateForActionError

logger = logging.getLogger("scrim_manager.scrim.handler.team_building")


def seed_by_preference(state: ScrimState) -> ScrimState:
    """
    Fill slots from registered position preferences.

    Rank-1 preferences are honoured first (applicants in registration
    order, blue slot before red), then rank 2, then rank 3. Players who
    accept any position then fill the remaining empty slots. Anyone
    still unplaced stays in the pool for manual assignment.
    """
    new_state = state.copy()
    unplaced: List[Applicant] = [a.cleared() for a in new_state.applicants]
    new_state.applicants = []

    def place(player: Applicant, team: Team, position: Position) -> None:
        player.assigned_position = position
        new_state.team(team).append(player)
        unplaced.remove(player)

    for rank in range(1, MAX_PREFERENCES + 1):
        for player in list(unplaced):
            if player.accepts_any_position or len(player.positions) < rank:
                continue
            position = Position(player.positions[rank - 1])
            for team in Team:
                if new_state.slot_occupant(team, position) is None:
                    place(player, team, position)
                    break

    for player in [p for p in unplaced if p.accepts_any_position]:
        open_slot = next(
            ((team, position) for team in Team for position in Position
             if new_state.slot_occupant(team, position) is None),
            None,
        )
        if open_slot is None:
            break
        place(player, *open_slot)

    order = {p: i for i, p in enumerate(Position)}
    for team in Team:
        new_state.team(team).sort(key=lambda a: order[a.assigned_position])
    new_state.applicants = unplaced
    return new_state


def shuffle_aram_teams(state: ScrimState, ctx: ActionContext) -> ScrimState:
    """Split the pool uniformly at random into two teams of 5."""
    new_state = state.copy()
    players = [a.cleared() for a in new_state.applicants]
    ctx.rng.shuffle(players)
    new_state.blue_team = players[:TEAM_SIZE]
    new_state.red_team = players[TEAM_SIZE:]
    new_state.applicants = []
    return new_state


class StartTeamBuildingHandler(BaseActionHandler):
    """Move a full recruiting scrim into team building."""

    action = ScrimAction.START_TEAM_BUILDING

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.RECRUITING)
        if len(state.applicants) != MAX_APPLICANTS:
            raise InvalidStateForActionError(
                self.action.value, state.status.value,
                f"{MAX_APPLICANTS} applicants are needed to build teams "
                f"(have {len(state.applicants)})",
            )
        if state.is_aram:
            new_state = shuffle_aram_teams(state, ctx)
        else:
            new_state = seed_by_preference(state)
        new_state.status = ScrimStatus.TEAM_BUILDING
        logger.info(f"Team building started for {state.scrim_id}; "
                    f"{len(new_state.applicants)} left unassigned")
        return TransitionResult(new_state)


class UpdateTeamsHandler(BaseActionHandler):
    """Overwrite both rosters; players left out return to the pool."""

    action = ScrimAction.UPDATE_TEAMS
    payload_model = TeamsPayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.TEAM_BUILDING)
        payload: TeamsPayload = self.parse(ctx)
        return TransitionResult(overwrite_teams(state, payload.assignments()))


class AssignSlotHandler(BaseActionHandler):
    """Drop one player into a slot, bumping any occupant to the pool."""

    action = ScrimAction.ASSIGN_SLOT
    payload_model = AssignSlotPayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.TEAM_BUILDING)
        payload: AssignSlotPayload = self.parse(ctx)
        return TransitionResult(
            assign_to_slot(state, payload.team, payload.position, payload.email)
        )


class UnassignSlotHandler(BaseActionHandler):
    action = ScrimAction.UNASSIGN_SLOT
    payload_model = MemberPayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.TEAM_BUILDING)
        payload: MemberPayload = self.parse(ctx)
        return TransitionResult(unassign(state, payload.email))


class StartGameHandler(BaseActionHandler):
    """
    Freeze both rosters and start the game.

    Rosters sent with the request are applied first. Both teams must
    then hold exactly 5 players; the pool and waitlist are cleared.
    """

    action = ScrimAction.START_GAME
    payload_model = StartGamePayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.TEAM_BUILDING)
        payload: StartGamePayload = self.parse(ctx)
        if payload.teams is not None:
            new_state = overwrite_teams(state, payload.teams.assignments())
        else:
            new_state = state.copy()

        sizes = {team: len(new_state.team(team)) for team in Team}
        if any(size != TEAM_SIZE for size in sizes.values()):
            raise InvalidStateForActionError(
                self.action.value, state.status.value,
                f"Both teams need {TEAM_SIZE} players "
                f"(blue {sizes[Team.BLUE]}, red {sizes[Team.RED]})",
            )

        for player in new_state.blue_team + new_state.red_team:
            player.champion = None
        new_state.status = ScrimStatus.IN_PROGRESS
        new_state.start_time = ctx.now
        new_state.winning_team = None
        new_state.applicants = []
        new_state.waitlist = []
        logger.info(f"Game started for {state.scrim_id} at {ctx.now}")
        return TransitionResult(new_state)


class ResetToRecruitingHandler(BaseActionHandler):
    """
    Send everyone back to the applicant pool.

    Pool and both teams are merged (de-duplicated by email); teams,
    result and waitlist are cleared.
    """

    action = ScrimAction.RESET_TO_RECRUITING

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.TEAM_BUILDING, ScrimStatus.FINISHED)
        new_state = state.copy()
        new_state.applicants = merge_into_pool(new_state)
        new_state.blue_team = []
        new_state.red_team = []
        new_state.waitlist = []
        new_state.winning_team = None
        new_state.start_time = None
        new_state.status = ScrimStatus.RECRUITING
        logger.info(f"{state.scrim_id} reset to recruiting with "
                    f"{len(new_state.applicants)} applicants")
        return TransitionResult(new_state)
