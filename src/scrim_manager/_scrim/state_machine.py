# Area: Scrim
"""
scrim_manager._scrim.state_machine — Scrim Transition Engine
============================================================

Implements the state machine that drives a scrim through recruiting,
team building, in progress and finished. Given a freshly read scrim
state, an action and the request context, the engine either returns
the next state or raises a typed ScrimError. It performs no I/O.
"""

import logging
from typing import Dict, List, Type, Union

from .enums import PRIVILEGED_ACTIONS, ScrimAction, ScrimStatus
from .handler_admin import DisbandHandler, RemoveMemberHandler, RenameHandler
from .handler_base import ActionContext, BaseActionHandler, TransitionResult
from .handler_game import EndGameHandler, ResetFearlessHandler, ResetToTeamBuildingHandler
from .handler_recruiting import (
    ApplyHandler,
    ApplyWaitlistHandler,
    LeaveHandler,
    LeaveWaitlistHandler,
)
from .handler_team_building import (
    AssignSlotHandler,
    ResetToRecruitingHandler,
    StartGameHandler,
    StartTeamBuildingHandler,
    UnassignSlotHandler,
    UpdateTeamsHandler,
)
from .state import ScrimState, check_invariants
from ..errors import (
    InvalidStateForActionError,
    InvariantViolationError,
    MalformedPayloadError,
    PermissionDeniedError,
)

logger = logging.getLogger("scrim_manager.scrim.state_machine")

_ANY_STATUS = {
    ScrimAction.RENAME: RenameHandler,
    ScrimAction.DISBAND: DisbandHandler,
}

# Legal actions: {status: {action: handler_class}}
TRANSITIONS: Dict[ScrimStatus, Dict[ScrimAction, Type[BaseActionHandler]]] = {
    ScrimStatus.RECRUITING: {
        ScrimAction.APPLY: ApplyHandler,
        ScrimAction.APPLY_WAITLIST: ApplyWaitlistHandler,
        ScrimAction.LEAVE: LeaveHandler,
        ScrimAction.LEAVE_WAITLIST: LeaveWaitlistHandler,
        ScrimAction.START_TEAM_BUILDING: StartTeamBuildingHandler,
        ScrimAction.REMOVE_MEMBER: RemoveMemberHandler,
        **_ANY_STATUS,
    },
    ScrimStatus.TEAM_BUILDING: {
        ScrimAction.UPDATE_TEAMS: UpdateTeamsHandler,
        ScrimAction.ASSIGN_SLOT: AssignSlotHandler,
        ScrimAction.UNASSIGN_SLOT: UnassignSlotHandler,
        ScrimAction.START_GAME: StartGameHandler,
        ScrimAction.RESET_TO_RECRUITING: ResetToRecruitingHandler,
        ScrimAction.REMOVE_MEMBER: RemoveMemberHandler,
        **_ANY_STATUS,
    },
    ScrimStatus.IN_PROGRESS: {
        ScrimAction.END_GAME: EndGameHandler,
        ScrimAction.RESET_TO_TEAM_BUILDING: ResetToTeamBuildingHandler,
        ScrimAction.RESET_FEARLESS: ResetFearlessHandler,
        ScrimAction.REMOVE_MEMBER: RemoveMemberHandler,
        **_ANY_STATUS,
    },
    ScrimStatus.FINISHED: {
        ScrimAction.RESET_TO_TEAM_BUILDING: ResetToTeamBuildingHandler,
        ScrimAction.RESET_TO_RECRUITING: ResetToRecruitingHandler,
        ScrimAction.RESET_FEARLESS: ResetFearlessHandler,
        **_ANY_STATUS,
    },
}


def parse_action(action: Union[str, ScrimAction]) -> ScrimAction:
    """
    Raises:
        MalformedPayloadError: If the action name is unknown
    """
    if isinstance(action, ScrimAction):
        return action
    try:
        return ScrimAction.parse(action)
    except ValueError:
        raise MalformedPayloadError(f"Unknown action: {action!r}") from None


class TransitionEngine:
    """
    Pure transition function for scrim states.

    Checks, in order: the actor is known, the actor may perform the
    action, the action is legal in the current status. Then the
    handler computes the next state, which must satisfy every roster
    invariant before it is returned.
    """

    def __init__(self):
        self._handlers: Dict[ScrimStatus, Dict[ScrimAction, BaseActionHandler]] = {}
        instances: Dict[Type[BaseActionHandler], BaseActionHandler] = {}
        for status, actions in TRANSITIONS.items():
            self._handlers[status] = {}
            for action, handler_cls in actions.items():
                if handler_cls not in instances:
                    instances[handler_cls] = handler_cls()
                self._handlers[status][action] = instances[handler_cls]

    def allowed_actions(self, status: ScrimStatus) -> List[ScrimAction]:
        return list(self._handlers.get(status, {}))

    def can_transition(self, status: ScrimStatus, action: ScrimAction) -> bool:
        """
        Check if an action is legal in a status.

        Args:
            status: Current scrim status
            action: Requested action

        Returns:
            True if a handler is registered, False otherwise
        """
        return action in self._handlers.get(status, {})

    def is_privileged(self, state: ScrimState, ctx: ActionContext) -> bool:
        return ctx.actor_is_admin or ctx.actor_email == state.creator_email

    def apply(
        self, state: ScrimState, action: Union[str, ScrimAction], ctx: ActionContext
    ) -> TransitionResult:
        """
        Compute the result of an action.

        Args:
            state: Freshly read scrim state (not modified)
            action: Action name or enum member
            ctx: Request context

        Returns:
            TransitionResult with the next state

        Raises:
            ScrimError: If the action is rejected; nothing is changed
        """
        action = parse_action(action)
        if not ctx.actor_email:
            raise MalformedPayloadError("An actor email is required")

        if action in PRIVILEGED_ACTIONS and not self.is_privileged(state, ctx):
            raise PermissionDeniedError(
                f"Only an admin or the scrim creator may {action.value.replace('_', ' ')}"
            )

        if not self.can_transition(state.status, action):
            raise InvalidStateForActionError(action.value, state.status.value)

        handler = self._handlers[state.status][action]
        handler.log_handling(state, ctx)
        result = handler.handle(state, ctx)

        if result.state is not None:
            self._verify(state, result.state, action)
        return result

    def _verify(self, before: ScrimState, after: ScrimState, action: ScrimAction) -> None:
        check_invariants(after)
        errors = []
        if after.creator_email != before.creator_email:
            errors.append("creator changed")
        if after.scrim_type != before.scrim_type:
            errors.append("scrim type changed")
        if action != ScrimAction.RESET_FEARLESS:
            kept = {c.lower() for c in after.fearless_used_champions}
            lost = [c for c in before.fearless_used_champions if c.lower() not in kept]
            if lost:
                errors.append(f"fearless champions dropped: {', '.join(lost)}")
        if len(after.history()) < len(before.history()):
            errors.append("match history shrank")
        if errors:
            logger.error(f"{action.value} on {before.scrim_id} broke invariants: {errors}")
            raise InvariantViolationError("Scrim roster is inconsistent", details=errors)
