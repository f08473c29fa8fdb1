# Area: Scrim
"""
scrim_manager._scrim.handler_admin — Administrative Handlers
============================================================

Handles the privileged housekeeping actions: remove_member, rename
and disband.
"""

import logging

from .enums import ScrimAction, ScrimStatus
from .handler_base import ActionContext, BaseActionHandler, TransitionResult
from .payloads import MemberPayload, RenamePayload
from .state import ScrimState, remove_member

logger = logging.getLogger("scrim_manager.scrim.handler.admin")


class RemoveMemberHandler(BaseActionHandler):
    """Strike a member from any bucket, promoting from the waitlist if needed."""

    action = ScrimAction.REMOVE_MEMBER
    payload_model = MemberPayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(
            state, ScrimStatus.RECRUITING, ScrimStatus.TEAM_BUILDING, ScrimStatus.IN_PROGRESS
        )
        payload: MemberPayload = self.parse(ctx)
        new_state = remove_member(state, payload.email)
        logger.info(f"{ctx.actor_email} removed {payload.email} from {state.scrim_id}")
        return TransitionResult(new_state)


class RenameHandler(BaseActionHandler):
    action = ScrimAction.RENAME
    payload_model = RenamePayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        payload: RenamePayload = self.parse(ctx)
        new_state = state.copy()
        new_state.name = payload.name
        return TransitionResult(new_state)


class DisbandHandler(BaseActionHandler):
    """Delete the scrim document. Match records already written are kept."""

    action = ScrimAction.DISBAND

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        logger.warning(f"{ctx.actor_email} disbanded {state.scrim_id} ({state.name})")
        return TransitionResult(None, deleted=True)
