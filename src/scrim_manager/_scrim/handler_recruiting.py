# Area: Scrim
"""
scrim_manager._scrim.handler_recruiting — Recruiting Handlers
=============================================================

Handles the actions open to every player while a scrim is recruiting:
apply, apply_waitlist, leave and leave_waitlist.
"""

import logging

from .enums import ScrimAction, ScrimStatus
from .handler_base import ActionContext, BaseActionHandler, TransitionResult
from .payloads import ApplyPayload
from .roster import Applicant, validate_registration
from .state import ScrimState, add_applicant, add_to_waitlist, leave, leave_waitlist

logger = logging.getLogger("scrim_manager.scrim.handler.recruiting")


def build_applicant(state: ScrimState, ctx: ActionContext, payload: ApplyPayload) -> Applicant:
    """
    Build the actor's registration record.

    The applicant is always the actor. ARAM scrims drop positions,
    since teams are shuffled rather than slotted.
    """
    applicant = Applicant(
        email=ctx.actor_email,
        nickname=payload.nickname or ctx.actor_nickname or ctx.actor_email,
        tier=payload.tier,
        positions=[] if state.is_aram else list(payload.positions),
    )
    validate_registration(applicant, state.scrim_type)
    return applicant


class ApplyHandler(BaseActionHandler):
    """Add the actor to the applicant pool (max 10)."""

    action = ScrimAction.APPLY
    payload_model = ApplyPayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.RECRUITING)
        applicant = build_applicant(state, ctx, self.parse(ctx))
        new_state = add_applicant(state, applicant)
        logger.info(f"{applicant.email} applied to {state.scrim_id} "
                    f"({len(new_state.applicants)}/10)")
        return TransitionResult(new_state)


class ApplyWaitlistHandler(BaseActionHandler):
    """Add the actor to the back of the waitlist (max 10)."""

    action = ScrimAction.APPLY_WAITLIST
    payload_model = ApplyPayload

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.RECRUITING)
        applicant = build_applicant(state, ctx, self.parse(ctx))
        new_state = add_to_waitlist(state, applicant)
        logger.info(f"{applicant.email} joined the waitlist of {state.scrim_id} "
                    f"(#{len(new_state.waitlist)})")
        return TransitionResult(new_state)


class LeaveHandler(BaseActionHandler):
    """Remove the actor from the applicants, promoting one waitlisted player."""

    action = ScrimAction.LEAVE

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.RECRUITING)
        new_state = leave(state, ctx.actor_email)
        promoted = [a.email for a in new_state.applicants
                    if a.email in {w.email for w in state.waitlist}]
        if promoted:
            logger.info(f"{ctx.actor_email} left {state.scrim_id}; promoted {promoted[0]}")
        else:
            logger.info(f"{ctx.actor_email} left {state.scrim_id}")
        return TransitionResult(new_state)


class LeaveWaitlistHandler(BaseActionHandler):
    action = ScrimAction.LEAVE_WAITLIST

    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        self.require_status(state, ScrimStatus.RECRUITING)
        return TransitionResult(leave_waitlist(state, ctx.actor_email))
