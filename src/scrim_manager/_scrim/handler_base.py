# Area: Scrim
"""
scrim_manager._scrim.handler_base — Base Action Handler
=======================================================

Abstract base class for all scrim action handlers, plus the context
and result objects that flow through the transition engine.

Handlers are pure: everything they need from the outside world (the
actor's role, the champion catalog snapshot, the clock, the random
source, the id of a new match record) arrives in the ActionContext.
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel

from .enums import ScrimAction, ScrimStatus
from .match_record import MatchRecord
from .payloads import EmptyPayload, parse_payload
from .state import ScrimState
from ..errors import InvalidStateForActionError

logger = logging.getLogger("scrim_manager.scrim.handler")


@dataclass
class ActionContext:
    """
    Everything a handler may consult besides the scrim itself.

    Attributes:
        actor_email: Who requested the action
        payload: Raw action payload
        now: ISO timestamp for this attempt
        actor_is_admin: Resolved by the role provider
        actor_nickname: Profile nickname, used when a payload omits one
        champion_names: Catalog snapshot, lower-cased name -> display
            name; None when the catalog is unavailable
        rng: Random source for ARAM team shuffles
        new_match_id: Id reserved for a match record appended by end_game
    """

    actor_email: str
    payload: Dict[str, Any]
    now: str
    actor_is_admin: bool = False
    actor_nickname: Optional[str] = None
    champion_names: Optional[Mapping[str, str]] = None
    rng: random.Random = field(default_factory=random.Random)
    new_match_id: str = ""


@dataclass
class TransitionResult:
    """
    Outcome of a successful transition.

    Attributes:
        state: The next scrim state, or None if the scrim was disbanded
        match_record: Record appended by end_game, to be written to the
            matches collection in the same transaction
        deleted: True if the scrim document must be deleted
    """

    state: Optional[ScrimState]
    match_record: Optional[MatchRecord] = None
    deleted: bool = False


class BaseActionHandler(ABC):
    """
    Abstract base class for action handlers.

    Subclasses set ``action`` and ``payload_model`` and implement
    handle(). The engine has already checked that the action is legal
    in the current status and that the actor holds the needed role.
    """

    action: ScrimAction
    payload_model: Type[BaseModel] = EmptyPayload

    @abstractmethod
    def handle(self, state: ScrimState, ctx: ActionContext) -> TransitionResult:
        """
        Compute the next state.

        Args:
            state: Freshly read scrim state (must not be modified)
            ctx: Request context

        Returns:
            TransitionResult with the next state

        Raises:
            ScrimError: If a precondition fails
        """
        pass

    def parse(self, ctx: ActionContext) -> Any:
        """Validate the raw payload against this handler's schema."""
        return parse_payload(self.payload_model, ctx.payload)

    def require_status(self, state: ScrimState, *statuses: ScrimStatus) -> None:
        if state.status not in statuses:
            raise InvalidStateForActionError(self.action.value, state.status.value)

    def log_handling(self, state: ScrimState, ctx: ActionContext) -> None:
        logger.debug(
            f"Handling {self.action.value} on {state.scrim_id} "
            f"({state.status.value}) by {ctx.actor_email}"
        )
