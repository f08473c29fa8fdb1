# Area: Scrim
"""
scrim_manager._scrim.coordinator — Transaction Coordinator
==========================================================

Applies transition engine steps to the store atomically. Each call
reads the scrim inside a store transaction, lets the engine compute
the next state from that fresh read, and stages every resulting write
(scrim document, match record, player profiles) in the same commit.
A concurrent commit on the same scrim makes the store re-run the
whole read-compute-write step.

Everything the engine needs from outside the scrim (role, profile
nickname, champion catalog snapshot) is resolved once, before the
transaction starts.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from .champions import ChampionCatalog
from .database import DocumentStore, Transaction, new_document_id
from .enums import ScrimAction, ScrimStatus, ScrimType, Team
from .handler_base import ActionContext, TransitionResult
from .match_record import MatchRecord
from .repo_matches import MATCHES
from .repo_scrims import SCRIMS
from .repo_users import (
    USERS,
    UserRepository,
    apply_match_to_profile,
    move_champion_result,
    new_profile,
)
from .roles import RoleProvider, UserRoleProvider
from .state import ScrimState, check_invariants
from .state_machine import TransitionEngine, parse_action
from .._shared.logging_config import log_rejection
from ..errors import (
    InvalidChampionSelectionError,
    MalformedPayloadError,
    NotFoundError,
    PermissionDeniedError,
    ScrimError,
)

logger = logging.getLogger("scrim_manager.scrim.coordinator")

# Members may create scrims once they have played this many
MIN_GAMES_TO_CREATE = 15

PROFILE_ACTIONS = frozenset({ScrimAction.APPLY, ScrimAction.APPLY_WAITLIST})


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ActionResult:
    """
    Outcome of a coordinator call.

    Attributes:
        ok: True if the change was committed
        action: Action name as requested
        scrim_id: Target scrim
        state: Committed state on success (None if disbanded)
        code: Rejection code on failure
        message: Human-readable rejection reason
        details: Individual problems behind a rejection
        match_id: Id of the match record written by end_game
        deleted: True if the scrim was disbanded
    """

    ok: bool
    action: str
    scrim_id: str
    state: Optional[ScrimState] = None
    code: Optional[str] = None
    message: str = ""
    details: List[str] = field(default_factory=list)
    match_id: Optional[str] = None
    deleted: bool = False

    @classmethod
    def rejected(cls, error: ScrimError, action: str, scrim_id: str) -> "ActionResult":
        return cls(
            ok=False,
            action=action,
            scrim_id=scrim_id,
            code=error.code,
            message=error.message,
            details=list(error.details),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ok": self.ok, "action": self.action, "scrimId": self.scrim_id}
        if self.ok:
            data["scrim"] = self.state.to_document() if self.state else None
            if self.match_id:
                data["matchId"] = self.match_id
            if self.deleted:
                data["deleted"] = True
        else:
            data["error"] = {"code": self.code, "message": self.message, "details": self.details}
        return data


class TransactionCoordinator:
    """
    Single entry point for every scrim mutation.

    Args:
        store: Document store shared by all requests
        roles: Role provider (defaults to profile roles)
        catalog: Champion catalog; without one, names are not checked
        users: Profile repository (defaults to one over ``store``)
        engine: Transition engine
        clock: Returns the ISO timestamp for an attempt
        rng: Random source for ARAM shuffles
        max_attempts: Store retry budget override
    """

    def __init__(
        self,
        store: DocumentStore,
        roles: Optional[RoleProvider] = None,
        catalog: Optional[ChampionCatalog] = None,
        users: Optional[UserRepository] = None,
        engine: Optional[TransitionEngine] = None,
        clock: Optional[Callable[[], str]] = None,
        rng: Optional[random.Random] = None,
        max_attempts: Optional[int] = None,
    ):
        self.store = store
        self.users = users or UserRepository(store)
        self.roles = roles or UserRoleProvider(self.users)
        self.catalog = catalog
        self.engine = engine or TransitionEngine()
        self._clock = clock or utc_now
        self._rng = rng or random.Random()
        self.max_attempts = max_attempts

    def get_state(self, scrim_id: str) -> Optional[ScrimState]:
        doc = self.store.get(SCRIMS, scrim_id)
        return ScrimState.from_document(scrim_id, doc) if doc is not None else None

    def execute(
        self,
        scrim_id: str,
        action: Union[str, ScrimAction],
        actor_email: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ActionResult:
        """
        Apply one action to a scrim, all or nothing.

        Args:
            scrim_id: Target scrim
            action: Action name or enum member
            actor_email: Who is acting
            payload: Action payload

        Returns:
            ActionResult; on rejection nothing was written
        """
        payload = payload or {}
        action_name = action.value if isinstance(action, ScrimAction) else str(action)
        try:
            parsed = parse_action(action)
            action_name = parsed.value
            is_admin = self.roles.is_admin(actor_email) if actor_email else False
            nickname = self._profile_nickname(actor_email) if parsed in PROFILE_ACTIONS else None
            champion_names = None
            if parsed == ScrimAction.END_GAME and self.catalog is not None:
                champion_names = self.catalog.name_map()
                if champion_names is None:
                    logger.warning("Champion catalog unavailable; skipping name checks")

            def step(tx: Transaction) -> TransitionResult:
                state = self._read_scrim(tx, scrim_id)
                ctx = ActionContext(
                    actor_email=actor_email,
                    payload=payload,
                    now=self._clock(),
                    actor_is_admin=is_admin,
                    actor_nickname=nickname,
                    champion_names=champion_names,
                    rng=self._rng,
                    new_match_id=new_document_id(),
                )
                result = self.engine.apply(state, parsed, ctx)
                self._stage_writes(tx, scrim_id, result)
                return result

            result = self.store.transaction(step, max_attempts=self.max_attempts)
        except ScrimError as e:
            e.with_context(scrim_id=scrim_id, action=action_name,
                           actor_email=actor_email, payload=payload)
            log_rejection(e)
            return ActionResult.rejected(e, action_name, scrim_id)

        logger.info(f"{action_name} committed on {scrim_id} by {actor_email}")
        return ActionResult(
            ok=True,
            action=action_name,
            scrim_id=scrim_id,
            state=result.state,
            match_id=result.match_record.match_id if result.match_record else None,
            deleted=result.deleted,
        )

    def create_scrim(
        self,
        name: str,
        creator_email: str,
        scrim_type: Union[str, ScrimType] = ScrimType.NORMAL,
    ) -> ActionResult:
        """
        Create a new scrim in the recruiting status.

        Admins may always create; members need MIN_GAMES_TO_CREATE
        games played.

        Returns:
            ActionResult carrying the new scrim
        """
        scrim_id = new_document_id()
        try:
            name = (name or "").strip()
            if not name:
                raise MalformedPayloadError("A scrim name is required")
            if not creator_email:
                raise MalformedPayloadError("A creator email is required")
            if isinstance(scrim_type, str):
                try:
                    scrim_type = ScrimType.from_label(scrim_type)
                except ValueError:
                    raise MalformedPayloadError(f"Unknown scrim type: {scrim_type!r}") from None

            if not self.roles.is_admin(creator_email):
                profile = self.users.get_user(creator_email) or {}
                played = profile.get("totalScrimsPlayed", 0)
                if played < MIN_GAMES_TO_CREATE:
                    raise PermissionDeniedError(
                        f"Only admins or players with {MIN_GAMES_TO_CREATE}+ games may create "
                        f"a scrim ({played} played)"
                    )

            state = ScrimState(
                scrim_id=scrim_id,
                name=name,
                creator_email=creator_email,
                scrim_type=scrim_type,
                status=ScrimStatus.RECRUITING,
                created_at=self._clock(),
            )
            check_invariants(state)
            self.store.transaction(
                lambda tx: tx.set(SCRIMS, scrim_id, state.to_document()),
                max_attempts=self.max_attempts,
            )
        except ScrimError as e:
            e.with_context(scrim_id=scrim_id, action="create_scrim", actor_email=creator_email)
            log_rejection(e)
            return ActionResult.rejected(e, "create_scrim", scrim_id)

        logger.info(f"Scrim {scrim_id} ({scrim_type.value}) created by {creator_email}")
        return ActionResult(ok=True, action="create_scrim", scrim_id=scrim_id, state=state)

    def correct_match_champion(
        self,
        match_id: str,
        team: Union[str, Team],
        player_email: str,
        champion: str,
        requester_email: str,
    ) -> ActionResult:
        """
        Fix one player's champion in a stored match (admins only).

        Updates the matches document, the history entry in the scrim
        (if the scrim still exists) and the player's champion stats.
        In a fearless scrim the corrected champion joins the ban list.
        """
        action_name = "correct_match_champion"
        scrim_id = ""
        try:
            if not (champion or "").strip():
                raise MalformedPayloadError("A champion name is required")
            try:
                team = Team(team) if isinstance(team, str) else team
            except ValueError:
                raise MalformedPayloadError(f"Unknown team: {team!r}") from None
            if not self.roles.is_admin(requester_email):
                raise PermissionDeniedError("Only admins may correct match records")

            champion = champion.strip()
            names = self.catalog.name_map() if self.catalog is not None else None
            if names is not None:
                if champion.lower() not in names:
                    raise InvalidChampionSelectionError(f"Unknown champion: {champion}")
                champion = names[champion.lower()]

            def step(tx: Transaction) -> Optional[ScrimState]:
                nonlocal scrim_id
                doc = tx.get(MATCHES, match_id)
                if doc is None:
                    raise NotFoundError(f"Match {match_id} does not exist")
                record = MatchRecord.from_document(doc)
                scrim_id = record.scrim_id
                player = next(
                    (p for p in record.team_players(team) if p.email == player_email), None
                )
                if player is None:
                    raise NotFoundError(f"{player_email} did not play on {team.value} in {match_id}")
                old = player.champion
                player.champion = champion
                tx.set(MATCHES, match_id, record.to_document())

                profile = tx.get(USERS, player_email)
                if profile is not None:
                    won = record.did_win(player.email)
                    tx.set(USERS, player_email, move_champion_result(profile, old, champion, won))

                return self._correct_scrim_history(tx, record, team, player_email, champion)

            state = self.store.transaction(step, max_attempts=self.max_attempts)
        except ScrimError as e:
            e.with_context(scrim_id=scrim_id or None, action=action_name,
                           actor_email=requester_email,
                           payload={"matchId": match_id, "playerEmail": player_email,
                                    "champion": champion})
            log_rejection(e)
            return ActionResult.rejected(e, action_name, scrim_id)

        logger.info(f"Champion for {player_email} in {match_id} corrected to {champion}")
        return ActionResult(
            ok=True,
            action=action_name,
            scrim_id=scrim_id,
            state=state,
            match_id=match_id,
        )

    def _correct_scrim_history(
        self, tx: Transaction, record: MatchRecord, team: Team, player_email: str, champion: str
    ) -> Optional[ScrimState]:
        doc = tx.get(SCRIMS, record.scrim_id)
        if doc is None:
            return None
        state = ScrimState.from_document(record.scrim_id, doc)
        for entry in state.history():
            if entry.match_id != record.match_id:
                continue
            for line in entry.team_players(team):
                if line.email == player_email:
                    line.champion = champion
        if state.is_fearless:
            if champion.lower() not in {c.lower() for c in state.fearless_used_champions}:
                state.fearless_used_champions.append(champion)
        tx.set(SCRIMS, state.scrim_id, state.to_document())
        return state

    def _profile_nickname(self, email: str) -> Optional[str]:
        if not email:
            return None
        profile = self.users.get_user(email)
        return profile.get("nickname") if profile else None

    def _read_scrim(self, tx: Transaction, scrim_id: str) -> ScrimState:
        doc = tx.get(SCRIMS, scrim_id)
        if doc is None:
            raise NotFoundError(f"Scrim {scrim_id} does not exist")
        return ScrimState.from_document(scrim_id, doc)

    def _stage_writes(self, tx: Transaction, scrim_id: str, result: TransitionResult) -> None:
        record = result.match_record
        if record is not None:
            tx.set(MATCHES, record.match_id, record.to_document())
            for player in record.players:
                profile = tx.get(USERS, player.email) or new_profile(player.email, player.nickname)
                won = record.did_win(player.email)
                tx.set(USERS, player.email, apply_match_to_profile(profile, player, won))

        if result.deleted:
            tx.delete(SCRIMS, scrim_id)
        else:
            tx.set(SCRIMS, scrim_id, result.state.to_document())
