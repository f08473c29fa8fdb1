# Area: Scrim
"""
Scrim lifecycle core.

This package handles:
- Scrim state and roster invariants
- The transition engine and its action handlers
- The transactional document store and repositories
- Champion catalog, roles and stats
"""

from .enums import Position, Role, ScrimAction, ScrimStatus, ScrimType, Team
from .roster import Applicant
from .match_record import MatchPlayer, MatchRecord
from .state import ScrimState
from .handler_base import ActionContext, BaseActionHandler, TransitionResult
from .state_machine import TRANSITIONS, TransitionEngine
from .database import DocumentStore, init_database
from .coordinator import ActionResult, TransactionCoordinator
from .champions import ChampionCatalog, ChampionInfo, StaticChampionCatalog
from .roles import RoleProvider, StaticRoleProvider, UserRoleProvider
from .repo_scrims import ScrimRepository
from .repo_matches import MatchRepository
from .repo_users import UserRepository
from .stats import StatsProjector

__all__ = [
    "Position",
    "Role",
    "ScrimAction",
    "ScrimStatus",
    "ScrimType",
    "Team",
    "Applicant",
    "MatchPlayer",
    "MatchRecord",
    "ScrimState",
    "ActionContext",
    "BaseActionHandler",
    "TransitionResult",
    "TRANSITIONS",
    "TransitionEngine",
    "DocumentStore",
    "init_database",
    "ActionResult",
    "TransactionCoordinator",
    "ChampionCatalog",
    "ChampionInfo",
    "StaticChampionCatalog",
    "RoleProvider",
    "StaticRoleProvider",
    "UserRoleProvider",
    "ScrimRepository",
    "MatchRepository",
    "UserRepository",
    "StatsProjector",
]
