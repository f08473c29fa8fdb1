"""
scrim_manager — Scrim Lifecycle Manager
=======================================

Coordinates 5v5 practice matches ("scrims"): players apply, get
assigned to two teams, play, and results are recorded as stats.

Quick Start:
    from scrim_manager import DocumentStore, TransactionCoordinator, init_database
    init_database("scrims.db")
    coordinator = TransactionCoordinator(DocumentStore("scrims.db"))
    created = coordinator.create_scrim("Friday scrim", "admin@example.com")
    coordinator.execute(created.scrim_id, "apply", "player@example.com",
                        {"tier": "Gold", "positions": ["MID", "TOP"]})

Every mutation goes through TransactionCoordinator.execute(), which
returns an ActionResult: the committed state, or a rejection code and
reason with nothing written.

Type Definitions
----------------
Stored document and stats shapes are available for import:

    from scrim_manager import ScrimDocument, MatchDocument, UserStats
"""

from ._scrim import (
    ActionResult,
    Applicant,
    ChampionCatalog,
    ChampionInfo,
    DocumentStore,
    MatchPlayer,
    MatchRecord,
    MatchRepository,
    Position,
    Role,
    ScrimAction,
    ScrimRepository,
    ScrimState,
    ScrimStatus,
    ScrimType,
    StaticChampionCatalog,
    StaticRoleProvider,
    StatsProjector,
    Team,
    TransactionCoordinator,
    TransitionEngine,
    UserRepository,
    UserRoleProvider,
    init_database,
)
from ._shared.logging_config import setup_logging
from .errors import (
    ScrimError,
    CapacityExceededError,
    DuplicateRegistrationError,
    PermissionDeniedError,
    InvalidStateForActionError,
    InvalidChampionSelectionError,
    NotFoundError,
    MalformedPayloadError,
    InvariantViolationError,
    TransientStoreError,
)
from .types import (
    ApplicantDocument,
    ScrimDocument,
    MatchPlayerDocument,
    MatchDocument,
    UserStats,
    RankedPlayer,
    HallOfFame,
)

__all__ = [
    # Main classes
    "TransactionCoordinator",
    "ActionResult",
    "TransitionEngine",
    "DocumentStore",
    "init_database",
    "setup_logging",
    # Model
    "ScrimState",
    "Applicant",
    "MatchRecord",
    "MatchPlayer",
    "ScrimStatus",
    "ScrimType",
    "ScrimAction",
    "Team",
    "Position",
    "Role",
    # Collaborators
    "ChampionCatalog",
    "ChampionInfo",
    "StaticChampionCatalog",
    "UserRoleProvider",
    "StaticRoleProvider",
    "ScrimRepository",
    "MatchRepository",
    "UserRepository",
    "StatsProjector",
    # Errors
    "ScrimError",
    "CapacityExceededError",
    "DuplicateRegistrationError",
    "PermissionDeniedError",
    "InvalidStateForActionError",
    "InvalidChampionSelectionError",
    "NotFoundError",
    "MalformedPayloadError",
    "InvariantViolationError",
    "TransientStoreError",
    # Document types
    "ApplicantDocument",
    "ScrimDocument",
    "MatchPlayerDocument",
    "MatchDocument",
    "UserStats",
    "RankedPlayer",
    "HallOfFame",
]
__version__ = "1.0.0"
