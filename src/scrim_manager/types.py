"""
scrim_manager.types — TypedDict schemas for stored documents and stats
======================================================================

This module documents the exact structure of the documents kept in
the store and of the dictionaries returned by the stats projector.

All types are exported from the main package:

    from scrim_manager import ScrimDocument, UserStats, ...

Use __annotations__ to inspect fields:

    >>> MatchPlayerDocument.__annotations__
    {'email': str, 'nickname': str, 'team': str, 'champion': Optional[str], 'position': Optional[str]}
"""

from typing import Dict, List, Optional, TypedDict, Union


# ============================================
# scrims collection
# ============================================

class ApplicantDocument(TypedDict):
    """One player in the applicant pool, waitlist or a team.

    Fields
    ------
    positions : List[str]
        Ranked preferences, e.g. ["MID", "TOP"], or ["ALL"]. Empty for ARAM.
    assignedPosition : Optional[str]
        Slot granted on a team, e.g. "MID". None in the pool and for ARAM.
    """
    email: str
    nickname: str
    tier: str
    positions: List[str]
    champion: Optional[str]
    assignedPosition: Optional[str]


class ScrimDocument(TypedDict):
    """A scrim, keyed by its id in the scrims collection.

    Fields
    ------
    status : str
        "recruiting", "team_building", "in_progress" or "finished".
    scrimType : str
        "normal", "fearless" or "aram".
    winningTeam : Optional[str]
        "blue" or "red" while finished, otherwise None.
    """
    scrimName: str
    creatorEmail: str
    scrimType: str
    status: str
    applicants: List[ApplicantDocument]
    waitlist: List[ApplicantDocument]
    blueTeam: List[ApplicantDocument]
    redTeam: List[ApplicantDocument]
    fearlessUsedChampions: List[str]
    matchHistory: List["MatchDocument"]
    aramMatchHistory: List["MatchDocument"]
    winningTeam: Optional[str]
    startTime: Optional[str]
    createdAt: Optional[str]


# ============================================
# matches collection
# ============================================

class MatchPlayerDocument(TypedDict):
    """One player's line in a finished match."""
    email: str
    nickname: str
    team: str                   # "blue" | "red"
    champion: Optional[str]     # None when not entered
    position: Optional[str]     # None for ARAM


class MatchDocument(TypedDict):
    """A finished match, keyed by matchId in the matches collection."""
    matchId: str
    scrimId: str
    scrimType: str
    winningTeam: str
    blueTeam: List[MatchPlayerDocument]
    redTeam: List[MatchPlayerDocument]
    matchDate: Optional[str]    # game start
    finishedAt: Optional[str]   # end_game commit


# ============================================
# Stats
# ============================================

class WinLoss(TypedDict):
    wins: int
    losses: int


class MatchupLine(TypedDict):
    """Record against one opponent who played the same position."""
    nickname: str
    wins: int
    losses: int


class UserStats(TypedDict):
    """Returned by StatsProjector.user_stats().

    Fields
    ------
    totalGames, totalWins, totalLosses : int
        Normal and Fearless games combined.
    aramGames, aramWins, aramLosses : int
        ARAM games only.
    positions : Dict[str, WinLoss]
        Keyed by position name, all five always present.
    championStats : Dict[str, WinLoss]
        Keyed by champion; games without a pick are not counted here.
    matchups : Dict[str, Dict[str, MatchupLine]]
        position -> opponent email -> record.
    """
    email: str
    nickname: str
    totalGames: int
    totalWins: int
    totalLosses: int
    aramGames: int
    aramWins: int
    aramLosses: int
    positions: Dict[str, WinLoss]
    championStats: Dict[str, WinLoss]
    matchups: Dict[str, Dict[str, MatchupLine]]


class RankedPlayer(TypedDict):
    email: str
    nickname: str
    value: Union[int, float]    # wins, games or win rate (0-1), per board


class HallOfFame(TypedDict):
    """Returned by StatsProjector.hall_of_fame()."""
    mostWins: List[RankedPlayer]
    mostGames: List[RankedPlayer]
    bestWinRate: List[RankedPlayer]     # players with 5+ games only
    positions: Dict[str, List[RankedPlayer]]
