# Area: Scrim
"""
scrim_manager._scrim.stats — Stats Projector
============================================

Derives per-user records and the hall of fame by scanning finished
match records. Normal and Fearless games are counted together; ARAM
games are counted separately and carry no position or champion lines.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from .enums import Position, ScrimType
from .match_record import MatchRecord
from .repo_matches import MatchRepository
from .repo_users import UserRepository
from ..types import HallOfFame, RankedPlayer, UserStats

logger = logging.getLogger("scrim_manager.scrim.stats")

HALL_OF_FAME_SIZE = 3
# Fewest normal/fearless games for the win-rate board
MIN_GAMES_FOR_WIN_RATE = 5
UNKNOWN_NICKNAME = "Unknown"


def _record() -> Dict[str, int]:
    return {"wins": 0, "losses": 0}


def _tally(record: Dict[str, int], won: bool) -> None:
    record["wins" if won else "losses"] += 1


def win_rate(stats: UserStats) -> float:
    """Wins over normal/fearless games, 0.0 with no games."""
    if not stats["totalGames"]:
        return 0.0
    return round(stats["totalWins"] / stats["totalGames"], 4)


def empty_stats(email: str, nickname: str = "") -> UserStats:
    return {
        "email": email,
        "nickname": nickname,
        "totalGames": 0,
        "totalWins": 0,
        "totalLosses": 0,
        "aramGames": 0,
        "aramWins": 0,
        "aramLosses": 0,
        "positions": {p.value: _record() for p in Position},
        "championStats": {},
        "matchups": {},
    }


class StatsProjector:
    """
    Computes statistics from a list of match records.

    Attributes:
        matches: Finished match records
        nicknames: email -> current nickname
    """

    def __init__(self, matches: Iterable[MatchRecord], nicknames: Optional[Dict[str, str]] = None):
        self.matches = list(matches)
        self.nicknames = dict(nicknames or {})

    @classmethod
    def from_store(cls, matches: MatchRepository, users: UserRepository) -> "StatsProjector":
        return cls(matches.list_matches(), users.nickname_map())

    def user_stats(self, email: str) -> UserStats:
        """
        Aggregate one player's record.

        Args:
            email: Player identity

        Returns:
            UserStats with totals, positions, champions and matchups
        """
        stats = empty_stats(email, self.nicknames.get(email, ""))
        for match in self.matches:
            self._apply(stats, match)
        return stats

    def all_stats(self) -> List[UserStats]:
        """Stats for every player who appears in a match, in first-seen order."""
        by_email: Dict[str, UserStats] = {}
        for match in self.matches:
            for player in match.players:
                if player.email not in by_email:
                    nickname = self.nicknames.get(player.email) or player.nickname
                    by_email[player.email] = empty_stats(player.email, nickname)
                self._apply(by_email[player.email], match)
        return list(by_email.values())

    def hall_of_fame(self) -> HallOfFame:
        """
        Top players on each board: wins, games, win rate and position wins.

        The win-rate board only lists players with MIN_GAMES_FOR_WIN_RATE
        games; position boards only list players with a win there.
        """
        everyone = self.all_stats()

        def top(key: str) -> List[RankedPlayer]:
            ranked = sorted(everyone, key=lambda s: s[key], reverse=True)
            return [self._ranked(s, s[key]) for s in ranked[:HALL_OF_FAME_SIZE]]

        def top_win_rate() -> List[RankedPlayer]:
            eligible = [s for s in everyone if s["totalGames"] >= MIN_GAMES_FOR_WIN_RATE]
            eligible.sort(key=win_rate, reverse=True)
            return [self._ranked(s, win_rate(s)) for s in eligible[:HALL_OF_FAME_SIZE]]

        def top_position(position: Position) -> List[RankedPlayer]:
            winners = [s for s in everyone if s["positions"][position.value]["wins"] > 0]
            winners.sort(key=lambda s: s["positions"][position.value]["wins"], reverse=True)
            return [
                self._ranked(s, s["positions"][position.value]["wins"])
                for s in winners[:HALL_OF_FAME_SIZE]
            ]

        return {
            "mostWins": top("totalWins"),
            "mostGames": top("totalGames"),
            "bestWinRate": top_win_rate(),
            "positions": {p.value: top_position(p) for p in Position},
        }

    def _ranked(self, stats: UserStats, value: Union[int, float]) -> RankedPlayer:
        return {"email": stats["email"], "nickname": stats["nickname"], "value": value}

    def _apply(self, stats: UserStats, match: MatchRecord) -> None:
        player = match.find_player(stats["email"])
        if player is None:
            return
        won = player.team == match.winning_team

        if match.scrim_type == ScrimType.ARAM:
            stats["aramGames"] += 1
            stats["aramWins" if won else "aramLosses"] += 1
            return

        stats["totalGames"] += 1
        stats["totalWins" if won else "totalLosses"] += 1

        if player.champion:
            _tally(stats["championStats"].setdefault(player.champion, _record()), won)

        if player.position is None:
            return
        _tally(stats["positions"][player.position.value], won)

        opponent_side = match.red_team if player in match.blue_team else match.blue_team
        opponent = next((p for p in opponent_side if p.position == player.position), None)
        if opponent is None:
            return
        lines = stats["matchups"].setdefault(player.position.value, {})
        line = lines.setdefault(opponent.email, {
            "nickname": self.nicknames.get(opponent.email) or opponent.nickname or UNKNOWN_NICKNAME,
            "wins": 0,
            "losses": 0,
        })
        _tally(line, won)
