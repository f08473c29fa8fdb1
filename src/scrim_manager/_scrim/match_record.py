# Area: Scrim
"""
scrim_manager._scrim.match_record — Match Record Dataclasses
============================================================

Defines the MatchRecord and MatchPlayer dataclasses appended to a
scrim's history when a game ends. The same record is written to the
``matches`` collection, which the stats projector scans.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import Position, ScrimType, Team


@dataclass
class MatchPlayer:
    """
    One player's line in a finished match.

    Attributes:
        email: Player identity
        nickname: Display name at the time of the match
        team: Side the player was on
        champion: Champion played, or None if not entered
        position: Slot played, or None for ARAM
    """

    email: str
    nickname: str
    team: Team
    champion: Optional[str] = None
    position: Optional[Position] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "nickname": self.nickname,
            "team": self.team.value,
            "champion": self.champion,
            "position": self.position.value if self.position else None,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any], team: Optional[Team] = None) -> "MatchPlayer":
        position = doc.get("position") or doc.get("assignedPosition")
        return cls(
            email=doc["email"],
            nickname=doc.get("nickname") or "",
            team=Team(doc["team"]) if doc.get("team") else team,
            champion=doc.get("champion") or None,
            position=Position(position) if position else None,
        )


@dataclass
class MatchRecord:
    """
    Snapshot of a finished match.

    Attributes:
        match_id: Generated identifier (also the matches collection key)
        scrim_id: Scrim the match was played in
        scrim_type: Mode of the scrim at the time of the match
        winning_team: Side that won
        blue_team: Blue side lines, in slot order
        red_team: Red side lines, in slot order
        match_date: ISO timestamp of the game start, if stamped
        finished_at: ISO timestamp of the end_game commit
    """

    match_id: str
    scrim_id: str
    scrim_type: ScrimType
    winning_team: Team
    blue_team: List[MatchPlayer] = field(default_factory=list)
    red_team: List[MatchPlayer] = field(default_factory=list)
    match_date: Optional[str] = None
    finished_at: Optional[str] = None

    @property
    def players(self) -> List[MatchPlayer]:
        return self.blue_team + self.red_team

    def team_players(self, team: Team) -> List[MatchPlayer]:
        return self.blue_team if team == Team.BLUE else self.red_team

    def find_player(self, email: str) -> Optional[MatchPlayer]:
        for player in self.players:
            if player.email == email:
                return player
        return None

    def did_win(self, email: str) -> Optional[bool]:
        """Return whether a player won, or None if they did not play."""
        player = self.find_player(email)
        if player is None:
            return None
        return player.team == self.winning_team

    def champions(self) -> List[str]:
        return [p.champion for p in self.players if p.champion]

    def to_document(self) -> Dict[str, Any]:
        return {
            "matchId": self.match_id,
            "scrimId": self.scrim_id,
            "scrimType": self.scrim_type.value,
            "winningTeam": self.winning_team.value,
            "blueTeam": [p.to_document() for p in self.blue_team],
            "redTeam": [p.to_document() for p in self.red_team],
            "matchDate": self.match_date,
            "finishedAt": self.finished_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "MatchRecord":
        return cls(
            match_id=doc["matchId"],
            scrim_id=doc.get("scrimId", ""),
            scrim_type=ScrimType.from_label(doc.get("scrimType", ScrimType.NORMAL.value)),
            winning_team=Team(doc["winningTeam"]),
            blue_team=[MatchPlayer.from_document(p, Team.BLUE) for p in doc.get("blueTeam", [])],
            red_team=[MatchPlayer.from_document(p, Team.RED) for p in doc.get("redTeam", [])],
            match_date=doc.get("matchDate"),
            finished_at=doc.get("finishedAt"),
        )
