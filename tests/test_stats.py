# Area: Scrim Tests
"""Tests for the stats projector."""

from scrim_manager._scrim.enums import Position, ScrimType, Team
from scrim_manager._scrim.match_record import MatchPlayer, MatchRecord
from scrim_manager._scrim.stats import StatsProjector, empty_stats, win_rate
from scrim_factory import POSITIONS, email


def match(match_id, winner=Team.BLUE, scrim_type=ScrimType.NORMAL, champions=None, order=None):
    """Ten-player match; ``order`` lists player numbers blue TOP..SUP then red TOP..SUP."""
    order = order or list(range(10))
    champions = champions or [None] * 10
    aram = scrim_type == ScrimType.ARAM

    def line(slot):
        i = order[slot]
        return MatchPlayer(
            email=email(i),
            nickname=f"Player{i}",
            team=Team.BLUE if slot < 5 else Team.RED,
            champion=champions[slot],
            position=None if aram else Position(POSITIONS[slot % 5]),
        )

    return MatchRecord(
        match_id=match_id,
        scrim_id="scrim-1",
        scrim_type=scrim_type,
        winning_team=winner,
        blue_team=[line(s) for s in range(5)],
        red_team=[line(s) for s in range(5, 10)],
    )


class TestUserStats:
    """Tests for StatsProjector.user_stats."""

    def test_unknown_player_is_empty(self):
        """Test that a player with no matches has empty stats."""
        stats = StatsProjector([match("m1")]).user_stats("nobody@example.com")
        assert stats == empty_stats("nobody@example.com")

    def test_totals_and_positions(self):
        """Test that totals and position records add up."""
        projector = StatsProjector([match("m1"), match("m2", Team.RED)], {email(0): "Zero"})
        stats = projector.user_stats(email(0))
        assert stats["nickname"] == "Zero"
        assert (stats["totalGames"], stats["totalWins"], stats["totalLosses"]) == (2, 1, 1)
        assert stats["positions"]["TOP"] == {"wins": 1, "losses": 1}
        assert stats["positions"]["MID"] == {"wins": 0, "losses": 0}

    def test_fearless_counts_with_normal(self):
        """Test that fearless games count toward normal totals."""
        projector = StatsProjector([match("m1"), match("m2", scrim_type=ScrimType.FEARLESS)])
        assert projector.user_stats(email(0))["totalWins"] == 2

    def test_aram_counted_separately(self):
        """Test that ARAM games only count in ARAM totals."""
        projector = StatsProjector([match("m1", scrim_type=ScrimType.ARAM)])
        stats = projector.user_stats(email(0))
        assert (stats["aramGames"], stats["aramWins"], stats["aramLosses"]) == (1, 1, 0)
        assert stats["totalGames"] == 0
        assert stats["positions"]["TOP"] == {"wins": 0, "losses": 0}
        assert stats["matchups"] == {}

    def test_champion_stats_skip_missing_picks(self):
        """Test that games without a pick add no champion line."""
        champions = ["Garen"] + [None] * 9
        projector = StatsProjector([match("m1", champions=champions), match("m2")])
        assert projector.user_stats(email(0))["championStats"] == {"Garen": {"wins": 1, "losses": 0}}

    def test_matchups_against_same_position(self):
        """Test that matchups record the opposing player in the same position."""
        projector = StatsProjector([match("m1"), match("m2", Team.RED)])
        matchups = projector.user_stats(email(0))["matchups"]
        assert matchups == {"TOP": {email(5): {"nickname": "Player5", "wins": 1, "losses": 1}}}


class TestHallOfFame:
    """Tests for StatsProjector.hall_of_fame."""

    def test_boards(self):
        """Test the wins, games and position boards."""
        swapped = [5, 1, 2, 3, 4, 0, 6, 7, 8, 9]
        matches = [match("m1"), match("m2"), match("m3", order=swapped)]
        hof = StatsProjector(matches).hall_of_fame()

        assert [p["value"] for p in hof["mostWins"]] == [3, 3, 3]
        assert {p["email"] for p in hof["mostWins"]} <= {email(i) for i in range(1, 6)}
        assert [p["value"] for p in hof["mostGames"]] == [3, 3, 3]

        top = hof["positions"]["TOP"]
        assert [(p["email"], p["value"]) for p in top] == [(email(0), 2), (email(5), 1)]

    def test_position_board_needs_a_win(self):
        """Test that position boards only list players with a win there."""
        hof = StatsProjector([match("m1")]).hall_of_fame()
        assert [p["email"] for p in hof["positions"]["SUP"]] == [email(4)]

    def test_empty(self):
        hof = StatsProjector([]).hall_of_fame()
        assert hof["mostWins"] == []
        assert hof["positions"]["MID"] == []

    def test_win_rate_board_needs_five_games(self):
        """Test that the win-rate board ranks by rate among players with five or more games."""
        swapped = [5, 1, 2, 3, 4, 0, 6, 7, 8, 9]
        five = [match(f"m{i}") for i in range(4)] + [match("m4", order=swapped)]
        hof = StatsProjector(five).hall_of_fame()
        assert [(p["email"], p["value"]) for p in hof["bestWinRate"]] == [
            (email(1), 1.0), (email(2), 1.0), (email(3), 1.0),
        ]

        hof = StatsProjector(five[:4]).hall_of_fame()
        assert hof["bestWinRate"] == []

    def test_win_rate(self):
        """Test that win rate is wins over normal games and zero without games."""
        assert win_rate(empty_stats("a@example.com")) == 0.0
        stats = StatsProjector([match("m1"), match("m2", Team.RED)]).user_stats(email(0))
        assert win_rate(stats) == 0.5
