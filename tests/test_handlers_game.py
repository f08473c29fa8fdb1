# Area: Scrim Tests
"""Tests for the game and admin handlers."""

import pytest
from scrim_manager._scrim.enums import ScrimStatus, ScrimType, Team
from scrim_manager._scrim.handler_admin import DisbandHandler, RemoveMemberHandler, RenameHandler
from scrim_manager._scrim.handler_game import (
    EndGameHandler,
    ResetToTeamBuildingHandler,
    champion_errors,
)
from scrim_manager._scrim.handler_team_building import StartGameHandler, StartTeamBuildingHandler
from scrim_manager.errors import (
    InvalidChampionSelectionError,
    MalformedPayloadError,
    NotFoundError,
)
from scrim_factory import (
    CHAMPIONS,
    champion_map,
    email,
    make_ctx,
    picks_for,
    recruiting_state,
)


def in_progress(scrim_type=ScrimType.NORMAL):
    state = StartTeamBuildingHandler().handle(recruiting_state(scrim_type=scrim_type), make_ctx()).state
    return StartGameHandler().handle(state, make_ctx()).state


def end_game(state, winner="blue", picks=None, **kwargs):
    payload = {"winning_team": winner, "picks": picks or []}
    return EndGameHandler().handle(state, make_ctx(payload=payload, **kwargs))


class TestChampionErrors:
    """Tests for champion_errors."""

    def test_normal_allows_missing_picks(self):
        """Test that normal matches accept empty picks."""
        picks = {email(0): "Ahri", email(1): None}
        assert champion_errors(picks, champion_map(), [], fearless=False) == []

    def test_unknown_champion(self):
        """Test that a name outside the catalog is reported."""
        errors = champion_errors({email(0): "Teemo Prime"}, champion_map(), [], fearless=False)
        assert errors == [f"Teemo Prime ({email(0)}) is not a known champion"]

    def test_catalog_check_is_case_insensitive(self):
        assert champion_errors({email(0): "lee sin"}, champion_map(), [], fearless=False) == []

    def test_catalog_unavailable_skips_membership(self):
        """Test that no catalog means no membership check."""
        assert champion_errors({email(0): "Anything"}, None, [], fearless=False) == []

    def test_fearless_duplicate_within_match(self):
        """Test that fearless rejects the same champion twice in a match."""
        picks = {email(0): "Ahri", email(1): "ahri"}
        errors = champion_errors(picks, None, [], fearless=True)
        assert errors == ["Ahri is picked more than once in this match"]

    def test_fearless_banned(self):
        """Test that fearless rejects a champion used in an earlier game."""
        errors = champion_errors({email(0): "Ahri"}, None, ["AHRI"], fearless=True)
        assert errors == ["Ahri was already played in this scrim"]

    def test_fearless_requires_every_pick(self):
        """Test that fearless needs a champion for every player."""
        errors = champion_errors({email(0): "Ahri", email(1): None}, None, [], fearless=True)
        assert errors == [f"every player needs a champion; missing: {email(1)}"]


class TestEndGame:
    """Tests for EndGameHandler."""

    def test_records_match(self):
        """Test that end_game finishes the scrim and appends a match record."""
        state = in_progress()
        result = end_game(state, "red", picks_for(state, CHAMPIONS[:10]), new_match_id="m-42")
        assert result.state.status == ScrimStatus.FINISHED
        assert result.state.winning_team == Team.RED
        assert result.match_record.match_id == "m-42"
        assert result.match_record.did_win(email(7)) is True
        assert result.state.blue_team[0].champion == CHAMPIONS[0]

    def test_champion_names_are_canonicalized(self):
        """Test that picks are stored with the catalog spelling."""
        state = in_progress()
        picks = [{"email": email(0), "champion": "lee sin"}]
        result = end_game(state, picks=picks, champion_names=champion_map())
        assert result.match_record.find_player(email(0)).champion == "Lee Sin"

    def test_rejection_is_all_or_nothing(self):
        """Test that one bad pick rejects the whole result."""
        state = in_progress(ScrimType.FEARLESS)
        picks = picks_for(state, CHAMPIONS[:9] + ["Not A Champ"])
        with pytest.raises(InvalidChampionSelectionError) as exc_info:
            end_game(state, picks=picks, champion_names=champion_map())
        assert exc_info.value.details == [f"Not A Champ ({email(9)}) is not a known champion"]
        assert state.status == ScrimStatus.IN_PROGRESS
        assert state.match_history == []
        assert state.fearless_used_champions == []

    def test_pick_for_player_not_in_game(self):
        """Test that a pick for an outsider is malformed."""
        state = in_progress()
        with pytest.raises(NotFoundError):
            end_game(state, picks=[{"email": "nobody@example.com", "champion": "Ahri"}])

    def test_two_picks_for_one_player(self):
        """Test that two picks for one player are malformed."""
        state = in_progress()
        picks = [{"email": email(0), "champion": "Ahri"}, {"email": email(0), "champion": "Lux"}]
        with pytest.raises(MalformedPayloadError):
            end_game(state, picks=picks)

    def test_winning_team_is_required(self):
        """Test that end_game needs a winning team."""
        state = in_progress()
        with pytest.raises(MalformedPayloadError):
            EndGameHandler().handle(state, make_ctx(payload={"winning_team": "green"}))

    def test_aram_ignores_picks_and_uses_own_history(self):
        """Test that ARAM ignores picks and records into the ARAM history."""
        state = in_progress(ScrimType.ARAM)
        picks = [{"email": state.blue_team[0].email, "champion": "Nonsense"}]
        result = end_game(state, picks=picks, champion_names=champion_map())
        assert result.match_record.champions() == []
        assert len(result.state.aram_match_history) == 1
        assert result.state.match_history == []
        assert all(p.position is None for p in result.match_record.players)


class TestResetToTeamBuilding:
    """Tests for ResetToTeamBuildingHandler."""

    def test_keeps_rosters_and_history(self):
        """Test that resetting to team building keeps rosters and history."""
        state = in_progress()
        finished = end_game(state, picks=picks_for(state, CHAMPIONS[:10])).state
        reset = ResetToTeamBuildingHandler().handle(finished, make_ctx()).state
        assert reset.status == ScrimStatus.TEAM_BUILDING
        assert reset.winning_team is None
        assert reset.start_time is None
        assert [p.email for p in reset.blue_team] == [p.email for p in finished.blue_team]
        assert all(p.champion is None for p in reset.blue_team + reset.red_team)
        assert len(reset.match_history) == 1


class TestAdminHandlers:
    """Tests for remove_member, rename and disband."""

    def test_remove_member_promotes_from_full_waitlist(self):
        """Test that removing an applicant promotes the oldest waitlisted player."""
        state = recruiting_state(10, 10)
        new_state = RemoveMemberHandler().handle(state, make_ctx(payload={"email": email(0)})).state
        assert len(new_state.applicants) == 10
        assert len(new_state.waitlist) == 9
        assert email(10) in [a.email for a in new_state.applicants]

    def test_remove_member_from_running_game(self):
        """Test that a player can be removed from a team mid-game."""
        state = in_progress()
        new_state = RemoveMemberHandler().handle(state, make_ctx(payload={"email": email(2)})).state
        assert len(new_state.blue_team) == 4

    def test_remove_member_needs_email(self):
        with pytest.raises(MalformedPayloadError):
            RemoveMemberHandler().handle(recruiting_state(), make_ctx(payload={}))

    def test_rename(self):
        new_state = RenameHandler().handle(recruiting_state(), make_ctx(payload={"name": " Sunday "})).state
        assert new_state.name == "Sunday"

    def test_rename_rejects_blank(self):
        """Test that a blank name is malformed."""
        with pytest.raises(MalformedPayloadError):
            RenameHandler().handle(recruiting_state(), make_ctx(payload={"name": "  "}))

    def test_disband(self):
        result = DisbandHandler().handle(recruiting_state(), make_ctx())
        assert result.deleted is True
