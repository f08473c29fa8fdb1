# Area: Scrim Tests
"""Tests for the team building handlers."""

import pytest
from scrim_manager._scrim.enums import Position, ScrimStatus, ScrimType, Team
from scrim_manager._scrim.handler_team_building import (
    AssignSlotHandler,
    ResetToRecruitingHandler,
    StartGameHandler,
    StartTeamBuildingHandler,
    UnassignSlotHandler,
    UpdateTeamsHandler,
    seed_by_preference,
    shuffle_aram_teams,
)
from scrim_manager._scrim.state import check_invariants
from scrim_manager.errors import InvalidStateForActionError, MalformedPayloadError
from scrim_factory import NOW, email, make_applicant, make_ctx, recruiting_state


def built(scrim_type=ScrimType.NORMAL, waitlist=0):
    state = recruiting_state(waitlist=waitlist, scrim_type=scrim_type)
    return StartTeamBuildingHandler().handle(state, make_ctx()).state


class TestSeedByPreference:
    """Tests for slot seeding from preferences."""

    def test_first_choices_fill_blue_then_red(self):
        """Test that first choices fill blue slots before red."""
        state = seed_by_preference(recruiting_state())
        state.status = ScrimStatus.TEAM_BUILDING
        assert [p.email for p in state.blue_team] == [email(i) for i in range(5)]
        assert [p.email for p in state.red_team] == [email(i) for i in range(5, 10)]
        assert state.applicants == []
        check_invariants(state)

    def test_second_choice_used_when_first_is_taken(self):
        """Test that second choices are used once first choices are taken."""
        state = recruiting_state(applicants=0)
        state.applicants = [make_applicant(i, ["MID"]) for i in range(2)]
        state.applicants.append(make_applicant(2, ["MID", "SUP"]))
        seeded = seed_by_preference(state)
        assert seeded.slot_occupant(Team.BLUE, Position.MID).email == email(0)
        assert seeded.slot_occupant(Team.RED, Position.MID).email == email(1)
        assert seeded.slot_occupant(Team.BLUE, Position.SUP).email == email(2)

    def test_all_players_fill_remaining_slots(self):
        """Test that ALL players fill the slots left empty."""
        state = recruiting_state(applicants=0)
        state.applicants = [make_applicant(0, ["ALL"]), make_applicant(1, ["TOP"])]
        seeded = seed_by_preference(state)
        assert seeded.slot_occupant(Team.BLUE, Position.TOP).email == email(1)
        assert seeded.slot_occupant(Team.BLUE, Position.JG).email == email(0)

    def test_unplaceable_players_stay_in_pool(self):
        """Test that players without a free slot stay in the pool."""
        state = recruiting_state(applicants=0)
        state.applicants = [make_applicant(i, ["MID"]) for i in range(3)]
        seeded = seed_by_preference(state)
        assert [a.email for a in seeded.applicants] == [email(2)]
        seeded.status = ScrimStatus.TEAM_BUILDING
        check_invariants(seeded)


class TestAramShuffle:
    """Tests for shuffle_aram_teams."""

    def test_five_and_five_without_positions(self):
        """Test that ARAM teams get five players each and no positions."""
        state = shuffle_aram_teams(recruiting_state(scrim_type=ScrimType.ARAM), make_ctx(seed=3))
        assert len(state.blue_team) == 5
        assert len(state.red_team) == 5
        assert all(p.assigned_position is None for p in state.blue_team + state.red_team)
        everyone = {p.email for p in state.blue_team + state.red_team}
        assert everyone == {email(i) for i in range(10)}

    def test_shuffle_uses_context_rng(self):
        """Test that the shuffle is reproducible from the context seed."""
        first = shuffle_aram_teams(recruiting_state(scrim_type=ScrimType.ARAM), make_ctx(seed=11))
        second = shuffle_aram_teams(recruiting_state(scrim_type=ScrimType.ARAM), make_ctx(seed=11))
        assert [p.email for p in first.blue_team] == [p.email for p in second.blue_team]


class TestStartTeamBuilding:
    """Tests for StartTeamBuildingHandler."""

    def test_needs_ten_applicants(self):
        """Test that team building needs exactly ten applicants."""
        with pytest.raises(InvalidStateForActionError):
            StartTeamBuildingHandler().handle(recruiting_state(9), make_ctx())

    def test_waitlist_is_kept(self):
        """Test that the waitlist survives into team building."""
        state = built(waitlist=2)
        assert state.status == ScrimStatus.TEAM_BUILDING
        assert [w.email for w in state.waitlist] == [email(10), email(11)]

    def test_aram(self):
        state = built(ScrimType.ARAM)
        assert len(state.blue_team) == 5
        assert state.applicants == []


class TestRosterEditing:
    """Tests for update_teams / assign_slot / unassign_slot."""

    def test_update_teams(self):
        """Test that update_teams replaces both rosters."""
        state = built()
        payload = {
            "blue_team": [{"email": email(5), "position": "TOP"}],
            "red_team": [{"email": email(0), "position": "TOP"}],
        }
        new_state = UpdateTeamsHandler().handle(state, make_ctx(payload=payload)).state
        assert [p.email for p in new_state.blue_team] == [email(5)]
        assert [p.email for p in new_state.red_team] == [email(0)]
        assert len(new_state.applicants) == 8

    def test_update_teams_bad_position(self):
        """Test that a slot outside a player's preferences is rejected."""
        payload = {"blue_team": [{"email": email(0), "position": "CARRY"}]}
        with pytest.raises(MalformedPayloadError):
            UpdateTeamsHandler().handle(built(), make_ctx(payload=payload))

    def test_assign_slot_swaps_occupant_to_pool(self):
        """Test that assigning an occupied slot returns the occupant to the pool."""
        state = built()
        payload = {"email": email(5), "team": "blue", "position": "TOP"}
        new_state = AssignSlotHandler().handle(state, make_ctx(payload=payload)).state
        assert new_state.slot_occupant(Team.BLUE, Position.TOP).email == email(5)
        assert [a.email for a in new_state.applicants] == [email(0)]
        assert new_state.slot_occupant(Team.RED, Position.TOP) is None

    def test_unassign_slot(self):
        """Test that unassign moves a player back to the pool."""
        new_state = UnassignSlotHandler().handle(built(), make_ctx(payload={"email": email(3)})).state
        assert [a.email for a in new_state.applicants] == [email(3)]


class TestStartGame:
    """Tests for StartGameHandler."""

    def test_start_game(self):
        """Test that start_game stamps the start time and clears the waitlist."""
        state = built(waitlist=3)
        new_state = StartGameHandler().handle(state, make_ctx()).state
        assert new_state.status == ScrimStatus.IN_PROGRESS
        assert new_state.start_time == NOW
        assert new_state.waitlist == []
        assert new_state.applicants == []

    def test_teams_must_be_full(self):
        """Test that start_game needs two full teams."""
        state = UnassignSlotHandler().handle(built(), make_ctx(payload={"email": email(3)})).state
        with pytest.raises(InvalidStateForActionError) as exc_info:
            StartGameHandler().handle(state, make_ctx())
        assert "blue 4" in exc_info.value.message

    def test_rosters_sent_with_start_game(self):
        """Test that rosters sent with start_game are applied first."""
        state = UnassignSlotHandler().handle(built(), make_ctx(payload={"email": email(3)})).state
        teams = {
            "blue_team": [{"email": email(i), "position": p}
                          for i, p in zip(range(5), ["TOP", "JG", "MID", "AD", "SUP"])],
            "red_team": [{"email": email(i), "position": p}
                         for i, p in zip(range(5, 10), ["TOP", "JG", "MID", "AD", "SUP"])],
        }
        new_state = StartGameHandler().handle(state, make_ctx(payload={"teams": teams})).state
        assert new_state.status == ScrimStatus.IN_PROGRESS
        assert len(new_state.blue_team) == 5


class TestResetToRecruiting:
    """Tests for ResetToRecruitingHandler."""

    def test_everyone_returns_to_applicants(self):
        """Test that resetting to recruiting returns all players to the pool."""
        state = built(waitlist=2)
        new_state = ResetToRecruitingHandler().handle(state, make_ctx()).state
        assert new_state.status == ScrimStatus.RECRUITING
        assert sorted(a.email for a in new_state.applicants) == sorted(email(i) for i in range(10))
        assert new_state.blue_team == []
        assert new_state.red_team == []
        assert new_state.waitlist == []
        check_invariants(new_state)
