# Area: Scrim Tests
"""Tests for the roster slot model."""

import pytest
from scrim_manager._scrim.enums import Position, ScrimType
from scrim_manager._scrim.roster import (
    Applicant,
    normalize_positions,
    position_errors,
    validate_registration,
)
from scrim_manager.errors import MalformedPayloadError


class TestPositionErrors:
    """Tests for position preference validation."""

    def test_all_alone_is_valid(self):
        """Test that ALL on its own is valid."""
        assert position_errors(["ALL"]) == []

    def test_one_to_three_distinct_positions_are_valid(self):
        """Test that one to three distinct positions are valid."""
        assert position_errors(["MID"]) == []
        assert position_errors(["MID", "TOP", "SUP"]) == []

    def test_empty_is_rejected(self):
        """Test that an empty preference list is rejected."""
        assert position_errors([]) == ["at least one position is required"]

    def test_more_than_three_is_rejected(self):
        """Test that more than three preferences are rejected."""
        errors = position_errors(["TOP", "JG", "MID", "AD"])
        assert any("at most 3" in e for e in errors)

    def test_duplicates_are_rejected(self):
        """Test that a repeated position is rejected."""
        errors = position_errors(["TOP", "TOP"])
        assert "positions must be distinct" in errors

    def test_all_mixed_with_positions_is_rejected(self):
        """Test that ALL cannot be combined with positions."""
        errors = position_errors(["ALL", "MID"])
        assert any("'ALL'" in e for e in errors)

    def test_unknown_position_is_rejected(self):
        """Test that an unknown position is rejected."""
        errors = position_errors(["MID", "CARRY"])
        assert "unknown positions: CARRY" in errors


class TestNormalizePositions:
    """Tests for reading stored preference lists."""

    def test_plain_names_keep_order(self):
        assert normalize_positions(["mid", "TOP"]) == ["MID", "TOP"]

    def test_legacy_ranked_labels_are_sorted_by_rank(self):
        """Test that legacy ranked labels load in rank order."""
        raw = ["SUP (3순위)", "MID (1순위)", "TOP (2순위)"]
        assert normalize_positions(raw) == ["MID", "TOP", "SUP"]


class TestApplicant:
    """Tests for Applicant predicates and documents."""

    def test_can_play_registered_positions_only(self):
        """Test that a player only fits registered positions."""
        applicant = Applicant(email="a@example.com", positions=["MID"])
        assert applicant.can_play(Position.MID) is True
        assert applicant.can_play(Position.AD) is False

    def test_all_can_play_anything(self):
        applicant = Applicant(email="a@example.com", positions=["ALL"])
        assert all(applicant.can_play(p) for p in Position)

    def test_cleared_drops_slot_and_champion(self):
        """Test that cleared drops the slot and champion."""
        applicant = Applicant(email="a@example.com", positions=["MID"],
                              champion="Ahri", assigned_position=Position.MID)
        cleared = applicant.cleared()
        assert cleared.champion is None
        assert cleared.assigned_position is None
        assert applicant.assigned_position == Position.MID

    def test_document_uses_assigned_position_key(self):
        """Test that the document stores the slot as assignedPosition."""
        applicant = Applicant(email="a@example.com", nickname="A", tier="Gold",
                              positions=["MID"], assigned_position=Position.MID)
        doc = applicant.to_document()
        assert doc["assignedPosition"] == "MID"
        assert "champion" not in doc
        assert Applicant.from_document(doc) == applicant


class TestValidateRegistration:
    """Tests for validate_registration."""

    def test_valid_normal_registration(self):
        applicant = Applicant(email="a@example.com", tier="Gold", positions=["MID"])
        validate_registration(applicant, ScrimType.NORMAL)

    def test_missing_tier_is_rejected(self):
        """Test that normal registrations need a tier."""
        applicant = Applicant(email="a@example.com", positions=["MID"])
        with pytest.raises(MalformedPayloadError) as exc_info:
            validate_registration(applicant, ScrimType.FEARLESS)
        assert "a tier is required" in exc_info.value.details

    def test_aram_skips_tier_and_positions(self):
        """Test that ARAM registrations need neither tier nor positions."""
        applicant = Applicant(email="a@example.com")
        validate_registration(applicant, ScrimType.ARAM)

    def test_missing_email_is_rejected_even_for_aram(self):
        """Test that every registration needs an email."""
        with pytest.raises(MalformedPayloadError):
            validate_registration(Applicant(email=""), ScrimType.ARAM)
