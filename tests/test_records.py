"""Tests for dashboard/records.py: record parsing and table display."""
import pytest

from dashboard.records import DISPLAY_FALLBACK, VoterRecord, to_dataset


class TestFromDict:
    def test_unknown_keys_ignored(self):
        record = VoterRecord.from_dict({"id": 3, "full_name": "A", "extra": 1})
        assert record == VoterRecord(id=3, full_name="A")

    def test_bad_id_becomes_zero(self):
        assert VoterRecord.from_dict({"id": "x"}).id == 0

    def test_none_becomes_blank(self):
        assert VoterRecord.from_dict({"id": 1, "voting_status": None}).voting_status == ""

    def test_non_mapping_rows_skipped(self):
        assert [r.id for r in to_dataset([{"id": 1}, "junk", None, {"id": 2}])] == [1, 2]


class TestDisplay:
    def test_blank_field_is_na(self):
        assert VoterRecord(id=1).display("colony_name") == DISPLAY_FALLBACK == "N/A"

    def test_whitespace_field_is_na(self):
        assert VoterRecord(id=1, booth_name="  ").display("booth_name") == "N/A"

    def test_value_passes_through(self):
        assert VoterRecord(id=1, booth_number="12").display("booth_number") == "12"

    def test_unknown_field_is_na(self):
        assert VoterRecord(id=1).display("nope") == "N/A"


class TestVotingLabel:
    @pytest.mark.parametrize("status,expected", [
        ("Completed", "Voting Done"),
        ("Direct", "Voting Done"),
        ("In Transit", "In Transit"),
        ("Pending", "Pending"),
        ("", "Pending"),
    ])
    def test_labels(self, status, expected):
        assert VoterRecord(id=1, voting_status=status).voting_label() == expected


class TestDisplayRow:
    def test_blank_cells_and_badges(self):
        row = VoterRecord(id=7, full_name="Asha", voting_status="Direct").display_row()
        assert row == {
            "id": 7,
            "voter_id": "N/A",
            "full_name": "Asha",
            "colony_name": "N/A",
            "booth_number": "N/A",
            "booth_name": "N/A",
            "booth_address": "N/A",
            "eng_full_name": "",
            "survey": "NO",
            "voting": "Voting Done",
        }

    def test_surveyed_row(self):
        row = VoterRecord(id=1, updated_at="2024-05-10", voting_status="").display_row()
        assert row["survey"] == "YES"
        assert row["voting"] == "Pending"
