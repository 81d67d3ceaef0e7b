"""
Voter record snapshots as held by the dashboard.

A ``VoterRecord`` is an immutable copy of one row returned by the listing
API.  A ``Dataset`` is an ordered tuple of records, replaced wholesale on
every fetch.  Fields missing from a payload degrade to empty strings so a
malformed row never aborts filtering or aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from collections.abc import Iterable, Mapping
from typing import Any

from utils.config import NOT_YET_STATUSES, VOTING_DONE_STATUSES

DISPLAY_FALLBACK = "N/A"

# Table cells that show ``N/A`` when blank
DISPLAY_COLUMNS = ("voter_id", "full_name", "colony_name",
                   "booth_number", "booth_name", "booth_address")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class VoterRecord:
    """One voter row.  Only ``id`` is required; every other field may be blank."""

    id: int
    voter_id: str = ""
    full_name: str = ""
    eng_full_name: str = ""
    age: str = ""
    gender: str = ""
    house_number: str = ""
    colony_name: str = ""
    assigned_colony_name: str = ""
    updated_mobile_no: str = ""
    booth_number: str = ""
    booth_name: str = ""
    booth_address: str = ""
    volunteer_name: str = ""
    voting_status: str = ""
    voting_paid: str = ""
    voting_in_transit: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VoterRecord":
        """Build a record from an API row, ignoring unknown keys.

        A missing or non-numeric ``id`` becomes ``0``.
        """
        try:
            record_id = int(data.get("id") or 0)
        except (TypeError, ValueError):
            record_id = 0
        values = {
            f.name: _text(data.get(f.name))
            for f in fields(cls)
            if f.name != "id"
        }
        return cls(id=record_id, **values)

    # ── Derived flags ─────────────────────────────────────────────────────

    @property
    def is_surveyed(self) -> bool:
        """Survey is done once the ``updated_at`` marker is populated."""
        return bool(self.updated_at.strip())

    @property
    def is_voting_done(self) -> bool:
        return self.voting_status in VOTING_DONE_STATUSES

    @property
    def is_transferred(self) -> bool:
        """Transfer/installment flag, stored as the string ``"1"``."""
        return self.voting_paid.strip() == "1"

    @property
    def is_not_yet_voted(self) -> bool:
        """Transferred but still Pending or In Transit."""
        return self.is_transferred and self.voting_status in NOT_YET_STATUSES

    def display(self, name: str) -> str:
        """Field value for display, with ``N/A`` for blanks."""
        value = _text(getattr(self, name, ""))
        return value if value.strip() else DISPLAY_FALLBACK

    def voting_label(self) -> str:
        """Status badge text: "Voting Done", else the raw status or "Pending"."""
        if self.is_voting_done:
            return "Voting Done"
        return self.voting_status or "Pending"

    def display_row(self) -> dict[str, Any]:
        """One rendered table row for the visible window."""
        row: dict[str, Any] = {"id": self.id}
        row.update((name, self.display(name)) for name in DISPLAY_COLUMNS)
        row["eng_full_name"] = self.eng_full_name
        row["survey"] = "YES" if self.is_surveyed else "NO"
        row["voting"] = self.voting_label()
        return row

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


Dataset = tuple[VoterRecord, ...]


def to_dataset(rows: Iterable[Mapping[str, Any]]) -> Dataset:
    """Convert decoded JSON rows into a Dataset, preserving order.

    Entries that are not JSON objects are skipped.
    """
    return tuple(VoterRecord.from_dict(row) for row in rows if isinstance(row, Mapping))
