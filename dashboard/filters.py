"""
Filter engine: narrow the in-memory dataset by the dashboard's filter controls.

Each slot of ``FilterState`` is an independent predicate; slots compose by
logical AND and an empty value means "no constraint".  Predicates run in a
fixed order (booth, voting, survey, transfer, not-yet) and never reorder
records.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from dashboard.records import Dataset, VoterRecord

VOTING_CHOICES = ("done", "not_done")
SURVEY_CHOICES = ("done", "not_done")
TRANSFER_CHOICES = ("yes", "no")
NOT_YET_CHOICES = ("pending",)

ALL_BOOTHS_LABEL = "All Booths"


@dataclass(frozen=True)
class FilterState:
    """The dashboard's filter controls.  ``""`` leaves a slot unset."""

    booth_id: str = ""
    voting_filter: str = ""
    survey_filter: str = ""
    transfer_filter: str = ""
    not_yet_filter: str = ""

    def __post_init__(self):
        for name, choices in (
            ("voting_filter", VOTING_CHOICES),
            ("survey_filter", SURVEY_CHOICES),
            ("transfer_filter", TRANSFER_CHOICES),
            ("not_yet_filter", NOT_YET_CHOICES),
        ):
            value = getattr(self, name)
            if value and value not in choices:
                raise ValueError(
                    f"{name} must be one of {', '.join(choices)} or empty, got {value!r}"
                )

    @property
    def is_empty(self) -> bool:
        return not any((self.booth_id, self.voting_filter, self.survey_filter,
                        self.transfer_filter, self.not_yet_filter))

    def update(self, **changes: str) -> "FilterState":
        """Return a copy with *changes* applied (``None`` clears a slot)."""
        return replace(self, **{k: v or "" for k, v in changes.items()})


Predicate = Callable[[VoterRecord], bool]


def _booth_predicate(state: FilterState) -> Predicate | None:
    if not state.booth_id:
        return None
    return lambda r: r.booth_number == state.booth_id


def _voting_predicate(state: FilterState) -> Predicate | None:
    if state.voting_filter == "done":
        return lambda r: r.is_voting_done
    if state.voting_filter == "not_done":
        return lambda r: not r.is_voting_done
    return None


def _survey_predicate(state: FilterState) -> Predicate | None:
    if state.survey_filter == "done":
        return lambda r: r.is_surveyed
    if state.survey_filter == "not_done":
        return lambda r: not r.is_surveyed
    return None


def _transfer_predicate(state: FilterState) -> Predicate | None:
    if state.transfer_filter == "yes":
        return lambda r: r.is_transferred
    if state.transfer_filter == "no":
        return lambda r: not r.is_transferred
    return None


def _not_yet_predicate(state: FilterState) -> Predicate | None:
    if state.not_yet_filter == "pending":
        return lambda r: r.is_not_yet_voted
    return None


_PREDICATE_ORDER = (
    _booth_predicate,
    _voting_predicate,
    _survey_predicate,
    _transfer_predicate,
    _not_yet_predicate,
)


def apply_filters(dataset: Dataset, state: FilterState) -> Dataset:
    """Return the records of *dataset* that satisfy every set filter slot.

    Pure and deterministic; the input order is preserved.
    """
    filtered = tuple(dataset)
    for build in _PREDICATE_ORDER:
        predicate = build(state)
        if predicate is not None:
            filtered = tuple(r for r in filtered if predicate(r))
    return filtered


def booth_filter(dataset: Dataset, booth_id: str) -> Dataset:
    """Only the booth slot of ``apply_filters``."""
    return apply_filters(dataset, FilterState(booth_id=booth_id))


def _booth_sort_key(booth: str) -> tuple[int, int, str]:
    stripped = booth.strip()
    if stripped.isdigit():
        return (0, int(stripped), stripped)
    return (1, 0, stripped)


def booth_options(dataset: Dataset) -> list[dict[str, str]]:
    """Dropdown options for the booth filter.

    The first option is "All Booths" (empty value); the rest are the distinct
    non-blank booth numbers, numeric booths first in numeric order.
    """
    booths = {r.booth_number for r in dataset if r.booth_number.strip()}
    options = [{"value": "", "label": ALL_BOOTHS_LABEL}]
    options.extend(
        {"value": b, "label": f"Booth {b}"}
        for b in sorted(booths, key=_booth_sort_key)
    )
    return options
