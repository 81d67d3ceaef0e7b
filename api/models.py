"""
Pydantic response models for the voters API.

Optional fields default to None so that partial responses are valid when
database rows have NULL columns.  Pagination metadata is emitted with
camelCase keys (``currentPage``, ``hasNextPage``...) which is the shape the
dashboard client reads.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ── Voter rows ────────────────────────────────────────────────────────────────

class VoterOut(BaseModel):
    """A single voter row as stored in the survey table."""
    id: int = Field(..., description="Unique row ID", examples=[1001])
    voter_id: str | None = Field(None, description="Electoral roll voter ID", examples=["ABC1234567"])
    full_name: str | None = Field(None, description="Name as printed on the roll")
    eng_full_name: str | None = Field(None, description="Name transliterated to English")
    age: str | None = Field(None, description="Age as recorded", examples=["42"])
    gender: str | None = Field(None, description="Gender as recorded", examples=["F"])
    house_number: str | None = Field(None, description="House number")
    colony_name: str | None = Field(None, description="Colony recorded during the survey")
    assigned_colony_name: str | None = Field(None, description="Colony assigned to the volunteer")
    updated_mobile_no: str | None = Field(None, description="Mobile number collected during the survey")
    booth_number: str | None = Field(None, description="Polling booth number", examples=["12"])
    booth_name: str | None = Field(None, description="Polling booth name")
    booth_address: str | None = Field(None, description="Polling booth address")
    volunteer_name: str | None = Field(None, description="Volunteer who surveyed the voter")
    voting_status: str | None = Field(
        None,
        description="Completed | Direct | Pending | In Transit, or empty",
        examples=["Pending"],
    )
    voting_paid: str | None = Field(None, description="Transfer/installment flag; '1' when processed", examples=["1"])
    voting_in_transit: str | None = Field(None, description="In-transit marker")
    created_at: str | None = Field(None, description="Row creation timestamp")
    updated_at: str | None = Field(None, description="Survey completion timestamp; empty until surveyed")


# ── Pagination ────────────────────────────────────────────────────────────────

class PaginationOut(BaseModel):
    """Server-side pagination metadata."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int = Field(..., ge=1, description="1-based page index", examples=[1])
    total_pages: int = Field(..., ge=0, description="ceil(total_records / limit)", examples=[4])
    total_records: int = Field(..., ge=0, description="Matching rows before pagination", examples=[187])
    limit: int = Field(..., ge=1, description="Page size used", examples=[50])
    has_next_page: bool = Field(..., description="current_page < total_pages")
    has_prev_page: bool = Field(..., description="current_page > 1")


class VoterListResponse(BaseModel):
    """Response body for the voter listing endpoints."""
    data: list[VoterOut] = Field(..., description="Voter rows for this page")
    pagination: PaginationOut


class BoothOut(BaseModel):
    """One polling booth with the number of voters assigned to it."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    booth_number: str = Field(..., description="Polling booth number", examples=["12"])
    booth_name: str | None = Field(None, description="Polling booth name")
    voter_count: int = Field(..., ge=0, description="Voters at this booth", examples=[310])


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Bad request"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[400])
