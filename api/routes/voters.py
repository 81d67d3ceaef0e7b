"""
Voter listing endpoints.

GET /api/v1/voters            → paginated voters, optional ``search`` and ``booth``
GET /api/v1/voters/surveyed   → surveyed voters only, newest survey first
GET /api/v1/voters/booths     → distinct booths with voter counts
GET /api/v1/voters/{id}       → single voter

Listing responses have the shape ``{"data": [...], "pagination": {...}}``.
"""

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Query

from api.database import get_db
from api.models import BoothOut, ErrorResponse, PaginationOut, VoterListResponse, VoterOut
from utils.config import UNBOUNDED_PAGE_SIZE
from utils.database import VOTER_COLUMNS, VOTERS_TABLE, query_to_dicts
from utils.query import (
    build_order_clause,
    build_where_clause,
    page_offset,
    pagination_meta,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/voters", tags=["voters"])

_SELECT_COLUMNS = ", ".join(VOTER_COLUMNS)


def _list_voters(
    conn: sqlite3.Connection,
    page: int,
    limit: int,
    search: str | None,
    booth: str | None = None,
    surveyed_only: bool = False,
    sort_by: str = "id",
    sort_dir: str = "asc",
) -> VoterListResponse:
    """Run the count + page queries shared by both listing endpoints."""
    booth = (booth or "").strip()
    where, params = build_where_clause(
        search=search,
        surveyed_only=surveyed_only,
        booth_number=[booth] if booth else None,
    )
    order = build_order_clause(sort_by, sort_dir)

    total = conn.execute(
        f"SELECT COUNT(*) FROM {VOTERS_TABLE} {where}", params
    ).fetchone()[0]

    rows = conn.execute(
        f"SELECT {_SELECT_COLUMNS} FROM {VOTERS_TABLE} {where} {order} "
        "LIMIT ? OFFSET ?",
        params + [limit, page_offset(page, limit)],
    ).fetchall()

    logger.debug("voters page=%d limit=%d search=%r booth=%r total=%d",
                 page, limit, search, booth, total)
    return VoterListResponse(
        data=[VoterOut(**dict(row)) for row in rows],
        pagination=PaginationOut(**pagination_meta(page, limit, total)),
    )


@router.get("", response_model=VoterListResponse, summary="List voters")
def list_voters(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(50, ge=1, le=UNBOUNDED_PAGE_SIZE, description="Rows per page"),
    search: str | None = Query(
        None, max_length=200,
        description="Case-insensitive substring matched against name, voter ID, booth, colony, mobile and status fields",
    ),
    booth: str | None = Query(None, max_length=50, description="Exact booth number"),
    conn: sqlite3.Connection = Depends(get_db),
) -> VoterListResponse:
    """Return one page of voters in ID order."""
    return _list_voters(conn, page, limit, search, booth=booth)


@router.get("/surveyed", response_model=VoterListResponse, summary="List surveyed voters")
def list_surveyed_voters(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(50, ge=1, le=UNBOUNDED_PAGE_SIZE, description="Rows per page"),
    search: str | None = Query(None, max_length=200, description="Case-insensitive substring search"),
    booth: str | None = Query(None, max_length=50, description="Exact booth number"),
    conn: sqlite3.Connection = Depends(get_db),
) -> VoterListResponse:
    """Return one page of voters whose survey is complete, latest survey first."""
    return _list_voters(
        conn, page, limit, search, booth=booth,
        surveyed_only=True, sort_by="updated_at", sort_dir="desc",
    )


@router.get("/booths", response_model=list[BoothOut], summary="List polling booths")
def list_booths(conn: sqlite3.Connection = Depends(get_db)) -> list[BoothOut]:
    """Return every non-blank booth number with its name and voter count.

    Booths are ordered numerically where the number is numeric.
    """
    rows = query_to_dicts(
        conn,
        f"""
        SELECT booth_number, MAX(booth_name) AS booth_name, COUNT(*) AS voter_count
        FROM {VOTERS_TABLE}
        WHERE booth_number IS NOT NULL AND TRIM(booth_number) != ''
        GROUP BY booth_number
        ORDER BY CAST(booth_number AS INTEGER), booth_number
        """,
    )
    return [BoothOut(**r) for r in rows]


@router.get(
    "/{item_id}",
    response_model=VoterOut,
    summary="Get single voter",
    responses={404: {"model": ErrorResponse, "description": "Voter not found"}},
)
def get_voter(
    item_id: int,
    conn: sqlite3.Connection = Depends(get_db),
) -> VoterOut:
    """Return a single voter by row ID."""
    row = conn.execute(
        f"SELECT {_SELECT_COLUMNS} FROM {VOTERS_TABLE} WHERE id = ?",
        (item_id,),
    ).fetchone()
    if row is None:
        raise HTTPException(status_code=404, detail=f"Voter {item_id} not found")
    return VoterOut(**dict(row))
