"""
Pytest fixtures for the voter status tests.

Provides a small deterministic voters table (SQLite file in a temp dir) and
a FastAPI TestClient wired to it.
"""

import sqlite3
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.database import create_voters_schema, insert_voters  # noqa: E402


def _row(id_, booth, status, surveyed_at=None, paid="", **extra):
    row = {
        "id": id_,
        "voter_id": f"VTR{id_:05d}",
        "full_name": extra.pop("full_name", f"Voter {id_}"),
        "eng_full_name": extra.pop("eng_full_name", f"Voter {id_}"),
        "booth_number": booth,
        "booth_name": f"School {booth}" if booth else None,
        "booth_address": f"Ward {booth} Road" if booth else None,
        "colony_name": extra.pop("colony_name", "Shanti Nagar"),
        "voting_status": status,
        "voting_paid": paid,
        "created_at": "2024-05-01 08:00:00",
        "updated_at": surveyed_at,
    }
    row.update(extra)
    return row


SAMPLE_VOTERS = [
    _row(1, "1", "Completed", "2024-05-10 09:00:00", paid="1"),
    _row(2, "1", "Direct", "2024-05-10 09:30:00"),
    _row(3, "1", "Pending", "2024-05-11 10:00:00", paid="1"),
    _row(4, "2", "In Transit", "2024-05-12 11:00:00", paid="1"),
    _row(5, "2", "Pending", None),
    _row(6, "2", "", None, full_name="Asha Devi", eng_full_name="ASHA DEVI"),
    _row(7, "10", "Completed", "2024-05-13 12:00:00", colony_name="Gandhi Colony"),
    _row(8, "10", "Pending", "2024-05-09 08:00:00", paid="1"),
    _row(9, "", "Pending", None, colony_name="50%_off Lane"),
    _row(10, "3", "Direct", "2024-05-14 13:00:00", updated_mobile_no="9876543210"),
]


@pytest.fixture(scope="session")
def sample_voters():
    return [dict(r) for r in SAMPLE_VOTERS]


@pytest.fixture(scope="module")
def voters_db(tmp_path_factory):
    """A SQLite file holding SAMPLE_VOTERS."""
    path = tmp_path_factory.mktemp("db") / "voters.sqlite"
    conn = sqlite3.connect(str(path))
    create_voters_schema(conn)
    insert_voters(conn, SAMPLE_VOTERS)
    conn.close()
    return path


@pytest.fixture(scope="module")
def client(voters_db):
    """FastAPI TestClient wired to the sample voters database."""
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from api.app import create_app

    app = create_app(db_path=voters_db)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
