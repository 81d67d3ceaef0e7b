"""
API endpoint tests.

Uses FastAPI TestClient (backed by httpx) with the sample voters database
from conftest.py.  Each class covers one endpoint: happy path, empty
results, invalid parameters, and pagination.
"""

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")


# ── /health ───────────────────────────────────────────────────────────────────

class TestHealth:
    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["voters"] == 10

    def test_request_id_header(self, client):
        resp = client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 8


# ── /api/v1/voters ────────────────────────────────────────────────────────────

class TestListVoters:
    def test_default_page(self, client):
        resp = client.get("/api/v1/voters")
        assert resp.status_code == 200
        body = resp.json()
        assert [v["id"] for v in body["data"]] == list(range(1, 11))
        assert body["pagination"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalRecords": 10,
            "limit": 50,
            "hasNextPage": False,
            "hasPrevPage": False,
        }

    def test_pagination_window(self, client):
        resp = client.get("/api/v1/voters", params={"page": 2, "limit": 4})
        body = resp.json()
        assert [v["id"] for v in body["data"]] == [5, 6, 7, 8]
        pag = body["pagination"]
        assert pag["currentPage"] == 2
        assert pag["totalPages"] == 3
        assert pag["hasNextPage"] is True
        assert pag["hasPrevPage"] is True

    def test_last_page_partial(self, client):
        body = client.get("/api/v1/voters", params={"page": 3, "limit": 4}).json()
        assert [v["id"] for v in body["data"]] == [9, 10]
        assert body["pagination"]["hasNextPage"] is False

    def test_page_past_end_is_empty(self, client):
        body = client.get("/api/v1/voters", params={"page": 9, "limit": 4}).json()
        assert body["data"] == []
        assert body["pagination"]["totalRecords"] == 10

    def test_unbounded_limit_returns_everything(self, client):
        body = client.get("/api/v1/voters", params={"page": 1, "limit": 100000}).json()
        assert len(body["data"]) == 10

    def test_row_fields(self, client):
        body = client.get("/api/v1/voters", params={"limit": 1}).json()
        row = body["data"][0]
        assert row["voter_id"] == "VTR00001"
        assert row["booth_number"] == "1"
        assert row["voting_status"] == "Completed"
        assert row["voting_paid"] == "1"
        assert row["updated_at"] == "2024-05-10 09:00:00"

    def test_null_columns_are_none(self, client):
        row = client.get("/api/v1/voters/5").json()
        assert row["updated_at"] is None
        assert row["age"] is None

    @pytest.mark.parametrize("params", [
        {"page": 0},
        {"limit": 0},
        {"limit": 100001},
        {"page": "abc"},
    ])
    def test_invalid_params_return_422(self, client, params):
        resp = client.get("/api/v1/voters", params=params)
        assert resp.status_code == 422


class TestSearch:
    def test_search_is_case_insensitive(self, client):
        body = client.get("/api/v1/voters", params={"search": "ASHA"}).json()
        assert [v["id"] for v in body["data"]] == [6]
        assert body["pagination"]["totalRecords"] == 1

    def test_search_matches_colony(self, client):
        body = client.get("/api/v1/voters", params={"search": "gandhi"}).json()
        assert [v["id"] for v in body["data"]] == [7]

    def test_search_matches_mobile(self, client):
        body = client.get("/api/v1/voters", params={"search": "98765"}).json()
        assert [v["id"] for v in body["data"]] == [10]

    def test_search_matches_voting_status(self, client):
        body = client.get("/api/v1/voters", params={"search": "completed"}).json()
        assert [v["id"] for v in body["data"]] == [1, 7]

    def test_search_wildcards_are_literal(self, client):
        body = client.get("/api/v1/voters", params={"search": "%"}).json()
        assert [v["id"] for v in body["data"]] == [9]

    def test_blank_search_is_ignored(self, client):
        body = client.get("/api/v1/voters", params={"search": "   "}).json()
        assert body["pagination"]["totalRecords"] == 10

    def test_no_match(self, client):
        body = client.get("/api/v1/voters", params={"search": "zzzz"}).json()
        assert body["data"] == []
        assert body["pagination"]["totalPages"] == 0


# ── /api/v1/voters/surveyed ──────────────────────────────────────────────────

class TestSurveyedVoters:
    def test_only_surveyed_newest_first(self, client):
        body = client.get("/api/v1/voters/surveyed").json()
        assert [v["id"] for v in body["data"]] == [10, 7, 4, 3, 2, 1, 8]
        assert body["pagination"]["totalRecords"] == 7

    def test_paginates(self, client):
        body = client.get("/api/v1/voters/surveyed", params={"page": 2, "limit": 5}).json()
        assert [v["id"] for v in body["data"]] == [1, 8]

    def test_booth_and_surveyed(self, client):
        body = client.get("/api/v1/voters/surveyed", params={"booth": "10"}).json()
        assert [v["id"] for v in body["data"]] == [7, 8]
        assert body["pagination"]["totalRecords"] == 2


class TestBoothFilter:
    def test_booth_exact_match(self, client):
        body = client.get("/api/v1/voters", params={"booth": "1"}).json()
        assert [v["id"] for v in body["data"]] == [1, 2, 3]
        assert body["pagination"]["totalRecords"] == 3

    def test_booth_combines_with_search(self, client):
        body = client.get("/api/v1/voters", params={"booth": "2", "search": "asha"}).json()
        assert [v["id"] for v in body["data"]] == [6]

    def test_blank_booth_is_ignored(self, client):
        body = client.get("/api/v1/voters", params={"booth": " "}).json()
        assert body["pagination"]["totalRecords"] == 10

    def test_unknown_booth_is_empty(self, client):
        body = client.get("/api/v1/voters", params={"booth": "99"}).json()
        assert body["data"] == []
        assert body["pagination"]["totalRecords"] == 0


# ── /api/v1/voters/booths ────────────────────────────────────────────────────

class TestBooths:
    def test_booths_numeric_order_with_counts(self, client):
        body = client.get("/api/v1/voters/booths").json()
        assert [(b["boothNumber"], b["voterCount"]) for b in body] == [
            ("1", 3), ("2", 3), ("3", 1), ("10", 2),
        ]

    def test_blank_booth_excluded(self, client):
        body = client.get("/api/v1/voters/booths").json()
        assert "" not in {b["boothNumber"] for b in body}


# ── /api/v1/voters/{id} ──────────────────────────────────────────────────────

class TestGetVoter:
    def test_found(self, client):
        resp = client.get("/api/v1/voters/6")
        assert resp.status_code == 200
        assert resp.json()["full_name"] == "Asha Devi"

    def test_not_found(self, client):
        resp = client.get("/api/v1/voters/999")
        assert resp.status_code == 404
