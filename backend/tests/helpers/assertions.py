"""Assertion helpers for HTTP responses."""

from __future__ import annotations


def assert_json_keys(data: dict, required: set[str]) -> None:
    """Ensure that all required keys are present in ``data``."""

    missing = required - data.keys()
    assert not missing, f"Missing keys: {', '.join(sorted(missing))}"


def assert_problem(resp, status: int, code: str) -> dict:
    """Check an RFC 7807 error response and return its body.

    Parameters
    ----------
    resp:
        Flask test client response.
    status:
        Expected HTTP status.
    code:
        Expected machine-readable ``code``.
    """

    assert resp.status_code == status, resp.get_data(as_text=True)
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert_json_keys(body, {"type", "title", "status", "detail", "code", "request_id"})
    assert body["code"] == code
    return body


def assert_pagination_meta(meta: dict, *, total: int, page: int, limit: int) -> None:
    assert_json_keys(meta, {"total", "page", "limit", "total_pages"})
    assert meta["total"] == total
    assert meta["page"] == page
    assert meta["limit"] == limit
