"""Tests for the service-error to HTTP status table and problem responses."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from accounts.core.errors import service_error_status
from accounts.services._shared.errors import (
    EmailAlreadyExistsError,
    FileTooLargeError,
    InvalidIDFormatError,
    PasswordMismatchError,
    PolicyViolationError,
    ServiceError,
    TokenExpiredError,
    TokenInvalidError,
    UnsupportedFileTypeError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    ("error", "status", "code", "message"),
    [
        (UserNotFoundError(1), HTTPStatus.NOT_FOUND, "user_not_found", "user not found"),
        (EmailAlreadyExistsError(), HTTPStatus.CONFLICT, "email_already_exists", "email already exists"),
        (PasswordMismatchError(), HTTPStatus.UNAUTHORIZED, "password_mismatch", "password does not match"),
        (TokenInvalidError(), HTTPStatus.UNAUTHORIZED, "token_invalid", "token is invalid or expired"),
        (TokenExpiredError(), HTTPStatus.UNAUTHORIZED, "token_expired", "token has expired"),
        (InvalidIDFormatError(), HTTPStatus.BAD_REQUEST, "invalid_id_format", "invalid ID format"),
        (PolicyViolationError("invalid email format"), HTTPStatus.UNPROCESSABLE_ENTITY, "validation_error", "invalid email format"),
        (UnsupportedFileTypeError(), HTTPStatus.UNSUPPORTED_MEDIA_TYPE, "unsupported_file_type", "unsupported file type"),
        (FileTooLargeError(), HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "payload_too_large", "file size is too large"),
    ],
)
def test_service_errors_map_to_status_and_code(error, status, code, message):
    assert service_error_status(error) == status
    assert error.code == code
    assert error.message == message


def test_unknown_service_error_defaults_to_bad_request():
    assert service_error_status(ServiceError()) == HTTPStatus.BAD_REQUEST


def test_unhandled_route_renders_problem_json(client):
    resp = client.get("/api/v1/does-not-exist", headers={"X-Request-ID": "req-42"})
    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["code"] == "not_found"
    assert body["request_id"] == "req-42"
    assert resp.headers["X-Request-ID"] == "req-42"
