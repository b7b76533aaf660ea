"""Authentication endpoints: login, registration, tokens, e-mail flows."""

from __future__ import annotations

from flask import Blueprint, request

from accounts.api.deps import envelope, timing
from accounts.container import get_container
from accounts.core.errors import BadRequest
from accounts.schemas import (
    EmailSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenPairSchema,
    TokenSchema,
)
from accounts.services.auth.dto import LoginIn, RefreshIn, RegisterIn, ResetPasswordIn

bp = Blueprint("auth", __name__)

REFRESH_HEADER = "X-Refresh-Token"

login_schema = LoginSchema()
login_response_schema = LoginResponseSchema()
register_schema = RegisterSchema()
refresh_schema = RefreshTokenSchema()
token_pair_schema = TokenPairSchema()
email_schema = EmailSchema()
token_schema = TokenSchema()
reset_password_schema = ResetPasswordSchema()


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    data = login_schema.load(_json_body())
    result = get_container().auth.login(LoginIn(email=data["email"], password=data["password"]))
    body = login_response_schema.dump(
        {
            "access_token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
            "access_expires_at": result.tokens.access_expires_at,
            "refresh_expires_at": result.tokens.refresh_expires_at,
            "user": result.user,
        }
    )
    return envelope("login successful", body)


@bp.post("/register")
@timing
def register():
    """Create an inactive account and send the verification e-mail."""

    data = register_schema.load(_json_body())
    get_container().auth.register(
        RegisterIn(name=data["name"], email=data["email"], password=data["password"])
    )
    return envelope("registration successful, please verify your email", status=201)


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate a refresh token. Reads ``X-Refresh-Token`` first, then the JSON body."""

    token = request.headers.get(REFRESH_HEADER) or refresh_schema.load(_json_body())["refresh_token"]
    if not token:
        raise BadRequest("refresh token is required", code="refresh_token_required")
    pair = get_container().auth.refresh_token(RefreshIn(refresh_token=token))
    return envelope("token refreshed", token_pair_schema.dump(pair))


@bp.route("/verify-email", methods=["GET", "POST"])
@timing
def verify_email():
    """Activate an account. Token comes from ``?token=`` or the JSON body."""

    source = request.args if request.method == "GET" else _json_body()
    data = token_schema.load({"token": source.get("token")} if source.get("token") else {})
    get_container().auth.verify_email(data["token"])
    return envelope("email verified")


@bp.post("/send-verify-email")
@timing
def send_verify_email():
    data = email_schema.load(_json_body())
    get_container().auth.send_verify_email(data["email"])
    return envelope("verification email sent")


@bp.post("/send-reset-password")
@timing
def send_reset_password():
    data = email_schema.load(_json_body())
    get_container().auth.send_reset_password(data["email"])
    return envelope("reset password email sent")


@bp.post("/reset-password")
@timing
def reset_password():
    data = reset_password_schema.load(_json_body())
    get_container().auth.reset_password(
        ResetPasswordIn(token=data["token"], new_password=data["new_password"])
    )
    return envelope("password reset successful")
