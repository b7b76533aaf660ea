"""Authentication lifecycle: login, registration, refresh rotation, logout,
e-mail verification and password reset."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from accounts.models.user import Gender, User
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import (
    EmailAlreadyExistsError,
    PasswordMismatchError,
    TokenInvalidError,
    UserNotFoundError,
    violates,
)
from accounts.services._shared.policies import (
    check_email,
    check_name,
    check_password_strength,
    normalize_email,
)
from accounts.services._shared.ports import (
    PasswordHasher,
    RefreshTokenRecord,
    RefreshTokenStore,
    TokenSigner,
)
from accounts.services.auth.action_tokens import ActionTokens
from accounts.services.auth.dto import (
    LoginIn,
    LoginOut,
    RefreshIn,
    RegisterIn,
    ResetPasswordIn,
    TokenPairOut,
)
from accounts.services.notifications import EmailNotifier
from accounts.services.users.dto import UserPublicOut

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service.

    Access and refresh tokens come from a pluggable :class:`TokenSigner`;
    refresh tokens are also recorded in a :class:`RefreshTokenStore` so they
    can be rotated and revoked. One-time action tokens are stateless.

    Store calls are made outside of any unit of work because the SQL store
    commits on its own.
    """

    def __init__(
        self,
        *,
        signer: TokenSigner,
        refresh_store: RefreshTokenStore,
        hasher: PasswordHasher,
        action_tokens: ActionTokens,
        notifier: EmailNotifier,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param signer: Issues and validates access/refresh JWTs.
        :param refresh_store: Server-side refresh token state.
        :param hasher: Password hasher.
        :param action_tokens: Verification/reset token codec.
        :param notifier: Sends verification and reset e-mails.
        """
        self.signer = signer
        self.refresh_store = refresh_store
        self.hasher = hasher
        self.action_tokens = action_tokens
        self.notifier = notifier

    # ------------------------------------------------------------------ #
    # Login / refresh / logout
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Token pair plus the public user view.
        :raises UserNotFoundError: Unknown email or account not yet verified.
        :raises PasswordMismatchError: Wrong password for an active account.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(normalize_email(dto.email))
            if user is None or not user.is_active:
                raise UserNotFoundError()
            if not self.hasher.verify(user.password_hash, dto.password):
                raise PasswordMismatchError()
            out = UserPublicOut.from_model(user)

        tokens = self._issue_pair(out.id, out.email)
        logger.info("auth.login", extra={"user_id": out.id})
        return LoginOut(tokens=tokens, user=out)

    def refresh_token(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        The old token is revoked before the new one is stored. When two
        callers race with the same token only the one that wins
        ``revoke_by_token`` gets a pair.

        :raises TokenInvalidError: Bad signature, wrong type, expired,
            revoked, or lost the rotation race.
        :raises UserNotFoundError: The token owner no longer exists.
        """
        claims = self.signer.validate_refresh_token(dto.refresh_token)
        if not self.refresh_store.is_token_valid(dto.refresh_token):
            logger.info("auth.refresh.rejected", extra={"user_id": claims.user_id})
            raise TokenInvalidError()

        with self.ro_uow() as uow:
            user = uow.users.get(claims.user_id)
            if user is None:
                raise UserNotFoundError(claims.user_id)
            user_id, email = user.id, user.email

        access = self.signer.issue_access_token(user_id=user_id, email=email)
        refresh = self.signer.issue_refresh_token(user_id=user_id)

        if not self.refresh_store.revoke_by_token(dto.refresh_token):
            logger.info("auth.refresh.rejected", extra={"user_id": user_id})
            raise TokenInvalidError()

        self.refresh_store.save(
            RefreshTokenRecord(user_id=user_id, token=refresh.token, expires_at=refresh.expires_at)
        )
        logger.info("auth.refresh", extra={"user_id": user_id})
        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh.token,
            access_expires_at=access.expires_at,
            refresh_expires_at=refresh.expires_at,
        )

    def logout(self, user_id: int) -> None:
        """Revoke every refresh token of ``user_id``. Idempotent."""
        revoked = self.refresh_store.revoke_all_by_user_id(user_id)
        logger.info("auth.logout", extra={"user_id": user_id, "revoked": revoked})

    # ------------------------------------------------------------------ #
    # Registration and e-mail verification
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> None:
        """
        Create an inactive account and send the verification e-mail.

        E-mail delivery is best-effort: any failure is logged and the
        registration still succeeds.

        :raises PolicyViolationError: Email or password break the policy.
        :raises EmailAlreadyExistsError: Email already taken (deleted accounts included).
        """
        name = check_name(dto.name)
        email = check_email(dto.email)
        check_password_strength(dto.password)

        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(email):
                    raise EmailAlreadyExistsError()
                user = User(
                    name=name,
                    email=email,
                    password_hash=self.hasher.hash(dto.password),
                    gender=Gender.UNKNOWN,
                    is_active=False,
                )
                uow.users.add(user)
                user_id = user.id
        except IntegrityError as exc:
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise EmailAlreadyExistsError() from exc
            raise

        logger.info("auth.register", extra={"user_id": user_id})
        self._notify_verify(user_id=user_id, email=email, name=name)

    def verify_email(self, token: str) -> None:
        """
        Activate the account named by a verification token.

        :raises TokenInvalidError: Token cannot be decrypted or parsed.
        :raises TokenExpiredError: Token is past its expiry.
        :raises InvalidIDFormatError: Token subject is not a user id.
        :raises UserNotFoundError: No such user.
        """
        user_id = self.action_tokens.read_verify(token)
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            uow.users.activate(user)
        logger.info("auth.verify_email", extra={"user_id": user_id})

    def send_verify_email(self, email: str) -> None:
        """
        Re-send the verification e-mail. Sent even if the account is active.

        :raises UserNotFoundError: No live account with ``email``.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(normalize_email(email))
            if user is None:
                raise UserNotFoundError()
            user_id, address, name = user.id, user.email, user.name
        self._notify_verify(user_id=user_id, email=address, name=name)

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def send_reset_password(self, email: str) -> None:
        """
        Send a password reset link.

        :raises UserNotFoundError: No live account with ``email``.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(normalize_email(email))
            if user is None:
                raise UserNotFoundError()
            user_id, address, name = user.id, user.email, user.name

        try:
            token = self.action_tokens.issue_reset(address)
            self.notifier.send_reset_password(to=address, name=name, token=token)
        except Exception:
            logger.exception("email.dispatch_failed", extra={"user_id": user_id, "task": "email.reset_password"})

    def reset_password(self, dto: ResetPasswordIn) -> None:
        """
        Set a new password using a reset token.

        :raises TokenInvalidError: Token cannot be decrypted or parsed.
        :raises TokenExpiredError: Token is past its expiry.
        :raises UserNotFoundError: The e-mail in the token has no live account.
        :raises PolicyViolationError: ``new_password`` breaks the policy.
        """
        email = self.action_tokens.read_reset(dto.token)
        check_password_strength(dto.new_password)
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                raise UserNotFoundError()
            uow.users.set_password_hash(user, self.hasher.hash(dto.new_password))
            user_id = user.id
        logger.info("auth.reset_password", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user_id: int, email: str) -> TokenPairOut:
        access = self.signer.issue_access_token(user_id=user_id, email=email)
        refresh = self.signer.issue_refresh_token(user_id=user_id)
        self.refresh_store.save(
            RefreshTokenRecord(user_id=user_id, token=refresh.token, expires_at=refresh.expires_at)
        )
        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh.token,
            access_expires_at=access.expires_at,
            refresh_expires_at=refresh.expires_at,
        )

    def _notify_verify(self, *, user_id: int, email: str, name: str) -> None:
        try:
            token = self.action_tokens.issue_verify(user_id)
            self.notifier.send_verify_email(to=email, name=name, token=token)
        except Exception:
            logger.exception("email.dispatch_failed", extra={"user_id": user_id, "task": "email.verify"})
