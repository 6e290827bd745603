# travel_auth/services/auth/service.py
from __future__ import annotations

import logging

from travel_auth.services._shared.base import BaseService
from travel_auth.services._shared.entities import (
    RefreshToken,
    RefreshTokenID,
    RevokedToken,
    RevokedTokenID,
    User,
    UserID,
)
from travel_auth.services._shared.errors import (
    ConflictError,
    ErrorKind,
    InvalidCredentialsError,
    ServiceError,
    is_kind,
)
from travel_auth.services._shared.ports import (
    Clock,
    IdGenerator,
    PasswordHasher,
    RefreshTokenStore,
    RevokedTokenStore,
    SystemClock,
    TokenIssuer,
    TransactionManager,
    UserStore,
    UUIDGenerator,
)
from travel_auth.services.auth.dto import AuthTokenConfig, PruneResult, TokenPair

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Credential and session lifecycle service (register / login / refresh / logout).

    Access tokens come from a pluggable :class:`TokenIssuer`. Refresh tokens
    are opaque values backed by :class:`RefreshTokenStore` rows; each use
    rotates the row and leaves a :class:`RevokedToken` tombstone so a later
    replay of the spent value is recognised as theft and the owner's whole
    session family is revoked.

    The service holds no mutable state of its own.
    """

    log = logging.getLogger(__name__)

    def __init__(
        self,
        *,
        users: UserStore,
        refresh_tokens: RefreshTokenStore,
        revoked_tokens: RevokedTokenStore,
        tx: TransactionManager,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param users: User persistence.
        :param refresh_tokens: Active refresh-token persistence.
        :param revoked_tokens: Tombstone persistence.
        :param tx: Runs multi-step writes atomically.
        :param password_hasher: One-way password hashing.
        :param token_issuer: Access-token signing and refresh-token generation.
        :param clock: Time source (wall clock by default).
        :param id_generator: Entity id source (UUID4 by default).
        :param token_cfg: Refresh-token lifetime.
        """
        self.users = users
        self.refresh_tokens = refresh_tokens
        self.revoked_tokens = revoked_tokens
        self.tx = tx
        self.hasher = password_hasher
        self.issuer = token_issuer
        self.clock = clock or SystemClock()
        self.ids = id_generator or UUIDGenerator()
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, username: str, email: str, password: str) -> UserID:
        """
        Create a new user.

        The two pre-checks give a precise per-field conflict in the common
        case; the unique constraints enforced by ``UserStore.create`` still
        decide races between concurrent registrations.

        :returns: Id of the created user.
        :raises ConflictError: ``field`` is ``"username"`` or ``"email"``.
        :raises ValidationError: If an argument is empty.
        :raises InternalError: On any store or hashing failure.
        """
        self.require(username=username, email=email, password=password)
        user_id = self.guarded(
            "auth.register.failed", self._register, username, email, password
        )
        log.info(
            "auth.register.succeeded",
            extra={"event": "auth.register.succeeded", "user_id": str(user_id)},
        )
        return user_id

    def _register(self, username: str, email: str, password: str) -> UserID:
        if self.find_or_none(self.users.find_by_username, username) is not None:
            raise ConflictError("User", "username", "username already exists")
        if self.find_or_none(self.users.find_by_email, email) is not None:
            raise ConflictError("User", "email", "email already exists")

        now = self.clock.now()
        user = User(
            id=UserID(self.ids.new_id()),
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
            created_at=now,
            updated_at=now,
        )
        self.tx.run_in_tx(lambda: self.users.create(user))
        return user.id

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, email: str, password: str) -> TokenPair:
        """
        Verify credentials and start a new session.

        Unknown email and wrong password raise the same
        :class:`InvalidCredentialsError`. The refresh row is written in the
        same transaction that issues the tokens, so no pair is returned
        without a durable session behind it.

        :raises InvalidCredentialsError: On any credential mismatch.
        :raises InternalError: On any collaborator failure.
        """
        self.require(email=email, password=password)
        try:
            user_id, pair = self.guarded(
                "auth.login.failed", self.tx.run_in_tx, lambda: self._login(email, password)
            )
        except InvalidCredentialsError:
            log.info("auth.login.rejected", extra={"event": "auth.login.rejected"})
            raise
        log.info(
            "auth.login.succeeded",
            extra={"event": "auth.login.succeeded", "user_id": str(user_id)},
        )
        return pair

    def _login(self, email: str, password: str) -> tuple[UserID, TokenPair]:
        user = self.find_or_none(self.users.find_by_email, email)
        if user is None or not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()
        return user.id, self._start_session(user.id)

    # ------------------------------------------------------------------ #
    # Refresh with rotation and reuse detection
    # ------------------------------------------------------------------ #

    def refresh_session(self, refresh_token: str) -> TokenPair:
        """
        Rotate a refresh token and emit a new token pair.

        Checks run in a fixed order:

        1. A tombstone for the value means it was already spent: revoke every
           session of its owner and fail.
        2. No active row, or an expired one (which is deleted), fails.
        3. Otherwise, in one transaction: write the tombstone, delete the old
           row (exactly one concurrent caller sees a row removed), then issue
           and persist the new pair.

        :raises InvalidCredentialsError: Unknown, expired, consumed or reused token.
        :raises InternalError: On any collaborator failure.
        """
        self.require(refresh_token=refresh_token)
        return self.guarded("auth.refresh.failed", self._refresh, refresh_token)

    def _refresh(self, token_value: str) -> TokenPair:
        tombstone = self.find_or_none(self.revoked_tokens.find_by_token_value, token_value)
        if tombstone is not None:
            self._revoke_family(tombstone)
            raise InvalidCredentialsError()

        current = self.find_or_none(self.refresh_tokens.find_by_token_value, token_value)
        if current is None:
            log.info("auth.refresh.unknown_token", extra={"event": "auth.refresh.unknown_token"})
            raise InvalidCredentialsError()

        now = self.clock.now()
        if current.is_expired(now):
            # Own transaction so the delete commits even though we fail.
            self.tx.run_in_tx(lambda: self.refresh_tokens.delete_by_id(current.id))
            log.info(
                "auth.refresh.expired",
                extra={"event": "auth.refresh.expired", "user_id": str(current.user_id)},
            )
            raise InvalidCredentialsError()

        pair = self.tx.run_in_tx(lambda: self._rotate(current))
        log.info(
            "auth.refresh.rotated",
            extra={"event": "auth.refresh.rotated", "user_id": str(current.user_id)},
        )
        return pair

    def _rotate(self, current: RefreshToken) -> TokenPair:
        tombstone = RevokedToken(
            id=RevokedTokenID(self.ids.new_id()),
            user_id=current.user_id,
            token_value=current.token_value,
            expires_at=current.expires_at,
            revoked_at=self.clock.now(),
        )
        try:
            self.revoked_tokens.create(tombstone)
        except ServiceError as exc:
            if is_kind(exc, ErrorKind.CONFLICT):
                self._log_lost_race(current)
                raise InvalidCredentialsError() from exc
            raise

        if self.refresh_tokens.delete_by_id(current.id) != 1:
            self._log_lost_race(current)
            raise InvalidCredentialsError()

        return self._start_session(current.user_id)

    def _revoke_family(self, tombstone: RevokedToken) -> None:
        """Delete every refresh token of the tombstone's owner; failures are only logged."""
        log.warning(
            "auth.refresh.reuse_detected",
            extra={"event": "auth.refresh.reuse_detected", "user_id": str(tombstone.user_id)},
        )
        try:
            owners = {tombstone.user_id}
            # A raced rotation may have left an active row under the same value.
            active = self.find_or_none(
                self.refresh_tokens.find_by_token_value, tombstone.token_value
            )
            if active is not None:
                owners.add(active.user_id)
            removed = self.tx.run_in_tx(
                lambda: sum(
                    self.refresh_tokens.delete_all_by_user(owner)
                    for owner in sorted(owners, key=str)
                )
            )
        except Exception:
            log.error(
                "auth.refresh.family_revocation_failed",
                exc_info=True,
                extra={
                    "event": "auth.refresh.family_revocation_failed",
                    "user_id": str(tombstone.user_id),
                },
            )
            return
        log.info(
            "auth.refresh.family_revoked",
            extra={
                "event": "auth.refresh.family_revoked",
                "user_id": str(tombstone.user_id),
                "revoked": removed,
            },
        )

    @staticmethod
    def _log_lost_race(current: RefreshToken) -> None:
        log.info(
            "auth.refresh.already_consumed",
            extra={"event": "auth.refresh.already_consumed", "user_id": str(current.user_id)},
        )

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def revoke_session(self, refresh_token: str) -> None:
        """
        Delete the session behind ``refresh_token``; unknown tokens are a no-op.

        No tombstone is written, so a later presentation of the same value is
        treated as unknown rather than reused.

        :raises InternalError: On any collaborator failure.
        """
        self.require(refresh_token=refresh_token)
        self.guarded("auth.logout.failed", self._revoke, refresh_token)

    def _revoke(self, token_value: str) -> None:
        current = self.find_or_none(self.refresh_tokens.find_by_token_value, token_value)
        if current is None:
            log.info("auth.logout.unknown_token", extra={"event": "auth.logout.unknown_token"})
            return
        self.tx.run_in_tx(lambda: self.refresh_tokens.delete_by_id(current.id))
        log.info(
            "auth.logout.succeeded",
            extra={"event": "auth.logout.succeeded", "user_id": str(current.user_id)},
        )

    # ------------------------------------------------------------------ #
    # Housekeeping
    # ------------------------------------------------------------------ #

    def prune_expired(self) -> PruneResult:
        """Delete expired refresh tokens and tombstones in one transaction."""
        now = self.clock.now()

        def work() -> PruneResult:
            return PruneResult(
                refresh_tokens=self.refresh_tokens.delete_expired(now),
                revoked_tokens=self.revoked_tokens.delete_expired(now),
            )

        result = self.guarded("auth.prune.failed", self.tx.run_in_tx, work)
        log.info(
            "auth.prune.completed",
            extra={
                "event": "auth.prune.completed",
                "revoked": result.refresh_tokens + result.revoked_tokens,
            },
        )
        return result

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _start_session(self, user_id: UserID) -> TokenPair:
        """Issue a token pair and persist its refresh row (caller owns the tx)."""
        access = self.issuer.issue_access_token(user_id)
        token_value = self.issuer.generate_refresh_token()
        now = self.clock.now()
        self.refresh_tokens.create(
            RefreshToken(
                id=RefreshTokenID(self.ids.new_id()),
                user_id=user_id,
                token_value=token_value,
                expires_at=now + self.cfg.refresh_expires,
                created_at=now,
            )
        )
        return TokenPair(access_token=access, refresh_token=token_value)
