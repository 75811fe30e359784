"""User application service for IAM bounded context.

Handles registration, password login, session resolution, password reset,
and the onboarding-completed flag.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.application.security import (
    hash_password,
    password_fingerprint,
    verify_password,
)
from iam.application.value_objects import SessionGrant
from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress, UserId
from iam.ports.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    NotAuthenticatedError,
    UserNotFoundError,
)
from iam.ports.repositories import IUserRepository
from iam.ports.session import IPasswordResetNotifier, ISessionStore
from shared_kernel.auth import InvalidTokenError
from shared_kernel.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 8


def _parse_email(raw: str) -> EmailAddress:
    try:
        return EmailAddress.parse(raw)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )


class UserService:
    """Application service for user accounts and sessions."""

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        session_store: ISessionStore,
        reset_notifier: IPasswordResetNotifier,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            session_store: Issues and verifies signed tokens
            reset_notifier: Delivers password-reset tokens
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._session = session
        self._session_store = session_store
        self._reset_notifier = reset_notifier
        self._probe = probe or DefaultUserServiceProbe()

    def _grant(self, user: User) -> SessionGrant:
        token = self._session_store.create_session(user.id.value)
        return SessionGrant(
            user=user,
            token=token,
            max_age_seconds=int(self._session_store.session_ttl.total_seconds()),
        )

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> SessionGrant:
        """Create an account and sign it in.

        Args:
            first_name: Given name
            last_name: Family name
            email: Login email (normalized before storage)
            password: Plaintext password, at least 8 characters

        Returns:
            SessionGrant for the new user

        Raises:
            ValidationError: If any field is invalid
            EmailAlreadyRegisteredError: If the email already has an account
        """
        address = _parse_email(email)
        _check_password(password)

        try:
            user = User.register(
                email=address,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

        try:
            async with self._session.begin():
                if await self._user_repository.get_by_email(address) is not None:
                    raise EmailAlreadyRegisteredError()
                await self._user_repository.save(user)
        except EmailAlreadyRegisteredError:
            self._probe.registration_rejected(
                email=address.value, reason="email_taken"
            )
            raise

        self._probe.user_registered(user_id=user.id.value, email=address.value)
        return self._grant(user)

    async def login(self, email: str, password: str) -> SessionGrant:
        """Verify credentials and issue a session.

        Raises:
            InvalidCredentialsError: For an unknown email or a wrong password
        """
        try:
            address = EmailAddress.parse(email)
        except ValueError:
            self._probe.login_failed(email=email)
            raise InvalidCredentialsError() from None

        async with self._session.begin():
            user = await self._user_repository.get_by_email(address)
        if user is None or not verify_password(password, user.password_hash):
            self._probe.login_failed(email=address.value)
            raise InvalidCredentialsError()

        self._probe.login_succeeded(user_id=user.id.value)
        return self._grant(user)

    async def resolve_session(self, token: str) -> User:
        """Return the user a session token belongs to.

        Raises:
            NotAuthenticatedError: If the token is invalid or the user is gone
        """
        try:
            claims = self._session_store.verify_session(token)
        except InvalidTokenError as e:
            raise NotAuthenticatedError(str(e)) from e

        async with self._session.begin():
            user = await self._user_repository.get_by_id(
                UserId(value=claims.user_id)
            )
        if user is None:
            raise NotAuthenticatedError("Session user no longer exists")
        return user

    async def request_password_reset(self, email: str) -> None:
        """Send a reset token if the account exists.

        Always succeeds so callers cannot probe which emails are registered.
        """
        try:
            address = EmailAddress.parse(email)
        except ValueError:
            self._probe.password_reset_requested(email=email, account_exists=False)
            return

        async with self._session.begin():
            user = await self._user_repository.get_by_email(address)
        if user is None:
            self._probe.password_reset_requested(
                email=address.value, account_exists=False
            )
            return

        token = self._session_store.issue_reset_token(
            user.id.value, password_fingerprint(user.password_hash)
        )
        await self._reset_notifier.send_reset_link(address.value, token)
        self._probe.password_reset_requested(email=address.value, account_exists=True)

    async def complete_password_reset(self, token: str, new_password: str) -> User:
        """Set a new password using a reset token.

        Raises:
            InvalidResetTokenError: If the token is invalid, expired, or used
            ValidationError: If the new password is too short
        """
        _check_password(new_password)
        try:
            claims = self._session_store.verify_reset_token(token)
        except InvalidTokenError as e:
            raise InvalidResetTokenError() from e

        async with self._session.begin():
            user = await self._user_repository.get_by_id(
                UserId(value=claims.user_id)
            )
            if user is None:
                raise InvalidResetTokenError()
            if password_fingerprint(user.password_hash) != claims.fingerprint:
                raise InvalidResetTokenError()

            user.change_password(hash_password(new_password))
            await self._user_repository.save(user)

        self._probe.password_reset_completed(user_id=user.id.value)
        return user

    async def complete_onboarding(self, user_id: str) -> None:
        """Set the user's onboarding-completed flag.

        Runs inside the caller's transaction when one is open.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self._user_repository.get_by_id(UserId(value=user_id))
        if user is None:
            raise UserNotFoundError(user_id)
        if user.onboarding_completed:
            return
        user.complete_onboarding()
        await self._user_repository.save(user)
        self._probe.onboarding_completed(user_id=user_id)
