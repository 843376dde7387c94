"""
Authentication service layer.

- Email/password accounts with bcrypt hashes
- Signed JWT bearer tokens (account id + role) with a fixed validity window
- Token resolution back to a live account for the access guard
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from ..models.account import Account, Role, normalize_email
from ..stores.accounts import AccountStore
from ..stores.document_store import DuplicateKeyError
from ..utils.config import AuthSettings
from ..utils.exceptions import (
    AlreadyExists,
    AuthenticationFailure,
    InvalidCredentials,
    ValidationFailure,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def _password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt. Raises ValidationFailure past 72 UTF-8 bytes."""
    if _password_too_long(password):
        raise ValidationFailure(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash (constant-time)."""
    if _password_too_long(password):
        # never hashable, so never a stored password
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False


@dataclass(frozen=True)
class LoginResult:
    token: str
    email: str
    role: Role


class Authenticator:
    """Registers accounts, checks credentials and issues/verifies tokens."""

    def __init__(self, accounts: AccountStore, settings: AuthSettings):
        self.accounts = accounts
        self.settings = settings

    def register(self, email: str, password: str, role: Optional[Role] = None) -> Account:
        """
        Create a new account.

        - Email must be unique (compared normalized).
        - Password is stored only as a bcrypt hash.
        """
        email = normalize_email(email)
        if not email or not password:
            raise ValidationFailure("Email and password are required")

        account = Account(
            email=email,
            password_hash=hash_password(password, self.settings.bcrypt_rounds),
            role="admin" if role == "admin" else "user",
        )
        try:
            account = self.accounts.insert(account)
        except DuplicateKeyError:
            logger.info("Registration rejected, email taken", email=email)
            raise AlreadyExists()
        logger.info("Account registered", account_id=account.id, email=email, role=account.role)
        return account

    def login(self, email: str, password: str) -> LoginResult:
        """Return a signed token for valid credentials, else InvalidCredentials."""
        account = self.accounts.find_by_email(email)
        if account is None or not verify_password(password or "", account.password_hash):
            logger.warning("Login failed", email=normalize_email(email))
            raise InvalidCredentials()
        token = self.issue_token(account)
        logger.info("Login succeeded", account_id=account.id)
        return LoginResult(token=token, email=account.email, role=account.role)

    def issue_token(self, account: Account, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": account.id,
            "role": account.role,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=self.settings.token_ttl_minutes)).timestamp()),
        }
        return jwt.encode(payload, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)

    def decode_token(self, token: str) -> dict:
        """Verify signature and expiry; raises AuthenticationFailure."""
        try:
            return jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
            )
        except ExpiredSignatureError:
            raise AuthenticationFailure("Token has expired")
        except JWTError:
            raise AuthenticationFailure("Invalid authentication token")

    def resolve(self, token: str) -> Account:
        """Token -> live account. A deleted account invalidates its tokens."""
        payload = self.decode_token(token)
        account_id = payload.get("sub")
        if not account_id:
            raise AuthenticationFailure("Invalid token: missing account id")
        account = self.accounts.get(account_id)
        if account is None:
            raise AuthenticationFailure("Account no longer exists")
        return account

    def ensure_admin(self, email: Optional[str], password: Optional[str]) -> Optional[Account]:
        """
        Seed a bootstrap admin if configured and not present yet.
        Idempotent; an existing account with that email is left as is.
        """
        if not email or not password:
            return None
        existing = self.accounts.find_by_email(email)
        if existing is not None:
            return existing
        try:
            account = self.register(email, password, role="admin")
        except AlreadyExists:
            # seeded concurrently by another worker
            return self.accounts.find_by_email(email)
        logger.info("Bootstrap admin created", email=account.email)
        return account
