"""Account creation, credential checks and session token issuance."""
from __future__ import annotations

import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from pydantic import ValidationError

from conduit.errors import NotFound, ValidationConflict
from conduit.models import User
from conduit.schemas import NewUser, UserUpdate, UserView
from conduit.services.user_store import UNIQUE_VIOLATION, CredentialStore

logger = logging.getLogger("conduit.auth")

DEFAULT_TOKEN_DAYS = 60


def hash_password(password: str) -> str:
    """HMAC-SHA256 keyed by the password over an empty message.

    Deterministic in the password alone, so login can look the user up by
    (email, hash) directly.
    """
    return hmac.new(password.encode("utf-8"), b"", hashlib.sha256).hexdigest()


def _validation_errors(exc: ValidationError) -> dict[str, str]:
    errors = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "user"
        errors.setdefault(field, err["msg"])
    return errors


class AuthService:
    """Identity lifecycle and token issuance.

    The signing secret is passed in rather than read from config so tests
    and secret rotation can use their own.
    """

    def __init__(
        self,
        users: CredentialStore,
        secret: str,
        algorithm: str = "HS256",
        token_days: int = DEFAULT_TOKEN_DAYS,
    ) -> None:
        if not secret:
            raise ValueError("A token signing secret is required")
        self.users = users
        self._secret = secret
        self._algorithm = algorithm
        self._token_days = token_days

    # --- tokens ---

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        """Sign {email, username, id, exp} with exp = now + 60 calendar days."""
        issued = now or datetime.now(timezone.utc)
        exp = issued + timedelta(days=self._token_days)
        payload = {
            "email": user.email,
            "username": user.username,
            "id": user.id,
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError:
            return None

    def build_view(self, user: User) -> UserView:
        return UserView(
            username=user.username,
            email=user.email,
            bio=user.bio,
            image=user.image,
            token=self.issue_token(user),
        )

    # --- accounts ---

    async def create_account(self, username: str, email: str, password: str) -> UserView:
        """Create a user after the uniqueness and structural checks pass.

        Raises ValidationConflict (nothing is written) when username or email
        is taken or the record is malformed. The unique indexes on the store
        catch signups that race past the existence check.
        """
        username, email = (username or "").strip(), (email or "").strip()
        if not username or not email:
            raise ValidationConflict(
                "Input data validation failed", {"username": "Username and email are required."}
            )
        if await self.users.count_any(username=username, email=email) > 0:
            logger.info("Signup rejected: username or email already registered")
            raise ValidationConflict("Input data validation failed", UNIQUE_VIOLATION)
        if not password:
            raise ValidationConflict("Input data validation failed", {"password": "Password is required."})
        try:
            record = NewUser(username=username, email=email, password_hash=hash_password(password))
        except ValidationError as e:
            raise ValidationConflict("Input data validation failed", _validation_errors(e)) from e

        user = await self.users.insert(User(**record.model_dump()))
        logger.info("Created user %s (id=%s)", user.username, user.id)
        return self.build_view(user)

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user whose email and password hash both match, else None."""
        return await self.users.find_one(email=email, password_hash=hash_password(password))

    async def list_users(self) -> list[User]:
        return await self.users.find_all()

    async def find_by_id(self, user_id: int) -> UserView:
        user = await self.users.find_one(id=user_id)
        if not user:
            raise NotFound("User not found", {"User": " not found"}, status_code=401)
        return self.build_view(user)

    async def find_by_email(self, email: str) -> UserView:
        user = await self.users.find_one(email=email)
        if not user:
            raise NotFound("User not found", {"User": " not found"})
        return self.build_view(user)

    async def update(self, user_id: int, fields: dict[str, Any]) -> UserView:
        """Apply a partial update.

        Username/email changes are not re-checked for uniqueness here; only
        the store's unique indexes reject a collision.
        """
        try:
            changes = UserUpdate(**fields).model_dump(exclude_unset=True)
        except ValidationError as e:
            raise ValidationConflict("Input data validation failed", _validation_errors(e)) from e
        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))
        user = await self.users.update_fields(user_id, changes)
        if not user:
            raise NotFound("User not found", {"User": " not found"})
        logger.info("Updated user %s fields: %s", user_id, ", ".join(sorted(changes)) or "none")
        return self.build_view(user)

    async def delete_by_email(self, email: str) -> int:
        removed = await self.users.delete_matching(email=email)
        logger.info("Deleted %d user(s) by email", removed)
        return removed
