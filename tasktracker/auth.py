"""
Auth Service — password hashing, registration, login, token verification.

The signing key and token lifetime come from the ``Settings`` handed to the
constructor; nothing here reads the environment.
"""

import logging
import time
from typing import Optional

import bcrypt
import jwt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import Settings
from .database import DBUser
from .exceptions import (
    DuplicateEmail,
    InvalidCredential,
    MissingCredentials,
    ServerError,
    Unauthorized,
    UserNotFound,
)

log = logging.getLogger(__name__)

ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def _pw_bytes(password: str) -> bytes:
    return password.encode()[:MAX_PASSWORD_BYTES]


class AuthService:
    def __init__(self, settings: Settings):
        self.secret_key = settings.secret_key
        self.token_expiry_seconds = settings.token_expiry_seconds
        self.bcrypt_rounds = settings.bcrypt_rounds

    # ── Passwords ────────────────────────────────────────────────────────────

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_pw_bytes(password), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode()

    @staticmethod
    def check_password(password: str, hashed: str) -> bool:
        return bcrypt.checkpw(_pw_bytes(password), hashed.encode())

    # ── Tokens ───────────────────────────────────────────────────────────────

    def create_token(self, user: DBUser) -> str:
        now = int(time.time())
        payload = {
            "sub": user.id,
            "id": user.id,
            "email": user.email,
            "iat": now,
            "exp": now + self.token_expiry_seconds,
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: Optional[str]) -> str:
        """Return the token subject (user id) or raise ``Unauthorized``."""
        if not token:
            raise Unauthorized("No token found")
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthorized("Token expired")
        except jwt.InvalidTokenError:
            raise Unauthorized("Invalid or expired token")
        return payload["sub"]

    # ── Accounts ─────────────────────────────────────────────────────────────

    def register(self, db: Session, username: str, email: str, password: str) -> DBUser:
        try:
            if db.query(DBUser).filter(DBUser.email == email).first() is not None:
                raise DuplicateEmail()

            user = DBUser(username=username, email=email, password_hash=self.hash_password(password))
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            # lost a race with another registration for the same email
            db.rollback()
            raise DuplicateEmail()
        except SQLAlchemyError:
            db.rollback()
            log.exception("Failed to register %s", email)
            raise ServerError("Failed to register")
        log.info("Registered user %s", user.id)
        return user

    def login(self, db: Session, email: Optional[str], password: Optional[str]):
        """Return ``(token, user)`` for valid credentials."""
        if not email or not password:
            raise MissingCredentials()

        log.info("Login request received: %s", email)
        try:
            user = db.query(DBUser).filter(DBUser.email == email).first()
        except SQLAlchemyError:
            log.exception("Server error during login")
            raise ServerError("Internal server error during login")

        if user is None:
            raise UserNotFound()
        if not self.check_password(password, user.password_hash):
            raise InvalidCredential()

        return self.create_token(user), user
