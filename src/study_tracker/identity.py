"""Identity gate and a local identity provider."""
import hashlib
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime

import bcrypt

from study_tracker.db import get_connection
from study_tracker.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class User:
    id: int
    email: str
    name: str


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Authenticated:
    user: User


@dataclass(frozen=True)
class Unauthenticated:
    pass


AuthState = Loading | Authenticated | Unauthenticated


def _password_bytes(password: str) -> bytes:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        # longer passwords are pre-hashed so every byte still counts
        raw = hashlib.sha256(raw).hexdigest().encode("utf-8")
    return raw


def hash_password(password: str) -> str:
    """bcrypt hash with a fresh salt embedded in the result."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


class LocalIdentityProvider:
    """Email/password accounts kept in the local database.

    Starts in the Loading state until ``load`` is called.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.state: AuthState = Loading()

    def load(self) -> AuthState:
        self.state = Unauthenticated()
        return self.state

    @property
    def current_user(self) -> User | None:
        return self.state.user if isinstance(self.state, Authenticated) else None

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)

    def sign_up(self, email: str, password: str, name: str, confirm: str | None = None) -> User:
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or not password or not name:
            raise ValidationError("Email, password and name are required")
        if confirm is not None and confirm != password:
            raise ValidationError("Passwords do not match")
        conn = get_connection(self.db_path)
        try:
            cur = conn.execute(
                "INSERT INTO users (email, name, password_hash, created_at) VALUES (?, ?, ?, ?)",
                (email, name, hash_password(password), datetime.now().isoformat()),
            )
            conn.commit()
        except sqlite3.IntegrityError:
            raise AuthenticationError(f"An account already exists for {email}") from None
        finally:
            conn.close()
        user = User(id=cur.lastrowid, email=email, name=name)
        self.state = Authenticated(user)
        logger.info("Signed up %s", email)
        return user

    def sign_in(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        conn.close()
        if not row or not verify_password(password, row["password_hash"]):
            raise AuthenticationError("Invalid email or password")
        user = User(id=row["id"], email=row["email"], name=row["name"])
        self.state = Authenticated(user)
        logger.info("Signed in %s", email)
        return user

    def sign_out(self) -> None:
        self.state = Unauthenticated()
