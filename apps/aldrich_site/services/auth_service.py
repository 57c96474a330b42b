"""
Authentication helpers: password hashing, JWT access tokens, email checks.

Access tokens are HS256 JWTs carrying the user id and the id of the
auth_sessions row they belong to, so signing out (revoking the row)
invalidates the token even before it expires.
"""

import os
import re
import secrets
import logging
from datetime import timedelta
from typing import Dict, Optional

import bcrypt
from jose import JWTError, jwt

from aldrich_site.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-change-me"


def _load_secret_key() -> str:
    """JWT signing key from JWT_SECRET_KEY; the dev key (with a warning outside tests) when unset."""
    secret = os.getenv("JWT_SECRET_KEY")
    if secret:
        return secret
    if os.getenv("ENV", "").lower() != "test":
        logger.warning("JWT_SECRET_KEY is not set; using the insecure development key")
    return DEV_SECRET_KEY


JWT_SECRET_KEY = _load_secret_key()
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days

MIN_PASSWORD_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (salted, so equal passwords hash differently)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT.

    Args:
        data: Claims to embed (e.g. user_id, session_id)
        expires_delta: Lifetime override; defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded token string
    """
    to_encode = dict(data)
    expire = utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Optional[Dict]:
    """Decode a JWT. Returns the claims, or None if invalid or expired."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None


def generate_session_token_id() -> str:
    """Random id for an auth_sessions row."""
    return secrets.token_urlsafe(32)


def validate_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email.strip()) is not None


def normalize_email(email: str) -> str:
    """
    Trim and lowercase an email address.

    Raises:
        ValueError: If the address is empty or malformed
    """
    if not email or not validate_email(email):
        raise ValueError("Please enter a valid email address")
    return email.strip().lower()


def validate_password(password: str) -> None:
    """Raises ValueError if the password is too short."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
