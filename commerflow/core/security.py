"""
Password hashing and access tokens.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs signed with
PyJWT and carry ``iss``/``aud`` claims that are checked on decode.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from commerflow.core.errors import AuthenticationError
from commerflow.core.logging_config import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 10

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str | int) -> timedelta:
    """Parse durations such as ``"30m"``, ``"24h"``, ``"7d"`` or a bare number of seconds.

    Raises:
        ValueError: If the value is not a recognised duration.
    """
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(value.lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain-text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _jwt_config():
    from commerflow.server.core.config import settings

    return settings.jwt


def create_access_token(subject_id: str, extra_claims: Optional[Dict[str, Any]] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        subject_id: The user id, stored in both ``sub`` and ``id``
        extra_claims: Additional claims to embed (e.g. role)

    Returns:
        Encoded JWT string
    """
    config = _jwt_config()
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        **(extra_claims or {}),
        "sub": subject_id,
        "id": subject_id,
        "iat": now,
        "exp": now + config.lifetime,
        "iss": config.issuer,
        "aud": config.audience,
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        AuthenticationError: If the token is expired, malformed or signed for another issuer/audience.
    """
    config = _jwt_config()
    try:
        return jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            issuer=config.issuer,
            audience=config.audience,
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected access token: {e}")
        raise AuthenticationError("Invalid token") from e
