import hashlib
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import bcrypt
from jose import JWTError, jwt

from bingo.config import settings

TOKEN_TYPE = "access"


def _digest(password: str) -> bytes:
    # bcrypt reads at most 72 bytes; hash first so long passphrases count in full
    return hashlib.sha256(password.encode("utf-8")).digest()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_digest(password), bcrypt.gensalt()).decode("ascii")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_digest(plain), hashed.encode("ascii"))


def create_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    """Signed session token for a user id."""
    issued = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or settings.access_token_expire_minutes)
    claims = {"sub": user_id, "typ": TOKEN_TYPE, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> str | None:
    """User id from a valid, unexpired session token; None otherwise."""
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if claims.get("typ") != TOKEN_TYPE:
        return None
    return claims.get("sub")


def generate_id() -> str:
    return str(uuid4())
