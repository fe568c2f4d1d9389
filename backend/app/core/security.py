from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt

from app.core.config import settings

ALGO = "HS256"

# bcrypt only looks at the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72

# Checked instead of a real hash when the email is unknown.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(sub: str, email: str) -> str:
    exp = now_utc() + timedelta(minutes=settings.JWT_ACCESS_MINUTES)
    payload = {"sub": sub, "email": email, "type": "access", "exp": exp}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGO)

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGO])

def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES

def hash_password(password: str) -> str:
    if not password_fits(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    raw = password.encode("utf-8")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")

def verify_password(password: str, password_hash: str | None) -> bool:
    raw = password.encode("utf-8")
    if password_hash is None or len(raw) > MAX_PASSWORD_BYTES:
        # Same bcrypt work as a real check, never a match.
        bcrypt.checkpw(raw[:MAX_PASSWORD_BYTES], _DUMMY_HASH)
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        return False
