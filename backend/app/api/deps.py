from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.errors import UnauthorizedError
from app.core.security import decode_token
from app.db.session import get_db
from app.models.user import User

# auto_error=False so a missing header is reported as 401, not 403.
bearer = HTTPBearer(auto_error=False)


def _get_user_from_access_token(creds: HTTPAuthorizationCredentials, db: Session) -> User:
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise UnauthorizedError("Invalid token", code="invalid_token")
    if payload.get("type") != "access":
        raise UnauthorizedError("Invalid token type", code="invalid_token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token", code="invalid_token")
    user = db.get(User, user_id)
    if not user:
        raise UnauthorizedError("User not found", code="invalid_token")
    return user


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if creds is None:
        raise UnauthorizedError("No token provided", code="missing_token")
    return _get_user_from_access_token(creds, db)
