import sqlalchemy as sa
from sqlalchemy.orm import Session
import structlog

from app.core.errors import UnauthorizedError
from app.core.security import create_access_token, verify_password
from app.models.user import User

logger = structlog.get_logger(__name__)


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    """Check credentials and issue an access token bound to the user's id and email."""
    user = db.scalars(sa.select(User).where(User.email == email.strip().lower())).first()

    # One bcrypt check on both failure paths.
    ok = verify_password(password, user.password_hash if user else None)
    if user is None or not ok:
        logger.warning("login_failed", reason="unknown_email" if user is None else "bad_password")
        raise UnauthorizedError("Invalid credentials", code="invalid_credentials")

    token = create_access_token(str(user.id), user.email)
    logger.info("login_succeeded", user_id=user.id)
    return user, token
