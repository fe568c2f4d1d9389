import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.security import hash_password
from app.models.user import User
from app.schemas.users import UserCreateIn, UserUpdateIn

logger = structlog.get_logger(__name__)


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    row = db.execute(sa.text("""
        SELECT id FROM users WHERE email=:e
    """), {"e": email}).first()
    return row is not None and row[0] != exclude_user_id


def create_user(db: Session, payload: UserCreateIn) -> User:
    if _email_taken(db, payload.email):
        raise ConflictError("Email already registered", code="email_taken")

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name,
        last_name=payload.last_name,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email.
        db.rollback()
        raise ConflictError("Email already registered", code="email_taken")
    db.refresh(user)

    logger.info("user_created", user_id=user.id)
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(sa.select(User).order_by(User.id)).all())


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="user_not_found")
    return user


def update_user(db: Session, user_id: int, payload: UserUpdateIn) -> User:
    changes = payload.changes()
    if not changes:
        raise ValidationError("At least one field must be sent to update", code="empty_update")

    user = get_user(db, user_id)

    if "email" in changes and _email_taken(db, changes["email"], exclude_user_id=user.id):
        raise ConflictError("Email already registered", code="email_taken")
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))

    for field, value in changes.items():
        setattr(user, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered", code="email_taken")
    db.refresh(user)

    logger.info("user_updated", user_id=user.id, fields=sorted(changes))
    return user


def delete_user(db: Session, user_id: int) -> None:
    """
    Delete a user while keeping their match history.

    Participant rows lose the link to the user but keep the identity
    snapshot taken when the match was recorded, so past matches still
    render and the user simply drops out of the ranking.
    """
    user = get_user(db, user_id)
    try:
        detached = db.execute(sa.text("""
            UPDATE match_participants SET user_id=NULL WHERE user_id=:u
        """), {"u": user.id}).rowcount
        db.delete(user)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("user_deleted", user_id=user_id, detached_participations=detached)
