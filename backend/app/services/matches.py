from datetime import datetime, timezone

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
import sqlalchemy as sa
from sqlalchemy.orm import Session
import structlog

from app.core.errors import NotFoundError, ValidationError
from app.db.base import INT_MAX
from app.models.match import Match, MatchParticipant
from app.schemas.match import MatchCreateIn

logger = structlog.get_logger(__name__)

PLAYERS_PER_MATCH = 4
WINNERS_PER_MATCH = 2

_datetime_adapter = TypeAdapter(datetime)


def _parse_date(raw: str | None) -> datetime:
    if raw is None or not raw.strip():
        raise ValidationError("Date is required", code="invalid_date")
    try:
        value = _datetime_adapter.validate_python(raw.strip())
    except PydanticValidationError:
        raise ValidationError(f"Date is not a valid timestamp: {raw!r}", code="invalid_date")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_match_input(payload: MatchCreateIn) -> datetime:
    """
    Run the store-independent checks in order and return the parsed date.

    The first failing rule wins; every rule has its own error code.
    """
    played_at = _parse_date(payload.date)

    players = payload.players
    winners = payload.winners

    if len(players) != PLAYERS_PER_MATCH:
        raise ValidationError("Players must be an array of 4 user ids", code="players_count")
    if len(winners) != WINNERS_PER_MATCH:
        raise ValidationError("Winners must be an array of 2 user ids", code="winners_count")
    if len(set(players)) != PLAYERS_PER_MATCH:
        raise ValidationError("Players must be 4 distinct users", code="players_not_distinct")
    if len(set(winners)) != WINNERS_PER_MATCH:
        raise ValidationError("Winners must be 2 distinct users", code="winners_not_distinct")
    if any(w not in players for w in winners):
        raise ValidationError("Each winner must be one of the selected players", code="winner_not_player")
    if not 0 < payload.points_for_winners <= INT_MAX or not 0 <= payload.points_for_losers <= INT_MAX:
        raise ValidationError(
            f"pointsForWinners must be between 1 and {INT_MAX} and pointsForLosers between 0 and {INT_MAX}",
            code="invalid_points",
        )

    return played_at


def _fetch_players(db: Session, user_ids: list[int]) -> dict[int, dict]:
    ids_bp = sa.bindparam("ids", expanding=True)

    rows = db.execute(
        sa.text("""
            SELECT id, name, last_name, email
            FROM users
            WHERE id IN :ids
        """).bindparams(ids_bp),
        {"ids": [uid for uid in user_ids if 0 < uid <= INT_MAX]},
    ).mappings().all()

    return {int(r["id"]): dict(r) for r in rows}


def _participant_rows(
    users_by_id: dict[int, dict],
    players: list[int],
    winners: list[int],
    points_for_winners: int,
    points_for_losers: int,
) -> list[MatchParticipant]:
    winner_set = set(winners)
    outcome = [(uid, True) for uid in winners] + [(uid, False) for uid in players if uid not in winner_set]

    rows = []
    for uid, is_winner in outcome:
        u = users_by_id[uid]
        rows.append(MatchParticipant(
            user_id=uid,
            is_winner=is_winner,
            points=points_for_winners if is_winner else -points_for_losers,
            user_name=u["name"],
            user_last_name=u["last_name"],
            user_email=u["email"],
        ))
    return rows


def create_match(db: Session, payload: MatchCreateIn) -> Match:
    played_at = validate_match_input(payload)

    try:
        users_by_id = _fetch_players(db, payload.players)
        missing = [uid for uid in payload.players if uid not in users_by_id]
        if missing:
            raise ValidationError(
                f"{len(missing)} of the selected players do not exist",
                code="players_not_found",
            )

        match = Match(
            date=played_at,
            points_for_winners=payload.points_for_winners,
            points_for_losers=payload.points_for_losers,
            participants=[],
        )
        db.add(match)
        db.flush()

        match.participants.extend(_participant_rows(
            users_by_id,
            payload.players,
            payload.winners,
            payload.points_for_winners,
            payload.points_for_losers,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(match)
    logger.info(
        "match_created",
        match_id=match.id,
        players=payload.players,
        winners=payload.winners,
        points_for_winners=payload.points_for_winners,
        points_for_losers=payload.points_for_losers,
    )
    return match


def list_matches(db: Session, limit: int = 50, offset: int = 0) -> list[Match]:
    stmt = (
        sa.select(Match)
        .order_by(Match.date.desc(), Match.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(db.scalars(stmt).all())


def get_match(db: Session, match_id: int) -> Match:
    match = db.get(Match, match_id)
    if match is None:
        raise NotFoundError("Match not found", code="match_not_found")
    return match


def delete_match(db: Session, match_id: int) -> Match:
    """Delete a match and its participants in one transaction; returns the match as it was."""
    try:
        match = get_match(db, match_id)
        # Touch the collection so the returned object keeps its participants.
        participant_count = len(match.participants)
        db.delete(match)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("match_deleted", match_id=match_id, participants=participant_count)
    return match
