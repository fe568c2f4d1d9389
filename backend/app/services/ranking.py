"""
Leaderboard figures derived from match participation.

Nothing here is stored: every call aggregates the full participant history,
so deleting a match is immediately reflected in the ranking. Queries are plain
SQL that runs unchanged on PostgreSQL and SQLite.
"""

import math

import sqlalchemy as sa
from sqlalchemy.orm import Session

from app.schemas.ranking import DashboardStatsOut, LeaderOut, RankingRow

DEFAULT_LIMIT = 10

_WINS_SQL = "SUM(CASE WHEN mp.is_winner THEN 1 ELSE 0 END)"

_RANKING_SQL = f"""
    SELECT u.id AS id,
           u.name AS name,
           u.last_name AS last_name,
           u.email AS email,
           COALESCE(SUM(mp.points), 0) AS total_points,
           COUNT(mp.id) AS matches,
           COALESCE({_WINS_SQL}, 0) AS wins,
           CASE WHEN COUNT(mp.id) = 0 THEN NULL
                ELSE ROUND(100.0 * {_WINS_SQL} / COUNT(mp.id), 2)
           END AS win_rate
    FROM users u
    LEFT JOIN match_participants mp ON mp.user_id = u.id
    GROUP BY u.id, u.name, u.last_name, u.email
    ORDER BY total_points DESC, u.id ASC
    LIMIT :limit OFFSET :offset
"""

_AVERAGE_SQL = """
    SELECT AVG(t.total_points) AS average_points
    FROM (
        SELECT COALESCE(SUM(mp.points), 0) AS total_points
        FROM users u
        LEFT JOIN match_participants mp ON mp.user_id = u.id
        GROUP BY u.id
    ) t
"""


def _round_half_up(value) -> int:
    return math.floor(float(value) + 0.5)


def _ranking_rows(db: Session, limit: int, offset: int) -> list[RankingRow]:
    rows = db.execute(sa.text(_RANKING_SQL), {"limit": limit, "offset": offset}).mappings().all()
    return [
        RankingRow(
            id=r["id"],
            name=r["name"],
            last_name=r["last_name"],
            email=r["email"],
            total_points=int(r["total_points"]),
            matches=int(r["matches"]),
            wins=int(r["wins"]),
            win_rate=float(r["win_rate"]) if r["win_rate"] is not None else None,
        )
        for r in rows
    ]


def clamp_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    limit = DEFAULT_LIMIT if limit is None else limit
    offset = 0 if offset is None else offset
    return max(1, limit), max(0, offset)


def get_ranking(db: Session, limit: int = DEFAULT_LIMIT, offset: int = 0) -> list[RankingRow]:
    """Every user with total_points, matches, wins and win_rate, best first."""
    limit, offset = clamp_page(limit, offset)
    return _ranking_rows(db, limit, offset)


def get_dashboard_stats(db: Session) -> DashboardStatsOut:
    total_players = db.execute(sa.text("SELECT COUNT(*) FROM users")).scalar_one()

    top = _ranking_rows(db, limit=1, offset=0)
    leader = None
    if top:
        leader = LeaderOut(
            id=top[0].id,
            name=top[0].name,
            last_name=top[0].last_name,
            email=top[0].email,
            total_points=top[0].total_points,
        )

    # Mean over per-user totals, users without matches counting as 0.
    average = db.execute(sa.text(_AVERAGE_SQL)).scalar_one()

    return DashboardStatsOut(
        total_players=int(total_players),
        leader=leader,
        average_points=_round_half_up(average) if average is not None else 0,
    )
