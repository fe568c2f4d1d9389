from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.users import UserSummaryOut


class MatchCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Parsed by the service so an unparseable date fails in pipeline order.
    date: str | None = Field(default=None, examples=["2025-08-06T20:00:00.000Z"])
    players: list[int] = Field(default_factory=list, examples=[[1, 2, 3, 4]])
    winners: list[int] = Field(default_factory=list, examples=[[1, 4]])
    points_for_winners: int = Field(default=0, alias="pointsForWinners", examples=[50])
    points_for_losers: int = Field(default=0, alias="pointsForLosers", examples=[25])


class MatchParticipantOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    is_winner: bool = Field(alias="isWinner")
    points: int
    user: UserSummaryOut


class MatchOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    date: datetime
    points_for_winners: int = Field(alias="pointsForWinners")
    points_for_losers: int = Field(alias="pointsForLosers")
    created_at: datetime = Field(alias="createdAt")
    participants: list[MatchParticipantOut]


class MatchesOut(BaseModel):
    rows: list[MatchOut]
    limit: int
    offset: int
    next_offset: int | None


def match_out(match) -> MatchOut:
    """Render a Match row; participant identity comes from the creation-time snapshot."""
    return MatchOut(
        id=match.id,
        date=match.date,
        points_for_winners=match.points_for_winners,
        points_for_losers=match.points_for_losers,
        created_at=match.created_at,
        participants=[
            MatchParticipantOut(
                id=p.id,
                is_winner=p.is_winner,
                points=p.points,
                user=UserSummaryOut(
                    id=p.user_id,
                    name=p.user_name,
                    last_name=p.user_last_name,
                    email=p.user_email,
                ),
            )
            for p in match.participants
        ],
    )
