import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base

class Match(Base):
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    date: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    points_for_winners: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    points_for_losers: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    created_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())

    participants: Mapped[list["MatchParticipant"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="MatchParticipant.id",
        lazy="selectin",
    )

    __table_args__ = (
        sa.Index("ix_matches_date_id", "date", "id"),
        sa.CheckConstraint("points_for_winners > 0", name="ck_match_points_for_winners"),
        sa.CheckConstraint("points_for_losers >= 0", name="ck_match_points_for_losers"),
    )

class MatchParticipant(Base):
    __tablename__ = "match_participants"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    # NULL once the user is deleted; the snapshot columns keep the identity.
    user_id: Mapped[int | None] = mapped_column(sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_winner: Mapped[bool] = mapped_column(sa.Boolean, nullable=False)
    points: Mapped[int] = mapped_column(sa.Integer, nullable=False)

    user_name: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    user_last_name: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    user_email: Mapped[str] = mapped_column(sa.Text, nullable=False)

    match: Mapped[Match] = relationship(back_populates="participants")

    __table_args__ = (
        sa.UniqueConstraint("match_id", "user_id", name="uq_match_participants_match_user"),
        sa.Index("ix_match_participants_match", "match_id"),
        sa.Index("ix_match_participants_user", "user_id"),
    )
