"""users, matches and match participants

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.Text, nullable=False, unique=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("points_for_winners", sa.Integer, nullable=False),
        sa.Column("points_for_losers", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("points_for_winners > 0", name="ck_match_points_for_winners"),
        sa.CheckConstraint("points_for_losers >= 0", name="ck_match_points_for_losers"),
    )
    op.create_index("ix_matches_date_id", "matches", ["date", "id"])

    op.create_table(
        "match_participants",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("match_id", sa.Integer, sa.ForeignKey("matches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_winner", sa.Boolean, nullable=False),
        sa.Column("points", sa.Integer, nullable=False),
        sa.Column("user_name", sa.Text, nullable=True),
        sa.Column("user_last_name", sa.Text, nullable=True),
        sa.Column("user_email", sa.Text, nullable=False),
        sa.UniqueConstraint("match_id", "user_id", name="uq_match_participants_match_user"),
    )
    op.create_index("ix_match_participants_match", "match_participants", ["match_id"])
    op.create_index("ix_match_participants_user", "match_participants", ["user_id"])

def downgrade():
    op.drop_index("ix_match_participants_user", table_name="match_participants")
    op.drop_index("ix_match_participants_match", table_name="match_participants")
    op.drop_table("match_participants")
    op.drop_index("ix_matches_date_id", table_name="matches")
    op.drop_table("matches")
    op.drop_table("users")
