"""Create bracket tables

Revision ID: 3e7a91c0b5d2
Revises:
Create Date: 2026-10-18 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers, used by Alembic.
revision: str = "3e7a91c0b5d2"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tournament_brackets",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=True,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=True,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "participants",
        sa.Column("tournament_id", sa.String(length=64), nullable=False),
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("idea_id", sa.String(length=64), nullable=False),
        sa.Column("idea_title", sa.String(length=255), nullable=False),
        sa.Column("seed", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["tournament_id"], ["tournament_brackets.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("tournament_id", "id"),
        sa.UniqueConstraint("tournament_id", "seed", name="uq_participants_tournament_seed"),
        sa.CheckConstraint("seed >= 1", name="ck_participants_seed_positive"),
    )

    op.create_table(
        "bracket_matches",
        sa.Column("tournament_id", sa.String(length=64), nullable=False),
        sa.Column("match_id", sa.String(length=64), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=10), nullable=False, server_default="pending"),
        sa.Column("side_a_participant_id", sa.String(length=64), nullable=True),
        sa.Column("side_a_source_match_id", sa.String(length=64), nullable=True),
        sa.Column("side_b_participant_id", sa.String(length=64), nullable=True),
        sa.Column("side_b_source_match_id", sa.String(length=64), nullable=True),
        sa.Column("winner_side", sa.String(length=1), nullable=True),
        sa.ForeignKeyConstraint(
            ["tournament_id"], ["tournament_brackets.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("tournament_id", "match_id"),
        sa.UniqueConstraint(
            "tournament_id", "round", "position", name="uq_bracket_matches_slot"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'open', 'closed')",
            name="ck_bracket_matches_status",
        ),
        sa.CheckConstraint(
            "winner_side IS NULL OR winner_side IN ('a', 'b')",
            name="ck_bracket_matches_winner_side",
        ),
    )
    op.create_index(
        "idx_bracket_matches_tournament_round",
        "bracket_matches",
        ["tournament_id", "round"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_bracket_matches_tournament_round", table_name="bracket_matches")
    op.drop_table("bracket_matches")
    op.drop_table("participants")
    op.drop_table("tournament_brackets")
