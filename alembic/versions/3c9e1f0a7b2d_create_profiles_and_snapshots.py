"""Create profiles and gamification_snapshots tables

Revision ID: 3c9e1f0a7b2d
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3c9e1f0a7b2d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("xp", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("level", sa.Integer(), nullable=True, server_default="1"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_profiles_xp_desc", "profiles", ["xp"])

    op.create_table(
        "gamification_snapshots",
        sa.Column("key", sa.String(200), primary_key=True),
        sa.Column("payload_json", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("gamification_snapshots")
    op.drop_index("ix_profiles_xp_desc", table_name="profiles")
    op.drop_table("profiles")
