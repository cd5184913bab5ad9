"""combat tracker schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "combats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("session_id", sa.String(length=255), nullable=True),
        sa.Column(
            "phase",
            sa.Enum("setup", "active", "ended", name="combatphase"),
            nullable=False,
        ),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("outcome", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_combats_id"), "combats", ["id"], unique=False)
    # At most one live combat
    op.create_index(
        "uq_combats_single_active",
        "combats",
        ["is_active"],
        unique=True,
        sqlite_where=sa.text("is_active = 1"),
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "initiatives",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("combat_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("initiative_roll", sa.Integer(), nullable=False),
        sa.Column("armor_class", sa.Integer(), nullable=True),
        sa.Column("max_hp", sa.Integer(), nullable=True),
        sa.Column("damage_taken", sa.Integer(), nullable=False),
        sa.Column("is_player", sa.Boolean(), nullable=False),
        sa.Column("conditions", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["combat_id"], ["combats.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_initiatives_id"), "initiatives", ["id"], unique=False)
    op.create_index(
        op.f("ix_initiatives_combat_id"), "initiatives", ["combat_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_initiatives_combat_id"), table_name="initiatives")
    op.drop_index(op.f("ix_initiatives_id"), table_name="initiatives")
    op.drop_table("initiatives")

    op.drop_index("uq_combats_single_active", table_name="combats")
    op.drop_index(op.f("ix_combats_id"), table_name="combats")
    op.drop_table("combats")

    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TYPE IF EXISTS combatphase")
