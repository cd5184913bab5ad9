"""Combat model — one encounter with a phase, a round counter and its participants."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign_manager.models.base import Base

if TYPE_CHECKING:
    from campaign_manager.models.initiative import Initiative


class CombatPhase(str, enum.Enum):
    setup = "setup"
    active = "active"
    ended = "ended"


def _initiative_order():
    from campaign_manager.models.initiative import Initiative

    return [Initiative.initiative_roll.desc(), Initiative.id]


class Combat(Base):
    """A single encounter.

    Only one combat may be live at a time: the partial unique index below
    allows a single row with is_active = true, and the combat service flips
    the others off in the same transaction before activating a new one.
    """

    __tablename__ = "combats"
    __table_args__ = (
        Index(
            "uq_combats_single_active",
            "is_active",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Reference to a play session managed elsewhere
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    phase: Mapped[CombatPhase] = mapped_column(
        Enum(CombatPhase), nullable=False, default=CombatPhase.setup
    )
    round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    initiatives: Mapped[list["Initiative"]] = relationship(
        back_populates="combat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=_initiative_order,
        lazy="selectin",
    )
