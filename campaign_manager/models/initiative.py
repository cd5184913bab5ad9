from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign_manager.models.base import Base

if TYPE_CHECKING:
    from campaign_manager.models.combat import Combat


class Initiative(Base):
    """A participant in a combat, player character or monster.

    Turn order is initiative_roll descending with id as the tiebreak.
    is_active marks whose turn it currently is.
    """

    __tablename__ = "initiatives"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    combat_id: Mapped[int] = mapped_column(
        ForeignKey("combats.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    initiative_roll: Mapped[int] = mapped_column(Integer, nullable=False)
    armor_class: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    max_hp: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    damage_taken: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_player: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    conditions: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Seeded from initiative_roll; a re-roll has to update both
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    combat: Mapped["Combat"] = relationship(back_populates="initiatives")
