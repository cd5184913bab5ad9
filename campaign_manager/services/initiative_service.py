"""Initiative service — the roster of participants in a combat."""

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campaign_manager.models.combat import Combat
from campaign_manager.models.initiative import Initiative

logger = logging.getLogger(__name__)

INITIATIVE_UPDATABLE_FIELDS = frozenset({"damage_taken", "conditions", "notes", "is_active"})


async def list_initiatives(db: AsyncSession, combat_id: int) -> list[Initiative]:
    result = await db.execute(
        select(Initiative)
        .where(Initiative.combat_id == combat_id)
        .order_by(Initiative.initiative_roll.desc(), Initiative.id)
    )
    return list(result.scalars().all())


async def get_initiative(db: AsyncSession, combat_id: int, initiative_id: int) -> Initiative | None:
    result = await db.execute(
        select(Initiative).where(
            Initiative.id == initiative_id, Initiative.combat_id == combat_id
        )
    )
    return result.scalar_one_or_none()


async def add_initiative(
    db: AsyncSession,
    combat: Combat,
    name: str,
    initiative_roll: int,
    is_player: bool,
    armor_class: int | None = None,
    max_hp: int | None = None,
    damage_taken: int | None = None,
) -> Initiative:
    initiative = Initiative(
        combat_id=combat.id,
        name=name,
        initiative_roll=initiative_roll,
        armor_class=armor_class,
        max_hp=max_hp,
        damage_taken=damage_taken or 0,
        is_player=is_player,
        is_active=False,
        order=initiative_roll,
    )
    db.add(initiative)
    await db.commit()
    await db.refresh(initiative)
    logger.info(
        "Added %s %r to combat %s with initiative %d",
        "player" if is_player else "npc",
        name,
        combat.id,
        initiative_roll,
    )
    return initiative


async def update_initiative(
    db: AsyncSession, initiative: Initiative, changes: dict[str, Any]
) -> Initiative:
    """Apply a partial update to a participant.

    Giving one participant the turn (is_active=True) takes it away from
    everyone else in the same combat.
    """
    unknown = set(changes) - INITIATIVE_UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update initiative field(s): {', '.join(sorted(unknown))}")

    if changes.get("is_active"):
        await db.execute(
            update(Initiative)
            .where(
                Initiative.combat_id == initiative.combat_id,
                Initiative.id != initiative.id,
                Initiative.is_active.is_(True),
            )
            .values(is_active=False)
        )

    for field, value in changes.items():
        setattr(initiative, field, value)
    await db.commit()
    await db.refresh(initiative)
    return initiative


async def delete_initiative(db: AsyncSession, initiative: Initiative) -> None:
    initiative_id, combat_id = initiative.id, initiative.combat_id
    await db.delete(initiative)
    await db.commit()
    logger.info("Removed initiative %s from combat %s", initiative_id, combat_id)
