"""Combat service — lifecycle of combat encounters.

Only one combat is live at a time. Creating a combat, or switching one back
on, first turns every other active combat off and sends it back to the setup
phase. Both steps share one transaction so no reader ever sees two live
combats.

Turn order within a combat is initiative roll descending, ties going to the
participant added first. Advancing past the last participant starts a new
round.
"""

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campaign_manager.models.combat import Combat, CombatPhase

logger = logging.getLogger(__name__)

COMBAT_UPDATABLE_FIELDS = frozenset({"phase", "round", "is_active", "outcome", "notes"})


async def get_combat(db: AsyncSession, combat_id: int) -> Combat | None:
    # populate_existing so a combat already in the session picks up roster changes
    result = await db.execute(
        select(Combat)
        .where(Combat.id == combat_id)
        .options(selectinload(Combat.initiatives))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_combats(db: AsyncSession) -> list[Combat]:
    result = await db.execute(
        select(Combat)
        .options(selectinload(Combat.initiatives))
        .order_by(Combat.created_at.desc(), Combat.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_active_combat(db: AsyncSession) -> Combat | None:
    result = await db.execute(
        select(Combat)
        .where(Combat.is_active.is_(True))
        .options(selectinload(Combat.initiatives))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _deactivate_other_combats(db: AsyncSession, keep_id: int | None = None) -> int:
    stmt = update(Combat).where(Combat.is_active.is_(True))
    if keep_id is not None:
        stmt = stmt.where(Combat.id != keep_id)
    result = await db.execute(stmt.values(is_active=False, phase=CombatPhase.setup))
    return result.rowcount


async def create_combat(
    db: AsyncSession,
    name: str,
    session_id: str | None = None,
    phase: CombatPhase | None = None,
) -> Combat:
    deactivated = await _deactivate_other_combats(db)
    combat = Combat(
        name=name,
        session_id=session_id,
        phase=phase or CombatPhase.setup,
        round=1,
        is_active=True,
    )
    db.add(combat)
    await db.commit()
    logger.info("Created combat %s (%r), deactivated %d other combat(s)", combat.id, name, deactivated)
    return await get_combat(db, combat.id)


async def update_combat(db: AsyncSession, combat: Combat, changes: dict[str, Any]) -> Combat:
    """Apply a partial update.

    changes holds only the fields the client sent; keys outside
    COMBAT_UPDATABLE_FIELDS are refused rather than written through.
    """
    unknown = set(changes) - COMBAT_UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update combat field(s): {', '.join(sorted(unknown))}")

    if changes.get("is_active"):
        deactivated = await _deactivate_other_combats(db, keep_id=combat.id)
        if deactivated:
            logger.info("Combat %s activated, deactivated %d other combat(s)", combat.id, deactivated)

    for field, value in changes.items():
        setattr(combat, field, value)
    await db.commit()
    return await get_combat(db, combat.id)


async def delete_combat(db: AsyncSession, combat: Combat) -> None:
    combat_id = combat.id
    participants = len(combat.initiatives)
    await db.delete(combat)
    await db.commit()
    logger.info("Deleted combat %s with %d participant(s)", combat_id, participants)


async def advance_turn(db: AsyncSession, combat: Combat) -> Combat:
    """Hand the turn to the next participant in initiative order.

    Only the live combat can advance.

    With nobody holding the turn yet, the highest roll goes first. Wrapping
    from the last participant back to the first increments the round. A
    combat still in setup moves to the active phase.
    """
    if combat.phase == CombatPhase.ended:
        raise ValueError("Combat has already ended")
    if not combat.is_active:
        raise ValueError("Combat is not active")

    participants = list(combat.initiatives)
    if not participants:
        raise ValueError("Combat has no participants")

    current = next((i for i, p in enumerate(participants) if p.is_active), None)
    if current is None:
        next_index = 0
    else:
        next_index = (current + 1) % len(participants)
        if next_index == 0:
            combat.round += 1

    for i, participant in enumerate(participants):
        participant.is_active = i == next_index

    if combat.phase == CombatPhase.setup:
        combat.phase = CombatPhase.active

    await db.commit()
    logger.info(
        "Combat %s round %d: turn passes to %r",
        combat.id,
        combat.round,
        participants[next_index].name,
    )
    return await get_combat(db, combat.id)


async def end_combat(db: AsyncSession, combat: Combat, outcome: str | None = None) -> Combat:
    if combat.phase == CombatPhase.ended:
        raise ValueError("Combat has already ended")

    combat.is_active = False
    combat.phase = CombatPhase.ended
    if outcome is not None:
        combat.outcome = outcome
    for participant in combat.initiatives:
        participant.is_active = False

    await db.commit()
    logger.info("Combat %s ended after %d round(s): %s", combat.id, combat.round, outcome or "no outcome")
    return await get_combat(db, combat.id)
