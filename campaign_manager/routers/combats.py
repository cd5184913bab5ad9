"""Combat router — encounter lifecycle endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from campaign_manager.database import get_db
from campaign_manager.models.combat import Combat
from campaign_manager.schemas.combat import (
    CombatCreate,
    CombatEnd,
    CombatResponse,
    CombatUpdate,
    INT_MAX,
    SuccessResponse,
)
from campaign_manager.services.combat_service import (
    advance_turn,
    create_combat,
    delete_combat,
    end_combat,
    get_active_combat,
    get_combat,
    list_combats,
    update_combat,
)

router = APIRouter(prefix="/combats", tags=["combats"])


async def get_combat_or_404(
    combat_id: int = Path(ge=1, le=INT_MAX), db: AsyncSession = Depends(get_db)
) -> Combat:
    combat = await get_combat(db, combat_id)
    if combat is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Combat not found")
    return combat


@router.get("", response_model=list[CombatResponse])
async def list_all_combats(db: AsyncSession = Depends(get_db)):
    """Every combat, newest first, each with its participants in turn order."""
    return await list_combats(db)


@router.post("", response_model=CombatResponse, status_code=status.HTTP_201_CREATED)
async def create_new_combat(body: CombatCreate, db: AsyncSession = Depends(get_db)):
    return await create_combat(db, name=body.name, session_id=body.session_id, phase=body.phase)


@router.get("/active", response_model=CombatResponse)
async def get_live_combat(db: AsyncSession = Depends(get_db)):
    """The combat currently being played, if any."""
    combat = await get_active_combat(db)
    if combat is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active combat")
    return combat


@router.get("/{combat_id}", response_model=CombatResponse)
async def get_combat_info(combat: Combat = Depends(get_combat_or_404)):
    return combat


@router.put("/{combat_id}", response_model=CombatResponse)
async def update_existing_combat(
    body: CombatUpdate,
    combat: Combat = Depends(get_combat_or_404),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await update_combat(db, combat, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{combat_id}", response_model=SuccessResponse)
async def delete_existing_combat(
    combat: Combat = Depends(get_combat_or_404),
    db: AsyncSession = Depends(get_db),
):
    await delete_combat(db, combat)
    return SuccessResponse()


@router.post("/{combat_id}/next-turn", response_model=CombatResponse)
async def next_turn(
    combat: Combat = Depends(get_combat_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Pass the turn to the next participant, rolling over into a new round."""
    try:
        return await advance_turn(db, combat)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/{combat_id}/end", response_model=CombatResponse)
async def end_existing_combat(
    body: CombatEnd | None = None,
    combat: Combat = Depends(get_combat_or_404),
    db: AsyncSession = Depends(get_db),
):
    outcome = body.outcome if body is not None else None
    try:
        return await end_combat(db, combat, outcome=outcome)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
