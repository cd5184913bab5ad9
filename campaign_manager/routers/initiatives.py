"""Initiative router — participants of a single combat."""

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from campaign_manager.database import get_db
from campaign_manager.models.combat import Combat
from campaign_manager.models.initiative import Initiative
from campaign_manager.routers.combats import get_combat_or_404
from campaign_manager.schemas.combat import (
    INT_MAX,
    InitiativeCreate,
    InitiativeResponse,
    InitiativeUpdate,
    SuccessResponse,
)
from campaign_manager.services.initiative_service import (
    add_initiative,
    delete_initiative,
    get_initiative,
    list_initiatives,
    update_initiative,
)

router = APIRouter(prefix="/combats/{combat_id}/initiative", tags=["initiative"])


async def get_initiative_or_404(
    combat_id: int = Path(ge=1, le=INT_MAX),
    initiative_id: int = Path(ge=1, le=INT_MAX),
    db: AsyncSession = Depends(get_db),
) -> Initiative:
    initiative = await get_initiative(db, combat_id, initiative_id)
    if initiative is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Initiative not found")
    return initiative


@router.get("", response_model=list[InitiativeResponse])
async def list_combat_initiatives(
    combat: Combat = Depends(get_combat_or_404),
    db: AsyncSession = Depends(get_db),
):
    return await list_initiatives(db, combat.id)


@router.post("", response_model=InitiativeResponse, status_code=status.HTTP_201_CREATED)
async def add_combat_initiative(
    body: InitiativeCreate,
    combat: Combat = Depends(get_combat_or_404),
    db: AsyncSession = Depends(get_db),
):
    return await add_initiative(
        db,
        combat,
        name=body.name,
        initiative_roll=body.initiative_roll,
        is_player=body.is_player,
        armor_class=body.armor_class,
        max_hp=body.max_hp,
        damage_taken=body.damage_taken,
    )


@router.put("/{initiative_id}", response_model=InitiativeResponse)
async def update_combat_initiative(
    body: InitiativeUpdate,
    initiative: Initiative = Depends(get_initiative_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Record damage, conditions, notes or the turn marker for one participant."""
    try:
        return await update_initiative(db, initiative, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{initiative_id}", response_model=SuccessResponse)
async def delete_combat_initiative(
    initiative: Initiative = Depends(get_initiative_or_404),
    db: AsyncSession = Depends(get_db),
):
    await delete_initiative(db, initiative)
    return SuccessResponse()
