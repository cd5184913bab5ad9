from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

from campaign_manager.models.combat import CombatPhase

# Clients speak camelCase; snake_case is accepted on input as well.
_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}

# Integer columns are 32-bit
INT_MIN, INT_MAX = -(2**31), 2**31 - 1
DbInt = Annotated[int, Field(ge=INT_MIN, le=INT_MAX)]


def _reject_nulls(values: dict, fields: tuple[str, ...]) -> None:
    for name in fields:
        if name in values and values[name] is None:
            raise ValueError(f"{to_camel(name)} cannot be null")


class CombatCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    session_id: Optional[str] = None
    phase: Optional[CombatPhase] = None

    model_config = _CAMEL


class CombatUpdate(BaseModel):
    """Fields a client may change on a combat. Anything else is rejected."""

    phase: Optional[CombatPhase] = None
    round: Optional[int] = Field(default=None, ge=0, le=INT_MAX)
    is_active: Optional[bool] = None
    outcome: Optional[str] = None
    notes: Optional[str] = None

    model_config = {**_CAMEL, "extra": "forbid"}

    @model_validator(mode="after")
    def check_required_columns(self) -> "CombatUpdate":
        _reject_nulls(
            {name: getattr(self, name) for name in self.model_fields_set},
            ("phase", "round", "is_active"),
        )
        return self


class CombatEnd(BaseModel):
    outcome: Optional[str] = None

    model_config = {**_CAMEL, "extra": "forbid"}


class InitiativeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    initiative_roll: DbInt
    armor_class: Optional[DbInt] = None
    max_hp: Optional[DbInt] = None
    is_player: bool = False
    damage_taken: Optional[DbInt] = None

    model_config = _CAMEL


class InitiativeUpdate(BaseModel):
    """Per-round battle state. damage_taken is only limited to the column range."""

    damage_taken: Optional[DbInt] = None
    conditions: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    model_config = {**_CAMEL, "extra": "forbid"}

    @model_validator(mode="after")
    def check_required_columns(self) -> "InitiativeUpdate":
        _reject_nulls(
            {name: getattr(self, name) for name in self.model_fields_set},
            ("damage_taken", "is_active"),
        )
        return self


class InitiativeResponse(BaseModel):
    id: int
    combat_id: int
    name: str
    initiative_roll: int
    armor_class: Optional[int]
    max_hp: Optional[int]
    damage_taken: int
    is_player: bool
    conditions: Optional[str]
    notes: Optional[str]
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = {**_CAMEL, "from_attributes": True}


class CombatResponse(BaseModel):
    id: int
    name: str
    session_id: Optional[str]
    phase: CombatPhase
    round: int
    is_active: bool
    outcome: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    initiatives: list[InitiativeResponse] = []

    model_config = {**_CAMEL, "from_attributes": True}


class SuccessResponse(BaseModel):
    success: bool = True
