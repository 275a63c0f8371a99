"""API request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.pet import PetState, PetStatus, PetType


# === Request Schemas ===


class CreatePetRequest(BaseModel):
    """펫 생성 요청"""

    name: str = Field(..., min_length=1, max_length=50, description="펫 이름")
    pet_type: PetType = Field(..., description="펫 종류")
    owner_id: str = Field(..., min_length=1, description="소유자 ID")
    avatar: Optional[str] = Field(None, description="아바타 URL")


class UpdatePetRequest(BaseModel):
    """펫 부분 수정 요청. 지정한 필드만 반영."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=50)
    avatar: Optional[str] = None
    health: Optional[int] = Field(None, ge=0, le=100)
    hunger: Optional[int] = Field(None, ge=0, le=100)
    happiness: Optional[int] = Field(None, ge=0, le=100)
    energy: Optional[int] = Field(None, ge=0, le=100)
    experience: Optional[int] = Field(None, ge=0)
    battles_won: Optional[int] = Field(None, ge=0)
    battles_lost: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None

    # avatar만 null로 지울 수 있다
    @field_validator(
        "name",
        "health",
        "hunger",
        "happiness",
        "energy",
        "experience",
        "battles_won",
        "battles_lost",
        "active",
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


# === Response Schemas ===


class PetResponse(BaseModel):
    """펫 정보"""

    pet_id: str
    owner_id: str
    name: str
    pet_type: PetType
    avatar: Optional[str] = None
    level: int
    experience: int
    health: int
    hunger: int
    happiness: int
    energy: int
    status: PetStatus
    last_fed: datetime
    last_played: datetime
    last_slept: datetime
    battles_won: int
    battles_lost: int
    active: bool

    @classmethod
    def from_state(cls, pet: PetState) -> "PetResponse":
        return cls(
            pet_id=pet.pet_id,
            owner_id=pet.owner_id,
            name=pet.name,
            pet_type=pet.pet_type,
            avatar=pet.avatar,
            level=pet.level,
            experience=pet.experience,
            health=pet.health,
            hunger=pet.hunger,
            happiness=pet.happiness,
            energy=pet.energy,
            status=pet.status,
            last_fed=pet.last_fed,
            last_played=pet.last_played,
            last_slept=pet.last_slept,
            battles_won=pet.battles_won,
            battles_lost=pet.battles_lost,
            active=pet.active,
        )


class PetStatsResponse(BaseModel):
    """펫 통계"""

    pet_id: str
    name: str
    pet_type: PetType
    level: int
    experience: int
    health: int
    hunger: int
    happiness: int
    energy: int
    status: PetStatus
    battles_won: int
    battles_lost: int
    last_fed: datetime
    last_played: datetime
    last_slept: datetime


class ErrorResponse(BaseModel):
    """에러 응답"""

    detail: str
