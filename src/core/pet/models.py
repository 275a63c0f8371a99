"""펫 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

VITAL_MIN = 0
VITAL_MAX = 100

EXPERIENCE_PER_LEVEL = 100


class PetType(str, Enum):
    CAT = "cat"
    DOG = "dog"
    BIRD = "bird"
    FISH = "fish"
    RABBIT = "rabbit"


class PetStatus(str, Enum):
    ACTIVE = "active"
    SLEEPING = "sleeping"
    SICK = "sick"
    HAPPY = "happy"
    HUNGRY = "hungry"


class PetAction(str, Enum):
    FEED = "feed"
    PLAY = "play"
    SLEEP = "sleep"
    HEAL = "heal"


@dataclass(frozen=True)
class PetState:
    """펫 레코드 (불변). 전이 함수는 항상 새 인스턴스를 반환한다.

    hunger는 이름과 반대로 높을수록 배부른 상태 (클라이언트 호환 유지).
    """

    pet_id: str
    owner_id: str
    name: str
    pet_type: PetType

    # 바이탈 (0~100)
    health: int
    hunger: int
    happiness: int
    energy: int

    # 성장
    experience: int
    level: int
    status: PetStatus

    # 마지막 액션 시각
    last_fed: datetime
    last_played: datetime
    last_slept: datetime

    # 엔진이 건드리지 않는 필드
    battles_won: int = 0
    battles_lost: int = 0
    avatar: Optional[str] = None
    active: bool = True

    @property
    def vitals(self) -> dict[str, int]:
        return {
            "health": self.health,
            "hunger": self.hunger,
            "happiness": self.happiness,
            "energy": self.energy,
        }
