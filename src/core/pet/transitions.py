"""펫 상태 전이: 액션 4종 + 시간 경과 감쇠

모든 함수는 (PetState, now) → PetState 순수 함수.
I/O 없음, 전역 시계 읽지 않음. now는 호출자가 주입한다.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from .models import (
    EXPERIENCE_PER_LEVEL,
    VITAL_MAX,
    VITAL_MIN,
    PetAction,
    PetState,
    PetStatus,
    PetType,
)
from .status import classify_after_sleep, classify_status

logger = logging.getLogger(__name__)

# 액션 효과
FEED_HUNGER = 30
FEED_HAPPINESS = 10
FEED_EXPERIENCE = 10

PLAY_HAPPINESS = 25
PLAY_ENERGY_COST = 20
PLAY_HUNGER_COST = 15
PLAY_EXPERIENCE = 15

SLEEP_ENERGY = 40
SLEEP_HEALTH = 10

HEAL_HEALTH = 30

# 시간당 감쇠량
HUNGER_DECAY_PER_HOUR = 2.0
HAPPINESS_DECAY_PER_HOUR = 1.5
ENERGY_DECAY_PER_HOUR = 1.0

SECONDS_PER_HOUR = 3600


def clamp(value: int, low: int = VITAL_MIN, high: int = VITAL_MAX) -> int:
    return max(low, min(high, value))


def level_for_experience(experience: int) -> int:
    """경험치 100당 1레벨. 경험치 0 → 레벨 1."""
    return experience // EXPERIENCE_PER_LEVEL + 1


def _as_utc(moment: datetime) -> datetime:
    """naive는 UTC로 간주."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def hours_between(earlier: datetime, now: datetime) -> float:
    """경과 시간(시). 음수(미래 시각)는 0."""
    seconds = (_as_utc(now) - _as_utc(earlier)).total_seconds()
    return max(0.0, seconds / SECONDS_PER_HOUR)


def sanitize(pet: PetState) -> PetState:
    """외부에서 들어온 레코드 방어적 보정.

    바이탈 클램프, 경험치/전적 하한 0, 레벨 재계산.
    상태는 호출한 전이 함수가 마지막에 다시 계산한다.
    """
    experience = max(0, pet.experience)
    return replace(
        pet,
        health=clamp(pet.health),
        hunger=clamp(pet.hunger),
        happiness=clamp(pet.happiness),
        energy=clamp(pet.energy),
        experience=experience,
        level=level_for_experience(experience),
        battles_won=max(0, pet.battles_won),
        battles_lost=max(0, pet.battles_lost),
    )


def derive_status(pet: PetState) -> PetState:
    """현재 바이탈 기준으로 상태만 다시 맞춘 레코드."""
    pet = sanitize(pet)
    return replace(
        pet,
        status=classify_status(pet.hunger, pet.health, pet.energy, pet.happiness),
    )


def new_pet(
    pet_id: str,
    owner_id: str,
    name: str,
    pet_type: PetType,
    now: datetime,
    avatar: Optional[str] = None,
) -> PetState:
    """신규 펫. 바이탈 전부 최대치, 경험치 0."""
    return PetState(
        pet_id=pet_id,
        owner_id=owner_id,
        name=name,
        pet_type=PetType(pet_type),
        health=VITAL_MAX,
        hunger=VITAL_MAX,
        happiness=VITAL_MAX,
        energy=VITAL_MAX,
        experience=0,
        level=1,
        status=PetStatus.ACTIVE,
        last_fed=now,
        last_played=now,
        last_slept=now,
        avatar=avatar,
    )


def feed(pet: PetState, now: datetime) -> PetState:
    """먹이: hunger +30, happiness +10, 경험치 +10."""
    pet = sanitize(pet)
    hunger = clamp(pet.hunger + FEED_HUNGER)
    happiness = clamp(pet.happiness + FEED_HAPPINESS)
    experience = pet.experience + FEED_EXPERIENCE
    return replace(
        pet,
        hunger=hunger,
        happiness=happiness,
        experience=experience,
        level=level_for_experience(experience),
        status=classify_status(hunger, pet.health, pet.energy, happiness),
        last_fed=now,
    )


def play(pet: PetState, now: datetime) -> PetState:
    """놀이: happiness +25, energy -20, hunger -15, 경험치 +15."""
    pet = sanitize(pet)
    happiness = clamp(pet.happiness + PLAY_HAPPINESS)
    energy = clamp(pet.energy - PLAY_ENERGY_COST)
    hunger = clamp(pet.hunger - PLAY_HUNGER_COST)
    experience = pet.experience + PLAY_EXPERIENCE
    return replace(
        pet,
        happiness=happiness,
        energy=energy,
        hunger=hunger,
        experience=experience,
        level=level_for_experience(experience),
        status=classify_status(hunger, pet.health, energy, happiness),
        last_played=now,
    )


def sleep(pet: PetState, now: datetime) -> PetState:
    """수면: energy +40, health +10. 상태는 수면 전용 판정."""
    pet = sanitize(pet)
    energy = clamp(pet.energy + SLEEP_ENERGY)
    return replace(
        pet,
        energy=energy,
        health=clamp(pet.health + SLEEP_HEALTH),
        status=classify_after_sleep(energy),
        last_slept=now,
    )


def heal(pet: PetState, now: datetime) -> PetState:
    """치료: health +30. 타임스탬프/경험치 변화 없음."""
    pet = sanitize(pet)
    health = clamp(pet.health + HEAL_HEALTH)
    return replace(
        pet,
        health=health,
        status=classify_status(pet.hunger, health, pet.energy, pet.happiness),
    )


def decay(pet: PetState, now: datetime) -> PetState:
    """시간 경과 감쇠. 세 바이탈은 각자의 마지막 액션 시각 기준.

    health는 감쇠하지 않는다. 타임스탬프/경험치는 읽기만 한다.
    """
    pet = sanitize(pet)
    hunger_loss = math.floor(hours_between(pet.last_fed, now) * HUNGER_DECAY_PER_HOUR)
    happiness_loss = math.floor(
        hours_between(pet.last_played, now) * HAPPINESS_DECAY_PER_HOUR
    )
    energy_loss = math.floor(
        hours_between(pet.last_slept, now) * ENERGY_DECAY_PER_HOUR
    )

    hunger = clamp(pet.hunger - hunger_loss)
    happiness = clamp(pet.happiness - happiness_loss)
    energy = clamp(pet.energy - energy_loss)

    if hunger_loss or happiness_loss or energy_loss:
        logger.debug(
            "Pet %s decayed: hunger -%d, happiness -%d, energy -%d",
            pet.pet_id,
            hunger_loss,
            happiness_loss,
            energy_loss,
        )

    return replace(
        pet,
        hunger=hunger,
        happiness=happiness,
        energy=energy,
        status=classify_status(hunger, pet.health, energy, happiness),
    )


Transition = Callable[[PetState, datetime], PetState]

ACTION_TRANSITIONS: dict[PetAction, Transition] = {
    PetAction.FEED: feed,
    PetAction.PLAY: play,
    PetAction.SLEEP: sleep,
    PetAction.HEAL: heal,
}


def apply_action(pet: PetState, action: PetAction | str, now: datetime) -> PetState:
    """액션 이름으로 전이 실행. 알 수 없는 액션은 ValueError."""
    transition = ACTION_TRANSITIONS[PetAction(action)]
    return transition(pet, now)
