"""상태 판정: 바이탈 → PetStatus

우선순위 고정: sick > sleeping > hungry > happy > active.
첫 번째로 일치하는 규칙이 이긴다.
"""

from typing import Callable, NamedTuple

from .models import PetStatus


class Vitals(NamedTuple):
    hunger: int
    health: int
    energy: int
    happiness: int


StatusRule = tuple[Callable[[Vitals], bool], PetStatus]

STATUS_RULES: tuple[StatusRule, ...] = (
    (lambda v: v.health < 30, PetStatus.SICK),
    (lambda v: v.energy < 20, PetStatus.SLEEPING),
    (lambda v: v.hunger < 30, PetStatus.HUNGRY),
    (
        lambda v: v.happiness > 80 and v.health > 80 and v.energy > 60,
        PetStatus.HAPPY,
    ),
)

DEFAULT_STATUS = PetStatus.ACTIVE

# 수면 직후 판정: 이 값을 넘으면 active, 아니면 sleeping
SLEEP_WAKE_ENERGY = 80


def classify_status(
    hunger: int, health: int, energy: int, happiness: int
) -> PetStatus:
    """바이탈로 상태 결정. 규칙 테이블을 순서대로 평가."""
    vitals = Vitals(hunger=hunger, health=health, energy=energy, happiness=happiness)
    for predicate, status in STATUS_RULES:
        if predicate(vitals):
            return status
    return DEFAULT_STATUS


def classify_after_sleep(energy: int) -> PetStatus:
    """수면 전용 판정. 다른 바이탈과 무관하게 두 값 중 하나."""
    if energy > SLEEP_WAKE_ENERGY:
        return PetStatus.ACTIVE
    return PetStatus.SLEEPING
