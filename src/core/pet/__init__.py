"""펫 상태 엔진 Core 패키지

DB 무관 순수 Python 로직.
"""

from src.core.pet.models import PetAction, PetState, PetStatus, PetType
from src.core.pet.status import STATUS_RULES, classify_after_sleep, classify_status
from src.core.pet.transitions import (
    ACTION_TRANSITIONS,
    apply_action,
    clamp,
    decay,
    derive_status,
    feed,
    heal,
    level_for_experience,
    new_pet,
    play,
    sanitize,
    sleep,
)

__all__ = [
    "PetAction",
    "PetState",
    "PetStatus",
    "PetType",
    "STATUS_RULES",
    "classify_status",
    "classify_after_sleep",
    "ACTION_TRANSITIONS",
    "apply_action",
    "clamp",
    "level_for_experience",
    "sanitize",
    "derive_status",
    "new_pet",
    "feed",
    "play",
    "sleep",
    "heal",
    "decay",
]
