"""펫 Service: Core↔DB 연결

조회 -> not-found 판정 -> Core 전이 -> 저장.
같은 펫에 대한 동시 갱신은 PetModel.version 낙관적 잠금으로 직렬화한다.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import ObjectDeletedError, StaleDataError

from src.core.pet import (
    PetAction,
    PetState,
    PetStatus,
    PetType,
    apply_action,
    decay,
    derive_status,
    new_pet,
)
from src.db.models import PetModel

logger = logging.getLogger(__name__)

# PATCH로 수정 가능한 필드
EDITABLE_FIELDS = frozenset(
    {
        "name",
        "avatar",
        "health",
        "hunger",
        "happiness",
        "energy",
        "experience",
        "battles_won",
        "battles_lost",
        "active",
    }
)
NULLABLE_FIELDS = frozenset({"avatar"})


class PetServiceError(Exception):
    """펫 서비스 예외 기반 클래스"""


class PetNotFoundError(PetServiceError):
    def __init__(self, pet_id: str):
        super().__init__(f"Pet not found: {pet_id}")
        self.pet_id = pet_id


class ConcurrentPetUpdateError(PetServiceError):
    def __init__(self, pet_id: str):
        super().__init__(f"Pet was modified concurrently: {pet_id}")
        self.pet_id = pet_id


class InvalidPetUpdateError(PetServiceError):
    pass


def utcnow() -> datetime:
    """저장용 naive UTC 현재 시각"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_storage_time(moment: datetime) -> datetime:
    """aware 시각은 UTC로 변환 후 tzinfo 제거 (DB는 naive UTC 저장)."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


class PetService:
    """펫 CRUD + 액션 + 일괄 감쇠"""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self._db = db
        self._clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return _to_storage_time(now if now is not None else self._clock())

    # === 생성 / 조회 ===

    def create_pet(
        self,
        owner_id: str,
        name: str,
        pet_type: PetType | str,
        avatar: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PetState:
        state = new_pet(
            pet_id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=name,
            pet_type=PetType(pet_type),
            now=self._now(now),
            avatar=avatar,
        )
        orm = self._pet_to_orm(state)
        self._db.add(orm)
        self._db.commit()
        logger.info(
            "Pet created: %s (%s, owner=%s)", state.pet_id, state.pet_type.value, owner_id
        )
        return state

    def list_pets(self) -> list[PetState]:
        rows = self._db.query(PetModel).order_by(PetModel.created_at).all()
        return [self._pet_to_core(orm) for orm in rows]

    def list_pets_by_owner(self, owner_id: str) -> list[PetState]:
        """소유자의 활성 펫만"""
        rows = (
            self._db.query(PetModel)
            .filter(PetModel.owner_id == owner_id, PetModel.active.is_(True))
            .order_by(PetModel.created_at)
            .all()
        )
        return [self._pet_to_core(orm) for orm in rows]

    def get_pet(self, pet_id: str) -> PetState:
        return self._pet_to_core(self._load(pet_id))

    def get_pet_stats(self, pet_id: str) -> dict[str, Any]:
        pet = self.get_pet(pet_id)
        return {
            "pet_id": pet.pet_id,
            "name": pet.name,
            "pet_type": pet.pet_type.value,
            "level": pet.level,
            "experience": pet.experience,
            **pet.vitals,
            "status": pet.status.value,
            "battles_won": pet.battles_won,
            "battles_lost": pet.battles_lost,
            "last_fed": pet.last_fed,
            "last_played": pet.last_played,
            "last_slept": pet.last_slept,
        }

    @staticmethod
    def pet_types() -> list[str]:
        return [t.value for t in PetType]

    # === 수정 / 삭제 ===

    def update_pet(self, pet_id: str, changes: dict[str, Any]) -> PetState:
        """부분 수정. 결과는 보정 후 레벨/상태 재계산."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidPetUpdateError(
                f"Fields not editable: {', '.join(sorted(unknown))}"
            )
        nulls = {k for k, v in changes.items() if v is None} - NULLABLE_FIELDS
        if nulls:
            raise InvalidPetUpdateError(
                f"Fields cannot be null: {', '.join(sorted(nulls))}"
            )

        orm = self._load(pet_id)
        current = self._pet_to_core(orm)
        updated = derive_status(replace(current, **changes))
        self._save(orm, updated)
        logger.info("Pet updated: %s (%s)", pet_id, ", ".join(sorted(changes)))
        return updated

    def delete_pet(self, pet_id: str) -> PetState:
        orm = self._load(pet_id)
        state = self._pet_to_core(orm)
        self._db.delete(orm)
        self._db.commit()
        logger.info("Pet deleted: %s", pet_id)
        return state

    # === 액션 ===

    def perform_action(
        self,
        pet_id: str,
        action: PetAction | str,
        now: Optional[datetime] = None,
    ) -> PetState:
        action = PetAction(action)
        orm = self._load(pet_id)
        before = self._pet_to_core(orm)
        after = apply_action(before, action, self._now(now))
        self._save(orm, after)

        logger.info("Pet %s: %s", action.value, pet_id)
        if after.level > before.level:
            logger.info("Pet %s leveled up: %d -> %d", pet_id, before.level, after.level)
        if after.status != before.status:
            logger.info(
                "Pet %s status: %s -> %s",
                pet_id,
                before.status.value,
                after.status.value,
            )
        return after

    def feed_pet(self, pet_id: str, now: Optional[datetime] = None) -> PetState:
        return self.perform_action(pet_id, PetAction.FEED, now)

    def play_with_pet(self, pet_id: str, now: Optional[datetime] = None) -> PetState:
        return self.perform_action(pet_id, PetAction.PLAY, now)

    def sleep_pet(self, pet_id: str, now: Optional[datetime] = None) -> PetState:
        return self.perform_action(pet_id, PetAction.SLEEP, now)

    def heal_pet(self, pet_id: str, now: Optional[datetime] = None) -> PetState:
        return self.perform_action(pet_id, PetAction.HEAL, now)

    # === 시간 경과 ===

    def decay_all(self, now: Optional[datetime] = None) -> int:
        """전체 펫 감쇠. 펫 단위로 커밋, 충돌한 펫은 다음 실행으로 미룸.

        커밋마다 세션 객체가 만료되므로 id 목록만 먼저 잡고 펫별로 다시 읽는다.
        도중에 삭제된 펫은 건너뛴다.

        Returns: 실제로 값이 바뀐 펫 수
        """
        moment = self._now(now)
        pet_ids = [pet_id for (pet_id,) in self._db.query(PetModel.pet_id).all()]
        updated = 0
        skipped = 0
        for pet_id in pet_ids:
            try:
                orm = self._load(pet_id)
                before = self._pet_to_core(orm)
            except (PetNotFoundError, ObjectDeletedError):
                logger.info("Decay skipped for %s: pet deleted", pet_id)
                continue
            after = decay(before, moment)
            if after == before:
                continue
            try:
                self._save(orm, after)
            except ConcurrentPetUpdateError:
                skipped += 1
                logger.warning("Decay skipped for %s: concurrent update", pet_id)
                continue
            updated += 1
            if after.status != before.status:
                logger.info(
                    "Pet %s status: %s -> %s",
                    before.pet_id,
                    before.status.value,
                    after.status.value,
                )

        logger.info("Decay run: %d pets updated, %d skipped", updated, skipped)
        return updated

    # === 내부 ===

    def _load(self, pet_id: str) -> PetModel:
        orm = self._db.get(PetModel, pet_id)
        if orm is None:
            raise PetNotFoundError(pet_id)
        return orm

    def _save(self, orm: PetModel, state: PetState) -> None:
        self._apply_to_orm(orm, state)
        try:
            self._db.commit()
        except StaleDataError as e:
            self._db.rollback()
            raise ConcurrentPetUpdateError(state.pet_id) from e

    # === ORM ↔ Core 변환 ===

    def _pet_to_core(self, orm: PetModel) -> PetState:
        return PetState(
            pet_id=orm.pet_id,
            owner_id=orm.owner_id,
            name=orm.name,
            pet_type=PetType(orm.pet_type),
            health=orm.health,
            hunger=orm.hunger,
            happiness=orm.happiness,
            energy=orm.energy,
            experience=orm.experience,
            level=orm.level,
            status=PetStatus(orm.status),
            last_fed=orm.last_fed,
            last_played=orm.last_played,
            last_slept=orm.last_slept,
            battles_won=orm.battles_won,
            battles_lost=orm.battles_lost,
            avatar=orm.avatar,
            active=orm.active,
        )

    def _pet_to_orm(self, core: PetState) -> PetModel:
        orm = PetModel(
            pet_id=core.pet_id,
            owner_id=core.owner_id,
            pet_type=core.pet_type.value,
        )
        self._apply_to_orm(orm, core)
        return orm

    @staticmethod
    def _apply_to_orm(orm: PetModel, core: PetState) -> None:
        orm.name = core.name
        orm.avatar = core.avatar
        orm.health = core.health
        orm.hunger = core.hunger
        orm.happiness = core.happiness
        orm.energy = core.energy
        orm.experience = core.experience
        orm.level = core.level
        orm.status = core.status.value
        orm.last_fed = core.last_fed
        orm.last_played = core.last_played
        orm.last_slept = core.last_slept
        orm.battles_won = core.battles_won
        orm.battles_lost = core.battles_lost
        orm.active = core.active
