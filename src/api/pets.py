"""Pet API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.schemas import (
    CreatePetRequest,
    ErrorResponse,
    PetResponse,
    PetStatsResponse,
    UpdatePetRequest,
)
from src.core.logging import get_logger
from src.core.pet import PetAction
from src.db.database import get_db
from src.services.pet_service import (
    ConcurrentPetUpdateError,
    InvalidPetUpdateError,
    PetNotFoundError,
    PetService,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/pets", tags=["pets"])

NOT_FOUND = {404: {"model": ErrorResponse}}
ACTION_ERRORS = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


def get_pet_service(db: Session = Depends(get_db)) -> PetService:
    """PetService 인스턴스 반환 (의존성 주입)"""
    return PetService(db)


@router.post("", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
def create_pet(
    request: CreatePetRequest,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """새 펫 생성. 바이탈 100, 경험치 0에서 시작."""
    pet = service.create_pet(
        owner_id=request.owner_id,
        name=request.name,
        pet_type=request.pet_type,
        avatar=request.avatar,
    )
    return PetResponse.from_state(pet)


@router.get("", response_model=list[PetResponse])
def list_pets(service: PetService = Depends(get_pet_service)) -> list[PetResponse]:
    return [PetResponse.from_state(p) for p in service.list_pets()]


@router.get("/types", response_model=list[str])
def list_pet_types() -> list[str]:
    """지원하는 펫 종류"""
    return PetService.pet_types()


@router.get("/user/{owner_id}", response_model=list[PetResponse])
def list_pets_by_owner(
    owner_id: str,
    service: PetService = Depends(get_pet_service),
) -> list[PetResponse]:
    """소유자의 활성 펫 목록"""
    return [PetResponse.from_state(p) for p in service.list_pets_by_owner(owner_id)]


@router.get("/{pet_id}", response_model=PetResponse, responses=NOT_FOUND)
def get_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    try:
        return PetResponse.from_state(service.get_pet(pet_id))
    except PetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{pet_id}/stats", response_model=PetStatsResponse, responses=NOT_FOUND)
def get_pet_stats(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetStatsResponse:
    try:
        return PetStatsResponse(**service.get_pet_stats(pet_id))
    except PetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/{pet_id}",
    response_model=PetResponse,
    responses={400: {"model": ErrorResponse}, **ACTION_ERRORS},
)
def update_pet(
    pet_id: str,
    request: UpdatePetRequest,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """
    펫 정보 부분 수정

    바이탈/경험치를 바꾸면 레벨과 상태가 다시 계산됩니다.
    """
    try:
        pet = service.update_pet(pet_id, request.model_dump(exclude_unset=True))
    except PetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPetUpdateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConcurrentPetUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return PetResponse.from_state(pet)


@router.delete("/{pet_id}", response_model=PetResponse, responses=NOT_FOUND)
def delete_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    try:
        return PetResponse.from_state(service.delete_pet(pet_id))
    except PetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _run_action(service: PetService, pet_id: str, action: PetAction) -> PetResponse:
    try:
        pet = service.perform_action(pet_id, action)
    except PetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrentPetUpdateError as e:
        logger.warning("Action %s conflicted on %s", action.value, pet_id)
        raise HTTPException(status_code=409, detail=str(e))
    return PetResponse.from_state(pet)


@router.post("/{pet_id}/feed", response_model=PetResponse, responses=ACTION_ERRORS)
def feed_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """먹이 주기: hunger +30, happiness +10, 경험치 +10"""
    return _run_action(service, pet_id, PetAction.FEED)


@router.post("/{pet_id}/play", response_model=PetResponse, responses=ACTION_ERRORS)
def play_with_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """놀아주기: happiness +25, energy -20, hunger -15, 경험치 +15"""
    return _run_action(service, pet_id, PetAction.PLAY)


@router.post("/{pet_id}/sleep", response_model=PetResponse, responses=ACTION_ERRORS)
def sleep_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """재우기: energy +40, health +10"""
    return _run_action(service, pet_id, PetAction.SLEEP)


@router.post("/{pet_id}/heal", response_model=PetResponse, responses=ACTION_ERRORS)
def heal_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """치료: health +30"""
    return _run_action(service, pet_id, PetAction.HEAL)
