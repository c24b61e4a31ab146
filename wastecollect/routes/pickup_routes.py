import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wastecollect.auth.dependencies import require_roles
from wastecollect.core.errors import database_error
from wastecollect.core.schemas import ApiModel
from wastecollect.database import get_db
from wastecollect.models.pickup import Pickup
from wastecollect.models.user import ROLE_ADMIN, ROLE_DRIVER, ROLE_USER, User

router = APIRouter(tags=['pickups'])

logger = logging.getLogger(__name__)

MAX_ADDRESS_LENGTH = 300
MAX_WASTE_TYPE_LENGTH = 80


class SchedulePickupRequest(ApiModel):
    waste_type: str
    address: str

    @field_validator('waste_type')
    @classmethod
    def validate_waste_type(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Waste type and address are required.')
        if len(normalized) > MAX_WASTE_TYPE_LENGTH:
            raise ValueError(f'Waste type must be {MAX_WASTE_TYPE_LENGTH} characters or fewer.')
        return normalized

    @field_validator('address')
    @classmethod
    def validate_address(cls, value: str) -> str:
        normalized = ' '.join(value.split())
        if not normalized:
            raise ValueError('Waste type and address are required.')
        if len(normalized) > MAX_ADDRESS_LENGTH:
            raise ValueError(f'Address must be {MAX_ADDRESS_LENGTH} characters or fewer.')
        return normalized


class PickupResponse(ApiModel):
    id: int
    waste_type: str
    address: str
    status: str
    requested_by_id: int | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None


class PickupActionResponse(ApiModel):
    message: str
    pickup: PickupResponse


@router.get('/pickups', response_model=list[PickupResponse])
def list_pickups(
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    try:
        return db.query(Pickup).order_by(Pickup.id.asc()).all()
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc


@router.post('/schedule', response_model=PickupActionResponse, status_code=status.HTTP_201_CREATED)
def schedule_pickup(
    data: SchedulePickupRequest,
    current_user: User = Depends(require_roles(ROLE_USER)),
    db: Session = Depends(get_db),
):
    try:
        pickup = Pickup(
            waste_type=data.waste_type,
            address=data.address,
            requested_by_id=current_user.id,
        )
        db.add(pickup)
        db.commit()
        db.refresh(pickup)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_error(exc) from exc

    logger.info('Pickup %s scheduled by user %s', pickup.id, current_user.id)
    return {'message': 'Pickup scheduled successfully!', 'pickup': pickup}


@router.patch('/pickups/{pickup_id}/complete', response_model=PickupActionResponse)
def complete_pickup(
    pickup_id: int,
    current_user: User = Depends(require_roles(ROLE_ADMIN, ROLE_DRIVER)),
    db: Session = Depends(get_db),
):
    try:
        pickup = db.query(Pickup).filter(Pickup.id == pickup_id).first()
        if pickup is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Pickup not found',
            )

        if pickup.mark_completed():
            db.commit()
            db.refresh(pickup)
            logger.info('Pickup %s completed by %s %s', pickup.id, current_user.role, current_user.id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_error(exc) from exc

    return {'message': 'Pickup marked as completed!', 'pickup': pickup}
