import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from wastecollect.auth.dependencies import require_roles
from wastecollect.core.errors import database_error
from wastecollect.core.schemas import ApiModel
from wastecollect.database import get_db
from wastecollect.models.donation import Donation
from wastecollect.models.ngo import NGO
from wastecollect.models.user import ROLE_ADMIN, ROLE_NGO, ROLE_USER, User

router = APIRouter(tags=['ngos'])

logger = logging.getLogger(__name__)

MAX_DONATION_AMOUNT = 1_000_000


class NgoResponse(ApiModel):
    id: int
    name: str
    description: str


class DonateRequest(ApiModel):
    amount: float = Field(gt=0, le=MAX_DONATION_AMOUNT)


class DonationResponse(ApiModel):
    id: int
    amount: float
    donor_id: int
    ngo_id: int
    created_at: datetime


class DonationDetailResponse(DonationResponse):
    donor_email: str
    ngo_name: str


class DonateResponse(ApiModel):
    message: str
    donation: DonationResponse


class NgoDonationsResponse(ApiModel):
    ngo: NgoResponse
    total: float
    donations: list[DonationDetailResponse]


def to_detail(donation: Donation) -> DonationDetailResponse:
    return DonationDetailResponse(
        id=donation.id,
        amount=donation.amount,
        donor_id=donation.donor_id,
        ngo_id=donation.ngo_id,
        created_at=donation.created_at,
        donor_email=donation.donor.email if donation.donor else '',
        ngo_name=donation.ngo.name if donation.ngo else '',
    )


def _donations_query(db: Session):
    return db.query(Donation).options(
        joinedload(Donation.donor),
        joinedload(Donation.ngo),
    ).order_by(Donation.created_at.desc(), Donation.id.desc())


@router.get('/ngos', response_model=list[NgoResponse])
def list_ngos(db: Session = Depends(get_db)):
    try:
        return db.query(NGO).order_by(NGO.name.asc()).all()
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc


@router.post('/donate/{ngo_id}', response_model=DonateResponse, status_code=status.HTTP_201_CREATED)
def donate(
    ngo_id: int,
    data: DonateRequest,
    current_user: User = Depends(require_roles(ROLE_USER)),
    db: Session = Depends(get_db),
):
    try:
        ngo = db.query(NGO).filter(NGO.id == ngo_id).first()
        if ngo is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='NGO not found',
            )

        donation = Donation(amount=data.amount, donor_id=current_user.id, ngo_id=ngo.id)
        db.add(donation)
        db.commit()
        db.refresh(donation)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_error(exc) from exc

    logger.info('User %s donated %.2f to NGO %s', current_user.id, donation.amount, ngo.id)
    return {'message': 'Donation successful!', 'donation': donation}


@router.get('/donations/admin', response_model=list[DonationDetailResponse])
def list_all_donations(
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    try:
        return [to_detail(donation) for donation in _donations_query(db).all()]
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc


@router.get('/donations/ngo', response_model=NgoDonationsResponse)
def list_my_ngo_donations(
    current_user: User = Depends(require_roles(ROLE_NGO)),
    db: Session = Depends(get_db),
):
    try:
        ngo = db.query(NGO).filter(NGO.user_id == current_user.id).first()
        if ngo is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='NGO profile not found',
            )

        donations = [
            to_detail(donation)
            for donation in _donations_query(db).filter(Donation.ngo_id == ngo.id).all()
        ]
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc

    return NgoDonationsResponse(
        ngo=NgoResponse.model_validate(ngo),
        total=round(sum(donation.amount for donation in donations), 2),
        donations=donations,
    )
