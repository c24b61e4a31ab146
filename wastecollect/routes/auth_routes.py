import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from wastecollect.auth import jwt_handler
from wastecollect.auth.dependencies import get_current_user
from wastecollect.auth.passwords import verify_password
from wastecollect.core.errors import database_error
from wastecollect.core.schemas import ApiModel
from wastecollect.database import get_db
from wastecollect.models.ngo import NGO
from wastecollect.models.user import ROLE_DRIVER, ROLE_NGO, ROLE_USER, User
from wastecollect.routes.ngo_routes import NgoResponse
from wastecollect.services.accounts import (
    EmailAlreadyRegisteredError,
    check_password_length,
    create_user,
    normalize_email,
)

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MAX_NGO_NAME_LENGTH = 120
SELF_REGISTRATION_ROLES = (ROLE_USER, ROLE_DRIVER)


class RegisterRequest(ApiModel):
    email: str
    password: str
    role: str = ROLE_USER

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_length(value)

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SELF_REGISTRATION_ROLES:
            raise ValueError(f'Role must be one of: {", ".join(SELF_REGISTRATION_ROLES)}.')
        return normalized


class RegisterNgoRequest(ApiModel):
    email: str
    password: str
    name: str
    description: str = ''

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_length(value)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('NGO name is required.')
        if len(normalized) > MAX_NGO_NAME_LENGTH:
            raise ValueError(f'NGO name must be {MAX_NGO_NAME_LENGTH} characters or fewer.')
        return normalized

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        return value.strip()


class LoginRequest(ApiModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return value.strip().lower()


class UserResponse(ApiModel):
    id: int
    email: str
    role: str


class RegisterResponse(ApiModel):
    message: str
    user: UserResponse


class RegisterNgoResponse(ApiModel):
    message: str
    user: UserResponse
    ngo: NgoResponse


class TokenResponse(ApiModel):
    access_token: str
    token_type: str = 'bearer'
    role: str


def _duplicate_email_error(message: str = 'Email is already registered.') -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=message,
    )


@router.post('/register', response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    try:
        user = create_user(data.email, data.password, data.role, db)
        db.commit()
        db.refresh(user)
    except EmailAlreadyRegisteredError as exc:
        raise _duplicate_email_error(str(exc)) from exc
    except IntegrityError as exc:
        db.rollback()
        raise _duplicate_email_error() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_error(exc) from exc

    logger.info('Registered %s account %s', user.role, user.email)
    return {'message': 'User registered successfully!', 'user': user}


@router.post('/register-ngo', response_model=RegisterNgoResponse, status_code=status.HTTP_201_CREATED)
def register_ngo(data: RegisterNgoRequest, db: Session = Depends(get_db)):
    try:
        user = create_user(data.email, data.password, ROLE_NGO, db)
        db.flush()
        ngo = NGO(user_id=user.id, name=data.name, description=data.description)
        db.add(ngo)
        db.commit()
        db.refresh(user)
        db.refresh(ngo)
    except EmailAlreadyRegisteredError as exc:
        raise _duplicate_email_error(str(exc)) from exc
    except IntegrityError as exc:
        db.rollback()
        raise _duplicate_email_error() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_error(exc) from exc

    logger.info('Registered NGO %r for %s', ngo.name, user.email)
    return {'message': 'NGO registered successfully!', 'user': user, 'ngo': ngo}


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc

    if user is None or not verify_password(data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Invalid email or password.',
            headers={'WWW-Authenticate': 'Bearer'},
        )

    token = jwt_handler.create_access_token(subject=str(user.id), role=user.role)
    return TokenResponse(access_token=token, token_type='bearer', role=user.role)


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
