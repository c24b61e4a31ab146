import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from wastecollect.auth import jwt_handler
from wastecollect.models.ngo import NGO
from wastecollect.models.user import User
from wastecollect.routes.auth_routes import (
    LoginRequest,
    RegisterNgoRequest,
    RegisterRequest,
    login,
    me,
    register,
    register_ngo,
)


def test_register_request_normalizes_email_and_role() -> None:
    request = RegisterRequest(email=' Resident@Example.COM ', password='secret123', role=' Driver ')

    assert request.email == 'resident@example.com'
    assert request.role == 'driver'


def test_register_request_defaults_to_user_role() -> None:
    assert RegisterRequest(email='a@example.com', password='secret123').role == 'user'


@pytest.mark.parametrize(
    ('email', 'password', 'role'),
    [
        ('a@example.com', 'secret123', 'admin'),
        ('a@example.com', 'secret123', 'ngo'),
        ('a@example.com', 'short', 'user'),
        ('not-an-email', 'secret123', 'user'),
        ('   ', 'secret123', 'user'),
    ],
)
def test_register_request_rejects_invalid_input(email: str, password: str, role: str) -> None:
    with pytest.raises(ValidationError):
        RegisterRequest(email=email, password=password, role=role)


def test_register_ngo_request_requires_name() -> None:
    with pytest.raises(ValidationError):
        RegisterNgoRequest(email='ngo@example.com', password='secret123', name='   ')


def test_register_stores_hashed_password(db) -> None:
    response = register(RegisterRequest(email='new@example.com', password='secret123'), db=db)

    stored = db.query(User).filter(User.email == 'new@example.com').one()
    assert response['message'] == 'User registered successfully!'
    assert response['user'].id == stored.id
    assert stored.role == 'user'
    assert stored.hashed_password != 'secret123'


def test_register_rejects_duplicate_email(db, make_user) -> None:
    make_user('taken@example.com')

    with pytest.raises(HTTPException) as exception_info:
        register(RegisterRequest(email='TAKEN@example.com', password='secret123'), db=db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Email is already registered.'


def test_register_ngo_creates_linked_account_and_profile(db) -> None:
    response = register_ngo(
        RegisterNgoRequest(
            email='green@example.org',
            password='secret123',
            name=' Green Earth ',
            description='Community recycling',
        ),
        db=db,
    )

    ngo = db.query(NGO).one()
    assert response['user'].role == 'ngo'
    assert ngo.user_id == response['user'].id
    assert ngo.name == 'Green Earth'
    assert ngo.description == 'Community recycling'


def test_register_ngo_rejects_duplicate_email_without_creating_profile(db, make_user) -> None:
    make_user('green@example.org')

    with pytest.raises(HTTPException) as exception_info:
        register_ngo(
            RegisterNgoRequest(email='green@example.org', password='secret123', name='Green Earth'),
            db=db,
        )

    assert exception_info.value.status_code == 400
    assert db.query(NGO).count() == 0


def test_login_returns_token_for_valid_credentials(db, make_user) -> None:
    account = make_user('driver@example.com', role='driver', password='secret123')

    response = login(LoginRequest(email=' DRIVER@example.com', password='secret123'), db=db)

    payload = jwt_handler.decode_access_token(response.access_token)
    assert response.token_type == 'bearer'
    assert response.role == 'driver'
    assert payload['sub'] == str(account.id)


@pytest.mark.parametrize(
    ('email', 'password'),
    [
        ('driver@example.com', 'wrong-password'),
        ('missing@example.com', 'secret123'),
    ],
)
def test_login_rejects_bad_credentials(db, make_user, email: str, password: str) -> None:
    make_user('driver@example.com', role='driver', password='secret123')

    with pytest.raises(HTTPException) as exception_info:
        login(LoginRequest(email=email, password=password), db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid email or password.'


def test_me_returns_current_user(make_user) -> None:
    account = make_user('me@example.com')

    assert me(current_user=account) is account
