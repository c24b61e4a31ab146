import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wastecollect.auth import jwt_handler
from wastecollect.auth.passwords import hash_password
from wastecollect.database import Base, get_db
from wastecollect.models import donation, ngo, pickup, user  # noqa: F401
from wastecollect.models.ngo import NGO
from wastecollect.models.pickup import Pickup
from wastecollect.models.user import User

DEFAULT_PASSWORD = 'secret123'


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: str = 'user', password: str = DEFAULT_PASSWORD) -> User:
        account = User(email=email, hashed_password=hash_password(password), role=role)
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _make_user


@pytest.fixture
def make_pickup(db):
    def _make_pickup(address: str, waste_type: str = 'plastic', status: str = 'Pending') -> Pickup:
        record = Pickup(waste_type=waste_type, address=address, status=status)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make_pickup


@pytest.fixture
def make_ngo(db, make_user):
    def _make_ngo(email: str, name: str, description: str = '') -> NGO:
        owner = make_user(email, role='ngo')
        record = NGO(user_id=owner.id, name=name, description=description)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make_ngo


@pytest.fixture
def auth_header():
    def _auth_header(account: User) -> dict:
        token = jwt_handler.create_access_token(subject=str(account.id), role=account.role)
        return {'Authorization': f'Bearer {token}'}

    return _auth_header


@pytest.fixture
def client(db):
    from wastecollect.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
