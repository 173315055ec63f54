import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAILS"] = ""
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.auth import get_password_hash
from app.core.config import get_data_dir
from app.core.database import Base, get_db
from app.core.sessions import InMemorySessionStore, get_session_store
from app.models.customer import Business, Customer
from main import app

ADMIN_EMAIL = "admin@shipshape.com.au"
PASSWORD = "Secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def client(session_factory, data_dir, session_store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_data_dir] = lambda: data_dir
    app.dependency_overrides[get_session_store] = lambda: session_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_customer(db):
    def _make(email, password=PASSWORD, name="Test Customer", admin=False, business=None):
        customer = Customer(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            is_admin=admin,
            business=business,
        )
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer
    return _make


@pytest.fixture
def make_business(db):
    def _make(entity_name=None, business_name=None, abn=None):
        business = Business(abn=abn, entity_name=entity_name, business_name=business_name)
        db.add(business)
        db.commit()
        db.refresh(business)
        return business
    return _make


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        response = client.post("/api/customers/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response
    return _login


@pytest.fixture
def admin_client(client, make_customer, login):
    make_customer(ADMIN_EMAIL, name="Admin", admin=True)
    login(ADMIN_EMAIL)
    return client
