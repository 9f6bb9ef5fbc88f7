# Tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import build_inventory_store, create_db_engine, get_inventory, init_db
from main import app
from Models.schemas import CarAttributes, Customer

IMAGE = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00corolla-front\xff\xd9"


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'dealership.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory):
    return build_inventory_store(session_factory)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_inventory] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def corolla():
    return CarAttributes(make="Toyota", model="Corolla", year=2020, price=20000)


@pytest.fixture
def customer():
    return Customer(fullName="John Doe", email="john@x.com", phoneNumber="1234567890")


@pytest.fixture
def car_id(store, corolla):
    return store.create_car(corolla, IMAGE, "corolla.jpg").id
