import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import valuation.models  # noqa: F401  registers every table on Base
from valuation.database import get_db
from valuation.db.base import Base
from valuation.main import app
from valuation.models import ApartmentComplex, DealType, RealtyType, SourceType, UnifiedListing

TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_listing(db):
    source_ids = itertools.count(1000)

    def _make(**kwargs):
        data = {
            "source_type": SourceType.AGGREGATOR,
            "source_id": next(source_ids),
            "realty_platform": "olx",
            "deal_type": DealType.SELL,
            "realty_type": RealtyType.APARTMENT,
            "price": 100000,
            "total_area": 50,
            "rooms": 2,
            "is_active": True,
        }
        data.update(kwargs)
        listing = UnifiedListing(**data)
        db.add(listing)
        db.commit()
        db.refresh(listing)
        return listing

    return _make


@pytest.fixture
def make_complex(db):
    def _make(id, name_uk, name_ru=None, name_en=None):
        complex_ = ApartmentComplex(id=id, name_uk=name_uk, name_ru=name_ru, name_en=name_en)
        db.add(complex_)
        db.commit()
        return complex_

    return _make
