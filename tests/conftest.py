"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from maxcontrol.api.main import create_app
from maxcontrol.infrastructure.database.models import Base
from maxcontrol.infrastructure.database.session import get_db
from maxcontrol.domain.models import AccountsPayableEntry, LineItem, PricingModel


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def sample_items() -> list[LineItem]:
    """Cart with one unit product and one glass panel priced per m²"""
    return [
        LineItem(
            product_id="p1",
            product_name="Puxador Inox",
            quantity=2,
            unit_price=10.0,
            total_price=20.0,
        ),
        LineItem(
            product_id="p2",
            product_name="Vidro Temperado 8mm",
            quantity=3.0,  # 1.5m x 1.0m x 2 pieces
            unit_price=150.0,
            total_price=450.0,
            pricing_model=PricingModel.PER_SQUARE_METER,
            width=1.5,
            height=1.0,
            item_count_for_area_calc=2,
        ),
    ]


@pytest.fixture
def sample_entries() -> list[AccountsPayableEntry]:
    """Accounts payable around 2025-03-12 (a Wednesday)"""
    return [
        AccountsPayableEntry(id="1", name="Aluguel Galpão", amount=2500.0, due_date=date(2025, 3, 10), is_paid=True),
        AccountsPayableEntry(id="2", name="Energia", amount=480.5, due_date=date(2025, 3, 16)),
        AccountsPayableEntry(id="3", name="Fornecedor Vidros - Parcela 1/2", amount=900.0, due_date=date(2025, 3, 28),
                             series_id="series-abc", total_installments_in_series=2, installment_number_of_series=1),
        AccountsPayableEntry(id="4", name="Fornecedor Vidros - Parcela 2/2", amount=900.0, due_date=date(2025, 4, 28),
                             series_id="series-abc", total_installments_in_series=2, installment_number_of_series=2),
        AccountsPayableEntry(id="5", name="Internet", amount=120.0, due_date=date(2025, 2, 20), is_paid=True),
    ]
