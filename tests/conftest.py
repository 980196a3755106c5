"""
Test configuration and fixtures for the Periodic Tables API.

Service tests run against an in-memory unit of work; API tests run the
FastAPI app against an in-memory SQLite database.
"""

from datetime import datetime
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from periodic_tables.database import Base, get_db
from periodic_tables.main import app, get_clock
from periodic_tables.models import Reservation, Table
from periodic_tables.repositories import ReservationRepository, TableRepository, digits_only
from periodic_tables.services.reservation_service import ReservationService
from periodic_tables.services.table_service import TableService
from periodic_tables.unit_of_work import AbstractUnitOfWork

# Monday; 2024-02-15 is a Thursday and 2024-02-13 a Tuesday
FIXED_NOW = datetime(2024, 1, 1, 12, 0)


def reservation_payload(**overrides):
    payload = {
        "first_name": "Rick",
        "last_name": "Sanchez",
        "mobile_number": "(202) 555-0164",
        "reservation_date": "2024-02-15",
        "reservation_time": "18:00",
        "people": 2,
    }
    payload.update(overrides)
    return payload


class InMemoryReservationRepository(ReservationRepository):
    def __init__(self):
        self.rows: Dict[int, Reservation] = {}

    def add(self, **fields) -> Reservation:
        row = Reservation(reservation_id=len(self.rows) + 1, **fields)
        self.rows[row.reservation_id] = row
        return row

    def list(self, reservation_date=None) -> List[Reservation]:
        rows = [r for r in self.rows.values() if not reservation_date or r.reservation_date == reservation_date]
        return sorted(rows, key=lambda r: (r.reservation_date, r.reservation_time))

    def list_by_mobile_number(self, mobile_number) -> List[Reservation]:
        digits = digits_only(mobile_number)
        return [r for r in self.rows.values() if digits in digits_only(r.mobile_number)]

    def read(self, reservation_id) -> Optional[Reservation]:
        return self.rows.get(reservation_id)

    def create(self, reservation) -> Reservation:
        return self.add(**reservation.model_dump(), status="booked")

    def update(self, reservation_id, reservation) -> Reservation:
        row = self.rows[reservation_id]
        for key, value in reservation.model_dump().items():
            setattr(row, key, value)
        return row

    def update_status(self, reservation_id, status) -> str:
        self.rows[reservation_id].status = status
        return status


class InMemoryTableRepository(TableRepository):
    def __init__(self):
        self.rows: Dict[int, Table] = {}

    def add(self, **fields) -> Table:
        fields.setdefault("occupied", False)
        fields.setdefault("reservation_id", None)
        row = Table(table_id=len(self.rows) + 1, **fields)
        self.rows[row.table_id] = row
        return row

    def list(self) -> List[Table]:
        return sorted(self.rows.values(), key=lambda t: t.table_name)

    def read(self, table_id) -> Optional[Table]:
        return self.rows.get(table_id)

    def create(self, table) -> Table:
        return self.add(**table.model_dump())

    def update(self, table_id, reservation_id) -> Table:
        row = self.rows[table_id]
        row.reservation_id = reservation_id
        row.occupied = True
        return row

    def clear_table(self, table_id) -> Table:
        row = self.rows[table_id]
        row.reservation_id = None
        row.occupied = False
        return row


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self):
        self.reservations = InMemoryReservationRepository()
        self.tables = InMemoryTableRepository()
        self.commits = 0

    def commit(self):
        self.commits += 1

    def rollback(self):
        pass


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def reservation_service(uow):
    return ReservationService(uow, clock=lambda: FIXED_NOW)


@pytest.fixture
def table_service(uow, reservation_service):
    return TableService(uow, reservation_service)


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
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_reservation():
    return reservation_payload
