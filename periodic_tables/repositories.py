import abc
import re
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import Reservation, Table
from .schemas import ReservationCreate, TableCreate

_PHONE_PUNCTUATION = ("(", ")", "-", " ")


def digits_only(mobile_number: str) -> str:
    return re.sub(r"\D", "", mobile_number or "")


class ReservationRepository(abc.ABC):
    """Persistence for reservations. Writes are flushed, never committed."""

    @abc.abstractmethod
    def list(self, reservation_date: Optional[date] = None) -> List[Reservation]:
        raise NotImplementedError

    @abc.abstractmethod
    def list_by_mobile_number(self, mobile_number: str) -> List[Reservation]:
        raise NotImplementedError

    @abc.abstractmethod
    def read(self, reservation_id: int) -> Optional[Reservation]:
        raise NotImplementedError

    @abc.abstractmethod
    def create(self, reservation: ReservationCreate) -> Reservation:
        raise NotImplementedError

    @abc.abstractmethod
    def update(self, reservation_id: int, reservation: ReservationCreate) -> Reservation:
        raise NotImplementedError

    @abc.abstractmethod
    def update_status(self, reservation_id: int, status: str) -> str:
        raise NotImplementedError


class TableRepository(abc.ABC):
    """Persistence for tables. Writes are flushed, never committed."""

    @abc.abstractmethod
    def list(self) -> List[Table]:
        raise NotImplementedError

    @abc.abstractmethod
    def read(self, table_id: int) -> Optional[Table]:
        raise NotImplementedError

    @abc.abstractmethod
    def create(self, table: TableCreate) -> Table:
        raise NotImplementedError

    @abc.abstractmethod
    def update(self, table_id: int, reservation_id: int) -> Table:
        """Seat ``reservation_id`` at the table."""
        raise NotImplementedError

    @abc.abstractmethod
    def clear_table(self, table_id: int) -> Table:
        raise NotImplementedError


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, db: Session):
        self.db = db

    def list(self, reservation_date: Optional[date] = None) -> List[Reservation]:
        query = self.db.query(Reservation)
        if reservation_date:
            query = query.filter(Reservation.reservation_date == reservation_date)
        return query.order_by(Reservation.reservation_date, Reservation.reservation_time).all()

    def list_by_mobile_number(self, mobile_number: str) -> List[Reservation]:
        stored = Reservation.mobile_number
        for char in _PHONE_PUNCTUATION:
            stored = func.replace(stored, char, "")
        return self.db.query(Reservation).filter(
            stored.like(f"%{digits_only(mobile_number)}%")
        ).order_by(Reservation.reservation_date, Reservation.reservation_time).all()

    def read(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(
            Reservation.reservation_id == reservation_id
        ).first()

    def create(self, reservation: ReservationCreate) -> Reservation:
        row = Reservation(**reservation.model_dump(), status="booked")
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        return row

    def update(self, reservation_id: int, reservation: ReservationCreate) -> Reservation:
        row = self.read(reservation_id)
        for key, value in reservation.model_dump().items():
            setattr(row, key, value)
        self.db.flush()
        self.db.refresh(row)
        return row

    def update_status(self, reservation_id: int, status: str) -> str:
        row = self.read(reservation_id)
        row.status = status
        self.db.flush()
        return row.status


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Table]:
        return self.db.query(Table).order_by(Table.table_name).all()

    def read(self, table_id: int) -> Optional[Table]:
        return self.db.query(Table).filter(Table.table_id == table_id).first()

    def create(self, table: TableCreate) -> Table:
        row = Table(**table.model_dump(), occupied=False, reservation_id=None)
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        return row

    def update(self, table_id: int, reservation_id: int) -> Table:
        row = self.read(table_id)
        row.reservation_id = reservation_id
        row.occupied = True
        self.db.flush()
        self.db.refresh(row)
        return row

    def clear_table(self, table_id: int) -> Table:
        row = self.read(table_id)
        row.reservation_id = None
        row.occupied = False
        self.db.flush()
        self.db.refresh(row)
        return row
