import abc

from sqlalchemy.orm import Session

from .repositories import (
    ReservationRepository,
    SqlAlchemyReservationRepository,
    SqlAlchemyTableRepository,
    TableRepository,
)


class AbstractUnitOfWork(abc.ABC):
    """Owns the repositories for one request and the transaction around them.

    An exception inside the ``with`` block rolls back every write made
    through the repositories. Writes that are never committed are discarded
    when the session closes.
    """

    reservations: ReservationRepository
    tables: TableRepository

    def __enter__(self) -> "AbstractUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.rollback()

    @abc.abstractmethod
    def commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self):
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, db: Session):
        self.db = db
        self.reservations = SqlAlchemyReservationRepository(db)
        self.tables = SqlAlchemyTableRepository(db)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
