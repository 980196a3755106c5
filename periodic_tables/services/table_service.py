import logging
from typing import Any, Dict, List, Optional

from ..errors import InvalidInput, NotFound
from ..models import Table
from ..schemas import TableCreate
from ..unit_of_work import AbstractUnitOfWork
from .reservation_service import ReservationService

logger = logging.getLogger(__name__)


class TableService:
    """Table creation plus seating and clearing.

    Seating and clearing write the table and the reservation status in the
    same unit of work, so either both changes are committed or neither is.
    """

    def __init__(self, uow: AbstractUnitOfWork, reservations: ReservationService):
        self.uow = uow
        self.reservations = reservations

    def list(self) -> List[Table]:
        with self.uow:
            return self.uow.tables.list()

    def read(self, table_id: int) -> Table:
        with self.uow:
            table = self.uow.tables.read(table_id)
            if table is None:
                raise NotFound(f"Table ID: {table_id} Not Found")
            return table

    def create(self, payload: Optional[Dict[str, Any]]) -> Table:
        new_table = self._validate_fields(payload)
        with self.uow:
            table = self.uow.tables.create(new_table)
            self.uow.commit()
        logger.info("Created table %s (%s seats)", table.table_name, table.capacity)
        return table

    def update(self, table_id: int, payload: Optional[Dict[str, Any]]) -> Table:
        """Seat the reservation named in the payload at ``table_id``."""
        if not payload or not isinstance(payload, dict) or not payload.get("reservation_id"):
            raise InvalidInput("No data or no reservation_id sent.")
        reservation_id = payload["reservation_id"]
        if isinstance(reservation_id, str) and reservation_id.isdigit():
            reservation_id = int(reservation_id)

        with self.uow:
            reservation = None
            if isinstance(reservation_id, int) and not isinstance(reservation_id, bool):
                reservation = self.uow.reservations.read(reservation_id)
            if reservation is None:
                raise NotFound(f"{reservation_id} not found")
            if reservation.status == "seated":
                raise InvalidInput(f"{reservation_id} already seated")
            if reservation.status in ("finished", "cancelled"):
                raise InvalidInput(f"{reservation_id} is {reservation.status}")

            table = self.uow.tables.read(table_id)
            if table is None:
                raise NotFound(f"Table ID: {table_id} Not Found")
            if table.occupied:
                raise InvalidInput("Table is already occupied!")
            if reservation.people > table.capacity:
                raise InvalidInput("Table is over capacity!")

            seated = self.uow.tables.update(table_id, reservation_id)
            self.reservations.apply_status(reservation, "seated")
            self.uow.commit()

        logger.info("Seated reservation %s at table %s", reservation_id, table_id)
        return seated

    def delete(self, table_id: int) -> Table:
        """Clear the table and finish the reservation that was seated there."""
        with self.uow:
            table = self.uow.tables.read(table_id)
            if table is None:
                raise NotFound(f"{table_id} not found")
            reservation_id = table.reservation_id
            if not reservation_id:
                raise InvalidInput(f"table {table_id} is not occupied")

            reservation = self.uow.reservations.read(reservation_id)
            cleared = self.uow.tables.clear_table(table_id)
            # Already finished through the status endpoint: only the table needs freeing
            if reservation is not None and reservation.status != "finished":
                self.reservations.apply_status(reservation, "finished")
            self.uow.commit()

        logger.info("Cleared table %s, reservation %s finished", table_id, reservation_id)
        return cleared

    @staticmethod
    def _validate_fields(payload: Optional[Dict[str, Any]]) -> TableCreate:
        if not payload or not isinstance(payload, dict):
            raise InvalidInput("Invalid table parameters!")

        capacity = payload.get("capacity")
        table_name = payload.get("table_name")
        if not capacity or isinstance(capacity, bool) or not isinstance(capacity, int):
            raise InvalidInput("Invalid table capacity!")
        if not table_name or not isinstance(table_name, str):
            raise InvalidInput("Invalid table_name!")
        if capacity < 1:
            raise InvalidInput("Table must be able to accommodate at least 1 person!")
        if len(table_name) < 2:
            raise InvalidInput("table_name must be at least 2 characters!")

        return TableCreate(table_name=table_name, capacity=capacity)
