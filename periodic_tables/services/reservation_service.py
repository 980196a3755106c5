import calendar
import logging
import re
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..config import Settings, settings
from ..errors import InvalidInput, NotFound
from ..models import RESERVATION_STATUSES, Reservation
from ..schemas import ReservationCreate
from ..unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "mobile_number",
    "reservation_date",
    "reservation_time",
    "people",
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# Seconds are accepted and dropped so "18:00:00" from a time column round-trips
TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::\d{2})?$")


def _twelve_hour(hhmm: str) -> str:
    """'21:30' -> '9:30 PM'"""
    hours, minutes = (int(part) for part in hhmm[:5].split(":"))
    suffix = "AM" if hours < 12 else "PM"
    return f"{hours % 12 or 12}:{minutes:02d} {suffix}"


class ReservationService:
    """Validation chain and status transitions for reservations.

    Each public operation runs its checks in order and raises on the first
    failure; nothing is written until every check has passed.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        clock: Optional[Callable[[], datetime]] = None,
        config: Settings = settings,
    ):
        self.uow = uow
        self.clock = clock or datetime.now
        self.config = config

    def list(self, date: Optional[str] = None, mobile_number: Optional[str] = None) -> List[Reservation]:
        """All reservations; a mobile number search takes precedence over the date filter."""
        with self.uow:
            if mobile_number:
                return self.uow.reservations.list_by_mobile_number(mobile_number)
            return self.uow.reservations.list(self._parse_date(date, "date") if date else None)

    def read(self, reservation_id: int) -> Reservation:
        with self.uow:
            return self._get_or_404(reservation_id)

    def create(self, payload: Optional[Dict[str, Any]]) -> Reservation:
        reservation = self.validate(payload)
        with self.uow:
            created = self.uow.reservations.create(reservation)
            self.uow.commit()
        logger.info(
            "Booked reservation %s for %s on %s at %s",
            created.reservation_id, reservation.people,
            reservation.reservation_date, reservation.reservation_time,
        )
        return created

    def update(self, reservation_id: int, payload: Optional[Dict[str, Any]]) -> Reservation:
        with self.uow:
            self._get_or_404(reservation_id)
            reservation = self.validate(payload)
            updated = self.uow.reservations.update(reservation_id, reservation)
            self.uow.commit()
        logger.info("Updated reservation %s", reservation_id)
        return updated

    def update_status(self, reservation_id: int, payload: Optional[Dict[str, Any]]) -> str:
        if not payload or not isinstance(payload, dict):
            raise InvalidInput("No data sent")
        with self.uow:
            reservation = self._get_or_404(reservation_id)
            status = self.apply_status(reservation, payload.get("status"))
            self.uow.commit()
        return status

    def apply_status(self, reservation: Reservation, status: Optional[str]) -> str:
        """Check and write a status transition without committing.

        Finished is terminal. Cancelling is allowed from any other state.
        """
        current = reservation.status
        if current == "finished":
            raise InvalidInput("finished reservations cannot be updated!")
        if status not in RESERVATION_STATUSES:
            raise InvalidInput("unknown status cannot be updated!")

        updated = self.uow.reservations.update_status(reservation.reservation_id, status)
        logger.info("Reservation %s: %s -> %s", reservation.reservation_id, current, updated)
        return updated

    def validate(self, payload: Optional[Dict[str, Any]]) -> ReservationCreate:
        """Run the full create/update chain and return the typed request."""
        reservation = self._validate_fields(payload)
        self._validate_work_day(reservation)
        self._validate_work_hours(reservation)
        return reservation

    def _get_or_404(self, reservation_id: int) -> Reservation:
        reservation = self.uow.reservations.read(reservation_id)
        if reservation is None:
            raise NotFound(f"{reservation_id} not found")
        return reservation

    def _validate_fields(self, payload: Optional[Dict[str, Any]]) -> ReservationCreate:
        if not payload or not isinstance(payload, dict):
            raise InvalidInput("No data sent")

        for field in REQUIRED_FIELDS:
            if not payload.get(field):
                raise InvalidInput(f"Invalid input for {field}")

        reservation_date = self._parse_date(payload["reservation_date"], "reservation_date")

        reservation_time = payload["reservation_time"]
        match = TIME_PATTERN.match(reservation_time) if isinstance(reservation_time, str) else None
        if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
            raise InvalidInput("Invalid input: reservation_time")

        people = payload["people"]
        if isinstance(people, bool) or not isinstance(people, int) or people < 1:
            raise InvalidInput("Invalid input: people")

        status = payload.get("status")
        if status == "seated":
            raise InvalidInput("Status is already seated!")
        if status == "finished":
            raise InvalidInput("Status is already finished!")

        try:
            return ReservationCreate(
                first_name=payload["first_name"],
                last_name=payload["last_name"],
                mobile_number=payload["mobile_number"],
                reservation_date=reservation_date,
                reservation_time=f"{match.group(1)}:{match.group(2)}",
                people=people,
            )
        except ValidationError as exc:
            field = exc.errors()[0]["loc"][0]
            raise InvalidInput(f"Invalid input for {field}") from exc

    def _validate_work_day(self, reservation: ReservationCreate):
        closed = self.config.closed_weekday
        if reservation.reservation_date.weekday() == closed:
            raise InvalidInput(f"Restaurant is closed on {calendar.day_name[closed]}s!")

        hours, minutes = (int(part) for part in reservation.reservation_time.split(":"))
        requested = datetime.combine(reservation.reservation_date, time(hours, minutes))
        if requested < self.clock():
            raise InvalidInput("Reservations must be for a future date!")

    def _validate_work_hours(self, reservation: ReservationCreate):
        hhmm = int(reservation.reservation_time.replace(":", ""))
        if hhmm < self.config.opening_hhmm or hhmm > self.config.closing_hhmm:
            raise InvalidInput(
                f"Reservations are only valid from {_twelve_hour(self.config.opening_time)} "
                f"to {_twelve_hour(self.config.closing_time)}."
            )

    @staticmethod
    def _parse_date(value: Any, field: str) -> date:
        if not isinstance(value, str) or not DATE_PATTERN.match(value):
            raise InvalidInput(f"Invalid input: {field}")
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            raise InvalidInput(f"Invalid input: {field}")
