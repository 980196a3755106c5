import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import schemas
from .config import settings
from .database import get_db, init_db
from .errors import register_exception_handlers
from .services.reservation_service import ReservationService
from .services.table_service import TableService
from .unit_of_work import SqlAlchemyUnitOfWork

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Periodic Tables",
    description="Reservation and table management API for a single restaurant",
    version="1.0.0",
    responses={
        400: {"model": schemas.ErrorResponse},
        404: {"model": schemas.ErrorResponse},
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Create the schema on startup"""
    init_db()
    logger.info("Periodic Tables API ready")


def get_clock():
    return datetime.now


def get_uow(db: Session = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db)


def get_reservation_service(
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    clock=Depends(get_clock),
) -> ReservationService:
    return ReservationService(uow, clock=clock)


def get_table_service(
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    reservations: ReservationService = Depends(get_reservation_service),
) -> TableService:
    return TableService(uow, reservations)


def _data(body: Optional[Dict[str, Any]]) -> Any:
    """Unwrap the ``{"data": {...}}`` request envelope."""
    if not isinstance(body, dict):
        return None
    return body.get("data")


# ---------------------------
# Reservations
# ---------------------------

@app.get("/reservations", response_model=schemas.ReservationListEnvelope)
async def list_reservations(
    date: Optional[str] = None,
    mobile_number: Optional[str] = None,
    service: ReservationService = Depends(get_reservation_service),
):
    """List reservations, optionally for one date or matching part of a mobile number"""
    return {"data": service.list(date=date, mobile_number=mobile_number)}


@app.post("/reservations", response_model=schemas.ReservationEnvelope, status_code=201)
async def create_reservation(
    body: Optional[Dict[str, Any]] = Body(default=None),
    service: ReservationService = Depends(get_reservation_service),
):
    """Book a new reservation"""
    return {"data": service.create(_data(body))}


@app.get("/reservations/{reservation_id}", response_model=schemas.ReservationEnvelope)
async def read_reservation(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service),
):
    return {"data": service.read(reservation_id)}


@app.put("/reservations/{reservation_id}", response_model=schemas.ReservationEnvelope)
async def update_reservation(
    reservation_id: int,
    body: Optional[Dict[str, Any]] = Body(default=None),
    service: ReservationService = Depends(get_reservation_service),
):
    """Replace the guest details, date, time and party size of a reservation"""
    return {"data": service.update(reservation_id, _data(body))}


@app.put("/reservations/{reservation_id}/status", response_model=schemas.StatusEnvelope)
async def update_reservation_status(
    reservation_id: int,
    body: Optional[Dict[str, Any]] = Body(default=None),
    service: ReservationService = Depends(get_reservation_service),
):
    """Move a reservation to booked, seated, finished or cancelled"""
    status = service.update_status(reservation_id, _data(body))
    return {"data": {"status": status}}


# ---------------------------
# Tables
# ---------------------------

@app.get("/tables", response_model=schemas.TableListEnvelope)
async def list_tables(service: TableService = Depends(get_table_service)):
    return {"data": service.list()}


@app.post("/tables", response_model=schemas.TableEnvelope, status_code=201)
async def create_table(
    body: Optional[Dict[str, Any]] = Body(default=None),
    service: TableService = Depends(get_table_service),
):
    return {"data": service.create(_data(body))}


@app.get("/tables/{table_id}", response_model=schemas.TableEnvelope)
async def read_table(table_id: int, service: TableService = Depends(get_table_service)):
    return {"data": service.read(table_id)}


@app.put("/tables/{table_id}", response_model=schemas.TableEnvelope)
@app.put("/tables/{table_id}/seat", response_model=schemas.TableEnvelope)
async def seat_table(
    table_id: int,
    body: Optional[Dict[str, Any]] = Body(default=None),
    service: TableService = Depends(get_table_service),
):
    """Seat a reservation at a table"""
    return {"data": service.update(table_id, _data(body))}


@app.delete("/tables/{table_id}", response_model=schemas.TableEnvelope)
@app.delete("/tables/{table_id}/seat", response_model=schemas.TableEnvelope)
async def clear_table(table_id: int, service: TableService = Depends(get_table_service)):
    """Free a table and finish the reservation seated there"""
    return {"data": service.delete(table_id)}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
