from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional, List


class ReservationBase(BaseModel):
    first_name: str
    last_name: str
    mobile_number: str
    reservation_date: date
    reservation_time: str
    people: int


class ReservationCreate(ReservationBase):
    pass


class Reservation(ReservationBase):
    reservation_id: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TableBase(BaseModel):
    table_name: str
    capacity: int


class TableCreate(TableBase):
    pass


class Table(TableBase):
    table_id: int
    occupied: bool
    reservation_id: Optional[int] = None

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    status: str


class ReservationEnvelope(BaseModel):
    data: Reservation


class ReservationListEnvelope(BaseModel):
    data: List[Reservation]


class StatusEnvelope(BaseModel):
    data: StatusUpdate


class TableEnvelope(BaseModel):
    data: Table


class TableListEnvelope(BaseModel):
    data: List[Table]


class ErrorResponse(BaseModel):
    status: int
    message: str
