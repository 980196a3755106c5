from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String
from datetime import datetime

from .database import Base

RESERVATION_STATUSES = ("booked", "seated", "finished", "cancelled")

class Reservation(Base):
    """Customer reservations"""
    __tablename__ = "reservations"

    reservation_id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    mobile_number = Column(String(30), nullable=False, index=True)
    reservation_date = Column(Date, nullable=False, index=True)
    reservation_time = Column(String(5), nullable=False)  # HH:MM format
    people = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="booked")  # booked, seated, finished, cancelled
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("people >= 1", name="ck_reservations_people_positive"),
    )

class Table(Base):
    """Restaurant tables and the reservation currently seated at them"""
    __tablename__ = "tables"

    table_id = Column(Integer, primary_key=True, index=True)
    table_name = Column(String(50), nullable=False)
    capacity = Column(Integer, nullable=False)
    occupied = Column(Boolean, nullable=False, default=False)
    # Weak reference: clearing the table never deletes the reservation
    reservation_id = Column(Integer, ForeignKey("reservations.reservation_id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_tables_capacity_positive"),
    )
