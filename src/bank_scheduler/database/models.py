"""SQLAlchemy database models."""

import uuid
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from bank_scheduler.models.enums import (
    AppointmentStatus,
    WeekDay,
    status_from_storage,
    status_to_storage,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class AppointmentStatusType(TypeDecorator):
    """Store AppointmentStatus through the explicit versioned text mapping."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return status_to_storage(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return status_from_storage(value)


class Branch(Base):
    """Bank branch database model."""

    __tablename__ = "branches"

    branch_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    schedules: Mapped[list["Schedule"]] = relationship(
        "Schedule", back_populates="branch", cascade="all, delete-orphan"
    )
    counters: Mapped[list["Counter"]] = relationship("Counter", back_populates="branch")

    def __repr__(self) -> str:
        return f"<Branch(branch_id={self.branch_id}, name={self.name})>"


class Schedule(Base):
    """Opening-hours window of a branch on one weekday."""

    __tablename__ = "schedules"
    __table_args__ = (Index("ix_schedules_branch_week_day", "branch_id", "week_day"),)

    schedule_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    branch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("branches.branch_id", ondelete="CASCADE"), nullable=False
    )
    week_day: Mapped[WeekDay] = mapped_column(
        Enum(WeekDay, native_enum=False, length=16), nullable=False
    )
    opening_time: Mapped[time] = mapped_column(Time, nullable=False)
    closing_time: Mapped[time] = mapped_column(Time, nullable=False)

    branch: Mapped["Branch"] = relationship("Branch", back_populates="schedules")

    def __repr__(self) -> str:
        return (
            f"<Schedule(branch_id={self.branch_id}, week_day={self.week_day.value}, "
            f"{self.opening_time}-{self.closing_time})>"
        )


class Service(Base):
    """Service a customer can book (e.g. account opening, loan consultation)."""

    __tablename__ = "services"

    service_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    counter_services: Mapped[list["CounterService"]] = relationship(
        "CounterService", back_populates="service"
    )
    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment", back_populates="service"
    )

    def __repr__(self) -> str:
        return f"<Service(service_id={self.service_id}, name={self.name})>"


class Counter(Base):
    """Physical service point at a branch."""

    __tablename__ = "counters"

    counter_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    branch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("branches.branch_id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    branch: Mapped["Branch"] = relationship("Branch", back_populates="counters")
    counter_services: Mapped[list["CounterService"]] = relationship(
        "CounterService", back_populates="counter", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Counter(counter_id={self.counter_id}, branch_id={self.branch_id})>"


class CounterService(Base):
    """Declares that a counter offers a service."""

    __tablename__ = "counter_services"

    counter_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("counters.counter_id", ondelete="CASCADE"), primary_key=True
    )
    service_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("services.service_id", ondelete="CASCADE"), primary_key=True
    )

    counter: Mapped["Counter"] = relationship("Counter", back_populates="counter_services")
    service: Mapped["Service"] = relationship("Service", back_populates="counter_services")


class Appointment(Base):
    """Appointment of a user for a service at a branch.

    The primary key is the (user, branch, service) triple, so a user holds at
    most one appointment per branch/service pair.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "ix_appointments_slot",
            "branch_id",
            "service_id",
            "arrival_date",
            "arrival_time",
        ),
    )

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    branch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("branches.branch_id", ondelete="RESTRICT"), primary_key=True
    )
    service_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("services.service_id", ondelete="RESTRICT"), primary_key=True
    )

    arrival_date: Mapped[date] = mapped_column(Date, nullable=False)
    arrival_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[AppointmentStatus] = mapped_column(
        AppointmentStatusType(), nullable=False, default=AppointmentStatus.PENDING
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    branch: Mapped["Branch"] = relationship("Branch")
    service: Mapped["Service"] = relationship("Service", back_populates="appointments")

    def __repr__(self) -> str:
        return (
            f"<Appointment(user_id={self.user_id}, branch_id={self.branch_id}, "
            f"service_id={self.service_id}, {self.arrival_date} {self.arrival_time}, "
            f"status={self.status.value if self.status else None})>"
        )
