"""
Test drive booking engine.

A slot is the ``(car, date, time_slot)`` triple. At most one booking may hold
a slot unless it has been canceled; completed bookings keep it. Both dates and
labels compare exactly, so ``"10:00 AM"`` and ``"10:00AM"`` are different
slots.

Bookings move through a small state machine::

    booked -> confirmed -> completed
       \\          \\
        +----------+--> canceled

``completed`` and ``canceled`` are terminal.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, FrozenSet, List

from fastapi import Request
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from carmarket.exceptions import Conflict, InvalidTransition, NotFound, Unauthorized, ValidationError
from carmarket.models.car import Car
from carmarket.models.test_drive import TestDrive, TestDriveStatus
from carmarket.schemas.test_drive import TestDriveCreate
from carmarket.schemas.user import Identity

logger = logging.getLogger(__name__)

TRANSITIONS: Dict[TestDriveStatus, FrozenSet[TestDriveStatus]] = {
    TestDriveStatus.BOOKED: frozenset({TestDriveStatus.CONFIRMED, TestDriveStatus.CANCELED}),
    TestDriveStatus.CONFIRMED: frozenset({TestDriveStatus.COMPLETED, TestDriveStatus.CANCELED}),
    TestDriveStatus.COMPLETED: frozenset(),
    TestDriveStatus.CANCELED: frozenset(),
}

# Statuses a caller may request; "booked" is only ever the initial state
UPDATABLE_STATUSES = frozenset({
    TestDriveStatus.CONFIRMED,
    TestDriveStatus.COMPLETED,
    TestDriveStatus.CANCELED,
})


def can_transition(current: TestDriveStatus, new: TestDriveStatus) -> bool:
    return new in TRANSITIONS[current]


def is_terminal(status: TestDriveStatus) -> bool:
    return not TRANSITIONS[status]


def parse_status(value: str) -> TestDriveStatus:
    """Map a requested status string to a status a caller may set."""
    try:
        status = TestDriveStatus(value)
    except ValueError:
        raise ValidationError("Please provide a valid status")
    if status not in UPDATABLE_STATUSES:
        raise ValidationError("Please provide a valid status")
    return status


class BookingEngine:
    """
    Creates bookings and applies status changes.

    Check-and-insert and status changes for a car run under that car's lock,
    so requests handled by this process cannot both pass the same check. The
    partial unique index and the status-guarded update cover writers in other
    processes.

    A car's lock lives only while some request holds or awaits it.
    """

    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}

    @asynccontextmanager
    async def car_lock(self, car_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(car_id, asyncio.Lock())
        self._lock_users[car_id] = self._lock_users.get(car_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[car_id] -= 1
            if not self._lock_users[car_id]:
                del self._lock_users[car_id]
                del self._locks[car_id]

    @property
    def active_locks(self) -> int:
        return len(self._locks)

    async def request_booking(
        self,
        db: AsyncSession,
        booking: TestDriveCreate,
        requester: Identity,
    ) -> TestDrive:
        """Book a slot for the requester, or raise NotFound/Conflict."""
        result = await db.execute(select(Car.id).where(Car.id == booking.car))
        if result.scalar_one_or_none() is None:
            raise NotFound("Car not found")

        async with self.car_lock(booking.car):
            result = await db.execute(
                select(TestDrive.id).where(
                    TestDrive.car_id == booking.car,
                    TestDrive.date == booking.date,
                    TestDrive.time_slot == booking.time_slot,
                    TestDrive.status != TestDriveStatus.CANCELED,
                )
            )
            if result.first() is not None:
                raise Conflict("This slot is already booked for this car")

            test_drive = TestDrive(
                user_id=requester.id,
                car_id=booking.car,
                date=booking.date,
                time_slot=booking.time_slot,
                contact_number=booking.contact_number,
                message=booking.message,
                status=TestDriveStatus.BOOKED,
            )
            db.add(test_drive)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise Conflict("This slot is already booked for this car")

        await db.refresh(test_drive)
        logger.info(
            "Test drive %s booked by user %s for car %s on %s at %s",
            test_drive.id, requester.id, booking.car, booking.date, booking.time_slot,
        )
        return test_drive

    async def list_bookings_for_user(self, db: AsyncSession, user_id: int) -> List[TestDrive]:
        """All bookings owned by the user, oldest first, with their cars loaded."""
        result = await db.execute(
            select(TestDrive)
            .options(selectinload(TestDrive.car))
            .where(TestDrive.user_id == user_id)
            .order_by(TestDrive.id)
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        db: AsyncSession,
        booking_id: int,
        new_status: str,
        actor: Identity,
    ) -> TestDrive:
        """
        Move a booking to a new status.

        Only the booking's owner or an administrator may do so, and only along
        an edge of the transition table. The stored status is untouched when
        any check fails.
        """
        status = parse_status(new_status)

        result = await db.execute(select(TestDrive).where(TestDrive.id == booking_id))
        test_drive = result.scalar_one_or_none()
        if test_drive is None:
            raise NotFound("Test drive booking not found")

        if test_drive.user_id != actor.id and not actor.is_admin:
            raise Unauthorized("Not authorized to update this booking")

        async with self.car_lock(test_drive.car_id):
            # Another request may have moved the booking since it was read
            await db.refresh(test_drive)
            current = TestDriveStatus(test_drive.status)
            if not can_transition(current, status):
                raise InvalidTransition(
                    f"Cannot change status from '{current.value}' to '{status.value}'"
                )

            result = await db.execute(
                update(TestDrive)
                .where(TestDrive.id == booking_id, TestDrive.status == current)
                .values(status=status)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await db.rollback()
                raise InvalidTransition(
                    f"Booking is no longer '{current.value}'; cannot change status to '{status.value}'"
                )
            await db.commit()

        await db.refresh(test_drive)

        logger.info(
            "Test drive %s moved %s -> %s by user %s",
            test_drive.id, current.value, status.value, actor.id,
        )
        return test_drive


def get_booking_engine(request: Request) -> BookingEngine:
    """Dependency returning the engine created at startup."""
    return request.app.state.booking_engine
