import asyncio
import datetime
import unittest
import uuid

from carmarket.auth import hash_password
from carmarket.booking import BookingEngine
from carmarket.database import AsyncSessionLocal, close_db, init_db
from carmarket.exceptions import Conflict, InvalidTransition
from carmarket.models import Car, CarCondition, User
from carmarket.models import test_drive as test_drive_models
from carmarket.schemas import test_drive as test_drive_schemas
from carmarket.schemas.user import Identity


async def seed_listing(name):
    """Create a user with one listed car; returns (identity, car_id)."""
    async with AsyncSessionLocal() as session:
        user = User(
            name=name,
            email=f"{name.lower()}-{uuid.uuid4().hex[:12]}@carmarket.io",
            hashed_password=hash_password("secret123"),
        )
        session.add(user)
        await session.flush()
        car = Car(
            user_id=user.id, make="Mazda", model="3", year=2020, price=15000,
            mileage=20000, condition=CarCondition.GOOD,
            images=[{"url": "https://img.example.com/m.jpg", "public_id": "m"}],
        )
        session.add(car)
        await session.flush()
        identity = Identity(id=user.id, name=user.name, email=user.email, role="user")
        car_id = car.id
        await session.commit()
    return identity, car_id


class TestConcurrentBooking(unittest.TestCase):

    def test_one_winner_per_slot(self):
        outcomes, engine = asyncio.run(self._race(attempts=4))
        self.assertEqual(sorted(outcomes), ["booked", "conflict", "conflict", "conflict"])
        self.assertEqual(engine.active_locks, 0)

    async def _race(self, attempts):
        await init_db()
        try:
            identity, car_id = await seed_listing("Racer")

            engine = BookingEngine()
            request = test_drive_schemas.TestDriveCreate(
                car=car_id,
                date=datetime.date(2024, 6, 1),
                time_slot="10:00 AM",
                contact_number="+15550123",
            )

            async def attempt():
                async with AsyncSessionLocal() as session:
                    try:
                        await engine.request_booking(session, request, identity)
                    except Conflict:
                        return "conflict"
                    return "booked"

            outcomes = await asyncio.gather(*(attempt() for _ in range(attempts)))
            return outcomes, engine
        finally:
            await close_db()


class TestConcurrentStatusUpdates(unittest.TestCase):

    def test_terminal_status_is_not_overwritten(self):
        outcomes, final_status, engine = asyncio.run(self._race())
        winners = [status for status, outcome in outcomes.items() if outcome == "ok"]
        losers = [status for status, outcome in outcomes.items() if outcome == "invalid_transition"]

        self.assertEqual(len(winners), 1)
        self.assertEqual(len(losers), 1)
        self.assertEqual(final_status.value, winners[0])
        self.assertEqual(engine.active_locks, 0)

    async def _race(self):
        await init_db()
        try:
            owner, car_id = await seed_listing("Driver")
            admin = Identity(id=0, name="Admin", email="admin@carmarket.io", role="admin")

            async with AsyncSessionLocal() as session:
                booking = test_drive_models.TestDrive(
                    user_id=owner.id,
                    car_id=car_id,
                    date=datetime.date(2024, 6, 2),
                    time_slot="2:00 PM",
                    contact_number="+15550123",
                    status=test_drive_models.TestDriveStatus.CONFIRMED,
                )
                session.add(booking)
                await session.commit()
                booking_id = booking.id

            engine = BookingEngine()

            async def attempt(actor, status):
                async with AsyncSessionLocal() as session:
                    try:
                        await engine.update_status(session, booking_id, status, actor)
                    except InvalidTransition:
                        return status, "invalid_transition"
                    return status, "ok"

            outcomes = dict(await asyncio.gather(
                attempt(admin, "completed"),
                attempt(owner, "canceled"),
            ))

            async with AsyncSessionLocal() as session:
                stored = await session.get(test_drive_models.TestDrive, booking_id)
                final_status = test_drive_models.TestDriveStatus(stored.status)
            return outcomes, final_status, engine
        finally:
            await close_db()
