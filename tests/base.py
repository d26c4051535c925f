import unittest
import uuid

from fastapi.testclient import TestClient

from carmarket.main import app

API = "/api"
ADMIN_EMAIL = "admin@carmarket.io"
ADMIN_PASSWORD = "admin123"


class ApiTestCase(unittest.TestCase):
    """Runs the app once per test class against the test database."""

    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.client.__enter__()

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.clear()
        cls.client.__exit__(None, None, None)

    def setUp(self):
        # Requests authenticate through explicit headers unless a test opts into cookies
        self.client.cookies.clear()

    def register_user(self, name="Test User", **fields):
        payload = {
            "name": name,
            "email": f"user-{uuid.uuid4().hex[:12]}@carmarket.io",
            "password": "secret123",
            "phoneNumber": "+15550100",
            "address": "1 Main St",
        }
        payload.update(fields)
        response = self.client.post(f"{API}/auth/register", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        data = response.json()
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]

    def login_admin(self):
        response = self.client.post(
            f"{API}/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    def create_car(self, headers, **fields):
        payload = {
            "make": "Toyota",
            "model": "Corolla",
            "year": 2020,
            "price": 18500,
            "mileage": 32000,
            "condition": "Good",
            "images": [{"url": "https://img.example.com/corolla.jpg", "public_id": "cars/corolla"}],
            "color": "Silver",
        }
        payload.update(fields)
        response = self.client.post(f"{API}/cars", json=payload, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def book(self, headers, car_id, date="2024-06-01", time_slot="10:00 AM", **fields):
        payload = {
            "car": car_id,
            "date": date,
            "timeSlot": time_slot,
            "contactNumber": "+15550123",
        }
        payload.update(fields)
        return self.client.post(f"{API}/testdrives", json=payload, headers=headers)

    def set_status(self, headers, booking_id, status):
        return self.client.put(
            f"{API}/testdrives/{booking_id}", json={"status": status}, headers=headers
        )

    def my_bookings(self, headers):
        response = self.client.get(f"{API}/testdrives/my", headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def status_of(self, headers, booking_id):
        for booking in self.my_bookings(headers):
            if booking["id"] == booking_id:
                return booking["status"]
        self.fail(f"booking {booking_id} not listed")
