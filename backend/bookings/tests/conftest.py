import pytest
from rest_framework.test import APIClient

from accounts.models import User
from cars.models import Car


@pytest.fixture
def host(db):
    return User.objects.create_user(
        username="host@example.com",
        email="host@example.com",
        password="password123",
        first_name="Harper",
        last_name="Host",
    )


@pytest.fixture
def tenant(db):
    return User.objects.create_user(
        username="tenant@example.com",
        email="tenant@example.com",
        password="password123",
        first_name="Tess",
        last_name="Tenant",
    )


@pytest.fixture
def outsider(db):
    return User.objects.create_user(
        username="outsider@example.com",
        email="outsider@example.com",
        password="password123",
    )


@pytest.fixture
def car(host):
    return Car.objects.create(
        host=host,
        title="City hatchback",
        make="Toyota",
        model="Yaris",
        year=2022,
        image_url="https://cdn.example.com/cars/yaris.jpg",
        daily_price="50.00",
    )


@pytest.fixture
def booking_payload(car):
    def build(**overrides):
        payment_overrides = overrides.pop("payment", {})
        payload = {
            "pickupDate": "2024-06-01",
            "pickupTime": "10:00",
            "returnDate": "2024-06-05",
            "returnTime": "10:00",
            "insuranceOption": "basic",
            "additionalDrivers": 0,
            "specialRequests": "Child seat please",
            "agreeToTerms": True,
            "carId": car.id,
            "totalCost": "200.00",
            "payment": {
                "cardNumber": "4242 4242 4242 4242",
                "cardName": "Tess Tenant",
                "expiryDate": "12/27",
                "cvv": "123",
                "saveCard": False,
            },
        }
        if payment_overrides is None:
            payload["payment"] = None
        else:
            payload["payment"].update(payment_overrides)
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def api_client():
    def build(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user)
        return client

    return build
