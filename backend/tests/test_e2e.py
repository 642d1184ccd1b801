import pytest
from rest_framework.test import APIClient

from accounts.models import User
from payments.models import Payment


def _register(email, first_name, last_name):
    client = APIClient()
    response = client.post(
        "/api/auth/register/",
        {"email": email, "password": "pass12345", "firstName": first_name, "lastName": last_name},
        format="json",
    )
    assert response.status_code == 201
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['tokens']['accessToken']}")
    return client


@pytest.mark.django_db
def test_end_to_end_booking_flow():
    host_client = _register("bella@example.com", "Bella", "Host")
    tenant_client = _register("alex@example.com", "Alex", "Tenant")

    # Host lists a car, tenant finds it in the public listings
    listed = host_client.post(
        "/api/cars/",
        {"title": "Roadster", "make": "Mazda", "model": "MX-5", "year": 2020, "dailyPrice": "50.00"},
        format="json",
    )
    assert listed.status_code == 201
    assert listed.data["hostId"] == User.objects.get(email="bella@example.com").id
    found = tenant_client.get("/api/cars/listings/", {"make": "mazda"})
    assert [car["id"] for car in found.data["results"]] == [listed.data["id"]]
    car_id = listed.data["id"]

    payload = {
        "pickupDate": "2024-06-01",
        "pickupTime": "09:00",
        "returnDate": "2024-06-05",
        "returnTime": "09:00",
        "insuranceOption": "premium",
        "additionalDrivers": 1,
        "specialRequests": "",
        "agreeToTerms": True,
        "carId": car_id,
        "totalCost": 200,
        "payment": {
            "cardNumber": "4000 0566 5566 5556",
            "cardName": "Alex Tenant",
            "expiryDate": "08/28",
            "cvv": "321",
            "saveCard": True,
        },
    }

    # Tenant books the host's car
    create_response = tenant_client.post("/api/bookings/", payload, format="json")
    assert create_response.status_code == 201
    booking_id = create_response.data["bookingId"]
    assert create_response.data["status"] == "PENDING"

    # Host cannot book their own car
    self_booking = host_client.post("/api/bookings/", payload, format="json")
    assert self_booking.status_code == 400
    assert self_booking.data["code"] == "self_booking_denied"

    # Host confirms, payment settles
    confirm_response = host_client.patch(f"/api/bookings/{booking_id}/status/", {"status": "CONFIRMED"}, format="json")
    assert confirm_response.status_code == 200
    detail = tenant_client.get(f"/api/bookings/{booking_id}/")
    assert detail.status_code == 200
    assert detail.data["status"] == "CONFIRMED"
    assert detail.data["insuranceOption"] == "premium"
    assert detail.data["payment"]["status"] == Payment.Status.COMPLETED

    # Tenant cancels a confirmed booking, payment is refunded
    cancel_response = tenant_client.delete(f"/api/bookings/{booking_id}/")
    assert cancel_response.status_code == 200
    listing = host_client.get("/api/bookings/my-bookings/")
    assert listing.status_code == 200
    assert listing.data[0]["status"] == "CANCELLED"
    assert Payment.objects.get(booking_id=booking_id).status == Payment.Status.REFUNDED

    # Dropped credentials are reported with the clear-auth signal
    tenant_client.credentials()
    anonymous = tenant_client.get("/api/bookings/my-bookings/")
    assert anonymous.status_code == 401
    assert anonymous.data["clearAuth"] is True
