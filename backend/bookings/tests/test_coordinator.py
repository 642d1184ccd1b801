from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import IntegrityError

from bookings import exceptions
from bookings.models import Booking
from bookings.services.coordinator import BookingCoordinator
from cars.services.registry import CarHost
from payments.models import Payment, SavedCard


@pytest.fixture
def coordinator():
    return BookingCoordinator()


@pytest.fixture
def pending_booking(coordinator, tenant, booking_payload):
    return coordinator.create_booking(user_id=tenant.id, data=booking_payload())


@pytest.mark.django_db
def test_create_writes_booking_and_pending_payment(coordinator, tenant, host, car, booking_payload):
    booking = coordinator.create_booking(user_id=tenant.id, data=booking_payload())

    booking.refresh_from_db()
    assert booking.status == Booking.Status.PENDING
    assert booking.tenant_id == tenant.id
    assert booking.host_id == host.id
    assert booking.car_id == car.id
    assert booking.total_price == Decimal("200.00")
    assert booking.return_at - booking.pickup_at == timedelta(days=4)
    assert booking.agreed_to_terms is True

    payment = Payment.objects.get(booking=booking)
    assert payment.status == Payment.Status.PENDING
    assert payment.amount == booking.total_price
    assert payment.payment_method == Payment.CREDIT_CARD
    assert payment.transaction_reference.startswith("TXN-")
    assert not SavedCard.objects.exists()


@pytest.mark.django_db
def test_missing_car_is_reported_before_any_write(coordinator, tenant, booking_payload):
    with pytest.raises(exceptions.CarNotFound):
        coordinator.create_booking(user_id=tenant.id, data=booking_payload(carId=424242))

    assert not Booking.objects.exists()


@pytest.mark.django_db
def test_host_cannot_book_own_car(coordinator, host, booking_payload):
    with pytest.raises(exceptions.SelfBookingDenied):
        coordinator.create_booking(user_id=host.id, data=booking_payload())

    assert not Booking.objects.exists()
    assert not Payment.objects.exists()


@pytest.mark.django_db
def test_validation_runs_before_car_lookup(tenant, booking_payload):
    lookups = []

    def recording_lookup(car_id, **kwargs):
        lookups.append(car_id)
        return None

    coordinator = BookingCoordinator(car_lookup=recording_lookup)
    with pytest.raises(exceptions.InvalidCVV):
        coordinator.create_booking(user_id=tenant.id, data=booking_payload(payment={"cvv": "1"}))

    assert lookups == []


@pytest.mark.django_db
def test_injected_car_lookup_is_used(tenant, host, car, booking_payload):
    coordinator = BookingCoordinator(
        car_lookup=lambda car_id, **kwargs: CarHost(car_id=car.id, host_id=host.id, is_available=True),
    )

    booking = coordinator.create_booking(user_id=tenant.id, data=booking_payload(carId="anything"))

    assert booking.car_id == car.id


@pytest.mark.django_db
def test_payment_failure_rolls_back_booking(monkeypatch, coordinator, tenant, booking_payload):
    def failing_open_payment(booking, **kwargs):
        raise IntegrityError("payment insert failed")

    monkeypatch.setattr("bookings.services.coordinator.open_payment", failing_open_payment)

    with pytest.raises(IntegrityError, match="payment insert failed"):
        coordinator.create_booking(user_id=tenant.id, data=booking_payload())

    assert not Booking.objects.exists()
    assert not Payment.objects.exists()


@pytest.mark.django_db
def test_saved_card_failure_rolls_back_booking_and_payment(monkeypatch, coordinator, tenant, booking_payload):
    def failing_save(**kwargs):
        raise IntegrityError("card insert failed")

    monkeypatch.setattr("bookings.services.coordinator.save_card_once", failing_save)

    with pytest.raises(IntegrityError):
        coordinator.create_booking(user_id=tenant.id, data=booking_payload(payment={"saveCard": True}))

    assert not Booking.objects.exists()
    assert not Payment.objects.exists()
    assert not SavedCard.objects.exists()


@pytest.mark.django_db
def test_saving_same_card_twice_keeps_one_record(coordinator, tenant, booking_payload):
    coordinator.create_booking(user_id=tenant.id, data=booking_payload(payment={"saveCard": True}))
    coordinator.create_booking(
        user_id=tenant.id,
        data=booking_payload(payment={"saveCard": True, "cardNumber": "4242424242424242"}),
    )

    cards = SavedCard.objects.filter(user=tenant)
    assert cards.count() == 1
    card = cards.get()
    assert card.last_four == "4242"
    assert "4242424242424242" not in card.fingerprint
    assert Booking.objects.count() == 2


@pytest.mark.django_db
def test_transaction_references_are_unique(coordinator, tenant, booking_payload):
    coordinator.create_booking(user_id=tenant.id, data=booking_payload())
    coordinator.create_booking(user_id=tenant.id, data=booking_payload())

    references = list(Payment.objects.values_list("transaction_reference", flat=True))
    assert len(set(references)) == 2


@pytest.mark.django_db
def test_confirm_completes_payment(coordinator, host, pending_booking):
    booking = coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="CONFIRMED")

    assert booking.status == Booking.Status.CONFIRMED
    assert Payment.objects.get(booking=booking).status == Payment.Status.COMPLETED


@pytest.mark.django_db
def test_tenant_cannot_confirm(coordinator, tenant, pending_booking):
    with pytest.raises(exceptions.ForbiddenHostOnly):
        coordinator.change_status(user_id=tenant.id, booking_id=pending_booking.id, requested="CONFIRMED")

    pending_booking.refresh_from_db()
    assert pending_booking.status == Booking.Status.PENDING
    assert pending_booking.payment.status == Payment.Status.PENDING


@pytest.mark.django_db
def test_complete_leaves_payment_untouched(coordinator, host, pending_booking):
    coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="CONFIRMED")
    booking = coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="COMPLETED")

    assert booking.status == Booking.Status.COMPLETED
    assert Payment.objects.get(booking=booking).status == Payment.Status.COMPLETED


@pytest.mark.django_db
def test_pending_booking_cannot_jump_to_completed(coordinator, host, pending_booking):
    with pytest.raises(exceptions.InvalidStatus):
        coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="COMPLETED")


@pytest.mark.django_db
def test_status_change_on_missing_booking(coordinator, host):
    with pytest.raises(exceptions.BookingNotFound):
        coordinator.change_status(user_id=host.id, booking_id=999999, requested="CONFIRMED")


@pytest.mark.django_db
def test_cancel_refunds_payment(coordinator, tenant, pending_booking):
    booking = coordinator.cancel_booking(user_id=tenant.id, booking_id=pending_booking.id)

    assert booking.status == Booking.Status.CANCELLED
    assert Payment.objects.get(booking=booking).status == Payment.Status.REFUNDED


@pytest.mark.django_db
def test_cancel_completed_booking_fails(coordinator, host, tenant, pending_booking):
    coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="CONFIRMED")
    coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="COMPLETED")

    with pytest.raises(exceptions.AlreadyCompleted):
        coordinator.cancel_booking(user_id=tenant.id, booking_id=pending_booking.id)

    pending_booking.refresh_from_db()
    assert pending_booking.status == Booking.Status.COMPLETED


@pytest.mark.django_db
def test_cancel_by_outsider_looks_like_missing_booking(coordinator, outsider, pending_booking):
    with pytest.raises(exceptions.NotFoundOrForbidden):
        coordinator.cancel_booking(user_id=outsider.id, booking_id=pending_booking.id)


@pytest.mark.django_db
def test_payment_update_failure_rolls_back_transition(monkeypatch, coordinator, host, pending_booking):
    def failing_apply(booking, status, **kwargs):
        raise IntegrityError("payment update failed")

    monkeypatch.setattr("bookings.services.coordinator.apply_payment_status", failing_apply)

    with pytest.raises(IntegrityError):
        coordinator.change_status(user_id=host.id, booking_id=pending_booking.id, requested="CONFIRMED")

    pending_booking.refresh_from_db()
    assert pending_booking.status == Booking.Status.PENDING


@pytest.mark.django_db
def test_read_paths_only_show_party_bookings(coordinator, host, tenant, outsider, pending_booking, booking_payload):
    later = coordinator.create_booking(user_id=tenant.id, data=booking_payload())

    assert list(coordinator.bookings_for_user(tenant.id)) == [later, pending_booking]
    assert list(coordinator.bookings_for_user(host.id)) == [later, pending_booking]
    assert list(coordinator.bookings_for_user(outsider.id)) == []

    assert coordinator.booking_for_party(user_id=host.id, booking_id=pending_booking.id) == pending_booking
    with pytest.raises(exceptions.NotFoundOrForbidden):
        coordinator.booking_for_party(user_id=outsider.id, booking_id=pending_booking.id)
