"""Booking transaction coordinator.

Owns every write that touches bookings and payments together. A coordinator is
bound to a storage context (a Django database alias) and to the car registry
lookup it should use, so views build one per request and tests can hand it a
different database or a fake registry.
"""

from __future__ import annotations

import logging
from typing import Callable

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction
from django.db.models import Q, QuerySet

from bookings import state
from bookings.exceptions import (
    BookingNotFound,
    CarNotFound,
    NotFoundOrForbidden,
    SelfBookingDenied,
)
from bookings.models import Booking
from bookings.services.requests import BookingRequest, parse_booking_request
from cars.services.registry import CarHost, resolve_car_host
from payments.services.cards import save_card_once
from payments.services.ledger import apply_payment_status, open_payment

logger = logging.getLogger(__name__)

CarLookup = Callable[..., "CarHost | None"]


class BookingCoordinator:
    def __init__(self, *, using: str = DEFAULT_DB_ALIAS, car_lookup: CarLookup = resolve_car_host):
        self.using = using
        self.car_lookup = car_lookup

    def _bookings(self) -> QuerySet:
        return Booking.objects.using(self.using)

    @staticmethod
    def _party_filter(user_id) -> Q:
        return Q(tenant_id=user_id) | Q(host_id=user_id)

    def create_booking(self, *, user_id, data) -> Booking:
        """Validate ``data`` and write the booking, its payment and an optional saved card atomically."""
        request = parse_booking_request(data)

        car = self.car_lookup(request.car_id, using=self.using)
        if car is None:
            raise CarNotFound()
        if car.host_id == user_id:
            raise SelfBookingDenied()

        # TODO: reject requests overlapping a PENDING or CONFIRMED booking of the same car.
        try:
            with transaction.atomic(using=self.using):
                booking = self._insert_booking(request, car=car, tenant_id=user_id)
                payment = open_payment(booking, using=self.using)
                if request.payment.save_card:
                    _, created = save_card_once(
                        user_id=user_id,
                        card_number=request.payment.card_number,
                        card_holder=request.payment.card_holder,
                        expiry=request.payment.expiry,
                        using=self.using,
                    )
                    if not created:
                        logger.debug("Card ending %s already saved for user %s", request.payment.last_four, user_id)
        except DatabaseError:
            logger.warning("Booking for car %s by user %s rolled back", car.car_id, user_id)
            raise

        logger.info(
            "Booking %s created for car %s (tenant=%s, host=%s, payment=%s)",
            booking.pk,
            car.car_id,
            user_id,
            car.host_id,
            payment.transaction_reference,
        )
        return booking

    def _insert_booking(self, request: BookingRequest, *, car: CarHost, tenant_id) -> Booking:
        return self._bookings().create(
            car_id=car.car_id,
            tenant_id=tenant_id,
            host_id=car.host_id,
            pickup_at=request.pickup_at,
            return_at=request.return_at,
            total_price=request.total_price,
            insurance_option=request.insurance_option,
            additional_drivers=request.additional_drivers,
            special_requests=request.special_requests,
            agreed_to_terms=True,
            status=Booking.Status.PENDING,
        )

    def change_status(self, *, user_id, booking_id, requested) -> Booking:
        """Apply a host/tenant requested transition together with its payment effect."""
        state.ensure_requestable(requested)
        with transaction.atomic(using=self.using):
            booking = self._bookings().select_for_update().filter(pk=booking_id).first()
            if booking is None:
                raise BookingNotFound()
            new_status = state.transition(booking.status, requested, state.role_for(booking, user_id))
            self._move(booking, new_status)
        return booking

    def cancel_booking(self, *, user_id, booking_id) -> Booking:
        with transaction.atomic(using=self.using):
            booking = (
                self._bookings()
                .select_for_update()
                .filter(self._party_filter(user_id), pk=booking_id)
                .first()
            )
            if booking is None:
                raise NotFoundOrForbidden()
            new_status = state.cancellation(booking.status, state.role_for(booking, user_id))
            self._move(booking, new_status)
        return booking

    def _move(self, booking: Booking, new_status: str) -> None:
        previous = booking.status
        booking.status = new_status
        booking.save(using=self.using, update_fields=["status", "updated_at"])
        payment_status = state.PAYMENT_EFFECTS.get(new_status)
        if payment_status is not None:
            apply_payment_status(booking, payment_status, using=self.using)
        logger.info("Booking %s moved %s -> %s", booking.pk, previous, new_status)

    def bookings_for_user(self, user_id) -> QuerySet:
        """Bookings where the user is tenant or host, newest first."""
        return (
            self._bookings()
            .filter(self._party_filter(user_id))
            .select_related("car")
            .order_by("-created_at", "-id")
        )

    def booking_for_party(self, *, user_id, booking_id) -> Booking:
        booking = (
            self._bookings()
            .filter(self._party_filter(user_id), pk=booking_id)
            .select_related("car", "host", "tenant", "payment")
            .first()
        )
        if booking is None:
            raise NotFoundOrForbidden()
        return booking
