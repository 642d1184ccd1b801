"""Booking lifecycle rules.

``TRANSITIONS`` and ``ALLOWED_ROLES`` are the only place status changes are
defined; the coordinator asks :func:`transition` or :func:`cancellation` for the
next status and never compares status strings itself.
"""

from __future__ import annotations

from bookings.exceptions import (
    AlreadyCompleted,
    ForbiddenHostOnly,
    ForbiddenNotParty,
    InvalidStatus,
)
from bookings.models import Booking
from payments.models import Payment

Status = Booking.Status

HOST = "HOST"
TENANT = "TENANT"
OUTSIDER = "OUTSIDER"

TRANSITIONS: dict[str, frozenset[str]] = {
    Status.PENDING: frozenset({Status.CONFIRMED, Status.CANCELLED}),
    Status.CONFIRMED: frozenset({Status.CANCELLED, Status.COMPLETED}),
    Status.CANCELLED: frozenset(),
    Status.COMPLETED: frozenset(),
}

ALLOWED_ROLES: dict[str, frozenset[str]] = {
    Status.CONFIRMED: frozenset({HOST}),
    Status.COMPLETED: frozenset({HOST}),
    Status.CANCELLED: frozenset({HOST, TENANT}),
}

# Payment status written in the same transaction as the booking transition.
PAYMENT_EFFECTS: dict[str, str] = {
    Status.CONFIRMED: Payment.Status.COMPLETED,
    Status.CANCELLED: Payment.Status.REFUNDED,
}


def role_for(booking: Booking, user_id) -> str:
    if booking.host_id == user_id:
        return HOST
    if booking.tenant_id == user_id:
        return TENANT
    return OUTSIDER


def ensure_requestable(requested) -> str:
    if not isinstance(requested, str) or requested not in ALLOWED_ROLES:
        raise InvalidStatus()
    return requested


def transition(current: str, requested, role: str) -> str:
    """Return the status a booking moves to, or raise why it cannot."""
    requested = ensure_requestable(requested)
    if role not in ALLOWED_ROLES[requested]:
        if requested == Status.CANCELLED:
            raise ForbiddenNotParty()
        raise ForbiddenHostOnly()
    if requested not in TRANSITIONS.get(current, frozenset()):
        raise InvalidStatus(f"Cannot change a {current} booking to {requested}.")
    return requested


def cancellation(current: str, role: str) -> str:
    """Explicit cancel: open to either party, refused once the rental is over."""
    if role == OUTSIDER:
        raise ForbiddenNotParty()
    if current == Status.COMPLETED:
        raise AlreadyCompleted()
    if current == Status.CANCELLED:
        raise InvalidStatus("Booking is already cancelled.")
    return Status.CANCELLED
