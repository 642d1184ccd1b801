from __future__ import annotations

import logging
import secrets
import time

from django.db import DEFAULT_DB_ALIAS

from payments.models import Payment

logger = logging.getLogger(__name__)


def generate_transaction_reference() -> str:
    """Unique per attempt: epoch milliseconds plus a random suffix."""
    return f"TXN-{int(time.time() * 1000)}-{secrets.token_hex(6).upper()}"


def open_payment(booking, *, using: str = DEFAULT_DB_ALIAS) -> Payment:
    """Record the pending payment for a freshly created booking."""
    return Payment.objects.using(using).create(
        booking=booking,
        amount=booking.total_price,
        status=Payment.Status.PENDING,
        payment_method=Payment.CREDIT_CARD,
        transaction_reference=generate_transaction_reference(),
    )


def apply_payment_status(booking, status: str, *, using: str = DEFAULT_DB_ALIAS) -> Payment:
    """Move the booking's payment to ``status``. Must run inside the caller's transaction."""
    payment = Payment.objects.using(using).select_for_update().get(booking_id=booking.pk)
    previous = payment.status
    payment.status = status
    payment.save(using=using, update_fields=["status", "updated_at"])
    logger.info(
        "Payment %s for booking %s moved %s -> %s",
        payment.transaction_reference,
        booking.pk,
        previous,
        status,
    )
    return payment
