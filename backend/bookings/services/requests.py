"""Parse and validate an incoming booking request.

Checks run in a fixed order and stop at the first failure, so a client always
learns about the earliest problem in its payload.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime, parse_time

from bookings.exceptions import (
    InvalidAdditionalDrivers,
    InvalidAmount,
    InvalidCardNumber,
    InvalidCVV,
    InvalidDate,
    InvalidDateRange,
    InvalidExpiry,
    InvalidInsuranceOption,
    MissingFields,
    MissingPaymentInfo,
    TermsNotAccepted,
)
from bookings.models import Booking

CARD_NUMBER_RE = re.compile(r"[0-9]{16}")
EXPIRY_RE = re.compile(r"(0[1-9]|1[0-2])/[0-9]{2}")
CVV_RE = re.compile(r"[0-9]{3,4}")
WHITESPACE_RE = re.compile(r"\s+")

MAX_TOTAL = Decimal("99999999.99")
MAX_ADDITIONAL_DRIVERS = 2147483647
TRUE_STRINGS = {"true", "1", "yes", "on"}


@dataclass(frozen=True)
class PaymentDetails:
    card_number: str
    card_holder: str
    expiry: str
    save_card: bool

    @property
    def last_four(self) -> str:
        return self.card_number[-4:]


@dataclass(frozen=True)
class BookingRequest:
    car_id: object
    pickup_at: datetime
    return_at: datetime
    total_price: Decimal
    insurance_option: str
    additional_drivers: int
    special_requests: str
    payment: PaymentDetails


def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _is_true(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    if isinstance(value, int):
        return value == 1
    return False


def _parse_day(value) -> date | None:
    text = str(value).strip()
    try:
        parsed = parse_date(text)
        if parsed is None:
            parsed_dt = parse_datetime(text)
            parsed = parsed_dt.date() if parsed_dt else None
    except ValueError:
        return None
    return parsed


def _parse_clock(value) -> time | None:
    try:
        return parse_time(str(value).strip())
    except ValueError:
        return None


def _combine(day_value, clock_value) -> datetime:
    day = _parse_day(day_value)
    clock = _parse_clock(clock_value)
    if day is None or clock is None:
        raise InvalidDate()
    moment = datetime.combine(day, clock)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _parse_payment(payment) -> PaymentDetails:
    if not isinstance(payment, Mapping):
        raise MissingPaymentInfo()
    fields = [payment.get(name) for name in ("cardNumber", "cardName", "expiryDate", "cvv")]
    if not all(_present(value) for value in fields):
        raise MissingPaymentInfo()
    card_number, card_holder, expiry, cvv = (str(value).strip() for value in fields)

    card_number = WHITESPACE_RE.sub("", card_number)
    if not CARD_NUMBER_RE.fullmatch(card_number):
        raise InvalidCardNumber()
    if not EXPIRY_RE.fullmatch(expiry):
        raise InvalidExpiry()
    if not CVV_RE.fullmatch(cvv):
        raise InvalidCVV()

    return PaymentDetails(
        card_number=card_number,
        card_holder=card_holder,
        expiry=expiry,
        save_card=_is_true(payment.get("saveCard", False)),
    )


def _parse_total(value) -> Decimal:
    if isinstance(value, bool) or not _present(value):
        raise InvalidAmount()
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmount()
    if not amount.is_finite() or amount <= 0 or amount > MAX_TOTAL:
        raise InvalidAmount()
    amount = amount.quantize(Decimal("0.01"))
    if amount <= 0:
        raise InvalidAmount()
    return amount


def _parse_insurance(value) -> str:
    if not _present(value):
        return Booking.Insurance.BASIC
    option = str(value).strip().lower()
    if option not in Booking.Insurance.values:
        raise InvalidInsuranceOption()
    return option


def _parse_additional_drivers(value) -> int:
    if not _present(value):
        return 0
    if isinstance(value, bool):
        raise InvalidAdditionalDrivers()
    try:
        drivers = int(str(value).strip())
    except ValueError:
        raise InvalidAdditionalDrivers()
    if drivers < 0 or drivers > MAX_ADDITIONAL_DRIVERS:
        raise InvalidAdditionalDrivers()
    return drivers


def parse_booking_request(data) -> BookingRequest:
    if not isinstance(data, Mapping):
        raise MissingFields()

    required = ("pickupDate", "pickupTime", "returnDate", "returnTime", "carId")
    if not all(_present(data.get(name)) for name in required):
        raise MissingFields()

    pickup_at = _combine(data["pickupDate"], data["pickupTime"])
    return_at = _combine(data["returnDate"], data["returnTime"])
    if pickup_at >= return_at:
        raise InvalidDateRange()

    if not _is_true(data.get("agreeToTerms")):
        raise TermsNotAccepted()

    payment = _parse_payment(data.get("payment"))

    special_requests = data.get("specialRequests")
    return BookingRequest(
        car_id=data["carId"],
        pickup_at=pickup_at,
        return_at=return_at,
        total_price=_parse_total(data.get("totalCost")),
        insurance_option=_parse_insurance(data.get("insuranceOption")),
        additional_drivers=_parse_additional_drivers(data.get("additionalDrivers")),
        special_requests=str(special_requests) if special_requests is not None else "",
        payment=payment,
    )
