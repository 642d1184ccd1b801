from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailed,
)


class MissingFields(ValidationFailed):
    default_detail = "Missing required booking information."
    default_code = "missing_fields"


class InvalidDate(ValidationFailed):
    default_detail = "Invalid date format."
    default_code = "invalid_date"


class InvalidDateRange(ValidationFailed):
    default_detail = "Return date must be after pickup date."
    default_code = "invalid_date_range"


class TermsNotAccepted(ValidationFailed):
    default_detail = "You must agree to the terms and conditions."
    default_code = "terms_not_accepted"


class MissingPaymentInfo(ValidationFailed):
    default_detail = "Missing required payment information."
    default_code = "missing_payment_info"


class InvalidCardNumber(ValidationFailed):
    default_detail = "Invalid card number."
    default_code = "invalid_card_number"


class InvalidExpiry(ValidationFailed):
    default_detail = "Invalid expiry date format. Use MM/YY."
    default_code = "invalid_expiry"


class InvalidCVV(ValidationFailed):
    default_detail = "Invalid CVV."
    default_code = "invalid_cvv"


class InvalidAmount(ValidationFailed):
    default_detail = "Total cost must be a positive amount."
    default_code = "invalid_amount"


class InvalidInsuranceOption(ValidationFailed):
    default_detail = "Insurance option must be basic or premium."
    default_code = "invalid_insurance_option"


class InvalidAdditionalDrivers(ValidationFailed):
    default_detail = "Additional drivers must be a whole number of zero or more."
    default_code = "invalid_additional_drivers"


class InvalidStatus(ValidationFailed):
    default_detail = "Invalid status."
    default_code = "invalid_status"


class CarNotFound(NotFoundError):
    default_detail = "Car not found."
    default_code = "car_not_found"


class BookingNotFound(NotFoundError):
    default_detail = "Booking not found."
    default_code = "booking_not_found"


class NotFoundOrForbidden(NotFoundError):
    # Deliberately indistinguishable from a missing booking.
    default_detail = "Booking not found or you do not have permission to access it."
    default_code = "not_found_or_forbidden"


class SelfBookingDenied(ConflictError):
    default_detail = "You cannot book your own car."
    default_code = "self_booking_denied"


class AlreadyCompleted(ConflictError):
    default_detail = "Cannot cancel a completed booking."
    default_code = "already_completed"


class ForbiddenHostOnly(PermissionDeniedError):
    default_detail = "Only the host can update this booking status."
    default_code = "forbidden_host_only"


class ForbiddenNotParty(PermissionDeniedError):
    default_detail = "Only the host or tenant can cancel this booking."
    default_code = "forbidden_not_party"
