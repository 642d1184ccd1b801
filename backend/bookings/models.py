from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q


class Booking(models.Model):
    """Reservation of a car by a tenant; always paired with exactly one Payment."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        CONFIRMED = "CONFIRMED", "Confirmed"
        CANCELLED = "CANCELLED", "Cancelled"
        COMPLETED = "COMPLETED", "Completed"

    class Insurance(models.TextChoices):
        BASIC = "basic", "Basic"
        PREMIUM = "premium", "Premium"

    car = models.ForeignKey("cars.Car", on_delete=models.PROTECT, related_name="bookings")
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings_as_tenant",
    )
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings_as_host",
    )
    pickup_at = models.DateTimeField()
    return_at = models.DateTimeField()
    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    insurance_option = models.CharField(max_length=10, choices=Insurance.choices, default=Insurance.BASIC)
    additional_drivers = models.PositiveIntegerField(default=0)
    special_requests = models.TextField(blank=True)
    agreed_to_terms = models.BooleanField(default=False)
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(pickup_at__lt=F("return_at")),
                name="booking_pickup_before_return",
            ),
            models.CheckConstraint(
                condition=Q(total_price__gt=0),
                name="booking_total_price_positive",
            ),
            models.CheckConstraint(
                condition=~Q(tenant=F("host")),
                name="booking_tenant_is_not_host",
            ),
        ]

    def __str__(self):
        return f"Booking #{self.pk} ({self.status})"
