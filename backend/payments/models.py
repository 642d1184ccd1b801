from django.conf import settings
from django.db import models


class Payment(models.Model):
    """Settlement record for a booking. Created and updated only alongside it."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COMPLETED = "COMPLETED", "Completed"
        FAILED = "FAILED", "Failed"
        REFUNDED = "REFUNDED", "Refunded"

    CREDIT_CARD = "CREDIT_CARD"

    booking = models.OneToOneField("bookings.Booking", on_delete=models.CASCADE, related_name="payment")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.PENDING)
    payment_method = models.CharField(max_length=50, default=CREDIT_CARD)
    transaction_reference = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.transaction_reference} ({self.status})"


class SavedCard(models.Model):
    """Card remembered for a user. Only a keyed fingerprint of the number is kept."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="saved_cards")
    fingerprint = models.CharField(max_length=64)
    card_holder = models.CharField(max_length=255)
    expiry = models.CharField(max_length=5)
    last_four = models.CharField(max_length=4)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "fingerprint"], name="saved_card_unique_per_user"),
        ]

    def __str__(self):
        return f"{self.card_holder} •••• {self.last_four}"
