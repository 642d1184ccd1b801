from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Car(models.Model):
    """A listed car. Owned by its host; bookings reference it."""

    host = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cars")
    title = models.CharField(max_length=200)
    make = models.CharField(max_length=50)
    model = models.CharField(max_length=50)
    year = models.PositiveIntegerField()
    image_url = models.URLField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    daily_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.year} {self.make} {self.model}"
