from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from .models import Car

OLDEST_MODEL_YEAR = 1900


class CarSerializer(serializers.ModelSerializer):
    """Listing shape shared by the car list, the listings search and creation."""

    hostId = serializers.IntegerField(source="host_id", read_only=True)
    imageUrl = serializers.URLField(source="image_url", required=False, allow_blank=True)
    dailyPrice = serializers.DecimalField(
        source="daily_price",
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.01"),
    )
    isAvailable = serializers.BooleanField(source="is_available", required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Car
        fields = [
            "id",
            "hostId",
            "title",
            "make",
            "model",
            "year",
            "city",
            "imageUrl",
            "dailyPrice",
            "isAvailable",
            "createdAt",
        ]
        read_only_fields = ["id"]

    def validate_year(self, value: int) -> int:
        newest = timezone.now().year + 1
        if not OLDEST_MODEL_YEAR <= value <= newest:
            raise serializers.ValidationError(f"Year must be between {OLDEST_MODEL_YEAR} and {newest}.")
        return value
