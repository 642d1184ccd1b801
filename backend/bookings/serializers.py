from rest_framework import serializers

from bookings.models import Booking
from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    transactionReference = serializers.CharField(source="transaction_reference", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Payment
        fields = ["id", "amount", "status", "paymentMethod", "transactionReference", "createdAt"]
        read_only_fields = fields


class BookingSummarySerializer(serializers.ModelSerializer):
    """Booking row as listed for either party, with the car's display fields."""

    pickupAt = serializers.DateTimeField(source="pickup_at", read_only=True)
    returnAt = serializers.DateTimeField(source="return_at", read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=10, decimal_places=2, read_only=True)
    insuranceOption = serializers.CharField(source="insurance_option", read_only=True)
    additionalDrivers = serializers.IntegerField(source="additional_drivers", read_only=True)
    specialRequests = serializers.CharField(source="special_requests", read_only=True)
    carId = serializers.IntegerField(source="car_id", read_only=True)
    tenantId = serializers.IntegerField(source="tenant_id", read_only=True)
    hostId = serializers.IntegerField(source="host_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    make = serializers.CharField(source="car.make", read_only=True)
    model = serializers.CharField(source="car.model", read_only=True)
    year = serializers.IntegerField(source="car.year", read_only=True)
    imageUrl = serializers.CharField(source="car.image_url", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "status",
            "pickupAt",
            "returnAt",
            "totalPrice",
            "insuranceOption",
            "additionalDrivers",
            "specialRequests",
            "carId",
            "tenantId",
            "hostId",
            "createdAt",
            "make",
            "model",
            "year",
            "imageUrl",
        ]
        read_only_fields = fields


class BookingDetailSerializer(BookingSummarySerializer):
    hostFirstName = serializers.CharField(source="host.first_name", read_only=True)
    hostLastName = serializers.CharField(source="host.last_name", read_only=True)
    tenantFirstName = serializers.CharField(source="tenant.first_name", read_only=True)
    tenantLastName = serializers.CharField(source="tenant.last_name", read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta(BookingSummarySerializer.Meta):
        fields = BookingSummarySerializer.Meta.fields + [
            "hostFirstName",
            "hostLastName",
            "tenantFirstName",
            "tenantLastName",
            "payment",
        ]
        read_only_fields = fields

    def get_payment(self, obj: Booking):
        payment = getattr(obj, "payment", None)
        if payment is None:
            return None
        return PaymentSerializer(payment).data


class BookingStatusSerializer(serializers.Serializer):
    """Response body for create, status change and cancel."""

    bookingId = serializers.IntegerField(source="id")
    status = serializers.CharField()
