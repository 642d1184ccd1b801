from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from bookings.serializers import (
    BookingDetailSerializer,
    BookingStatusSerializer,
    BookingSummarySerializer,
)
from bookings.services.coordinator import BookingCoordinator


class BookingViewSet(viewsets.GenericViewSet):
    serializer_class = BookingSummarySerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"
    filterset_fields = ["status"]
    storage_alias = "default"

    def get_coordinator(self) -> BookingCoordinator:
        return BookingCoordinator(using=self.storage_alias)

    def get_queryset(self):
        return self.get_coordinator().bookings_for_user(self.request.user.id)

    def create(self, request, *args, **kwargs):
        booking = self.get_coordinator().create_booking(user_id=request.user.id, data=request.data)
        return Response(BookingStatusSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path="my-bookings")
    def my_bookings(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return Response(BookingSummarySerializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):
        booking = self.get_coordinator().booking_for_party(user_id=request.user.id, booking_id=pk)
        return Response(BookingDetailSerializer(booking).data)

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        requested = request.data.get("status") if hasattr(request.data, "get") else None
        booking = self.get_coordinator().change_status(
            user_id=request.user.id,
            booking_id=pk,
            requested=requested,
        )
        return Response(BookingStatusSerializer(booking).data)

    def destroy(self, request, pk=None):
        booking = self.get_coordinator().cancel_booking(user_id=request.user.id, booking_id=pk)
        return Response(BookingStatusSerializer(booking).data)
