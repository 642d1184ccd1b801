import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, permissions, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .filters import CarListingFilterSet
from .models import Car
from .serializers import CarSerializer

logger = logging.getLogger(__name__)


class ListingPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response(
            {
                "results": data,
                "pagination": {
                    "page": self.page.number,
                    "limit": paginator.per_page,
                    "total": paginator.count,
                    "pages": paginator.num_pages,
                },
            }
        )


class CarViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """Browse cars publicly; authenticated users publish cars as hosts."""

    serializer_class = CarSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = CarListingFilterSet
    ordering_fields = ["daily_price", "created_at", "year"]
    ordering = ["-created_at", "id"]

    def get_permissions(self):
        if self.action in {"list", "listings"}:
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_queryset(self):
        return Car.objects.all()

    def perform_create(self, serializer):
        car = serializer.save(host=self.request.user)
        logger.info("Car %s listed by host %s", car.pk, car.host_id)

    @action(detail=False, methods=["get"])
    def listings(self, request):
        """Available cars only, filtered, ordered and paginated."""
        queryset = self.filter_queryset(self.get_queryset().filter(is_available=True))
        paginator = ListingPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(self.get_serializer(page, many=True).data)
