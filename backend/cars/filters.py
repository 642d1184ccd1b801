"""Query filters for the public car listings."""

import django_filters

from .models import Car


class CarListingFilterSet(django_filters.FilterSet):
    make = django_filters.CharFilter(field_name="make", lookup_expr="iexact")
    model = django_filters.CharFilter(field_name="model", lookup_expr="iexact")
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    price_min = django_filters.NumberFilter(field_name="daily_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="daily_price", lookup_expr="lte")

    class Meta:
        model = Car
        fields = ["make", "model", "city", "year"]
