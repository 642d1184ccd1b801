from __future__ import annotations

from dataclasses import dataclass

from django.db import DEFAULT_DB_ALIAS

from cars.models import Car


@dataclass(frozen=True)
class CarHost:
    car_id: int
    host_id: int
    is_available: bool


def resolve_car_host(car_id, *, using: str = DEFAULT_DB_ALIAS) -> CarHost | None:
    """Return the car's current host and availability, or None if no such car exists."""
    try:
        pk = int(car_id)
    except (TypeError, ValueError):
        return None

    row = (
        Car.objects.using(using)
        .filter(pk=pk)
        .values("id", "host_id", "is_available")
        .first()
    )
    if row is None:
        return None
    return CarHost(car_id=row["id"], host_id=row["host_id"], is_available=row["is_available"])
