from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from accounts.models import User
from bookings.models import Booking
from bookings.services.coordinator import BookingCoordinator
from cars.models import Car


SEED_PASSWORD = "Carshare123!"
SUPERUSER_EMAIL = "admin@carshare.test"
SUPERUSER_PASSWORD = "AdminCarshare123!"


class Command(BaseCommand):
    help = "Populate the local development database with sample hosts, cars and a booking."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
        host = self._ensure_user(email="host@carshare.test", first_name="Harper", last_name="Host")
        tenant = self._ensure_user(email="tenant@carshare.test", first_name="Tess", last_name="Tenant")
        self._ensure_superuser()

        self.stdout.write(self.style.MIGRATE_HEADING("Creating cars"))
        hatchback = self._ensure_car(
            host=host,
            title="City hatchback",
            make="Toyota",
            model="Yaris",
            year=2022,
            daily_price="45.00",
        )
        self._ensure_car(
            host=host,
            title="Weekend roadster",
            make="Mazda",
            model="MX-5",
            year=2021,
            daily_price="85.00",
        )

        self.stdout.write(self.style.MIGRATE_HEADING("Creating bookings"))
        if Booking.objects.filter(car=hatchback, tenant=tenant).exists():
            self.stdout.write(self.style.NOTICE("Sample booking already present"))
        else:
            pickup = (timezone.localtime() + timedelta(days=7)).replace(hour=10, minute=0, second=0, microsecond=0)
            dropoff = pickup + timedelta(days=3)
            booking = BookingCoordinator().create_booking(
                user_id=tenant.id,
                data={
                    "pickupDate": pickup.date().isoformat(),
                    "pickupTime": pickup.strftime("%H:%M"),
                    "returnDate": dropoff.date().isoformat(),
                    "returnTime": dropoff.strftime("%H:%M"),
                    "insuranceOption": Booking.Insurance.BASIC,
                    "additionalDrivers": 0,
                    "agreeToTerms": True,
                    "carId": hatchback.id,
                    "totalCost": "135.00",
                    "payment": {
                        "cardNumber": "4242 4242 4242 4242",
                        "cardName": "Tess Tenant",
                        "expiryDate": "12/30",
                        "cvv": "123",
                        "saveCard": False,
                    },
                },
            )
            self.stdout.write(self.style.NOTICE(f"Created booking #{booking.pk} ({booking.status})"))

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Sample users log in with {SEED_PASSWORD!r}."))

    def _ensure_user(self, *, email: str, first_name: str, last_name: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={
                "username": email,
                "first_name": first_name,
                "last_name": last_name,
                "display_name": f"{first_name} {last_name}",
            },
        )
        if created or not user.has_usable_password():
            user.set_password(SEED_PASSWORD)
            user.save(update_fields=["password"])
        return user

    def _ensure_car(self, *, host: User, title: str, **fields) -> Car:
        car, created = Car.objects.get_or_create(host=host, title=title, defaults=fields)
        if created:
            self.stdout.write(self.style.NOTICE(f"Listed {car} for {host.email}"))
        return car

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            email=SUPERUSER_EMAIL,
            defaults={
                "username": SUPERUSER_EMAIL,
                "first_name": "Admin",
                "last_name": "User",
                "display_name": "Admin User",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        flag_updates = {}
        if not user.is_staff:
            flag_updates["is_staff"] = True
        if not user.is_superuser:
            flag_updates["is_superuser"] = True
        if flag_updates:
            for attr, value in flag_updates.items():
                setattr(user, attr, value)
            user.save(update_fields=list(flag_updates.keys()))
        if created or not user.has_usable_password():
            user.set_password(SUPERUSER_PASSWORD)
            user.save(update_fields=["password"])
        return user
