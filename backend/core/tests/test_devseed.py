import pytest
from django.core.management import CommandError, call_command

from accounts.models import User
from bookings.models import Booking
from cars.models import Car
from payments.models import Payment


@pytest.mark.django_db
def test_devseed_is_idempotent(settings):
    settings.DEBUG = True

    call_command("devseed")
    call_command("devseed")

    assert User.objects.filter(email="host@carshare.test").count() == 1
    assert Car.objects.count() == 2
    booking = Booking.objects.get()
    assert booking.status == Booking.Status.PENDING
    assert Payment.objects.get(booking=booking).status == Payment.Status.PENDING


@pytest.mark.django_db
def test_devseed_refuses_outside_debug(settings):
    settings.DEBUG = False

    with pytest.raises(CommandError):
        call_command("devseed")
