from django.contrib import admin

from payments.models import Payment

from .models import Booking


class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "status", "payment_method", "transaction_reference", "created_at", "updated_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "car", "tenant", "host", "pickup_at", "return_at", "total_price", "status")
    list_filter = ("status", "insurance_option")
    search_fields = ("car__title", "tenant__email", "host__email")
    inlines = [PaymentInline]
