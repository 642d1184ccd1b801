from django.contrib import admin

from .models import Payment, SavedCard


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("transaction_reference", "booking", "amount", "status", "payment_method", "created_at")
    list_filter = ("status", "payment_method")
    search_fields = ("transaction_reference", "booking__tenant__email", "booking__host__email")
    readonly_fields = ("transaction_reference", "created_at", "updated_at")


@admin.register(SavedCard)
class SavedCardAdmin(admin.ModelAdmin):
    list_display = ("user", "card_holder", "last_four", "expiry", "created_at")
    search_fields = ("user__email", "card_holder", "last_four")
    readonly_fields = ("fingerprint",)
