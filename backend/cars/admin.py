from django.contrib import admin

from .models import Car


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ("title", "make", "model", "year", "host", "daily_price", "is_available")
    list_filter = ("is_available", "make")
    search_fields = ("title", "make", "model", "host__email")
