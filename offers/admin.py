# offers/admin.py
from django.contrib import admin
from django.db import transaction

from core.cache import get_cache_coordinator

from .models import Offer


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ("customer_first_name", "customer_last_name", "price", "car", "offer_date", "last_modified")
    search_fields = ("customer_first_name", "customer_last_name")
    list_filter = ("offer_date",)
    readonly_fields = ("version", "offer_date", "last_modified")

    def save_model(self, request, obj, form, change):
        old_car_id = form.initial.get("car") if change else None
        super().save_model(request, obj, form, change)
        coordinator = get_cache_coordinator()
        pk, car_id = obj.pk, obj.car_id
        if change:
            car_ids = tuple(c for c in (old_car_id, car_id) if c is not None)
            transaction.on_commit(lambda: coordinator.offer_updated(pk, car_ids))
        else:
            transaction.on_commit(lambda: coordinator.offer_created(pk, car_id))

    def delete_model(self, request, obj):
        pk, car_id = obj.pk, obj.car_id
        super().delete_model(request, obj)
        coordinator = get_cache_coordinator()
        transaction.on_commit(lambda: coordinator.offer_deleted(pk, car_id))

    def delete_queryset(self, request, queryset):
        super().delete_queryset(request, queryset)
        transaction.on_commit(get_cache_coordinator().clear_all)
