# vehicles/admin.py
from django.contrib import admin
from django.db import transaction

from core.cache import get_cache_coordinator
from offers.models import Offer

from .models import Vehicle


class OfferInline(admin.TabularInline):
    model = Offer
    extra = 0
    fields = ("customer_first_name", "customer_last_name", "price", "offer_date", "last_modified")
    readonly_fields = ("offer_date", "last_modified")


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("brand", "model", "year", "color", "fuel_type", "vin", "version")
    search_fields = ("brand", "model", "vin", "color")
    list_filter = ("brand", "fuel_type", "year", "color")
    readonly_fields = ("version", "created_at", "updated_at")
    inlines = [OfferInline]

    # Escritas feitas pelo admin não passam pelo serviço: o cache é
    # invalidado aqui, no mesmo formato, depois do commit da view do admin.
    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        coordinator = get_cache_coordinator()
        if change:
            # O inline pode ter mexido em ofertas também.
            transaction.on_commit(coordinator.clear_all)
        else:
            pk = form.instance.pk
            transaction.on_commit(lambda: coordinator.vehicle_created(pk))

    def delete_model(self, request, obj):
        offer_ids = list(obj.offers.values_list("id", flat=True))
        pk = obj.pk
        super().delete_model(request, obj)
        coordinator = get_cache_coordinator()
        transaction.on_commit(lambda: coordinator.vehicle_deleted(pk, offer_ids))

    def delete_queryset(self, request, queryset):
        super().delete_queryset(request, queryset)
        transaction.on_commit(get_cache_coordinator().clear_all)
