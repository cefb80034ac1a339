from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import Client, TransactionTestCase
from django.urls import reverse

from core.cache import CacheCoordinator, get_cache_coordinator
from core.exceptions import NotFound
from offers.models import Offer
from offers.services import OfferService
from vehicles.models import FuelType, Vehicle


def record_calls(name, states):
    """Envolve um método do coordenador registrando se havia transação aberta."""
    original = getattr(CacheCoordinator, name)

    def wrapper(coordinator, *args, **kwargs):
        states.append(connection.in_atomic_block)
        return original(coordinator, *args, **kwargs)

    return patch.object(CacheCoordinator, name, wrapper)


class OfferAdminCacheTests(TransactionTestCase):
    """
    Escritas pelo admin invalidam o cache só depois do commit.

    TransactionTestCase: sem transação externa do teste, os callbacks de
    on_commit rodam quando a view do admin confirma a sua.
    """

    def setUp(self):
        get_cache_coordinator().clear_all()
        self.client = Client()
        admin_user = get_user_model().objects.create_superuser("admin", "admin@example.com", "senha-forte-123")
        self.client.force_login(admin_user)
        self.car = Vehicle.objects.create(
            brand="Audi", model="A4", year=2019, color="Preto", fuel_type=FuelType.DIESEL, vin="VIN001"
        )
        self.offer = Offer.objects.create(
            car=self.car, customer_first_name="Ana", customer_last_name="Souza", price="100.00"
        )

    def test_delete_invalidates_after_commit(self):
        service = OfferService()
        service.get(self.offer.pk)
        states = []

        with record_calls("offer_deleted", states):
            response = self.client.post(
                reverse("admin:offers_offer_delete", args=[self.offer.pk]), {"post": "yes"}
            )

        self.assertEqual(response.status_code, 302)
        self.assertEqual(states, [False])
        with self.assertRaises(NotFound):
            service.get(self.offer.pk)

    def test_change_invalidates_after_commit(self):
        service = OfferService()
        service.get(self.offer.pk)
        states = []

        with record_calls("offer_updated", states):
            response = self.client.post(
                reverse("admin:offers_offer_change", args=[self.offer.pk]),
                {
                    "customer_first_name": "Ana",
                    "customer_last_name": "Costa",
                    "price": "120.00",
                    "car": self.car.pk,
                },
            )

        self.assertEqual(response.status_code, 302)
        self.assertEqual(states, [False])
        self.assertEqual(service.get(self.offer.pk).customer_last_name, "Costa")
