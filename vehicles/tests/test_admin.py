from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import Client, TransactionTestCase
from django.urls import reverse

from core.cache import CacheCoordinator, get_cache_coordinator
from core.exceptions import NotFound
from vehicles.models import FuelType, Vehicle
from vehicles.services import VehicleService


class VehicleAdminCacheTests(TransactionTestCase):
    """
    O admin de veículos segue o mesmo protocolo dos serviços: a invalidação
    roda fora de transação, depois que a escrita foi confirmada.
    """

    def setUp(self):
        get_cache_coordinator().clear_all()
        self.client = Client()
        admin_user = get_user_model().objects.create_superuser("admin", "admin@example.com", "senha-forte-123")
        self.client.force_login(admin_user)
        self.car = Vehicle.objects.create(
            brand="Audi", model="A4", year=2019, color="Preto", fuel_type=FuelType.DIESEL, vin="VIN001"
        )

    def watch(self, name, states):
        original = getattr(CacheCoordinator, name)

        def wrapper(coordinator, *args, **kwargs):
            states.append(connection.in_atomic_block)
            return original(coordinator, *args, **kwargs)

        return patch.object(CacheCoordinator, name, wrapper)

    def test_delete_invalidates_after_commit(self):
        service = VehicleService()
        service.get(self.car.pk)
        states = []

        with self.watch("vehicle_deleted", states):
            response = self.client.post(
                reverse("admin:vehicles_vehicle_delete", args=[self.car.pk]), {"post": "yes"}
            )

        self.assertEqual(response.status_code, 302)
        self.assertEqual(states, [False])
        with self.assertRaises(NotFound):
            service.get(self.car.pk)

    def test_add_invalidates_after_commit(self):
        states = []
        payload = {
            "brand": "Fiat",
            "model": "Argo",
            "year": "2021",
            "color": "Branco",
            "fuel_type": "PETROL",
            "vin": "VIN002",
            # Management form do inline de ofertas (vazio).
            "offers-TOTAL_FORMS": "0",
            "offers-INITIAL_FORMS": "0",
            "offers-MIN_NUM_FORMS": "0",
            "offers-MAX_NUM_FORMS": "1000",
        }

        with self.watch("vehicle_created", states):
            response = self.client.post(reverse("admin:vehicles_vehicle_add"), payload)

        self.assertEqual(response.status_code, 302)
        self.assertEqual(states, [False])
        self.assertTrue(Vehicle.objects.filter(vin="VIN002").exists())
