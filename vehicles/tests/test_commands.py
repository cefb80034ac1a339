from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from core.cache import get_cache_coordinator
from offers.models import Offer
from vehicles.criteria import VehicleSearchCriteria
from vehicles.models import FuelType, Vehicle
from vehicles.services import VehicleService


class SeedVehiclesCommandTests(TestCase):
    def test_seed_creates_vehicles_and_offers(self):
        out = StringIO()
        call_command("seed_vehicles", n=5, offers=2, stdout=out)

        self.assertEqual(Vehicle.objects.count(), 5)
        self.assertLessEqual(Offer.objects.count(), 10)
        self.assertEqual(Vehicle.objects.values("vin").distinct().count(), 5)
        self.assertTrue(all(v.fuel_type in FuelType.values for v in Vehicle.objects.all()))
        for offer in Offer.objects.all():
            self.assertTrue(offer.customer_first_name.isalpha())
        self.assertIn("Veículos criados: 5", out.getvalue())

    def test_seed_clears_cache(self):
        """Uma busca em cache feita antes do seed não esconde os novos carros."""
        get_cache_coordinator().clear_all()
        service = VehicleService()
        self.assertEqual(service.search(VehicleSearchCriteria()), [])

        call_command("seed_vehicles", n=3, offers=0, stdout=StringIO())
        self.assertEqual(len(service.search(VehicleSearchCriteria())), 3)
