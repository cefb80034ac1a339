from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

from django.db.models import F
from django.test import TestCase
from django.utils import timezone

from core.cache import OFFER_BY_ID, OFFER_LIST, VEHICLE_WITH_OFFERS_BY_ID, CacheCoordinator
from core.exceptions import ConflictingUpdate, InvalidArgument, InvalidSortField, NotFound
from offers.criteria import OfferSearchCriteria
from offers.models import Offer
from offers.repository import OfferRepository
from offers.services import OfferService
from vehicles.models import FuelType, Vehicle
from vehicles.services import VehicleService


class OfferServiceTestCase(TestCase):
    """
    Base: um carro cadastrado e serviços ligados ao mesmo coordenador de
    cache em memória (coerência estrita entre entidades).
    """

    strict = True

    def setUp(self):
        self.cache = CacheCoordinator.in_memory(strict_cross_entity=self.strict)
        self.service = OfferService(cache=self.cache)
        self.vehicles = VehicleService(cache=self.cache)
        self.car = Vehicle.objects.create(
            brand="Audi", model="A4", year=2019, color="Preto", fuel_type=FuelType.DIESEL, vin="VIN001"
        )
        self.other_car = Vehicle.objects.create(
            brand="Fiat", model="Argo", year=2021, color="Branco", fuel_type=FuelType.PETROL, vin="VIN002"
        )

    def payload(self, **overrides):
        data = {
            "customer_first_name": "Ana",
            "customer_last_name": "Souza",
            "price": "150000.00",
            "car_id": self.car.id,
        }
        data.update(overrides)
        return data

    def create(self, **overrides):
        with self.captureOnCommitCallbacks(execute=True):
            return self.service.create(self.payload(**overrides))


class OfferWriteTests(OfferServiceTestCase):
    def test_create_then_get(self):
        created = self.create()
        self.assertEqual(created.price, Decimal("150000.00"))
        self.assertEqual(created.car_id, self.car.id)
        self.assertIsNone(created.last_modified)
        self.assertEqual(self.service.get(created.id), created)

    def test_create_for_missing_car_inserts_nothing(self):
        """Carro inexistente: NotFound antes de qualquer insert."""
        with patch.object(OfferRepository, "insert") as insert:
            with self.assertRaises(NotFound) as ctx:
                self.service.create(self.payload(car_id=9999))
        insert.assert_not_called()
        self.assertEqual(ctx.exception.message, "Vehicle with ID 9999 not found")
        self.assertEqual(Offer.objects.count(), 0)

    def test_create_validation(self):
        for overrides in ({"price": "0"}, {"price": "-10"}, {"customer_first_name": "Ana1"}, {"car_id": "abc"}):
            with self.assertRaises(InvalidArgument):
                self.service.create(self.payload(**overrides))
        self.assertEqual(Offer.objects.count(), 0)

    def test_create_invalidates_vehicle_with_offers(self):
        self.assertEqual(self.vehicles.get_with_offers(self.car.id).offers, [])
        created = self.create()
        self.assertEqual([o.id for o in self.vehicles.get_with_offers(self.car.id).offers], [created.id])

    def test_update_sets_last_modified_and_moves_car(self):
        created = self.create()
        self.vehicles.get_with_offers(self.car.id)
        self.vehicles.get_with_offers(self.other_car.id)

        with self.captureOnCommitCallbacks(execute=True):
            updated = self.service.update(created.id, self.payload(price="99000.50", car_id=self.other_car.id))

        self.assertIsNotNone(updated.last_modified)
        self.assertEqual(updated.car_id, self.other_car.id)
        self.assertEqual(self.service.get(created.id).price, Decimal("99000.50"))
        self.assertEqual(self.vehicles.get_with_offers(self.car.id).offers, [])
        self.assertEqual(len(self.vehicles.get_with_offers(self.other_car.id).offers), 1)

    def test_update_to_missing_car(self):
        created = self.create()
        with self.assertRaises(NotFound) as ctx:
            self.service.update(created.id, self.payload(car_id=9999))
        self.assertEqual(ctx.exception.entity, "Vehicle")
        self.assertEqual(Offer.objects.get(pk=created.id).car_id, self.car.id)

    def test_create_rejects_fractional_car_id(self):
        """car_id 1.9 não pode virar o carro 1."""
        for car_id in (self.car.id + 0.9, Decimal(self.car.id) + Decimal("0.5"), float("nan")):
            with self.assertRaises(InvalidArgument):
                self.service.create(self.payload(car_id=car_id))
        self.assertEqual(Offer.objects.count(), 0)

    def test_create_accepts_integral_car_id(self):
        created = self.create(car_id=float(self.car.id))
        self.assertEqual(created.car_id, self.car.id)
        created = self.create(car_id=str(self.car.id))
        self.assertEqual(created.car_id, self.car.id)

    def test_update_loses_race(self):
        """
        Versão no banco mudou depois da leitura: ConflictingUpdate, a oferta
        sai do cache na hora e nada é gravado.
        """
        created = self.create()
        self.service.get(created.id)
        stale = Offer.objects.get(pk=created.id)
        Offer.objects.filter(pk=created.id).update(price="777.00", version=F("version") + 1)

        with patch.object(self.service.repository, "find_by_id", return_value=stale):
            with self.assertRaises(ConflictingUpdate):
                self.service.update(created.id, self.payload(price="999.00"))

        self.assertNotIn(created.id, self.cache.cache(OFFER_BY_ID))
        self.assertEqual(self.service.get(created.id).price, Decimal("777.00"))

    def test_update_missing_offer(self):
        with self.assertRaises(NotFound) as ctx:
            self.service.update(9999, self.payload())
        self.assertEqual(ctx.exception.entity, "Offer")

    def test_delete(self):
        created = self.create()
        self.service.get(created.id)
        with self.captureOnCommitCallbacks(execute=True):
            self.service.delete(created.id)
        with self.assertRaises(NotFound):
            self.service.get(created.id)
        with self.assertRaises(NotFound):
            self.service.delete(created.id)


class OfferReadTests(OfferServiceTestCase):
    def setUp(self):
        super().setUp()
        for first, last, price in (("Ana", "Souza", "100.00"), ("Bruno", "Lima", "250.00"), ("Carla", "Souza", "400.00")):
            Offer.objects.create(car=self.car, customer_first_name=first, customer_last_name=last, price=price)

    def test_list_all_is_cached(self):
        page = self.service.list_all()
        self.assertEqual(page.total_items, 3)
        self.assertEqual(page.page_size, 10)
        with self.assertNumQueries(0):
            self.assertEqual(self.service.list_all(), page)
        self.assertIn("0:10", self.cache.cache(OFFER_LIST))

    def test_list_all_sees_new_offer(self):
        self.service.list_all()
        self.create(customer_first_name="Dora")
        self.assertEqual(self.service.list_all().total_items, 4)

    def test_search_by_name(self):
        result = self.service.search(OfferSearchCriteria(customer_last_name="souza", sort_field="price", ascending=False))
        self.assertEqual([o.customer_first_name for o in result], ["Carla", "Ana"])

    def test_search_price_lower_bound_only(self):
        result = self.service.search(OfferSearchCriteria(min_price=Decimal("250")))
        self.assertEqual([o.price for o in result], [Decimal("250.00"), Decimal("400.00")])

    def test_search_by_date(self):
        today = timezone.localdate()
        self.assertEqual(len(self.service.search(OfferSearchCriteria(start_date=today))), 3)
        self.assertEqual(len(self.service.search(OfferSearchCriteria(end_date=today - timedelta(days=1)))), 0)

    def test_search_requires_filter(self):
        with self.assertRaises(InvalidArgument):
            self.service.search(OfferSearchCriteria())

    def test_search_invalid_sort(self):
        with self.assertRaises(InvalidSortField):
            self.service.search(OfferSearchCriteria(customer_first_name="Ana", sort_field="car"))

    def test_price_range_boundaries(self):
        """min == max == 100 devolve as ofertas de exatamente 100."""
        page = self.service.find_by_price_range(Decimal("100"), Decimal("100"))
        self.assertEqual(page.total_items, 1)
        self.assertEqual(page.items[0].customer_first_name, "Ana")

    def test_non_finite_prices_are_rejected(self):
        for value in ("NaN", "Infinity", Decimal("-Infinity")):
            with self.assertRaises(InvalidArgument) as ctx:
                self.service.find_by_price_range(value, Decimal("100"))
            self.assertEqual(ctx.exception.message, "minPrice must be a number.")
            with self.assertRaises(InvalidArgument):
                self.service.search(OfferSearchCriteria(max_price=value))

    def test_price_range_inverted(self):
        with self.assertRaises(InvalidArgument):
            self.service.find_by_price_range(Decimal("500"), Decimal("100"))

    def test_find_by_customer_name(self):
        page = self.service.find_by_customer_name(None, "Souza")
        self.assertEqual(page.total_items, 2)
        with self.assertRaises(InvalidArgument):
            self.service.find_by_customer_name("Ana Maria", None)


class VehicleDeleteCascadeStrictTests(OfferServiceTestCase):
    """
    Com coerência estrita, apagar o carro também derruba as ofertas em cache.
    """

    def test_cached_offer_is_gone(self):
        created = self.create()
        self.assertEqual(self.service.get(created.id).id, created.id)

        with self.captureOnCommitCallbacks(execute=True):
            self.vehicles.delete(self.car.id)

        with self.assertRaises(NotFound):
            self.service.get(created.id)
        self.assertEqual(self.service.list_all().total_items, 0)


class VehicleDeleteCascadeLenientTests(OfferServiceTestCase):
    """
    Sem coerência estrita, a oferta apagada em cascata continua servida do
    cache até ser invalidada por outra mutação.
    """

    strict = False

    def test_cached_offer_is_stale(self):
        created = self.create()
        cached = self.service.get(created.id)

        with self.captureOnCommitCallbacks(execute=True):
            self.vehicles.delete(self.car.id)

        self.assertFalse(Offer.objects.filter(pk=created.id).exists())
        self.assertEqual(self.service.get(created.id), cached)

    def test_vehicle_with_offers_not_refreshed_by_offer_delete(self):
        created = self.create()
        self.vehicles.get_with_offers(self.car.id)
        with self.captureOnCommitCallbacks(execute=True):
            self.service.delete(created.id)
        self.assertIn(self.car.id, self.cache.cache(VEHICLE_WITH_OFFERS_BY_ID))
        self.assertEqual(len(self.vehicles.get_with_offers(self.car.id).offers), 1)
