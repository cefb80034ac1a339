# offers/services.py
import logging
from typing import Dict, List, Optional

from django.db import transaction
from django.utils import timezone

from core.cache import CacheCoordinator, get_cache_coordinator
from core.criteria import execute_page, execute_slice
from core.exceptions import ConflictingUpdate, InvalidArgument, NotFound
from core.pagination import Page
from core.services import check_page_size, require_fields, validate_instance
from vehicles.repository import VehicleRepository

from . import criteria as plans
from .criteria import OfferSearchCriteria
from .models import Offer
from .projections import OfferProjection, offer_to_projection
from .repository import OfferRepository

logger = logging.getLogger(__name__)

REPLACEABLE_FIELDS = ("customer_first_name", "customer_last_name", "price")


def _parse_car_id(value) -> int:
    error = InvalidArgument("car_id must be an integer.", errors={"car_id": ["Must be an integer."]})
    if isinstance(value, bool):
        raise error
    try:
        car_id = int(value)
    except (TypeError, ValueError, OverflowError):
        raise error
    # int() trunca 1.9 para 1: só aceita valores sem parte fracionária.
    if not isinstance(value, (int, str)) and value != car_id:
        raise error
    return car_id


class OfferService:
    def __init__(
        self,
        cache: Optional[CacheCoordinator] = None,
        repository: Optional[OfferRepository] = None,
        vehicles: Optional[VehicleRepository] = None,
    ):
        self.cache = cache or get_cache_coordinator()
        self.repository = repository or OfferRepository()
        self.vehicles = vehicles or VehicleRepository()

    # -----------------------------
    # Leituras
    # -----------------------------
    def get(self, offer_id: int) -> OfferProjection:
        logger.info("Fetching offer by ID: %s", offer_id)

        def load():
            offer = self.repository.find_by_id(offer_id)
            if offer is None:
                raise NotFound("Offer", offer_id)
            return offer_to_projection(offer)

        return self.cache.offer(offer_id, load)

    def list_all(self, page: int = 0, page_size: int = 10) -> Page:
        logger.info("Fetching all offers - page %s, size %s", page, page_size)
        check_page_size(page_size)
        plan = plans.all_plan(page, page_size)
        return self.cache.offer_list(
            page, page_size, lambda: execute_page(self.repository, plan).map(offer_to_projection)
        )

    def search(self, criteria: OfferSearchCriteria) -> List[OfferProjection]:
        logger.info("Searching offers with criteria: %s", criteria)
        check_page_size(criteria.page_size)
        plan = plans.search_plan(criteria)
        offers = execute_slice(self.repository, plan)
        logger.info("Number of offers found: %s", len(offers))
        return [offer_to_projection(o) for o in offers]

    def find_by_customer_name(
        self, first_name: Optional[str], last_name: Optional[str], page: int = 0, page_size: int = 10
    ) -> Page:
        logger.info("Searching offers by customer '%s' '%s'", first_name, last_name)
        check_page_size(page_size)
        plan = plans.customer_name_plan(first_name, last_name, page, page_size)
        return execute_page(self.repository, plan).map(offer_to_projection)

    def find_by_price_range(self, min_price, max_price, page: int = 0, page_size: int = 10) -> Page:
        logger.info("Fetching offers between prices %s and %s", min_price, max_price)
        check_page_size(page_size)
        plan = plans.price_range_plan(min_price, max_price, page, page_size)
        return execute_page(self.repository, plan).map(offer_to_projection)

    # -----------------------------
    # Escritas
    # -----------------------------
    def create(self, data: Dict) -> OfferProjection:
        logger.info("Creating new offer with details: %s", data)
        values = require_fields(data, REPLACEABLE_FIELDS + ("car_id",))
        car_id = _parse_car_id(values.pop("car_id"))
        offer = Offer(car_id=car_id, **values)
        # A existência do veículo é checada abaixo, para virar NotFound.
        validate_instance(offer, exclude=["car"])

        with transaction.atomic():
            if self.vehicles.lock(car_id) is None:
                raise NotFound("Vehicle", car_id)
            self.repository.insert(offer)
            transaction.on_commit(lambda: self.cache.offer_created(offer.id, car_id))
        return offer_to_projection(offer)

    def update(self, offer_id: int, data: Dict) -> OfferProjection:
        logger.info("Updating offer ID: %s", offer_id)
        values = require_fields(data, REPLACEABLE_FIELDS + ("car_id",))
        new_car_id = _parse_car_id(values.pop("car_id"))

        offer = self.repository.find_by_id(offer_id)
        if offer is None:
            raise NotFound("Offer", offer_id)
        old_car_id = offer.car_id

        for name, value in values.items():
            setattr(offer, name, value)
        validate_instance(offer, exclude=["car"])
        offer.last_modified = timezone.now()

        try:
            with transaction.atomic():
                if new_car_id != old_car_id:
                    if self.vehicles.lock(new_car_id) is None:
                        raise NotFound("Vehicle", new_car_id)
                    offer.car_id = new_car_id
                if not self.repository.replace(offer, REPLACEABLE_FIELDS + ("car_id", "last_modified")):
                    if not self.repository.exists(offer_id):
                        raise NotFound("Offer", offer_id)
                    raise ConflictingUpdate("Offer", offer_id)
                transaction.on_commit(lambda: self.cache.offer_updated(offer.id, (old_car_id, new_car_id)))
        except (ConflictingUpdate, NotFound):
            self.cache.offer_updated(offer_id, (old_car_id,))
            raise
        return offer_to_projection(offer)

    def delete(self, offer_id: int) -> None:
        logger.info("Deleting offer ID: %s", offer_id)
        with transaction.atomic():
            offer = self.repository.lock(offer_id)
            if offer is None:
                raise NotFound("Offer", offer_id)
            car_id = offer.car_id
            self.repository.delete(offer_id)
            transaction.on_commit(lambda: self.cache.offer_deleted(offer_id, car_id))
