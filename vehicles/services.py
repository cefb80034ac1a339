# vehicles/services.py
"""
Fachada de serviço de veículos.

Leituras passam pelo coordenador de cache; escritas rodam em transação e
disparam a invalidação só depois do commit (transaction.on_commit). Em
conflito de versão a invalidação roda na hora e o erro sobe.
"""
import logging
from typing import Dict, List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.cache import CacheCoordinator, get_cache_coordinator
from core.criteria import execute_page, execute_slice
from core.exceptions import ConflictingUpdate, DuplicateKey, InvalidArgument, NotFound
from core.pagination import Page
from core.services import check_page_size, require_fields, validate_instance

from . import criteria as plans
from .criteria import VehicleSearchCriteria
from .models import FuelType, Vehicle
from .projections import (
    VehicleProjection,
    VehicleWithOffersProjection,
    vehicle_to_projection,
    vehicle_to_projection_with_offers,
)
from .repository import VehicleRepository

logger = logging.getLogger(__name__)

# Campos substituídos num update. O VIN fica de fora: é imutável.
REPLACEABLE_FIELDS = ("brand", "model", "year", "color", "fuel_type")


def _parse_fuel(values: Dict) -> Dict:
    try:
        values["fuel_type"] = FuelType.parse(values["fuel_type"]).value
    except ValueError as exc:
        raise InvalidArgument(str(exc), errors={"fuel_type": [str(exc)]})
    return values


class VehicleService:
    def __init__(self, cache: Optional[CacheCoordinator] = None, repository: Optional[VehicleRepository] = None):
        self.cache = cache or get_cache_coordinator()
        self.repository = repository or VehicleRepository()

    # -----------------------------
    # Leituras
    # -----------------------------
    def get(self, vehicle_id: int) -> VehicleProjection:
        logger.info("Fetching vehicle by ID: %s", vehicle_id)

        def load():
            vehicle = self.repository.find_by_id(vehicle_id)
            if vehicle is None:
                raise NotFound("Vehicle", vehicle_id)
            return vehicle_to_projection(vehicle)

        return self.cache.vehicle(vehicle_id, load)

    def get_with_offers(self, vehicle_id: int) -> VehicleWithOffersProjection:
        logger.info("Fetching vehicle with offers by ID: %s", vehicle_id)

        def load():
            vehicle = self.repository.find_with_offers(vehicle_id)
            if vehicle is None:
                raise NotFound("Vehicle", vehicle_id)
            return vehicle_to_projection_with_offers(vehicle)

        return self.cache.vehicle_with_offers(vehicle_id, load)

    def list_all(self, page: int = 0, page_size: int = 20) -> Page:
        logger.info("Fetching all vehicles - page %s, size %s", page, page_size)
        check_page_size(page_size)
        plan = plans.all_plan(page, page_size)
        return execute_page(self.repository, plan).map(vehicle_to_projection)

    def search(self, criteria: VehicleSearchCriteria) -> List[VehicleProjection]:
        logger.info(
            "Searching vehicles with filters: brand=%s, model=%s, year=%s, color=%s, fuel_type=%s",
            criteria.brand, criteria.model, criteria.year, criteria.color, criteria.fuel_type,
        )
        check_page_size(criteria.page_size)
        # O plano é montado antes de olhar o cache: sort inválido falha sem
        # tocar em nada.
        plan = plans.search_plan(criteria)
        return self.cache.vehicle_search(
            criteria,
            lambda: [vehicle_to_projection(v) for v in execute_slice(self.repository, plan)],
        )

    def find_by_brand_and_model(
        self, brand: Optional[str], model: Optional[str], page: int = 0, page_size: int = 10
    ) -> Page:
        logger.info("Searching vehicles by brand '%s' and model '%s'", brand, model)
        check_page_size(page_size)
        plan = plans.brand_and_model_plan(brand, model, page, page_size)
        return execute_page(self.repository, plan).map(vehicle_to_projection)

    def find_by_year_range(
        self, start_year: Optional[int], end_year: Optional[int], page: int = 0, page_size: int = 10
    ) -> Page:
        logger.info("Fetching vehicles between year range %s and %s", start_year, end_year)
        check_page_size(page_size)
        plan = plans.year_range_plan(start_year, end_year, page, page_size)
        return execute_page(self.repository, plan).map(vehicle_to_projection)

    # -----------------------------
    # Escritas
    # -----------------------------
    def create(self, data: Dict) -> VehicleProjection:
        logger.info("Creating new vehicle with details: %s", data)
        values = _parse_fuel(require_fields(data, REPLACEABLE_FIELDS + ("vin",)))
        vehicle = Vehicle(**values)
        validate_instance(vehicle)

        if self.repository.exists_by_vin(vehicle.vin):
            raise DuplicateKey(vehicle.vin)
        try:
            with transaction.atomic():
                self.repository.insert(vehicle)
                transaction.on_commit(lambda: self.cache.vehicle_created(vehicle.id))
        except IntegrityError as exc:
            # Outro request gravou o mesmo VIN entre a checagem e o insert.
            raise DuplicateKey(vehicle.vin) from exc
        return vehicle_to_projection(vehicle)

    def update(self, vehicle_id: int, data: Dict) -> VehicleProjection:
        logger.info("Updating vehicle ID: %s", vehicle_id)
        values = _parse_fuel(require_fields(data, REPLACEABLE_FIELDS))

        vehicle = self.repository.find_by_id(vehicle_id)
        if vehicle is None:
            raise NotFound("Vehicle", vehicle_id)
        vin = data.get("vin")
        if vin is not None and str(vin).strip() != vehicle.vin:
            raise InvalidArgument("VIN cannot be changed.", errors={"vin": ["VIN is immutable."]})

        for name, value in values.items():
            setattr(vehicle, name, value)
        validate_instance(vehicle)
        vehicle.updated_at = timezone.now()

        try:
            with transaction.atomic():
                if not self.repository.replace(vehicle, REPLACEABLE_FIELDS + ("updated_at",)):
                    if not self.repository.exists(vehicle_id):
                        raise NotFound("Vehicle", vehicle_id)
                    raise ConflictingUpdate("Vehicle", vehicle_id)
                transaction.on_commit(lambda: self.cache.vehicle_updated(vehicle.id))
        except (ConflictingUpdate, NotFound):
            # Nada foi gravado, mas a cópia em cache pode ser anterior à
            # escrita que ganhou a corrida.
            self.cache.vehicle_updated(vehicle.id)
            raise
        return vehicle_to_projection(vehicle)

    def delete(self, vehicle_id: int) -> None:
        logger.info("Deleting vehicle ID: %s", vehicle_id)
        with transaction.atomic():
            if self.repository.lock(vehicle_id) is None:
                raise NotFound("Vehicle", vehicle_id)
            offer_ids = self.repository.offer_ids(vehicle_id)
            self.repository.delete(vehicle_id)
            transaction.on_commit(lambda: self.cache.vehicle_deleted(vehicle_id, offer_ids))
