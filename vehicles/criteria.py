# vehicles/criteria.py
"""
Planos de consulta de veículos.

Há dois modos para o ano, expostos como operações distintas:
- busca livre: `year` é "a partir de" (>=);
- faixa de anos: `start_year <= year <= end_year`.
"""
from dataclasses import dataclass
from typing import Optional

from core.criteria import PlanBuilder, QueryPlan, SearchCriteria, is_blank
from core.exceptions import InvalidArgument

from .models import FuelType

VEHICLE_SORT_FIELDS = {
    "id": "id",
    "brand": "brand",
    "model": "model",
    "year": "year",
    "color": "color",
    "fuel_type": "fuel_type",
    "vin": "vin",
    "created_at": "created_at",
}


@dataclass(frozen=True)
class VehicleSearchCriteria(SearchCriteria):
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    fuel_type: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if self.fuel_type is not None:
            try:
                object.__setattr__(self, "fuel_type", FuelType.parse(self.fuel_type).value)
            except ValueError as exc:
                raise InvalidArgument(str(exc))


def search_plan(criteria: VehicleSearchCriteria) -> QueryPlan:
    return (
        PlanBuilder()
        .contains("brand", criteria.brand)
        .contains("model", criteria.model)
        .at_least("year", criteria.year)
        .contains("color", criteria.color)
        .equals("fuel_type", criteria.fuel_type)
        .build(criteria, VEHICLE_SORT_FIELDS)
    )


def brand_and_model_plan(brand: Optional[str], model: Optional[str], page: int, page_size: int) -> QueryPlan:
    criteria = VehicleSearchCriteria(brand=brand, model=model, page=page, page_size=page_size)
    if is_blank(brand) and is_blank(model):
        raise InvalidArgument("Brand or model must be provided.")
    return (
        PlanBuilder()
        .contains("brand", brand)
        .contains("model", model)
        .build(criteria, VEHICLE_SORT_FIELDS)
    )


def year_range_plan(start_year: Optional[int], end_year: Optional[int], page: int, page_size: int) -> QueryPlan:
    criteria = SearchCriteria(page=page, page_size=page_size)
    if not start_year or not end_year or start_year <= 0 or end_year <= 0:
        raise InvalidArgument(
            "At least one of the years (startYear or endYear) must be a valid positive number."
        )
    return (
        PlanBuilder()
        .between("year", start_year, end_year, "Start year must be less than or equal to end year")
        .build(criteria, VEHICLE_SORT_FIELDS)
    )


def all_plan(page: int, page_size: int) -> QueryPlan:
    return PlanBuilder().build(SearchCriteria(page=page, page_size=page_size), VEHICLE_SORT_FIELDS)
