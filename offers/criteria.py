# offers/criteria.py
"""
Planos de consulta de ofertas.

Faixas de preço e de data com um só limite vão até o mínimo/máximo do tipo
(o predicado continua sendo um BETWEEN inclusivo). Datas são comparadas pela
data-calendário de `offer_date`.
"""
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from core.criteria import PlanBuilder, QueryPlan, SearchCriteria, is_blank
from core.exceptions import InvalidArgument

OFFER_SORT_FIELDS = {
    "id": "id",
    "customer_first_name": "customer_first_name",
    "customer_last_name": "customer_last_name",
    "price": "price",
    "offer_date": "offer_date",
    "last_modified": "last_modified",
    "car_id": "car_id",
}

# Limites do DecimalField(max_digits=12, decimal_places=2).
PRICE_FLOOR = Decimal("0")
PRICE_CEILING = Decimal("9999999999.99")

LETTERS_RE = re.compile(r"^[A-Za-zÀ-ž]+$")


def _to_decimal(value, name: str) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidArgument(f"{name} must be a number.")
    if not number.is_finite():
        raise InvalidArgument(f"{name} must be a number.")
    return number


def _to_date(value, name: str) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidArgument(f"{name} must be in the format 'YYYY-MM-DD'. Example: 2024-09-27.")


@dataclass(frozen=True)
class OfferSearchCriteria(SearchCriteria):
    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "min_price", _to_decimal(self.min_price, "minPrice"))
        object.__setattr__(self, "max_price", _to_decimal(self.max_price, "maxPrice"))
        object.__setattr__(self, "start_date", _to_date(self.start_date, "Start date"))
        object.__setattr__(self, "end_date", _to_date(self.end_date, "End date"))

    def has_filters(self) -> bool:
        return not (
            is_blank(self.customer_first_name)
            and is_blank(self.customer_last_name)
            and self.min_price is None
            and self.max_price is None
            and self.start_date is None
            and self.end_date is None
        )


def search_plan(criteria: OfferSearchCriteria) -> QueryPlan:
    if not criteria.has_filters():
        raise InvalidArgument("At least one search parameter must be provided.")
    return (
        PlanBuilder()
        .contains("customer_first_name", criteria.customer_first_name)
        .contains("customer_last_name", criteria.customer_last_name)
        .optional_range(
            "price", criteria.min_price, criteria.max_price, PRICE_FLOOR, PRICE_CEILING,
            "minPrice must be less than or equal to maxPrice.",
        )
        .optional_range(
            "offer_date__date", criteria.start_date, criteria.end_date, date.min, date.max,
            "Start date cannot be after end date.",
        )
        .build(criteria, OFFER_SORT_FIELDS)
    )


def _check_name(value: Optional[str], label: str) -> None:
    if not is_blank(value) and not LETTERS_RE.match(value.strip()):
        raise InvalidArgument(f"{label} can only contain alphabetic characters.")


def customer_name_plan(first_name: Optional[str], last_name: Optional[str], page: int, page_size: int) -> QueryPlan:
    criteria = OfferSearchCriteria(
        customer_first_name=first_name, customer_last_name=last_name, page=page, page_size=page_size
    )
    if is_blank(first_name) and is_blank(last_name):
        raise InvalidArgument("firstName or lastName must be provided.")
    _check_name(first_name, "firstName")
    _check_name(last_name, "lastName")
    return (
        PlanBuilder()
        .contains("customer_first_name", first_name)
        .contains("customer_last_name", last_name)
        .build(criteria, OFFER_SORT_FIELDS)
    )


def price_range_plan(min_price, max_price, page: int, page_size: int) -> QueryPlan:
    criteria = OfferSearchCriteria(min_price=min_price, max_price=max_price, page=page, page_size=page_size)
    if criteria.min_price is None or criteria.max_price is None:
        raise InvalidArgument("Prices cannot be null.")
    if criteria.min_price <= 0 or criteria.max_price <= 0:
        raise InvalidArgument("Both minPrice and maxPrice must be positive numbers.")
    return (
        PlanBuilder()
        .between("price", criteria.min_price, criteria.max_price, "minPrice must be less than or equal to maxPrice.")
        .build(criteria, OFFER_SORT_FIELDS)
    )


def all_plan(page: int, page_size: int) -> QueryPlan:
    return PlanBuilder().build(SearchCriteria(page=page, page_size=page_size), OFFER_SORT_FIELDS)
