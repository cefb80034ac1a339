# offers/projections.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class OfferProjection:
    id: int
    customer_first_name: str
    customer_last_name: str
    price: Decimal
    offer_date: datetime
    last_modified: Optional[datetime]
    car_id: Optional[int]


def offer_to_projection(offer) -> OfferProjection:
    return OfferProjection(
        id=offer.id,
        customer_first_name=offer.customer_first_name,
        customer_last_name=offer.customer_last_name,
        price=offer.price,
        offer_date=offer.offer_date,
        last_modified=offer.last_modified,
        car_id=offer.car_id,
    )


def offer_to_nested_projection(offer) -> OfferProjection:
    """Versão sem car_id, usada dentro do veículo (evita referência circular)."""
    return OfferProjection(
        id=offer.id,
        customer_first_name=offer.customer_first_name,
        customer_last_name=offer.customer_last_name,
        price=offer.price,
        offer_date=offer.offer_date,
        last_modified=offer.last_modified,
        car_id=None,
    )
