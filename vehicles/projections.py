# vehicles/projections.py
from dataclasses import dataclass, field
from typing import List

from offers.projections import OfferProjection, offer_to_nested_projection


@dataclass(frozen=True)
class VehicleProjection:
    id: int
    brand: str
    model: str
    year: int
    color: str
    fuel_type: str
    vin: str


@dataclass(frozen=True)
class VehicleWithOffersProjection:
    id: int
    brand: str
    model: str
    year: int
    color: str
    fuel_type: str
    vin: str
    offers: List[OfferProjection] = field(default_factory=list)


def vehicle_to_projection(v) -> VehicleProjection:
    return VehicleProjection(
        id=v.id,
        brand=v.brand,
        model=v.model,
        year=v.year,
        color=v.color,
        fuel_type=str(v.fuel_type),
        vin=v.vin,
    )


def vehicle_to_projection_with_offers(v) -> VehicleWithOffersProjection:
    # Ofertas em ordem de id para a resposta ser determinística.
    offers = sorted(v.offers.all(), key=lambda o: o.id)
    return VehicleWithOffersProjection(
        id=v.id,
        brand=v.brand,
        model=v.model,
        year=v.year,
        color=v.color,
        fuel_type=str(v.fuel_type),
        vin=v.vin,
        offers=[offer_to_nested_projection(o) for o in offers],
    )
