# vehicles/repository.py
from typing import List, Optional

from core.repository import Repository

from .models import Vehicle


class VehicleRepository(Repository):
    model = Vehicle

    def find_with_offers(self, pk) -> Optional[Vehicle]:
        return Vehicle.objects.prefetch_related("offers").filter(pk=pk).first()

    def exists_by_vin(self, vin: str) -> bool:
        return Vehicle.objects.filter(vin=vin).exists()

    def offer_ids(self, pk) -> List[int]:
        """Ids das ofertas que serão apagadas em cascata junto com o veículo."""
        return list(
            Vehicle.objects.filter(pk=pk, offers__isnull=False).values_list("offers__id", flat=True)
        )
