# offers/repository.py
from core.repository import Repository

from .models import Offer


class OfferRepository(Repository):
    model = Offer
