# vehicles/management/commands/seed_vehicles.py
from django.core.management.base import BaseCommand
from django.db import transaction
from faker import Faker
from decimal import Decimal
import random

from core.cache import get_cache_coordinator
from offers.models import Offer
from vehicles.models import FuelType, Vehicle

BRANDS = [
    ("Volkswagen", ["Gol", "Polo", "T-Cross", "Nivus"]),
    ("Chevrolet", ["Onix", "Tracker", "S10", "Cruze"]),
    ("Fiat", ["Argo", "Cronos", "Toro", "Pulse"]),
    ("Toyota", ["Corolla", "Yaris", "Hilux", "RAV4"]),
    ("Hyundai", ["HB20", "Creta", "i30", "Tucson"]),
    ("Honda", ["Civic", "City", "HR-V", "Fit"]),
    ("Audi", ["A3", "A4", "Q3", "Q5"]),
]

COLORS = ["Preto", "Branco", "Prata", "Cinza", "Azul", "Vermelho"]

# VIN real não usa I, O, Q. Vamos gerar 17 chars sem esses.
_VIN_CHARS = "ABCDEFGHJKLMNPRSTUVWXYZ0123456789"


def unique_vin():
    return "".join(random.choices(_VIN_CHARS, k=17))


def letters_only(name):
    # Nomes de cliente só aceitam letras (sem espaço, hífen ou apóstrofo).
    cleaned = "".join(ch for ch in name if ch.isalpha())
    return cleaned or "Cliente"


class Command(BaseCommand):
    help = "Popula o banco com veículos e ofertas fake."

    def add_arguments(self, parser):
        parser.add_argument("--min", "--n", dest="n", type=int, default=100,
                            help="Quantidade de veículos a criar (alias: --min, --n)")
        parser.add_argument("--offers", type=int, default=3,
                            help="Máximo de ofertas por veículo (0 desliga)")

    def handle(self, *args, **options):
        fake = Faker("pt_BR")
        target = options["n"]
        max_offers = max(options["offers"], 0)
        created = offers = 0
        vins_lote = set()

        with transaction.atomic():
            for _ in range(target):
                brand, models = random.choice(BRANDS)

                vin = unique_vin()
                # Evita colisão tanto no banco quanto no lote atual
                while vin in vins_lote or Vehicle.objects.filter(vin=vin).exists():
                    vin = unique_vin()
                vins_lote.add(vin)

                vehicle = Vehicle.objects.create(
                    brand=brand,
                    model=random.choice(models),
                    year=random.randint(2005, 2025),
                    color=random.choice(COLORS),
                    fuel_type=random.choice(FuelType.values),
                    vin=vin,
                )
                created += 1

                for _ in range(random.randint(0, max_offers)):
                    Offer.objects.create(
                        car=vehicle,
                        customer_first_name=letters_only(fake.first_name()),
                        customer_last_name=letters_only(fake.last_name()),
                        price=Decimal(f"{random.uniform(35_000, 350_000):.2f}"),
                    )
                    offers += 1

        # Inserções diretas no ORM não passam pelos serviços.
        get_cache_coordinator().clear_all()
        self.stdout.write(self.style.SUCCESS(f"Veículos criados: {created} | Ofertas criadas: {offers}"))
