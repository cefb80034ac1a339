# offers/models.py
from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

from vehicles.models import Vehicle

# Só letras (inclusive acentuadas).
LETTERS_VALIDATOR = RegexValidator(r"^[A-Za-zÀ-ž]+$", "Must contain only letters.")


class Offer(models.Model):
    customer_first_name = models.CharField("Nome", max_length=50, validators=[LETTERS_VALIDATOR])
    customer_last_name = models.CharField("Sobrenome", max_length=50, validators=[LETTERS_VALIDATOR])
    price = models.DecimalField(
        "Preço",
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"), "Price must be positive")],
    )
    offer_date = models.DateTimeField("Data da oferta", auto_now_add=True)
    last_modified = models.DateTimeField("Última alteração", null=True, blank=True)
    car = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name="offers")
    version = models.PositiveIntegerField(default=0, editable=False)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["price"], name="idx_offer_price"),
            models.Index(fields=["customer_first_name", "customer_last_name"], name="idx_customer_name"),
        ]

    def __str__(self):
        return f"{self.customer_first_name} {self.customer_last_name} - {self.price}"
