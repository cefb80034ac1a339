# vehicles/models.py
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

# Letras (inclusive acentuadas), dígitos, espaço, hífen e underscore.
NAME_VALIDATOR = RegexValidator(
    r"^[A-Za-zÀ-ž0-9\s_-]+$",
    "Can contain alphanumeric characters, spaces, hyphens, and underscores.",
)


class FuelType(models.TextChoices):
    PETROL = "PETROL", "Gasolina"
    DIESEL = "DIESEL", "Diesel"
    ELECTRIC = "ELECTRIC", "Elétrico"
    HYBRID = "HYBRID", "Híbrido"

    @classmethod
    def parse(cls, value):
        """Aceita maiúsculas/minúsculas e espaços nas pontas ("diesel " -> DIESEL)."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key not in cls.values:
            raise ValueError(f"Invalid fuel type: {value}. Allowed values are: {', '.join(cls.values)}")
        return cls(key)


class Vehicle(models.Model):
    brand = models.CharField("Marca", max_length=50, validators=[NAME_VALIDATOR])
    model = models.CharField("Modelo", max_length=50, validators=[NAME_VALIDATOR])
    year = models.PositiveIntegerField(
        "Ano", validators=[MinValueValidator(1886, "Year must be no earlier than 1886")]
    )
    color = models.CharField("Cor", max_length=50)
    fuel_type = models.CharField("Combustível", max_length=10, choices=FuelType.choices)
    vin = models.CharField("VIN/Chassi", max_length=32, unique=True)
    version = models.PositiveIntegerField(default=0, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["brand", "model"], name="idx_vehicle_brand_model"),
            models.Index(fields=["year"], name="idx_vehicle_year"),
        ]

    def __str__(self):
        return f"{self.brand} {self.model} {self.year}"
