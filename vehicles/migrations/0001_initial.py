import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("brand", models.CharField(max_length=50, validators=[django.core.validators.RegexValidator("^[A-Za-zÀ-ž0-9\\s_-]+$", "Can contain alphanumeric characters, spaces, hyphens, and underscores.")], verbose_name="Marca")),
                ("model", models.CharField(max_length=50, validators=[django.core.validators.RegexValidator("^[A-Za-zÀ-ž0-9\\s_-]+$", "Can contain alphanumeric characters, spaces, hyphens, and underscores.")], verbose_name="Modelo")),
                ("year", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1886, "Year must be no earlier than 1886")], verbose_name="Ano")),
                ("color", models.CharField(max_length=50, verbose_name="Cor")),
                ("fuel_type", models.CharField(choices=[("PETROL", "Gasolina"), ("DIESEL", "Diesel"), ("ELECTRIC", "Elétrico"), ("HYBRID", "Híbrido")], max_length=10, verbose_name="Combustível")),
                ("vin", models.CharField(max_length=32, unique=True, verbose_name="VIN/Chassi")),
                ("version", models.PositiveIntegerField(default=0, editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["brand", "model"], name="idx_vehicle_brand_model"),
                    models.Index(fields=["year"], name="idx_vehicle_year"),
                ],
            },
        ),
    ]
