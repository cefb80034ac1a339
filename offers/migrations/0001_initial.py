import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("vehicles", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Offer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_first_name", models.CharField(max_length=50, validators=[django.core.validators.RegexValidator("^[A-Za-zÀ-ž]+$", "Must contain only letters.")], verbose_name="Nome")),
                ("customer_last_name", models.CharField(max_length=50, validators=[django.core.validators.RegexValidator("^[A-Za-zÀ-ž]+$", "Must contain only letters.")], verbose_name="Sobrenome")),
                ("price", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.01"), "Price must be positive")], verbose_name="Preço")),
                ("offer_date", models.DateTimeField(auto_now_add=True, verbose_name="Data da oferta")),
                ("last_modified", models.DateTimeField(blank=True, null=True, verbose_name="Última alteração")),
                ("version", models.PositiveIntegerField(default=0, editable=False)),
                ("car", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="offers", to="vehicles.vehicle")),
            ],
            options={
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["price"], name="idx_offer_price"),
                    models.Index(fields=["customer_first_name", "customer_last_name"], name="idx_customer_name"),
                ],
            },
        ),
    ]
