import datetime

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


MOBILE_NUMBER_VALIDATOR = django.core.validators.RegexValidator(
    message="Mobile number must be 10 digits",
    regex="^\\d{10}$",
)


def soft_delete_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("is_deleted", models.BooleanField(db_index=True, default=False)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def counterparty_fields():
    return soft_delete_fields() + [
        ("full_name", models.CharField(max_length=255)),
        ("mobile_number", models.CharField(max_length=10, validators=[MOBILE_NUMBER_VALIDATOR])),
        ("city", models.CharField(max_length=100)),
    ]


def milk_fields(party):
    return [
        ("milk_type", models.CharField(choices=[("cow", "Cow"), ("buffalo", "Buffalo")], max_length=10)),
        (f"{party}_price", models.DecimalField(decimal_places=2, max_digits=10)),
        ("total_qty", models.DecimalField(decimal_places=2, max_digits=10)),
        ("fat_percentage", models.DecimalField(decimal_places=2, max_digits=5)),
        ("date", models.DateField(default=datetime.date.today)),
        ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
    ]


def payment_fields():
    return soft_delete_fields() + [
        ("payment_amount", models.DecimalField(decimal_places=2, max_digits=12)),
        (
            "payment_type",
            models.CharField(
                choices=[("advance", "Advance"), ("full", "Full"), ("partial", "Partial")],
                max_length=10,
            ),
        ),
        (
            "payment_method",
            models.CharField(
                choices=[
                    ("cash", "Cash"),
                    ("bank_transfer", "Bank transfer"),
                    ("upi", "UPI"),
                    ("cheque", "Cheque"),
                ],
                max_length=20,
            ),
        ),
        ("transaction_id", models.CharField(blank=True, max_length=100, null=True)),
        ("notes", models.TextField(blank=True, null=True)),
        ("date", models.DateField(default=datetime.date.today)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action_type",
                    models.CharField(
                        choices=[("created", "Created"), ("updated", "Updated"), ("deleted", "Deleted")],
                        max_length=10,
                    ),
                ),
                ("description", models.CharField(max_length=255)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("object_id", models.PositiveIntegerField()),
                ("object_repr", models.TextField(blank=True, null=True)),
                (
                    "content_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        to="contenttypes.contenttype",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="activities",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp"],
                "verbose_name_plural": "Activities",
            },
        ),
        migrations.CreateModel(
            name="Buyer",
            fields=counterparty_fields(),
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Seller",
            fields=counterparty_fields(),
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="MilkStore",
            fields=soft_delete_fields()
            + [
                ("buyer_name", models.CharField(max_length=255)),
            ]
            + milk_fields("buyer")
            + [
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="milk_purchases",
                        to="dairy.buyer",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="MilkDistribution",
            fields=soft_delete_fields()
            + [
                ("seller_name", models.CharField(max_length=255)),
            ]
            + milk_fields("seller")
            + [
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="milk_sales",
                        to="dairy.seller",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="BuyerPayment",
            fields=payment_fields()
            + [
                ("buyer_name", models.CharField(max_length=255)),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="dairy.buyer",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SellerPayment",
            fields=payment_fields()
            + [
                ("seller_name", models.CharField(max_length=255)),
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="dairy.seller",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Income",
            fields=soft_delete_fields()
            + [
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("description", models.TextField()),
                ("source", models.CharField(max_length=255)),
                ("date", models.DateField(default=datetime.date.today)),
                (
                    "milk_distribution",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="income",
                        to="dairy.milkdistribution",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "verbose_name_plural": "Income",
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=soft_delete_fields()
            + [
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("description", models.TextField()),
                ("paid_to", models.CharField(max_length=255)),
                ("category", models.CharField(default="other", max_length=100)),
                ("date", models.DateField(default=datetime.date.today)),
                (
                    "milk_store",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="expense",
                        to="dairy.milkstore",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="buyer",
            constraint=models.UniqueConstraint(
                condition=models.Q(("is_deleted", False)),
                fields=("mobile_number",),
                name="unique_active_buyer_mobile",
            ),
        ),
        migrations.AddConstraint(
            model_name="seller",
            constraint=models.UniqueConstraint(
                condition=models.Q(("is_deleted", False)),
                fields=("mobile_number",),
                name="unique_active_seller_mobile",
            ),
        ),
    ]
