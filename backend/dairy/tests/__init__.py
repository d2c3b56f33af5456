from datetime import date
from decimal import Decimal

from django.contrib.auth.models import User
from rest_framework.test import APIClient

from ..models import Buyer, MilkDistribution, MilkStore, Seller


def create_user(username: str = "dairyadmin", password: str = "secret123"):
    return User.objects.create_user(username=username, password=password)


def authenticated_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def create_buyer(full_name="Ramesh Kumar", mobile_number="9876543210", city="Mumbai"):
    return Buyer.objects.create(full_name=full_name, mobile_number=mobile_number, city=city)


def create_seller(full_name="Suresh Patel", mobile_number="9123456780", city="Pune"):
    return Seller.objects.create(full_name=full_name, mobile_number=mobile_number, city=city)


def create_purchase(buyer, milk_type="cow", price="45.50", qty="100", on=None):
    return MilkStore.objects.create(
        buyer=buyer,
        buyer_name=buyer.full_name,
        milk_type=milk_type,
        buyer_price=Decimal(price),
        total_qty=Decimal(qty),
        fat_percentage=Decimal("3.5"),
        date=on or date(2025, 8, 25),
    )


def create_sale(seller, milk_type="cow", price="48.00", qty="90", on=None):
    return MilkDistribution.objects.create(
        seller=seller,
        seller_name=seller.full_name,
        milk_type=milk_type,
        seller_price=Decimal(price),
        total_qty=Decimal(qty),
        fat_percentage=Decimal("3.5"),
        date=on or date(2025, 8, 25),
    )
