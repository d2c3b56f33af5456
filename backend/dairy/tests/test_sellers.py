from decimal import Decimal

from django.test import TestCase

from ..models import SellerPayment
from . import authenticated_client, create_sale, create_seller, create_user


class SellerAPITest(TestCase):
    def setUp(self):
        self.client = authenticated_client(create_user())

    def test_create_and_retrieve_seller(self):
        response = self.client.post(
            "/api/sellers/",
            {"fullName": "Suresh Patel", "mobileNumber": "9123456780", "city": "Pune"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.content)
        seller_id = response.data["data"]["seller"]["Id"]

        response = self.client.get(f"/api/sellers/{seller_id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["seller"]["FullName"], "Suresh Patel")

    def test_buyer_and_seller_pools_are_independent(self):
        self.client.post(
            "/api/buyers/",
            {"fullName": "Same Phone", "mobileNumber": "9123456780", "city": "Pune"},
            format="json",
        )
        response = self.client.post(
            "/api/sellers/",
            {"fullName": "Same Phone", "mobileNumber": "9123456780", "city": "Pune"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.content)

        response = self.client.post(
            "/api/sellers/",
            {"fullName": "Again", "mobileNumber": "9123456780", "city": "Pune"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)

    def test_include_transactions_subtracts_seller_payments(self):
        seller = create_seller()
        create_sale(seller, price="48.00", qty="90")
        SellerPayment.objects.create(
            seller=seller,
            seller_name=seller.full_name,
            payment_amount=Decimal("320.00"),
            payment_type="partial",
            payment_method="upi",
        )

        response = self.client.get(f"/api/sellers/{seller.id}/", {"includeTransactions": "true"})
        data = response.data["data"]["seller"]
        self.assertEqual(Decimal(str(data["milkTransactions"]["totalAmount"])), Decimal("4320.00"))
        self.assertEqual(Decimal(str(data["payments"]["totalPaid"])), Decimal("320.00"))
        self.assertEqual(Decimal(str(data["outstandingAmount"])), Decimal("4000.00"))

    def test_nested_milk_sales(self):
        seller = create_seller()
        create_sale(seller)
        response = self.client.get(f"/api/sellers/{seller.id}/milk-sales/")
        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.data["data"]["milkSales"][0]["TotalAmount"], "4320.00")
