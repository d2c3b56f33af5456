from datetime import date
from decimal import Decimal

from django.test import TestCase

from ..models import Expense, MilkStore, compute_total
from . import authenticated_client, create_buyer, create_purchase, create_user


class MilkStoreAPITest(TestCase):
    def setUp(self):
        self.client = authenticated_client(create_user())
        self.buyer = create_buyer()

    def _payload(self, **overrides):
        payload = {
            "buyerId": self.buyer.id,
            "milkType": "cow",
            "buyerPrice": "45.50",
            "totalQty": "100",
            "fatPercentage": "3.5",
            "date": "2025-08-25",
        }
        payload.update(overrides)
        return payload

    def test_total_amount_is_price_times_quantity(self):
        self.assertEqual(compute_total(Decimal("45.5"), Decimal("100")), Decimal("4550.00"))
        self.assertEqual(compute_total(Decimal("33.33"), Decimal("3")), Decimal("99.99"))

        response = self.client.post(
            "/api/milk-store/", self._payload(buyerPrice="32.25", totalQty="12.5"), format="json"
        )
        self.assertEqual(response.status_code, 201, response.content)
        record = response.data["data"]["milkPurchase"]
        self.assertEqual(record["TotalAmount"], "403.13")
        self.assertEqual(record["BuyerName"], "Ramesh Kumar")

    def test_create_records_linked_expense(self):
        response = self.client.post("/api/milk-store/", self._payload(), format="json")
        self.assertEqual(response.status_code, 201, response.content)
        purchase = MilkStore.objects.get(pk=response.data["data"]["milkPurchase"]["Id"])

        expense = Expense.active.get(milk_store=purchase)
        self.assertEqual(expense.amount, Decimal("4550.00"))
        self.assertEqual(expense.category, Expense.MILK_PURCHASE_CATEGORY)
        self.assertEqual(expense.paid_to, "Ramesh Kumar")
        self.assertEqual(expense.description, "Milk purchase - 100L cow milk @ ₹45.50/L")

    def test_update_and_delete_keep_expense_in_step(self):
        response = self.client.post("/api/milk-store/", self._payload(), format="json")
        purchase_id = response.data["data"]["milkPurchase"]["Id"]

        response = self.client.put(
            f"/api/milk-store/{purchase_id}/",
            self._payload(totalQty="50", milkType="buffalo"),
            format="json",
        )
        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.data["data"]["milkPurchase"]["TotalAmount"], "2275.00")
        expense = Expense.objects.get(milk_store_id=purchase_id)
        self.assertEqual(expense.amount, Decimal("2275.00"))
        self.assertIn("buffalo", expense.description)

        response = self.client.delete(f"/api/milk-store/{purchase_id}/")
        self.assertEqual(response.status_code, 200)
        expense.refresh_from_db()
        self.assertTrue(expense.is_deleted)
        self.assertEqual(self.client.delete(f"/api/milk-store/{purchase_id}/").status_code, 404)

    def test_invalid_milk_type_and_non_positive_numbers(self):
        response = self.client.post("/api/milk-store/", self._payload(milkType="goat"), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Milk type must be 'cow' or 'buffalo'", response.data["message"])

        response = self.client.post("/api/milk-store/", self._payload(totalQty="0"), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("totalQty", response.data["error"])

    def test_total_amount_must_fit_money_column(self):
        response = self.client.post(
            "/api/milk-store/",
            self._payload(buyerPrice="1000.00", totalQty="99999999.99"),
            format="json",
        )
        self.assertEqual(response.status_code, 400, response.content)
        self.assertEqual(response.data["message"], "Total amount must not exceed 9999999999.99")
        self.assertFalse(MilkStore.objects.exists())
        self.assertFalse(Expense.objects.exists())

        response = self.client.post(
            "/api/milk-store/",
            self._payload(buyerPrice="100.00", totalQty="99999999.99"),
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.data["data"]["milkPurchase"]["TotalAmount"], "9999999999.00")

    def test_linked_expense_is_changed_only_through_purchase(self):
        response = self.client.post("/api/milk-store/", self._payload(), format="json")
        purchase_id = response.data["data"]["milkPurchase"]["Id"]
        expense = Expense.active.get(milk_store_id=purchase_id)

        response = self.client.put(
            f"/api/expense/{expense.id}/", {"amount": "1.00"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data["message"],
            f"Expense record is managed by milk purchase {purchase_id}; "
            "change the milk purchase instead",
        )

        response = self.client.delete(f"/api/expense/{expense.id}/")
        self.assertEqual(response.status_code, 400)

        response = self.client.put(
            f"/api/milk-store/{purchase_id}/", self._payload(totalQty="10"), format="json"
        )
        self.assertEqual(response.status_code, 200, response.content)
        expense.refresh_from_db()
        self.assertFalse(expense.is_deleted)
        self.assertEqual(expense.amount, Decimal("455.00"))

        manual = Expense.objects.create(
            amount=Decimal("80"), description="Diesel", paid_to="HP Pump", date=date(2025, 8, 25)
        )
        self.assertEqual(self.client.delete(f"/api/expense/{manual.id}/").status_code, 200)

    def test_unknown_or_deleted_buyer_is_not_found(self):
        response = self.client.post("/api/milk-store/", self._payload(buyerId=9999), format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["message"], "Buyer not found")

        self.buyer.soft_delete()
        response = self.client.post("/api/milk-store/", self._payload(), format="json")
        self.assertEqual(response.status_code, 404)

    def test_name_snapshot_survives_buyer_rename(self):
        purchase = create_purchase(self.buyer)
        self.buyer.full_name = "Ramesh K."
        self.buyer.save()

        response = self.client.get(f"/api/milk-store/{purchase.id}/", {"includeDetails": "true"})
        record = response.data["data"]["milkPurchase"]
        self.assertEqual(record["BuyerName"], "Ramesh Kumar")
        self.assertEqual(record["BuyerFullName"], "Ramesh K.")
        self.assertEqual(record["BuyerMobile"], "9876543210")

        response = self.client.get(f"/api/milk-store/{purchase.id}/")
        self.assertNotIn("BuyerFullName", response.data["data"]["milkPurchase"])

    def test_list_filters(self):
        create_purchase(self.buyer, milk_type="cow", on=date(2025, 8, 1))
        create_purchase(self.buyer, milk_type="buffalo", on=date(2025, 8, 20))

        response = self.client.get("/api/milk-store/", {"milkType": "buffalo"})
        self.assertEqual(response.data["data"]["total"], 1)

        response = self.client.get(
            "/api/milk-store/", {"startDate": "2025-08-01", "endDate": "2025-08-10"}
        )
        self.assertEqual(response.data["data"]["total"], 1)
        self.assertEqual(response.data["data"]["milkPurchases"][0]["MilkType"], "cow")

        response = self.client.get("/api/milk-store/", {"startDate": "2025-08-01"})
        self.assertEqual(response.status_code, 400)

        response = self.client.get(
            "/api/milk-store/", {"buyerId": self.buyer.id, "milkType": "cow"}
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.get("/api/milk-store/", {"buyerId": "abc"})
        self.assertEqual(response.status_code, 400)

    def test_search_skips_deleted_buyers(self):
        create_purchase(self.buyer)
        other = create_buyer(full_name="Ramu Das", mobile_number="9000000005")
        create_purchase(other)

        response = self.client.get("/api/milk-store/search/", {"q": "Ram"})
        self.assertEqual(response.data["data"]["count"], 2)

        other.soft_delete()
        response = self.client.get("/api/milk-store/search/", {"q": "Ram"})
        self.assertEqual(response.data["data"]["count"], 1)

    def test_summary_and_daily_report(self):
        create_purchase(self.buyer, milk_type="cow", price="40.00", qty="10")
        create_purchase(self.buyer, milk_type="cow", price="50.00", qty="10")
        create_purchase(self.buyer, milk_type="buffalo", price="60.00", qty="5")

        response = self.client.get("/api/milk-store/summary/")
        rows = {row["milkType"]: row for row in response.data["data"]["summary"]}
        self.assertEqual(rows["cow"]["totalTransactions"], 2)
        self.assertEqual(rows["cow"]["uniqueBuyers"], 1)
        self.assertEqual(Decimal(str(rows["cow"]["totalAmount"])), Decimal("900.00"))

        response = self.client.get("/api/milk-store/daily-report/2025-08-25/")
        self.assertEqual(response.status_code, 200, response.content)
        rows = {row["milkType"]: row for row in response.data["data"]["report"]}
        self.assertEqual(Decimal(str(rows["cow"]["minPrice"])), Decimal("40.00"))
        self.assertEqual(Decimal(str(rows["cow"]["maxPrice"])), Decimal("50.00"))

        response = self.client.get("/api/milk-store/daily-report/25-08-2025/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Date must be in YYYY-MM-DD format")
