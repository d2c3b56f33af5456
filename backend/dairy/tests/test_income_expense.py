from datetime import date
from decimal import Decimal

from django.test import TestCase

from ..models import Expense, Income
from . import authenticated_client, create_user


class ExpenseAPITest(TestCase):
    def setUp(self):
        self.client = authenticated_client(create_user())

    def test_category_defaults_to_other(self):
        response = self.client.post(
            "/api/expense/",
            {"amount": "250", "description": "Diesel", "paidTo": "HP Pump", "date": "2025-08-10"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.data["data"]["expense"]["Category"], "other")
        self.assertEqual(response.data["data"]["expense"]["PaidTo"], "HP Pump")

    def test_partial_update(self):
        expense = Expense.objects.create(
            amount=Decimal("100"), description="Feed", paid_to="Store", date=date(2025, 8, 1)
        )
        response = self.client.put(
            f"/api/expense/{expense.id}/", {"category": "feed"}, format="json"
        )
        self.assertEqual(response.status_code, 200, response.content)
        expense.refresh_from_db()
        self.assertEqual(expense.category, "feed")
        self.assertEqual(expense.description, "Feed")

        response = self.client.put(f"/api/expense/{expense.id}/", {"amount": "-5"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_empty_update_body_is_rejected(self):
        expense = Expense.objects.create(
            amount=Decimal("100"), description="Feed", paid_to="Store", date=date(2025, 8, 1)
        )
        response = self.client.put(f"/api/expense/{expense.id}/", {}, format="json")
        self.assertEqual(response.status_code, 400, response.content)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["message"], "No valid fields to update")

        income = Income.objects.create(
            amount=Decimal("200"), description="Curd", source="Hotel", date=date(2025, 8, 6)
        )
        response = self.client.put(f"/api/income/{income.id}/", {}, format="json")
        self.assertEqual(response.status_code, 400, response.content)
        self.assertEqual(response.data["message"], "No valid fields to update")

    def test_categories_breakdown_and_filters(self):
        Expense.objects.create(
            amount=Decimal("100"), description="Feed", paid_to="Store", category="feed",
            date=date(2025, 8, 1),
        )
        Expense.objects.create(
            amount=Decimal("300"), description="Feed", paid_to="Store", category="feed",
            date=date(2025, 8, 2),
        )
        Expense.objects.create(
            amount=Decimal("4550"), description="Milk purchase - 100L cow milk @ ₹45.50/L",
            paid_to="Ramesh Kumar", category=Expense.MILK_PURCHASE_CATEGORY, date=date(2025, 8, 2),
        )

        response = self.client.get("/api/expense/categories/")
        rows = {row["category"]: row for row in response.data["data"]["categories"]}
        self.assertEqual(rows["feed"]["totalRecords"], 2)
        self.assertEqual(Decimal(str(rows["feed"]["averageAmount"])), Decimal("200.00"))

        response = self.client.get("/api/expense/breakdown/")
        rows = {row["expenseType"]: row for row in response.data["data"]["breakdown"]}
        self.assertEqual(Decimal(str(rows["Milk Purchases"]["totalAmount"])), Decimal("4550.00"))
        self.assertEqual(rows["Other Expenses"]["totalRecords"], 2)

        response = self.client.get("/api/expense/category/feed/")
        self.assertEqual(response.data["data"]["count"], 2)

        response = self.client.get("/api/expense/", {"paidTo": "ramesh"})
        self.assertEqual(response.data["data"]["total"], 1)

        response = self.client.get("/api/expense/", {"paidTo": "ramesh", "category": "feed"})
        self.assertEqual(response.status_code, 400)

        response = self.client.get("/api/expense/daily-summary/2025-08-02/")
        summary = response.data["data"]["summary"]
        self.assertEqual(Decimal(str(summary["totalExpense"])), Decimal("4850.00"))
        self.assertEqual(summary["categories"], ["feed", "milk_purchase"])

        response = self.client.get("/api/expense/monthly-summary/2025/8/")
        days = response.data["data"]["summary"]
        self.assertEqual([row["date"] for row in days], [date(2025, 8, 2), date(2025, 8, 1)])


class IncomeAPITest(TestCase):
    def setUp(self):
        self.client = authenticated_client(create_user())

    def test_create_and_date_range_total(self):
        response = self.client.post(
            "/api/income/",
            {"amount": "500", "description": "Ghee sale", "source": "Local shop", "date": "2025-08-05"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.content)
        Income.objects.create(
            amount=Decimal("200"), description="Curd", source="Hotel", date=date(2025, 8, 6)
        )

        response = self.client.get(
            "/api/income/date-range/", {"startDate": "2025-08-01", "endDate": "2025-08-31"}
        )
        self.assertEqual(response.data["data"]["count"], 2)
        self.assertEqual(Decimal(str(response.data["data"]["total"])), Decimal("700.00"))

    def test_required_fields_on_create(self):
        response = self.client.post("/api/income/", {"amount": "500"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])

    def test_categories_from_milk_sales(self):
        self.client.post(
            "/api/sellers/",
            {"fullName": "Hotel Amar", "mobileNumber": "9000000010", "city": "Pune"},
            format="json",
        )
        seller_id = self.client.get("/api/sellers/").data["data"]["sellers"][0]["Id"]
        self.client.post(
            "/api/milk-distribution/",
            {
                "sellerId": seller_id,
                "milkType": "buffalo",
                "sellerPrice": "60",
                "totalQty": "10",
                "fatPercentage": "6.5",
                "date": "2025-08-05",
            },
            format="json",
        )
        Income.objects.create(
            amount=Decimal("100"), description="Payment received from Hotel", source="Hotel",
            date=date(2025, 8, 5),
        )
        Income.objects.create(
            amount=Decimal("50"), description="Scrap", source="Dealer", date=date(2025, 8, 5)
        )

        response = self.client.get("/api/income/categories/")
        rows = {row["category"]: row for row in response.data["data"]["categories"]}
        self.assertEqual(Decimal(str(rows["Milk Sales"]["totalAmount"])), Decimal("600.00"))
        self.assertEqual(rows["Customer Payments"]["totalRecords"], 1)
        self.assertEqual(rows["Other Income"]["totalRecords"], 1)

        response = self.client.get("/api/income/daily-summary/2025-08-05/")
        summary = response.data["data"]["summary"]
        self.assertEqual(summary["totalRecords"], 3)
        self.assertEqual(summary["sources"], ["Dealer", "Hotel", "Hotel Amar"])

        response = self.client.get("/api/income/search/", {"q": "scrap"})
        self.assertEqual(response.data["data"]["count"], 1)
