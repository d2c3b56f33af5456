"""Tests covering PDF and Excel exports for dairy reports."""

from datetime import date
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from openpyxl import load_workbook

from ..models import BuyerPayment, Expense, Income
from ..services.summaries import outstanding_balances
from . import (
    authenticated_client,
    create_buyer,
    create_purchase,
    create_sale,
    create_seller,
    create_user,
)


class ReportExportTests(TestCase):
    def setUp(self):
        self.client = authenticated_client(create_user("reportuser"))
        self.buyer = create_buyer()
        self.seller = create_seller()
        create_purchase(self.buyer, price="45.50", qty="100")
        create_sale(self.seller, price="48.00", qty="90")
        BuyerPayment.objects.create(
            buyer=self.buyer,
            buyer_name=self.buyer.full_name,
            payment_amount=Decimal("1000"),
            payment_type="partial",
            payment_method="cash",
            date=date(2025, 8, 26),
        )
        Income.objects.create(
            amount=Decimal("4320"), description="Milk sale - 90L cow milk @ ₹48.00/L",
            source=self.seller.full_name, date=date(2025, 8, 25),
        )
        Expense.objects.create(
            amount=Decimal("4550"), description="Milk purchase - 100L cow milk @ ₹45.50/L",
            paid_to=self.buyer.full_name, category=Expense.MILK_PURCHASE_CATEGORY,
            date=date(2025, 8, 25),
        )
        self.range = {"startDate": "2025-08-01", "endDate": "2025-08-31"}

    def test_outstanding_balances_json(self):
        response = self.client.get("/api/dashboard/outstanding-balances/")
        self.assertEqual(response.status_code, 200, response.content)
        rows = {row["type"]: row for row in response.data["data"]["balances"]}
        self.assertEqual(rows["buyer"]["outstandingAmount"], Decimal("3550.00"))
        self.assertEqual(rows["seller"]["outstandingAmount"], Decimal("4320.00"))
        self.assertEqual(response.data["data"]["totalOwedToBuyers"], Decimal("3550.00"))

    def test_outstanding_balances_use_one_query_per_party_type(self):
        idle = create_buyer(full_name="Amit Shah", mobile_number="9000000001")
        for qty in ("10", "20"):
            create_purchase(idle, price="40.00", qty=qty)
        create_purchase(idle, price="40.00", qty="5").soft_delete()
        create_buyer(full_name="Zakir Khan", mobile_number="9000000002")

        with self.assertNumQueries(2):
            balances = outstanding_balances()

        rows = {row["fullName"]: row for row in balances if row["type"] == "buyer"}
        self.assertEqual(list(rows), ["Amit Shah", "Ramesh Kumar", "Zakir Khan"])
        self.assertEqual(rows["Amit Shah"]["transactionTotal"], Decimal("1200.00"))
        self.assertEqual(rows["Amit Shah"]["paidTotal"], Decimal("0.00"))
        self.assertEqual(rows["Ramesh Kumar"]["paidTotal"], Decimal("1000.00"))
        self.assertEqual(rows["Zakir Khan"]["outstandingAmount"], Decimal("0.00"))

    def test_outstanding_balances_workbook(self):
        response = self.client.get(
            "/api/dashboard/outstanding-balances/", {"export_format": "xlsx"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response["Content-Type"],
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        self.assertIn("outstanding-balances.xlsx", response["Content-Disposition"])

        workbook = load_workbook(BytesIO(response.content))
        worksheet = workbook.active
        self.assertEqual(worksheet["A1"].value, "Outstanding Balances")
        names = [row[1] for row in worksheet.iter_rows(min_row=4, values_only=True)]
        self.assertIn("Ramesh Kumar", names)
        self.assertIn("Suresh Patel", names)

    def test_outstanding_balances_pdf(self):
        response = self.client.get(
            "/api/dashboard/outstanding-balances/", {"export_format": "pdf"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_financial_overview_workbook(self):
        response = self.client.get(
            "/api/dashboard/financial-overview/", {**self.range, "export_format": "xlsx"}
        )
        self.assertEqual(response.status_code, 200)
        workbook = load_workbook(BytesIO(response.content))
        worksheet = workbook.active
        self.assertEqual(worksheet.title, "Financial Overview")
        self.assertEqual(worksheet["A2"].value, "Period: 2025-08-01 to 2025-08-31")
        rows = {row[1]: row[2] for row in worksheet.iter_rows(min_row=5, values_only=True)}
        self.assertAlmostEqual(rows["Total Income"], 4320.0)
        self.assertAlmostEqual(rows["Total Expenses"], 4550.0)
        self.assertAlmostEqual(rows["Net Profit"], -230.0)

    def test_financial_overview_pdf(self):
        response = self.client.get(
            "/api/dashboard/financial-overview/", {**self.range, "export_format": "pdf"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("financial-overview-2025-08-01-2025-08-31.pdf", response["Content-Disposition"])
        self.assertTrue(response.content.startswith(b"%PDF"))
