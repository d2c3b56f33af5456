"""Keep the income and expense ledgers in step with milk transactions.

Every active milk purchase owns exactly one expense row and every active milk
sale owns exactly one income row. The helpers below create the linked row on
first sync, rewrite it when the transaction changes and soft-delete it when
the transaction is soft-deleted. Manual ledger rows (no backreference) are
never touched here.
"""

from __future__ import annotations

import logging

from django.db import transaction

from ..models import Expense, Income, MilkDistribution, MilkStore

__all__ = [
    "describe_milk_purchase",
    "describe_milk_sale",
    "retire_milk_purchase_expense",
    "retire_milk_sale_income",
    "sync_milk_purchase_expense",
    "sync_milk_sale_income",
]

logger = logging.getLogger(__name__)


def _format_quantity(value) -> str:
    return f"{value.normalize():f}" if hasattr(value, "normalize") else str(value)


def describe_milk_purchase(purchase: MilkStore) -> str:
    return (
        f"Milk purchase - {_format_quantity(purchase.total_qty)}L {purchase.milk_type} milk "
        f"@ ₹{purchase.buyer_price:.2f}/L"
    )


def describe_milk_sale(sale: MilkDistribution) -> str:
    return (
        f"Milk sale - {_format_quantity(sale.total_qty)}L {sale.milk_type} milk "
        f"@ ₹{sale.seller_price:.2f}/L"
    )


def sync_milk_purchase_expense(purchase: MilkStore) -> Expense:
    """Create or refresh the expense row backing ``purchase``."""

    with transaction.atomic():
        expense = Expense.objects.filter(milk_store=purchase).first()
        if expense is None:
            expense = Expense(milk_store=purchase)
        expense.amount = purchase.total_amount
        expense.description = describe_milk_purchase(purchase)
        expense.paid_to = purchase.buyer_name
        expense.category = Expense.MILK_PURCHASE_CATEGORY
        expense.date = purchase.date
        expense.is_deleted = purchase.is_deleted
        expense.save()
    logger.debug("Synced expense %s for milk purchase %s", expense.pk, purchase.pk)
    return expense


def sync_milk_sale_income(sale: MilkDistribution) -> Income:
    """Create or refresh the income row backing ``sale``."""

    with transaction.atomic():
        income = Income.objects.filter(milk_distribution=sale).first()
        if income is None:
            income = Income(milk_distribution=sale)
        income.amount = sale.total_amount
        income.description = describe_milk_sale(sale)
        income.source = sale.seller_name
        income.date = sale.date
        income.is_deleted = sale.is_deleted
        income.save()
    logger.debug("Synced income %s for milk sale %s", income.pk, sale.pk)
    return income


def retire_milk_purchase_expense(purchase: MilkStore) -> int:
    """Soft-delete the expense linked to ``purchase``; returns rows touched."""

    return Expense.active.filter(milk_store=purchase).update(is_deleted=True)


def retire_milk_sale_income(sale: MilkDistribution) -> int:
    """Soft-delete the income linked to ``sale``; returns rows touched."""

    return Income.active.filter(milk_distribution=sale).update(is_deleted=True)
