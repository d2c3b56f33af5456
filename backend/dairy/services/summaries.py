"""Read-side aggregation helpers shared by the resource views and the dashboard."""

from __future__ import annotations

from calendar import monthrange
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from django.db.models import (
    Avg,
    Case,
    CharField,
    Count,
    DecimalField,
    Max,
    Min,
    OuterRef,
    Q,
    Subquery,
    Sum,
    Value,
    When,
)
from django.db.models.functions import Coalesce
from django.utils import timezone

from ..models import (
    Buyer,
    BuyerPayment,
    Expense,
    Income,
    MilkDistribution,
    MilkStore,
    Seller,
    SellerPayment,
)

MONEY = Decimal('0.01')
ZERO = Decimal('0')


def money(value) -> Decimal:
    """Coerce an aggregate result to a two-decimal :class:`Decimal`."""

    if value in (None, ''):
        return ZERO.quantize(MONEY)
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(MONEY, rounding=ROUND_HALF_UP)


def _sum(field):
    return Coalesce(Sum(field), Value(ZERO), output_field=DecimalField(max_digits=14, decimal_places=2))


def profit_margin(net, base) -> str:
    """Return ``net / base × 100`` as a two-decimal string, ``"0"`` for a zero base."""

    base = money(base)
    if base <= 0:
        return "0"
    ratio = (money(net) / base * 100).quantize(MONEY, rounding=ROUND_HALF_UP)
    return f"{ratio:.2f}"


def current_month_range(today: Optional[date] = None) -> tuple[date, date]:
    today = today or timezone.localdate()
    return today.replace(day=1), today


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def in_range(queryset, start: Optional[date], end: Optional[date], field: str = 'date'):
    if start and end:
        return queryset.filter(**{f'{field}__range': (start, end)})
    return queryset


# Counterparties -------------------------------------------------------------

def buyer_transaction_summary(buyer: Buyer) -> dict:
    """Milk purchase and payment totals for ``buyer`` plus the amount still owed."""

    milk = MilkStore.active.filter(buyer=buyer).aggregate(
        totalTransactions=Count('id'),
        totalQuantity=_sum('total_qty'),
        totalAmount=_sum('total_amount'),
        avgPrice=Avg('buyer_price'),
    )
    paid = BuyerPayment.active.filter(buyer=buyer).aggregate(
        totalPayments=Count('id'),
        totalPaid=_sum('payment_amount'),
    )
    return _counterparty_summary(milk, paid)


def seller_transaction_summary(seller: Seller) -> dict:
    """Milk sale and payment totals for ``seller`` plus the amount still due."""

    milk = MilkDistribution.active.filter(seller=seller).aggregate(
        totalTransactions=Count('id'),
        totalQuantity=_sum('total_qty'),
        totalAmount=_sum('total_amount'),
        avgPrice=Avg('seller_price'),
    )
    paid = SellerPayment.active.filter(seller=seller).aggregate(
        totalPayments=Count('id'),
        totalPaid=_sum('payment_amount'),
    )
    return _counterparty_summary(milk, paid)


def _counterparty_summary(milk: dict, paid: dict) -> dict:
    milk_total = money(milk['totalAmount'])
    paid_total = money(paid['totalPaid'])
    return {
        'milkTransactions': {
            'totalTransactions': milk['totalTransactions'],
            'totalQuantity': money(milk['totalQuantity']),
            'totalAmount': milk_total,
            'avgPrice': money(milk['avgPrice']),
        },
        'payments': {
            'totalPayments': paid['totalPayments'],
            'totalPaid': paid_total,
        },
        'outstandingAmount': milk_total - paid_total,
    }


def outstanding_balances() -> list[dict]:
    """Outstanding amount for every active buyer and seller."""

    rows = []
    for party_type, model, milk_model, payment_model in (
        ('buyer', Buyer, MilkStore, BuyerPayment),
        ('seller', Seller, MilkDistribution, SellerPayment),
    ):
        parties = model.active.annotate(
            transaction_total=_party_total(milk_model, party_type, 'total_amount'),
            paid_total=_party_total(payment_model, party_type, 'payment_amount'),
        ).order_by('full_name')
        for party in parties:
            transaction_total = money(party.transaction_total)
            paid_total = money(party.paid_total)
            rows.append({
                'type': party_type,
                'id': party.pk,
                'fullName': party.full_name,
                'mobileNumber': party.mobile_number,
                'city': party.city,
                'transactionTotal': transaction_total,
                'paidTotal': paid_total,
                'outstandingAmount': transaction_total - paid_total,
            })
    return rows


def _party_total(model, party_field: str, amount_field: str):
    """Correlated ``SUM(amount_field)`` of ``model`` rows for the outer counterparty."""

    totals = (
        model.active.filter(**{party_field: OuterRef('pk')})
        .order_by()
        .values(party_field)
        .annotate(total=Sum(amount_field))
        .values('total')
    )
    money_field = DecimalField(max_digits=14, decimal_places=2)
    return Coalesce(Subquery(totals, output_field=money_field), Value(ZERO), output_field=money_field)


# Milk transactions ----------------------------------------------------------

def milk_summary_by_type(queryset, price_field: str, party_field: str) -> list[dict]:
    rows = (
        queryset.values('milk_type')
        .annotate(
            totalTransactions=Count('id'),
            totalQuantity=_sum('total_qty'),
            totalAmount=_sum('total_amount'),
            avgPrice=Avg(price_field),
            uniqueParties=Count(party_field, distinct=True),
        )
        .order_by('milk_type')
    )
    unique_key = 'uniqueBuyers' if party_field == 'buyer' else 'uniqueSellers'
    return [
        {
            'milkType': row['milk_type'],
            'totalTransactions': row['totalTransactions'],
            'totalQuantity': money(row['totalQuantity']),
            'totalAmount': money(row['totalAmount']),
            'avgPrice': money(row['avgPrice']),
            unique_key: row['uniqueParties'],
        }
        for row in rows
    ]


def daily_milk_report(queryset, price_field: str) -> list[dict]:
    rows = (
        queryset.values('milk_type')
        .annotate(
            transactions=Count('id'),
            totalQuantity=_sum('total_qty'),
            totalAmount=_sum('total_amount'),
            avgPrice=Avg(price_field),
            minPrice=Min(price_field),
            maxPrice=Max(price_field),
        )
        .order_by('milk_type')
    )
    return [
        {
            'milkType': row['milk_type'],
            'transactions': row['transactions'],
            'totalQuantity': money(row['totalQuantity']),
            'totalAmount': money(row['totalAmount']),
            'avgPrice': money(row['avgPrice']),
            'minPrice': money(row['minPrice']),
            'maxPrice': money(row['maxPrice']),
        }
        for row in rows
    ]


def profit_analysis(start: Optional[date], end: Optional[date]) -> list[dict]:
    """Sales and purchases side by side per milk type."""

    rows = []
    for label, model, price_field in (
        ('Sales', MilkDistribution, 'seller_price'),
        ('Purchases', MilkStore, 'buyer_price'),
    ):
        grouped = (
            in_range(model.active.all(), start, end)
            .values('milk_type')
            .annotate(
                totalQuantity=_sum('total_qty'),
                totalAmount=_sum('total_amount'),
                avgPrice=Avg(price_field),
            )
            .order_by('milk_type')
        )
        for row in grouped:
            rows.append({
                'type': label,
                'milkType': row['milk_type'],
                'totalQuantity': money(row['totalQuantity']),
                'totalAmount': money(row['totalAmount']),
                'avgPrice': money(row['avgPrice']),
            })
    rows.sort(key=lambda row: (row['milkType'], row['type']))
    return rows


def milk_totals(model, price_field: str, start: date, end: date) -> dict:
    totals = in_range(model.active.all(), start, end).aggregate(
        amount=_sum('total_amount'),
        quantity=_sum('total_qty'),
        avg_price=Avg(price_field),
        count=Count('id'),
    )
    return {
        'amount': money(totals['amount']),
        'quantity': money(totals['quantity']),
        'avg_price': money(totals['avg_price']),
        'count': totals['count'],
    }


# Payments -------------------------------------------------------------------

def payment_breakdown(queryset, total_key: str = 'totalAmount') -> list[dict]:
    """Payment totals grouped by payment type and method."""

    rows = (
        queryset.values('payment_type', 'payment_method')
        .annotate(total=_sum('payment_amount'), count=Count('id'))
        .order_by('payment_type', 'payment_method')
    )
    return [
        {
            'paymentType': row['payment_type'],
            'paymentMethod': row['payment_method'],
            'totalPayments': row['count'],
            total_key: money(row['total']),
        }
        for row in rows
    ]


def payment_totals(queryset) -> tuple[int, Decimal]:
    totals = queryset.aggregate(count=Count('id'), total=_sum('payment_amount'))
    return totals['count'], money(totals['total'])


# Income and expense ---------------------------------------------------------

def ledger_totals(model, start: Optional[date] = None, end: Optional[date] = None) -> tuple[Decimal, int]:
    totals = in_range(model.active.all(), start, end).aggregate(
        total=_sum('amount'), count=Count('id')
    )
    return money(totals['total']), totals['count']


def ledger_daily_summary(model, day: date, label_field: str) -> dict:
    queryset = model.active.filter(date=day)
    total, count = ledger_totals(model, day, day)
    labels = sorted(set(queryset.values_list(label_field, flat=True)))
    return {'total': total, 'count': count, 'labels': labels}


def ledger_daily_series(model, year: int, month: int) -> list[dict]:
    """Per-day totals for a calendar month, newest day first."""

    start, end = month_bounds(year, month)
    rows = (
        model.active.filter(date__range=(start, end))
        .values('date')
        .annotate(total=_sum('amount'), count=Count('id'))
        .order_by('-date')
    )
    return [
        {'date': row['date'], 'total': money(row['total']), 'count': row['count']}
        for row in rows
    ]


def merge_daily_trends(income_rows: Iterable[dict], expense_rows: Iterable[dict]) -> list[dict]:
    """Join two per-day series, filling missing days with zero, sorted by date."""

    days: dict[date, dict] = {}
    for row in income_rows:
        days.setdefault(row['date'], {'income': ZERO, 'expense': ZERO})['income'] = money(row['total'])
    for row in expense_rows:
        days.setdefault(row['date'], {'income': ZERO, 'expense': ZERO})['expense'] = money(row['total'])
    return [
        {
            'date': day,
            'income': money(values['income']),
            'expense': money(values['expense']),
            'profit': money(values['income']) - money(values['expense']),
        }
        for day, values in sorted(days.items())
    ]


INCOME_CATEGORY = Case(
    When(milk_distribution__isnull=False, then=Value('Milk Sales')),
    When(description__istartswith='Milk sale', then=Value('Milk Sales')),
    When(description__istartswith='Payment received', then=Value('Customer Payments')),
    default=Value('Other Income'),
    output_field=CharField(),
)

EXPENSE_TYPE = Case(
    When(category=Expense.MILK_PURCHASE_CATEGORY, then=Value('Milk Purchases')),
    When(description__istartswith='Payment made', then=Value('Seller Payments')),
    default=Value('Other Expenses'),
    output_field=CharField(),
)


def income_by_category(start: Optional[date] = None, end: Optional[date] = None) -> list[dict]:
    rows = (
        in_range(Income.active.all(), start, end)
        .annotate(category=INCOME_CATEGORY)
        .values('category')
        .annotate(total=_sum('amount'), count=Count('id'))
        .order_by('-total')
    )
    return [
        {'category': row['category'], 'totalAmount': money(row['total']), 'totalRecords': row['count']}
        for row in rows
    ]


def expense_by_category(start: Optional[date] = None, end: Optional[date] = None) -> list[dict]:
    rows = (
        in_range(Expense.active.all(), start, end)
        .values('category')
        .annotate(total=_sum('amount'), count=Count('id'), average=Avg('amount'))
        .order_by('-total')
    )
    return [
        {
            'category': row['category'],
            'totalAmount': money(row['total']),
            'totalRecords': row['count'],
            'averageAmount': money(row['average']),
        }
        for row in rows
    ]


def expense_breakdown() -> list[dict]:
    rows = (
        Expense.active.annotate(expense_type=EXPENSE_TYPE)
        .values('expense_type')
        .annotate(total=_sum('amount'), count=Count('id'))
        .order_by('-total')
    )
    return [
        {'expenseType': row['expense_type'], 'totalAmount': money(row['total']), 'totalRecords': row['count']}
        for row in rows
    ]


def search_filter(term: str, *fields: str) -> Q:
    """OR together case-insensitive substring lookups over ``fields``."""

    query = Q()
    for field in fields:
        query |= Q(**{f'{field}__icontains': term})
    return query
