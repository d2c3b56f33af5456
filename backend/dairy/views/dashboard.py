"""Dashboard and reporting API views."""

import logging

from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

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
from ..report_exports import (
    generate_financial_overview_pdf,
    generate_financial_overview_workbook,
    generate_outstanding_balances_pdf,
    generate_outstanding_balances_workbook,
)
from ..services.summaries import (
    current_month_range,
    expense_by_category,
    income_by_category,
    in_range,
    ledger_daily_series,
    ledger_totals,
    merge_daily_trends,
    milk_totals,
    money,
    outstanding_balances,
    payment_breakdown,
    profit_margin,
)
from .utils import api_response, check_date_order, parse_day, parse_year_month

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _report_range(request):
    """Date range from the query string, defaulting to month-to-date."""

    default_start, default_end = current_month_range()
    start = request.query_params.get('startDate')
    end = request.query_params.get('endDate')
    start = parse_day(start, 'startDate') if start else default_start
    end = parse_day(end, 'endDate') if end else default_end
    check_date_order(start, end)
    return start, end


def _export_format(request):
    return (request.query_params.get('export_format') or '').lower()


def _export_response(export_format, filename_stub, workbook_builder, pdf_builder, payload):
    """Return a file download for ``export_format`` or ``None`` for JSON."""

    if export_format in {'xlsx', 'excel'}:
        response = HttpResponse(workbook_builder(payload), content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{filename_stub}.xlsx"'
        return response

    if export_format == 'pdf':
        response = HttpResponse(pdf_builder(payload), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{filename_stub}.pdf"'
        return response

    return None


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_summary(request):
    """Provide headline counts and month-to-date totals for the dashboard."""

    start, end = current_month_range()
    income, _ = ledger_totals(Income, start, end)
    expense, _ = ledger_totals(Expense, start, end)
    return api_response(
        'Dashboard summary retrieved successfully',
        {
            'totalBuyers': Buyer.active.count(),
            'totalSellers': Seller.active.count(),
            'thisMonthIncome': income,
            'thisMonthExpense': expense,
            'thisMonthProfit': income - expense,
            'month': end.month,
            'year': end.year,
        },
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_overview(request):
    start, end = _report_range(request)
    total_income, _ = ledger_totals(Income, start, end)
    total_expense, _ = ledger_totals(Expense, start, end)
    net_profit = total_income - total_expense

    data = {
        'dateRange': {'startDate': start.isoformat(), 'endDate': end.isoformat()},
        'summary': {
            'totalIncome': total_income,
            'totalExpense': total_expense,
            'netProfit': net_profit,
            'profitMargin': profit_margin(net_profit, total_income),
        },
        'incomeBreakdown': income_by_category(start, end),
        'expenseBreakdown': expense_by_category(start, end),
    }

    export_format = _export_format(request)
    response = _export_response(
        export_format,
        f'financial-overview-{start}-{end}',
        generate_financial_overview_workbook,
        generate_financial_overview_pdf,
        data,
    )
    if response is not None:
        logger.info('Exported financial overview %s to %s as %s', start, end, export_format)
        return response

    return api_response('Financial overview retrieved successfully', data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daily_profit_loss(request, day):
    report_date = parse_day(day)
    daily_income, _ = ledger_totals(Income, report_date, report_date)
    daily_expense, _ = ledger_totals(Expense, report_date, report_date)
    daily_profit = daily_income - daily_expense
    return api_response(
        'Daily profit/loss retrieved successfully',
        {
            'date': report_date,
            'dailyIncome': daily_income,
            'dailyExpense': daily_expense,
            'dailyProfit': daily_profit,
            'profitMargin': profit_margin(daily_profit, daily_income),
        },
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly_trends(request, year, month):
    year, month = parse_year_month(year, month)
    trends = merge_daily_trends(
        ledger_daily_series(Income, year, month),
        ledger_daily_series(Expense, year, month),
    )
    return api_response(
        'Monthly trends retrieved successfully',
        {'year': year, 'month': month, 'trends': trends},
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def milk_analytics(request):
    """Compare milk bought against milk sold over the report range."""

    start, end = _report_range(request)
    purchases = milk_totals(MilkStore, 'buyer_price', start, end)
    sales = milk_totals(MilkDistribution, 'seller_price', start, end)
    milk_profit = sales['amount'] - purchases['amount']

    return api_response(
        'Milk business analytics retrieved successfully',
        {
            'dateRange': {'startDate': start, 'endDate': end},
            'purchases': {
                'totalCost': purchases['amount'],
                'totalQuantity': purchases['quantity'],
                'averagePrice': purchases['avg_price'],
                'totalTransactions': purchases['count'],
            },
            'sales': {
                'totalRevenue': sales['amount'],
                'totalQuantity': sales['quantity'],
                'averagePrice': sales['avg_price'],
                'totalTransactions': sales['count'],
            },
            'analysis': {
                'milkProfit': milk_profit,
                'profitMargin': profit_margin(milk_profit, sales['amount']),
                'quantityBalance': purchases['quantity'] - sales['quantity'],
                'priceSpread': sales['avg_price'] - purchases['avg_price'],
            },
        },
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_analytics(request):
    start, end = _report_range(request)
    return api_response(
        'Payment analytics retrieved successfully',
        {
            'dateRange': {'startDate': start, 'endDate': end},
            'buyerPayments': payment_breakdown(in_range(BuyerPayment.active.all(), start, end)),
            'sellerPayments': payment_breakdown(in_range(SellerPayment.active.all(), start, end)),
        },
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def outstanding_balances_report(request):
    """List what the dairy still owes each buyer and is owed by each seller."""

    balances = outstanding_balances()

    export_format = _export_format(request)
    response = _export_response(
        export_format,
        'outstanding-balances',
        generate_outstanding_balances_workbook,
        generate_outstanding_balances_pdf,
        balances,
    )
    if response is not None:
        return response

    owed_to_buyers = money(sum((row['outstandingAmount'] for row in balances if row['type'] == 'buyer'), 0))
    due_from_sellers = money(sum((row['outstandingAmount'] for row in balances if row['type'] == 'seller'), 0))
    return api_response(
        'Outstanding balances retrieved successfully',
        {
            'balances': balances,
            'totalOwedToBuyers': owed_to_buyers,
            'totalDueFromSellers': due_from_sellers,
        },
    )
