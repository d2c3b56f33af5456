"""Expense ledger API views."""

from rest_framework.decorators import action

from ..models import Expense
from ..serializers import ExpenseSerializer, ExpenseWriteSerializer
from ..services.summaries import (
    expense_breakdown,
    expense_by_category,
    ledger_daily_series,
    ledger_daily_summary,
    ledger_totals,
)
from .utils import (
    EnvelopeViewSet,
    api_response,
    parse_date_range,
    parse_day,
    parse_year_month,
)


class ExpenseViewSet(EnvelopeViewSet):
    """Expense records; milk purchases add rows here automatically."""

    model = Expense
    label = 'Expense record'
    label_plural = 'Expense records'
    item_key = 'expense'
    collection_key = 'expenses'
    read_serializer_class = ExpenseSerializer
    write_serializer_class = ExpenseWriteSerializer
    partial_updates = True
    search_fields = ('description', 'paid_to', 'category')
    filter_lookups = {'category': 'category', 'paidTo': 'paid_to__icontains'}
    owner = ('milk_store', 'milk purchase')

    @action(detail=False, methods=['get'], url_path='date-range')
    def date_range(self, request):
        start, end = parse_date_range(request.query_params, required=True)
        records = self.represent_many(self.get_queryset().filter(date__range=(start, end)))
        total, _ = ledger_totals(Expense, start, end)
        return api_response(
            'Expense records retrieved successfully',
            {
                'expenses': records,
                'count': len(records),
                'total': total,
                'dateRange': {'startDate': start, 'endDate': end},
            },
        )

    @action(detail=False, methods=['get'], url_path=r'category/(?P<category>[^/]+)')
    def by_category(self, request, category=None):
        records = self.represent_many(self.get_queryset().filter(category=category))
        return api_response(
            'Expense records retrieved successfully',
            {'expenses': records, 'count': len(records), 'category': category},
        )

    @action(detail=False, methods=['get'])
    def categories(self, request):
        start, end = parse_date_range(request.query_params)
        return api_response(
            'Expense categories retrieved successfully',
            {'categories': expense_by_category(start, end)},
        )

    @action(detail=False, methods=['get'])
    def breakdown(self, request):
        return api_response(
            'Expense breakdown retrieved successfully',
            {'breakdown': expense_breakdown()},
        )

    @action(detail=False, methods=['get'], url_path=r'daily-summary/(?P<day>[^/]+)')
    def daily_summary(self, request, day=None):
        summary_date = parse_day(day)
        summary = ledger_daily_summary(Expense, summary_date, 'category')
        return api_response(
            'Daily expense summary retrieved successfully',
            {
                'date': summary_date,
                'summary': {
                    'totalExpense': summary['total'],
                    'totalRecords': summary['count'],
                    'categories': summary['labels'],
                },
            },
        )

    @action(
        detail=False,
        methods=['get'],
        url_path=r'monthly-summary/(?P<year>[0-9]+)/(?P<month>[0-9]+)',
    )
    def monthly_summary(self, request, year=None, month=None):
        year, month = parse_year_month(year, month)
        rows = [
            {'date': row['date'], 'dailyExpense': row['total'], 'recordCount': row['count']}
            for row in ledger_daily_series(Expense, year, month)
        ]
        return api_response(
            'Monthly expense summary retrieved successfully',
            {'year': year, 'month': month, 'summary': rows},
        )
