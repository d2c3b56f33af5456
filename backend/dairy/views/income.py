"""Income ledger API views."""

from rest_framework.decorators import action

from ..models import Income
from ..serializers import IncomeSerializer, IncomeWriteSerializer
from ..services.summaries import (
    income_by_category,
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


class IncomeViewSet(EnvelopeViewSet):
    """Income records; milk sales add rows here automatically."""

    model = Income
    label = 'Income record'
    label_plural = 'Income records'
    item_key = 'income'
    collection_key = 'income'
    read_serializer_class = IncomeSerializer
    write_serializer_class = IncomeWriteSerializer
    partial_updates = True
    search_fields = ('description', 'source')
    filter_lookups = {'source': 'source__icontains'}
    owner = ('milk_distribution', 'milk sale')

    @action(detail=False, methods=['get'], url_path='date-range')
    def date_range(self, request):
        start, end = parse_date_range(request.query_params, required=True)
        records = self.represent_many(self.get_queryset().filter(date__range=(start, end)))
        total, _ = ledger_totals(Income, start, end)
        return api_response(
            'Income records retrieved successfully',
            {
                'income': records,
                'count': len(records),
                'total': total,
                'dateRange': {'startDate': start, 'endDate': end},
            },
        )

    @action(detail=False, methods=['get'])
    def categories(self, request):
        start, end = parse_date_range(request.query_params)
        return api_response(
            'Income categories retrieved successfully',
            {'categories': income_by_category(start, end)},
        )

    @action(detail=False, methods=['get'], url_path=r'daily-summary/(?P<day>[^/]+)')
    def daily_summary(self, request, day=None):
        summary_date = parse_day(day)
        summary = ledger_daily_summary(Income, summary_date, 'source')
        return api_response(
            'Daily income summary retrieved successfully',
            {
                'date': summary_date,
                'summary': {
                    'totalIncome': summary['total'],
                    'totalRecords': summary['count'],
                    'sources': summary['labels'],
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
            {'date': row['date'], 'dailyIncome': row['total'], 'recordCount': row['count']}
            for row in ledger_daily_series(Income, year, month)
        ]
        return api_response(
            'Monthly income summary retrieved successfully',
            {'year': year, 'month': month, 'summary': rows},
        )
