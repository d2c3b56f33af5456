"""Milk sale API views."""

from rest_framework.decorators import action

from ..models import MilkDistribution
from ..serializers import (
    MilkDistributionDetailSerializer,
    MilkDistributionSerializer,
    MilkDistributionWriteSerializer,
)
from ..services import retire_milk_sale_income, sync_milk_sale_income
from ..services.summaries import (
    daily_milk_report,
    in_range,
    milk_summary_by_type,
    profit_analysis as milk_profit_analysis,
    search_filter,
)
from .utils import EnvelopeViewSet, api_response, is_truthy, parse_date_range, parse_day


class MilkDistributionViewSet(EnvelopeViewSet):
    """Record milk sold to sellers; each sale keeps one linked income row."""

    model = MilkDistribution
    label = 'Milk sale'
    label_plural = 'Milk sales'
    item_key = 'milkSale'
    collection_key = 'milkSales'
    read_serializer_class = MilkDistributionSerializer
    detail_serializer_class = MilkDistributionDetailSerializer
    write_serializer_class = MilkDistributionWriteSerializer
    search_fields = ('seller_name', 'seller__full_name', 'seller__mobile_number')
    filter_lookups = {'sellerId': 'seller_id', 'milkType': 'milk_type'}

    def get_queryset(self):
        return MilkDistribution.active.select_related('seller')

    def represent_many(self, queryset):
        if is_truthy(self.request.query_params.get('includeDetails')):
            return MilkDistributionDetailSerializer(queryset, many=True).data
        return super().represent_many(queryset)

    def represent(self, instance, detail=False):
        detail = detail and is_truthy(self.request.query_params.get('includeDetails'))
        return super().represent(instance, detail=detail)

    def search_queryset(self, term):
        return self.get_queryset().filter(seller__is_deleted=False).filter(
            search_filter(term, *self.search_fields)
        )

    def perform_create(self, serializer):
        sale = super().perform_create(serializer)
        sync_milk_sale_income(sale)
        return sale

    def perform_update(self, serializer):
        sale = super().perform_update(serializer)
        sync_milk_sale_income(sale)
        return sale

    def perform_destroy(self, instance):
        super().perform_destroy(instance)
        retire_milk_sale_income(instance)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        start, end = parse_date_range(request.query_params)
        rows = milk_summary_by_type(
            in_range(MilkDistribution.active.all(), start, end), 'seller_price', 'seller'
        )
        return api_response(
            'Milk sale summary retrieved successfully',
            {'summary': rows, 'dateRange': {'startDate': start, 'endDate': end}},
        )

    @action(detail=False, methods=['get'], url_path=r'daily-report/(?P<day>[^/]+)')
    def daily_report(self, request, day=None):
        report_date = parse_day(day)
        rows = daily_milk_report(MilkDistribution.active.filter(date=report_date), 'seller_price')
        return api_response(
            'Daily milk sale report retrieved successfully',
            {'date': report_date, 'report': rows},
        )

    @action(detail=False, methods=['get'], url_path='profit-analysis')
    def profit_analysis(self, request):
        start, end = parse_date_range(request.query_params)
        return api_response(
            'Profit analysis retrieved successfully',
            {'analysis': milk_profit_analysis(start, end), 'dateRange': {'startDate': start, 'endDate': end}},
        )
