"""Milk purchase API views."""

from rest_framework.decorators import action

from ..models import MilkStore
from ..serializers import MilkStoreDetailSerializer, MilkStoreSerializer, MilkStoreWriteSerializer
from ..services import (
    retire_milk_purchase_expense,
    sync_milk_purchase_expense,
)
from ..services.summaries import daily_milk_report, in_range, milk_summary_by_type, search_filter
from .utils import EnvelopeViewSet, api_response, is_truthy, parse_date_range, parse_day


class MilkStoreViewSet(EnvelopeViewSet):
    """Record milk bought from buyers.

    Each purchase owns one expense row in the ledger which is created, kept
    in step and soft-deleted together with the purchase.
    """

    model = MilkStore
    label = 'Milk purchase'
    label_plural = 'Milk purchases'
    item_key = 'milkPurchase'
    collection_key = 'milkPurchases'
    read_serializer_class = MilkStoreSerializer
    detail_serializer_class = MilkStoreDetailSerializer
    write_serializer_class = MilkStoreWriteSerializer
    search_fields = ('buyer_name', 'buyer__full_name', 'buyer__mobile_number')
    filter_lookups = {'buyerId': 'buyer_id', 'milkType': 'milk_type'}

    def get_queryset(self):
        return MilkStore.active.select_related('buyer')

    def represent_many(self, queryset):
        if is_truthy(self.request.query_params.get('includeDetails')):
            return MilkStoreDetailSerializer(queryset, many=True).data
        return super().represent_many(queryset)

    def represent(self, instance, detail=False):
        detail = detail and is_truthy(self.request.query_params.get('includeDetails'))
        return super().represent(instance, detail=detail)

    def search_queryset(self, term):
        return self.get_queryset().filter(buyer__is_deleted=False).filter(
            search_filter(term, *self.search_fields)
        )

    def perform_create(self, serializer):
        purchase = super().perform_create(serializer)
        sync_milk_purchase_expense(purchase)
        return purchase

    def perform_update(self, serializer):
        purchase = super().perform_update(serializer)
        sync_milk_purchase_expense(purchase)
        return purchase

    def perform_destroy(self, instance):
        super().perform_destroy(instance)
        retire_milk_purchase_expense(instance)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        start, end = parse_date_range(request.query_params)
        rows = milk_summary_by_type(in_range(MilkStore.active.all(), start, end), 'buyer_price', 'buyer')
        return api_response(
            'Milk purchase summary retrieved successfully',
            {'summary': rows, 'dateRange': {'startDate': start, 'endDate': end}},
        )

    @action(detail=False, methods=['get'], url_path=r'daily-report/(?P<day>[^/]+)')
    def daily_report(self, request, day=None):
        report_date = parse_day(day)
        rows = daily_milk_report(MilkStore.active.filter(date=report_date), 'buyer_price')
        return api_response(
            'Daily milk purchase report retrieved successfully',
            {'date': report_date, 'report': rows},
        )
