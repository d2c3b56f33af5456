"""Buyer and seller payment API views."""

from rest_framework.decorators import action

from ..models import Buyer, BuyerPayment, Seller, SellerPayment
from ..serializers import (
    BuyerPaymentSerializer,
    BuyerPaymentWriteSerializer,
    SellerPaymentSerializer,
    SellerPaymentWriteSerializer,
)
from ..services.summaries import payment_breakdown, payment_totals
from .utils import EnvelopeViewSet, api_response, get_active_or_404, parse_date_range, parse_day


class PaymentViewSet(EnvelopeViewSet):
    """Shared behaviour for payment ledgers; updates accept partial bodies."""

    label = 'Payment'
    label_plural = 'Payments'
    item_key = 'payment'
    collection_key = 'payments'
    partial_updates = True

    party_model = None
    party_label = None
    party_field = None

    def get_queryset(self):
        return self.model.active.select_related(self.party_field)

    def _date_range(self, request):
        start, end = parse_date_range(request.query_params, required=True)
        payments = self.get_queryset().filter(date__range=(start, end))
        records = self.represent_many(payments)
        return api_response(
            'Payments retrieved successfully',
            {
                'payments': records,
                'count': len(records),
                'dateRange': {'startDate': start, 'endDate': end},
            },
        )

    def _daily_report(self, day):
        report_date = parse_day(day)
        payments = self.get_queryset().filter(date=report_date)
        count, total = payment_totals(payments)
        return api_response(
            'Daily payment report retrieved successfully',
            {
                'date': report_date,
                'report': self.represent_many(payments),
                'totalPayments': count,
                'totalAmount': total,
            },
        )

    def _for_party(self, party_id):
        party = get_active_or_404(self.party_model, party_id, self.party_label)
        records = self.represent_many(self.get_queryset().filter(**{self.party_field: party}))
        return api_response(
            f'{self.party_label} payments retrieved successfully',
            {'payments': records, 'total': len(records)},
        )

    def _party_summary(self, party_id):
        party = get_active_or_404(self.party_model, party_id, self.party_label)
        payments = self.model.active.filter(**{self.party_field: party})
        count, total = payment_totals(payments)
        return api_response(
            'Payment summary retrieved successfully',
            {
                'summary': payment_breakdown(payments),
                'totalPayments': count,
                'totalAmount': total,
            },
        )


class BuyerPaymentViewSet(PaymentViewSet):
    """Payments the dairy makes to buyers for milk it purchased."""

    model = BuyerPayment
    read_serializer_class = BuyerPaymentSerializer
    write_serializer_class = BuyerPaymentWriteSerializer
    party_model = Buyer
    party_label = 'Buyer'
    party_field = 'buyer'
    search_fields = ('buyer_name', 'payment_type', 'transaction_id', 'notes')
    filter_lookups = {
        'buyerId': 'buyer_id',
        'paymentType': 'payment_type',
        'paymentMethod': 'payment_method',
    }

    @action(detail=False, methods=['get'], url_path='date-range')
    def date_range(self, request):
        return self._date_range(request)

    @action(detail=False, methods=['get'], url_path=r'daily-report/(?P<day>[^/]+)')
    def daily_report(self, request, day=None):
        return self._daily_report(day)

    @action(detail=False, methods=['get'], url_path=r'buyer/(?P<buyer_id>[0-9]+)')
    def by_buyer(self, request, buyer_id=None):
        return self._for_party(buyer_id)

    @action(detail=False, methods=['get'], url_path=r'buyer/(?P<buyer_id>[0-9]+)/summary')
    def buyer_summary(self, request, buyer_id=None):
        return self._party_summary(buyer_id)


class SellerPaymentViewSet(PaymentViewSet):
    """Payments received from sellers for milk the dairy sold them."""

    model = SellerPayment
    read_serializer_class = SellerPaymentSerializer
    write_serializer_class = SellerPaymentWriteSerializer
    party_model = Seller
    party_label = 'Seller'
    party_field = 'seller'
    search_fields = ('seller_name', 'payment_type', 'transaction_id', 'notes')
    filter_lookups = {
        'sellerId': 'seller_id',
        'paymentType': 'payment_type',
        'paymentMethod': 'payment_method',
    }

    @action(detail=False, methods=['get'], url_path='date-range')
    def date_range(self, request):
        return self._date_range(request)

    @action(detail=False, methods=['get'], url_path=r'daily-report/(?P<day>[^/]+)')
    def daily_report(self, request, day=None):
        return self._daily_report(day)

    @action(detail=False, methods=['get'], url_path=r'seller/(?P<seller_id>[0-9]+)')
    def by_seller(self, request, seller_id=None):
        return self._for_party(seller_id)

    @action(detail=False, methods=['get'], url_path=r'seller/(?P<seller_id>[0-9]+)/summary')
    def seller_summary(self, request, seller_id=None):
        return self._party_summary(seller_id)
