"""Seller related API views."""

from ..models import MilkDistribution, Seller, SellerPayment
from ..serializers import (
    MilkDistributionSerializer,
    SellerPaymentSerializer,
    SellerSerializer,
    SellerWriteSerializer,
)
from ..services.summaries import seller_transaction_summary
from .utils import CounterpartyChildViewSet, EnvelopeViewSet, api_response, is_truthy


class SellerViewSet(EnvelopeViewSet):
    """CRUD operations for sellers, the customers the dairy sells milk to."""

    model = Seller
    label = 'Seller'
    label_plural = 'Sellers'
    item_key = 'seller'
    collection_key = 'sellers'
    read_serializer_class = SellerSerializer
    write_serializer_class = SellerWriteSerializer
    search_fields = ('full_name', 'mobile_number')
    filter_lookups = {'city': 'city', 'search': None}
    date_filter = False

    def retrieve(self, request, *args, **kwargs):
        seller = self.get_object()
        data = dict(self.represent(seller))
        if is_truthy(request.query_params.get('includeTransactions')):
            data.update(seller_transaction_summary(seller))
        return api_response('Seller retrieved successfully', {'seller': data})


class SellerMilkSaleViewSet(CounterpartyChildViewSet):
    parent_model = Seller
    parent_label = 'Seller'
    parent_kwarg = 'seller_pk'
    parent_field = 'seller'
    model = MilkDistribution
    read_serializer_class = MilkDistributionSerializer
    collection_key = 'milkSales'
    label_plural = 'Milk sales'


class SellerPaymentHistoryViewSet(CounterpartyChildViewSet):
    parent_model = Seller
    parent_label = 'Seller'
    parent_kwarg = 'seller_pk'
    parent_field = 'seller'
    model = SellerPayment
    read_serializer_class = SellerPaymentSerializer
    collection_key = 'payments'
    label_plural = 'Payments'
