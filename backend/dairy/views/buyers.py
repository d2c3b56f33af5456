"""Buyer related API views."""

from ..models import Buyer, BuyerPayment, MilkStore
from ..serializers import (
    BuyerPaymentSerializer,
    BuyerSerializer,
    BuyerWriteSerializer,
    MilkStoreSerializer,
)
from ..services.summaries import buyer_transaction_summary
from .utils import CounterpartyChildViewSet, EnvelopeViewSet, api_response, is_truthy


class BuyerViewSet(EnvelopeViewSet):
    """CRUD operations for buyers, the farmers the dairy buys milk from."""

    model = Buyer
    label = 'Buyer'
    label_plural = 'Buyers'
    item_key = 'buyer'
    collection_key = 'buyers'
    read_serializer_class = BuyerSerializer
    write_serializer_class = BuyerWriteSerializer
    search_fields = ('full_name', 'mobile_number')
    filter_lookups = {'city': 'city', 'search': None}
    date_filter = False

    def retrieve(self, request, *args, **kwargs):
        buyer = self.get_object()
        data = dict(self.represent(buyer))
        if is_truthy(request.query_params.get('includeTransactions')):
            data.update(buyer_transaction_summary(buyer))
        return api_response('Buyer retrieved successfully', {'buyer': data})


class BuyerMilkPurchaseViewSet(CounterpartyChildViewSet):
    """Milk purchases recorded against a single buyer."""

    parent_model = Buyer
    parent_label = 'Buyer'
    parent_kwarg = 'buyer_pk'
    parent_field = 'buyer'
    model = MilkStore
    read_serializer_class = MilkStoreSerializer
    collection_key = 'milkPurchases'
    label_plural = 'Milk purchases'


class BuyerPaymentHistoryViewSet(CounterpartyChildViewSet):
    """Payments made to a single buyer."""

    parent_model = Buyer
    parent_label = 'Buyer'
    parent_kwarg = 'buyer_pk'
    parent_field = 'buyer'
    model = BuyerPayment
    read_serializer_class = BuyerPaymentSerializer
    collection_key = 'payments'
    label_plural = 'Payments'
