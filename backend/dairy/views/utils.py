"""Utility helpers shared across API view modules."""

import re

from django.db import transaction
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..exceptions import NotFoundError, ValidationError
from ..services.summaries import search_filter

DATE_FORMAT_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
DATE_RANGE = 'dateRange'
MIN_SEARCH_LENGTH = 2


def api_response(message, data=None, status=status.HTTP_200_OK):
    """Wrap ``data`` in the success envelope."""

    return Response(
        {'success': True, 'message': message, 'data': data if data is not None else {}},
        status=status,
    )


def parse_day(value, field='date'):
    """Parse a ``YYYY-MM-DD`` string or raise a validation error."""

    parsed = None
    if value and DATE_FORMAT_RE.match(value):
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
    if parsed is None:
        name = 'Date' if field == 'date' else field
        raise ValidationError(f'{name} must be in YYYY-MM-DD format')
    return parsed


def parse_year_month(year, month):
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError('Year and month must be numbers')
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise ValidationError('Month must be between 1 and 12')
    return year, month


def parse_date_range(params, required=False):
    """Return ``(start, end)`` from ``startDate``/``endDate`` query params.

    Both ends must be present together; ``(None, None)`` is returned when both
    are absent and ``required`` is false.
    """

    start, end = params.get('startDate'), params.get('endDate')
    if not start and not end and not required:
        return None, None
    if not start or not end:
        raise ValidationError('Both startDate and endDate are required')
    start, end = parse_day(start, 'startDate'), parse_day(end, 'endDate')
    check_date_order(start, end)
    return start, end


def check_date_order(start, end):
    if start > end:
        raise ValidationError('startDate must not be after endDate')


def select_filter(params, dimensions, date_range=True):
    """Pick the single filter dimension present in ``params``.

    Returns ``(name, value)`` or ``None`` when no filter was supplied. A date
    range counts as one dimension. Supplying more than one dimension is
    rejected rather than silently resolved by precedence.
    """

    supplied = [(name, params[name]) for name in dimensions if params.get(name, '') != '']
    if date_range:
        start, end = parse_date_range(params)
        if start is not None:
            supplied.append((DATE_RANGE, (start, end)))
    if len(supplied) > 1:
        names = ', '.join(name for name, _ in supplied)
        raise ValidationError(f'Only one filter can be applied at a time (got {names})')
    return supplied[0] if supplied else None


def require_search_term(params):
    term = (params.get('q') or '').strip()
    if len(term) < MIN_SEARCH_LENGTH:
        raise ValidationError('Search term must be at least 2 characters')
    return term


def parse_id(value, field):
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = 0
    if parsed < 1:
        raise ValidationError({field: ['Must be a positive integer']})
    return parsed


def get_active_or_404(model, pk, label):
    instance = model.active.filter(pk=pk).first()
    if instance is None:
        raise NotFoundError(f'{label} not found')
    return instance


def is_truthy(value):
    return str(value).lower() == 'true'


class EnvelopeViewSet(viewsets.GenericViewSet):
    """CRUD over the ``active`` rows of ``model`` with enveloped responses.

    Subclasses declare the model, the read and write serializers, the keys the
    record is returned under and the filter dimensions accepted by ``list``.
    Deletes are soft deletes. Every write is recorded in the activity log.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = None
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']
    lookup_value_regex = '[0-9]+'

    model = None
    label = None
    label_plural = None
    item_key = None
    collection_key = None
    read_serializer_class = None
    detail_serializer_class = None
    write_serializer_class = None
    partial_updates = False
    search_fields = ()
    filter_lookups = {}
    date_filter = True
    # (foreign key, label) of the record that owns a row and keeps it in sync
    owner = None

    def get_queryset(self):
        return self.model.active.all()

    def get_serializer_class(self):
        if self.action in ('create', 'update'):
            return self.write_serializer_class
        return self.read_serializer_class

    def get_object(self):
        pk = self.kwargs.get(self.lookup_url_kwarg or self.lookup_field)
        instance = self.get_queryset().filter(pk=pk).first()
        if instance is None:
            raise NotFoundError(f'{self.label} not found')
        return instance

    def check_editable(self, instance):
        if self.owner is None:
            return
        field, owner_label = self.owner
        owner_id = getattr(instance, f'{field}_id')
        if owner_id is not None:
            raise ValidationError(
                f'{self.label} is managed by {owner_label} {owner_id}; '
                f'change the {owner_label} instead'
            )

    def represent(self, instance, detail=False):
        serializer_class = self.read_serializer_class
        if detail and self.detail_serializer_class is not None:
            serializer_class = self.detail_serializer_class
        return serializer_class(instance).data

    def represent_many(self, queryset):
        return self.read_serializer_class(queryset, many=True).data

    def apply_filter(self, queryset, name, value):
        if name == DATE_RANGE:
            return queryset.filter(date__range=value)
        if name == 'search':
            return queryset.filter(search_filter(value.strip(), *self.search_fields))
        lookup = self.filter_lookups[name]
        if lookup.endswith('_id'):
            value = parse_id(value, name)
        return queryset.filter(**{lookup: value})

    def filter_by_params(self, queryset):
        selected = select_filter(self.request.query_params, self.filter_lookups, self.date_filter)
        if selected is None:
            return queryset
        return self.apply_filter(queryset, *selected)

    def search_queryset(self, term):
        return self.get_queryset().filter(search_filter(term, *self.search_fields))

    # Write hooks

    def perform_create(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'created', instance)
        return instance

    def perform_update(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'updated', instance)
        return instance

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        instance.soft_delete()

    # Routes

    def list(self, request, *args, **kwargs):
        queryset = self.filter_by_params(self.get_queryset())
        records = self.represent_many(queryset)
        return api_response(
            f'{self.label_plural} retrieved successfully',
            {self.collection_key: records, 'total': len(records)},
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            instance = self.perform_create(serializer)
        instance = self.model.objects.get(pk=instance.pk)
        return api_response(
            f'{self.label} created successfully',
            {self.item_key: self.represent(instance)},
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        return api_response(
            f'{self.label} retrieved successfully',
            {self.item_key: self.represent(instance, detail=True)},
        )

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        self.check_editable(instance)
        serializer = self.get_serializer(instance, data=request.data, partial=self.partial_updates)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            instance = self.perform_update(serializer)
        instance = self.model.objects.get(pk=instance.pk)
        return api_response(
            f'{self.label} updated successfully',
            {self.item_key: self.represent(instance)},
        )

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.check_editable(instance)
        with transaction.atomic():
            self.perform_destroy(instance)
        return api_response(f'{self.label} deleted successfully')

    @action(detail=False, methods=['get'])
    def search(self, request):
        term = require_search_term(request.query_params)
        records = self.represent_many(self.search_queryset(term))
        return api_response(
            'Search completed successfully',
            {self.collection_key: records, 'count': len(records)},
        )


class CounterpartyChildViewSet(viewsets.GenericViewSet):
    """Read-only list of one counterparty's rows, mounted under its detail URL."""

    permission_classes = [IsAuthenticated]
    pagination_class = None

    parent_model = None
    parent_label = None
    parent_kwarg = None
    parent_field = None
    model = None
    read_serializer_class = None
    collection_key = None
    label_plural = None

    def list(self, request, *args, **kwargs):
        parent = get_active_or_404(self.parent_model, self.kwargs[self.parent_kwarg], self.parent_label)
        queryset = self.model.active.filter(**{self.parent_field: parent})
        records = self.read_serializer_class(queryset, many=True).data
        return api_response(
            f'{self.label_plural} retrieved successfully',
            {self.collection_key: records, 'total': len(records)},
        )
