"""Activity log related API views."""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from ..models import Activity
from ..serializers import ActivitySerializer
from .utils import api_response, parse_day


class ActivityViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only access to the audit trail of writes."""

    serializer_class = ActivitySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = '[0-9]+'

    def get_queryset(self):
        queryset = Activity.objects.select_related('user', 'content_type').order_by('-timestamp', '-id')
        date_str = self.request.query_params.get('date')
        if date_str:
            queryset = queryset.filter(timestamp__date=parse_day(date_str))
        return queryset

    def list(self, request, *args, **kwargs):
        records = self.get_serializer(self.get_queryset(), many=True).data
        return api_response(
            'Activities retrieved successfully',
            {'activities': records, 'total': len(records)},
        )

    def retrieve(self, request, *args, **kwargs):
        return api_response(
            'Activity retrieved successfully',
            {'activity': self.get_serializer(self.get_object()).data},
        )
