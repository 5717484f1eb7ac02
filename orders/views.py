from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_datetime
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Order
from .serializers import OrderSerializer


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Orders are created by the order-placement workflow; this API reads them
    and moves them through the fulfilment statuses.
    """
    queryset = Order.objects.select_related('vendor').prefetch_related('items')
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'vendor', 'customer_id']
    search_fields = ['customer_id']
    ordering_fields = ['created_at', 'estimated_delivery_time']
    ordering = ['-created_at']

    def handle_transition(self, request, order, transition_func, time_field=None):
        """
        Wrapper for status transition methods with optional timestamp support.
        """
        timestamp = None
        if time_field:
            raw = request.data.get(time_field)
            if raw:
                timestamp = parse_datetime(raw)
                if not timestamp:
                    return Response({time_field: "Invalid datetime format."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            transition_func(timestamp) if timestamp else transition_func()
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=['post'])
    def mark_accepted(self, request, pk=None):
        order = self.get_object()
        return self.handle_transition(request, order, order.mark_accepted)

    @action(detail=True, methods=['post'])
    def mark_preparing(self, request, pk=None):
        order = self.get_object()
        return self.handle_transition(request, order, order.mark_preparing)

    @action(detail=True, methods=['post'])
    def mark_out_for_delivery(self, request, pk=None):
        order = self.get_object()
        return self.handle_transition(request, order, order.mark_out_for_delivery)

    @action(detail=True, methods=['post'])
    def mark_delivered(self, request, pk=None):
        order = self.get_object()
        return self.handle_transition(request, order, order.mark_delivered, time_field='delivered_at')

    @action(detail=True, methods=['post'])
    def mark_cancelled(self, request, pk=None):
        order = self.get_object()
        return self.handle_transition(request, order, order.mark_cancelled)
