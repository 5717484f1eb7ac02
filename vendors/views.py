import logging

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from allocation.api.errors import error_response
from allocation.api.serializers import CoordinateSerializer, OrderSnapshotSerializer
from allocation.core.distance import validate_coordinate
from allocation.core.types import AllocationError, StoreUnavailableError
from allocation.services.factory import build_allocation_engine
from vendors.models import Vendor, InventoryLine
from vendors.serializers import VendorSerializer, InventoryLineSerializer
from vendors.services.status_services import mark_vendor_online, mark_vendor_offline, deactivate_vendor

logger = logging.getLogger(__name__)


class VendorViewSet(viewsets.ModelViewSet):
    """
    API endpoint for managing vendors.

    Vendors cannot be deleted; use the ``deactivate`` action instead.
    """
    queryset = Vendor.objects.prefetch_related('inventory')
    serializer_class = VendorSerializer
    http_method_names = ['get', 'post', 'put', 'patch', 'head', 'options']
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_online', 'is_verified']
    search_fields = ['name', 'phone']
    ordering_fields = ['id', 'name', 'service_radius_km', 'last_location_update']
    ordering = ['id']

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        if brand := params.get('brand'):
            queryset = queryset.filter(
                inventory__brand=brand, inventory__stock__gt=0, inventory__is_available=True
            ).distinct()
        if params.get('accepting_orders') == 'true':
            queryset = queryset.filter(is_online=True, is_verified=True)
        return queryset

    @action(detail=True, methods=['post'])
    def update_location(self, request, pk=None):
        serializer = CoordinateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        location = validate_coordinate(**serializer.validated_data)
        outcome = build_allocation_engine().update_vendor_location(pk, location)
        if not outcome.success:
            return error_response(outcome.error, vendor_id=pk)

        return Response({'vendor_id': int(pk), 'location': location.to_dict(), 'status': 'location updated'})

    @action(detail=True, methods=['get'])
    def active_orders(self, request, pk=None):
        vendor = self.get_object()
        try:
            orders = build_allocation_engine().get_vendor_active_orders(vendor.pk)
        except StoreUnavailableError:
            return error_response(AllocationError.STORE_UNAVAILABLE, vendor_id=vendor.pk)

        return Response({
            'vendor_id': vendor.pk,
            'count': len(orders),
            'orders': OrderSnapshotSerializer(orders, many=True).data,
        })

    @action(detail=True, methods=['post'])
    def go_online(self, request, pk=None):
        vendor = self.get_object()
        mark_vendor_online(vendor)
        return Response({'vendor_id': vendor.pk, 'is_online': True})

    @action(detail=True, methods=['post'])
    def go_offline(self, request, pk=None):
        vendor = self.get_object()
        mark_vendor_offline(vendor)
        return Response({'vendor_id': vendor.pk, 'is_online': False})

    # Admin only
    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        vendor = self.get_object()
        deactivate_vendor(vendor)
        logger.info(f"Vendor {vendor.pk} deactivated.")
        return Response({'vendor_id': vendor.pk, 'is_online': False, 'is_verified': False})

    @action(detail=True, methods=['post'])
    def set_stock(self, request, pk=None):
        """
        Create or update one inventory line.
        POST /api/vendors/vendors/{id}/set_stock/
        {
            "brand": "Bisleri",
            "size": "20L",
            "stock": 12,
            "is_available": true
        }
        """
        vendor = self.get_object()
        serializer = InventoryLineSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        line, created = InventoryLine.objects.update_or_create(
            vendor=vendor,
            brand=data['brand'],
            size=data.get('size', ''),
            defaults={
                'stock': data.get('stock', 0),
                'is_available': data.get('is_available', True),
            },
        )
        return Response(
            InventoryLineSerializer(line).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )
