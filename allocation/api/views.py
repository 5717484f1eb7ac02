"""
API views for vendor allocation.

This module provides the endpoints used by the order-placement workflow
(auto-assignment) and by customer-facing map views (nearby vendors).
"""
import logging

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.views import APIView

from allocation import __version__
from allocation.api.errors import error_response
from allocation.api.serializers import (
    AssignmentOutcomeSerializer,
    ErrorResponseSerializer,
    NearbyVendorSerializer,
    NearestVendorRequestSerializer,
    NearestVendorResponseSerializer,
    VendorsInRadiusQuerySerializer,
)
from allocation.core.distance import validate_coordinate
from allocation.core.types import AllocationError, StoreUnavailableError
from allocation.services.factory import build_allocation_engine

logger = logging.getLogger(__name__)


class NearestVendorView(APIView):
    """
    Preview which vendor would receive an order at a location.
    """

    @swagger_auto_schema(
        request_body=NearestVendorRequestSerializer,
        responses={
            200: NearestVendorResponseSerializer,
            400: "Bad Request - Invalid input data",
            422: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
        operation_id="nearest_vendor_create",
        operation_description="Finds the nearest online, verified vendor that stocks every requested brand "
                              "and serves the given location. Does not assign anything.",
        tags=['Allocation']
    )
    def post(self, request, format=None):
        serializer = NearestVendorRequestSerializer(data=request.data)
        if not serializer.is_valid():
            logger.error(f"NearestVendorView validation error: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        location = validate_coordinate(data['latitude'], data['longitude'])

        result = build_allocation_engine().find_nearest_vendor(location, data['brands'])
        if not result.ok:
            return error_response(result.error)

        return Response(NearestVendorResponseSerializer(result).data, status=status.HTTP_200_OK)


class VendorsInRadiusView(APIView):
    """
    List vendors around a point for map and browse screens.
    """

    @swagger_auto_schema(
        query_serializer=VendorsInRadiusQuerySerializer,
        responses={
            200: NearbyVendorSerializer(many=True),
            400: "Bad Request - Invalid query parameters",
            503: ErrorResponseSerializer,
        },
        operation_id="vendors_in_radius_list",
        operation_description="Online, verified vendors within the radius, nearest first. Stock is not considered.",
        tags=['Allocation']
    )
    def get(self, request, format=None):
        serializer = VendorsInRadiusQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        center = validate_coordinate(data['latitude'], data['longitude'])
        engine = build_allocation_engine()
        radius_km = data.get('radius_km', engine.default_radius_km)

        try:
            vendors = engine.get_vendors_in_radius(center, radius_km)
        except StoreUnavailableError:
            return error_response(AllocationError.STORE_UNAVAILABLE)

        return Response({
            "center": center.to_dict(),
            "radius_km": radius_km,
            "count": len(vendors),
            "vendors": NearbyVendorSerializer(vendors, many=True, context={'center': center}).data,
        })


class AutoAssignOrderView(APIView):
    """
    Assign a placed order to its nearest eligible vendor.
    """

    @swagger_auto_schema(
        request_body=openapi.Schema(type=openapi.TYPE_OBJECT, properties={}),
        responses={
            200: AssignmentOutcomeSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
        operation_id="auto_assign_order_create",
        operation_description="Selects the nearest vendor that stocks every brand in the order and has the "
                              "delivery address inside its service radius, then assigns it. "
                              "Repeating the call never reassigns an order.",
        tags=['Allocation']
    )
    def post(self, request, order_id, format=None):
        outcome = build_allocation_engine().auto_assign_order(order_id)
        if not outcome.success:
            extra = {"order_id": order_id}
            if outcome.vendor_id is not None:
                extra["vendor_id"] = outcome.vendor_id
            return error_response(outcome.error, **extra)

        return Response(AssignmentOutcomeSerializer(outcome).data, status=status.HTTP_200_OK)


@swagger_auto_schema(
    method='get',
    operation_id="allocation_health_check",
    operation_description="Health check endpoint for the allocation service.",
    responses={200: "Service is healthy"},
    tags=['Health']
)
@api_view(['GET'])
def health_check(request):
    return Response({
        "status": "healthy",
        "service": "allocation",
        "version": __version__,
    }, status=status.HTTP_200_OK)
