"""
Serializers for the allocation API.

This module provides serializers for validating allocation requests and for
rendering the engine's value objects (vendor and order snapshots, results).
"""
from rest_framework import serializers

from allocation.core.constants import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from allocation.core.distance import calculate_distance


class CoordinateSerializer(serializers.Serializer):
    """Serializer for a latitude/longitude pair."""
    latitude = serializers.FloatField(
        min_value=MIN_LATITUDE, max_value=MAX_LATITUDE,
        help_text="Latitude in decimal degrees."
    )
    longitude = serializers.FloatField(
        min_value=MIN_LONGITUDE, max_value=MAX_LONGITUDE,
        help_text="Longitude in decimal degrees."
    )


class NearestVendorRequestSerializer(CoordinateSerializer):
    brands = serializers.ListField(
        child=serializers.CharField(max_length=80), default=list,
        help_text="Brands the vendor must have in stock (e.g. ['Bisleri']). Empty means any vendor."
    )


class VendorsInRadiusQuerySerializer(CoordinateSerializer):
    radius_km = serializers.FloatField(
        required=False, min_value=0.01,
        help_text="Search radius in kilometers. Defaults to the configured browse radius."
    )


class InventoryLineSerializer(serializers.Serializer):
    brand = serializers.CharField()
    size = serializers.CharField(allow_blank=True)
    stock = serializers.IntegerField()
    is_available = serializers.BooleanField()


class VendorSnapshotSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    location = serializers.SerializerMethodField()
    service_radius_km = serializers.FloatField()
    is_online = serializers.BooleanField()
    is_verified = serializers.BooleanField()
    inventory = InventoryLineSerializer(many=True)

    def get_location(self, obj):
        return obj.location.to_dict() if obj.location else None


class NearbyVendorSerializer(VendorSnapshotSerializer):
    """Vendor snapshot with its distance from the ``center`` passed in context."""
    distance_km = serializers.SerializerMethodField()

    def get_distance_km(self, obj):
        center = self.context.get('center')
        if center is None or obj.location is None:
            return None
        return round(calculate_distance(center, obj.location), 3)


class NearestVendorResponseSerializer(serializers.Serializer):
    vendor = VendorSnapshotSerializer()
    distance_km = serializers.FloatField()
    estimated_minutes = serializers.IntegerField()


class OrderLineSerializer(serializers.Serializer):
    brand = serializers.CharField()
    size = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class OrderSnapshotSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    customer_id = serializers.CharField()
    status = serializers.CharField()
    vendor_id = serializers.IntegerField(allow_null=True)
    delivery_location = serializers.SerializerMethodField()
    items = OrderLineSerializer(many=True)
    created_at = serializers.DateTimeField(allow_null=True)
    estimated_delivery_time = serializers.DateTimeField(allow_null=True)

    def get_delivery_location(self, obj):
        return obj.delivery_location.to_dict() if obj.delivery_location else None


class AssignmentOutcomeSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    vendor_id = serializers.IntegerField()
    distance_km = serializers.FloatField()
    estimated_minutes = serializers.IntegerField()
    estimated_delivery_time = serializers.DateTimeField()
    notified = serializers.BooleanField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField(help_text="Machine-readable error kind, e.g. 'no_vendors_in_area'.")
    message = serializers.CharField()
    retryable = serializers.BooleanField(help_text="True only for transient infrastructure failures.")
