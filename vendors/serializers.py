from rest_framework import serializers

from vendors.models import Vendor, InventoryLine


class InventoryLineSerializer(serializers.ModelSerializer):
    is_in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryLine
        fields = ['id', 'brand', 'size', 'stock', 'is_available', 'is_in_stock', 'updated_at']
        read_only_fields = ['updated_at']


class VendorSerializer(serializers.ModelSerializer):
    location_is_stale = serializers.BooleanField(read_only=True)
    is_accepting_orders = serializers.BooleanField(read_only=True)
    inventory = InventoryLineSerializer(many=True, read_only=True)

    class Meta:
        model = Vendor
        fields = [
            'id',
            'name',
            'phone',
            'latitude',
            'longitude',
            'last_location_update',
            'service_radius_km',
            'is_online',
            'is_verified',
            'is_accepting_orders',
            'location_is_stale',
            'inventory',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['latitude', 'longitude', 'last_location_update', 'created_at', 'updated_at']

    def validate_service_radius_km(self, value):
        if value <= 0:
            raise serializers.ValidationError("Service radius must be positive.")
        return value
