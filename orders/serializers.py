from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['id', 'brand', 'size', 'quantity', 'price']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    vendor_name = serializers.CharField(source='vendor.name', read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            'id',
            'customer_id',
            'delivery_address',
            'vendor',
            'vendor_name',
            'status',
            'estimated_delivery_time',
            'delivered_at',
            'total_amount',
            'items',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
