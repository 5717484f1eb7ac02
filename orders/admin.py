from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        'id',
        'customer_id',
        'get_delivery_point',
        'vendor',
        'status',
        'estimated_delivery_time',
        'created_at'
    )
    list_filter = ('status',)
    search_fields = ('customer_id',)
    ordering = ('-created_at',)
    inlines = [OrderItemInline]

    @admin.display(description="Delivery point")
    def get_delivery_point(self, obj):
        loc = obj.delivery_address or {}
        return f"{loc.get('lat')}, {loc.get('lng')}" if loc.get('lat') is not None else "N/A"
