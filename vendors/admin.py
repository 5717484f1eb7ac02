from django.contrib import admin

from .models import Vendor, InventoryLine


class InventoryLineInline(admin.TabularInline):
    model = InventoryLine
    extra = 0


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'is_online', 'is_verified', 'service_radius_km', 'last_location_update')
    list_filter = ('is_online', 'is_verified')
    search_fields = ('name', 'phone')
    inlines = [InventoryLineInline]
