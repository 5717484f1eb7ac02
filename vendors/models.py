from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from allocation.core.constants import DEFAULT_SERVICE_RADIUS_KM, LOCATION_STALE_AFTER_SECONDS


class Vendor(models.Model):
    """
    A water-delivery operator that can be allocated customer orders.

    Vendors are never deleted; they are deactivated by clearing
    ``is_online`` or ``is_verified``.
    """
    name = models.CharField(max_length=120)
    phone = models.CharField(max_length=20, blank=True)

    # Location tracking
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    last_location_update = models.DateTimeField(null=True, blank=True)

    service_radius_km = models.FloatField(
        default=DEFAULT_SERVICE_RADIUS_KM,
        validators=[MinValueValidator(0.1)],
        help_text="Maximum delivery distance in kilometers"
    )
    is_online = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        state = 'online' if self.is_online else 'offline'
        return f"{self.name} ({state})"

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None

    @property
    def is_accepting_orders(self):
        """Check if vendor is eligible to be considered for allocation."""
        return self.is_online and self.is_verified

    @property
    def location_is_stale(self):
        """Check if location data is stale (more than 30 minutes old)."""
        if not self.last_location_update:
            return True
        return (timezone.now() - self.last_location_update).total_seconds() > LOCATION_STALE_AFTER_SECONDS

    class Meta:
        indexes = [
            models.Index(fields=['is_online', 'is_verified']),
        ]
        ordering = ['id']


class InventoryLine(models.Model):
    """Stock a vendor holds for one brand and size."""
    vendor = models.ForeignKey(Vendor, on_delete=models.CASCADE, related_name='inventory')
    brand = models.CharField(max_length=80)
    size = models.CharField(max_length=20, blank=True, help_text="e.g. 20L, 1L")
    stock = models.PositiveIntegerField(default=0)
    is_available = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.vendor.name} - {self.brand} {self.size} ({self.stock})"

    @property
    def is_in_stock(self):
        return self.stock > 0 and self.is_available

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['vendor', 'brand', 'size'], name='unique_vendor_brand_size'),
        ]
        indexes = [
            models.Index(fields=['brand']),
        ]
        verbose_name = "Inventory line"
