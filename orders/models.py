from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from allocation.core import constants
from vendors.models import Vendor


class Order(models.Model):
    STATUS_CHOICES = [
        (constants.ORDER_STATUS_PENDING, 'Pending'),
        (constants.ORDER_STATUS_ACCEPTED, 'Accepted'),
        (constants.ORDER_STATUS_PREPARING, 'Preparing'),
        (constants.ORDER_STATUS_OUT_FOR_DELIVERY, 'Out for Delivery'),
        (constants.ORDER_STATUS_DELIVERED, 'Delivered'),
        (constants.ORDER_STATUS_CANCELLED, 'Cancelled'),
    ]

    customer_id = models.CharField(max_length=64)  # Reference to auth service

    # { "lat": ..., "lng": ..., "line1": ..., "city": ... }
    delivery_address = models.JSONField()

    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, null=True, blank=True, related_name='orders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=constants.ORDER_STATUS_PENDING)
    estimated_delivery_time = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def _transition(self, allowed_from, new_status, message):
        if self.status not in allowed_from:
            raise ValidationError(message)
        self.status = new_status
        self.save(update_fields=['status', 'updated_at'])

    def mark_accepted(self):
        if self.vendor_id is None:
            raise ValidationError("Cannot accept an order that has no vendor assigned.")
        self._transition(
            [constants.ORDER_STATUS_PENDING], constants.ORDER_STATUS_ACCEPTED,
            "Can only accept an order that is pending."
        )

    def mark_preparing(self):
        self._transition(
            [constants.ORDER_STATUS_ACCEPTED], constants.ORDER_STATUS_PREPARING,
            "Can only prepare an order that has been accepted."
        )

    def mark_out_for_delivery(self):
        self._transition(
            [constants.ORDER_STATUS_PREPARING], constants.ORDER_STATUS_OUT_FOR_DELIVERY,
            "Can only send out an order that is being prepared."
        )

    def mark_delivered(self, delivered_at=None):
        if self.status != constants.ORDER_STATUS_OUT_FOR_DELIVERY:
            raise ValidationError("Can only mark delivered after out_for_delivery.")
        self.status = constants.ORDER_STATUS_DELIVERED
        self.delivered_at = delivered_at or timezone.now()
        self.save(update_fields=['status', 'delivered_at', 'updated_at'])

    def mark_cancelled(self):
        self._transition(
            [
                constants.ORDER_STATUS_PENDING,
                constants.ORDER_STATUS_ACCEPTED,
                constants.ORDER_STATUS_PREPARING,
                constants.ORDER_STATUS_OUT_FOR_DELIVERY,
            ],
            constants.ORDER_STATUS_CANCELLED,
            "Only active orders can be cancelled."
        )

    @property
    def is_active(self):
        return self.status in constants.ACTIVE_ORDER_STATUSES

    def __str__(self):
        return f"Order #{self.pk} ({self.status})"

    class Meta:
        indexes = [
            models.Index(fields=['vendor', 'status']),
            models.Index(fields=['status']),
        ]


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    brand = models.CharField(max_length=80)
    size = models.CharField(max_length=20, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2)

    def __str__(self):
        return f"{self.quantity}x {self.brand} {self.size}".strip()
