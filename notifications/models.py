from django.db import models


class Notification(models.Model):
    """A message queued for a vendor or customer app."""
    recipient_id = models.CharField(max_length=64)
    event_type = models.CharField(max_length=40)
    title = models.CharField(max_length=120)
    message = models.CharField(max_length=255)
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.event_type} -> {self.recipient_id}"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient_id', 'is_read']),
        ]
