from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('recipient_id', 'event_type', 'title', 'is_read', 'created_at')
    list_filter = ('event_type', 'is_read')
    search_fields = ('recipient_id',)
    ordering = ('-created_at',)
