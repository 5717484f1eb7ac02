"""
URL configuration for the allocation API.
"""
from django.urls import path

from allocation.api.views import AutoAssignOrderView, NearestVendorView, VendorsInRadiusView, health_check

app_name = 'allocation'

urlpatterns = [
    path('health/', health_check, name='health_check'),
    path('nearest-vendor/', NearestVendorView.as_view(), name='nearest_vendor'),
    path('vendors-in-radius/', VendorsInRadiusView.as_view(), name='vendors_in_radius'),
    path('orders/<int:order_id>/auto-assign/', AutoAssignOrderView.as_view(), name='auto_assign_order'),
]
