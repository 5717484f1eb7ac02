from decimal import Decimal
from unittest.mock import patch, MagicMock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from allocation import __version__
from allocation.api.errors import ERROR_STATUS_CODES, error_response
from allocation.core.types import AllocationError, AssignmentOutcome, StoreUnavailableError
from orders.models import Order, OrderItem
from vendors.models import InventoryLine, Vendor


class AllocationApiTestCase(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.vendor = Vendor.objects.create(
            name="AquaFresh",
            latitude=28.51,
            longitude=77.11,
            service_radius_km=5,
            is_online=True,
            is_verified=True,
        )
        InventoryLine.objects.create(vendor=self.vendor, brand="Bisleri", size="20L", stock=10)

    def create_order(self, brands=("Bisleri",), address=None):
        order = Order.objects.create(
            customer_id="cust-9",
            delivery_address=address or {"lat": 28.50, "lng": 77.10, "line1": "Flat 4B"},
        )
        for brand in brands:
            OrderItem.objects.create(order=order, brand=brand, size="20L", quantity=1, price=Decimal("30.00"))
        return order


class HealthCheckTests(AllocationApiTestCase):

    def test_health_check(self):
        response = self.client.get(reverse('allocation:health_check'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "healthy", "service": "allocation", "version": __version__})


class NearestVendorViewTests(AllocationApiTestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse('allocation:nearest_vendor')

    def test_nearest_vendor_found(self):
        response = self.client.post(
            self.url, {"latitude": 28.50, "longitude": 77.10, "brands": ["Bisleri"]}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['vendor']['id'], self.vendor.pk)
        self.assertEqual(response.data['vendor']['location'], {"lat": 28.51, "lng": 77.11})
        self.assertAlmostEqual(response.data['distance_km'], 1.48, delta=0.01)
        self.assertEqual(response.data['estimated_minutes'], 8)

    def test_nearest_vendor_does_not_assign(self):
        order = self.create_order()

        self.client.post(self.url, {"latitude": 28.50, "longitude": 77.10, "brands": ["Bisleri"]}, format='json')

        order.refresh_from_db()
        self.assertIsNone(order.vendor_id)

    def test_no_stock(self):
        response = self.client.post(
            self.url, {"latitude": 28.50, "longitude": 77.10, "brands": ["Kinley"]}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['error'], 'no_stock_available')
        self.assertFalse(response.data['retryable'])

    def test_outside_service_area(self):
        response = self.client.post(
            self.url, {"latitude": 19.07, "longitude": 72.87, "brands": ["Bisleri"]}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['error'], 'no_vendors_in_area')
        self.assertEqual(response.data['message'], "No vendors available in your area")

    def test_invalid_coordinates(self):
        response = self.client.post(self.url, {"latitude": 91, "longitude": 77.10}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('latitude', response.data)

    def test_missing_coordinates(self):
        response = self.client.post(self.url, {"brands": ["Bisleri"]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class VendorsInRadiusViewTests(AllocationApiTestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse('allocation:vendors_in_radius')
        self.far_vendor = Vendor.objects.create(
            name="Faraway", latitude=28.58, longitude=77.10, is_online=True, is_verified=True
        )

    def test_lists_vendors_nearest_first(self):
        response = self.client.get(self.url, {"latitude": 28.50, "longitude": 77.10, "radius_km": 10})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['radius_km'], 10.0)
        self.assertEqual(response.data['center'], {"lat": 28.5, "lng": 77.1})
        ids = [v['id'] for v in response.data['vendors']]
        self.assertEqual(ids, [self.vendor.pk, self.far_vendor.pk])
        self.assertAlmostEqual(response.data['vendors'][0]['distance_km'], 1.48, delta=0.01)

    def test_radius_limits_results(self):
        response = self.client.get(self.url, {"latitude": 28.50, "longitude": 77.10, "radius_km": 2})

        self.assertEqual(response.data['count'], 1)

    def test_default_radius(self):
        response = self.client.get(self.url, {"latitude": 28.50, "longitude": 77.10})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['radius_km'], 10.0)

    def test_invalid_radius(self):
        response = self.client.get(self.url, {"latitude": 28.50, "longitude": 77.10, "radius_km": 0})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @patch('allocation.api.views.build_allocation_engine')
    def test_store_unavailable(self, mock_build):
        engine = MagicMock()
        engine.default_radius_km = 10.0
        engine.get_vendors_in_radius.side_effect = StoreUnavailableError("db down")
        mock_build.return_value = engine

        response = self.client.get(self.url, {"latitude": 28.50, "longitude": 77.10})

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['error'], 'store_unavailable')
        self.assertTrue(response.data['retryable'])


class AutoAssignOrderViewTests(AllocationApiTestCase):

    def url(self, order_id):
        return reverse('allocation:auto_assign_order', kwargs={'order_id': order_id})

    def test_assigns_order(self):
        order = self.create_order()

        response = self.client.post(self.url(order.pk), format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order_id'], order.pk)
        self.assertEqual(response.data['vendor_id'], self.vendor.pk)
        self.assertEqual(response.data['estimated_minutes'], 8)
        self.assertTrue(response.data['notified'])

    def test_repeat_call_conflicts(self):
        order = self.create_order()
        self.client.post(self.url(order.pk), format='json')

        response = self.client.post(self.url(order.pk), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'already_assigned')
        self.assertEqual(response.data['vendor_id'], self.vendor.pk)

    def test_unknown_order(self):
        response = self.client.post(self.url(99999), format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'order_not_found')
        self.assertEqual(response.data['order_id'], 99999)

    def test_order_without_coordinates(self):
        order = self.create_order(address={"line1": "Somewhere"})

        response = self.client.post(self.url(order.pk), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid_location')

    def test_cancelled_order(self):
        order = self.create_order()
        order.mark_cancelled()

        response = self.client.post(self.url(order.pk), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'invalid_order_state')

    @patch('allocation.api.views.build_allocation_engine')
    def test_store_unavailable(self, mock_build):
        mock_build.return_value.auto_assign_order.return_value = AssignmentOutcome.failure(
            AllocationError.STORE_UNAVAILABLE, order_id=5
        )

        response = self.client.post(self.url(5), format='json')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertTrue(response.data['retryable'])


class ErrorResponseTests(APITestCase):

    def test_every_error_has_a_status_code(self):
        self.assertEqual(set(ERROR_STATUS_CODES), set(AllocationError))

    def test_error_body(self):
        response = error_response(AllocationError.NO_VENDORS_AVAILABLE, order_id=3)

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data, {
            "error": "no_vendors_available",
            "message": "No vendors available at the moment",
            "retryable": False,
            "order_id": 3,
        })
