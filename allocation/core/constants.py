# Earth model for great-circle distances
EARTH_RADIUS_KM = 6371.0

# Coordinate bounds
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# Delivery-time estimate: average road speed plus a fixed preparation buffer
DEFAULT_AVERAGE_SPEED_KMH = 30.0
DEFAULT_PREPARATION_MINUTES = 5

# Radius used by browse/map views when the caller gives none
DEFAULT_BROWSE_RADIUS_KM = 10.0

# Vendors default to a 5 km service area at onboarding
DEFAULT_SERVICE_RADIUS_KM = 5.0

# --- Order statuses ---
ORDER_STATUS_PENDING = 'pending'
ORDER_STATUS_ACCEPTED = 'accepted'
ORDER_STATUS_PREPARING = 'preparing'
ORDER_STATUS_OUT_FOR_DELIVERY = 'out_for_delivery'
ORDER_STATUS_DELIVERED = 'delivered'
ORDER_STATUS_CANCELLED = 'cancelled'

# Orders a vendor is currently working on
ACTIVE_ORDER_STATUSES = (
    ORDER_STATUS_ACCEPTED,
    ORDER_STATUS_PREPARING,
    ORDER_STATUS_OUT_FOR_DELIVERY,
)

# Notification event types
EVENT_NEW_ORDER = 'new_order'

# Location data older than this is reported as stale
LOCATION_STALE_AFTER_SECONDS = 30 * 60
