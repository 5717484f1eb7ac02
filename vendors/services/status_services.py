from vendors.models import Vendor


def update_vendor_status(vendor: Vendor, *, is_online=None, is_verified=None):
    update_fields = ['updated_at']
    if is_online is not None:
        vendor.is_online = is_online
        update_fields.append('is_online')
    if is_verified is not None:
        vendor.is_verified = is_verified
        update_fields.append('is_verified')
    vendor.save(update_fields=update_fields)


def mark_vendor_online(vendor: Vendor):
    update_vendor_status(vendor, is_online=True)


def mark_vendor_offline(vendor: Vendor):
    update_vendor_status(vendor, is_online=False)


def deactivate_vendor(vendor: Vendor):
    update_vendor_status(vendor, is_online=False, is_verified=False)
