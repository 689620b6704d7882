# ==============================================================================
# DELIVERY LOCATION SERVICE
# ==============================================================================
# Saved delivery addresses: listing, form validation, create, delete and
# promotion to default. Validation runs before any backend request.
# ==============================================================================

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront.models import CustomerLocation, to_decimal
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized
from storefront.repositories.interfaces import IDeliveryLocationRepository


# Damascus; used when neither the map nor geolocation supplied a point
DEFAULT_COORDINATES = (Decimal('33.5138'), Decimal('36.2765'))

# Passed to navigator.geolocation.getCurrentPosition
GEOLOCATION_OPTIONS = {
    'enableHighAccuracy': True,
    'timeout': 10000,
    'maximumAge': 0,
}
COORDINATE_DECIMALS = 6

LABEL_MAX = 100
ADDRESS_MAX = 500
NOTES_MAX = 255


def _coordinate(raw: Any, low: int, high: int) -> Optional[Decimal]:
    if raw in (None, ''):
        return None
    value = to_decimal(raw, default='NaN')
    if value.is_nan() or value < low or value > high:
        return None
    return round(value, COORDINATE_DECIMALS)


def validate_location_form(form: Dict[str, Any], has_locations: bool) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Check the location form before it is sent.

    Args:
        form: label, address, latitude, longitude, notes, is_default
        has_locations: The customer already has saved locations

    Returns:
        (payload, errors) - errors is empty when the payload can be sent
    """
    errors = {}
    label = (form.get('label') or '').strip()
    address = (form.get('address') or '').strip()
    notes = (form.get('notes') or '').strip()

    if not label:
        errors['label'] = 'field_required'
    elif len(label) > LABEL_MAX:
        errors['label'] = 'field_too_long'

    if not address:
        errors['address'] = 'field_required'
    elif len(address) > ADDRESS_MAX:
        errors['address'] = 'field_too_long'

    if len(notes) > NOTES_MAX:
        errors['notes'] = 'field_too_long'

    latitude = _coordinate(form.get('latitude'), -90, 90)
    longitude = _coordinate(form.get('longitude'), -180, 180)
    if latitude is None:
        errors['latitude'] = 'invalid_latitude'
    if longitude is None:
        errors['longitude'] = 'invalid_longitude'

    # The first saved location becomes the default
    is_default = form.get('is_default') in (True, '1', 'on', 'true') or not has_locations

    payload = {
        'label': label,
        'address': address,
        'latitude': str(latitude) if latitude is not None else None,
        'longitude': str(longitude) if longitude is not None else None,
        'notes': notes or None,
        'is_default': is_default,
    }
    return payload, errors


class DeliveryLocationService:
    """
    Service for saved delivery locations.

    Delete and set-default are not applied locally: the page re-renders from
    the next backend response.
    """

    def __init__(self, location_repo: IDeliveryLocationRepository):
        self.location_repo = location_repo

    def list_locations(self) -> List[CustomerLocation]:
        return [CustomerLocation.from_dict(loc) for loc in self.location_repo.list_locations()]

    @staticmethod
    def default_location(locations: List[CustomerLocation]) -> Optional[CustomerLocation]:
        """The default location, else the first one."""
        for location in locations:
            if location.is_default:
                return location
        return locations[0] if locations else None

    def create(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and save a new location.

        Returns:
            Dict with ok and, on failure, field errors
        """
        payload, errors = validate_location_form(form, has_locations=True)
        if errors:
            return {'ok': False, 'errors': errors}
        if not payload['is_default']:
            payload['is_default'] = not self.location_repo.list_locations()

        try:
            self.location_repo.create(payload)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message, 'errors': e.errors}
        return {'ok': True}

    def delete(self, location_id: int) -> Dict[str, Any]:
        return self._mutate(self.location_repo.delete, location_id)

    def set_default(self, location_id: int) -> Dict[str, Any]:
        return self._mutate(self.location_repo.set_default, location_id)

    def _mutate(self, func, location_id: int) -> Dict[str, Any]:
        try:
            func(location_id)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message}
        return {'ok': True}
