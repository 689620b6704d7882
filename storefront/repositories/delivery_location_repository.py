# ==============================================================================
# DELIVERY LOCATION REPOSITORY
# ==============================================================================

from typing import Any, Dict, List

from .base import BaseApiRepository


class DeliveryLocationRepository(BaseApiRepository):
    """
    Saved delivery addresses of the customer.

    Endpoints:
        GET    /delivery-locations
        POST   /delivery-locations
        DELETE /delivery-locations/{id}
        POST   /delivery-locations/{id}/default
    """

    def list_locations(self) -> List[Dict[str, Any]]:
        return self.unwrap(self.client.get('/delivery-locations'), []) or []

    def create(self, payload: Dict[str, Any]) -> Any:
        return self.client.post('/delivery-locations', json=payload)

    def delete(self, location_id: int) -> Any:
        return self.client.delete(f'/delivery-locations/{location_id}')

    def set_default(self, location_id: int) -> Any:
        return self.client.post(f'/delivery-locations/{location_id}/default', json={})
