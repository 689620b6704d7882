# ==============================================================================
# ORDER REPOSITORY
# ==============================================================================

from typing import Any, Dict, Optional

from .base import BaseApiRepository


class OrderRepository(BaseApiRepository):
    """
    Endpoints:
        GET  /user/orders?page=
        GET  /orders/{id}
        POST /orders
        POST /orders/{id}/cancel
    """

    def list_orders(self, page: Optional[int] = None) -> Dict[str, Any]:
        """Paginated orders of the current customer."""
        return self.client.get('/user/orders', params={'page': page}) or {}

    def get_order(self, order_id: int) -> Dict[str, Any]:
        return self.unwrap(self.client.get(f'/orders/{order_id}'), {}) or {}

    def place_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Turn the backend cart into an order.

        Args:
            payload: delivery_location_id, delivery_address, latitude, longitude, notes
        """
        return self.unwrap(self.client.post('/orders', json=payload), {}) or {}

    def cancel(self, order_id: int) -> Any:
        return self.client.post(f'/orders/{order_id}/cancel', json={})
