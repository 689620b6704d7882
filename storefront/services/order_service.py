# ==============================================================================
# ORDER SERVICE
# ==============================================================================
# Order listing, detail, cancellation and checkout. Status display metadata
# lives here so every page shows the same badge for the same status.
# ==============================================================================

from typing import Any, Dict, List, Optional

from storefront.models import CustomerLocation, Order, OrderStatus, Paginated, to_int
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized
from storefront.repositories.interfaces import IOrderRepository


# Badge class and label key per status
STATUS_META = {
    OrderStatus.PENDING.value: {'badge': 'badge-amber', 'label': 'status_pending', 'icon': 'clock'},
    OrderStatus.CONFIRMED.value: {'badge': 'badge-blue', 'label': 'status_confirmed', 'icon': 'check'},
    OrderStatus.PREPARING.value: {'badge': 'badge-violet', 'label': 'status_preparing', 'icon': 'package'},
    OrderStatus.ON_DELIVERY.value: {'badge': 'badge-indigo', 'label': 'status_on_delivery', 'icon': 'truck'},
    OrderStatus.DELIVERED.value: {'badge': 'badge-emerald', 'label': 'status_delivered', 'icon': 'check-circle'},
    OrderStatus.CANCELLED.value: {'badge': 'badge-rose', 'label': 'status_cancelled', 'icon': 'x-circle'},
}


def status_meta(status: Optional[str]) -> Dict[str, str]:
    """Display metadata of an order status; unknown statuses look like pending."""
    return STATUS_META.get(status or '', STATUS_META[OrderStatus.PENDING.value])


class OrderService:
    """
    Service for customer orders.

    Responsibilities:
    - Paginated order history
    - Order detail
    - Cancellation (only meaningful while pending)
    - Checkout from the backend cart
    """

    def __init__(self, order_repo: IOrderRepository):
        self.order_repo = order_repo

    def list_orders(self, page: Optional[int] = None) -> Paginated:
        return Paginated.from_dict(self.order_repo.list_orders(page), Order.from_dict)

    def get_order(self, order_id: int) -> Order:
        return Order.from_dict(self.order_repo.get_order(order_id))

    def cancel(self, order_id: int) -> Dict[str, Any]:
        try:
            self.order_repo.cancel(order_id)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message}
        return {'ok': True}

    def place_order(self, form: Dict[str, Any], locations: List[CustomerLocation]) -> Dict[str, Any]:
        """
        Place an order for the current cart.

        Args:
            form: delivery_location_id, notes
            locations: Saved delivery locations of the customer

        Returns:
            Dict with ok, order (on success) or errors
        """
        location_id = to_int(form.get('delivery_location_id'))
        location = next((loc for loc in locations if loc.id == location_id), None)
        if location is None:
            return {'ok': False, 'errors': {'delivery_location_id': 'delivery_location_required'}}

        payload = {
            'delivery_location_id': location.id,
            'delivery_address': location.address,
            'delivery_latitude': str(location.latitude),
            'delivery_longitude': str(location.longitude),
            'notes': (form.get('notes') or '').strip() or None,
        }
        try:
            data = self.order_repo.place_order(payload)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message, 'errors': e.errors}

        # The backend may split one cart into several orders (one per store)
        orders = data if isinstance(data, list) else (data.get('orders') or [data])
        return {'ok': True, 'orders': [Order.from_dict(o) for o in orders if isinstance(o, dict)]}
