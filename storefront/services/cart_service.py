# ==============================================================================
# CART SERVICE
# ==============================================================================
# The cart is owned by the backend. This service validates quantities before
# any request and routes quantity changes to update or removal.
# ==============================================================================

from typing import Any, Dict

from storefront.models import Cart, to_int
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized
from storefront.repositories.interfaces import ICartRepository


class CartService:
    """
    Service for the backend cart.

    Responsibilities:
    - Reject invalid quantities before the network
    - Quantity <= 0 means removal, never update
    - Turn backend failures into {'ok': False, 'error': ...}

    No local cart count is kept: pages read the cart from the backend.
    """

    def __init__(self, cart_repo: ICartRepository):
        """
        Args:
            cart_repo: Backend cart endpoints
        """
        self.cart_repo = cart_repo

    def get_cart(self) -> Cart:
        return Cart.from_dict(self.cart_repo.get_cart())

    def _call(self, action: str, func, *args) -> Dict[str, Any]:
        """
        Run a cart mutation and wrap the outcome.

        Unauthorized and BackendUnavailable propagate to the route handlers.
        """
        try:
            func(*args)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'action': action, 'error': e.message, 'errors': e.errors}
        return {'ok': True, 'action': action}

    def add_item(self, product_id: Any, quantity: Any = 1) -> Dict[str, Any]:
        """
        Add a product to the cart.

        Args:
            product_id: Product to add
            quantity: Units to add (>= 1, defaults to 1)

        Returns:
            Dict with ok, action and error
        """
        product_id = to_int(product_id)
        if product_id is None:
            return {'ok': False, 'action': 'add', 'error': 'invalid_product'}

        quantity = to_int(quantity if quantity not in (None, '') else 1)
        if quantity is None or quantity < 1:
            return {'ok': False, 'action': 'add', 'error': 'invalid_quantity'}

        return self._call('add', self.cart_repo.add, product_id, quantity)

    def set_quantity(self, product_id: Any, quantity: Any) -> Dict[str, Any]:
        """
        Change the quantity of a cart line.

        A quantity of 0 or less removes the product; anything else updates it.
        """
        product_id = to_int(product_id)
        if product_id is None:
            return {'ok': False, 'action': 'update', 'error': 'invalid_product'}

        quantity = to_int(quantity)
        if quantity is None:
            return {'ok': False, 'action': 'update', 'error': 'invalid_quantity'}

        if quantity <= 0:
            return self._call('remove', self.cart_repo.remove, product_id)
        return self._call('update', self.cart_repo.update, product_id, quantity)

    def remove_item(self, product_id: int) -> Dict[str, Any]:
        return self._call('remove', self.cart_repo.remove, product_id)

    def clear(self) -> Dict[str, Any]:
        return self._call('clear', self.cart_repo.clear)
