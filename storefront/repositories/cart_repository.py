# ==============================================================================
# CART REPOSITORY
# ==============================================================================
# The cart lives on the backend. This repository only forwards mutations;
# no local cart count is kept.
# ==============================================================================

from typing import Any, Dict

from .base import BaseApiRepository


class CartRepository(BaseApiRepository):
    """
    Endpoints:
        GET    /cart
        POST   /cart/add            {product_id, quantity}
        PUT    /cart/update         {product_id, quantity}
        DELETE /cart/remove/{id}
        DELETE /cart/clear
    """

    def get_cart(self) -> Dict[str, Any]:
        return self.unwrap(self.client.get('/cart'), {}) or {}

    def add(self, product_id: int, quantity: int) -> Any:
        return self.client.post('/cart/add', json={'product_id': product_id, 'quantity': quantity})

    def update(self, product_id: int, quantity: int) -> Any:
        return self.client.put('/cart/update', json={'product_id': product_id, 'quantity': quantity})

    def remove(self, product_id: int) -> Any:
        return self.client.delete(f'/cart/remove/{product_id}')

    def clear(self) -> Any:
        return self.client.delete('/cart/clear')
