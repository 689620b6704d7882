# ==============================================================================
# FAVORITE REPOSITORY
# ==============================================================================

from typing import Any, Dict, List

from .base import BaseApiRepository


class FavoriteRepository(BaseApiRepository):
    """
    Endpoints:
        GET    /favorites
        POST   /favorites           {product_id}
        DELETE /favorites/{product_id}
    """

    def list_favorites(self) -> List[Dict[str, Any]]:
        """Favorite entries, each carrying the full product."""
        return self.unwrap(self.client.get('/favorites'), []) or []

    def add(self, product_id: int) -> Any:
        return self.client.post('/favorites', json={'product_id': product_id})

    def remove(self, product_id: int) -> Any:
        return self.client.delete(f'/favorites/{product_id}')
