# ==============================================================================
# FAVORITE SERVICE
# ==============================================================================

from typing import Any, Dict, List, Set

from storefront.models import Product, to_int
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized
from storefront.repositories.interfaces import IFavoriteRepository


class FavoriteService:
    """Favorite products of the customer."""

    def __init__(self, favorite_repo: IFavoriteRepository):
        self.favorite_repo = favorite_repo

    def list_products(self) -> List[Product]:
        products = []
        for entry in self.favorite_repo.list_favorites():
            # Entries are either {product: {...}} or the product itself
            data = entry.get('product') if isinstance(entry.get('product'), dict) else entry
            products.append(Product.from_dict(data))
        return products

    def product_ids(self) -> Set[int]:
        return {p.id for p in self.list_products()}

    def add(self, product_id: Any) -> Dict[str, Any]:
        return self._mutate(self.favorite_repo.add, product_id)

    def remove(self, product_id: Any) -> Dict[str, Any]:
        return self._mutate(self.favorite_repo.remove, product_id)

    def _mutate(self, func, product_id: Any) -> Dict[str, Any]:
        product_id = to_int(product_id)
        if product_id is None:
            return {'ok': False, 'error': 'invalid_product'}
        try:
            func(product_id)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message}
        return {'ok': True}
