# ==============================================================================
# CATALOG REPOSITORY
# ==============================================================================
# Read-only access to products, categories and stores.
# Listing endpoints return paginated collections: {data, total, links}.
# ==============================================================================

from typing import Any, Dict, List, Optional

from .base import BaseApiRepository


class CatalogRepository(BaseApiRepository):
    """
    Repository for the browsable catalog.

    Endpoints:
        GET /home
        GET /products, /products/{id}
        GET /categories, /categories/{id}
        GET /stores, /stores/{id}, /store-types
    """

    def home(self) -> Dict[str, Any]:
        """Featured products, categories and featured stores for the landing page."""
        return self.unwrap(self.client.get('/home'), {}) or {}

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    def list_products(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Paginated products.

        Args:
            params: search, category, governorate_id, city_id, sort, direction, page
        """
        return self.client.get('/products', params=params) or {}

    def get_product(self, product_id: int) -> Dict[str, Any]:
        """
        A product with its related products.

        Returns:
            {'product': {...}, 'related_products': [...]}
        """
        body = self.client.get(f'/products/{product_id}') or {}
        related = body.get('related_products') or body.get('relatedProducts') or []
        product = self.unwrap(body, {})
        if isinstance(product, dict) and 'product' in product:
            related = product.get('related_products') or related
            product = product['product']
        return {'product': product or {}, 'related_products': related}

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def list_categories(self) -> List[Dict[str, Any]]:
        return self.unwrap(self.client.get('/categories'), []) or []

    def get_category(self, category_id: int, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        A category with its paginated products.

        Args:
            params: search, sort, direction, page

        Returns:
            {'category': {...}, 'products': {data, total, links}}
        """
        body = self.client.get(f'/categories/{category_id}', params=params) or {}
        return {
            'category': body.get('category') or body.get('data') or {},
            'products': body.get('products') or {},
        }

    # =========================================================================
    # STORES
    # =========================================================================

    def list_stores(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Paginated stores.

        Args:
            params: search, type, governorate_id, city_id, page
        """
        return self.client.get('/stores', params=params) or {}

    def list_store_types(self) -> List[Dict[str, Any]]:
        return self.unwrap(self.client.get('/store-types'), []) or []

    def get_store(self, store_id: int, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        A store with its paginated products and the categories it sells.

        Returns:
            {'store': {...}, 'products': {...}, 'categories': [...]}
        """
        body = self.client.get(f'/stores/{store_id}', params=params) or {}
        return {
            'store': body.get('store') or body.get('data') or {},
            'products': body.get('products') or {},
            'categories': body.get('categories') or [],
        }
