# ==============================================================================
# CATALOG SERVICE
# ==============================================================================
# Builds the data of the browsing pages: home, product listing and detail,
# categories, stores. Also resolves the governorate → city cascade of the
# listing filters.
# ==============================================================================

from typing import Any, Dict, List, Optional, Tuple

from storefront.models import Category, City, Governorate, Paginated, Product, Store
from storefront.repositories.interfaces import ICatalogRepository, ILocationRepository
from storefront.services.filter_service import CascadeResult, CityCascade, FilterState


class CatalogService:
    """
    Read side of the storefront.

    Responsibilities:
    - Convert backend payloads into view models
    - Pass the filter state to the backend as query parameters
    - Resolve the city filter when the governorate changes
    """

    def __init__(self, catalog_repo: ICatalogRepository, location_repo: ILocationRepository):
        """
        Args:
            catalog_repo: Products, categories and stores
            location_repo: Governorates and cities
        """
        self.catalog_repo = catalog_repo
        self.location_repo = location_repo

    # =========================================================================
    # HOME
    # =========================================================================

    def home(self) -> Dict[str, Any]:
        data = self.catalog_repo.home()
        return {
            'categories': [Category.from_dict(c) for c in data.get('categories') or []],
            'featured_products': [Product.from_dict(p) for p in data.get('featured_products') or []],
            'featured_stores': [Store.from_dict(s) for s in data.get('featured_stores') or []],
        }

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    def products_page(self, state: FilterState, page: Optional[int] = None) -> Paginated:
        payload = self.catalog_repo.list_products(state.backend_params(page))
        return Paginated.from_dict(payload, Product.from_dict)

    def product_detail(self, product_id: int) -> Tuple[Product, List[Product]]:
        """
        Returns:
            (product, related products)
        """
        data = self.catalog_repo.get_product(product_id)
        product = Product.from_dict(data.get('product') or {})
        related = [Product.from_dict(p) for p in data.get('related_products') or []]
        return product, [p for p in related if p.id != product.id]

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def categories(self) -> List[Category]:
        return [Category.from_dict(c) for c in self.catalog_repo.list_categories()]

    def category_page(
        self, category_id: int, state: FilterState, page: Optional[int] = None
    ) -> Tuple[Category, Paginated]:
        data = self.catalog_repo.get_category(category_id, state.backend_params(page))
        return (
            Category.from_dict(data.get('category') or {}),
            Paginated.from_dict(data.get('products'), Product.from_dict),
        )

    # =========================================================================
    # STORES
    # =========================================================================

    def stores_page(self, state: FilterState, page: Optional[int] = None) -> Paginated:
        payload = self.catalog_repo.list_stores(state.backend_params(page))
        return Paginated.from_dict(payload, Store.from_dict)

    def store_types(self) -> List[Dict[str, str]]:
        """Store type choices as [{value, label}]."""
        types = []
        for item in self.catalog_repo.list_store_types():
            if isinstance(item, dict):
                value = item.get('value') or item.get('key') or item.get('type')
                types.append({'value': value, 'label': item.get('label') or item.get('name') or value})
            else:
                types.append({'value': str(item), 'label': str(item)})
        return [t for t in types if t['value']]

    def store_page(
        self, store_id: int, state: FilterState, page: Optional[int] = None
    ) -> Tuple[Store, Paginated, List[Category]]:
        data = self.catalog_repo.get_store(store_id, state.backend_params(page))
        return (
            Store.from_dict(data.get('store') or {}),
            Paginated.from_dict(data.get('products'), Product.from_dict),
            [Category.from_dict(c) for c in data.get('categories') or []],
        )

    # =========================================================================
    # LOCATION FILTERS
    # =========================================================================

    def governorates(self) -> List[Governorate]:
        return [Governorate.from_dict(g) for g in self.location_repo.governorates()]

    def cities(self, governorate_id: Optional[int]) -> List[City]:
        if not governorate_id:
            return []
        return [City.from_dict(c) for c in self.location_repo.cities(governorate_id)]

    def resolve_cities(
        self,
        state: FilterState,
        default_city_id: Any = None,
        auto_select: bool = False,
    ) -> Tuple[FilterState, CascadeResult]:
        """
        Fetch the cities of the selected governorate and reconcile the city filter.

        Args:
            state: Current filter state (must have governorate_id / city_id)
            default_city_id: City stored on the customer profile
            auto_select: Initial load or right after a governorate change

        Returns:
            (possibly updated state, cascade result)
        """
        governorate_id = state.get_int('governorate_id')
        if not governorate_id:
            result = CascadeResult(city_id='', cities=[], cleared=bool(state.get('city_id')))
        else:
            result = CityCascade.resolve(
                self.cities(governorate_id),
                state.get('city_id'),
                default_city_id=default_city_id,
                auto_select=auto_select,
            )
        if result.changed:
            state = state.replace(city_id=result.city_id)
        return state, result
