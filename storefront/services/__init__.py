# ==============================================================================
# SERVICE LAYER - view logic of the storefront
# ==============================================================================
# Routes only orchestrate request → service → template. Services validate
# forms before any backend call, convert payloads into view models and turn
# backend failures into result dicts the routes can flash.
#
# LAYOUT:
# ├── filter_service.py   → filter state, sort toggle, pagination, city cascade
# ├── catalog_service.py  → home, products, categories, stores
# ├── cart_service.py     → backend cart mutations
# ├── order_service.py    → orders, checkout, status badges
# ├── location_service.py → saved delivery locations
# ├── profile_service.py  → profile form, avatar helpers, area filtering
# ├── dashboard_service.py→ dashboard, role upgrade, driver status card
# ├── auth_service.py     → login / logout
# ├── favorite_service.py → favorites
# └── context_service.py  → request-scoped page context
# ==============================================================================

from storefront.services.filter_service import (
    FilterState,
    ListingFilters,
    CityCascade,
    CascadeResult,
    RequestGenerations,
    PRODUCT_LISTING,
    STORE_LISTING,
    CATEGORY_LISTING,
    STORE_PRODUCTS_LISTING,
    page_links,
    rewrite_page_url,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService, status_meta
from storefront.services.location_service import DeliveryLocationService, validate_location_form
from storefront.services.profile_service import (
    ProfileService,
    avatar_url,
    initials,
    areas_for_governorate,
)
from storefront.services.dashboard_service import DashboardService, driver_status_view
from storefront.services.auth_service import AuthService
from storefront.services.favorite_service import FavoriteService
from storefront.services.context_service import ContextService, PageContext

__all__ = [
    'FilterState',
    'ListingFilters',
    'CityCascade',
    'CascadeResult',
    'RequestGenerations',
    'PRODUCT_LISTING',
    'STORE_LISTING',
    'CATEGORY_LISTING',
    'STORE_PRODUCTS_LISTING',
    'page_links',
    'rewrite_page_url',
    'CatalogService',
    'CartService',
    'OrderService',
    'status_meta',
    'DeliveryLocationService',
    'validate_location_form',
    'ProfileService',
    'avatar_url',
    'initials',
    'areas_for_governorate',
    'DashboardService',
    'driver_status_view',
    'AuthService',
    'FavoriteService',
    'ContextService',
    'PageContext',
]
