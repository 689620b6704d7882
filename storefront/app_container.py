# ==============================================================================
# DEPENDENCY CONTAINER - wiring of repositories and services
# ==============================================================================
# One place to obtain repositories and services. It allows:
#   - Dependency injection into the routes
#   - Testing (a fake API client replaces HTTP)
#   - Swapping a repository without touching the services
#
# The ApiClient resolves the bearer token and locale from the Flask session
# on every call, so one client serves all requests.
# ==============================================================================

from typing import Optional

from flask import has_request_context, session

from storefront import config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIES - access to the backend API
# ═══════════════════════════════════════════════════════════════════════════════
from storefront.repositories import (
    ApiClient,
    CatalogRepository,
    LocationRepository,
    CartRepository,
    OrderRepository,
    DeliveryLocationRepository,
    AccountRepository,
    FavoriteRepository,
    NotificationRepository,
    SettingsRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICES - view logic
# ═══════════════════════════════════════════════════════════════════════════════
from storefront.services import (
    CatalogService,
    CartService,
    OrderService,
    DeliveryLocationService,
    ProfileService,
    DashboardService,
    AuthService,
    FavoriteService,
    ContextService,
    RequestGenerations,
)


def session_token() -> Optional[str]:
    if not has_request_context():
        return None
    return session.get('api_token')


def session_locale() -> str:
    if not has_request_context():
        return config.DEFAULT_LOCALE
    return session.get('locale') or config.DEFAULT_LOCALE


class AppContainer:
    """
    Application dependency container.

    Singleton: one instance of each repository and service.

    Usage:
        container = get_container()
        products = container.catalog_service.products_page(state)
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, base_url: str = None, api_client: ApiClient = None):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, base_url: str = None, api_client: ApiClient = None):
        """
        Args:
            base_url: Backend API root (defaults to STOREFRONT_API_URL)
            api_client: Pre-built client (tests pass a fake one)
        """
        if self._initialized:
            return

        self._base_url = base_url or config.API_URL
        self._api_client = api_client
        self.reset()
        self._initialized = True

    # =========================================================================
    # API CLIENT
    # =========================================================================

    @property
    def api_client(self) -> ApiClient:
        if self._api_client is None:
            self._api_client = ApiClient(
                self._base_url,
                timeout=config.API_TIMEOUT,
                token_provider=session_token,
                locale_provider=session_locale,
            )
        return self._api_client

    # =========================================================================
    # REPOSITORIES
    # =========================================================================

    @property
    def catalog_repo(self) -> CatalogRepository:
        if self._catalog_repo is None:
            self._catalog_repo = CatalogRepository(self.api_client)
        return self._catalog_repo

    @property
    def location_repo(self) -> LocationRepository:
        if self._location_repo is None:
            self._location_repo = LocationRepository(self.api_client)
        return self._location_repo

    @property
    def cart_repo(self) -> CartRepository:
        if self._cart_repo is None:
            self._cart_repo = CartRepository(self.api_client)
        return self._cart_repo

    @property
    def order_repo(self) -> OrderRepository:
        if self._order_repo is None:
            self._order_repo = OrderRepository(self.api_client)
        return self._order_repo

    @property
    def delivery_location_repo(self) -> DeliveryLocationRepository:
        if self._delivery_location_repo is None:
            self._delivery_location_repo = DeliveryLocationRepository(self.api_client)
        return self._delivery_location_repo

    @property
    def account_repo(self) -> AccountRepository:
        if self._account_repo is None:
            self._account_repo = AccountRepository(self.api_client)
        return self._account_repo

    @property
    def favorite_repo(self) -> FavoriteRepository:
        if self._favorite_repo is None:
            self._favorite_repo = FavoriteRepository(self.api_client)
        return self._favorite_repo

    @property
    def notification_repo(self) -> NotificationRepository:
        if self._notification_repo is None:
            self._notification_repo = NotificationRepository(self.api_client)
        return self._notification_repo

    @property
    def settings_repo(self) -> SettingsRepository:
        if self._settings_repo is None:
            self._settings_repo = SettingsRepository(self.api_client)
        return self._settings_repo

    # =========================================================================
    # SERVICES
    # =========================================================================

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.catalog_repo, self.location_repo)
        return self._catalog_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.cart_repo)
        return self._cart_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(self.order_repo)
        return self._order_service

    @property
    def delivery_location_service(self) -> DeliveryLocationService:
        if self._delivery_location_service is None:
            self._delivery_location_service = DeliveryLocationService(self.delivery_location_repo)
        return self._delivery_location_service

    @property
    def profile_service(self) -> ProfileService:
        if self._profile_service is None:
            self._profile_service = ProfileService(self.account_repo, self.location_repo)
        return self._profile_service

    @property
    def dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            self._dashboard_service = DashboardService(self.account_repo)
        return self._dashboard_service

    @property
    def auth_service(self) -> AuthService:
        if self._auth_service is None:
            self._auth_service = AuthService(self.account_repo)
        return self._auth_service

    @property
    def favorite_service(self) -> FavoriteService:
        if self._favorite_service is None:
            self._favorite_service = FavoriteService(self.favorite_repo)
        return self._favorite_service

    @property
    def context_service(self) -> ContextService:
        if self._context_service is None:
            self._context_service = ContextService(
                self.settings_repo,
                self.notification_repo,
                self.favorite_service,
            )
        return self._context_service

    @property
    def city_generations(self) -> RequestGenerations:
        """Latest-wins guard of the cities lookup, shared across threads."""
        if self._city_generations is None:
            self._city_generations = RequestGenerations()
        return self._city_generations

    # =========================================================================
    # UTILITIES
    # =========================================================================

    def reset(self) -> None:
        """
        Drop every instance.
        Useful for tests or after a configuration change.
        """
        self._catalog_repo = None
        self._location_repo = None
        self._cart_repo = None
        self._order_repo = None
        self._delivery_location_repo = None
        self._account_repo = None
        self._favorite_repo = None
        self._notification_repo = None
        self._settings_repo = None

        self._catalog_service = None
        self._cart_service = None
        self._order_service = None
        self._delivery_location_service = None
        self._profile_service = None
        self._dashboard_service = None
        self._auth_service = None
        self._favorite_service = None
        self._context_service = None
        self._city_generations = None

    @classmethod
    def get_instance(cls, base_url: str = None, api_client: ApiClient = None) -> 'AppContainer':
        """
        Singleton instance of the container.

        Args:
            base_url / api_client: Only used on the first call
        """
        if cls._instance is None:
            return cls(base_url, api_client)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Remove the singleton (used by tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(base_url: str = None, api_client: ApiClient = None) -> AppContainer:
    """
    Global dependency container.

    Args:
        base_url: Backend API root
        api_client: Client to use instead of a real HTTP one

    Returns:
        Container instance
    """
    return AppContainer.get_instance(base_url, api_client)
