# ==============================================================================
# FILTER SERVICE - listing filters, sorting, pagination links, city cascade
# ==============================================================================
# Every listing page (products, stores, category detail, store detail) keeps
# its filters in the query string. A change to one filter is applied on the
# server and answered with a redirect to the canonical URL that carries the
# full filter set.
# ==============================================================================

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlsplit

from storefront.models import City, Paginated, to_int


SORT_KEYS = ('sort_order', 'name', 'price')
DIRECTIONS = ('asc', 'desc')


# ==============================================================================
# LISTING DEFINITIONS
# ==============================================================================

@dataclass(frozen=True)
class ListingFilters:
    """
    Filters a listing page accepts.

    Attributes:
        fields: Query parameters in canonical order
        sort_keys: Allowed sort keys (empty when the page does not sort)
        default_sort: Sort key used when none or an unknown one is given
    """
    name: str
    fields: Tuple[str, ...]
    sort_keys: Tuple[str, ...] = ()
    default_sort: str = 'sort_order'

    @property
    def sortable(self) -> bool:
        return bool(self.sort_keys)

    @property
    def defaults(self) -> Dict[str, str]:
        if not self.sortable:
            return {}
        return {'sort': self.default_sort, 'direction': 'asc'}


PRODUCT_LISTING = ListingFilters(
    'products',
    ('search', 'category', 'governorate_id', 'city_id', 'sort', 'direction'),
    SORT_KEYS,
)
STORE_LISTING = ListingFilters('stores', ('search', 'type', 'governorate_id', 'city_id'))
CATEGORY_LISTING = ListingFilters('category', ('search', 'sort', 'direction'), SORT_KEYS)
STORE_PRODUCTS_LISTING = ListingFilters(
    'store', ('search', 'category', 'sort', 'direction'), SORT_KEYS,
)


# ==============================================================================
# FILTER STATE
# ==============================================================================

class FilterState:
    """
    Current filter values of one listing page.

    Instances are immutable from the outside: `change()` and `toggle_sort()`
    return new states.
    """

    def __init__(self, listing: ListingFilters, values: Optional[Mapping[str, Any]] = None):
        self.listing = listing
        self.values = self._normalize(listing, values or {})

    @staticmethod
    def _normalize(listing: ListingFilters, raw: Mapping[str, Any]) -> Dict[str, str]:
        values = {}
        for name in listing.fields:
            value = raw.get(name)
            value = '' if value is None else str(value).strip()
            values[name] = value

        if listing.sortable:
            if values.get('sort') not in listing.sort_keys:
                values['sort'] = listing.default_sort
            if values.get('direction') not in DIRECTIONS:
                values['direction'] = 'asc'
        return values

    @classmethod
    def from_args(
        cls,
        listing: ListingFilters,
        args: Mapping[str, Any],
        initial: Optional[Mapping[str, Any]] = None,
    ) -> 'FilterState':
        """
        Build the state from request args.

        Args:
            listing: Page definition
            args: request.args
            initial: Values used for fields the query does not carry
                     (the customer's stored governorate / city)
        """
        values = {}
        for name in listing.fields:
            if name in args:
                values[name] = args.get(name)
            elif initial and initial.get(name) is not None:
                values[name] = initial.get(name)
        return cls(listing, values)

    # =========================================================================
    # ACCESS
    # =========================================================================

    def get(self, name: str, default: str = '') -> str:
        return self.values.get(name) or default

    def get_int(self, name: str) -> Optional[int]:
        return to_int(self.values.get(name))

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, FilterState)
            and other.listing == self.listing
            and other.values == self.values
        )

    def __repr__(self) -> str:
        return f'FilterState({self.listing.name}, {self.to_query()})'

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def replace(self, **changes) -> 'FilterState':
        values = dict(self.values)
        values.update(changes)
        return FilterState(self.listing, values)

    def toggle_sort(self, key: str) -> 'FilterState':
        """
        Same key flips the direction, a different key starts ascending.
        """
        if not self.listing.sortable or key not in self.listing.sort_keys:
            return self
        if key == self.values.get('sort'):
            direction = 'desc' if self.values.get('direction') == 'asc' else 'asc'
        else:
            direction = 'asc'
        return self.replace(sort=key, direction=direction)

    def change(self, name: str, value: Any) -> 'FilterState':
        """
        Apply a single filter change.

        Changing the governorate always clears the city; the city list of
        the new governorate is resolved afterwards by CityCascade.
        """
        if name not in self.listing.fields:
            return self
        if name == 'sort':
            return self.toggle_sort(str(value or ''))
        if name == 'governorate_id':
            return self.replace(governorate_id=value, city_id='')
        return self.replace(**{name: value})

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_query(self) -> Dict[str, str]:
        """All selected values in canonical order, unset ones omitted."""
        return {name: self.values[name] for name in self.listing.fields if self.values.get(name)}

    def backend_params(self, page: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = dict(self.to_query())
        if page and page > 1:
            params['page'] = page
        return params

    @property
    def has_active_filters(self) -> bool:
        defaults = self.listing.defaults
        return any(
            value and defaults.get(name) != value
            for name, value in self.values.items()
        )


# ==============================================================================
# PAGINATION LINKS
# ==============================================================================

def rewrite_page_url(link_url: Optional[str], path: str) -> Optional[str]:
    """
    Point a backend paginator link at the storefront page.

    The query string of the backend URL is kept verbatim; only the path
    changes. A missing URL stays None (the link renders disabled).
    """
    if not link_url:
        return None
    query = urlsplit(link_url).query
    return f'{path}?{query}' if query else path


def page_links(paginated: Paginated, path: str) -> List[Dict[str, Any]]:
    """Pagination links ready for the template, empty when controls are hidden."""
    if not paginated.shows_pagination:
        return []
    return [
        {
            'url': rewrite_page_url(link.url, path),
            'label': link.label,
            'active': link.active,
            'disabled': link.disabled,
        }
        for link in paginated.links
    ]


# ==============================================================================
# CITY CASCADE
# ==============================================================================

@dataclass
class CascadeResult:
    """
    Outcome of resolving the city filter against a fresh city list.

    Attributes:
        city_id: City to keep selected ('' for none)
        cities: Cities of the selected governorate
        cleared: The previous city was not in the list
        auto_selected: The customer's default city was picked
    """
    city_id: str
    cities: List[City] = field(default_factory=list)
    cleared: bool = False
    auto_selected: bool = False

    @property
    def changed(self) -> bool:
        return self.cleared or self.auto_selected


class CityCascade:
    """Governorate → city dependent selection."""

    @staticmethod
    def resolve(
        cities: List[City],
        selected_city_id: Any,
        default_city_id: Any = None,
        auto_select: bool = False,
    ) -> CascadeResult:
        """
        Reconcile the selected city with the city list of the governorate.

        Args:
            cities: Cities returned for the selected governorate
            selected_city_id: City currently in the filter ('' / None for none)
            default_city_id: City stored on the customer profile
            auto_select: Allow picking the default city (initial load or
                         after a governorate change)
        """
        ids = {str(city.id) for city in cities}
        selected = '' if selected_city_id in (None, '') else str(selected_city_id)
        result = CascadeResult(city_id=selected, cities=cities)

        if selected and selected not in ids:
            result.city_id = ''
            result.cleared = True

        default = '' if default_city_id in (None, '') else str(default_city_id)
        if auto_select and not result.city_id and default and default in ids:
            result.city_id = default
            result.auto_selected = True
        return result


# ==============================================================================
# REQUEST GENERATIONS
# ==============================================================================

class RequestGenerations:
    """
    Latest-request-wins guard for repeated lookups.

    Each lookup takes a new generation number for its key (one key per
    browser session). When the response arrives it only applies if no newer
    lookup started in the meantime.

    At most `max_keys` keys are tracked. The least recently used key is
    dropped first; a dropped key starts again from generation 0.
    """

    def __init__(self, max_keys: int = 10000):
        self._lock = threading.Lock()
        self._latest: 'OrderedDict[str, int]' = OrderedDict()
        self.max_keys = max_keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._latest)

    def _store(self, key: str, generation: int) -> None:
        # caller holds the lock
        self._latest[key] = generation
        self._latest.move_to_end(key)
        while len(self._latest) > self.max_keys:
            self._latest.popitem(last=False)

    def begin(self, key: str) -> int:
        with self._lock:
            generation = self._latest.get(key, 0) + 1
            self._store(key, generation)
            return generation

    def observe(self, key: str, generation: int) -> int:
        """
        Register a generation chosen by the client.

        Returns:
            The generation now considered latest for the key
        """
        with self._lock:
            self._store(key, max(generation, self._latest.get(key, 0)))
            return self._latest[key]

    def is_current(self, key: str, generation: int) -> bool:
        with self._lock:
            return self._latest.get(key, 0) == generation

    def forget(self, key: str) -> None:
        with self._lock:
            self._latest.pop(key, None)
