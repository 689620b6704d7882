import threading

from storefront.models import City, Paginated, Product
from storefront.services.filter_service import (
    CATEGORY_LISTING,
    PRODUCT_LISTING,
    STORE_LISTING,
    CityCascade,
    FilterState,
    RequestGenerations,
    page_links,
    rewrite_page_url,
)


def cities(*ids):
    return [City(id=i, name=f'City {i}') for i in ids]


# ==============================================================================
# FILTER STATE
# ==============================================================================

def test_defaults_and_unknown_args_are_dropped():
    state = FilterState.from_args(PRODUCT_LISTING, {'search': ' milk ', 'page': '2', 'foo': 'bar'})
    assert state.to_query() == {'search': 'milk', 'sort': 'sort_order', 'direction': 'asc'}


def test_invalid_sort_and_direction_fall_back():
    state = FilterState(PRODUCT_LISTING, {'sort': 'rating', 'direction': 'sideways'})
    assert state['sort'] == 'sort_order'
    assert state['direction'] == 'asc'


def test_change_keeps_every_other_filter():
    state = FilterState(PRODUCT_LISTING, {'search': 'rice', 'category': '4', 'sort': 'price', 'direction': 'desc'})
    changed = state.change('category', '9')
    assert changed.to_query() == {'search': 'rice', 'category': '9', 'sort': 'price', 'direction': 'desc'}
    # receiver unchanged
    assert state['category'] == '4'


def test_empty_values_are_omitted_from_query():
    state = FilterState(PRODUCT_LISTING, {'search': 'rice'}).change('search', '')
    assert 'search' not in state.to_query()


def test_governorate_change_clears_city():
    state = FilterState(PRODUCT_LISTING, {'governorate_id': '1', 'city_id': '11'})
    changed = state.change('governorate_id', '2')
    assert changed['governorate_id'] == '2'
    assert changed['city_id'] == ''


def test_unknown_field_change_is_ignored():
    state = FilterState(CATEGORY_LISTING, {'search': 'tea'})
    assert state.change('governorate_id', '3') == state


def test_sort_toggle():
    state = FilterState(PRODUCT_LISTING)
    by_price = state.toggle_sort('price')
    assert (by_price['sort'], by_price['direction']) == ('price', 'asc')

    flipped = by_price.toggle_sort('price')
    assert (flipped['sort'], flipped['direction']) == ('price', 'desc')

    back = flipped.toggle_sort('price')
    assert back['direction'] == 'asc'

    by_name = flipped.toggle_sort('name')
    assert (by_name['sort'], by_name['direction']) == ('name', 'asc')

    assert flipped.toggle_sort('rating') == flipped


def test_sort_change_goes_through_toggle():
    state = FilterState(PRODUCT_LISTING, {'sort': 'name', 'direction': 'asc'})
    assert state.change('sort', 'name')['direction'] == 'desc'


def test_store_listing_has_no_sort():
    state = FilterState.from_args(STORE_LISTING, {'sort': 'price', 'type': 'grocery'})
    assert state.to_query() == {'type': 'grocery'}
    assert state.toggle_sort('price') == state


def test_initial_values_fill_missing_fields_only():
    state = FilterState.from_args(
        PRODUCT_LISTING,
        {'governorate_id': '5'},
        initial={'governorate_id': 1, 'city_id': 11},
    )
    assert state['governorate_id'] == '5'
    assert state['city_id'] == '11'


def test_active_filters_ignore_default_sort():
    assert not FilterState(PRODUCT_LISTING).has_active_filters
    assert FilterState(PRODUCT_LISTING, {'search': 'x'}).has_active_filters
    assert FilterState(PRODUCT_LISTING, {'sort': 'price'}).has_active_filters


def test_backend_params_add_page_after_first():
    state = FilterState(CATEGORY_LISTING, {'search': 'oil'})
    assert 'page' not in state.backend_params(1)
    assert state.backend_params(3)['page'] == 3


# ==============================================================================
# PAGINATION
# ==============================================================================

def _paginated(link_count):
    links = [{'url': None, 'label': '&laquo; Previous', 'active': False}]
    for n in range(1, link_count - 1):
        links.append({'url': f'http://api.test/api/v1/products?page={n}&search=tea', 'label': str(n), 'active': n == 1})
    links.append({'url': 'http://api.test/api/v1/products?page=2&search=tea', 'label': 'Next &raquo;'})
    return Paginated.from_dict({'data': [{'id': 1, 'name': 'Tea'}], 'total': 30, 'links': links}, Product.from_dict)


def test_pagination_hidden_with_three_links():
    assert page_links(_paginated(3), '/products') == []


def test_pagination_links_follow_backend_query_on_local_path():
    links = page_links(_paginated(5), '/products')
    assert len(links) == 5
    assert links[0]['disabled'] is True
    assert links[0]['url'] is None
    assert links[1]['url'] == '/products?page=1&search=tea'
    assert links[1]['active'] is True
    assert links[-1]['url'] == '/products?page=2&search=tea'


def test_rewrite_page_url_without_query():
    assert rewrite_page_url('http://api.test/products', '/stores') == '/stores'
    assert rewrite_page_url(None, '/stores') is None


def test_pagination_labels_are_decoded():
    page = Paginated.from_dict({'data': [], 'links': [
        {'url': None, 'label': '&laquo; Previous'},
        {'url': 'http://api.test/products?page=1', 'label': '<b>1</b>', 'active': True},
        {'url': None, 'label': 'Next &raquo;'},
    ]}, Product.from_dict)
    assert page.links[0].label == '« Previous'
    assert page.links[2].label == 'Next »'
    assert page.links[1].label == '<b>1</b>'


def test_laravel_resource_meta_links():
    payload = {
        'data': [],
        'meta': {'total': 0, 'links': [{'url': None, 'label': '1', 'active': True}]},
    }
    page = Paginated.from_dict(payload, Product.from_dict)
    assert page.is_empty
    assert len(page.links) == 1


# ==============================================================================
# CITY CASCADE
# ==============================================================================

def test_city_not_in_new_list_is_cleared():
    result = CityCascade.resolve(cities(21, 22), '11')
    assert result.city_id == ''
    assert result.cleared
    assert result.changed


def test_city_in_list_is_kept():
    result = CityCascade.resolve(cities(11, 12), '12', default_city_id=11, auto_select=True)
    assert result.city_id == '12'
    assert not result.changed


def test_default_city_auto_selected_only_when_allowed():
    assert CityCascade.resolve(cities(11, 12), '', default_city_id=11, auto_select=True).city_id == '11'
    assert CityCascade.resolve(cities(11, 12), '', default_city_id=11, auto_select=False).city_id == ''


def test_default_city_outside_governorate_not_selected():
    result = CityCascade.resolve(cities(21), None, default_city_id=11, auto_select=True)
    assert result.city_id == ''
    assert not result.auto_selected


# ==============================================================================
# REQUEST GENERATIONS
# ==============================================================================

def test_later_lookup_supersedes_earlier():
    guard = RequestGenerations()
    first = guard.begin('s1')
    second = guard.begin('s1')
    assert not guard.is_current('s1', first)
    assert guard.is_current('s1', second)


def test_keys_are_independent():
    guard = RequestGenerations()
    a = guard.begin('a')
    guard.begin('b')
    guard.begin('b')
    assert guard.is_current('a', a)


def test_observe_never_goes_backwards():
    guard = RequestGenerations()
    assert guard.observe('s', 5) == 5
    assert guard.observe('s', 3) == 5
    assert not guard.is_current('s', 3)
    guard.forget('s')
    assert guard.is_current('s', 0)


def test_concurrent_begin_hands_out_unique_generations():
    guard = RequestGenerations()
    seen = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            generation = guard.begin('shared')
            with lock:
                seen.append(generation)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(seen) == list(range(1, 201))


def test_least_recently_used_keys_are_dropped():
    guard = RequestGenerations(max_keys=3)
    guard.begin('a')
    guard.begin('b')
    guard.begin('c')
    guard.observe('a', 4)
    guard.begin('d')

    assert len(guard) == 3
    # 'b' was the least recently used
    assert guard.is_current('b', 0)
    assert guard.is_current('a', 4)
    assert guard.is_current('d', 1)


def test_many_sessions_stay_bounded():
    guard = RequestGenerations(max_keys=100)
    for n in range(1000):
        guard.begin(f'session-{n}')
    assert len(guard) == 100
    assert guard.is_current('session-999', 1)
