from flask import Flask

from storefront import performance_logger as perf


app = Flask(__name__)


def test_slow_levels():
    assert perf.slow_level(120) is None
    assert perf.slow_level(300) == 'WARNING'
    assert perf.slow_level(699) == 'WARNING'
    assert perf.slow_level(700) == 'CRITICAL'


def test_disabled_profiling_returns_function_unchanged():
    def fetch():
        return 'ok'
    assert perf.profile_function(fetch, enabled=False) is fetch


def test_backend_calls_are_tallied_per_request():
    calls = []

    @perf.profile_function(name='Backend API call', enabled=True)
    def fetch(path):
        calls.append(path)
        return {}

    with app.test_request_context('/products'):
        fetch('/products')
        fetch('/categories')
        count, total = perf.backend_summary()
        assert count == 2
        assert total >= 0

    with app.test_request_context('/cart'):
        assert perf.backend_summary() == (0, 0.0)

    # outside a request nothing is recorded
    fetch('/home')
    assert calls == ['/products', '/categories', '/home']


def test_slow_backend_call_is_logged(tmp_path, monkeypatch):
    monkeypatch.setattr(perf, 'LOGS_DIR', str(tmp_path))
    monkeypatch.setattr(perf, 'SLOW_FUNCTIONS_LOG', str(tmp_path / 'slow_functions.log'))
    monkeypatch.setattr(perf, 'THRESHOLD_WARNING', 0)

    @perf.profile_function(name='Backend API call', enabled=True)
    def fetch():
        return {}

    fetch()
    text = (tmp_path / 'slow_functions.log').read_text(encoding='utf-8')
    assert 'Function: Backend API call' in text


def test_slow_route_entry_shows_backend_share():
    entry = perf.slow_route_entry('CRITICAL', 'products', 'GET', '/products', 1000, 'Sara', (3, 800))
    assert 'VERY SLOW page: products' in entry
    assert 'threshold: 700 ms' in entry
    assert 'Backend: 3 call(s), 800 ms (80% of the page)' in entry

    entry = perf.route_entry(None, 'GET', '/missing', 12)
    assert 'Page: /missing' in entry
    assert 'User: guest' in entry
