# ==============================================================================
# INTERNAL PROFILING
# ==============================================================================
# Times every page and the backend API calls made while rendering it.
# A slow page entry says how much of its time went to the marketplace API,
# which tells a slow backend apart from a slow storefront.
#
# ON/OFF: STOREFRONT_ENABLE_PROFILING (see config.py)
# ==============================================================================

import os
import time
import threading
from datetime import datetime
from functools import wraps

from flask import g, has_request_context, request, session

from storefront import config

# ═══════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = config.ENABLE_PROFILING

# Thresholds in milliseconds
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

LOGS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'logs')

PERFORMANCE_LOG = os.path.join(LOGS_DIR, 'performance.log')
SLOW_ROUTES_LOG = os.path.join(LOGS_DIR, 'slow_routes.log')
SLOW_FUNCTIONS_LOG = os.path.join(LOGS_DIR, 'slow_functions.log')

_write_lock = threading.Lock()


def slow_level(time_ms):
    """'CRITICAL', 'WARNING' or None for an elapsed time."""
    if time_ms >= THRESHOLD_CRITICAL:
        return 'CRITICAL'
    if time_ms >= THRESHOLD_WARNING:
        return 'WARNING'
    return None


def _get_timestamp():
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filepath, content):
    """Append to a log file. Write errors never reach the page."""
    try:
        with _write_lock:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(filepath, 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass


# ═══════════════════════════════════════════════════════════════════════════
# BACKEND CALLS PER REQUEST
# ═══════════════════════════════════════════════════════════════════════════

def record_backend_call(time_ms):
    """Add one backend call to the current request's tally."""
    if not has_request_context():
        return
    calls = g.setdefault('backend_calls', [])
    calls.append(time_ms)


def backend_summary():
    """
    Backend calls made so far in this request.

    Returns:
        (number of calls, total milliseconds)
    """
    if not has_request_context():
        return 0, 0.0
    calls = g.get('backend_calls') or []
    return len(calls), sum(calls)


# ═══════════════════════════════════════════════════════════════════════════
# LOG ENTRIES
# ═══════════════════════════════════════════════════════════════════════════

def route_entry(endpoint, method, path, time_ms, user=None, backend=(0, 0.0)):
    """Text of a performance.log entry."""
    calls, backend_ms = backend
    return f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Page: {endpoint or path}
User: {user or 'guest'}
Route: {method} {path}
Time: {time_ms:.0f} ms
Backend: {calls} call(s), {backend_ms:.0f} ms
"""


def slow_route_entry(level, endpoint, method, path, time_ms, user=None, backend=(0, 0.0)):
    """Text of a slow_routes.log entry."""
    threshold = THRESHOLD_CRITICAL if level == 'CRITICAL' else THRESHOLD_WARNING
    severity = 'VERY SLOW' if level == 'CRITICAL' else 'SLOW'
    calls, backend_ms = backend
    share = (backend_ms / time_ms * 100) if time_ms else 0
    return f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
{severity} page: {endpoint or path}
User: {user or 'guest'}
Detail: {method} {path}
Time: {time_ms:.0f} ms (threshold: {threshold} ms)
Backend: {calls} call(s), {backend_ms:.0f} ms ({share:.0f}% of the page)
────────────────────────────────────────
"""


# ═══════════════════════════════════════════════════════════════════════════
# FLASK HOOKS
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """
    Register before/after request hooks that time every page.

    Usage:
        from storefront.performance_logger import init_profiling
        init_profiling(app)
    """
    if not ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not hasattr(g, 'start_time') or request.path.startswith('/static'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        user = (session.get('user') or {}).get('name')
        backend = backend_summary()

        _write_log(PERFORMANCE_LOG, route_entry(
            request.endpoint, request.method, request.path, elapsed, user, backend,
        ))
        level = slow_level(elapsed)
        if level:
            _write_log(SLOW_ROUTES_LOG, slow_route_entry(
                level, request.endpoint, request.method, request.path, elapsed, user, backend,
            ))
        return response


# ═══════════════════════════════════════════════════════════════════════════
# DECORATOR FOR BACKEND CALLS
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None, enabled=None):
    """
    Time a function, count it towards the request's backend tally and log
    slow calls to slow_functions.log.

    Usage:
        @profile_function(name="Backend API call")
        def request(...):
            ...
    """
    active = ENABLE_PROFILING if enabled is None else enabled

    def decorator(fn):
        if not active:
            return fn

        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                record_backend_call(elapsed_ms)
                level = slow_level(elapsed_ms)
                if level:
                    _write_log(SLOW_FUNCTIONS_LOG, f"""
[{level}] {_get_timestamp()}
Function: {func_name}
Time: {elapsed_ms:.0f} ms
────────────────────────────────────────
""")

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
