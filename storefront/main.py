from flask import Flask, render_template, request, redirect, url_for, session, flash, jsonify, g, abort
from functools import wraps
import uuid
from urllib.parse import urlsplit

from storefront import config

# Internal profiling
from storefront.performance_logger import init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# DEPENDENCY CONTAINER - services and repositories
# ═══════════════════════════════════════════════════════════════════════════
# Routes only orchestrate: request → service → template.
# The view logic lives in storefront/services/.
# ═══════════════════════════════════════════════════════════════════════════
from storefront.app_container import get_container
from storefront.category_icons import category_icon
from storefront.models import Customer, to_int
from storefront.repositories.errors import (
    ApiError,
    BackendUnavailable,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from storefront.services import (
    CATEGORY_LISTING,
    PRODUCT_LISTING,
    STORE_LISTING,
    STORE_PRODUCTS_LISTING,
    FilterState,
    PageContext,
    areas_for_governorate,
    avatar_url,
    driver_status_view,
    initials,
    page_links,
    status_meta,
)
from storefront.services.location_service import DEFAULT_COORDINATES, GEOLOCATION_OPTIONS
from storefront.translations import Translator

app = Flask(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# INTERNAL PROFILING
# ═══════════════════════════════════════════════════════════════════════════
# Route and backend call timings under /logs/
# Disable with STOREFRONT_ENABLE_PROFILING=0
init_profiling(app)

# ═══════════════════════════════════════════════════════════════════════════════
# SESSION SECURITY
# ═══════════════════════════════════════════════════════════════════════════════
if config.PRODUCTION_MODE and not config.SECRET_KEY:
    app.logger.warning('Production mode without STOREFRONT_SECRET_KEY; using the development key')

app.secret_key = config.SECRET_KEY or config.DEFAULT_SECRET
app.config.update(**config.SESSION_SETTINGS)
app.config['MAX_CONTENT_LENGTH'] = (config.MAX_UPLOAD_MB + 1) * 1024 * 1024

# Endpoints reachable while the marketplace is in maintenance
MAINTENANCE_EXEMPT = frozenset(['static', 'login', 'logout', 'set_language'])


def container():
    return get_container()


# ═══════════════════════════════════════════════════════════════════════════════
# CSRF / AUTH DECORATORS
# ═══════════════════════════════════════════════════════════════════════════════

def generate_csrf_token():
    if 'csrf_token' not in session:
        session['csrf_token'] = uuid.uuid4().hex
    return session['csrf_token']


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if 'user' not in session or 'api_token' not in session:
            flash(current_context().t('login_required'), 'warning')
            return redirect(url_for('login', next=request.full_path))
        return f(*args, **kwargs)
    return wrapper


def verify_csrf(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method == 'POST':
            token = session.get('csrf_token')
            form_token = (
                request.form.get('csrf_token') or
                request.headers.get('X-CSRF-Token') or
                request.headers.get('X-CSRFToken')
            )
            if not form_token and request.is_json:
                json_data = request.get_json(silent=True) or {}
                form_token = json_data.get('csrf_token')

            if not token or not form_token or token != form_token:
                if request.path.startswith('/api/'):
                    return jsonify(success=False, error='csrf_invalid'), 403
                flash(current_context().t('csrf_invalid'), 'warning')
                if 'user' not in session:
                    return redirect(url_for('login'))
                return redirect(safe_next(url_for('home')))
        return f(*args, **kwargs)
    return wrapper


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def current_locale():
    locale = session.get('locale')
    return locale if locale in config.SUPPORTED_LOCALES else config.DEFAULT_LOCALE


def current_context() -> PageContext:
    """Page context of this request, built once."""
    if 'page_context' not in g:
        g.page_context = container().context_service.build(
            session.get('user'),
            current_locale(),
            settings=g.get('settings'),
        )
    return g.page_context


def fallback_context() -> PageContext:
    """Context that needs no backend call (error pages)."""
    if 'page_context' in g:
        return g.page_context
    user = session.get('user')
    locale = current_locale()
    return PageContext(
        user=Customer.from_dict(user) if user else None,
        locale=locale,
        translator=Translator(locale),
    )


def safe_next(default):
    """Local redirect target from ?next= / form next, else the default."""
    target = request.form.get('next') or request.args.get('next') or ''
    if target.startswith('/') and not target.startswith('//'):
        return target
    return default


def local_referrer(default):
    """Path of the Referer header when it points at this host."""
    parts = urlsplit(request.referrer or '')
    if parts.netloc and parts.netloc == request.host and parts.path.startswith('/'):
        return f'{parts.path}?{parts.query}' if parts.query else parts.path
    return default


def remember_form(errors, exclude=('csrf_token', 'password')):
    """Keep field errors and submitted values for the page shown after the redirect."""
    session['form_errors'] = dict(errors or {})
    session['old_input'] = {k: v for k, v in request.form.items() if k not in exclude}


def flash_result(result, success_key, error_key='request_failed'):
    """Flash the outcome of a service call."""
    ctx = current_context()
    if result.get('ok'):
        flash(ctx.t(success_key), 'success')
        return True
    if result.get('errors'):
        remember_form(result['errors'])
    flash(ctx.t(result.get('error') or error_key), 'danger')
    return False


def render_page(template, **kwargs):
    """Render a page with its request context and pending form state."""
    ctx = kwargs.pop('ctx', None) or current_context()
    form_errors = session.pop('form_errors', {})
    old_input = session.pop('old_input', {})
    return render_template(
        template,
        ctx=ctx,
        t=ctx.t,
        form_errors=form_errors,
        old=old_input,
        **kwargs
    )


def filter_url_builder(state, endpoint, **view_args):
    """URL producing a single filter change on a listing page."""
    def filter_url(name, value=''):
        return url_for(endpoint, **view_args, **state.to_query(), change=name, value=value)
    return filter_url


def resolve_listing(listing, endpoint, initial=None, **view_args):
    """
    Filter state of a listing page.

    A `change` in the query is applied here and answered with a redirect to
    the canonical URL that carries the full filter set. The same happens when
    the city filter had to be cleared or the default city was picked.

    Returns:
        (state, cascade result or None, redirect response or None)
    """
    first_visit = not request.args
    state = FilterState.from_args(listing, request.args, initial if first_visit else None)

    change = request.args.get('change')
    if change:
        state = state.change(change, request.args.get('value', ''))

    cascade = None
    if 'governorate_id' in listing.fields:
        user = current_context().user
        state, cascade = container().catalog_service.resolve_cities(
            state,
            default_city_id=user.city_id if user else None,
            auto_select=first_visit or change == 'governorate_id',
        )

    if change or (cascade is not None and cascade.changed):
        return state, cascade, redirect(url_for(endpoint, **view_args, **state.to_query()))
    return state, cascade, None


# ═══════════════════════════════════════════════════════════════════════════════
# TEMPLATE HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

@app.context_processor
def inject_helpers():
    return dict(
        csrf_token=generate_csrf_token,
        category_icon=category_icon,
        status_meta=status_meta,
        avatar_url=avatar_url,
        initials=initials,
    )


@app.template_filter('format_currency')
def format_currency_filter(amount):
    return fallback_context().format_currency(amount)


@app.template_filter('format_datetime')
def format_datetime_filter(value, with_time=True):
    return fallback_context().format_datetime(value, with_time)


def maintenance_page(settings):
    ctx = fallback_context()
    ctx.settings = settings
    return render_page('errors/maintenance.html', ctx=ctx), 503


@app.before_request
def check_maintenance():
    if request.endpoint in MAINTENANCE_EXEMPT or request.endpoint is None:
        return None
    g.settings = container().context_service.general_settings()
    if g.settings.maintenance_mode:
        if request.path.startswith('/api/'):
            return jsonify(success=False, error='maintenance'), 503
        return maintenance_page(g.settings)
    return None


@app.after_request
def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    # Location forms use the browser geolocation API
    response.headers['Permissions-Policy'] = 'geolocation=(self), microphone=()'
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR HANDLERS
# ═══════════════════════════════════════════════════════════════════════════════

@app.errorhandler(Unauthorized)
def handle_unauthorized(e):
    app.logger.warning('Backend rejected the session token: %s', e.message)
    locale = session.get('locale')
    session.clear()
    if locale:
        session['locale'] = locale
    if request.path.startswith('/api/'):
        return jsonify(success=False, error='unauthorized'), 401
    flash(Translator(current_locale())('session_expired'), 'warning')
    return redirect(url_for('login'))


@app.errorhandler(ValidationFailed)
def handle_validation_failed(e):
    if request.path.startswith('/api/'):
        return jsonify(success=False, error=e.message, errors=e.errors), 422
    remember_form(e.errors)
    flash(e.message, 'danger')
    return redirect(safe_next(local_referrer(url_for('home'))))


@app.errorhandler(NotFound)
def handle_backend_not_found(e):
    if request.path.startswith('/api/'):
        return jsonify(success=False, error='not_found'), 404
    return render_page('errors/404.html', ctx=fallback_context()), 404


@app.errorhandler(404)
def handle_not_found(e):
    if request.path.startswith('/api/'):
        return jsonify(success=False, error='not_found'), 404
    return render_page('errors/404.html', ctx=fallback_context()), 404


@app.errorhandler(BackendUnavailable)
def handle_backend_unavailable(e):
    app.logger.error('Backend unavailable on %s %s: %s', request.method, request.path, e.message)
    if request.path.startswith('/api/'):
        return jsonify(success=False, error='service_unavailable'), 503
    return render_page('errors/503.html', ctx=fallback_context()), 503


@app.errorhandler(ApiError)
def handle_api_error(e):
    app.logger.error('Backend error %s on %s %s: %s', e.status, request.method, request.path, e.message)
    if request.path.startswith('/api/'):
        return jsonify(success=False, error=e.message), 502
    if request.method == 'GET':
        return render_page('errors/502.html', ctx=fallback_context(), message=e.message), 502
    flash(e.message, 'danger')
    return redirect(safe_next(local_referrer(url_for('home'))))


@app.errorhandler(413)
def handle_too_large(e):
    ctx = fallback_context()
    remember_form({'avatar': ctx.t('avatar_too_large', mb=config.MAX_UPLOAD_MB)})
    flash(ctx.t('avatar_too_large', mb=config.MAX_UPLOAD_MB), 'danger')
    return redirect(url_for('customer_profile'))


# ═══════════════════════════════════════════════════════════════════════════════
# AUTH
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/login', methods=['GET', 'POST'])
@verify_csrf
def login():
    ctx = fallback_context()
    if request.method == 'POST':
        result = container().auth_service.login(
            request.form.get('phone'),
            request.form.get('password') or '',
        )
        if not result['ok']:
            remember_form(result.get('errors'))
            if result.get('error'):
                flash(ctx.t(result['error']), 'danger')
            return redirect(url_for('login', next=request.form.get('next') or None))

        customer = result['customer']
        session.permanent = True
        session['api_token'] = result['token']
        session['user'] = customer.to_session()
        settings = container().context_service.general_settings()
        if settings.maintenance_mode:
            return maintenance_page(settings)
        flash(ctx.t('welcome', name=customer.name), 'success')
        return redirect(safe_next(url_for('customer_dashboard')))

    return render_page('login.html', ctx=ctx, next=request.args.get('next', ''))


@app.route('/logout', methods=['POST'])
@verify_csrf
def logout():
    if 'api_token' in session:
        container().auth_service.logout()
    if 'client_id' in session:
        container().city_generations.forget(session['client_id'])
    locale = session.get('locale')
    session.clear()
    if locale:
        session['locale'] = locale
    flash(Translator(current_locale())('logged_out'), 'info')
    return redirect(url_for('home'))


@app.route('/language/<locale>')
def set_language(locale):
    session['locale'] = locale if locale in config.SUPPORTED_LOCALES else config.DEFAULT_LOCALE
    return redirect(safe_next(local_referrer(url_for('home'))))


# ═══════════════════════════════════════════════════════════════════════════════
# CATALOG
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/')
def home():
    data = container().catalog_service.home()
    return render_page('home.html', **data)


@app.route('/products')
def products():
    user = current_context().user
    initial = {'governorate_id': user.governorate_id, 'city_id': user.city_id} if user else None
    state, cascade, response = resolve_listing(PRODUCT_LISTING, 'products', initial)
    if response:
        return response

    catalog = container().catalog_service
    page = catalog.products_page(state, to_int(request.args.get('page')))
    return render_page(
        'products/index.html',
        products=page,
        links=page_links(page, url_for('products')),
        filters=state,
        filter_url=filter_url_builder(state, 'products'),
        categories=catalog.categories(),
        governorates=catalog.governorates(),
        cities=cascade.cities,
    )


@app.route('/products/<int:product_id>')
def product_detail(product_id):
    product, related = container().catalog_service.product_detail(product_id)
    if not product.id:
        abort(404)
    return render_page('products/show.html', product=product, related_products=related)


@app.route('/categories')
def categories():
    return render_page('categories/index.html', categories=container().catalog_service.categories())


@app.route('/categories/<int:category_id>')
def category_detail(category_id):
    state, _, response = resolve_listing(CATEGORY_LISTING, 'category_detail', category_id=category_id)
    if response:
        return response

    category, page = container().catalog_service.category_page(
        category_id, state, to_int(request.args.get('page')),
    )
    path = url_for('category_detail', category_id=category_id)
    return render_page(
        'categories/show.html',
        category=category,
        products=page,
        links=page_links(page, path),
        filters=state,
        filter_url=filter_url_builder(state, 'category_detail', category_id=category_id),
    )


@app.route('/stores')
def stores():
    state, cascade, response = resolve_listing(STORE_LISTING, 'stores')
    if response:
        return response

    catalog = container().catalog_service
    page = catalog.stores_page(state, to_int(request.args.get('page')))
    return render_page(
        'stores/index.html',
        stores=page,
        links=page_links(page, url_for('stores')),
        filters=state,
        filter_url=filter_url_builder(state, 'stores'),
        store_types=catalog.store_types(),
        governorates=catalog.governorates(),
        cities=cascade.cities,
    )


@app.route('/stores/<int:store_id>')
def store_detail(store_id):
    state, _, response = resolve_listing(STORE_PRODUCTS_LISTING, 'store_detail', store_id=store_id)
    if response:
        return response

    store, page, store_categories = container().catalog_service.store_page(
        store_id, state, to_int(request.args.get('page')),
    )
    path = url_for('store_detail', store_id=store_id)
    return render_page(
        'stores/show.html',
        store=store,
        products=page,
        links=page_links(page, path),
        categories=store_categories,
        filters=state,
        filter_url=filter_url_builder(state, 'store_detail', store_id=store_id),
    )


@app.route('/api/cities')
def api_cities():
    """
    Cities of a governorate for the filter dropdowns.

    The client numbers its lookups (`generation`). A response whose lookup
    was superseded by a newer one from the same browser session comes back
    with stale = true and no data.
    """
    governorate_id = to_int(request.args.get('governorate_id'))
    if not governorate_id:
        return jsonify(success=False, error='governorate_id is required'), 400

    if 'client_id' not in session:
        session['client_id'] = uuid.uuid4().hex
    key = session['client_id']

    guard = container().city_generations
    generation = to_int(request.args.get('generation'))
    if generation:
        guard.observe(key, generation)
    else:
        generation = guard.begin(key)

    try:
        cities = container().catalog_service.cities(governorate_id)
    except BackendUnavailable as e:
        app.logger.error('City lookup failed: %s', e.message)
        return jsonify(success=False, error='service_unavailable', generation=generation), 503
    except ApiError as e:
        app.logger.warning('City lookup failed: %s', e.message)
        return jsonify(success=False, error=e.message, generation=generation), 502

    stale = not guard.is_current(key, generation)
    locale = current_locale()
    data = [] if stale else [{'id': c.id, 'name': c.display_name(locale)} for c in cities]
    return jsonify(success=True, data=data, generation=generation, stale=stale)


# ═══════════════════════════════════════════════════════════════════════════════
# CART
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/cart')
@login_required
def cart():
    services = container()
    locations = services.delivery_location_service.list_locations()
    return render_page(
        'cart.html',
        cart=services.cart_service.get_cart(),
        locations=locations,
        default_location=services.delivery_location_service.default_location(locations),
    )


@app.route('/cart/add', methods=['POST'])
@login_required
@verify_csrf
def cart_add():
    result = container().cart_service.add_item(
        request.form.get('product_id'),
        request.form.get('quantity', 1),
    )
    flash_result(result, 'cart_added', 'cart_error')
    return redirect(safe_next(url_for('cart')))


@app.route('/cart/update', methods=['POST'])
@login_required
@verify_csrf
def cart_update():
    result = container().cart_service.set_quantity(
        request.form.get('product_id'),
        request.form.get('quantity'),
    )
    success_key = 'cart_removed' if result.get('action') == 'remove' else 'cart_updated'
    flash_result(result, success_key, 'cart_error')
    return redirect(safe_next(url_for('cart')))


@app.route('/cart/remove/<int:product_id>', methods=['POST'])
@login_required
@verify_csrf
def cart_remove(product_id):
    flash_result(container().cart_service.remove_item(product_id), 'cart_removed', 'cart_error')
    return redirect(safe_next(url_for('cart')))


@app.route('/cart/clear', methods=['POST'])
@login_required
@verify_csrf
def cart_clear():
    flash_result(container().cart_service.clear(), 'cart_cleared', 'cart_error')
    return redirect(url_for('cart'))


# ═══════════════════════════════════════════════════════════════════════════════
# ORDERS
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/orders', methods=['GET', 'POST'])
@login_required
@verify_csrf
def orders():
    services = container()
    if request.method == 'POST':
        locations = services.delivery_location_service.list_locations()
        result = services.order_service.place_order(request.form, locations)
        if not flash_result(result, 'order_placed'):
            return redirect(url_for('cart'))
        placed = result.get('orders') or []
        if len(placed) == 1 and placed[0].id:
            return redirect(url_for('order_detail', order_id=placed[0].id))
        return redirect(url_for('orders'))

    page = services.order_service.list_orders(to_int(request.args.get('page')))
    return render_page(
        'orders/index.html',
        orders=page,
        links=page_links(page, url_for('orders')),
    )


@app.route('/orders/<int:order_id>')
@login_required
def order_detail(order_id):
    order = container().order_service.get_order(order_id)
    return render_page('orders/show.html', order=order)


@app.route('/orders/<int:order_id>/cancel', methods=['POST'])
@login_required
@verify_csrf
def order_cancel(order_id):
    flash_result(container().order_service.cancel(order_id), 'order_cancelled')
    return redirect(safe_next(url_for('order_detail', order_id=order_id)))


# ═══════════════════════════════════════════════════════════════════════════════
# FAVORITES
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/favorites', methods=['POST'])
@login_required
@verify_csrf
def favorite_add():
    result = container().favorite_service.add(request.form.get('product_id'))
    flash_result(result, 'favorite_added')
    return redirect(safe_next(url_for('customer_favorites')))


@app.route('/favorites/<int:product_id>/delete', methods=['POST'])
@login_required
@verify_csrf
def favorite_remove(product_id):
    result = container().favorite_service.remove(product_id)
    flash_result(result, 'favorite_removed')
    return redirect(safe_next(url_for('customer_favorites')))


# ═══════════════════════════════════════════════════════════════════════════════
# NOTIFICATIONS
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/notifications/<notification_id>/read', methods=['POST'])
@login_required
@verify_csrf
def notification_read(notification_id):
    container().context_service.mark_notification_read(notification_id)
    return redirect(safe_next(url_for('customer_dashboard')))


@app.route('/notifications/read-all', methods=['POST'])
@login_required
@verify_csrf
def notifications_read_all():
    container().context_service.mark_all_notifications_read()
    return redirect(safe_next(url_for('customer_dashboard')))


# ═══════════════════════════════════════════════════════════════════════════════
# CUSTOMER DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/dashboard/customer')
@login_required
def customer_dashboard():
    services = container()
    ctx = current_context()
    overview = services.dashboard_service.overview()
    application = services.dashboard_service.driver_application()
    return render_page(
        'dashboard/customer.html',
        stats=overview['stats'],
        recent_orders=overview['recent_orders'],
        driver_application=application,
        driver_status=driver_status_view(application, ctx.t),
    )


@app.route('/dashboard/upgrade-role', methods=['POST'])
@login_required
@verify_csrf
def upgrade_role():
    result = container().dashboard_service.request_upgrade(
        request.form.get('target_role'),
        request.form.get('reason', ''),
    )
    if result.get('ok') and result.get('redirect'):
        return redirect(result['redirect'])
    flash_result(result, 'upgrade_requested')
    return redirect(url_for('customer_dashboard'))


@app.route('/dashboard/customer/favorites')
@login_required
def customer_favorites():
    return render_page(
        'dashboard/favorites.html',
        products=container().favorite_service.list_products(),
    )


@app.route('/dashboard/customer/locations', methods=['GET', 'POST'])
@login_required
@verify_csrf
def customer_locations():
    service = container().delivery_location_service
    if request.method == 'POST':
        flash_result(service.create(request.form), 'location_saved')
        return redirect(url_for('customer_locations'))

    return render_page(
        'dashboard/locations.html',
        locations=service.list_locations(),
        default_coordinates=[str(c) for c in DEFAULT_COORDINATES],
        geolocation_options=GEOLOCATION_OPTIONS,
    )


@app.route('/dashboard/customer/locations/<int:location_id>/delete', methods=['POST'])
@login_required
@verify_csrf
def customer_location_delete(location_id):
    flash_result(container().delivery_location_service.delete(location_id), 'location_deleted')
    return redirect(url_for('customer_locations'))


@app.route('/dashboard/customer/locations/<int:location_id>/default', methods=['POST'])
@login_required
@verify_csrf
def customer_location_default(location_id):
    flash_result(container().delivery_location_service.set_default(location_id), 'location_default_set')
    return redirect(url_for('customer_locations'))


@app.route('/dashboard/customer/profile', methods=['GET', 'POST'])
@login_required
@verify_csrf
def customer_profile():
    services = container()
    if request.method == 'POST':
        result = services.profile_service.update(request.form, request.files.get('avatar'))
        if flash_result(result, 'profile_updated'):
            customer = result.get('customer') or services.auth_service.refresh_customer()
            session['user'] = customer.to_session()
        return redirect(url_for('customer_profile'))

    user = current_context().user
    options = services.profile_service.form_options()
    return render_page(
        'dashboard/profile.html',
        customer=user,
        governorates=options['governorates'],
        areas=options['areas'],
        selected_areas=areas_for_governorate(options['areas'], user.governorate_id),
        max_upload_mb=config.MAX_UPLOAD_MB,
    )
