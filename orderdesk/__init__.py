"""
Orderdesk - Orders Admin for Flask
==================================

An admin page for order documents kept in a Sanity dataset:
- Order cards with refresh
- Create / edit form with comma-separated cart items
- Delete with confirmation
- Admin login and a /health endpoint

Usage:
    from flask import Flask
    from orderdesk import OrderDesk

    app = Flask(__name__)
    OrderDesk(app)   # registers /admin, /admin/orders-manager and /health
"""

import os

from flask_cors import CORS

from .core.config import Config
from .core.database import Database
from .core.document_store import SanityClient
from .core.logging_service import LoggingService

__version__ = '0.1.0'

# app.config key -> Config default, resolved at init_app time
CONFIG_DEFAULTS = [
    'ADMIN_PASSWORD',
    'DB_DIR',
    'LOGS_DB',
    'SANITY_PROJECT_ID',
    'SANITY_DATASET',
    'SANITY_API_VERSION',
    'SANITY_API_TOKEN',
    'SANITY_USE_CDN',
    'SANITY_TIMEOUT',
    'ORDER_DOCUMENT_TYPE',
    'ORDERS_VIEW_MAX_SESSIONS',
]

DEFAULT_CONFIG = {
    'brand_name': 'Orderdesk',
    'cors_origins': [],
    'features': {
        'dashboard': True,
        'orders': True,
        'ops': True,
    },
}


class OrderDesk:
    """Flask extension registering the orders admin and its supporting modules"""

    def __init__(self, app=None, config=None, store=None):
        self._config = self._merge_config(config or {})
        self._registered = []
        self.store = store
        self.view = None
        self.registry = None
        if app is not None:
            self.init_app(app)

    @staticmethod
    def _merge_config(config):
        merged = dict(DEFAULT_CONFIG)
        merged.update(config)
        features = dict(DEFAULT_CONFIG['features'])
        features.update(config.get('features', {}))
        merged['features'] = features
        return merged

    def init_app(self, app):
        from .modules.orders.registry import ViewStateRegistry
        from .modules.orders.view import OrdersAdminView

        self._apply_config_defaults(app)
        self._setup_secret_key(app)
        self._setup_database_dir(app)

        if self.store is None:
            self.store = self._build_store(app)
        self.registry = ViewStateRegistry(
            max_idle=app.permanent_session_lifetime.total_seconds(),
            max_entries=app.config['ORDERS_VIEW_MAX_SESSIONS'],
        )
        self.view = OrdersAdminView(self.store, order_type=app.config['ORDER_DOCUMENT_TYPE'])

        self._register_modules(app)
        self._setup_cors(app)

        @app.context_processor
        def inject_orderdesk_context():
            return {
                'orderdesk_config': self._config,
                'brand_name': self._config['brand_name'],
            }

        app.extensions['orderdesk'] = self

    def _apply_config_defaults(self, app):
        for key in CONFIG_DEFAULTS:
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)

    def _setup_secret_key(self, app):
        if app.config.get('SECRET_KEY'):
            return
        if Config.SECRET_KEY:
            app.config['SECRET_KEY'] = Config.SECRET_KEY
            return
        # Sessions still work, but do not survive a restart
        app.config['SECRET_KEY'] = os.urandom(32).hex()
        print("WARNING: FLASK_SECRET_KEY not set; using a random per-process secret key")

    def _setup_database_dir(self, app):
        db_dir = app.config.get('DB_DIR')
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        Database.ensure_dir(app.config['LOGS_DB'])

    def _build_store(self, app):
        store = SanityClient(
            project_id=app.config['SANITY_PROJECT_ID'],
            dataset=app.config['SANITY_DATASET'],
            api_version=app.config['SANITY_API_VERSION'],
            token=app.config['SANITY_API_TOKEN'],
            use_cdn=bool(app.config['SANITY_USE_CDN']),
            timeout=float(app.config['SANITY_TIMEOUT']),
        )
        if not store.configured:
            with app.app_context():
                LoggingService.warning('document_store', 'SANITY_PROJECT_ID is not set; store calls will fail')
        return store

    def _register_modules(self, app):
        features = self._config['features']

        if features.get('dashboard'):
            from .modules.dashboard import dashboard_bp
            app.register_blueprint(dashboard_bp)
            self._registered.append('dashboard')

        if features.get('orders'):
            from .modules.orders import orders_bp
            app.register_blueprint(orders_bp)
            self._registered.append('orders')

        if features.get('ops'):
            from .modules.ops import ops_health_bp
            app.register_blueprint(ops_health_bp)
            self._registered.append('ops')

    def _setup_cors(self, app):
        origins = self._config.get('cors_origins')
        if origins:
            CORS(app, resources={r'/admin/orders-manager/api/*': {'origins': origins}},
                 supports_credentials=True)

    def get_registered_modules(self):
        return list(self._registered)

    def get_config(self):
        return self._config


__all__ = ['OrderDesk', '__version__']
