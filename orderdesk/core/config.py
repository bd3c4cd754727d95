import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_flag(name, default='0'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Base configuration for Orderdesk.
    Projects provide Sanity credentials and paths via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Admin login - leave unset to run the orders view without a login (local dev)
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, 'app_logs.db'))

    # Sanity document store
    SANITY_PROJECT_ID = os.getenv('SANITY_PROJECT_ID')
    SANITY_DATASET = os.getenv('SANITY_DATASET', 'production')
    SANITY_API_VERSION = os.getenv('SANITY_API_VERSION', '2023-05-03')
    SANITY_API_TOKEN = os.getenv('SANITY_API_TOKEN')
    SANITY_USE_CDN = _env_flag('SANITY_USE_CDN')
    SANITY_TIMEOUT = float(os.getenv('SANITY_TIMEOUT', '30'))

    # Document type the orders view administers
    ORDER_DOCUMENT_TYPE = 'order'

    # Sessions whose orders view state is kept in memory at once
    ORDERS_VIEW_MAX_SESSIONS = int(os.getenv('ORDERS_VIEW_MAX_SESSIONS', '500'))

    # Port for local server (optional)
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val:
        return val
    return os.getenv(key, default)
