import os
from dotenv import load_dotenv

load_dotenv()

DB_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'databases')


class Config:
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    BRAND_NAME = 'My Orderdesk'
    PORT = int(os.getenv('PORT', '5000'))

    # Admin password (leave unset for an open admin in local dev)
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # Log database
    DB_DIR = DB_DIR
    LOGS_DB = os.path.join(DB_DIR, 'app_logs.db')

    # Sanity
    SANITY_PROJECT_ID = os.getenv('SANITY_PROJECT_ID', '')
    SANITY_DATASET = os.getenv('SANITY_DATASET', 'production')
    SANITY_API_VERSION = os.getenv('SANITY_API_VERSION', '2023-05-03')
    SANITY_API_TOKEN = os.getenv('SANITY_API_TOKEN', '')
