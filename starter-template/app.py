"""
Orderdesk Starter Template
==========================

A ready-to-run Flask application with the orders admin enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000/admin                  - Admin login
    http://localhost:5000/admin/orders-manager/  - Orders dashboard
    http://localhost:5000/health                 - Health check
"""

from flask import Flask, redirect, url_for
from orderdesk import OrderDesk

from config import Config

# Create Flask app
app = Flask(__name__)
app.config.from_object(Config)

# Initialize Orderdesk - this registers all modules automatically
orderdesk = OrderDesk(app, {'brand_name': Config.BRAND_NAME})


@app.route('/')
def index():
    """Send visitors straight to the admin"""
    return redirect(url_for('orders_admin.orders_manager'))


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Orderdesk Starter Template")
    print("=" * 60)
    print(f"Orders:          http://localhost:{Config.PORT}/admin/orders-manager/")
    print(f"Admin Login:     http://localhost:{Config.PORT}/admin/login")
    print(f"Health:          http://localhost:{Config.PORT}/health")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.PORT, debug=True)
