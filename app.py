#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Hotel Back Office
Flask Application Entry Point
"""

import os
import logging
from datetime import datetime
from flask import Flask
from flask_login import LoginManager
from sqlalchemy import event
from sqlalchemy.engine import Engine
from config import Config
from extensions import csrf, limiter
from middleware import init_access_router
from models import db, User
from routes import register_blueprints
from utils.timezone import get_property_tz, get_property_now, utc_to_local

CURRENCY_SYMBOLS = {'PHP': '₱', 'USD': '$', 'EUR': '€'}


# Custom logging formatter with property local time
class PropertyTimezoneFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=get_property_tz(Config.PROPERTY_UTC_OFFSET))
        if datefmt:
            return dt.strftime(datefmt)
        return dt.strftime('%Y-%m-%d %H:%M:%S')

    def format(self, record):
        record.local_time = self.formatTime(record)
        return super().format(record)


# Configure logging with property local time
formatter = PropertyTimezoneFormatter(
    '%(local_time)s - %(name)s - %(levelname)s - %(message)s'
)

console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)

file_handler = logging.FileHandler(Config.LOG_FILE, encoding='utf-8')
file_handler.setFormatter(formatter)

logging.basicConfig(
    level=getattr(logging, str(Config.LOG_LEVEL).upper(), logging.INFO),
    handlers=[console_handler, file_handler]
)
logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
        db_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'database')
        if not os.path.exists(db_dir):
            os.makedirs(db_dir)

    db.init_app(app)

    # SQLite pragmas for WAL mode and better concurrency
    @event.listens_for(Engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        if type(dbapi_connection).__module__.split('.')[0] != 'sqlite3':
            return
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    csrf.init_app(app)

    app.config.setdefault('RATELIMIT_DEFAULT', '200 per minute')
    limiter.init_app(app)
    if app.config.get('RATELIMIT_ENABLED', True):
        logger.info(f"Rate limiting enabled: {app.config['RATELIMIT_DEFAULT']}")

    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.login_view = 'auth.sign_in'
    login_manager.login_message = 'Please sign in to access this page'
    login_manager.login_message_category = 'warning'

    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    register_blueprints(app)
    init_access_router(app)

    @app.route('/favicon.ico')
    def favicon():
        return '', 204

    @app.template_filter('format_currency')
    def format_currency(amount, currency=None):
        currency = currency or app.config.get('DEFAULT_CURRENCY', 'PHP')
        symbol = CURRENCY_SYMBOLS.get(currency, currency + ' ')
        try:
            return f"{symbol}{float(amount):,.2f}"
        except (ValueError, TypeError):
            return f"{symbol}0.00"

    @app.template_filter('format_date')
    def format_date(value, fmt='%b %d, %Y'):
        if value is None:
            return ''
        if isinstance(value, datetime):
            value = utc_to_local(value)
        return value.strftime(fmt)

    # Security Headers - Protect against common attacks
    @app.after_request
    def add_security_headers(response):
        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
            "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://fonts.googleapis.com; "
            "font-src 'self' https://cdn.jsdelivr.net https://fonts.gstatic.com; "
            "img-src 'self' data: https:; "
            "frame-ancestors 'self';"
        )
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'

        # HSTS only when served over HTTPS
        if app.config.get('SESSION_COOKIE_SECURE') and app.config.get('PREFERRED_URL_SCHEME') == 'https':
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # Admin pages must never be cached
        if 'text/html' in response.content_type:
            response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, max-age=0'
            response.headers['Pragma'] = 'no-cache'
        return response

    return app


app = create_app()

if __name__ == '__main__':
    flask_env = os.environ.get('FLASK_ENV', 'production')
    debug_mode = flask_env == 'development'
    local_time = get_property_now()

    print("\n" + "="*60)
    print("Hotel Back Office")
    print("="*60)
    print(f"\nEnvironment: {flask_env}")
    print(f"Debug Mode: {debug_mode}")
    print(f"Property time: {local_time.strftime('%Y-%m-%d %H:%M:%S %z')}")
    print("\nAccess URL: http://localhost:8084")
    print("="*60 + "\n")

    logger.info(f"Application starting in {flask_env} mode")
    logger.info(f"CSRF protection: {app.config.get('WTF_CSRF_ENABLED', False)}")

    app.run(host='0.0.0.0', port=8084, debug=debug_mode)
