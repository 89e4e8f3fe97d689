"""
Flask Extensions
Shared instances, bound to the application in create_app().
"""
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

csrf = CSRFProtect()

# Routes use limiter.limit() for per-view limits
limiter = Limiter(key_func=get_remote_address)
