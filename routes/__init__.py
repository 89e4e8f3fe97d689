from .auth import auth_bp
from .root import root_bp
from .admin import admin_bp
from .operations import operations_bp
from .cms import cms_bp

def register_blueprints(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(root_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(operations_bp)
    app.register_blueprint(cms_bp)
