"""
Access Control Decorators
Role checks for views under /<business_unit_id>/admin
"""
import logging
from functools import wraps
from flask import flash, redirect, url_for
from flask_login import current_user, login_required

from models import ROLE_LABELS
from services.business_unit_service import user_has_role_in_business_unit

logger = logging.getLogger(__name__)


def unit_role_required(role):
    """
    Decorator factory to require at least `role` in the business unit of the URL
    Usage: @unit_role_required('MANAGER')
    """
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated_function(*args, **kwargs):
            business_unit_id = kwargs.get('business_unit_id')
            if not user_has_role_in_business_unit(current_user, business_unit_id, role):
                logger.warning(f'User {current_user.id} lacks {role} in business unit {business_unit_id}')
                flash(f'You need the {ROLE_LABELS.get(role, role)} role for this action.', 'danger')
                return redirect(url_for('admin.dashboard', business_unit_id=business_unit_id))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def manager_required(f):
    """Create and edit records"""
    return unit_role_required('MANAGER')(f)


def admin_required(f):
    """Delete records"""
    return unit_role_required('ADMIN')(f)


def super_admin_required(f):
    """Create and delete business units"""
    return unit_role_required('SUPER_ADMIN')(f)
