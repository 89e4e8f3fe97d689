"""
Root Routes
Landing redirect for signed-in users and first-property setup
"""
from flask import Blueprint, render_template, redirect, flash, request, g, current_app
from flask_login import login_required, current_user
import logging

from services.access_router import root_redirect, unit_admin_path
from services.business_unit_service import create_business_unit
from services.identity_service import build_request_context
from utils.forms import Field, read_fields
from models import PROPERTY_TYPES

logger = logging.getLogger(__name__)

root_bp = Blueprint('root', __name__)

SETUP_FIELDS = [
    Field('name', 'Property name', required=True, max_length=100),
    Field('display_name', 'Display name', max_length=150),
    Field('property_type', 'Property type', 'select', required=True, choices=PROPERTY_TYPES, default='HOTEL'),
    Field('city', 'City', required=True, max_length=100),
    Field('country', 'Country', required=True, max_length=100, default='Philippines'),
]


def _request_context():
    return g.get('request_context') or build_request_context(current_user)


@root_bp.route('/')
@login_required
def index():
    context = _request_context()
    decision = root_redirect(context, request.path)
    if decision.is_redirect:
        return redirect(decision.location)
    # Signed in without any business unit
    return redirect(current_app.config.get('SETUP_PATH', '/setup'))


@root_bp.route('/setup', methods=['GET', 'POST'])
@login_required
def setup():
    """Create the first business unit; the creator becomes its administrator"""
    context = _request_context()
    if context.has_assignments:
        return redirect(unit_admin_path(context.default_business_unit_id))

    if request.method == 'POST':
        data, errors = read_fields(request.form, SETUP_FIELDS)
        if not errors:
            result = create_business_unit(data, actor=current_user, creator_role='ADMIN')
            if result['success']:
                business_unit = result['record']
                logger.info(f'User {current_user.id} set up business unit {business_unit.id}')
                flash(f'{business_unit.display_name} is ready', 'success')
                return redirect(unit_admin_path(business_unit.id))
            errors = result['errors']
            if not errors:
                flash(result['message'], 'danger')
        for message in errors.values():
            flash(message, 'danger')

    return render_template('setup.html', fields=SETUP_FIELDS,
                           submitted=request.form if request.method == 'POST' else None)
