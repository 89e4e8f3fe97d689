"""
Admin Shell Routes
Dashboard, unit switcher and the per-request business unit guard shared by
every blueprint mounted under /<business_unit_id>/admin
"""
from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, g, current_app
from flask_login import login_required, current_user
import logging

from models import ROLE_LABELS
from services.access_router import guard_business_unit
from services.business_unit_service import (
    get_business_unit_by_id, get_user_business_units, get_user_role_for_business_unit
)
from services.guest_service import guest_service
from services.identity_service import build_request_context
from services.navigation_service import build_menu
from services.reservation_service import reservation_service, payment_service
from services.room_service import room_service, room_type_service
from utils.timezone import get_property_today

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/<business_unit_id>/admin')


def load_business_unit():
    """Keep the principal inside its assigned units, then load the unit into g"""
    business_unit_id = (request.view_args or {}).get('business_unit_id')
    if business_unit_id is None:
        return None

    context = g.get('request_context') or build_request_context(current_user)
    decision = guard_business_unit(
        context, business_unit_id, setup_path=current_app.config.get('SETUP_PATH', '/setup')
    )
    if decision.is_redirect:
        logger.warning(f'User {getattr(context, "user_id", None)} denied business unit {business_unit_id}, '
                       f'redirecting to {decision.location}')
        return redirect(decision.location)

    business_unit = get_business_unit_by_id(business_unit_id)
    if business_unit is None:
        abort(404)
    g.business_unit = business_unit
    return None


def inject_admin_shell():
    business_unit = g.get('business_unit')
    if business_unit is None:
        return {}
    badges = reservation_service.badge_counts(business_unit.id)
    role = get_user_role_for_business_unit(current_user, business_unit.id)
    return {
        'business_unit': business_unit,
        'badges': badges,
        'menu': build_menu(business_unit.id, badges, current_path=request.path),
        'switcher_units': get_user_business_units(current_user),
        'current_role': role,
        'current_role_label': ROLE_LABELS.get(role, role),
    }


def init_unit_blueprint(bp):
    """Attach the guard and the shell context to a unit-scoped blueprint"""
    bp.before_request(load_business_unit)
    bp.context_processor(inject_admin_shell)
    return bp


init_unit_blueprint(admin_bp)


# ============== Dashboard ==============
@admin_bp.route('')
@login_required
def dashboard(business_unit_id):
    """Unit overview: rooms, guests, today's arrivals and departures"""
    today = get_property_today()
    room_counts = room_service.status_counts(business_unit_id)
    total_rooms = sum(room_counts.values())
    occupancy_rate = round(room_counts.get('OCCUPIED', 0) / total_rooms * 100, 1) if total_rooms else 0

    return render_template(
        'admin/dashboard.html',
        today=today,
        room_counts=room_counts,
        total_rooms=total_rooms,
        occupancy_rate=occupancy_rate,
        room_type_count=room_type_service.count(business_unit_id),
        guest_count=guest_service.count(business_unit_id),
        arrivals=reservation_service.list(business_unit_id, arriving_on=today),
        departures=reservation_service.list(business_unit_id, departing_on=today),
        recent_reservations=reservation_service.recent(business_unit_id, limit=5),
        total_collected=payment_service.total_collected(business_unit_id),
    )


# ============== Unit switcher ==============
@admin_bp.route('/switch', methods=['POST'])
@login_required
def switch(business_unit_id):
    target = request.form.get('target_business_unit_id', '').strip()
    allowed = {unit.id for unit in get_user_business_units(current_user)}
    if target not in allowed:
        flash('You do not have access to that property', 'danger')
        return redirect(url_for('admin.dashboard', business_unit_id=business_unit_id))

    logger.info(f'User {current_user.id} switched from {business_unit_id} to {target}')
    return redirect(url_for('admin.dashboard', business_unit_id=target))
