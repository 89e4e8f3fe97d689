"""
Operations Routes
Properties, rooms, guests, reservations, payments and restaurants of one business unit
"""
from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required, current_user
import logging

from models import (PROPERTY_TYPES, ROOM_CATEGORIES, ROOM_STATUS, RESERVATION_STATUS, RESERVATION_SOURCES,
                    PAYMENT_STATUS, PAYMENT_METHODS, RESTAURANT_TYPES)
from routes.admin import init_unit_blueprint
from routes.crud_views import list_view, form_view, delete_view
from services.business_unit_service import (
    get_business_units, get_business_unit_by_id,
    create_business_unit, update_business_unit, delete_business_unit, user_has_role_in_business_unit,
    require_business_unit_access
)
from services.guest_service import guest_service
from services.reservation_service import reservation_service, payment_service
from services.restaurant_service import restaurant_service
from services.room_service import room_service, room_type_service
from utils.decorators import manager_required, admin_required, super_admin_required
from utils.forms import Field, read_fields, get_decimal, get_choice, get_str, FormReader
from utils.timezone import get_property_today

logger = logging.getLogger(__name__)

operations_bp = init_unit_blueprint(
    Blueprint('operations', __name__, url_prefix='/<business_unit_id>/admin/operations')
)

PROPERTY_FIELDS = [
    Field('name', 'Name', required=True, max_length=100),
    Field('display_name', 'Display name', max_length=150),
    Field('slug', 'Slug', max_length=120, help_text='Leave blank to derive it from the name'),
    Field('property_type', 'Property type', 'select', required=True, choices=PROPERTY_TYPES, default='HOTEL'),
    Field('city', 'City', required=True, max_length=100),
    Field('state', 'State / Province', max_length=100),
    Field('country', 'Country', required=True, max_length=100, default='Philippines'),
    Field('address', 'Address', max_length=255),
    Field('phone', 'Phone', max_length=30),
    Field('email', 'Email', 'email', max_length=120),
    Field('website', 'Website', 'url', max_length=255),
    Field('short_description', 'Short description', 'textarea', max_length=500),
    Field('primary_color', 'Primary color', 'color', max_length=20),
    Field('secondary_color', 'Secondary color', 'color', max_length=20),
    Field('logo', 'Logo URL', 'url', max_length=255),
    Field('is_active', 'Active', 'bool', default=True),
    Field('is_published', 'Published', 'bool'),
    Field('is_featured', 'Featured', 'bool'),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]

ROOM_TYPE_FIELDS = [
    Field('name', 'Name', required=True, max_length=100),
    Field('display_name', 'Display name', max_length=150),
    Field('description', 'Description', 'textarea'),
    Field('type', 'Category', 'select', required=True, choices=ROOM_CATEGORIES, default='STANDARD'),
    Field('max_occupancy', 'Max occupancy', 'int', required=True, minimum=1, default=2),
    Field('max_adults', 'Max adults', 'int', required=True, minimum=1, default=2),
    Field('max_children', 'Max children', 'int', minimum=0, default=0),
    Field('max_infants', 'Max infants', 'int', minimum=0, default=0),
    Field('bed_configuration', 'Bed configuration', max_length=100),
    Field('room_size', 'Room size (sqm)', 'decimal'),
    Field('base_rate', 'Base rate', 'decimal', required=True),
    Field('extra_person_rate', 'Extra person rate', 'decimal'),
    Field('extra_child_rate', 'Extra child rate', 'decimal'),
    Field('has_balcony', 'Balcony', 'bool'),
    Field('has_ocean_view', 'Ocean view', 'bool'),
    Field('has_pool_view', 'Pool view', 'bool'),
    Field('has_kitchenette', 'Kitchenette', 'bool'),
    Field('has_living_area', 'Living area', 'bool'),
    Field('smoking_allowed', 'Smoking allowed', 'bool'),
    Field('pet_friendly', 'Pet friendly', 'bool'),
    Field('is_accessible', 'Accessible', 'bool'),
    Field('is_active', 'Active', 'bool', default=True),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]

GUEST_FIELDS = [
    Field('title', 'Title', max_length=10),
    Field('first_name', 'First name', required=True, max_length=80),
    Field('last_name', 'Last name', required=True, max_length=80),
    Field('email', 'Email', 'email', required=True, max_length=120),
    Field('phone', 'Phone', max_length=30),
    Field('date_of_birth', 'Date of birth', 'date'),
    Field('nationality', 'Nationality', max_length=80),
    Field('country', 'Country', max_length=80),
    Field('city', 'City', max_length=80),
    Field('address', 'Address', max_length=255),
    Field('id_type', 'ID type', max_length=40),
    Field('id_number', 'ID number', max_length=40),
    Field('loyalty_number', 'Loyalty number', max_length=40),
    Field('vip_status', 'VIP', 'bool'),
    Field('marketing_opt_in', 'Marketing opt-in', 'bool'),
    Field('notes', 'Notes', 'textarea'),
]

RESTAURANT_FIELDS = [
    Field('name', 'Name', required=True, max_length=120),
    Field('slug', 'Slug', max_length=140, help_text='Leave blank to derive it from the name'),
    Field('type', 'Type', 'select', required=True, choices=RESTAURANT_TYPES, default='CASUAL_DINING'),
    Field('short_desc', 'Short description', max_length=300),
    Field('description', 'Description', 'textarea'),
    Field('location', 'Location', max_length=150),
    Field('phone', 'Phone', max_length=30),
    Field('email', 'Email', 'email', max_length=120),
    Field('cuisine', 'Cuisine', max_length=200, help_text='Comma separated'),
    Field('operating_hours', 'Operating hours', max_length=200),
    Field('total_seats', 'Total seats', 'int', minimum=0),
    Field('price_range', 'Price range', max_length=10),
    Field('accepts_reservations', 'Accepts reservations', 'bool', default=True),
    Field('is_active', 'Active', 'bool', default=True),
    Field('is_published', 'Published', 'bool'),
    Field('is_featured', 'Featured', 'bool'),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]


def room_fields(business_unit_id):
    room_types = room_type_service.list(business_unit_id)
    return [
        Field('room_number', 'Room number', required=True, max_length=20),
        Field('room_type_id', 'Room type', 'select', required=True,
              choices=[(str(rt.id), rt.display_name) for rt in room_types], coerce=int),
        Field('floor', 'Floor', 'int'),
        Field('status', 'Status', 'select', required=True, choices=ROOM_STATUS, default='AVAILABLE'),
        Field('is_active', 'Active', 'bool', default=True),
        Field('notes', 'Notes', 'textarea'),
    ]


def reservation_fields(business_unit_id):
    guests = guest_service.list(business_unit_id)
    room_types = room_type_service.list(business_unit_id, active_only=True)
    rooms = room_service.list(business_unit_id)
    return [
        Field('guest_id', 'Guest', 'select', required=True,
              choices=[(str(g.id), f'{g.full_name} ({g.email})') for g in guests], coerce=int),
        Field('room_type_id', 'Room type', 'select', required=True,
              choices=[(str(rt.id), rt.display_name) for rt in room_types], coerce=int),
        Field('room_id', 'Room', 'select',
              choices=[(str(r.id), f'{r.room_number} ({r.room_type.display_name})') for r in rooms], coerce=int),
        Field('check_in_date', 'Check-in', 'date', required=True),
        Field('check_out_date', 'Check-out', 'date', required=True),
        Field('adults', 'Adults', 'int', required=True, minimum=1, default=1),
        Field('children', 'Children', 'int', minimum=0, default=0),
        Field('source', 'Source', 'select', required=True, choices=RESERVATION_SOURCES, default='DIRECT'),
        Field('special_requests', 'Special requests', 'textarea'),
        Field('internal_notes', 'Internal notes', 'textarea'),
    ]


# ============== Properties ==============
@operations_bp.route('/properties')
@login_required
def properties_list(business_unit_id):
    units = get_business_units(user=current_user)
    return list_view(
        business_unit_id, units, 'Properties',
        [('Name', 'display_name'), ('Type', 'property_type_label'), ('City', 'city'),
         ('Country', 'country'), ('Published', 'is_published'), ('Featured', 'is_featured')],
        'operations.properties',
        can_create=user_has_role_in_business_unit(current_user, business_unit_id, 'SUPER_ADMIN'),
    )


@operations_bp.route('/properties/new', methods=['GET', 'POST'])
@super_admin_required
def properties_create(business_unit_id):
    if request.method == 'POST':
        data, errors = read_fields(request.form, PROPERTY_FIELDS)
        if not errors:
            result = create_business_unit(data, actor=current_user)
            if result['success']:
                flash(result['message'], 'success')
                return redirect(url_for('operations.properties_list', business_unit_id=business_unit_id))
            errors = result['errors']
            if not errors:
                flash(result['message'], 'danger')
        for message in errors.values():
            flash(message, 'danger')

    return render_template('admin/form.html', title='New Property', fields=PROPERTY_FIELDS, record=None,
                           submitted=request.form if request.method == 'POST' else None,
                           endpoint='operations.properties', business_unit_id=business_unit_id)


@operations_bp.route('/properties/<record_id>/edit', methods=['GET', 'POST'])
@login_required
def properties_edit(business_unit_id, record_id):
    business_unit = get_business_unit_by_id(record_id)
    if business_unit is None:
        abort(404)
    try:
        require_business_unit_access(current_user, record_id)
    except PermissionError as e:
        logger.warning(str(e))
        abort(403)
    if not user_has_role_in_business_unit(current_user, record_id, 'ADMIN'):
        flash('You need the Administrator role on that property to edit it.', 'danger')
        return redirect(url_for('operations.properties_list', business_unit_id=business_unit_id))

    if request.method == 'POST':
        data, errors = read_fields(request.form, PROPERTY_FIELDS)
        if not errors:
            result = update_business_unit(record_id, data, actor=current_user)
            if result['success']:
                flash(result['message'], 'success')
                return redirect(url_for('operations.properties_list', business_unit_id=business_unit_id))
            errors = result['errors']
            if not errors:
                flash(result['message'], 'danger')
        for message in errors.values():
            flash(message, 'danger')

    return render_template('admin/form.html', title=f'Edit {business_unit.display_name}',
                           fields=PROPERTY_FIELDS, record=business_unit,
                           submitted=request.form if request.method == 'POST' else None,
                           endpoint='operations.properties', business_unit_id=business_unit_id)


@operations_bp.route('/properties/<record_id>/delete', methods=['POST'])
@super_admin_required
def properties_delete(business_unit_id, record_id):
    if get_business_unit_by_id(record_id) is None:
        abort(404)
    result = delete_business_unit(record_id, actor=current_user)
    flash(result['message'], 'success' if result['success'] else 'danger')
    if result['success'] and record_id == business_unit_id:
        # The current unit is gone; let the root pick the next default
        return redirect(url_for('root.index'))
    return redirect(url_for('operations.properties_list', business_unit_id=business_unit_id))


# ============== Room types ==============
@operations_bp.route('/room-types')
@login_required
def room_types_list(business_unit_id):
    room_counts = room_type_service.room_counts(business_unit_id)
    return list_view(
        business_unit_id, room_type_service.list(business_unit_id), 'Room Types',
        [('Name', 'display_name'), ('Category', 'type_label'), ('Max occupancy', 'max_occupancy'),
         ('Base rate', 'base_rate'), ('Rooms', lambda rt: room_counts.get(rt.id, 0)), ('Active', 'is_active')],
        'operations.room_types',
    )


@operations_bp.route('/room-types/new', methods=['GET', 'POST'])
@manager_required
def room_types_create(business_unit_id):
    return form_view(business_unit_id, room_type_service, ROOM_TYPE_FIELDS, 'New Room Type', 'operations.room_types')


@operations_bp.route('/room-types/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def room_types_edit(business_unit_id, record_id):
    return form_view(business_unit_id, room_type_service, ROOM_TYPE_FIELDS, 'Edit Room Type',
                     'operations.room_types', record_id)


@operations_bp.route('/room-types/<int:record_id>/delete', methods=['POST'])
@admin_required
def room_types_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, room_type_service, 'operations.room_types', record_id)


# ============== Rooms ==============
@operations_bp.route('/rooms')
@login_required
def rooms_list(business_unit_id):
    status = request.args.get('status') or None
    if status and status not in ROOM_STATUS:
        status = None
    return list_view(
        business_unit_id, room_service.list(business_unit_id, status=status), 'Rooms',
        [('Room', 'room_number'), ('Type', 'room_type.display_name'), ('Floor', 'floor'),
         ('Status', 'status_label'), ('Active', 'is_active')],
        'operations.rooms',
        filters=[('status', 'Status', ROOM_STATUS, status)],
        status_counts=room_service.status_counts(business_unit_id),
    )


@operations_bp.route('/rooms/new', methods=['GET', 'POST'])
@manager_required
def rooms_create(business_unit_id):
    return form_view(business_unit_id, room_service, room_fields(business_unit_id), 'New Room', 'operations.rooms')


@operations_bp.route('/rooms/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def rooms_edit(business_unit_id, record_id):
    return form_view(business_unit_id, room_service, room_fields(business_unit_id), 'Edit Room',
                     'operations.rooms', record_id)


@operations_bp.route('/rooms/<int:record_id>/delete', methods=['POST'])
@admin_required
def rooms_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, room_service, 'operations.rooms', record_id)


# ============== Guests ==============
@operations_bp.route('/guests')
@login_required
def guests_list(business_unit_id):
    search = request.args.get('search', '').strip()
    vip_only = request.args.get('vip') == '1'
    return list_view(
        business_unit_id, guest_service.list(business_unit_id, search=search, vip_only=vip_only), 'Guest Directory',
        [('Name', 'full_name'), ('Email', 'email'), ('Phone', 'phone'), ('Country', 'country'),
         ('VIP', 'vip_status')],
        'operations.guests',
        search=search,
    )


@operations_bp.route('/guests/new', methods=['GET', 'POST'])
@manager_required
def guests_create(business_unit_id):
    return form_view(business_unit_id, guest_service, GUEST_FIELDS, 'New Guest', 'operations.guests')


@operations_bp.route('/guests/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def guests_edit(business_unit_id, record_id):
    return form_view(business_unit_id, guest_service, GUEST_FIELDS, 'Edit Guest', 'operations.guests', record_id)


@operations_bp.route('/guests/<int:record_id>/delete', methods=['POST'])
@admin_required
def guests_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, guest_service, 'operations.guests', record_id)


# ============== Reservations ==============
RESERVATION_COLUMNS = [
    ('Confirmation', 'confirmation_number'), ('Guest', 'guest.full_name'),
    ('Check-in', 'check_in_date'), ('Check-out', 'check_out_date'), ('Nights', 'nights'),
    ('Status', 'status_label'), ('Total', 'total_amount'),
]


@operations_bp.route('/reservations')
@login_required
def reservations_list(business_unit_id):
    status = request.args.get('status') or None
    if status and status not in RESERVATION_STATUS:
        status = None
    return list_view(
        business_unit_id, reservation_service.list(business_unit_id, status=status), 'Reservations',
        RESERVATION_COLUMNS, 'operations.reservations', detail_endpoint='operations.reservations_detail',
        can_edit=False, can_delete=False, filters=[('status', 'Status', RESERVATION_STATUS, status)],
    )


@operations_bp.route('/check-ins')
@login_required
def check_ins(business_unit_id):
    today = get_property_today()
    return list_view(
        business_unit_id, reservation_service.list(business_unit_id, arriving_on=today),
        f'Check-ins Today ({today.isoformat()})', RESERVATION_COLUMNS, 'operations.reservations',
        detail_endpoint='operations.reservations_detail',
        can_create=False, can_edit=False, can_delete=False,
    )


@operations_bp.route('/check-outs')
@login_required
def check_outs(business_unit_id):
    today = get_property_today()
    return list_view(
        business_unit_id, reservation_service.list(business_unit_id, departing_on=today),
        f'Check-outs Today ({today.isoformat()})', RESERVATION_COLUMNS, 'operations.reservations',
        detail_endpoint='operations.reservations_detail',
        can_create=False, can_edit=False, can_delete=False,
    )


@operations_bp.route('/reservations/new', methods=['GET', 'POST'])
@manager_required
def reservations_create(business_unit_id):
    fields = reservation_fields(business_unit_id)
    if request.method == 'POST':
        data, errors = read_fields(request.form, fields)
        if not errors:
            result = reservation_service.create_reservation(business_unit_id, data, actor=current_user)
            if result['success']:
                flash(result['message'], 'success')
                return redirect(url_for('operations.reservations_detail', business_unit_id=business_unit_id,
                                        record_id=result['record'].id))
            errors = result['errors']
            if not errors:
                flash(result['message'], 'danger')
        for message in errors.values():
            flash(message, 'danger')

    return render_template('admin/form.html', title='New Reservation', fields=fields, record=None,
                           submitted=request.form if request.method == 'POST' else None,
                           endpoint='operations.reservations', business_unit_id=business_unit_id)


@operations_bp.route('/reservations/<int:record_id>')
@login_required
def reservations_detail(business_unit_id, record_id):
    reservation = reservation_service.get(business_unit_id, record_id)
    if reservation is None:
        abort(404)
    return render_template(
        'admin/reservation_detail.html',
        reservation=reservation,
        next_statuses=[(s, RESERVATION_STATUS[s]) for s in RESERVATION_STATUS if reservation.can_transition_to(s)],
        payment_methods=PAYMENT_METHODS,
    )


@operations_bp.route('/reservations/<int:record_id>/status', methods=['POST'])
@manager_required
def reservations_status(business_unit_id, record_id):
    if reservation_service.get(business_unit_id, record_id) is None:
        abort(404)
    new_status = request.form.get('status', '').strip()
    result = reservation_service.update_status(business_unit_id, record_id, new_status, actor=current_user)
    flash(result['message'], 'success' if result['success'] else 'danger')
    return redirect(url_for('operations.reservations_detail', business_unit_id=business_unit_id, record_id=record_id))


@operations_bp.route('/reservations/<int:record_id>/payments', methods=['POST'])
@manager_required
def reservations_add_payment(business_unit_id, record_id):
    if reservation_service.get(business_unit_id, record_id) is None:
        abort(404)
    reader = FormReader(request.form)
    amount = reader.read('amount', get_decimal, required=True, label='Amount')
    method = reader.read('method', get_choice, list(PAYMENT_METHODS), 'CASH', 'Payment method')
    reference = reader.read('reference', get_str, label='Reference', max_length=100)
    if reader.errors:
        for message in reader.errors.values():
            flash(message, 'danger')
    else:
        result = payment_service.record_payment(business_unit_id, record_id, amount, method,
                                                reference=reference, actor=current_user)
        flash(result['message'], 'success' if result['success'] else 'danger')
        for message in result['errors'].values():
            flash(message, 'danger')
    return redirect(url_for('operations.reservations_detail', business_unit_id=business_unit_id, record_id=record_id))


# ============== Payments ==============
@operations_bp.route('/payments')
@login_required
def payments_list(business_unit_id):
    status = request.args.get('status') or None
    if status and status not in PAYMENT_STATUS:
        status = None
    return list_view(
        business_unit_id, payment_service.list(business_unit_id, status=status), 'Payments',
        [('Reservation', 'reservation.confirmation_number'), ('Guest', 'reservation.guest.full_name'),
         ('Amount', 'amount'), ('Method', 'method_label'), ('Status', 'status_label'), ('Date', 'created_at')],
        'operations.payments', detail_endpoint='operations.payments_detail',
        can_create=False, can_edit=False, can_delete=False,
        filters=[('status', 'Status', PAYMENT_STATUS, status)],
    )


@operations_bp.route('/payments/<int:record_id>')
@login_required
def payments_detail(business_unit_id, record_id):
    payment = payment_service.get(business_unit_id, record_id)
    if payment is None:
        abort(404)
    return render_template('admin/payment_detail.html', payment=payment, payment_statuses=PAYMENT_STATUS)


@operations_bp.route('/payments/<int:record_id>/status', methods=['POST'])
@manager_required
def payments_status(business_unit_id, record_id):
    if payment_service.get(business_unit_id, record_id) is None:
        abort(404)
    new_status = request.form.get('status', '').strip()
    result = payment_service.update_status(business_unit_id, record_id, new_status, actor=current_user)
    flash(result['message'], 'success' if result['success'] else 'danger')
    return redirect(url_for('operations.payments_detail', business_unit_id=business_unit_id, record_id=record_id))


# ============== Restaurants ==============
@operations_bp.route('/restaurants')
@login_required
def restaurants_list(business_unit_id):
    return list_view(
        business_unit_id, restaurant_service.list(business_unit_id), 'Restaurants',
        [('Name', 'name'), ('Type', 'type_label'), ('Location', 'location'), ('Seats', 'total_seats'),
         ('Published', 'is_published'), ('Active', 'is_active')],
        'operations.restaurants',
    )


@operations_bp.route('/restaurants/new', methods=['GET', 'POST'])
@manager_required
def restaurants_create(business_unit_id):
    return form_view(business_unit_id, restaurant_service, RESTAURANT_FIELDS, 'New Restaurant',
                     'operations.restaurants')


@operations_bp.route('/restaurants/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def restaurants_edit(business_unit_id, record_id):
    return form_view(business_unit_id, restaurant_service, RESTAURANT_FIELDS, 'Edit Restaurant',
                     'operations.restaurants', record_id)


@operations_bp.route('/restaurants/<int:record_id>/delete', methods=['POST'])
@admin_required
def restaurants_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, restaurant_service, 'operations.restaurants', record_id)
