#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Business Unit Service - multi-property access enforcement and property management
Provides functions for scoping queries to the business units a user may access
"""
import logging

from flask import has_request_context, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db, AuditLog, BusinessUnit, UserBusinessUnit, ROLE_LEVELS
from services.crud import action_result
from utils.forms import generate_slug

logger = logging.getLogger(__name__)

BUSINESS_UNIT_FIELDS = (
    'name', 'display_name', 'slug', 'property_type', 'city', 'state', 'country',
    'address', 'phone', 'email', 'website', 'short_description',
    'primary_color', 'secondary_color', 'logo',
    'is_active', 'is_published', 'is_featured', 'sort_order',
)


# ============== Scope ==============
def is_super_admin(user):
    if not user or not getattr(user, 'is_authenticated', False):
        return False
    return user.is_super_admin()


def get_allowed_business_unit_ids(user):
    """
    Get list of business unit ids the user may access

    Args:
        user: User object

    Returns:
        List of ids in assignment order, or None (super admin: every unit)
    """
    if not user or not getattr(user, 'is_authenticated', False):
        return []

    if is_super_admin(user):
        return None  # None means no filter (all units)

    return [a.business_unit_id for a in user.ordered_assignments()]


def enforce_business_unit_scope(query, user, business_unit_id_column):
    """
    Apply business unit scope filter to a query

    Args:
        query: SQLAlchemy query object
        user: User object
        business_unit_id_column: The column to filter on (e.g., Room.business_unit_id)

    Returns:
        Filtered query
    """
    allowed = get_allowed_business_unit_ids(user)

    if allowed is None:
        return query

    if not allowed:
        # No access - return impossible condition
        return query.filter(business_unit_id_column.is_(None))

    return query.filter(business_unit_id_column.in_(allowed))


def user_can_access_business_unit(user, business_unit_id):
    allowed = get_allowed_business_unit_ids(user)

    if allowed is None:
        return True

    return business_unit_id in allowed


def require_business_unit_access(user, business_unit_id):
    """
    Raise PermissionError if user cannot access the business unit
    Use this in detail views/endpoints
    """
    if not user_can_access_business_unit(user, business_unit_id):
        raise PermissionError(f"User {getattr(user, 'id', None)} cannot access business unit {business_unit_id}")
    return True


def get_user_role_for_business_unit(user, business_unit_id):
    """
    Get user's role for a specific business unit

    Returns:
        Role string ('SUPER_ADMIN', 'ADMIN', 'MANAGER', 'STAFF') or None
    """
    if not user or not getattr(user, 'is_authenticated', False):
        return None

    if is_super_admin(user):
        return 'SUPER_ADMIN'

    assignment = UserBusinessUnit.query.filter_by(user_id=user.id, business_unit_id=business_unit_id).first()
    if assignment:
        return assignment.role

    return None


def user_has_role_in_business_unit(user, business_unit_id, role):
    """Check if the user holds at least `role` in the business unit"""
    current = get_user_role_for_business_unit(user, business_unit_id)
    if current is None:
        return False
    return ROLE_LEVELS.get(current, 0) >= ROLE_LEVELS.get(role, 0)


def get_user_business_units(user):
    """
    Business units offered in the unit switcher

    Super admins see every unit ordered by display name; everyone else sees
    the units they are assigned to, in assignment order.
    """
    if not user or not getattr(user, 'is_authenticated', False):
        return []

    if is_super_admin(user):
        return BusinessUnit.query.order_by(BusinessUnit.display_name.asc()).all()

    return [a.business_unit for a in user.ordered_assignments()]


# ============== Properties ==============
def get_business_units(published_only=False, user=None):
    """
    Business units ordered featured first, then sort order, then name

    With a user, only the units that user may access are returned.
    """
    try:
        query = BusinessUnit.query
        if published_only:
            query = query.filter(BusinessUnit.is_active == True, BusinessUnit.is_published == True)
        if user is not None:
            query = enforce_business_unit_scope(query, user, BusinessUnit.id)
        return query.order_by(
            BusinessUnit.is_featured.desc(),
            BusinessUnit.sort_order.asc(),
            BusinessUnit.name.asc()
        ).all()
    except SQLAlchemyError as e:
        logger.error(f'Failed to fetch business units: {e}')
        db.session.rollback()
        return []


def get_business_unit_by_id(business_unit_id):
    try:
        return db.session.get(BusinessUnit, business_unit_id)
    except SQLAlchemyError as e:
        logger.error(f'Failed to fetch business unit {business_unit_id}: {e}')
        db.session.rollback()
        return None


def _validate_business_unit(data, business_unit=None):
    errors = {}
    slug = data.get('slug')
    if slug:
        query = BusinessUnit.query.filter(BusinessUnit.slug == slug)
        if business_unit is not None:
            query = query.filter(BusinessUnit.id != business_unit.id)
        if query.first():
            errors['slug'] = 'This slug is already used by another property'
    return errors


def _audit_business_unit(actor, action, business_unit, old_values=None, new_values=None):
    if actor is None:
        return
    AuditLog.log(
        user=actor,
        action=action,
        resource_type=AuditLog.RESOURCE_BUSINESS_UNIT,
        resource_id=business_unit.id,
        resource_name=business_unit.name,
        old_values=old_values,
        new_values=new_values,
        description=f'{AuditLog.ACTION_LABELS.get(action, action)} property {business_unit.name}',
        request=request if has_request_context() else None,
        business_unit_id=business_unit.id
    )


def create_business_unit(data, actor=None, creator_role=None):
    """
    Create a property

    Args:
        data: Field dict (slug derived from name when missing)
        actor: Acting user, recorded in the audit log
        creator_role: When set, the actor is assigned to the new unit with this role

    Returns:
        action result dict with the new BusinessUnit as 'record'
    """
    data = dict(data)
    if not data.get('slug'):
        data['slug'] = generate_slug(data.get('name'))
    if not data.get('display_name'):
        data['display_name'] = data.get('name')

    errors = _validate_business_unit(data)
    if errors:
        return action_result(False, 'Please fix the errors in the property form', errors)

    business_unit = BusinessUnit(**data)
    try:
        db.session.add(business_unit)
        db.session.flush()
        if actor is not None and creator_role:
            db.session.add(UserBusinessUnit(
                user_id=actor.id,
                business_unit_id=business_unit.id,
                role=creator_role,
                created_by_id=actor.id
            ))
        _audit_business_unit(actor, AuditLog.ACTION_CREATE, business_unit,
                             new_values={f: getattr(business_unit, f) for f in BUSINESS_UNIT_FIELDS})
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning(f'Integrity error creating business unit: {e}')
        return action_result(False, 'A property with these details already exists')
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to create business unit: {e}')
        return action_result(False, 'Failed to create property')

    logger.info(f'Business unit {business_unit.id} ({business_unit.name}) created')
    return action_result(True, 'Property created successfully', record=business_unit)


def update_business_unit(business_unit_id, data, actor=None):
    business_unit = get_business_unit_by_id(business_unit_id)
    if business_unit is None:
        return action_result(False, 'Property not found')

    data = dict(data)
    if not data.get('slug'):
        data['slug'] = generate_slug(data.get('name') or business_unit.name)

    errors = _validate_business_unit(data, business_unit)
    if errors:
        return action_result(False, 'Please fix the errors in the property form', errors, business_unit)

    old_values = {f: getattr(business_unit, f) for f in BUSINESS_UNIT_FIELDS}
    for key, value in data.items():
        setattr(business_unit, key, value)
    try:
        _audit_business_unit(actor, AuditLog.ACTION_UPDATE, business_unit, old_values=old_values,
                             new_values={f: getattr(business_unit, f) for f in BUSINESS_UNIT_FIELDS})
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to update business unit {business_unit_id}: {e}')
        return action_result(False, 'Failed to update property')

    return action_result(True, 'Property updated successfully', record=business_unit)


def delete_business_unit(business_unit_id, actor=None):
    """Delete a property that has no reservations"""
    business_unit = get_business_unit_by_id(business_unit_id)
    if business_unit is None:
        return action_result(False, 'Property not found')

    if business_unit.reservations.count() > 0:
        return action_result(False, 'Property has reservations and cannot be deleted; deactivate it instead')

    try:
        _audit_business_unit(actor, AuditLog.ACTION_DELETE, business_unit,
                             old_values={'name': business_unit.name, 'slug': business_unit.slug})
        for model in _unit_owned_models():
            model.query.filter_by(business_unit_id=business_unit.id).delete(synchronize_session=False)
        db.session.delete(business_unit)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to delete business unit {business_unit_id}: {e}')
        return action_result(False, 'Failed to delete property')

    return action_result(True, 'Property deleted successfully')


def _unit_owned_models():
    from models import Guest, Restaurant, HeroSlide, Testimonial, FAQ, SpecialOffer, Event
    return (Guest, Restaurant, HeroSlide, Testimonial, FAQ, SpecialOffer, Event)
