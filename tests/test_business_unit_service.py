#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Business unit scope, roles and property management
"""
from datetime import datetime

import pytest

from models import db, BusinessUnit, Room, RoomType, User, UserBusinessUnit
from services.business_unit_service import (
    get_allowed_business_unit_ids, user_can_access_business_unit, require_business_unit_access,
    get_user_role_for_business_unit, user_has_role_in_business_unit, get_user_business_units,
    enforce_business_unit_scope,
    get_business_units, create_business_unit, update_business_unit, delete_business_unit,
)
from services.identity_service import build_request_context
from services.access_router import Authenticated, Unauthenticated


class TestRequestContext:
    """Flask-Login user -> router context"""

    def test_assignments_in_creation_order(self, app, make_user, business_units):
        user_id = make_user('multi@hotel.com', [('biz_2', 'STAFF'), ('biz_1', 'MANAGER')])
        with app.app_context():
            context = build_request_context(db.session.get(User, user_id))
            assert isinstance(context, Authenticated)
            assert [a.business_unit_id for a in context.assignments] == ['biz_2', 'biz_1']
            assert context.default_business_unit_id == 'biz_2'
            assert not context.is_super_admin

    def test_same_timestamp_falls_back_to_id(self, app, make_user, business_units):
        user_id = make_user('tied@hotel.com')
        with app.app_context():
            for unit_id in ('biz_2', 'biz_1'):
                db.session.add(UserBusinessUnit(user_id=user_id, business_unit_id=unit_id, role='STAFF',
                                                created_at=datetime(2024, 1, 1)))
            db.session.commit()
            context = build_request_context(db.session.get(User, user_id))
            assert context.default_business_unit_id == 'biz_2'

    def test_no_assignments(self, app, newcomer):
        with app.app_context():
            context = build_request_context(db.session.get(User, newcomer))
            assert isinstance(context, Authenticated)
            assert not context.has_assignments

    def test_super_admin_flag(self, app, super_admin):
        with app.app_context():
            assert build_request_context(db.session.get(User, super_admin)).is_super_admin

    def test_missing_or_inactive_user_is_unauthenticated(self, app, make_user):
        user_id = make_user('inactive@hotel.com', is_active=False)
        with app.app_context():
            assert isinstance(build_request_context(None), Unauthenticated)
            assert isinstance(build_request_context(db.session.get(User, user_id)), Unauthenticated)

    def test_broken_user_object_is_unauthenticated(self, app):
        class BrokenUser:
            is_authenticated = True
            is_active = True
            id = 1

        with app.app_context():
            assert isinstance(build_request_context(BrokenUser()), Unauthenticated)


class TestScope:
    """Which units a user may open"""

    def test_assigned_units_only(self, app, manager):
        with app.app_context():
            user = db.session.get(User, manager)
            assert get_allowed_business_unit_ids(user) == ['biz_1']
            assert user_can_access_business_unit(user, 'biz_1')
            assert not user_can_access_business_unit(user, 'biz_2')
            with pytest.raises(PermissionError):
                require_business_unit_access(user, 'biz_2')

    def test_super_admin_sees_everything(self, app, super_admin):
        with app.app_context():
            user = db.session.get(User, super_admin)
            assert get_allowed_business_unit_ids(user) is None
            assert user_can_access_business_unit(user, 'biz_2')
            assert [u.id for u in get_user_business_units(user)] == ['biz_2', 'biz_1']

    def test_scoped_query(self, app, manager):
        with app.app_context():
            for unit_id in ('biz_1', 'biz_2'):
                room_type = RoomType(business_unit_id=unit_id, name='Deluxe', display_name='Deluxe',
                                     base_rate=1000)
                db.session.add(room_type)
                db.session.flush()
                db.session.add(Room(business_unit_id=unit_id, room_type_id=room_type.id, room_number='101'))
            db.session.commit()

            user = db.session.get(User, manager)
            rooms = enforce_business_unit_scope(Room.query, user, Room.business_unit_id).all()
            assert [r.business_unit_id for r in rooms] == ['biz_1']

    def test_no_access_scopes_to_nothing(self, app, newcomer, business_units):
        with app.app_context():
            user = db.session.get(User, newcomer)
            assert enforce_business_unit_scope(BusinessUnit.query, user, BusinessUnit.id).count() == 0


class TestRoles:
    """Role hierarchy inside one unit"""

    def test_role_levels(self, app, make_user, business_units):
        user_id = make_user('staff@hotel.com', [('biz_1', 'STAFF'), ('biz_2', 'ADMIN')])
        with app.app_context():
            user = db.session.get(User, user_id)
            assert get_user_role_for_business_unit(user, 'biz_1') == 'STAFF'
            assert user_has_role_in_business_unit(user, 'biz_1', 'STAFF')
            assert not user_has_role_in_business_unit(user, 'biz_1', 'MANAGER')
            assert user_has_role_in_business_unit(user, 'biz_2', 'MANAGER')
            assert not user_has_role_in_business_unit(user, 'biz_2', 'SUPER_ADMIN')

    def test_super_admin_has_every_role_everywhere(self, app, super_admin):
        with app.app_context():
            user = db.session.get(User, super_admin)
            assert get_user_role_for_business_unit(user, 'biz_2') == 'SUPER_ADMIN'
            assert user_has_role_in_business_unit(user, 'biz_2', 'ADMIN')


class TestProperties:
    """Create, update and delete business units"""

    def test_create_derives_slug_and_display_name(self, app):
        with app.app_context():
            result = create_business_unit({'name': 'Palm Cove Villas', 'city': 'Boracay', 'country': 'Philippines'})
            assert result['success']
            unit = result['record']
            assert unit.slug == 'palm-cove-villas'
            assert unit.display_name == 'Palm Cove Villas'
            assert len(unit.id) == 32

    def test_update_rejects_taken_slug(self, app, business_units):
        with app.app_context():
            result = update_business_unit('biz_2', {'name': 'Mountain Lodge', 'slug': 'biz-1'})
            assert not result['success']
            assert 'slug' in result['errors']

    def test_update_unknown_unit(self, app):
        with app.app_context():
            assert update_business_unit('nope', {'name': 'x'})['message'] == 'Property not found'

    def test_listing_order(self, app, business_units):
        with app.app_context():
            db.session.get(BusinessUnit, 'biz_2').is_featured = True
            db.session.commit()
            assert [u.id for u in get_business_units()] == ['biz_2', 'biz_1']
            assert get_business_units(published_only=True) == []

    def test_listing_scoped_to_user(self, app, manager, super_admin):
        with app.app_context():
            assert [u.id for u in get_business_units(user=db.session.get(User, manager))] == ['biz_1']
            assert len(get_business_units(user=db.session.get(User, super_admin))) == 2

    def test_delete_removes_rooms_and_assignments(self, app, manager):
        with app.app_context():
            room_type = RoomType(business_unit_id='biz_1', name='Deluxe', display_name='Deluxe', base_rate=1000)
            db.session.add(room_type)
            db.session.flush()
            db.session.add(Room(business_unit_id='biz_1', room_type_id=room_type.id, room_number='101'))
            db.session.commit()

            result = delete_business_unit('biz_1')
            assert result['success']
            assert db.session.get(BusinessUnit, 'biz_1') is None
            assert Room.query.count() == 0
            assert UserBusinessUnit.query.filter_by(business_unit_id='biz_1').count() == 0
