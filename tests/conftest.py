#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Shared pytest fixtures

The app fixture does not keep an application context pushed, so every test
client request gets a fresh `g` (Flask-Login caches the user there).
Tests open `with app.app_context():` around direct database work.
"""
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from config import Config
from models import db as _db, BusinessUnit, User, UserBusinessUnit

TEST_PASSWORD = 'password123'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False


@pytest.fixture
def app():
    application = create_app(TestingConfig)
    with application.app_context():
        _db.create_all()
    yield application
    with application.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def business_units(app):
    """Two properties with fixed ids: biz_1 and biz_2"""
    with app.app_context():
        for unit_id, name, city in (('biz_1', 'Tropicana Resort', 'Puerto Galera'),
                                    ('biz_2', 'Mountain Lodge', 'Baguio')):
            _db.session.add(BusinessUnit(
                id=unit_id, name=name, display_name=name, slug=unit_id.replace('_', '-'),
                city=city, country='Philippines',
            ))
        _db.session.commit()
    return 'biz_1', 'biz_2'


@pytest.fixture
def make_user(app):
    """
    Factory: make_user(email, [(business_unit_id, role), ...]) -> user id

    Assignments get increasing created_at values in the order given.
    """
    def _make_user(email, assignments=(), password=TEST_PASSWORD, is_active=True):
        with app.app_context():
            user = User(email=email, name=email.split('@')[0], is_active=is_active)
            user.set_password(password)
            _db.session.add(user)
            _db.session.flush()
            granted_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
            for position, (business_unit_id, role) in enumerate(assignments):
                _db.session.add(UserBusinessUnit(
                    user_id=user.id,
                    business_unit_id=business_unit_id,
                    role=role,
                    created_at=granted_at + timedelta(minutes=position),
                ))
            _db.session.commit()
            return user.id
    return _make_user


@pytest.fixture
def manager(make_user, business_units):
    return make_user('manager@hotel.com', [('biz_1', 'MANAGER')])


@pytest.fixture
def newcomer(make_user):
    return make_user('newcomer@hotel.com')


@pytest.fixture
def super_admin(make_user, business_units):
    return make_user('superadmin@hotel.com', [('biz_1', 'SUPER_ADMIN')])


def sign_in(client, email, password=TEST_PASSWORD, **query):
    return client.post('/auth/sign-in', query_string=query,
                       data={'email': email, 'password': password})


@pytest.fixture
def login():
    return sign_in
