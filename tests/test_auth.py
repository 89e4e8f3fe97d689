#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Sign-in, sign-out and brute force protection
"""
from datetime import timedelta

from models import db, AuditLog, SignInAttempt, User
from models.sign_in_attempt import utc_now
from services.sign_in_throttle import SignInThrottle, sign_in_throttle


class TestSignIn:
    """POST /auth/sign-in"""

    def test_valid_credentials_redirect_to_root(self, client, manager, login):
        response = login(client, 'manager@hotel.com')
        assert response.status_code == 302
        assert response.headers['Location'] == '/'

    def test_email_is_case_insensitive(self, client, manager, login):
        response = login(client, '  Manager@Hotel.com ')
        assert response.headers['Location'] == '/'

    def test_wrong_password_stays_on_form(self, client, manager, login):
        response = login(client, 'manager@hotel.com', 'wrong-password')
        assert response.status_code == 200
        assert b'Invalid email or password' in response.data
        assert client.get('/biz_1/admin').headers['Location'] == '/auth/sign-in'

    def test_unknown_user(self, client, login):
        response = login(client, 'ghost@hotel.com')
        assert response.status_code == 200
        assert b'Invalid email or password' in response.data

    def test_missing_fields(self, client):
        response = client.post('/auth/sign-in', data={'email': '', 'password': ''})
        assert response.status_code == 200
        assert b'Please enter your email and password' in response.data

    def test_disabled_account(self, client, make_user, business_units, login):
        make_user('disabled@hotel.com', [('biz_1', 'STAFF')], is_active=False)
        response = login(client, 'disabled@hotel.com')
        assert response.status_code == 200
        assert b'Your account is disabled' in response.data

    def test_safe_next_is_followed(self, client, manager, login):
        response = login(client, 'manager@hotel.com', next='/biz_1/admin/operations/rooms')
        assert response.headers['Location'] == '/biz_1/admin/operations/rooms'

    def test_external_next_is_ignored(self, client, manager, login):
        for target in ('https://evil.example/', '//evil.example/', '/\\evil.example'):
            client.post('/sign-out')
            response = login(client, 'manager@hotel.com', next=target)
            assert response.headers['Location'] == '/', target

    def test_successful_sign_in_is_audited(self, app, client, manager, login):
        login(client, 'manager@hotel.com')
        with app.app_context():
            entry = AuditLog.query.filter_by(user_id=manager, action=AuditLog.ACTION_LOGIN).first()
            assert entry is not None
            assert db.session.get(User, manager).last_login is not None


class TestLockout:
    """Repeated failures lock the email/address pair and the account"""

    def test_identifier_locked_after_max_attempts(self, app, client, manager, login):
        app.config['MAX_LOGIN_ATTEMPTS'] = 3
        for _ in range(3):
            login(client, 'manager@hotel.com', 'wrong-password')

        response = login(client, 'manager@hotel.com')
        assert response.status_code == 200
        assert b'Too many failed attempts' in response.data
        with app.app_context():
            assert sign_in_throttle.is_locked('manager@hotel.com', '127.0.0.1')

    def test_account_locked_after_max_attempts(self, app, manager):
        with app.app_context():
            user = db.session.get(User, manager)
            for _ in range(app.config['MAX_LOGIN_ATTEMPTS']):
                user.record_failed_login()
            assert user.is_locked()
            user.clear_failed_logins()
            assert not user.is_locked()
            assert user.failed_login_attempts == 0

    def test_success_clears_attempts(self, app, client, manager, login):
        login(client, 'manager@hotel.com', 'wrong-password')
        login(client, 'manager@hotel.com')
        with app.app_context():
            assert SignInAttempt.query.filter_by(email='manager@hotel.com').count() == 0


class TestSignInThrottle:
    """Failure counting per email and client address"""

    def test_locks_at_max_attempts(self, app):
        throttle = SignInThrottle(max_attempts=3, lockout_seconds=120)
        with app.app_context():
            assert throttle.register_failure('a@hotel.com', '10.0.0.1') == (False, 2)
            assert throttle.register_failure('a@hotel.com', '10.0.0.1') == (False, 1)
            assert throttle.register_failure('a@hotel.com', '10.0.0.1') == (True, 0)
            assert throttle.is_locked('a@hotel.com', '10.0.0.1')
            assert not throttle.is_locked('a@hotel.com', '10.0.0.2')
            assert throttle.lockout_minutes == 2

    def test_expired_lock_starts_fresh(self, app):
        throttle = SignInThrottle(max_attempts=2, lockout_seconds=60)
        with app.app_context():
            throttle.register_failure('a@hotel.com', '10.0.0.1')
            throttle.register_failure('a@hotel.com', '10.0.0.1')
            attempt = SignInAttempt.query.one()
            attempt.locked_until = utc_now() - timedelta(seconds=1)
            db.session.commit()

            assert not throttle.is_locked('a@hotel.com', '10.0.0.1')
            assert throttle.register_failure('a@hotel.com', '10.0.0.1') == (False, 1)

    def test_old_failures_stop_counting(self, app):
        throttle = SignInThrottle(max_attempts=2, lockout_seconds=60)
        with app.app_context():
            throttle.register_failure('a@hotel.com', '10.0.0.1')
            attempt = SignInAttempt.query.one()
            attempt.last_failed_at = utc_now() - timedelta(minutes=5)
            db.session.commit()

            assert throttle.register_failure('a@hotel.com', '10.0.0.1') == (False, 1)
            assert SignInAttempt.query.one().failures == 1

    def test_reads_limits_from_config(self, app):
        app.config['MAX_LOGIN_ATTEMPTS'] = 4
        app.config['LOGIN_LOCKOUT_DURATION'] = 90
        with app.app_context():
            assert sign_in_throttle.max_attempts == 4
            assert sign_in_throttle.lockout_minutes == 2


class TestSignOut:
    """POST /sign-out"""

    def test_sign_out_ends_session(self, client, manager, login):
        login(client, 'manager@hotel.com')
        response = client.post('/sign-out')
        assert response.headers['Location'] == '/auth/sign-in'
        assert client.get('/biz_1/admin').headers['Location'] == '/auth/sign-in'

    def test_sign_out_is_post_only(self, client, manager, login):
        login(client, 'manager@hotel.com')
        assert client.get('/sign-out').status_code == 405

    def test_sign_in_page_reachable_after_sign_out(self, client, manager, login):
        login(client, 'manager@hotel.com')
        client.post('/sign-out')
        assert client.get('/auth/sign-in').status_code == 200
