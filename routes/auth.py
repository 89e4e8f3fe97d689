from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, logout_user, login_required, current_user
from models import db, User, AuditLog
from datetime import datetime, timezone
import logging

from extensions import limiter
from services.sign_in_throttle import sign_in_throttle

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def _safe_next(next_page):
    # Only same-site absolute paths; blocks //evil.example and scheme URLs
    if next_page and next_page.startswith('/') and not next_page.startswith('//') and '\\' not in next_page:
        return next_page
    return None


@auth_bp.route('/auth/sign-in', methods=['GET', 'POST'])
@limiter.limit(lambda: current_app.config.get('SIGN_IN_RATE_LIMIT', '10 per minute'), methods=['POST'])
def sign_in():
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        remember = bool(request.form.get('remember'))

        if not email or not password:
            flash('Please enter your email and password', 'danger')
            return render_template('auth/sign_in.html', email=email)

        ip_address = request.remote_addr
        if sign_in_throttle.is_locked(email, ip_address):
            logger.warning(f'Sign-in blocked for {email} from {ip_address}')
            flash(f'Too many failed attempts. Please wait {sign_in_throttle.lockout_minutes} minutes and try again.', 'danger')
            return render_template('auth/sign_in.html', email=email)

        user = User.query.filter_by(email=email).first()

        if user and user.check_password(password):
            if not user.is_active:
                flash('Your account is disabled', 'danger')
                AuditLog.log(
                    user=user,
                    action=AuditLog.ACTION_LOGIN_FAILED,
                    resource_type=AuditLog.RESOURCE_USER,
                    resource_id=user.id,
                    resource_name=user.email,
                    description='Sign-in attempt on a disabled account',
                    request=request
                )
                db.session.commit()
                return render_template('auth/sign_in.html', email=email)

            if user.is_locked():
                flash('Your account is temporarily locked. Please try again later.', 'danger')
                return render_template('auth/sign_in.html', email=email)

            login_user(user, remember=remember)
            user.last_login = datetime.now(timezone.utc)
            user.clear_failed_logins()
            sign_in_throttle.reset(email, ip_address)

            AuditLog.log(
                user=user,
                action=AuditLog.ACTION_LOGIN,
                resource_type=AuditLog.RESOURCE_USER,
                resource_id=user.id,
                resource_name=user.email,
                description=f'User {user.email} signed in',
                request=request
            )
            db.session.commit()
            logger.info(f'User {user.id} signed in')

            flash('Welcome back!', 'success')
            next_page = _safe_next(request.args.get('next'))
            if next_page:
                return redirect(next_page)
            return redirect(url_for('root.index'))

        is_locked, remaining = sign_in_throttle.register_failure(email, ip_address)
        logger.warning(f'Failed sign-in attempt for: {email}')

        if user:
            user.record_failed_login()
            AuditLog.log(
                user=user,
                action=AuditLog.ACTION_LOGIN_FAILED,
                resource_type=AuditLog.RESOURCE_USER,
                resource_id=user.id,
                resource_name=email,
                description=f'Wrong password (attempt {user.failed_login_attempts})',
                request=request
            )
            db.session.commit()

        if is_locked:
            flash(f'Too many failed attempts. Please wait {sign_in_throttle.lockout_minutes} minutes and try again.', 'danger')
        else:
            flash(f'Invalid email or password. {remaining} attempts remaining.', 'danger')

    return render_template('auth/sign_in.html', email=request.form.get('email', ''))


@auth_bp.route('/sign-out', methods=['POST'])
@login_required
def sign_out():
    AuditLog.log(
        user=current_user,
        action=AuditLog.ACTION_LOGOUT,
        resource_type=AuditLog.RESOURCE_USER,
        resource_id=current_user.id,
        resource_name=current_user.email,
        description=f'User {current_user.email} signed out',
        request=request
    )
    db.session.commit()

    logout_user()
    flash('You have been signed out', 'info')
    return redirect(url_for('auth.sign_in'))
