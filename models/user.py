from . import db
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from datetime import datetime, timedelta, timezone


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    last_login = db.Column(db.DateTime, nullable=True)

    # Password Security
    password_changed_at = db.Column(db.DateTime, nullable=True)

    # Security tracking
    failed_login_attempts = db.Column(db.Integer, default=0)
    locked_until = db.Column(db.DateTime, nullable=True)
    last_failed_login = db.Column(db.DateTime, nullable=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)
        self.password_changed_at = datetime.now(timezone.utc)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    # Account lockout methods
    def is_locked(self):
        """Check if account is locked"""
        if self.locked_until:
            # Handle both naive and aware datetimes
            now = datetime.now(timezone.utc)
            locked_until = self.locked_until
            if locked_until.tzinfo is None:
                locked_until = locked_until.replace(tzinfo=timezone.utc)
            if locked_until > now:
                return True
        return False

    def record_failed_login(self):
        """
        Record a failed login attempt and lock the account once the
        configured number of attempts is reached
        """
        self.failed_login_attempts = (self.failed_login_attempts or 0) + 1
        self.last_failed_login = datetime.now(timezone.utc)

        try:
            from flask import current_app
            max_attempts = current_app.config.get('MAX_LOGIN_ATTEMPTS', 5)
            lockout_seconds = current_app.config.get('LOGIN_LOCKOUT_DURATION', 300)
        except RuntimeError:
            # Outside app context, use defaults
            max_attempts = 5
            lockout_seconds = 300

        if self.failed_login_attempts >= max_attempts:
            # Super admins get a longer lock on repeated failures
            if self.is_super_admin():
                multiplier = min(self.failed_login_attempts - max_attempts + 1, 10)
                lockout_seconds = lockout_seconds * multiplier
            self.locked_until = datetime.now(timezone.utc) + timedelta(seconds=lockout_seconds)

    def clear_failed_logins(self):
        """Clear failed login attempts on successful login"""
        self.failed_login_attempts = 0
        self.locked_until = None
        self.last_failed_login = None

    # Business unit assignments
    def ordered_assignments(self):
        """
        Assignments in their canonical order: oldest grant first, id as tie-breaker.
        The first one is the user's default business unit.
        """
        from .user_business_unit import UserBusinessUnit
        return (UserBusinessUnit.query
                .filter_by(user_id=self.id)
                .order_by(UserBusinessUnit.created_at.asc(), UserBusinessUnit.id.asc())
                .all())

    def is_super_admin(self):
        from .user_business_unit import UserBusinessUnit
        if self.id is None:
            return False
        return UserBusinessUnit.query.filter_by(user_id=self.id, role='SUPER_ADMIN').first() is not None

    @property
    def display_name(self):
        return self.name or self.email

    def __repr__(self):
        return f'<User {self.email}>'
