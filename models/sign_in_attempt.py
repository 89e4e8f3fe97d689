from . import db
from datetime import datetime, timezone


def utc_now():
    # Stored naive, SQLite drops tzinfo on the way back
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SignInAttempt(db.Model):
    """Failed sign-ins for one email from one client address"""
    __tablename__ = 'sign_in_attempts'
    __table_args__ = (
        db.UniqueConstraint('email', 'ip_address', name='uq_sign_in_attempt_email_ip'),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), nullable=False, index=True)
    ip_address = db.Column(db.String(45), nullable=False)
    failures = db.Column(db.Integer, default=0, nullable=False)
    first_failed_at = db.Column(db.DateTime, default=utc_now, nullable=False)
    last_failed_at = db.Column(db.DateTime, default=utc_now, nullable=False)
    locked_until = db.Column(db.DateTime, nullable=True)

    def is_locked(self, now=None):
        now = now or utc_now()
        return self.locked_until is not None and self.locked_until > now

    def seconds_locked(self, now=None):
        now = now or utc_now()
        if not self.is_locked(now):
            return 0
        return int((self.locked_until - now).total_seconds()) + 1

    def __repr__(self):
        return f'<SignInAttempt {self.email}@{self.ip_address} failures={self.failures}>'
