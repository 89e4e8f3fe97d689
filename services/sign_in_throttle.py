"""
Sign-in Throttle
Locks an email/address pair after repeated failed sign-ins

Counts live in the database so every worker process sees the same lock.
Limits come from MAX_LOGIN_ATTEMPTS and LOGIN_LOCKOUT_DURATION (seconds).
"""
import logging
from datetime import timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.sign_in_attempt import SignInAttempt, utc_now

logger = logging.getLogger(__name__)


class SignInThrottle:

    def __init__(self, max_attempts=None, lockout_seconds=None):
        self._max_attempts = max_attempts
        self._lockout_seconds = lockout_seconds

    @property
    def max_attempts(self):
        if self._max_attempts is not None:
            return self._max_attempts
        return current_app.config.get('MAX_LOGIN_ATTEMPTS', 5)

    @property
    def lockout_seconds(self):
        if self._lockout_seconds is not None:
            return self._lockout_seconds
        return current_app.config.get('LOGIN_LOCKOUT_DURATION', 300)

    @property
    def lockout_minutes(self):
        return max(1, -(-self.lockout_seconds // 60))

    def _find(self, email, ip_address):
        return SignInAttempt.query.filter_by(email=email, ip_address=ip_address or 'unknown').first()

    def is_locked(self, email, ip_address):
        attempt = self._find(email, ip_address)
        return attempt is not None and attempt.is_locked()

    def register_failure(self, email, ip_address):
        """
        Count one failed sign-in

        Failures older than the lockout window no longer count, and an
        expired lock starts a fresh run.

        Returns:
            (is_locked, attempts_remaining)
        """
        now = utc_now()
        window = timedelta(seconds=self.lockout_seconds)
        attempt = self._find(email, ip_address)

        if attempt is None:
            attempt = SignInAttempt(email=email, ip_address=ip_address or 'unknown',
                                    failures=0, first_failed_at=now)
            db.session.add(attempt)
        elif (attempt.locked_until is not None and attempt.locked_until <= now) or \
                (attempt.locked_until is None and now - attempt.last_failed_at > window):
            attempt.failures = 0
            attempt.first_failed_at = now
            attempt.locked_until = None

        attempt.failures += 1
        attempt.last_failed_at = now
        if attempt.failures >= self.max_attempts:
            attempt.locked_until = now + window
            logger.warning(f'Sign-in locked for {email} from {ip_address} after {attempt.failures} failures')

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Could not record failed sign-in for {email}: {e}')
            return False, self.max_attempts

        return attempt.is_locked(now), max(0, self.max_attempts - attempt.failures)

    def reset(self, email, ip_address):
        """Forget failures after a successful sign-in"""
        SignInAttempt.query.filter_by(email=email, ip_address=ip_address or 'unknown').delete()


sign_in_throttle = SignInThrottle()
