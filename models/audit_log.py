from . import db
from datetime import datetime, timezone
from urllib.parse import urlparse, parse_qs, urlencode
import json


class AuditLog(db.Model):
    """
    Audit Log Model - Records user activity in the back office
    Used by administrators to track changes and sign-ins per business unit
    """
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)

    # Who performed the action
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    user_email = db.Column(db.String(120), nullable=False)  # Stored for historical reference

    # Where (tenant scope), empty for sign-in/out
    business_unit_id = db.Column(db.String(40), nullable=True, index=True)

    # What action was performed
    action = db.Column(db.String(50), nullable=False)

    # On what resource
    resource_type = db.Column(db.String(50), nullable=False)
    resource_id = db.Column(db.String(40), nullable=True)
    resource_name = db.Column(db.String(200), nullable=True)

    # Details of the change
    old_values = db.Column(db.Text, nullable=True)  # JSON string of old values
    new_values = db.Column(db.Text, nullable=True)  # JSON string of new values
    description = db.Column(db.Text, nullable=True)

    # Request metadata
    ip_address = db.Column(db.String(50), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    user = db.relationship('User', backref=db.backref('audit_logs', lazy='dynamic'))

    # Action types constants
    ACTION_CREATE = 'create'
    ACTION_UPDATE = 'update'
    ACTION_DELETE = 'delete'
    ACTION_LOGIN = 'login'
    ACTION_LOGOUT = 'logout'
    ACTION_LOGIN_FAILED = 'login_failed'
    ACTION_STATUS_CHANGE = 'status_change'

    # Resource types constants
    RESOURCE_USER = 'user'
    RESOURCE_BUSINESS_UNIT = 'business_unit'
    RESOURCE_ROOM_TYPE = 'room_type'
    RESOURCE_ROOM = 'room'
    RESOURCE_GUEST = 'guest'
    RESOURCE_RESERVATION = 'reservation'
    RESOURCE_PAYMENT = 'payment'
    RESOURCE_RESTAURANT = 'restaurant'
    RESOURCE_CONTENT = 'content'

    ACTION_LABELS = {
        'create': 'Created',
        'update': 'Updated',
        'delete': 'Deleted',
        'login': 'Signed in',
        'logout': 'Signed out',
        'login_failed': 'Failed sign-in',
        'status_change': 'Status changed'
    }

    @property
    def action_label(self):
        return self.ACTION_LABELS.get(self.action, self.action)

    @classmethod
    def log(cls, user, action, resource_type, resource_id=None, resource_name=None,
            old_values=None, new_values=None, description=None, request=None,
            business_unit_id=None):
        """
        Create a new audit log entry

        Args:
            user: Acting user (None for system actions)
            action: Action type (create, update, delete, etc.)
            resource_type: Type of resource (room, guest, reservation, etc.)
            resource_id: ID of the affected resource
            resource_name: Human readable name of the resource
            old_values: Dict of old values (stored as JSON)
            new_values: Dict of new values (stored as JSON)
            description: Human readable description
            request: Flask request object for IP and user agent
            business_unit_id: Business unit the action happened in
        """
        log_entry = cls(
            user_id=user.id if user else None,
            user_email=user.email if user else 'system',
            business_unit_id=business_unit_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            resource_name=resource_name,
            old_values=json.dumps(old_values, ensure_ascii=False, default=str) if old_values else None,
            new_values=json.dumps(new_values, ensure_ascii=False, default=str) if new_values else None,
            description=description
        )

        if request:
            log_entry.ip_address = request.remote_addr
            log_entry.user_agent = request.user_agent.string[:500] if request.user_agent else None
            if request.url:
                sanitized_url = cls._sanitize_request_url(request.url)
                if description:
                    log_entry.description = f"{description} | URL: {sanitized_url}"
                else:
                    log_entry.description = f"URL: {sanitized_url}"

        db.session.add(log_entry)
        # Commit is done by the calling code

        return log_entry

    @staticmethod
    def _sanitize_request_url(url):
        """Remove sensitive query parameters from URLs before logging."""
        parsed = urlparse(url)
        query_params = parse_qs(parsed.query)

        sensitive_keys = {'password', 'token', 'api_key', 'secret'}
        for key in list(query_params.keys()):
            if key.lower() in sensitive_keys:
                query_params.pop(key, None)

        sanitized_query = urlencode(query_params, doseq=True)
        return parsed._replace(query=sanitized_query).geturl()

    def get_old_values_dict(self):
        if self.old_values:
            try:
                return json.loads(self.old_values)
            except (json.JSONDecodeError, TypeError):
                return {}
        return {}

    def get_new_values_dict(self):
        if self.new_values:
            try:
                return json.loads(self.new_values)
            except (json.JSONDecodeError, TypeError):
                return {}
        return {}

    def __repr__(self):
        return f'<AuditLog {self.action} {self.resource_type} by {self.user_email}>'
