from . import db
from datetime import datetime, timezone

# Role hierarchy inside a business unit: SUPER_ADMIN > ADMIN > MANAGER > STAFF
ROLE_LEVELS = {
    'SUPER_ADMIN': 4,   # Every business unit, can create/delete units
    'ADMIN': 3,         # Full access to the unit, can delete records
    'MANAGER': 2,       # Create and edit records
    'STAFF': 1          # Read access
}

ASSIGNMENT_ROLES = list(ROLE_LEVELS.keys())

ROLE_LABELS = {
    'SUPER_ADMIN': 'Super Administrator',
    'ADMIN': 'Administrator',
    'MANAGER': 'Manager',
    'STAFF': 'Staff'
}


class UserBusinessUnit(db.Model):
    """Assignment of a user to a business unit with a role"""
    __tablename__ = 'user_business_units'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    role = db.Column(db.String(20), default='STAFF', nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'business_unit_id', name='uq_user_business_unit'),
    )

    # Relationships
    user = db.relationship('User', foreign_keys=[user_id], backref=db.backref('assignments', lazy='dynamic'))
    business_unit = db.relationship('BusinessUnit', backref=db.backref('user_assignments', cascade='all, delete-orphan'))
    created_by = db.relationship('User', foreign_keys=[created_by_id])

    @property
    def role_label(self):
        return ROLE_LABELS.get(self.role, self.role)

    def has_role(self, role):
        """Check if this assignment grants at least the specified role level"""
        return ROLE_LEVELS.get(self.role, 0) >= ROLE_LEVELS.get(role, 0)

    def __repr__(self):
        return f'<UserBusinessUnit user={self.user_id} unit={self.business_unit_id} role={self.role}>'
