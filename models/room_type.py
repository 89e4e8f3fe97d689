from . import db
from datetime import datetime, timezone

ROOM_CATEGORIES = {
    'STANDARD': 'Standard',
    'DELUXE': 'Deluxe',
    'SUITE': 'Suite',
    'VILLA': 'Villa',
    'PENTHOUSE': 'Penthouse',
    'FAMILY': 'Family',
    'ACCESSIBLE': 'Accessible',
}


class RoomType(db.Model):
    __tablename__ = 'room_types'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    display_name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(20), default='STANDARD', nullable=False)

    # Occupancy
    max_occupancy = db.Column(db.Integer, default=2, nullable=False)
    max_adults = db.Column(db.Integer, default=2, nullable=False)
    max_children = db.Column(db.Integer, default=0, nullable=False)
    max_infants = db.Column(db.Integer, default=0, nullable=False)
    bed_configuration = db.Column(db.String(100), nullable=True)
    room_size = db.Column(db.Numeric(8, 2), nullable=True)  # square meters

    # Features
    has_balcony = db.Column(db.Boolean, default=False)
    has_ocean_view = db.Column(db.Boolean, default=False)
    has_pool_view = db.Column(db.Boolean, default=False)
    has_kitchenette = db.Column(db.Boolean, default=False)
    has_living_area = db.Column(db.Boolean, default=False)
    smoking_allowed = db.Column(db.Boolean, default=False)
    pet_friendly = db.Column(db.Boolean, default=False)
    is_accessible = db.Column(db.Boolean, default=False)

    # Rates
    base_rate = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    extra_person_rate = db.Column(db.Numeric(12, 2), nullable=True)
    extra_child_rate = db.Column(db.Numeric(12, 2), nullable=True)

    floor_plan = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('business_unit_id', 'name', name='uq_room_type_name'),
        db.CheckConstraint('base_rate >= 0', name='ck_room_type_rate_non_negative'),
    )

    rooms = db.relationship('Room', backref='room_type', lazy='dynamic')

    @property
    def type_label(self):
        return ROOM_CATEGORIES.get(self.type, self.type)

    def __repr__(self):
        return f'<RoomType {self.name} unit={self.business_unit_id}>'
