from . import db
from datetime import datetime, timezone
import uuid

PROPERTY_TYPES = {
    'HOTEL': 'Hotel',
    'RESORT': 'Resort',
    'VILLA_COMPLEX': 'Villa Complex',
    'APARTMENT_HOTEL': 'Apartment Hotel',
    'BOUTIQUE_HOTEL': 'Boutique Hotel',
    'HOSTEL': 'Hostel',
}


def generate_business_unit_id():
    return uuid.uuid4().hex


class BusinessUnit(db.Model):
    """A property (tenant). Every admin route is namespaced under its id."""
    __tablename__ = 'business_units'

    id = db.Column(db.String(40), primary_key=True, default=generate_business_unit_id)
    name = db.Column(db.String(100), nullable=False)
    display_name = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    property_type = db.Column(db.String(30), default='HOTEL', nullable=False)

    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(100), nullable=True)
    country = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    website = db.Column(db.String(255), nullable=True)
    short_description = db.Column(db.String(500), nullable=True)

    primary_color = db.Column(db.String(20), nullable=True)
    secondary_color = db.Column(db.String(20), nullable=True)
    logo = db.Column(db.String(255), nullable=True)

    is_active = db.Column(db.Boolean, default=True)
    is_published = db.Column(db.Boolean, default=False)
    is_featured = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    room_types = db.relationship('RoomType', backref='business_unit', lazy='dynamic', cascade='all, delete-orphan')
    rooms = db.relationship('Room', backref='business_unit', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def property_type_label(self):
        return PROPERTY_TYPES.get(self.property_type, self.property_type)

    def __repr__(self):
        return f'<BusinessUnit {self.id}: {self.name}>'
