from . import db
from datetime import datetime, timezone

RESTAURANT_TYPES = {
    'FINE_DINING': 'Fine Dining',
    'CASUAL_DINING': 'Casual Dining',
    'CAFE': 'Cafe',
    'BAR': 'Bar',
    'BUFFET': 'Buffet',
    'ROOM_SERVICE': 'Room Service',
}


class Restaurant(db.Model):
    __tablename__ = 'restaurants'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(140), nullable=False)
    type = db.Column(db.String(20), default='CASUAL_DINING', nullable=False)
    description = db.Column(db.Text, nullable=True)
    short_desc = db.Column(db.String(300), nullable=True)
    location = db.Column(db.String(150), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    cuisine = db.Column(db.String(200), nullable=True)  # comma separated
    operating_hours = db.Column(db.String(200), nullable=True)
    total_seats = db.Column(db.Integer, nullable=True)
    price_range = db.Column(db.String(10), nullable=True)
    accepts_reservations = db.Column(db.Boolean, default=True)
    is_active = db.Column(db.Boolean, default=True)
    is_published = db.Column(db.Boolean, default=False)
    is_featured = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('business_unit_id', 'slug', name='uq_restaurant_slug'),
    )

    @property
    def type_label(self):
        return RESTAURANT_TYPES.get(self.type, self.type)

    def __repr__(self):
        return f'<Restaurant {self.name}>'
