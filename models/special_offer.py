from . import db
from datetime import datetime, timezone

OFFER_TYPES = {
    'ROOM_DISCOUNT': 'Room Discount',
    'PACKAGE_DEAL': 'Package Deal',
    'EARLY_BIRD': 'Early Bird',
    'LAST_MINUTE': 'Last Minute',
    'SEASONAL': 'Seasonal',
    'LOYALTY': 'Loyalty',
}

OFFER_STATUS = {
    'ACTIVE': 'Active',
    'INACTIVE': 'Inactive',
    'EXPIRED': 'Expired',
    'SCHEDULED': 'Scheduled',
}


class SpecialOffer(db.Model):
    __tablename__ = 'special_offers'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), nullable=False)
    subtitle = db.Column(db.String(300), nullable=True)
    description = db.Column(db.Text, nullable=True)
    short_desc = db.Column(db.String(300), nullable=True)
    type = db.Column(db.String(20), default='ROOM_DISCOUNT', nullable=False)
    status = db.Column(db.String(20), default='ACTIVE', nullable=False)
    offer_price = db.Column(db.Numeric(12, 2), nullable=False)
    original_price = db.Column(db.Numeric(12, 2), nullable=True)
    savings_amount = db.Column(db.Numeric(12, 2), nullable=True)
    savings_percent = db.Column(db.Integer, nullable=True)
    currency = db.Column(db.String(3), default='PHP', nullable=False)
    valid_from = db.Column(db.Date, nullable=False)
    valid_to = db.Column(db.Date, nullable=False)
    is_published = db.Column(db.Boolean, default=False)
    is_featured = db.Column(db.Boolean, default=False)
    is_pinned = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('business_unit_id', 'slug', name='uq_special_offer_slug'),
    )

    @property
    def type_label(self):
        return OFFER_TYPES.get(self.type, self.type)

    def __repr__(self):
        return f'<SpecialOffer {self.slug}>'
