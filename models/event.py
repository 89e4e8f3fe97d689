from . import db
from datetime import datetime, timezone

EVENT_TYPES = {
    'WEDDING': 'Wedding',
    'CONFERENCE': 'Conference',
    'MEETING': 'Meeting',
    'WORKSHOP': 'Workshop',
    'CELEBRATION': 'Celebration',
    'CULTURAL': 'Cultural',
    'SEASONAL': 'Seasonal',
    'ENTERTAINMENT': 'Entertainment',
    'CORPORATE': 'Corporate',
    'PRIVATE': 'Private',
}

EVENT_STATUS = {
    'PLANNING': 'Planning',
    'CONFIRMED': 'Confirmed',
    'IN_PROGRESS': 'In Progress',
    'COMPLETED': 'Completed',
    'CANCELLED': 'Cancelled',
    'POSTPONED': 'Postponed',
}


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), nullable=False)
    description = db.Column(db.Text, nullable=True)
    short_desc = db.Column(db.String(300), nullable=True)
    type = db.Column(db.String(20), default='CELEBRATION', nullable=False)
    status = db.Column(db.String(20), default='PLANNING', nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.String(5), nullable=True)  # HH:MM
    end_time = db.Column(db.String(5), nullable=True)
    venue = db.Column(db.String(150), nullable=True)
    venue_capacity = db.Column(db.Integer, nullable=True)
    is_free = db.Column(db.Boolean, default=True)
    ticket_price = db.Column(db.Numeric(12, 2), nullable=True)
    currency = db.Column(db.String(3), default='PHP', nullable=False)
    requires_booking = db.Column(db.Boolean, default=False)
    max_attendees = db.Column(db.Integer, nullable=True)
    is_published = db.Column(db.Boolean, default=False)
    is_featured = db.Column(db.Boolean, default=False)
    is_pinned = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('business_unit_id', 'slug', name='uq_event_slug'),
    )

    @property
    def type_label(self):
        return EVENT_TYPES.get(self.type, self.type)

    def __repr__(self):
        return f'<Event {self.slug}>'
