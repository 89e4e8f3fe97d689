from . import db
from datetime import datetime, timezone

TESTIMONIAL_SOURCES = ('direct', 'google', 'tripadvisor', 'booking', 'facebook', 'other')


class Testimonial(db.Model):
    __tablename__ = 'testimonials'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    guest_name = db.Column(db.String(120), nullable=False)
    guest_title = db.Column(db.String(120), nullable=True)
    guest_country = db.Column(db.String(80), nullable=True)
    guest_image = db.Column(db.String(255), nullable=True)
    content = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, nullable=True)
    source = db.Column(db.String(40), default='direct')
    source_url = db.Column(db.String(255), nullable=True)
    stay_date = db.Column(db.Date, nullable=True)
    review_date = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    is_featured = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_testimonial_rating'),
    )

    def __repr__(self):
        return f'<Testimonial {self.guest_name}>'
