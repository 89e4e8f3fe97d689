from . import db
from datetime import datetime, timezone


class Guest(db.Model):
    __tablename__ = 'guests'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    title = db.Column(db.String(10), nullable=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)
    nationality = db.Column(db.String(80), nullable=True)
    country = db.Column(db.String(80), nullable=True)
    city = db.Column(db.String(80), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    passport_number = db.Column(db.String(40), nullable=True)
    id_type = db.Column(db.String(40), nullable=True)
    id_number = db.Column(db.String(40), nullable=True)
    loyalty_number = db.Column(db.String(40), nullable=True)
    vip_status = db.Column(db.Boolean, default=False)
    marketing_opt_in = db.Column(db.Boolean, default=False)
    source = db.Column(db.String(40), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('business_unit_id', 'email', name='uq_guest_email'),
    )

    reservations = db.relationship('Reservation', backref='guest', lazy='dynamic')

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def __repr__(self):
        return f'<Guest {self.email}>'
