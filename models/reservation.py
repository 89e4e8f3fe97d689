from . import db
from datetime import datetime, timezone

RESERVATION_STATUS = {
    'PENDING': 'Pending',
    'CONFIRMED': 'Confirmed',
    'CHECKED_IN': 'Checked In',
    'CHECKED_OUT': 'Checked Out',
    'CANCELLED': 'Cancelled',
    'NO_SHOW': 'No Show',
}

# Allowed status changes; terminal states have no outgoing transition
STATUS_TRANSITIONS = {
    'PENDING': {'CONFIRMED', 'CANCELLED'},
    'CONFIRMED': {'CHECKED_IN', 'CANCELLED', 'NO_SHOW'},
    'CHECKED_IN': {'CHECKED_OUT'},
    'CHECKED_OUT': set(),
    'CANCELLED': set(),
    'NO_SHOW': set(),
}

RESERVATION_SOURCES = {
    'DIRECT': 'Direct',
    'WEBSITE': 'Website',
    'PHONE': 'Phone',
    'WALK_IN': 'Walk-in',
    'OTA': 'Online Travel Agency',
    'CORPORATE': 'Corporate',
}


class Reservation(db.Model):
    __tablename__ = 'reservations'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    guest_id = db.Column(db.Integer, db.ForeignKey('guests.id'), nullable=False, index=True)
    confirmation_number = db.Column(db.String(20), unique=True, nullable=False)
    status = db.Column(db.String(20), default='PENDING', nullable=False, index=True)
    source = db.Column(db.String(20), default='DIRECT', nullable=False)

    check_in_date = db.Column(db.Date, nullable=False, index=True)
    check_out_date = db.Column(db.Date, nullable=False, index=True)
    nights = db.Column(db.Integer, nullable=False, default=1)
    adults = db.Column(db.Integer, nullable=False, default=1)
    children = db.Column(db.Integer, nullable=False, default=0)

    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    currency = db.Column(db.String(3), nullable=False, default='PHP')
    payment_status = db.Column(db.String(20), default='PENDING', nullable=False)

    special_requests = db.Column(db.Text, nullable=True)
    internal_notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.CheckConstraint('check_out_date > check_in_date', name='ck_reservation_dates'),
    )

    business_unit = db.relationship('BusinessUnit', backref=db.backref('reservations', lazy='dynamic'))
    rooms = db.relationship('ReservationRoom', backref='reservation', lazy='select', cascade='all, delete-orphan')
    payments = db.relationship('Payment', backref='reservation', lazy='select',
                               order_by='Payment.created_at.desc()', cascade='all, delete-orphan')

    @property
    def status_label(self):
        return RESERVATION_STATUS.get(self.status, self.status)

    def can_transition_to(self, new_status):
        return new_status in STATUS_TRANSITIONS.get(self.status, set())

    def __repr__(self):
        return f'<Reservation {self.confirmation_number}: {self.status}>'


class ReservationRoom(db.Model):
    __tablename__ = 'reservation_rooms'

    id = db.Column(db.Integer, primary_key=True)
    reservation_id = db.Column(db.Integer, db.ForeignKey('reservations.id'), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=True)
    room_type_id = db.Column(db.Integer, db.ForeignKey('room_types.id'), nullable=False)
    base_rate = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    room = db.relationship('Room')
    room_type = db.relationship('RoomType')

    def __repr__(self):
        return f'<ReservationRoom reservation={self.reservation_id} room={self.room_id}>'
