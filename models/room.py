from . import db
from datetime import datetime, timezone

ROOM_STATUS = {
    'AVAILABLE': 'Available',
    'OCCUPIED': 'Occupied',
    'MAINTENANCE': 'Maintenance',
    'OUT_OF_ORDER': 'Out of Order',
    'CLEANING': 'Cleaning',
    'RESERVED': 'Reserved',
}


class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    room_type_id = db.Column(db.Integer, db.ForeignKey('room_types.id'), nullable=False, index=True)
    room_number = db.Column(db.String(20), nullable=False)
    floor = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(20), default='AVAILABLE', nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('business_unit_id', 'room_number', name='uq_room_number'),
    )

    @property
    def status_label(self):
        return ROOM_STATUS.get(self.status, self.status)

    def __repr__(self):
        return f'<Room {self.room_number} unit={self.business_unit_id}>'
