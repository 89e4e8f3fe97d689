"""
Room Service - room types and rooms of a business unit
"""
import logging

from sqlalchemy import func

from models import db, AuditLog, ReservationRoom, Room, RoomType, ROOM_STATUS
from services.crud import ScopedModelService

logger = logging.getLogger(__name__)


class RoomTypeService(ScopedModelService):
    model = RoomType
    label = 'Room type'
    resource_type = AuditLog.RESOURCE_ROOM_TYPE
    fields = (
        'name', 'display_name', 'type', 'max_occupancy', 'max_adults', 'max_children',
        'max_infants', 'base_rate', 'extra_person_rate', 'extra_child_rate', 'is_active', 'sort_order',
    )

    def default_order(self):
        return [RoomType.sort_order.asc(), RoomType.name.asc()]

    def apply_filters(self, query, filters):
        if filters.get('active_only'):
            query = query.filter(RoomType.is_active == True)
        return query

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        name = data.get('name')
        if name:
            query = self.scoped_query(business_unit_id).filter(RoomType.name == name)
            if record is not None:
                query = query.filter(RoomType.id != record.id)
            if query.first():
                errors['name'] = 'A room type with this name already exists'

        max_occupancy = data.get('max_occupancy')
        max_adults = data.get('max_adults')
        if max_occupancy is not None and max_adults is not None and max_adults > max_occupancy:
            errors['max_adults'] = 'Maximum adults cannot exceed maximum occupancy'
        if max_occupancy is not None and max_occupancy < 1:
            errors['max_occupancy'] = 'Maximum occupancy must be at least 1'
        return errors

    def prepare(self, data):
        if not data.get('display_name') and data.get('name'):
            data['display_name'] = data['name']
        return data

    def delete_blocked_reason(self, record):
        if record.rooms.count() > 0:
            return 'Room type still has rooms assigned and cannot be deleted'
        if ReservationRoom.query.filter_by(room_type_id=record.id).first() is not None:
            return 'Room type is used by reservations and cannot be deleted'
        return None

    def room_counts(self, business_unit_id):
        """{room_type_id: number of rooms}"""
        rows = db.session.query(Room.room_type_id, func.count(Room.id)).filter(
            Room.business_unit_id == business_unit_id
        ).group_by(Room.room_type_id).all()
        return dict(rows)


class RoomService(ScopedModelService):
    model = Room
    label = 'Room'
    resource_type = AuditLog.RESOURCE_ROOM
    fields = ('room_number', 'floor', 'status', 'room_type_id', 'is_active', 'notes')

    def default_order(self):
        return [Room.floor.asc(), Room.room_number.asc()]

    def apply_filters(self, query, filters):
        status = filters.get('status')
        if status:
            query = query.filter(Room.status == status)
        room_type_id = filters.get('room_type_id')
        if room_type_id:
            query = query.filter(Room.room_type_id == room_type_id)
        return query

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        room_number = data.get('room_number')
        if room_number:
            query = self.scoped_query(business_unit_id).filter(Room.room_number == room_number)
            if record is not None:
                query = query.filter(Room.id != record.id)
            if query.first():
                errors['room_number'] = 'This room number is already used in this property'

        room_type_id = data.get('room_type_id')
        if room_type_id is not None:
            room_type = RoomType.query.filter_by(id=room_type_id, business_unit_id=business_unit_id).first()
            if room_type is None:
                errors['room_type_id'] = 'Select a room type of this property'

        status = data.get('status')
        if status is not None and status not in ROOM_STATUS:
            errors['status'] = 'Invalid room status'
        return errors

    def status_counts(self, business_unit_id):
        """{status: count} including zero entries for every status"""
        counts = dict.fromkeys(ROOM_STATUS, 0)
        rows = db.session.query(Room.status, func.count(Room.id)).filter(
            Room.business_unit_id == business_unit_id
        ).group_by(Room.status).all()
        counts.update(dict(rows))
        return counts

    def delete_blocked_reason(self, record):
        if ReservationRoom.query.filter_by(room_id=record.id).first() is not None:
            return 'Room is used by reservations and cannot be deleted'
        return None


room_type_service = RoomTypeService()
room_service = RoomService()
