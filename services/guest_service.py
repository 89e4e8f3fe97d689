"""
Guest Service
"""
from sqlalchemy import or_

from models import AuditLog, Guest
from services.crud import ScopedModelService


class GuestService(ScopedModelService):
    model = Guest
    label = 'Guest'
    resource_type = AuditLog.RESOURCE_GUEST
    fields = ('first_name', 'last_name', 'email', 'phone', 'country', 'vip_status', 'marketing_opt_in')

    def default_order(self):
        return [Guest.last_name.asc(), Guest.first_name.asc()]

    def apply_filters(self, query, filters):
        search = (filters.get('search') or '').strip()
        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                Guest.first_name.ilike(pattern),
                Guest.last_name.ilike(pattern),
                Guest.email.ilike(pattern),
                Guest.phone.ilike(pattern),
            ))
        if filters.get('vip_only'):
            query = query.filter(Guest.vip_status == True)
        return query

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        email = data.get('email')
        if email:
            if '@' not in email:
                errors['email'] = 'Enter a valid email address'
            else:
                query = self.scoped_query(business_unit_id).filter(Guest.email == email.lower())
                if record is not None:
                    query = query.filter(Guest.id != record.id)
                if query.first():
                    errors['email'] = 'A guest with this email already exists'
        return errors

    def prepare(self, data):
        if data.get('email'):
            data['email'] = data['email'].lower()
        return data

    def display_name(self, record):
        return record.full_name

    def delete_blocked_reason(self, record):
        if record.reservations.count() > 0:
            return 'Guest has reservations and cannot be deleted'
        return None


guest_service = GuestService()
