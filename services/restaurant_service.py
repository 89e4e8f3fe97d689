"""
Restaurant Service
"""
from models import AuditLog, Restaurant, RESTAURANT_TYPES
from services.crud import ScopedModelService
from utils.forms import generate_slug


def unique_slug(service, business_unit_id, base, record=None):
    """base, base-2, base-3 ... first one free within the business unit"""
    base = base or 'item'
    candidate = base
    suffix = 2
    while True:
        query = service.scoped_query(business_unit_id).filter(service.model.slug == candidate)
        if record is not None:
            query = query.filter(service.model.id != record.id)
        if not query.first():
            return candidate
        candidate = f'{base}-{suffix}'
        suffix += 1


class RestaurantService(ScopedModelService):
    model = Restaurant
    label = 'Restaurant'
    resource_type = AuditLog.RESOURCE_RESTAURANT
    fields = ('name', 'slug', 'type', 'location', 'cuisine', 'total_seats', 'is_active', 'is_published', 'is_featured')

    def default_order(self):
        return [Restaurant.sort_order.asc(), Restaurant.name.asc()]

    def apply_filters(self, query, filters):
        if filters.get('published_only'):
            query = query.filter(Restaurant.is_published == True, Restaurant.is_active == True)
        return query

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        restaurant_type = data.get('type')
        if restaurant_type is not None and restaurant_type not in RESTAURANT_TYPES:
            errors['type'] = 'Invalid restaurant type'
        total_seats = data.get('total_seats')
        if total_seats is not None and total_seats < 0:
            errors['total_seats'] = 'Total seats cannot be negative'
        return errors

    def create(self, business_unit_id, data, actor=None):
        data = dict(data)
        data['slug'] = unique_slug(self, business_unit_id, generate_slug(data.get('slug') or data.get('name')))
        return super().create(business_unit_id, data, actor)

    def update(self, business_unit_id, record_id, data, actor=None):
        data = dict(data)
        record = self.get(business_unit_id, record_id)
        if record is not None and (data.get('slug') or data.get('name')):
            data['slug'] = unique_slug(self, business_unit_id,
                                       generate_slug(data.get('slug') or data.get('name')), record)
        return super().update(business_unit_id, record_id, data, actor)


restaurant_service = RestaurantService()
