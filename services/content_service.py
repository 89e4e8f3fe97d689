#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Content Service - website content managed per business unit

Hero slides, testimonials, FAQs, special offers and events.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from models import (Event, FAQ, HeroSlide, SpecialOffer, Testimonial,
                    DISPLAY_TYPES, EVENT_STATUS, EVENT_TYPES, OFFER_STATUS, OFFER_TYPES,
                    TESTIMONIAL_SOURCES, TEXT_ALIGNMENTS)
from services.crud import ScopedModelService
from services.restaurant_service import unique_slug
from utils.decimal_utils import to_decimal
from utils.forms import generate_slug

logger = logging.getLogger(__name__)


def calculate_savings(original_price, offer_price):
    """
    (savings_amount, savings_percent) when the offer undercuts the original price

    >>> calculate_savings(Decimal('5000'), Decimal('4000'))
    (Decimal('1000.00'), 20)
    """
    if original_price is None or offer_price is None:
        return None, None
    original = to_decimal(original_price)
    offer = to_decimal(offer_price)
    if original <= 0 or original <= offer:
        return None, None
    amount = to_decimal(original - offer)
    percent = int(((original - offer) / original * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    return amount, percent


class SluggedContentService(ScopedModelService):
    """Content whose slug is derived from the title and unique per business unit"""

    def _with_slug(self, business_unit_id, data, record=None):
        data = dict(data)
        source = data.get('slug') or data.get('title')
        if source:
            data['slug'] = unique_slug(self, business_unit_id, generate_slug(source), record)
        return data

    def create(self, business_unit_id, data, actor=None):
        return super().create(business_unit_id, self._with_slug(business_unit_id, data), actor)

    def update(self, business_unit_id, record_id, data, actor=None):
        record = self.get(business_unit_id, record_id)
        if record is not None:
            data = self._with_slug(business_unit_id, data, record)
        return super().update(business_unit_id, record_id, data, actor)

    def get_by_slug(self, business_unit_id, slug):
        return self.scoped_query(business_unit_id).filter(self.model.slug == slug).first()


class HeroSlideService(ScopedModelService):
    model = HeroSlide
    label = 'Hero slide'
    fields = ('title', 'subtitle', 'display_type', 'text_alignment', 'background_image',
              'show_from', 'show_until', 'is_active', 'is_featured', 'sort_order')

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        if data.get('display_type') is not None and data['display_type'] not in DISPLAY_TYPES:
            errors['display_type'] = 'Invalid display type'
        if data.get('text_alignment') is not None and data['text_alignment'] not in TEXT_ALIGNMENTS:
            errors['text_alignment'] = 'Invalid text alignment'
        opacity = data.get('overlay_opacity')
        if opacity is not None and not (0 <= opacity <= 1):
            errors['overlay_opacity'] = 'Overlay opacity must be between 0 and 1'
        if data.get('show_from') and data.get('show_until') and data['show_until'] < data['show_from']:
            errors['show_until'] = 'Show until must be on or after show from'
        return errors

    def prepare(self, data):
        if data.get('overlay_opacity') is not None:
            data['overlay_opacity'] = float(data['overlay_opacity'])
        return data


class TestimonialService(ScopedModelService):
    model = Testimonial
    label = 'Testimonial'
    fields = ('guest_name', 'guest_country', 'rating', 'source', 'is_active', 'is_featured', 'sort_order')

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        rating = data.get('rating')
        if rating is not None and not (1 <= rating <= 5):
            errors['rating'] = 'Rating must be between 1 and 5'
        if data.get('source') is not None and data['source'] not in TESTIMONIAL_SOURCES:
            errors['source'] = 'Invalid source'
        return errors


class FAQService(ScopedModelService):
    model = FAQ
    label = 'FAQ'
    fields = ('question', 'category', 'is_active', 'sort_order')

    def apply_filters(self, query, filters):
        category = filters.get('category')
        if category:
            query = query.filter(FAQ.category == category)
        return query

    def categories(self, business_unit_id):
        rows = self.scoped_query(business_unit_id).with_entities(FAQ.category).filter(
            FAQ.category.isnot(None)
        ).distinct().order_by(FAQ.category.asc()).all()
        return [row[0] for row in rows]


class SpecialOfferService(SluggedContentService):
    model = SpecialOffer
    label = 'Special offer'
    fields = ('title', 'slug', 'type', 'status', 'offer_price', 'original_price',
              'valid_from', 'valid_to', 'is_published', 'is_featured')

    def default_order(self):
        return [SpecialOffer.is_pinned.desc(), SpecialOffer.sort_order.asc(), SpecialOffer.valid_from.desc()]

    def apply_filters(self, query, filters):
        status = filters.get('status')
        if status:
            query = query.filter(SpecialOffer.status == status)
        return query

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        if data.get('type') is not None and data['type'] not in OFFER_TYPES:
            errors['type'] = 'Invalid offer type'
        if data.get('status') is not None and data['status'] not in OFFER_STATUS:
            errors['status'] = 'Invalid offer status'
        offer_price = data.get('offer_price')
        if offer_price is not None and offer_price < 0:
            errors['offer_price'] = 'Offer price cannot be negative'
        if data.get('valid_from') and data.get('valid_to') and data['valid_to'] < data['valid_from']:
            errors['valid_to'] = 'Valid to must be on or after valid from'
        return errors

    def prepare(self, data):
        if 'offer_price' in data or 'original_price' in data:
            data['savings_amount'], data['savings_percent'] = calculate_savings(
                data.get('original_price'), data.get('offer_price')
            )
        return data


class EventService(SluggedContentService):
    model = Event
    label = 'Event'
    fields = ('title', 'slug', 'type', 'status', 'start_date', 'end_date', 'venue',
              'is_free', 'ticket_price', 'is_published', 'is_featured')

    def default_order(self):
        return [Event.is_pinned.desc(), Event.start_date.asc(), Event.sort_order.asc()]

    def apply_filters(self, query, filters):
        status = filters.get('status')
        if status:
            query = query.filter(Event.status == status)
        upcoming_from = filters.get('upcoming_from')
        if upcoming_from:
            query = query.filter(Event.end_date >= upcoming_from)
        return query

    def validate(self, business_unit_id, data, record=None):
        errors = {}
        if data.get('type') is not None and data['type'] not in EVENT_TYPES:
            errors['type'] = 'Invalid event type'
        if data.get('status') is not None and data['status'] not in EVENT_STATUS:
            errors['status'] = 'Invalid event status'
        if data.get('start_date') and data.get('end_date') and data['end_date'] < data['start_date']:
            errors['end_date'] = 'End date must be on or after start date'
        if not data.get('is_free', True) and data.get('ticket_price') is None:
            errors['ticket_price'] = 'Ticket price is required for paid events'
        if data.get('ticket_price') is not None and data['ticket_price'] < 0:
            errors['ticket_price'] = 'Ticket price cannot be negative'
        return errors

    def prepare(self, data):
        if data.get('is_free'):
            data['ticket_price'] = None
        return data


hero_slide_service = HeroSlideService()
testimonial_service = TestimonialService()
faq_service = FAQService()
special_offer_service = SpecialOfferService()
event_service = EventService()
