#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Website content: offers, events, hero slides, testimonials, FAQs
"""
from datetime import date
from decimal import Decimal

import pytest

from models import db, FAQ, SpecialOffer
from services.content_service import (
    calculate_savings, special_offer_service, event_service, hero_slide_service,
    testimonial_service, faq_service,
)


class TestSavings:
    """Offer savings against the original price"""

    @pytest.mark.parametrize('original,offer,expected', [
        (Decimal('5000'), Decimal('4000'), (Decimal('1000.00'), 20)),
        (Decimal('4500'), Decimal('3600'), (Decimal('900.00'), 20)),
        (Decimal('3000'), Decimal('1999.99'), (Decimal('1000.01'), 33)),
        (Decimal('100'), Decimal('100'), (None, None)),
        (Decimal('100'), Decimal('150'), (None, None)),
        (None, Decimal('100'), (None, None)),
        (Decimal('0'), Decimal('0'), (None, None)),
    ])
    def test_calculate_savings(self, original, offer, expected):
        assert calculate_savings(original, offer) == expected


class TestSpecialOffers:
    """Slugs, savings and validation"""

    def offer(self, **overrides):
        data = {
            'title': 'Early Bird Summer',
            'type': 'EARLY_BIRD',
            'offer_price': Decimal('3600.00'),
            'original_price': Decimal('4500.00'),
            'valid_from': date(2025, 4, 1),
            'valid_to': date(2025, 5, 31),
        }
        data.update(overrides)
        return data

    def test_create_fills_slug_and_savings(self, app, business_units):
        with app.app_context():
            record = special_offer_service.create('biz_1', self.offer())['record']
            assert record.slug == 'early-bird-summer'
            assert record.savings_amount == Decimal('900.00')
            assert record.savings_percent == 20

    def test_slug_unique_per_unit(self, app, business_units):
        with app.app_context():
            special_offer_service.create('biz_1', self.offer())
            second = special_offer_service.create('biz_1', self.offer())['record']
            other_unit = special_offer_service.create('biz_2', self.offer())['record']
            assert second.slug == 'early-bird-summer-2'
            assert other_unit.slug == 'early-bird-summer'
            assert special_offer_service.get_by_slug('biz_1', 'early-bird-summer-2').id == second.id

    def test_update_keeps_own_slug(self, app, business_units):
        with app.app_context():
            record = special_offer_service.create('biz_1', self.offer())['record']
            result = special_offer_service.update('biz_1', record.id, self.offer(offer_price=Decimal('4000')))
            assert result['success']
            assert result['record'].slug == 'early-bird-summer'
            assert result['record'].savings_percent == 11

    def test_validation(self, app, business_units):
        with app.app_context():
            result = special_offer_service.create('biz_1', self.offer(
                type='FLASH_SALE_FOREVER', offer_price=Decimal('-1'), valid_to=date(2025, 3, 1)))
            assert set(result['errors']) == {'type', 'offer_price', 'valid_to'}
            assert SpecialOffer.query.count() == 0

    def test_pinned_first(self, app, business_units):
        with app.app_context():
            special_offer_service.create('biz_1', self.offer(title='Regular'))
            special_offer_service.create('biz_1', self.offer(title='Pinned', is_pinned=True))
            assert [o.title for o in special_offer_service.list('biz_1')] == ['Pinned', 'Regular']


class TestEvents:
    """Free and ticketed events"""

    def event(self, **overrides):
        data = {
            'title': 'Sunset Jazz Night',
            'type': 'ENTERTAINMENT',
            'start_date': date(2025, 6, 14),
            'end_date': date(2025, 6, 14),
            'is_free': True,
        }
        data.update(overrides)
        return data

    def test_free_event_drops_ticket_price(self, app, business_units):
        with app.app_context():
            record = event_service.create('biz_1', self.event(ticket_price=Decimal('500')))['record']
            assert record.ticket_price is None
            assert record.slug == 'sunset-jazz-night'

    def test_paid_event_needs_price(self, app, business_units):
        with app.app_context():
            result = event_service.create('biz_1', self.event(is_free=False))
            assert 'ticket_price' in result['errors']
            assert event_service.create('biz_1', self.event(is_free=False, ticket_price=Decimal('750')))['success']

    def test_end_before_start(self, app, business_units):
        with app.app_context():
            result = event_service.create('biz_1', self.event(end_date=date(2025, 6, 13)))
            assert 'end_date' in result['errors']

    def test_upcoming_filter(self, app, business_units):
        with app.app_context():
            event_service.create('biz_1', self.event(title='Past', start_date=date(2025, 1, 1),
                                                     end_date=date(2025, 1, 2)))
            event_service.create('biz_1', self.event(title='Future'))
            titles = [e.title for e in event_service.list('biz_1', upcoming_from=date(2025, 3, 1))]
            assert titles == ['Future']


class TestHeroTestimonialsFaqs:
    """Simple content validation and scoping"""

    def test_hero_opacity_range(self, app, business_units):
        with app.app_context():
            result = hero_slide_service.create('biz_1', {'title': 'Welcome', 'overlay_opacity': Decimal('1.5')})
            assert 'overlay_opacity' in result['errors']
            record = hero_slide_service.create('biz_1', {'title': 'Welcome', 'overlay_opacity': Decimal('0.4')})['record']
            assert record.overlay_opacity == pytest.approx(0.4)

    def test_testimonial_rating(self, app, business_units):
        with app.app_context():
            result = testimonial_service.create('biz_1', {'guest_name': 'Maria', 'content': 'Lovely', 'rating': 6})
            assert 'rating' in result['errors']
            result = testimonial_service.create('biz_1', {'guest_name': 'Maria', 'content': 'Lovely', 'rating': 5,
                                                          'source': 'tripadvisor'})
            assert result['success']

    def test_faq_categories(self, app, business_units):
        with app.app_context():
            for question, category in (('Check-in time?', 'Stay'), ('Breakfast?', 'Dining'),
                                       ('Pool hours?', 'Stay'), ('Parking?', None)):
                faq_service.create('biz_1', {'question': question, 'answer': 'Yes', 'category': category})
            faq_service.create('biz_2', {'question': 'Spa?', 'answer': 'Yes', 'category': 'Wellness'})

            assert faq_service.categories('biz_1') == ['Dining', 'Stay']
            assert len(faq_service.list('biz_1', category='Stay')) == 2
            assert FAQ.query.count() == 5

    def test_delete_scoped_to_unit(self, app, business_units):
        with app.app_context():
            record = faq_service.create('biz_1', {'question': 'Wifi?', 'answer': 'Free'})['record']
            assert faq_service.delete('biz_2', record.id)['message'] == 'FAQ not found'
            assert faq_service.delete('biz_1', record.id)['success']
            assert db.session.get(FAQ, record.id) is None


class TestCmsPages:
    """CMS views through the test client"""

    def test_manager_creates_faq(self, app, client, manager, login):
        login(client, 'manager@hotel.com')
        response = client.post('/biz_1/admin/cms/faqs/new', data={
            'question': 'Is there a shuttle?', 'answer': 'Yes, from the pier.', 'category': 'Transport',
            'is_active': 'on',
        })
        assert response.headers['Location'] == '/biz_1/admin/cms/faqs'
        with app.app_context():
            faq = FAQ.query.one()
            assert faq.business_unit_id == 'biz_1'
            assert faq.is_active

    def test_list_and_form_pages_render(self, client, manager, login):
        login(client, 'manager@hotel.com')
        for page in ('hero', 'special-offers', 'events', 'testimonials', 'faqs',
                     'hero/new', 'special-offers/new', 'events/new', 'testimonials/new', 'faqs/new'):
            assert client.get(f'/biz_1/admin/cms/{page}').status_code == 200, page
