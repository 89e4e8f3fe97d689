"""
Content Management Routes
Hero slides, special offers, events, testimonials and FAQs of one business unit
"""
from flask import Blueprint, request
from flask_login import login_required

from models import (DISPLAY_TYPES, TEXT_ALIGNMENTS, TESTIMONIAL_SOURCES, OFFER_TYPES, OFFER_STATUS,
                    EVENT_TYPES, EVENT_STATUS)
from routes.admin import init_unit_blueprint
from routes.crud_views import list_view, form_view, delete_view
from services.content_service import (
    hero_slide_service, testimonial_service, faq_service, special_offer_service, event_service
)
from utils.decorators import manager_required, admin_required
from utils.forms import Field

cms_bp = init_unit_blueprint(Blueprint('cms', __name__, url_prefix='/<business_unit_id>/admin/cms'))

HERO_FIELDS = [
    Field('title', 'Title', required=True, max_length=200),
    Field('subtitle', 'Subtitle', max_length=300),
    Field('description', 'Description', 'textarea'),
    Field('background_image', 'Background image URL', 'url', max_length=255),
    Field('background_video', 'Background video URL', 'url', max_length=255),
    Field('alt_text', 'Alt text', max_length=200),
    Field('display_type', 'Display type', 'select', required=True, choices=DISPLAY_TYPES, default='fullscreen'),
    Field('text_alignment', 'Text alignment', 'select', required=True, choices=TEXT_ALIGNMENTS, default='center'),
    Field('overlay_color', 'Overlay color', 'color', max_length=20),
    Field('overlay_opacity', 'Overlay opacity', 'decimal', help_text='0 to 1'),
    Field('text_color', 'Text color', 'color', max_length=20),
    Field('primary_button_text', 'Primary button text', max_length=60),
    Field('primary_button_url', 'Primary button URL', 'url', max_length=255),
    Field('secondary_button_text', 'Secondary button text', max_length=60),
    Field('secondary_button_url', 'Secondary button URL', 'url', max_length=255),
    Field('show_from', 'Show from', 'date'),
    Field('show_until', 'Show until', 'date'),
    Field('is_active', 'Active', 'bool', default=True),
    Field('is_featured', 'Featured', 'bool'),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]

TESTIMONIAL_FIELDS = [
    Field('guest_name', 'Guest name', required=True, max_length=120),
    Field('guest_title', 'Guest title', max_length=120),
    Field('guest_country', 'Country', max_length=80),
    Field('guest_image', 'Photo URL', 'url', max_length=255),
    Field('content', 'Testimonial', 'textarea', required=True),
    Field('rating', 'Rating', 'int', minimum=1, maximum=5),
    Field('source', 'Source', 'select', required=True, choices=TESTIMONIAL_SOURCES, default='direct'),
    Field('source_url', 'Source URL', 'url', max_length=255),
    Field('stay_date', 'Stay date', 'date'),
    Field('review_date', 'Review date', 'date'),
    Field('is_active', 'Active', 'bool', default=True),
    Field('is_featured', 'Featured', 'bool'),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]

FAQ_FIELDS = [
    Field('question', 'Question', required=True, max_length=300),
    Field('answer', 'Answer', 'textarea', required=True),
    Field('category', 'Category', max_length=80),
    Field('is_active', 'Active', 'bool', default=True),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]

SPECIAL_OFFER_FIELDS = [
    Field('title', 'Title', required=True, max_length=200),
    Field('slug', 'Slug', max_length=220, help_text='Leave blank to derive it from the title'),
    Field('subtitle', 'Subtitle', max_length=300),
    Field('short_desc', 'Short description', max_length=300),
    Field('description', 'Description', 'textarea'),
    Field('type', 'Offer type', 'select', required=True, choices=OFFER_TYPES, default='ROOM_DISCOUNT'),
    Field('status', 'Status', 'select', required=True, choices=OFFER_STATUS, default='ACTIVE'),
    Field('offer_price', 'Offer price', 'decimal', required=True),
    Field('original_price', 'Original price', 'decimal'),
    Field('valid_from', 'Valid from', 'date', required=True),
    Field('valid_to', 'Valid to', 'date', required=True),
    Field('is_published', 'Published', 'bool'),
    Field('is_featured', 'Featured', 'bool'),
    Field('is_pinned', 'Pinned', 'bool'),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]

EVENT_FIELDS = [
    Field('title', 'Title', required=True, max_length=200),
    Field('slug', 'Slug', max_length=220, help_text='Leave blank to derive it from the title'),
    Field('short_desc', 'Short description', max_length=300),
    Field('description', 'Description', 'textarea'),
    Field('type', 'Event type', 'select', required=True, choices=EVENT_TYPES, default='CELEBRATION'),
    Field('status', 'Status', 'select', required=True, choices=EVENT_STATUS, default='PLANNING'),
    Field('start_date', 'Start date', 'date', required=True),
    Field('end_date', 'End date', 'date', required=True),
    Field('start_time', 'Start time', 'time'),
    Field('end_time', 'End time', 'time'),
    Field('venue', 'Venue', max_length=150),
    Field('venue_capacity', 'Venue capacity', 'int', minimum=0),
    Field('is_free', 'Free event', 'bool', default=True),
    Field('ticket_price', 'Ticket price', 'decimal'),
    Field('requires_booking', 'Requires booking', 'bool'),
    Field('max_attendees', 'Max attendees', 'int', minimum=0),
    Field('is_published', 'Published', 'bool'),
    Field('is_featured', 'Featured', 'bool'),
    Field('is_pinned', 'Pinned', 'bool'),
    Field('sort_order', 'Sort order', 'int', minimum=0, default=0),
]


# ============== Hero slides ==============
@cms_bp.route('/hero')
@login_required
def hero_list(business_unit_id):
    return list_view(
        business_unit_id, hero_slide_service.list(business_unit_id), 'Hero Sections',
        [('Title', 'title'), ('Display', 'display_type'), ('Show from', 'show_from'),
         ('Show until', 'show_until'), ('Active', 'is_active'), ('Order', 'sort_order')],
        'cms.hero',
    )


@cms_bp.route('/hero/new', methods=['GET', 'POST'])
@manager_required
def hero_create(business_unit_id):
    return form_view(business_unit_id, hero_slide_service, HERO_FIELDS, 'New Hero Slide', 'cms.hero')


@cms_bp.route('/hero/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def hero_edit(business_unit_id, record_id):
    return form_view(business_unit_id, hero_slide_service, HERO_FIELDS, 'Edit Hero Slide', 'cms.hero', record_id)


@cms_bp.route('/hero/<int:record_id>/delete', methods=['POST'])
@admin_required
def hero_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, hero_slide_service, 'cms.hero', record_id)


# ============== Special offers ==============
@cms_bp.route('/special-offers')
@login_required
def special_offers_list(business_unit_id):
    status = request.args.get('status') or None
    if status and status not in OFFER_STATUS:
        status = None
    return list_view(
        business_unit_id, special_offer_service.list(business_unit_id, status=status), 'Special Offers',
        [('Title', 'title'), ('Type', 'type_label'), ('Offer price', 'offer_price'),
         ('Savings %', 'savings_percent'), ('Valid from', 'valid_from'), ('Valid to', 'valid_to'),
         ('Published', 'is_published')],
        'cms.special_offers',
        filters=[('status', 'Status', OFFER_STATUS, status)],
    )


@cms_bp.route('/special-offers/new', methods=['GET', 'POST'])
@manager_required
def special_offers_create(business_unit_id):
    return form_view(business_unit_id, special_offer_service, SPECIAL_OFFER_FIELDS, 'New Special Offer',
                     'cms.special_offers')


@cms_bp.route('/special-offers/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def special_offers_edit(business_unit_id, record_id):
    return form_view(business_unit_id, special_offer_service, SPECIAL_OFFER_FIELDS, 'Edit Special Offer',
                     'cms.special_offers', record_id)


@cms_bp.route('/special-offers/<int:record_id>/delete', methods=['POST'])
@admin_required
def special_offers_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, special_offer_service, 'cms.special_offers', record_id)


# ============== Events ==============
@cms_bp.route('/events')
@login_required
def events_list(business_unit_id):
    status = request.args.get('status') or None
    if status and status not in EVENT_STATUS:
        status = None
    return list_view(
        business_unit_id, event_service.list(business_unit_id, status=status), 'Events',
        [('Title', 'title'), ('Type', 'type_label'), ('Start', 'start_date'), ('End', 'end_date'),
         ('Venue', 'venue'), ('Free', 'is_free'), ('Published', 'is_published')],
        'cms.events',
        filters=[('status', 'Status', EVENT_STATUS, status)],
    )


@cms_bp.route('/events/new', methods=['GET', 'POST'])
@manager_required
def events_create(business_unit_id):
    return form_view(business_unit_id, event_service, EVENT_FIELDS, 'New Event', 'cms.events')


@cms_bp.route('/events/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def events_edit(business_unit_id, record_id):
    return form_view(business_unit_id, event_service, EVENT_FIELDS, 'Edit Event', 'cms.events', record_id)


@cms_bp.route('/events/<int:record_id>/delete', methods=['POST'])
@admin_required
def events_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, event_service, 'cms.events', record_id)


# ============== Testimonials ==============
@cms_bp.route('/testimonials')
@login_required
def testimonials_list(business_unit_id):
    return list_view(
        business_unit_id, testimonial_service.list(business_unit_id), 'Testimonials',
        [('Guest', 'guest_name'), ('Country', 'guest_country'), ('Rating', 'rating'),
         ('Source', 'source'), ('Featured', 'is_featured'), ('Active', 'is_active')],
        'cms.testimonials',
    )


@cms_bp.route('/testimonials/new', methods=['GET', 'POST'])
@manager_required
def testimonials_create(business_unit_id):
    return form_view(business_unit_id, testimonial_service, TESTIMONIAL_FIELDS, 'New Testimonial',
                     'cms.testimonials')


@cms_bp.route('/testimonials/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def testimonials_edit(business_unit_id, record_id):
    return form_view(business_unit_id, testimonial_service, TESTIMONIAL_FIELDS, 'Edit Testimonial',
                     'cms.testimonials', record_id)


@cms_bp.route('/testimonials/<int:record_id>/delete', methods=['POST'])
@admin_required
def testimonials_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, testimonial_service, 'cms.testimonials', record_id)


# ============== FAQs ==============
@cms_bp.route('/faqs')
@login_required
def faqs_list(business_unit_id):
    category = request.args.get('category') or None
    categories = faq_service.categories(business_unit_id)
    return list_view(
        business_unit_id, faq_service.list(business_unit_id, category=category), 'FAQs',
        [('Question', 'question'), ('Category', 'category'), ('Active', 'is_active'), ('Order', 'sort_order')],
        'cms.faqs',
        filters=[('category', 'Category', {c: c for c in categories}, category)],
    )


@cms_bp.route('/faqs/new', methods=['GET', 'POST'])
@manager_required
def faqs_create(business_unit_id):
    return form_view(business_unit_id, faq_service, FAQ_FIELDS, 'New FAQ', 'cms.faqs')


@cms_bp.route('/faqs/<int:record_id>/edit', methods=['GET', 'POST'])
@manager_required
def faqs_edit(business_unit_id, record_id):
    return form_view(business_unit_id, faq_service, FAQ_FIELDS, 'Edit FAQ', 'cms.faqs', record_id)


@cms_bp.route('/faqs/<int:record_id>/delete', methods=['POST'])
@admin_required
def faqs_delete(business_unit_id, record_id):
    return delete_view(business_unit_id, faq_service, 'cms.faqs', record_id)
