from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .user import User
from .business_unit import BusinessUnit, PROPERTY_TYPES
from .user_business_unit import UserBusinessUnit, ASSIGNMENT_ROLES, ROLE_LABELS, ROLE_LEVELS
from .room_type import RoomType, ROOM_CATEGORIES
from .room import Room, ROOM_STATUS
from .guest import Guest
from .reservation import Reservation, ReservationRoom, RESERVATION_STATUS, RESERVATION_SOURCES, STATUS_TRANSITIONS
from .payment import Payment, PAYMENT_STATUS, PAYMENT_METHODS
from .restaurant import Restaurant, RESTAURANT_TYPES
from .hero_slide import HeroSlide, DISPLAY_TYPES, TEXT_ALIGNMENTS
from .testimonial import Testimonial, TESTIMONIAL_SOURCES
from .faq import FAQ
from .special_offer import SpecialOffer, OFFER_TYPES, OFFER_STATUS
from .event import Event, EVENT_TYPES, EVENT_STATUS
from .audit_log import AuditLog
from .sign_in_attempt import SignInAttempt
