#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Database initialization script with seed data
Run this script to create tables and add sample data
"""

import os
import sys
from datetime import timedelta
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import create_app
from models import (db, User, BusinessUnit, UserBusinessUnit, RoomType, Room, Guest, FAQ,
                    Testimonial, HeroSlide, Restaurant)
from services.content_service import special_offer_service, event_service
from services.reservation_service import reservation_service
from utils.timezone import get_property_today


def init_database():
    app = create_app()

    with app.app_context():
        db.drop_all()
        db.create_all()
        print("Database tables created.")

        superadmin = User(email='superadmin@hotel.com', name='System Administrator')
        superadmin.set_password('superadmin123')
        manager = User(email='manager@hotel.com', name='Front Office Manager')
        manager.set_password('manager123')
        newcomer = User(email='newcomer@hotel.com', name='New Owner')
        newcomer.set_password('newcomer123')
        db.session.add_all([superadmin, manager, newcomer])
        db.session.commit()
        print("Users created (superadmin@hotel.com/superadmin123, manager@hotel.com/manager123, "
              "newcomer@hotel.com/newcomer123)")

        properties = [
            ('Tropicana Resort', 'RESORT', 'Puerto Galera', 'Oriental Mindoro', True),
            ('Baguio Mountain Lodge', 'BOUTIQUE_HOTEL', 'Baguio', 'Benguet', False),
        ]
        units = []
        for sort_order, (name, property_type, city, state, featured) in enumerate(properties):
            unit = BusinessUnit(
                name=name,
                display_name=name,
                slug=name.lower().replace(' ', '-'),
                property_type=property_type,
                city=city,
                state=state,
                country='Philippines',
                is_published=True,
                is_featured=featured,
                sort_order=sort_order,
            )
            db.session.add(unit)
            units.append(unit)
        db.session.flush()

        db.session.add(UserBusinessUnit(user_id=superadmin.id, business_unit_id=units[0].id, role='SUPER_ADMIN'))
        db.session.add(UserBusinessUnit(user_id=manager.id, business_unit_id=units[1].id, role='MANAGER'))
        db.session.commit()
        print(f"{len(units)} business units created")

        room_type_rows = [
            ('Deluxe Room', 'DELUXE', 2, 2, Decimal('4500.00')),
            ('Family Suite', 'FAMILY', 5, 3, Decimal('8200.00')),
            ('Garden Villa', 'VILLA', 4, 2, Decimal('12500.00')),
        ]
        for unit in units:
            for position, (name, category, occupancy, adults, rate) in enumerate(room_type_rows):
                room_type = RoomType(
                    business_unit_id=unit.id, name=name, display_name=name, type=category,
                    max_occupancy=occupancy, max_adults=adults, max_children=occupancy - adults,
                    base_rate=rate, sort_order=position,
                )
                db.session.add(room_type)
                db.session.flush()
                for number in range(1, 4):
                    db.session.add(Room(
                        business_unit_id=unit.id, room_type_id=room_type.id,
                        room_number=f'{position + 1}{number:02d}', floor=position + 1,
                    ))
        db.session.commit()
        print("Room types and rooms created")

        guests_rows = [
            ('Maria', 'Santos', 'maria.santos@example.com', 'Philippines', True),
            ('John', 'Carter', 'john.carter@example.com', 'United States', False),
            ('Aiko', 'Tanaka', 'aiko.tanaka@example.com', 'Japan', False),
        ]
        for unit in units:
            for first, last, email, country, vip in guests_rows:
                db.session.add(Guest(business_unit_id=unit.id, first_name=first, last_name=last,
                                     email=email, country=country, vip_status=vip))
        db.session.commit()
        print("Guests created")

        today = get_property_today()
        flagship = units[0]
        room_types = RoomType.query.filter_by(business_unit_id=flagship.id).order_by(RoomType.sort_order).all()
        guests = Guest.query.filter_by(business_unit_id=flagship.id).order_by(Guest.id).all()
        bookings = [
            (guests[0], room_types[0], today, today + timedelta(days=2), 'CONFIRMED'),
            (guests[1], room_types[1], today - timedelta(days=3), today, 'CHECKED_IN'),
            (guests[2], room_types[2], today + timedelta(days=7), today + timedelta(days=10), None),
        ]
        for guest, room_type, check_in, check_out, status in bookings:
            room = room_type.rooms.first()
            result = reservation_service.create_reservation(flagship.id, {
                'guest_id': guest.id,
                'room_type_id': room_type.id,
                'room_id': room.id,
                'check_in_date': check_in,
                'check_out_date': check_out,
                'adults': 1,
                'source': 'WEBSITE',
            })
            reservation = result['record']
            if status in ('CONFIRMED', 'CHECKED_IN'):
                reservation_service.update_status(flagship.id, reservation.id, 'CONFIRMED')
            if status == 'CHECKED_IN':
                reservation_service.update_status(flagship.id, reservation.id, 'CHECKED_IN')
        print(f"{len(bookings)} reservations created")

        db.session.add_all([
            HeroSlide(business_unit_id=flagship.id, title='Wake up to the sea',
                      subtitle='Beachfront villas in Puerto Galera', primary_button_text='Book now',
                      primary_button_url='/book'),
            FAQ(business_unit_id=flagship.id, question='What time is check-in?',
                answer='Check-in starts at 2:00 PM and check-out is until 12:00 NN.', category='Stay'),
            FAQ(business_unit_id=flagship.id, question='Is breakfast included?',
                answer='Breakfast for two is included in every room rate.', category='Dining'),
            Testimonial(business_unit_id=flagship.id, guest_name='Maria Santos', guest_country='Philippines',
                        content='The staff made our anniversary unforgettable.', rating=5, source='google'),
            Restaurant(business_unit_id=flagship.id, name='Coral Kitchen', slug='coral-kitchen',
                       type='CASUAL_DINING', cuisine='Filipino, Seafood', total_seats=60, is_published=True),
        ])
        db.session.commit()

        special_offer_service.create(flagship.id, {
            'title': 'Early Bird Summer',
            'type': 'EARLY_BIRD',
            'offer_price': Decimal('3600.00'),
            'original_price': Decimal('4500.00'),
            'valid_from': today,
            'valid_to': today + timedelta(days=60),
            'is_published': True,
        })
        event_service.create(flagship.id, {
            'title': 'Sunset Jazz Night',
            'type': 'ENTERTAINMENT',
            'start_date': today + timedelta(days=14),
            'end_date': today + timedelta(days=14),
            'start_time': '18:00',
            'venue': 'Beach Deck',
            'is_free': True,
            'is_published': True,
        })
        print("Website content created")

        print("\nDatabase initialized successfully!")


if __name__ == '__main__':
    init_database()
