#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Reservation Service - reservations, payments and the admin sidebar badge counts
"""
import logging
import secrets
from decimal import Decimal
from datetime import datetime, timezone

from flask import has_request_context, request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import (db, AuditLog, Guest, Payment, Reservation, ReservationRoom, Room, RoomType,
                    PAYMENT_METHODS, PAYMENT_STATUS, RESERVATION_SOURCES, RESERVATION_STATUS)
from services.crud import ScopedModelService, action_result
from utils.decimal_utils import to_decimal
from utils.timezone import get_property_today

logger = logging.getLogger(__name__)

CONFIRMATION_PREFIX = 'DH'

# Reservations still holding a room
ACTIVE_STATUSES = ('PENDING', 'CONFIRMED', 'CHECKED_IN')

# Room status applied when a reservation reaches a status
ROOM_STATUS_ON_RESERVATION = {
    'CHECKED_IN': 'OCCUPIED',
    'CHECKED_OUT': 'CLEANING',
}


def generate_confirmation_number():
    while True:
        candidate = f'{CONFIRMATION_PREFIX}-{secrets.token_hex(4).upper()}'
        if not Reservation.query.filter_by(confirmation_number=candidate).first():
            return candidate


def _audit(actor, action, business_unit_id, resource_type, resource_id, resource_name,
           old_values=None, new_values=None, description=None):
    if actor is None:
        return
    AuditLog.log(
        user=actor,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        resource_name=resource_name,
        old_values=old_values,
        new_values=new_values,
        description=description,
        request=request if has_request_context() else None,
        business_unit_id=business_unit_id
    )


class ReservationService(ScopedModelService):
    model = Reservation
    label = 'Reservation'
    resource_type = AuditLog.RESOURCE_RESERVATION
    fields = ('confirmation_number', 'status', 'check_in_date', 'check_out_date', 'total_amount')

    def default_order(self):
        return [Reservation.created_at.desc(), Reservation.id.desc()]

    def apply_filters(self, query, filters):
        status = filters.get('status')
        if status:
            query = query.filter(Reservation.status == status)
        guest_id = filters.get('guest_id')
        if guest_id:
            query = query.filter(Reservation.guest_id == guest_id)
        arriving_on = filters.get('arriving_on')
        if arriving_on:
            query = query.filter(Reservation.status == 'CONFIRMED', Reservation.check_in_date == arriving_on)
        departing_on = filters.get('departing_on')
        if departing_on:
            query = query.filter(Reservation.status == 'CHECKED_IN', Reservation.check_out_date == departing_on)
        return query

    def display_name(self, record):
        return record.confirmation_number

    def recent(self, business_unit_id, limit=5):
        try:
            return (self.scoped_query(business_unit_id)
                    .order_by(*self.default_order())
                    .limit(limit).all())
        except SQLAlchemyError as e:
            logger.error(f'Error fetching recent reservations for {business_unit_id}: {e}')
            db.session.rollback()
            return []

    # ============== Booking ==============
    def room_is_free(self, room_id, check_in, check_out, exclude_reservation_id=None):
        """No active reservation of the room overlaps [check_in, check_out)"""
        query = db.session.query(ReservationRoom.id).join(Reservation).filter(
            ReservationRoom.room_id == room_id,
            Reservation.status.in_(ACTIVE_STATUSES),
            Reservation.check_in_date < check_out,
            Reservation.check_out_date > check_in,
        )
        if exclude_reservation_id is not None:
            query = query.filter(Reservation.id != exclude_reservation_id)
        return query.first() is None

    def create_reservation(self, business_unit_id, data, actor=None):
        """
        Book one room (or room type) for a guest

        Args:
            business_unit_id: Property id
            data: dict with guest_id, room_type_id, room_id (optional),
                check_in_date, check_out_date, adults, children, source,
                special_requests, internal_notes
            actor: Acting user

        Returns:
            action result dict with the reservation as 'record'
        """
        errors = {}
        check_in = data.get('check_in_date')
        check_out = data.get('check_out_date')
        if check_in and check_out and check_out <= check_in:
            errors['check_out_date'] = 'Check-out must be after check-in'

        guest = Guest.query.filter_by(id=data.get('guest_id'), business_unit_id=business_unit_id).first()
        if guest is None:
            errors['guest_id'] = 'Select a guest of this property'

        room_type = RoomType.query.filter_by(id=data.get('room_type_id'), business_unit_id=business_unit_id).first()
        if room_type is None:
            errors['room_type_id'] = 'Select a room type of this property'

        room = None
        if data.get('room_id'):
            room = Room.query.filter_by(id=data['room_id'], business_unit_id=business_unit_id).first()
            if room is None:
                errors['room_id'] = 'Select a room of this property'
            elif room_type is not None and room.room_type_id != room_type.id:
                errors['room_id'] = 'Room does not belong to the selected room type'
            elif check_in and check_out and not self.room_is_free(room.id, check_in, check_out):
                errors['room_id'] = 'Room is already booked for these dates'

        adults = data.get('adults') or 1
        children = data.get('children') or 0
        if room_type is not None:
            if adults > room_type.max_adults:
                errors['adults'] = f'This room type allows at most {room_type.max_adults} adults'
            if adults + children > room_type.max_occupancy:
                errors['children'] = f'This room type allows at most {room_type.max_occupancy} guests'

        source = data.get('source') or 'DIRECT'
        if source not in RESERVATION_SOURCES:
            errors['source'] = 'Invalid reservation source'

        if errors:
            return action_result(False, 'Please fix the errors in the reservation form', errors)

        nights = (check_out - check_in).days
        base_rate = to_decimal(room_type.base_rate)
        total = to_decimal(base_rate * nights)

        reservation = Reservation(
            business_unit_id=business_unit_id,
            guest_id=guest.id,
            confirmation_number=generate_confirmation_number(),
            status='PENDING',
            source=source,
            check_in_date=check_in,
            check_out_date=check_out,
            nights=nights,
            adults=adults,
            children=children,
            total_amount=total,
            currency=data.get('currency') or 'PHP',
            special_requests=data.get('special_requests'),
            internal_notes=data.get('internal_notes'),
        )
        reservation.rooms.append(ReservationRoom(
            room_id=room.id if room else None,
            room_type_id=room_type.id,
            base_rate=base_rate,
            total_amount=total,
        ))
        try:
            db.session.add(reservation)
            db.session.flush()
            _audit(actor, AuditLog.ACTION_CREATE, business_unit_id, self.resource_type,
                   reservation.id, reservation.confirmation_number,
                   new_values={'guest': guest.email, 'check_in': check_in, 'check_out': check_out,
                               'total_amount': total},
                   description='Created reservation')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error creating reservation: {e}')
            return action_result(False, 'Failed to create reservation')

        logger.info(f'Reservation {reservation.confirmation_number} created in {business_unit_id}')
        return action_result(True, f'Reservation {reservation.confirmation_number} created', record=reservation)

    def update_status(self, business_unit_id, reservation_id, new_status, actor=None):
        """Move a reservation along its allowed status transitions"""
        reservation = self.get(business_unit_id, reservation_id)
        if reservation is None:
            return action_result(False, 'Reservation not found')

        if new_status not in RESERVATION_STATUS:
            return action_result(False, 'Invalid reservation status')

        if not reservation.can_transition_to(new_status):
            return action_result(
                False,
                f'Cannot change status from {reservation.status_label} to {RESERVATION_STATUS[new_status]}'
            )

        old_status = reservation.status
        reservation.status = new_status

        room_status = ROOM_STATUS_ON_RESERVATION.get(new_status)
        if room_status:
            for reservation_room in reservation.rooms:
                if reservation_room.room is not None:
                    reservation_room.room.status = room_status

        try:
            _audit(actor, AuditLog.ACTION_STATUS_CHANGE, business_unit_id, self.resource_type,
                   reservation.id, reservation.confirmation_number,
                   old_values={'status': old_status}, new_values={'status': new_status},
                   description='Changed reservation status')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error updating reservation {reservation_id} status: {e}')
            return action_result(False, 'Failed to update reservation status')

        return action_result(True, f'Reservation marked as {RESERVATION_STATUS[new_status]}', record=reservation)

    # ============== Badge counts ==============
    def pending_count(self, business_unit_id):
        return self.count(business_unit_id, status='PENDING')

    def todays_check_ins_count(self, business_unit_id, today=None):
        return self.count(business_unit_id, arriving_on=today or get_property_today())

    def todays_check_outs_count(self, business_unit_id, today=None):
        return self.count(business_unit_id, departing_on=today or get_property_today())

    def badge_counts(self, business_unit_id, today=None):
        return {
            'reservations': self.pending_count(business_unit_id),
            'check_ins': self.todays_check_ins_count(business_unit_id, today),
            'check_outs': self.todays_check_outs_count(business_unit_id, today),
        }


class PaymentService:
    """Payments are scoped through their reservation's business unit"""

    label = 'Payment'

    def scoped_query(self, business_unit_id):
        return Payment.query.join(Reservation).filter(Reservation.business_unit_id == business_unit_id)

    def list(self, business_unit_id, status=None):
        try:
            query = self.scoped_query(business_unit_id)
            if status:
                query = query.filter(Payment.status == status)
            return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f'Error fetching payments for {business_unit_id}: {e}')
            db.session.rollback()
            return []

    def get(self, business_unit_id, payment_id):
        try:
            return self.scoped_query(business_unit_id).filter(Payment.id == payment_id).first()
        except SQLAlchemyError as e:
            logger.error(f'Error fetching payment {payment_id}: {e}')
            db.session.rollback()
            return None

    def refresh_reservation_payment_status(self, reservation):
        """PAID once succeeded payments cover the total, PARTIAL when some are in"""
        paid = sum((to_decimal(p.amount) for p in reservation.payments if p.status == 'SUCCEEDED'), Decimal('0'))
        if paid <= 0:
            reservation.payment_status = 'PENDING'
        elif paid >= to_decimal(reservation.total_amount):
            reservation.payment_status = 'PAID'
        else:
            reservation.payment_status = 'PARTIAL'
        return reservation.payment_status

    def record_payment(self, business_unit_id, reservation_id, amount, method, reference=None,
                       notes=None, actor=None):
        reservation = Reservation.query.filter_by(id=reservation_id, business_unit_id=business_unit_id).first()
        if reservation is None:
            return action_result(False, 'Reservation not found')

        errors = {}
        if amount is None or amount <= 0:
            errors['amount'] = 'Amount must be greater than zero'
        if method not in PAYMENT_METHODS:
            errors['method'] = 'Invalid payment method'
        if errors:
            return action_result(False, 'Please fix the errors in the payment form', errors)

        payment = Payment(
            reservation_id=reservation.id,
            amount=amount,
            currency=reservation.currency,
            status='PENDING',
            method=method,
            reference=reference,
            notes=notes,
        )
        try:
            db.session.add(payment)
            db.session.flush()
            _audit(actor, AuditLog.ACTION_CREATE, business_unit_id, AuditLog.RESOURCE_PAYMENT,
                   payment.id, reservation.confirmation_number,
                   new_values={'amount': amount, 'method': method}, description='Recorded payment')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error recording payment for reservation {reservation_id}: {e}')
            return action_result(False, 'Failed to record payment')

        return action_result(True, 'Payment recorded', record=payment)

    def update_status(self, business_unit_id, payment_id, new_status, actor=None):
        payment = self.get(business_unit_id, payment_id)
        if payment is None:
            return action_result(False, 'Payment not found')
        if new_status not in PAYMENT_STATUS:
            return action_result(False, 'Invalid payment status')

        old_status = payment.status
        payment.status = new_status
        if new_status == 'SUCCEEDED':
            payment.processed_at = datetime.now(timezone.utc)
        self.refresh_reservation_payment_status(payment.reservation)

        try:
            _audit(actor, AuditLog.ACTION_STATUS_CHANGE, business_unit_id, AuditLog.RESOURCE_PAYMENT,
                   payment.id, payment.reservation.confirmation_number,
                   old_values={'status': old_status}, new_values={'status': new_status},
                   description='Changed payment status')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error updating payment {payment_id} status: {e}')
            return action_result(False, 'Failed to update payment status')

        return action_result(True, f'Payment marked as {PAYMENT_STATUS[new_status]}', record=payment)

    def total_collected(self, business_unit_id):
        try:
            return db.session.query(func.coalesce(func.sum(Payment.amount), 0)).join(Reservation).filter(
                Reservation.business_unit_id == business_unit_id,
                Payment.status == 'SUCCEEDED'
            ).scalar()
        except SQLAlchemyError as e:
            logger.error(f'Error summing payments for {business_unit_id}: {e}')
            db.session.rollback()
            return 0


reservation_service = ReservationService()
payment_service = PaymentService()
