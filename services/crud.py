#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Business-unit scoped data access

Thin create/read/update/delete helpers shared by the operations and CMS
services. Every record belongs to exactly one business unit and is only
ever read or written through that unit's id.

Write operations return an action result dict:
    {'success': bool, 'message': str, 'errors': dict, 'record': obj or None}
"""
import logging

from flask import has_request_context, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db, AuditLog

logger = logging.getLogger(__name__)


def action_result(success, message, errors=None, record=None):
    return {
        'success': success,
        'message': message,
        'errors': errors or {},
        'record': record,
    }


def _snapshot(record, fields):
    return {field: getattr(record, field, None) for field in fields}


class ScopedModelService:
    """
    Base service for a model with a business_unit_id column

    Subclasses set `model`, `label`, `resource_type`, `fields` and may
    override `default_order`, `apply_filters`, `validate` and `prepare`.
    """

    model = None
    label = 'Record'
    resource_type = AuditLog.RESOURCE_CONTENT
    fields = ()

    def default_order(self):
        return [self.model.sort_order.asc(), self.model.id.asc()]

    def apply_filters(self, query, filters):
        return query

    def validate(self, business_unit_id, data, record=None):
        """Cross-field and uniqueness rules. Returns an errors dict."""
        return {}

    def prepare(self, data):
        """Fill derived fields before writing"""
        return data

    def display_name(self, record):
        for attr in ('name', 'title', 'question', 'guest_name', 'room_number'):
            value = getattr(record, attr, None)
            if value:
                return str(value)[:200]
        return f'{self.label} {record.id}'

    # ============== Read ==============
    def scoped_query(self, business_unit_id):
        return self.model.query.filter(self.model.business_unit_id == business_unit_id)

    def list(self, business_unit_id, **filters):
        try:
            query = self.apply_filters(self.scoped_query(business_unit_id), filters)
            return query.order_by(*self.default_order()).all()
        except SQLAlchemyError as e:
            logger.error(f'Error fetching {self.label.lower()} list for {business_unit_id}: {e}')
            db.session.rollback()
            return []

    def get(self, business_unit_id, record_id):
        """A record by id, only if it belongs to the business unit"""
        try:
            return self.scoped_query(business_unit_id).filter(self.model.id == record_id).first()
        except SQLAlchemyError as e:
            logger.error(f'Error fetching {self.label.lower()} {record_id}: {e}')
            db.session.rollback()
            return None

    def count(self, business_unit_id, **filters):
        try:
            return self.apply_filters(self.scoped_query(business_unit_id), filters).count()
        except SQLAlchemyError as e:
            logger.error(f'Error counting {self.label.lower()} for {business_unit_id}: {e}')
            db.session.rollback()
            return 0

    # ============== Write ==============
    def create(self, business_unit_id, data, actor=None):
        errors = self.validate(business_unit_id, data)
        if errors:
            return action_result(False, f'Please fix the errors in the {self.label.lower()} form', errors)

        data = self.prepare(dict(data))
        record = self.model(business_unit_id=business_unit_id, **data)
        try:
            db.session.add(record)
            db.session.flush()
            self._audit(actor, AuditLog.ACTION_CREATE, business_unit_id, record,
                        new_values=_snapshot(record, self.fields))
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.warning(f'Integrity error creating {self.label.lower()}: {e}')
            return action_result(False, f'{self.label} conflicts with an existing record')
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error creating {self.label.lower()}: {e}')
            return action_result(False, f'Failed to create {self.label.lower()}')

        logger.info(f'{self.label} {record.id} created in {business_unit_id}')
        return action_result(True, f'{self.label} created successfully', record=record)

    def update(self, business_unit_id, record_id, data, actor=None):
        record = self.get(business_unit_id, record_id)
        if record is None:
            return action_result(False, f'{self.label} not found')

        errors = self.validate(business_unit_id, data, record=record)
        if errors:
            return action_result(False, f'Please fix the errors in the {self.label.lower()} form', errors, record)

        data = self.prepare(dict(data))
        old_values = _snapshot(record, self.fields)
        for key, value in data.items():
            setattr(record, key, value)
        try:
            self._audit(actor, AuditLog.ACTION_UPDATE, business_unit_id, record,
                        old_values=old_values, new_values=_snapshot(record, self.fields))
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.warning(f'Integrity error updating {self.label.lower()} {record_id}: {e}')
            return action_result(False, f'{self.label} conflicts with an existing record')
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error updating {self.label.lower()} {record_id}: {e}')
            return action_result(False, f'Failed to update {self.label.lower()}')

        return action_result(True, f'{self.label} updated successfully', record=record)

    def delete(self, business_unit_id, record_id, actor=None):
        record = self.get(business_unit_id, record_id)
        if record is None:
            return action_result(False, f'{self.label} not found')

        reason = self.delete_blocked_reason(record)
        if reason:
            return action_result(False, reason)

        try:
            self._audit(actor, AuditLog.ACTION_DELETE, business_unit_id, record,
                        old_values=_snapshot(record, self.fields))
            db.session.delete(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error deleting {self.label.lower()} {record_id}: {e}')
            return action_result(False, f'Failed to delete {self.label.lower()}')

        return action_result(True, f'{self.label} deleted successfully')

    def delete_blocked_reason(self, record):
        return None

    def _audit(self, actor, action, business_unit_id, record, old_values=None, new_values=None):
        if actor is None:
            return
        AuditLog.log(
            user=actor,
            action=action,
            resource_type=self.resource_type,
            resource_id=record.id,
            resource_name=self.display_name(record),
            old_values=old_values,
            new_values=new_values,
            description=f'{AuditLog.ACTION_LABELS.get(action, action)} {self.label.lower()}',
            request=request if has_request_context() else None,
            business_unit_id=business_unit_id
        )
