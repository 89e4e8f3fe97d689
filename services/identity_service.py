#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Identity Service
Turns the Flask-Login user of the current request into the explicit
request context consumed by the access router.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from models import db
from services.access_router import Assignment, Authenticated, Unauthenticated

logger = logging.getLogger(__name__)


def build_request_context(user):
    """
    Build the per-request context for a user

    Anything that is not an active, authenticated user (anonymous user,
    missing or broken session, database failure while loading assignments)
    becomes Unauthenticated.

    Args:
        user: current_user proxy or User object (may be None)

    Returns:
        Unauthenticated or Authenticated
    """
    try:
        if user is None or not getattr(user, 'is_authenticated', False):
            return Unauthenticated()
        if not getattr(user, 'is_active', False):
            return Unauthenticated()

        rows = user.ordered_assignments()
        assignments = [Assignment(row.business_unit_id, row.role) for row in rows]
        is_super_admin = any(a.role == 'SUPER_ADMIN' for a in assignments)

        return Authenticated(assignments, user_id=user.id, is_super_admin=is_super_admin)
    except (SQLAlchemyError, AttributeError) as e:
        db.session.rollback()
        logger.error(f'Could not load session context, treating request as signed out: {e}')
        return Unauthenticated()

