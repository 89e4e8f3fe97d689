#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Access Router - business-unit access and redirect policy

Every request is evaluated against the signed-in principal and its
business-unit assignments. The result is either a redirect or passthrough.

Usage:
    from services.access_router import route_request, Authenticated, Assignment

    context = Authenticated([Assignment('biz_1')])
    decision = route_request(context, '/auth/sign-in')
    if decision.is_redirect:
        return redirect(decision.location)
"""

AUTH_PREFIX = '/auth'
SIGN_IN_PATH = '/auth/sign-in'
SETUP_PATH = '/setup'
ROOT_PATH = '/'

# Decision reasons (useful in logs and tests)
REASON_SIGN_IN = 'sign_in'
REASON_DEFAULT_UNIT = 'default_unit'
REASON_SETUP = 'setup'
REASON_PASSTHROUGH = 'passthrough'


class Assignment:
    """A principal's grant on one business unit"""

    __slots__ = ('business_unit_id', 'role')

    def __init__(self, business_unit_id, role=None):
        self.business_unit_id = business_unit_id
        self.role = role

    def __eq__(self, other):
        if not isinstance(other, Assignment):
            return NotImplemented
        return (self.business_unit_id, self.role) == (other.business_unit_id, other.role)

    def __repr__(self):
        return f'<Assignment {self.business_unit_id} role={self.role}>'


class Unauthenticated:
    """Request context with no signed-in principal"""

    is_authenticated = False
    assignments = ()

    def __repr__(self):
        return '<Unauthenticated>'


class Authenticated:
    """Request context for a signed-in principal and its ordered assignments"""

    is_authenticated = True

    def __init__(self, assignments=(), user_id=None, is_super_admin=False):
        # Kept exactly as given: the first entry is the default unit
        self.assignments = tuple(assignments)
        self.user_id = user_id
        self.is_super_admin = is_super_admin

    @property
    def has_assignments(self):
        return len(self.assignments) > 0

    @property
    def default_business_unit_id(self):
        if not self.assignments:
            return None
        return self.assignments[0].business_unit_id

    def is_assigned_to(self, business_unit_id):
        return any(a.business_unit_id == business_unit_id for a in self.assignments)

    def __repr__(self):
        return f'<Authenticated user={self.user_id} assignments={len(self.assignments)}>'


class RoutingDecision:
    """Outcome of a routing evaluation: passthrough or a redirect location"""

    __slots__ = ('location', 'reason')

    def __init__(self, location=None, reason=REASON_PASSTHROUGH):
        self.location = location
        self.reason = reason

    @property
    def is_redirect(self):
        return self.location is not None

    @classmethod
    def passthrough(cls):
        return cls()

    @classmethod
    def redirect_to(cls, location, reason):
        return cls(location=location, reason=reason)

    def __eq__(self, other):
        if not isinstance(other, RoutingDecision):
            return NotImplemented
        return (self.location, self.reason) == (other.location, other.reason)

    def __repr__(self):
        if self.is_redirect:
            return f'<RoutingDecision redirect {self.location} ({self.reason})>'
        return '<RoutingDecision passthrough>'


def is_under_prefix(path, prefix):
    """
    Segment-aware prefix match

    '/auth' and '/auth/sign-in' are under '/auth'; '/authors' is not.
    """
    if not path:
        return False
    prefix = prefix.rstrip('/')
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + '/')


def unit_admin_path(business_unit_id):
    return f'/{business_unit_id}/admin'


def route_request(context, path, auth_prefix=AUTH_PREFIX,
                  sign_in_path=SIGN_IN_PATH, setup_path=SETUP_PATH):
    """
    Decide whether a request proceeds or is redirected

    Rules, first match wins:
        1. unauthenticated and outside the auth flow -> sign-in
        2. authenticated inside the auth flow with assignments -> first unit admin
        3. authenticated inside the auth flow without assignments -> setup
        4. anything else -> passthrough

    Args:
        context: Unauthenticated or Authenticated instance (anything else is
            treated as unauthenticated)
        path: Request path
        auth_prefix: Path prefix of the sign-in/sign-out flow
        sign_in_path: Redirect target for anonymous requests
        setup_path: Redirect target for principals without a business unit

    Returns:
        RoutingDecision
    """
    in_auth_flow = is_under_prefix(path, auth_prefix)

    if not isinstance(context, Authenticated):
        if not in_auth_flow:
            return RoutingDecision.redirect_to(sign_in_path, REASON_SIGN_IN)
        return RoutingDecision.passthrough()

    if in_auth_flow:
        if context.has_assignments:
            return RoutingDecision.redirect_to(
                unit_admin_path(context.default_business_unit_id), REASON_DEFAULT_UNIT
            )
        return RoutingDecision.redirect_to(setup_path, REASON_SETUP)

    return RoutingDecision.passthrough()


def root_redirect(context, path, root_path=ROOT_PATH):
    """
    Send a signed-in principal on the bare root to its first business unit

    Only fires for the root path itself and only when there is at least one
    assignment. The target is a unit admin path, which this function passes
    through, so applying it twice never loops.

    Returns:
        RoutingDecision
    """
    if not isinstance(context, Authenticated):
        return RoutingDecision.passthrough()

    normalized = (path or '').rstrip('/') or '/'
    if normalized != root_path:
        return RoutingDecision.passthrough()

    if context.has_assignments:
        return RoutingDecision.redirect_to(
            unit_admin_path(context.default_business_unit_id), REASON_DEFAULT_UNIT
        )
    return RoutingDecision.passthrough()


def guard_business_unit(context, business_unit_id, setup_path=SETUP_PATH):
    """
    Keep a principal inside the business units it is assigned to

    A SUPER_ADMIN may open any unit. Anyone else asking for a unit they are
    not assigned to is sent to their first unit, or to setup when they have
    none. The redirect target is always an assigned unit, so the guard
    passes through on the next request.

    Returns:
        RoutingDecision
    """
    if not isinstance(context, Authenticated):
        return RoutingDecision.passthrough()

    if context.is_super_admin or context.is_assigned_to(business_unit_id):
        return RoutingDecision.passthrough()

    if context.has_assignments:
        return RoutingDecision.redirect_to(
            unit_admin_path(context.default_business_unit_id), REASON_DEFAULT_UNIT
        )
    return RoutingDecision.redirect_to(setup_path, REASON_SETUP)
