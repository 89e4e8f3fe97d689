#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Access Router decision tests (no Flask app needed)
"""
import pytest

from services.access_router import (
    Assignment, Authenticated, Unauthenticated, RoutingDecision,
    route_request, root_redirect, guard_business_unit, is_under_prefix, unit_admin_path,
    REASON_SIGN_IN, REASON_DEFAULT_UNIT, REASON_SETUP, REASON_PASSTHROUGH,
)


def signed_in(*business_unit_ids, super_admin=False):
    return Authenticated([Assignment(b) for b in business_unit_ids], user_id=1, is_super_admin=super_admin)


class TestRoutingScenarios:
    """Concrete request/decision pairs"""

    def test_anonymous_on_admin_path_goes_to_sign_in(self):
        decision = route_request(Unauthenticated(), '/admin/cms/faqs')
        assert decision.location == '/auth/sign-in'
        assert decision.reason == REASON_SIGN_IN

    def test_signed_in_on_sign_in_goes_to_first_unit(self):
        decision = route_request(signed_in('biz_1'), '/auth/sign-in')
        assert decision.location == '/biz_1/admin'
        assert decision.reason == REASON_DEFAULT_UNIT

    def test_signed_in_without_units_on_sign_in_goes_to_setup(self):
        decision = route_request(signed_in(), '/auth/sign-in')
        assert decision.location == '/setup'
        assert decision.reason == REASON_SETUP

    def test_signed_in_on_unit_page_passes_through(self):
        decision = route_request(signed_in('biz_1'), '/biz_1/admin/cms/faqs')
        assert not decision.is_redirect
        assert decision.reason == REASON_PASSTHROUGH

    def test_root_goes_to_first_of_several_units(self):
        context = signed_in('biz_1', 'biz_2')
        assert route_request(context, '/') == RoutingDecision.passthrough()
        assert root_redirect(context, '/').location == '/biz_1/admin'


class TestRoutingRules:
    """Decision table properties"""

    @pytest.mark.parametrize('path', ['/', '/setup', '/biz_1/admin', '/authors', '/sign-out', ''])
    def test_anonymous_outside_auth_flow_always_redirected(self, path):
        assert route_request(Unauthenticated(), path).location == '/auth/sign-in'

    @pytest.mark.parametrize('path', ['/auth', '/auth/sign-in', '/auth/reset/token'])
    def test_anonymous_inside_auth_flow_passes_through(self, path):
        assert not route_request(Unauthenticated(), path).is_redirect

    @pytest.mark.parametrize('path', ['/setup', '/biz_2/admin', '/authors', '/sign-out'])
    def test_signed_in_outside_auth_flow_passes_through(self, path):
        assert not route_request(signed_in('biz_1'), path).is_redirect
        assert not route_request(signed_in(), path).is_redirect

    def test_unknown_context_is_treated_as_anonymous(self):
        assert route_request(None, '/biz_1/admin').location == '/auth/sign-in'
        assert route_request({'authenticated': True}, '/biz_1/admin').location == '/auth/sign-in'

    def test_custom_paths(self):
        decision = route_request(Unauthenticated(), '/biz_1/admin', auth_prefix='/login',
                                 sign_in_path='/login/start', setup_path='/onboarding')
        assert decision.location == '/login/start'
        assert route_request(signed_in(), '/login/start', auth_prefix='/login',
                             setup_path='/onboarding').location == '/onboarding'

    def test_router_does_not_mutate_assignments(self):
        assignments = [Assignment('biz_2'), Assignment('biz_1')]
        context = Authenticated(assignments)
        route_request(context, '/auth/sign-in')
        assert [a.business_unit_id for a in context.assignments] == ['biz_2', 'biz_1']


class TestFirstAssignment:
    """The first assignment is the default unit, in the order given"""

    def test_order_is_preserved(self):
        assert route_request(signed_in('biz_2', 'biz_1'), '/auth/sign-in').location == '/biz_2/admin'

    def test_duplicates_keep_first_entry(self):
        context = signed_in('biz_2', 'biz_1', 'biz_2', 'biz_1')
        assert len(context.assignments) == 4
        assert context.default_business_unit_id == 'biz_2'
        assert route_request(context, '/auth').location == '/biz_2/admin'

    def test_same_context_gives_same_answer(self):
        context = signed_in('biz_1', 'biz_2')
        first = route_request(context, '/auth/sign-in')
        second = route_request(context, '/auth/sign-in')
        assert first == second


class TestIdempotence:
    """Feeding a redirect target back in reaches passthrough"""

    @pytest.mark.parametrize('context', [
        Unauthenticated(),
        Authenticated([]),
        Authenticated([Assignment('biz_1')]),
        Authenticated([Assignment('biz_1'), Assignment('biz_2')]),
    ])
    @pytest.mark.parametrize('path', ['/', '/auth/sign-in', '/biz_9/admin', '/setup'])
    def test_redirect_target_passes_through(self, context, path):
        decision = route_request(context, path)
        if decision.is_redirect:
            assert not route_request(context, decision.location).is_redirect

    def test_root_redirect_target_passes_through(self):
        context = signed_in('biz_1', 'biz_2')
        target = root_redirect(context, '/').location
        assert not root_redirect(context, target).is_redirect
        assert not route_request(context, target).is_redirect


class TestPrefixMatching:
    """Auth-flow prefix is matched by path segment"""

    @pytest.mark.parametrize('path,expected', [
        ('/auth', True),
        ('/auth/', True),
        ('/auth/sign-in', True),
        ('/authors', False),
        ('/authentication/sign-in', False),
        ('/biz_1/auth/sign-in', False),
        ('/', False),
        ('', False),
    ])
    def test_is_under_prefix(self, path, expected):
        assert is_under_prefix(path, '/auth') is expected

    def test_trailing_slash_on_prefix_is_ignored(self):
        assert is_under_prefix('/auth/sign-in', '/auth/')

    def test_authenticated_on_lookalike_path_passes_through(self):
        assert not route_request(signed_in('biz_1'), '/authors').is_redirect


class TestRootRedirect:
    """Companion decision for the bare root"""

    def test_only_the_root_path(self):
        context = signed_in('biz_1')
        assert root_redirect(context, '/').location == '/biz_1/admin'
        assert root_redirect(context, '//').location == '/biz_1/admin'
        assert not root_redirect(context, '/setup').is_redirect
        assert not root_redirect(context, '/biz_1/admin').is_redirect

    def test_no_assignment_passes_through(self):
        assert not root_redirect(signed_in(), '/').is_redirect

    def test_anonymous_passes_through(self):
        assert not root_redirect(Unauthenticated(), '/').is_redirect


class TestBusinessUnitGuard:
    """Unit-scoped pages stay inside the principal's units"""

    def test_assigned_unit_passes(self):
        assert not guard_business_unit(signed_in('biz_1', 'biz_2'), 'biz_2').is_redirect

    def test_other_unit_goes_to_first_unit(self):
        decision = guard_business_unit(signed_in('biz_1'), 'biz_2')
        assert decision.location == '/biz_1/admin'

    def test_no_units_goes_to_setup(self):
        assert guard_business_unit(signed_in(), 'biz_1').location == '/setup'

    def test_super_admin_may_open_any_unit(self):
        assert not guard_business_unit(signed_in('biz_1', super_admin=True), 'biz_2').is_redirect

    def test_guard_target_is_allowed_by_guard(self):
        context = signed_in('biz_1')
        target = guard_business_unit(context, 'biz_2').location
        assert target == unit_admin_path('biz_1')
        assert not guard_business_unit(context, 'biz_1').is_redirect
