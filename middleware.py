#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Request gate
Installs the access router in front of every view.
"""
import logging

from flask import current_app, g, redirect, request
from flask_login import current_user

from services.access_router import route_request
from services.identity_service import build_request_context

logger = logging.getLogger(__name__)


def is_exempt(path, prefixes):
    return any(path == prefix or path.startswith(prefix.rstrip('/') + '/') for prefix in prefixes)


def init_access_router(app):
    """Register the before_request hook that applies the routing rules"""

    @app.before_request
    def _apply_access_router():
        path = request.path
        if is_exempt(path, current_app.config.get('ACCESS_ROUTER_EXEMPT_PREFIXES', ())):
            return None

        context = build_request_context(current_user)
        g.request_context = context

        decision = route_request(
            context,
            path,
            auth_prefix=current_app.config.get('AUTH_PREFIX', '/auth'),
            sign_in_path=current_app.config.get('SIGN_IN_PATH', '/auth/sign-in'),
            setup_path=current_app.config.get('SETUP_PATH', '/setup'),
        )
        if decision.is_redirect:
            logger.debug(f'{request.method} {path} -> {decision.location} ({decision.reason})')
            return redirect(decision.location)
        return None
