#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Centralized timezone handling for property local time
"""
from datetime import datetime, timezone, timedelta

DEFAULT_UTC_OFFSET = 8  # Philippines (UTC+08:00)


def get_property_tz(offset_hours=None):
    """Fixed-offset timezone of the property; reads PROPERTY_UTC_OFFSET when in an app context"""
    if offset_hours is None:
        try:
            from flask import current_app
            offset_hours = current_app.config.get('PROPERTY_UTC_OFFSET', DEFAULT_UTC_OFFSET)
        except RuntimeError:
            offset_hours = DEFAULT_UTC_OFFSET
    return timezone(timedelta(hours=offset_hours))


def get_property_now():
    """Get current datetime in property local time"""
    return datetime.now(get_property_tz())


def get_property_today():
    """Get current date in property local time"""
    return get_property_now().date()


def utc_to_local(dt):
    """Convert UTC datetime to property local time"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(get_property_tz())
