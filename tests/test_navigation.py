#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Admin sidebar menu
"""
from services.navigation_service import build_menu


def find_item(menu, item_id):
    for section in menu:
        for item in section['items']:
            if item['id'] == item_id:
                return item
    raise KeyError(item_id)


class TestBuildMenu:
    """Menu sections scoped to one business unit"""

    def test_sections(self):
        menu = build_menu('biz_1')
        assert [s['id'] for s in menu] == ['overview', 'operations', 'cms']

    def test_paths_are_unit_scoped(self):
        menu = build_menu('biz_1')
        assert find_item(menu, 'dashboard')['path'] == '/biz_1/admin'
        assert find_item(menu, 'reservations')['path'] == '/biz_1/admin/operations/reservations'
        assert find_item(menu, 'faqs')['path'] == '/biz_1/admin/cms/faqs'
        for section in menu:
            for item in section['items']:
                assert item['path'].startswith('/biz_1/admin')

    def test_badges(self):
        menu = build_menu('biz_1', {'reservations': 3, 'check_ins': 0, 'check_outs': 2})
        assert find_item(menu, 'reservations')['badge'] == 3
        assert find_item(menu, 'check-ins')['badge'] is None
        assert find_item(menu, 'check-outs')['badge'] == 2
        assert find_item(menu, 'guests')['badge'] is None

    def test_active_item(self):
        menu = build_menu('biz_1', current_path='/biz_1/admin/operations/rooms/4/edit')
        assert find_item(menu, 'rooms')['active']
        assert not find_item(menu, 'room-types')['active']
        assert not find_item(menu, 'dashboard')['active']

    def test_dashboard_active_only_on_its_own_path(self):
        assert find_item(build_menu('biz_1', current_path='/biz_1/admin'), 'dashboard')['active']
        assert not find_item(build_menu('biz_1', current_path='/biz_1/admin/cms/hero'), 'dashboard')['active']


class TestShellRendering:
    """Badges show up in the rendered sidebar"""

    def test_sidebar_links(self, client, manager, login):
        login(client, 'manager@hotel.com')
        html = client.get('/biz_1/admin').get_data(as_text=True)
        assert 'href="/biz_1/admin/operations/reservations"' in html
        assert 'href="/biz_1/admin/cms/special-offers"' in html
        assert 'Manager' in html
