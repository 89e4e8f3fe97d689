"""
Sidebar navigation for the admin area of one business unit
"""
from services.access_router import unit_admin_path

# (section id, title, [(item id, label, relative path, badge key)])
MENU_SECTIONS = (
    ('overview', 'Overview', (
        ('dashboard', 'Dashboard', '', None),
    )),
    ('operations', 'Operations', (
        ('properties', 'Properties', '/operations/properties', None),
        ('room-types', 'Room Types', '/operations/room-types', None),
        ('rooms', 'Rooms', '/operations/rooms', None),
        ('reservations', 'Reservations', '/operations/reservations', 'reservations'),
        ('check-ins', 'Check-ins Today', '/operations/check-ins', 'check_ins'),
        ('check-outs', 'Check-outs Today', '/operations/check-outs', 'check_outs'),
        ('guests', 'Guest Directory', '/operations/guests', None),
        ('payments', 'Payments', '/operations/payments', None),
        ('restaurants', 'Restaurants', '/operations/restaurants', None),
    )),
    ('cms', 'Content & Marketing', (
        ('hero', 'Hero Sections', '/cms/hero', None),
        ('special-offers', 'Special Offers', '/cms/special-offers', None),
        ('events', 'Events', '/cms/events', None),
        ('testimonials', 'Testimonials', '/cms/testimonials', None),
        ('faqs', 'FAQs', '/cms/faqs', None),
    )),
)


def build_menu(business_unit_id, badges=None, current_path=None):
    """
    Menu sections with paths under /{business_unit_id}/admin

    Args:
        business_unit_id: Current unit id
        badges: dict of badge key -> count; zero or missing counts show no badge
        current_path: Request path, used to flag the active item

    Returns:
        list of {'id', 'title', 'items': [{'id', 'label', 'path', 'badge', 'active'}]}
    """
    badges = badges or {}
    base = unit_admin_path(business_unit_id)
    sections = []
    for section_id, title, items in MENU_SECTIONS:
        menu_items = []
        for item_id, label, relative_path, badge_key in items:
            path = base + relative_path
            count = badges.get(badge_key) if badge_key else None
            if relative_path:
                active = current_path is not None and (current_path == path or current_path.startswith(path + '/'))
            else:
                active = current_path == path
            menu_items.append({
                'id': item_id,
                'label': label,
                'path': path,
                'badge': count or None,
                'active': active,
            })
        sections.append({'id': section_id, 'title': title, 'items': menu_items})
    return sections
