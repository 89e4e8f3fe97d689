"""
Form field parsing helpers
Each parser raises ValueError with a user-facing message; routes collect
the messages into an errors dict and flash them.
"""
import re
from datetime import datetime

from utils.decimal_utils import parse_decimal_input

SLUG_STRIP_REGEX = re.compile(r'[^a-z0-9 -]')
TIME_REGEX = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def get_str(form, name, required=False, label=None, max_length=None):
    value = (form.get(name) or '').strip()
    if required and not value:
        raise ValueError(f'{label or name} is required')
    if max_length and len(value) > max_length:
        raise ValueError(f'{label or name} must be at most {max_length} characters')
    return value or None


def get_bool(form, name):
    return form.get(name) in ('on', 'true', '1', 'yes')


def get_int(form, name, required=False, label=None, minimum=None, maximum=None, default=None):
    raw = (form.get(name) or '').strip()
    if not raw:
        if required:
            raise ValueError(f'{label or name} is required')
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f'{label or name} must be a whole number')
    if minimum is not None and value < minimum:
        raise ValueError(f'{label or name} must be at least {minimum}')
    if maximum is not None and value > maximum:
        raise ValueError(f'{label or name} must be at most {maximum}')
    return value


def get_decimal(form, name, required=False, label=None):
    raw = (form.get(name) or '').strip()
    if not raw:
        if required:
            raise ValueError(f'{label or name} is required')
        return None
    return parse_decimal_input(raw, error_label=label or name)


def get_date(form, name, required=False, label=None):
    raw = (form.get(name) or '').strip()
    if not raw:
        if required:
            raise ValueError(f'{label or name} is required')
        return None
    try:
        return datetime.strptime(raw, '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f'{label or name} must be a date (YYYY-MM-DD)')


def get_time(form, name, label=None):
    raw = (form.get(name) or '').strip()
    if not raw:
        return None
    if not TIME_REGEX.match(raw):
        raise ValueError(f'{label or name} must be a time (HH:MM)')
    return raw


def get_choice(form, name, choices, default=None, label=None):
    value = (form.get(name) or '').strip() or default
    if value not in choices:
        raise ValueError(f'{label or name} is not a valid option')
    return value


def generate_slug(title):
    """Lowercase, keep [a-z0-9 -], collapse whitespace and dashes"""
    slug = SLUG_STRIP_REGEX.sub('', (title or '').lower())
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


class FormReader:
    """
    Collects field errors instead of stopping at the first one

        reader = FormReader(request.form)
        name = reader.read('name', get_str, required=True, label='Name')
        if reader.errors: ...
    """

    def __init__(self, form):
        self.form = form
        self.errors = {}

    def read(self, name, parser, *args, **kwargs):
        try:
            return parser(self.form, name, *args, **kwargs)
        except ValueError as e:
            self.errors[name] = str(e)
            return None

    def add_error(self, name, message):
        self.errors.setdefault(name, message)


class Field:
    """Declarative form field: how to parse it and how to render it"""

    TEXT_KINDS = ('text', 'email', 'textarea', 'url', 'color')

    def __init__(self, name, label, kind='text', required=False, choices=None,
                 max_length=None, minimum=None, maximum=None, default=None, help_text=None,
                 coerce=None):
        self.name = name
        self.label = label
        self.kind = kind
        self.required = required
        self.choices = choices
        self.max_length = max_length
        self.minimum = minimum
        self.maximum = maximum
        self.default = default
        self.help_text = help_text
        self.coerce = coerce

    @property
    def options(self):
        """[(value, label)] for select fields"""
        if self.choices is None:
            return []
        if isinstance(self.choices, dict):
            return list(self.choices.items())
        return [(c, c) if not isinstance(c, tuple) else c for c in self.choices]

    def parse(self, form):
        if self.kind in self.TEXT_KINDS:
            value = get_str(form, self.name, self.required, self.label, self.max_length)
            if value and self.kind == 'email' and '@' not in value:
                raise ValueError(f'{self.label} must be a valid email address')
            return value
        if self.kind == 'int':
            return get_int(form, self.name, self.required, self.label,
                           self.minimum, self.maximum, self.default)
        if self.kind == 'decimal':
            return get_decimal(form, self.name, self.required, self.label)
        if self.kind == 'date':
            return get_date(form, self.name, self.required, self.label)
        if self.kind == 'time':
            return get_time(form, self.name, self.label)
        if self.kind == 'bool':
            return get_bool(form, self.name)
        if self.kind == 'select':
            if not self.required and not (form.get(self.name) or '').strip() and self.default is None:
                return None
            value = get_choice(form, self.name, [v for v, _ in self.options], self.default, self.label)
            return self.coerce(value) if self.coerce and value is not None else value
        raise ValueError(f'Unsupported field kind {self.kind}')

    def display_value(self, record=None, form=None):
        """Value to show in the input: submitted value, else the record's, else the default"""
        if form is not None:
            if self.kind == 'bool':
                return get_bool(form, self.name)
            return form.get(self.name, '')
        value = getattr(record, self.name, None) if record is not None else None
        if value is None:
            value = self.default
        if value is None:
            return False if self.kind == 'bool' else ''
        if self.kind == 'date':
            return value.isoformat()
        if self.kind == 'select':
            return str(value)
        return value


def read_fields(form, fields):
    """
    Parse every field of a form

    Returns:
        (data dict, errors dict)
    """
    reader = FormReader(form)
    data = {}
    for field in fields:
        data[field.name] = reader.read(field.name, lambda f, n, fld=field: fld.parse(f))
    return data, reader.errors
