"""
Shared list/form/delete handling for the business-unit admin pages

Each page names its endpoints with a common prefix:
    <prefix>_list, <prefix>_create, <prefix>_edit, <prefix>_delete
"""
import logging

from flask import abort, flash, redirect, render_template, request, url_for
from flask_login import current_user

from utils.forms import read_fields

logger = logging.getLogger(__name__)


def _cell(record, getter):
    if callable(getter):
        return getter(record)
    value = record
    for part in getter.split('.'):
        value = getattr(value, part, None) if value is not None else None
    return value


def table_rows(records, columns):
    """[{'id', 'record', 'cells'}] for the generic list template"""
    return [
        {'id': record.id, 'record': record, 'cells': [_cell(record, getter) for _, getter in columns]}
        for record in records
    ]


def list_view(business_unit_id, records, title, columns, endpoint, detail_endpoint=None,
              can_create=True, can_edit=True, can_delete=True, filters=None, **extra):
    return render_template(
        'admin/list.html',
        title=title,
        columns=[label for label, _ in columns],
        rows=table_rows(records, columns),
        endpoint=endpoint,
        detail_endpoint=detail_endpoint,
        can_create=can_create,
        can_edit=can_edit,
        can_delete=can_delete,
        filters=filters or [],
        business_unit_id=business_unit_id,
        **extra
    )


def form_view(business_unit_id, service, fields, title, endpoint, record_id=None, prepare=None):
    """
    GET renders the form; POST parses, saves through the service and
    redirects to the list, or re-renders with the errors flashed.

    Args:
        prepare: optional callable(data) adjusting parsed data before saving
    """
    record = None
    if record_id is not None:
        record = service.get(business_unit_id, record_id)
        if record is None:
            abort(404)

    errors = {}
    if request.method == 'POST':
        data, errors = read_fields(request.form, fields)
        if not errors:
            if prepare is not None:
                data = prepare(data)
            if record is None:
                result = service.create(business_unit_id, data, actor=current_user)
            else:
                result = service.update(business_unit_id, record.id, data, actor=current_user)

            if result['success']:
                flash(result['message'], 'success')
                return redirect(url_for(f'{endpoint}_list', business_unit_id=business_unit_id))
            errors = result['errors']
            if not errors:
                flash(result['message'], 'danger')

        for message in errors.values():
            flash(message, 'danger')

    return render_template(
        'admin/form.html',
        title=title,
        fields=fields,
        record=record,
        submitted=request.form if request.method == 'POST' else None,
        errors=errors,
        endpoint=endpoint,
        business_unit_id=business_unit_id,
    )


def delete_view(business_unit_id, service, endpoint, record_id):
    if service.get(business_unit_id, record_id) is None:
        abort(404)
    result = service.delete(business_unit_id, record_id, actor=current_user)
    flash(result['message'], 'success' if result['success'] else 'danger')
    return redirect(url_for(f'{endpoint}_list', business_unit_id=business_unit_id))
