"""CSV export utilities."""
import csv

from django.http import HttpResponse

from core.text import format_cents


def cents_column(field: str):
    """Column getter rendering an integer cents field as dollars."""
    return lambda obj: format_cents(getattr(obj, field, 0))


def queryset_to_csv_response(queryset, columns, filename):
    """Write ``queryset`` as a CSV attachment.

    ``columns`` is a list of ``(field_or_callable, header)`` tuples. Strings
    are read with ``getattr``; callables receive the object.
    """
    response = HttpResponse(content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}.csv"'
    # UTF-8 BOM for Excel compatibility
    response.write("\ufeff")

    writer = csv.writer(response)
    writer.writerow([header for _, header in columns])

    for obj in queryset.iterator():
        writer.writerow([_cell(obj, field) for field, _ in columns])

    return response


def _cell(obj, field):
    if callable(field):
        value = field(obj)
    else:
        value = getattr(obj, field, "")
        display = getattr(obj, f"get_{field}_display", None)
        if callable(display):
            value = display()
    return "" if value is None else str(value)
