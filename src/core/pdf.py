"""PDF generation utilities using WeasyPrint."""
import logging
import re
from io import BytesIO

from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string

logger = logging.getLogger("portal")


def safe_pdf_filename(stem: str, fallback: str = "document") -> str:
    """Build a safe PDF filename from a human-readable stem."""
    safe = re.sub(r'[\\/:*?"<>|]+', "-", (stem or "").strip())
    safe = safe.strip(" .")
    if not safe:
        safe = fallback
    return f"{safe}.pdf"


def render_pdf_bytes(template_name, context) -> bytes:
    try:
        from weasyprint import HTML
    except (ImportError, OSError) as exc:
        logger.exception("WeasyPrint is unavailable for PDF rendering.")
        raise RuntimeError("PDF rendering backend unavailable") from exc

    html_string = render_to_string(template_name, context)
    pdf_file = BytesIO()
    HTML(string=html_string, base_url=str(settings.BASE_DIR)).write_pdf(pdf_file)
    return pdf_file.getvalue()


def render_pdf(template_name, context, filename="document.pdf"):
    """Render a Django template to PDF and return an HttpResponse."""
    response = HttpResponse(render_pdf_bytes(template_name, context), content_type="application/pdf")
    response["Content-Disposition"] = f'inline; filename="{filename}"'
    return response
