"""PDF Renderer - A4 invoice document built with reportlab platypus.

Invariants:
    - render_invoice_pdf never raises: failures are logged and reported as None
    - Amounts printed are the invoice's stored (recomputed) totals, never re-derived here
    - Line amounts use core line_amount() rounded to cents
"""

import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from invoice_desk.core.domain_types import TAX_RATE
from invoice_desk.core.entities import BusinessSettings, Invoice
from invoice_desk.core.invoice_totals import line_amount, quantize_money

logger = logging.getLogger(__name__)


def pdf_filename(invoice: Invoice) -> str:
    return f"Invoice-{invoice.invoice_number}.pdf"


def _money(currency: str, value) -> str:
    return f"{currency} {quantize_money(value):,.2f}"


def _text(value: str | None) -> str:
    """Escape for reportlab's mini-markup; newlines become line breaks."""
    return escape(value or "").replace("\n", "<br/>")


def _build_story(invoice: Invoice, settings: BusinessSettings, currency: str) -> list:
    styles = getSampleStyleSheet()
    normal = ParagraphStyle("InvNormal", parent=styles["Normal"], fontSize=10, leading=14)
    bold = ParagraphStyle("InvBold", parent=normal, fontName="Helvetica-Bold")
    white_bold = ParagraphStyle("InvHeader", parent=bold, textColor=colors.white)
    muted = ParagraphStyle("InvMuted", parent=normal, textColor=colors.gray)
    title = ParagraphStyle(
        "InvTitle", parent=styles["Heading1"], fontName="Helvetica-Bold",
        fontSize=24, spaceAfter=20, alignment=2,
    )
    right = ParagraphStyle("InvRight", parent=normal, alignment=2)

    story: list = []

    # Header: business (left) | INVOICE + number (right)
    sender = [Paragraph(_text(settings.business_name), bold)]
    if settings.business_subtitle:
        sender.append(Paragraph(_text(settings.business_subtitle), muted))
    sender += [
        Paragraph(_text(settings.address), normal),
        Paragraph(f"Email: {_text(settings.email)}", normal),
        Paragraph(f"Phone: {_text(settings.phone)}", normal),
    ]
    if settings.gst_tin:
        sender.append(Paragraph(f"GST TIN: {_text(settings.gst_tin)}", normal))
    heading = [
        Paragraph("INVOICE", title),
        Paragraph(f"#{_text(invoice.invoice_number)}", right),
        Paragraph(_text(invoice.status.value), right),
    ]
    header = Table([[sender, heading]], colWidths=[3.5 * inch, 2.7 * inch])
    header.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    story += [header, Spacer(1, 0.4 * inch)]

    # Bill to (left) | dates (right)
    bill_to = [
        Paragraph("Bill To:", muted),
        Paragraph(_text(invoice.client_name), bold),
        Paragraph(_text(invoice.client_email), normal),
        Paragraph(_text(invoice.client_address), normal),
    ]
    details = Table([
        [Paragraph("Invoice Date:", muted), Paragraph(invoice.date.isoformat(), right)],
        [Paragraph("Due Date:", muted), Paragraph(invoice.due_date.isoformat(), right)],
        [Paragraph("Balance Due:", bold), Paragraph(_money(currency, invoice.total), bold)],
    ], colWidths=[1.6 * inch, 1.6 * inch])
    details.setStyle(TableStyle([
        ("BACKGROUND", (0, 2), (-1, 2), colors.whitesmoke),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    middle = Table([[bill_to, details]], colWidths=[3.0 * inch, 3.2 * inch])
    middle.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
    ]))
    story += [middle, Spacer(1, 0.4 * inch)]

    # Line items
    rows = [[
        Paragraph("Description", white_bold), Paragraph("Qty", white_bold),
        Paragraph("Rate", white_bold), Paragraph("Amount", white_bold),
    ]]
    for item in invoice.items:
        rows.append([
            Paragraph(_text(item.description), normal),
            Paragraph(f"{item.quantity.normalize():f}", normal),
            Paragraph(_money(currency, item.rate), normal),
            Paragraph(_money(currency, line_amount(item)), normal),
        ])
    items_table = Table(rows, colWidths=[3 * inch, 0.8 * inch, 1.2 * inch, 1.2 * inch])
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.Color(0.2, 0.2, 0.2)),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LINEBELOW", (0, 1), (-1, -1), 0.25, colors.lightgrey),
        ("PADDING", (0, 0), (-1, -1), 8),
    ]))
    story += [items_table, Spacer(1, 0.2 * inch)]

    # Totals, pushed to the right
    tax_percent = f"{(TAX_RATE * 100).normalize():f}"
    totals = Table([
        [Paragraph("Subtotal:", bold), Paragraph(_money(currency, invoice.subtotal), right)],
        [Paragraph(f"GST ({tax_percent}%):", bold), Paragraph(_money(currency, invoice.tax), right)],
        [Paragraph("Total:", bold), Paragraph(_money(currency, invoice.total), bold)],
    ], colWidths=[1.5 * inch, 1.7 * inch])
    story += [Table([[None, totals]], colWidths=[3 * inch, 3.2 * inch])]

    if invoice.notes:
        story += [
            Spacer(1, 0.4 * inch),
            Paragraph("Notes:", bold),
            Paragraph(_text(invoice.notes), normal),
        ]
    return story


def render_invoice_pdf(
    invoice: Invoice, settings: BusinessSettings, currency: str,
) -> bytes | None:
    """Render the invoice to PDF bytes, or None when rendering fails."""
    buffer = io.BytesIO()
    try:
        doc = SimpleDocTemplate(
            buffer, pagesize=A4,
            rightMargin=40, leftMargin=40, topMargin=40, bottomMargin=40,
            title=f"Invoice {invoice.invoice_number}",
        )
        doc.build(_build_story(invoice, settings, currency))
    except Exception as e:
        logger.error(
            f"PDF generation failed for invoice {invoice.invoice_number}: {e}",
            exc_info=True,
            extra={"entity_kind": "invoices", "entity_id": invoice.id},
        )
        return None
    return buffer.getvalue()
