"""
PDF invoices for orders (reportlab)

Layout: title and store name on the left, invoice number and date on the
right, Bill To / Ship To blocks, a striped items table, the order total and a
footer on every page.
"""
import io
from datetime import datetime
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from gleaming_admin.core.config import settings
from gleaming_admin.core.exceptions import EmptyInvoiceError
from gleaming_admin.domain.order import Address, Order, OrderItem
from gleaming_admin.services.delivery import store_timezone

HEADER_BLUE = colors.Color(41 / 255, 128 / 255, 185 / 255)
STRIPE_GREY = colors.Color(245 / 255, 245 / 255, 245 / 255)

_styles = getSampleStyleSheet()
TITLE_STYLE = ParagraphStyle("InvoiceTitle", parent=_styles["Normal"], fontName="Helvetica-Bold", fontSize=20, leading=24)
BODY_STYLE = ParagraphStyle("InvoiceBody", parent=_styles["Normal"], fontName="Helvetica", fontSize=10, leading=13)
BODY_RIGHT = ParagraphStyle("InvoiceBodyRight", parent=BODY_STYLE, alignment=TA_RIGHT)
HEADING_STYLE = ParagraphStyle("InvoiceHeading", parent=BODY_STYLE, fontName="Helvetica-Bold", fontSize=12, leading=16)


def money(value: float) -> str:
    return f"{settings.INVOICE_CURRENCY_PREFIX}{value:.2f}"


def format_invoice_date(value: Optional[datetime]) -> str:
    """"March 5, 2025" in the store's timezone, or N/A"""
    if value is None:
        return "N/A"
    local = value.astimezone(store_timezone())
    return f"{local:%B} {local.day}, {local.year}"


def invoice_filename(order: Order) -> str:
    return f"invoice-{order.invoice_number}.pdf"


def _quantity(value: float):
    return int(value) if float(value).is_integer() else value


def _address_block(heading: str, customer_name: str, address: Optional[Address]) -> List:
    lines = [customer_name] + (address.format_lines() if address else [])
    text = "<br/>".join(escape(line) for line in lines if line)
    return [Paragraph(heading, HEADING_STYLE), Spacer(1, 2 * mm), Paragraph(text, BODY_STYLE)]


def _draw_footer(canvas, doc):
    width, _ = A4
    canvas.saveState()
    canvas.setLineWidth(0.3)
    canvas.line(14 * mm, 30 * mm, width - 14 * mm, 30 * mm)
    canvas.setFont("Helvetica", 10)
    canvas.drawCentredString(width / 2, 20 * mm, "Thank you for your business!")
    canvas.restoreState()


def generate_invoice_pdf(order: Order, items: List[OrderItem]) -> bytes:
    """
    Render the invoice for ``order``.

    Line subtotals are unit price times quantity; the total is the order's
    stored total.

    Raises:
        EmptyInvoiceError: the order has no line items
    """
    if not items:
        raise EmptyInvoiceError()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=35 * mm,
        title=f"Invoice {order.invoice_number}",
        author=settings.STORE_NAME,
    )
    content_width = doc.width

    header = Table(
        [
            [Paragraph("Invoice", TITLE_STYLE), Paragraph(f"Invoice #: {escape(order.invoice_number)}", BODY_RIGHT)],
            [Paragraph(escape(settings.STORE_NAME), BODY_STYLE),
             Paragraph(f"Date: {format_invoice_date(order.order_date)}", BODY_RIGHT)],
        ],
        colWidths=[content_width / 2, content_width / 2],
    )
    header.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))

    customer_name = order.customer.name
    addresses = Table(
        [[
            _address_block("Bill To:", customer_name, order.billing_address),
            _address_block("Ship To:", customer_name, order.shipping_address),
        ]],
        colWidths=[content_width * 0.53, content_width * 0.47],
    )
    addresses.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
    ]))

    rows = [["Item", "Quantity", "Unit Price", "Subtotal"]]
    for item in items:
        rows.append([
            Paragraph(escape(item.name), BODY_STYLE),
            str(_quantity(item.quantity)),
            money(item.price),
            money(item.price * item.quantity),
        ])

    items_table = Table(
        rows,
        colWidths=[content_width * 0.46, content_width * 0.14, content_width * 0.2, content_width * 0.2],
        repeatRows=1,
    )
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [STRIPE_GREY, colors.white]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
    ]))

    total = Table(
        [["Total:", money(order.total_amount)]],
        colWidths=[content_width * 0.8, content_width * 0.2],
    )
    total.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 12),
        ("ALIGN", (0, 0), (0, 0), "RIGHT"),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
    ]))

    story = [
        header,
        Spacer(1, 3 * mm),
        HRFlowable(width="100%", thickness=0.3, color=colors.black),
        Spacer(1, 6 * mm),
        addresses,
        Spacer(1, 8 * mm),
        items_table,
        Spacer(1, 4 * mm),
        total,
    ]

    doc.build(story, onFirstPage=_draw_footer, onLaterPages=_draw_footer)
    return buffer.getvalue()
