from __future__ import annotations

import logging
from datetime import datetime

from fpdf import FPDF

from fleetdesk.constants import LOCAL_TZ, PAYMENT_TYPE_LABELS
from fleetdesk.models import format_sar
from fleetdesk.models.ledger import Installment
from fleetdesk.models.payment import Payment
from fleetdesk.settings import settings

logger = logging.getLogger(__name__)

PRIMARY = (30, 64, 175)
LIGHT = (243, 244, 246)
TEXT = (31, 41, 55)
MUTED = (107, 114, 128)
WHITE = (255, 255, 255)

STATUS_COLORS = {
    "paid": (6, 95, 70),
    "partial": (146, 64, 14),
    "unpaid": (153, 27, 27),
}


def _safe(text: str) -> str:
    """Core PDF fonts only cover latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")


def _fmt_date(value) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


class ReceiptPDF:
    """Payment receipts: a full summary, or a voucher for a single installment."""

    def generate(
        self,
        payment: Payment,
        parties: list[tuple[str, str]],
        installment: Installment | None = None,
    ) -> bytes:
        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)
        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        title = "Payment Voucher" if installment else f"{PAYMENT_TYPE_LABELS[payment.payment_type.value]} Summary"
        self._draw_header(pdf, page_w, title, payment)
        self._draw_details(pdf, page_w, "Parties", parties)
        self._draw_details(pdf, page_w, "Transaction", self._transaction_lines(payment))

        rows = [installment] if installment else payment.installments
        self._draw_installments(pdf, page_w, rows)
        if installment is None:
            self._draw_summary(pdf, page_w, payment)
        self._draw_footer(pdf)

        output = bytes(pdf.output())
        logger.debug(
            "Receipt generated: payment=%s installment=%s size=%d bytes",
            payment.receipt_code,
            installment.uuid if installment else None,
            len(output),
        )
        return output

    @staticmethod
    def _transaction_lines(payment: Payment) -> list[tuple[str, str]]:
        lines = [("Vehicle", f"{payment.vehicle_type} {payment.plate_no}".strip() or "-")]
        if payment.from_location or payment.to_location:
            lines.append(("Route", f"{payment.from_location} -> {payment.to_location}"))
        if payment.acquisition_date:
            lines.append(("Acquisition date", _fmt_date(payment.acquisition_date)))
        if payment.rental_date:
            lines.append(("Rental date", _fmt_date(payment.rental_date)))
        if payment.description:
            lines.append(("Description", payment.description))
        return lines

    def _draw_header(self, pdf: FPDF, page_w: float, title: str, payment: Payment) -> None:
        x = pdf.l_margin
        y = pdf.get_y()
        pdf.set_fill_color(*PRIMARY)
        pdf.rect(x, y, page_w, 30, "F")

        pdf.set_y(y + 6)
        pdf.set_text_color(*WHITE)
        pdf.set_font("Helvetica", "B", 18)
        pdf.cell(0, 10, _safe(settings.receipt_company_name), align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", "", 11)
        pdf.cell(0, 8, _safe(title), align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(8)

        pdf.set_text_color(*TEXT)
        pdf.set_font("Helvetica", "B", 10)
        half = page_w / 2
        pdf.cell(half, 6, f"Receipt No: {payment.receipt_code}")
        pdf.cell(half, 6, f"Printed: {datetime.now(LOCAL_TZ).strftime('%d/%m/%Y %H:%M')}", align="R")
        pdf.ln(10)

    def _draw_details(self, pdf: FPDF, page_w: float, heading: str, lines: list[tuple[str, str]]) -> None:
        pdf.set_font("Helvetica", "B", 12)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(0, 8, heading, new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", "", 10)
        pdf.set_text_color(*TEXT)
        for label, value in lines:
            pdf.set_font("Helvetica", "B", 10)
            pdf.cell(page_w * 0.3, 6, _safe(label))
            pdf.set_font("Helvetica", "", 10)
            pdf.multi_cell(page_w * 0.7, 6, _safe(value or "-"), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    def _draw_installments(self, pdf: FPDF, page_w: float, installments: list[Installment]) -> None:
        widths = (page_w * 0.1, page_w * 0.3, page_w * 0.25, page_w * 0.35)
        pdf.set_font("Helvetica", "B", 12)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(0, 8, "Installments", new_x="LMARGIN", new_y="NEXT")

        pdf.set_fill_color(*LIGHT)
        pdf.set_text_color(*TEXT)
        pdf.set_font("Helvetica", "B", 10)
        for width, header in zip(widths, ("#", "Amount", "Paid on", "Notes")):
            pdf.cell(width, 8, header, fill=True)
        pdf.ln(8)

        pdf.set_font("Helvetica", "", 10)
        if not installments:
            pdf.set_text_color(*MUTED)
            pdf.cell(page_w, 8, "No installments recorded", align="C", new_x="LMARGIN", new_y="NEXT")
            pdf.set_text_color(*TEXT)
        for index, inst in enumerate(installments, start=1):
            pdf.cell(widths[0], 7, str(index))
            pdf.cell(widths[1], 7, format_sar(inst.amount))
            pdf.cell(widths[2], 7, _fmt_date(inst.paid_date))
            pdf.cell(widths[3], 7, _safe(inst.notes or "-"), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    def _draw_summary(self, pdf: FPDF, page_w: float, payment: Payment) -> None:
        label_w = page_w * 0.7
        value_w = page_w * 0.3
        pdf.set_fill_color(*LIGHT)
        for label, amount in (
            ("Total amount", payment.total_amount),
            ("Total paid", payment.total_paid),
            ("Balance due", payment.total_due),
        ):
            pdf.set_font("Helvetica", "B", 10)
            pdf.cell(label_w, 8, label, fill=True, align="R")
            pdf.cell(value_w, 8, format_sar(amount), fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_font("Helvetica", "B", 11)
        pdf.set_text_color(*STATUS_COLORS[payment.status.value])
        pdf.cell(label_w, 9, "Status", align="R")
        pdf.cell(value_w, 9, payment.status.value.upper(), align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(*TEXT)

    def _draw_footer(self, pdf: FPDF) -> None:
        pdf.ln(12)
        pdf.set_font("Helvetica", "", 8)
        pdf.set_text_color(*MUTED)
        pdf.cell(0, 5, "This is a computer generated receipt.", align="C", new_x="LMARGIN", new_y="NEXT")
