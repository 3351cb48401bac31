from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


class ReceiptService:
    @staticmethod
    def render_pdf(details, company_name, company_email=None, company_phone=None):
        buffer = BytesIO()
        p = canvas.Canvas(buffer, pagesize=A4)
        _width, height = A4

        y = height - 60
        p.setFont("Helvetica-Bold", 22)
        p.drawString(50, y, f"{company_name} Payment Receipt")

        y -= 36
        p.setFont("Helvetica", 12)
        lines = [
            f"Booking Reference: {details['booking_reference']}",
            f"Date: {details['created_at'] or ''}",
            f"Customer: {details['customer_name']}",
            f"Email: {details['customer_email']}",
            f"Phone: {details['customer_phone']}",
            f"Destination: {details['destination_name']}, {details['destination_country']}",
            f"Payment Type: {details['payment_type']}",
            f"Amount: {details['currency']} {details['total_amount']:,.2f}",
            f"Payment ID: {details['payment_id']}",
        ]
        if details.get("quick_payment_notes"):
            lines.append(f"Notes: {details['quick_payment_notes'][:90]}")

        for line in lines:
            p.drawString(50, y, line)
            y -= 24

        contact = " | ".join(item for item in (company_email, company_phone) if item)
        if contact:
            y -= 12
            p.setFont("Helvetica-Oblique", 10)
            p.drawString(50, y, f"Questions? {contact}")

        p.showPage()
        p.save()
        buffer.seek(0)
        return buffer.getvalue()
