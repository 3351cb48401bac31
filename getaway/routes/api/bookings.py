from flask import Blueprint, Response, current_app, jsonify, request

from getaway.extensions import db
from getaway.services import BookingLookupService, ReceiptService

api_booking_bp = Blueprint("api_booking", __name__)


@api_booking_bp.get("/booking-details")
def booking_details():
    booking_id = request.args.get("id")
    payment_id = request.args.get("payment")
    current_app.logger.info("Booking details requested: id=%s payment=%s", booking_id, payment_id)
    details = BookingLookupService(db.session).lookup(booking_id=booking_id, payment_id=payment_id)
    return jsonify({"success": True, "booking": details})


@api_booking_bp.get("/bookings/find-by-payment")
def find_by_payment():
    details = BookingLookupService(db.session).find_by_payment(request.args.get("paymentId"))
    return jsonify({"success": True, "booking": details, "foundBy": "payment_id"})


@api_booking_bp.get("/bookings/<booking_id>")
def booking_by_id(booking_id):
    details = BookingLookupService(db.session).get_confirmed(booking_id, payment_id=request.args.get("payment"))
    return jsonify({"success": True, "booking": details})


@api_booking_bp.get("/bookings/<booking_id>/receipt")
def booking_receipt(booking_id):
    details = BookingLookupService(db.session).get_confirmed(booking_id)
    pdf = ReceiptService.render_pdf(
        details,
        current_app.config["COMPANY_NAME"],
        current_app.config.get("COMPANY_EMAIL"),
        current_app.config.get("COMPANY_PHONE"),
    )
    return Response(
        pdf,
        mimetype="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={details['booking_reference']}.pdf"},
    )
