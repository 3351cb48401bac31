from flask import Blueprint, current_app, jsonify, request

from getaway.extensions import db, limiter
from getaway.models.enums import PAY_NOW_FEATURE
from getaway.routes.api.common import audit_log, client_ip, payment_gateway, user_agent
from getaway.services import FeatureService, OrderService, VerificationService

api_payment_bp = Blueprint("api_payment", __name__)


def _payment_rate_limit():
    return current_app.config.get("PAYMENT_RATE_LIMIT", "10 per 60 minutes")


@api_payment_bp.post("/create-order")
@limiter.limit(_payment_rate_limit)
def create_order():
    FeatureService(db.session, current_app.logger).require_enabled(PAY_NOW_FEATURE)
    payload = request.get_json(silent=True)
    form = payload if isinstance(payload, dict) else {}
    current_app.logger.info(
        "Pay Now order requested: destination=%s amount=%s type=%s",
        form.get("destinationId"),
        form.get("amount"),
        form.get("paymentType"),
    )
    service = OrderService(
        db.session,
        payment_gateway(),
        current_app.config,
        audit_log(),
        current_app.logger,
    )
    result = service.create_order(payload, client_ip=client_ip(), user_agent=user_agent())
    return jsonify({"success": True, **result})


@api_payment_bp.post("/verify-payment")
def verify_payment():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}
    service = VerificationService(db.session, payment_gateway(), audit_log(), current_app.logger)
    result = service.verify(
        payload.get("razorpay_order_id"),
        payload.get("razorpay_payment_id"),
        payload.get("razorpay_signature"),
        client_ip=client_ip(),
        user_agent=user_agent(),
    )
    return jsonify({"success": True, **result})
