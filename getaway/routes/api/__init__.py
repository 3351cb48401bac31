from flask import Blueprint

from getaway.routes.api.admin import api_admin_bp
from getaway.routes.api.bookings import api_booking_bp
from getaway.routes.api.destinations import api_destination_bp
from getaway.routes.api.payments import api_payment_bp

api_bp = Blueprint("api", __name__)
api_bp.register_blueprint(api_payment_bp, url_prefix="/payments")
api_bp.register_blueprint(api_booking_bp)
api_bp.register_blueprint(api_destination_bp, url_prefix="/destinations")
api_bp.register_blueprint(api_admin_bp, url_prefix="/admin")
