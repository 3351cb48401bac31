from flask import Blueprint, current_app, jsonify, request

from getaway.errors import InvalidInput
from getaway.extensions import db
from getaway.services import FeatureService

api_admin_bp = Blueprint("api_admin", __name__)


@api_admin_bp.get("/feature-status")
def feature_status():
    feature = (request.args.get("feature") or "").strip()
    if not feature:
        raise InvalidInput("Feature name is required")
    is_enabled, reason = FeatureService(db.session, current_app.logger).status(feature)
    return jsonify({"success": True, "isEnabled": is_enabled, "disabledReason": reason})
