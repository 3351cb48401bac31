from flask import Blueprint, jsonify

from getaway.extensions import cache, db
from getaway.services import DestinationService

api_destination_bp = Blueprint("api_destination", __name__)


@api_destination_bp.get("/published")
@cache.cached(timeout=300)
def published_destinations():
    service = DestinationService(db.session)
    return jsonify(
        {
            "success": True,
            "destinations": [DestinationService.to_dict(d) for d in service.list_published()],
        }
    )
