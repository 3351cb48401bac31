import re

from getaway.models import Destination
from getaway.models.enums import DestinationStatus


def parse_destination_id(value):
    """Integer ids or digit strings only; bools, floats and anything else resolve to ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"[0-9]+", value.strip()):
        return int(value.strip())
    return None


class DestinationService:
    def __init__(self, session):
        self.session = session

    def list_published(self):
        return (
            self.session.query(Destination)
            .filter(Destination.status == DestinationStatus.PUBLISHED)
            .order_by(Destination.name.asc())
            .all()
        )

    def get_active(self, destination_id):
        key = parse_destination_id(destination_id)
        if key is None:
            return None
        return (
            self.session.query(Destination)
            .filter(Destination.id == key, Destination.status == DestinationStatus.PUBLISHED)
            .first()
        )

    @staticmethod
    def to_dict(destination):
        return {
            "id": destination.id,
            "name": destination.name,
            "slug": destination.slug,
            "country": destination.country,
        }
