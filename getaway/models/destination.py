from getaway.extensions import db
from getaway.models.base import TimestampMixin
from getaway.models.enums import DestinationStatus


class Destination(TimestampMixin, db.Model):
    __tablename__ = "destinations"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(160), nullable=False)
    slug = db.Column(db.String(180), nullable=False, unique=True, index=True)
    country = db.Column(db.String(120), nullable=False)
    status = db.Column(db.String(24), nullable=False, default=DestinationStatus.DRAFT, index=True)

    bookings = db.relationship("Booking", back_populates="destination", lazy="dynamic")
