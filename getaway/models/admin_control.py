from getaway.extensions import db
from getaway.models.base import TimestampMixin


class AdminControl(TimestampMixin, db.Model):
    __tablename__ = "admin_controls"

    feature_name = db.Column(db.String(64), primary_key=True)
    is_enabled = db.Column(db.Boolean, nullable=False, default=True)
    disabled_reason = db.Column(db.String(255), nullable=True)
    disabled_by = db.Column(db.String(120), nullable=True)
