from sqlalchemy.exc import SQLAlchemyError

from getaway.errors import FeatureDisabled
from getaway.models import AdminControl

FEATURE_DISABLED_MESSAGE = "Payment feature is temporarily unavailable."


class FeatureService:
    def __init__(self, session, logger):
        self.session = session
        self.logger = logger

    def status(self, feature_name):
        """Return ``(is_enabled, disabled_reason)``; unknown features and read failures count as enabled."""
        try:
            control = self.session.get(AdminControl, feature_name)
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.warning("Feature status check failed for %s: %s", feature_name, exc)
            return True, None
        if not control:
            return True, None
        return bool(control.is_enabled), control.disabled_reason

    def require_enabled(self, feature_name):
        is_enabled, reason = self.status(feature_name)
        if not is_enabled:
            raise FeatureDisabled(FEATURE_DISABLED_MESSAGE, details=reason)

    def set_status(self, feature_name, is_enabled, reason=None, changed_by=None):
        control = self.session.get(AdminControl, feature_name)
        if not control:
            control = AdminControl(feature_name=feature_name)
            self.session.add(control)
        control.is_enabled = bool(is_enabled)
        control.disabled_reason = None if is_enabled else reason
        control.disabled_by = None if is_enabled else changed_by
        self.session.commit()
        return control
