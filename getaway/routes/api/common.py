from flask import current_app, request

from getaway.extensions import db
from getaway.services import AuditLogService


def client_ip():
    # ProxyFix has already resolved the trusted X-Forwarded-For hop into remote_addr.
    return request.remote_addr or "unknown"


def user_agent():
    return request.headers.get("User-Agent") or "unknown"


def payment_gateway():
    return current_app.extensions["payment_gateway"]


def audit_log():
    return AuditLogService(db.session, current_app.logger)
