"""Dashboard response schemas"""
from smsdesk.schemas.base import CamelModel


class AdminDashboardStats(CamelModel):
    """Platform-wide counters for the admin overview cards."""

    # Users
    total_users: int
    active_users: int

    # Messages
    total_messages: int
    failed_messages: int

    # Work queue
    pending_credit_requests: int
