"""Enum types for stored status / role columns."""

from enum import Enum


class InterestStatus(str, Enum):
    """Lifecycle of a contact request."""
    new = "new"
    contacted = "contacted"
    accepted = "accepted"
    rejected = "rejected"


class UserRole(str, Enum):
    """Role of an authenticated user.  Only ``admin`` grants admin access."""
    user = "user"
    admin = "admin"
