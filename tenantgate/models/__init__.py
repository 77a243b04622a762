"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

Usage:
    from tenantgate.models import User, Organization, Role
"""

from .organization import Organization
from .role_enum import Role
from .threat_model import ThreatModel
from .user import User

__all__ = [
    "Organization",
    "Role",
    "ThreatModel",
    "User",
]
