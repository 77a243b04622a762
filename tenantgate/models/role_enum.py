"""
Role Enumeration Module
=======================

Defines all valid roles in the system.

Values are the strings stored in the user table and carried in session
tokens; member names describe what each role is for.

Security Purpose:
- Prevents arbitrary role injection
- Keeps every role table closed over the same enumeration
"""

from enum import Enum


class Role(str, Enum):
    """
    System-wide allowed roles.
    """

    PLATFORM_ADMIN = "ADMIN"
    ORG_ADMIN = "BUSINESS_ADMIN"
    ORG_USER = "BUSINESS_USER"
    LEGACY_USER = "USER"
