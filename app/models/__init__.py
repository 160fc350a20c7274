"""
Database models package
"""

from .guest import Guest
from .table import Table
from .relationship import GuestRelationship
from .email_log import EmailLog

__all__ = ["Guest", "Table", "GuestRelationship", "EmailLog"]
