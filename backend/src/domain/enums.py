"""
Domain Enums
Business enumerations for the marketplace
"""
from enum import Enum


class UserRole(str, Enum):
    """Account role, decides which side of the marketplace a user acts on"""
    TALENT = "talent"
    COMPANY = "company"
    ADMIN = "admin"


class SenderRole(str, Enum):
    """Author side of a chat message"""
    TALENT = "talent"
    COMPANY = "company"
