"""Domain Entities - Core business objects"""

from .user import User
from .talent import Talent
from .company import Company
from .job import Job
from .application import Application, StatusHistoryEntry
from .chat import Chat, ChatMessage
__all__ = [
    "User",
    "Talent",
    "Company",
    "Job",
    "Application",
    "StatusHistoryEntry",
    "Chat",
    "ChatMessage",
]
