"""ORM Models Package"""

from .user import UserModel
from .talent import TalentModel
from .company import CompanyModel
from .job import JobModel
from .application import ApplicationModel, ApplicationStatusHistoryModel
from .chat import ChatModel, ChatMessageModel

__all__ = [
    "UserModel",
    "TalentModel",
    "CompanyModel",
    "JobModel",
    "ApplicationModel",
    "ApplicationStatusHistoryModel",
    "ChatModel",
    "ChatMessageModel",
]
