"""
Authentication Service Interfaces
"""
from abc import ABC, abstractmethod
from typing import Dict
from uuid import UUID


class IJwtService(ABC):
    """Access token issuing and verification"""

    @abstractmethod
    def create_access_token(self, user_id: UUID) -> str:
        """Create a signed access token for the user"""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Dict:
        """Decode a token, raising AuthenticationException when invalid"""
        pass
