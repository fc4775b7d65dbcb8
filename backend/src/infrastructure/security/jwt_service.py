"""
JWT Service Implementation
HS256 access tokens carrying the user id in "sub"
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from uuid import UUID

from jose import jwt, JWTError
from loguru import logger

from core.config import settings, DEFAULT_SECRET_KEY
from core.exceptions import AuthenticationException
from application.services.auth.interfaces import IJwtService


class JwtService(IJwtService):
    """JWT service using a shared secret"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes or settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

        if settings.ENVIRONMENT == "production" and self.secret_key == DEFAULT_SECRET_KEY:
            logger.warning("JWT_SECRET_KEY is the default value. Set a real secret in production!")

    def create_access_token(self, user_id: UUID) -> str:
        """Create access token"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "exp": now + timedelta(minutes=self.expire_minutes),
            "iat": now,
            "type": "access",
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict:
        """Verify and decode token"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT verification failed: {str(e)}")
            raise AuthenticationException("Invalid or expired token")

        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthenticationException("Invalid token payload")
        return payload

    def user_id_from_token(self, token: str) -> UUID:
        payload = self.verify_token(token)
        try:
            return UUID(payload["sub"])
        except ValueError:
            raise AuthenticationException("Invalid token subject")
