"""
FastAPI Dependencies
Current user and actor resolution
"""
from typing import Optional

from fastapi import Depends, HTTPException, status, Header

from domain.entities import User
from domain.enums import UserRole
from domain.value_objects import Actor
from application.repositories.interfaces import (
    ICompanyRepository,
    ITalentRepository,
    IUserRepository,
)
from application.services.auth.interfaces import IJwtService
from core.exceptions import AuthenticationException
from .container import (
    get_company_repository,
    get_jwt_service,
    get_talent_repository,
    get_user_repository,
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Optional[str] = Header(None),
    jwt_service: IJwtService = Depends(get_jwt_service),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> User:
    """
    Get current authenticated user from JWT token

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            ...
    """
    if not authorization:
        raise _unauthorized("Missing authorization header")

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format")

    try:
        user_id = jwt_service.user_id_from_token(parts[1])
    except AuthenticationException:
        raise _unauthorized("Invalid or expired token")

    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or inactive")
    return user


async def get_actor(
    user: User = Depends(get_current_user),
    talent_repo: ITalentRepository = Depends(get_talent_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
) -> Actor:
    """Current user with the marketplace profile resolved"""
    talent_id = None
    company_id = None

    if user.role == UserRole.TALENT:
        talent = await talent_repo.get_by_user_id(user.id)
        talent_id = talent.id if talent else None
    elif user.role == UserRole.COMPANY:
        company = await company_repo.get_by_user_id(user.id)
        company_id = company.id if company else None

    return Actor(user_id=user.id, role=user.role, talent_id=talent_id, company_id=company_id)


async def require_talent(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_talent or actor.talent_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Talent profile required",
        )
    return actor


async def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return actor
