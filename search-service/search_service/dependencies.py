"""
FastAPI dependencies for authentication
"""
import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import logging

from .config import settings
from .schemas import User

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def verify_token_with_auth_service(token: str) -> Optional[dict]:
    """
    Verify JWT token with Auth Service

    Args:
        token: JWT access token

    Returns:
        User data if token is valid, None otherwise
    """
    try:
        async with httpx.AsyncClient(timeout=settings.AUTH_TIMEOUT_SECONDS) as client:
            response = await client.get(
                f"{settings.AUTH_SERVICE_URL}/api/v1/auth/me",
                headers={"Authorization": f"Bearer {token}"},
            )

            if response.status_code == 200:
                return response.json()

            logger.warning(f"Token verification failed: {response.status_code}")
            return None

    except httpx.TimeoutException:
        logger.error("Auth service timeout during token verification")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service is temporarily unavailable",
        )
    except httpx.HTTPError as e:
        logger.error(f"Failed to reach auth service: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service is unavailable",
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> User:
    """
    Get current authenticated user

    Raises:
        HTTPException: If token is invalid or the account is inactive
    """
    user_data = await verify_token_with_auth_service(credentials.credentials)

    if not user_data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = User(**user_data)
    except (TypeError, ValueError) as e:
        logger.error(f"Error parsing user data: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user data",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    return user
