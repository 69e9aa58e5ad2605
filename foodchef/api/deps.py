"""
Auth Dependencies
Bearer token guard and self-only authorization checks
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from foodchef.services.identity import (
    FirebaseIdentityProvider,
    TokenVerificationError,
    get_identity_provider,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="unauthorized access",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity_provider: FirebaseIdentityProvider = Depends(get_identity_provider),
) -> Dict[str, Any]:
    """Decoded identity of the caller (at least ``email``)"""
    if credentials is None or not credentials.credentials:
        raise _unauthorized()

    try:
        return await identity_provider.verify_token(credentials.credentials)
    except TokenVerificationError as e:
        logger.debug(f"Token rejected: {e}")
        raise _unauthorized()


def ensure_self(current_user: Dict[str, Any], email: str) -> None:
    """Callers may only read data filed under their own email"""
    if current_user.get("email") != email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
