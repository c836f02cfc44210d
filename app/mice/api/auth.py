import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from pydantic import ValidationError

from .schemas.staff import StaffUser, TokenData
from ..config.config import settings

logger = logging.getLogger(__name__)

# Tokens come from the hosted auth provider; tokenUrl only documents where.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/v1/token")


def decode_access_token(token: str) -> TokenData:
    """Verifies the token signature and expiry and validates its claims."""
    options = {"verify_aud": bool(settings.TOKEN_AUDIENCE)}
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        audience=settings.TOKEN_AUDIENCE,
        options=options,
    )
    return TokenData.model_validate(payload)


async def get_current_staff(token: str = Depends(oauth2_scheme)) -> StaffUser:
    """
    Resolves the bearer token of the request into the calling staff member.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not settings.SECRET_KEY:
        logger.error("SECRET_KEY is not configured, rejecting every token.")
        raise credentials_exception
    try:
        token_data = decode_access_token(token)
    except (jwt.PyJWTError, ValidationError) as e:
        logger.warning(f"Token validation error: {e}")
        raise credentials_exception

    if not token_data.sub:
        logger.warning("Token is valid but has no subject.")
        raise credentials_exception

    return StaffUser(id=token_data.sub, email=token_data.email)
