# app/mice/api/utilities/limiter.py

from fastapi import Request
import jwt

from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config.config import settings

def get_limiter_key(request: Request) -> str:
    """
    Rate limit key: the token subject when the request carries a readable
    bearer token, the client IP otherwise.
    """
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer ") and settings.SECRET_KEY:
        token = auth_header.split(" ")[1]
        try:
            # Expiry is checked by the auth dependency; here we only need the subject.
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM],
                options={"verify_exp": False, "verify_aud": False}
            )
            subject = payload.get("sub")
            if subject:
                return subject
        except jwt.PyJWTError:
            pass

    return get_remote_address(request)

# "memory://" by default, a redis:// URL shares counters between workers.
limiter = Limiter(key_func=get_limiter_key, storage_uri=settings.RATE_LIMITER_STORAGE_URL)
