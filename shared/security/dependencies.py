from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer

from shared.config.settings import ADMIN_ROLE
from .jwt_handler import verify_access_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Caller identity, passed explicitly into every service call."""
    user_id: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


async def get_request_context(request: Request, token: str = Depends(oauth2_scheme)) -> RequestContext:
    """Dependency to validate the JWT and build the caller's RequestContext."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    payload = verify_access_token(token)
    if payload is None:
        raise credentials_exception

    ctx = RequestContext(user_id=str(payload["sub"]), role=payload.get("role"))
    request.state.user_id = ctx.user_id
    structlog.contextvars.bind_contextvars(user_id=ctx.user_id)
    return ctx


async def require_admin(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """Dependency that lets only administrators through."""
    if not ctx.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return ctx
