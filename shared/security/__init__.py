from .jwt_handler import bearer_claims, create_access_token, verify_access_token
from .dependencies import RequestContext, get_request_context, require_admin
from .rate_limiter import limiter, user_id_or_ip

__all__ = [
    "create_access_token",
    "verify_access_token",
    "bearer_claims",
    "RequestContext",
    "get_request_context",
    "require_admin",
    "limiter",
    "user_id_or_ip"
]
