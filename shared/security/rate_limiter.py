from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from shared.config.settings import RATE_LIMIT_ENABLED
from .jwt_handler import bearer_claims


def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Checkout limits apply per shopper, so a signed-in caller is keyed by
    their user id wherever they connect from; anonymous traffic by IP.
    """
    claims = bearer_claims(request.headers.get("Authorization"))
    if claims:
        return f"user:{claims['sub']}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=user_id_or_ip, enabled=RATE_LIMIT_ENABLED)
