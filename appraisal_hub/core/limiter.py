from slowapi import Limiter
from slowapi.util import get_remote_address
from appraisal_hub.core.config import settings

# Applied per-route to the public token endpoints (appraisers are unauthenticated there)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.environment != "testing",
)

PUBLIC_LINK_LIMIT = f"{settings.rate_limit_per_minute}/minute"
